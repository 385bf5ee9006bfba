"""Supabase repository for meal and bazar (expense) records."""

from collections.abc import Sequence
from dataclasses import dataclass
from datetime import date, datetime, tzinfo
from decimal import Decimal, InvalidOperation
from uuid import UUID

from supabase import Client

from mess_ledger.domain.records import (
    ApprovalStatus,
    ExpenseCategory,
    ExpenseItem,
    ExpenseRecord,
    MealRecord,
)
from mess_ledger.domain.reports import ReportPeriod
from mess_ledger.services.reports import RecordRepository

_MEAL_COLUMNS = (
    "user_id, date, breakfast, lunch, dinner, "
    "guest_breakfast, guest_lunch, guest_dinner, status"
)
_EXPENSE_COLUMNS = "user_id, date, type, total_amount, items, status, description"


@dataclass
class SupabaseRecordRepository(RecordRepository):
    """Supabase implementation of the record reader."""

    client: Client

    def list_meals(
        self, member_ids: Sequence[UUID], period: ReportPeriod
    ) -> list[MealRecord]:
        """Return meal rows of the members within the period."""
        if not member_ids:
            return []
        response = (
            self.client.table("meals")
            .select(_MEAL_COLUMNS)
            .in_("user_id", [str(member_id) for member_id in member_ids])
            .gte("date", period.start.isoformat())
            .lte("date", period.end.isoformat())
            .order("date", desc=False)
            .execute()
        )
        tz = period.start.tzinfo
        return [_parse_meal(row, tz) for row in response.data or []]

    def list_expenses(
        self,
        member_ids: Sequence[UUID],
        period: ReportPeriod,
        category: ExpenseCategory,
    ) -> list[ExpenseRecord]:
        """Return bazar rows of one category within the period."""
        if not member_ids:
            return []
        response = (
            self.client.table("bazar_entries")
            .select(_EXPENSE_COLUMNS)
            .in_("user_id", [str(member_id) for member_id in member_ids])
            .eq("type", category.storage_tag)
            .gte("date", period.start.isoformat())
            .lte("date", period.end.isoformat())
            .order("date", desc=False)
            .execute()
        )
        tz = period.start.tzinfo
        return [_parse_expense(row, tz) for row in response.data or []]


def _parse_meal(row: dict[str, object], tz: tzinfo | None) -> MealRecord:
    return MealRecord(
        member_id=_parse_member_id(row),
        day=_parse_day(row.get("date"), tz),
        breakfast=bool(row.get("breakfast")),
        lunch=bool(row.get("lunch")),
        dinner=bool(row.get("dinner")),
        guest_breakfast=int(row.get("guest_breakfast") or 0),
        guest_lunch=int(row.get("guest_lunch") or 0),
        guest_dinner=int(row.get("guest_dinner") or 0),
        status=_parse_status(row.get("status")),
    )


def _parse_expense(row: dict[str, object], tz: tzinfo | None) -> ExpenseRecord:
    raw_items = row.get("items")
    items = tuple(
        ExpenseItem(
            name=str(item.get("name", "")),
            quantity=str(item.get("quantity", "")),
            price=_parse_amount(item.get("price")),
        )
        for item in (raw_items if isinstance(raw_items, list) else [])
        if isinstance(item, dict)
    )
    description = row.get("description")
    return ExpenseRecord(
        member_id=_parse_member_id(row),
        day=_parse_day(row.get("date"), tz),
        category=ExpenseCategory.parse(str(row.get("type") or "meal")),
        total_amount=_parse_amount(row.get("total_amount")),
        items=items,
        status=_parse_status(row.get("status")),
        description=description if isinstance(description, str) else None,
    )


def _parse_member_id(row: dict[str, object]) -> UUID:
    raw = row.get("user_id")
    if not isinstance(raw, str) or not raw:
        raise RuntimeError("Record row is missing user_id")
    return UUID(raw)


def _parse_day(raw: object, tz: tzinfo | None) -> date:
    if not isinstance(raw, str) or not raw:
        raise RuntimeError("Record row is missing date")
    if len(raw) == len("YYYY-MM-DD"):
        return date.fromisoformat(raw)
    parsed = datetime.fromisoformat(raw)
    if parsed.tzinfo is not None and tz is not None:
        parsed = parsed.astimezone(tz)
    return parsed.date()


def _parse_amount(raw: object) -> Decimal:
    if raw is None:
        return Decimal(0)
    try:
        return Decimal(str(raw))
    except InvalidOperation as exc:
        raise RuntimeError(f"Invalid amount in record row: {raw!r}") from exc


def _parse_status(raw: object) -> ApprovalStatus:
    if isinstance(raw, str):
        try:
            return ApprovalStatus(raw)
        except ValueError:
            pass
    return ApprovalStatus.PENDING
