"""Report assembly and the report generation service."""

import asyncio
import logging
from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field
from decimal import Decimal
from typing import Protocol
from uuid import UUID

from mess_ledger.domain.models import (
    GroupScope,
    MemberRecord,
    MemberScope,
    SingleScope,
)
from mess_ledger.domain.records import ExpenseCategory, ExpenseRecord, MealRecord
from mess_ledger.domain.reports import (
    DailyMeals,
    ExpenseTally,
    MealTally,
    MemberReportLine,
    MonthlyReport,
    ReportPeriod,
)
from mess_ledger.services.cache import Cache
from mess_ledger.services.expenses import aggregate_expenses
from mess_ledger.services.meals import aggregate_meals
from mess_ledger.services.membership import MembershipService
from mess_ledger.services.periods import DateInput, PeriodResolver
from mess_ledger.services.settlement import (
    calculate_settlement,
    check_conservation,
    to_money,
)

_logger = logging.getLogger(__name__)


class RecordRepository(Protocol):
    """Read-only access to meal and expense records."""

    def list_meals(
        self, member_ids: Sequence[UUID], period: ReportPeriod
    ) -> list[MealRecord]:
        """Return meal records of the members within the period."""

    def list_expenses(
        self,
        member_ids: Sequence[UUID],
        period: ReportPeriod,
        category: ExpenseCategory,
    ) -> list[ExpenseRecord]:
        """Return expense records of one category within the period."""


@dataclass(frozen=True)
class ReportOptions:
    """Policy switches for report computation."""

    count_guest_meals: bool = False
    approved_expenses_only: bool = False


def build_report(  # noqa: PLR0913
    period: ReportPeriod,
    members: MemberScope | Sequence[MemberRecord],
    meal_records: Iterable[MealRecord],
    consumable_expenses: Iterable[ExpenseRecord],
    fixed_expenses: Iterable[ExpenseRecord],
    options: ReportOptions | None = None,
) -> MonthlyReport:
    """Build the settlement report for already fetched records.

    Member lines keep the order of ``members``; nothing is re-sorted.
    """
    resolved_options = options or ReportOptions()
    ordered = tuple(
        members.members if isinstance(members, GroupScope | SingleScope) else members
    )
    member_ids = [member.id for member in ordered]

    meals = aggregate_meals(
        period,
        member_ids,
        meal_records,
        count_guests=resolved_options.count_guest_meals,
    )
    consumable = aggregate_expenses(
        period,
        member_ids,
        consumable_expenses,
        ExpenseCategory.CONSUMABLE,
        approved_only=resolved_options.approved_expenses_only,
    )
    fixed = aggregate_expenses(
        period,
        member_ids,
        fixed_expenses,
        ExpenseCategory.FIXED,
        approved_only=resolved_options.approved_expenses_only,
    )
    totals, lines = calculate_settlement(ordered, meals, consumable, fixed)
    return MonthlyReport(
        period=period, totals=totals, lines=tuple(lines), daily=tuple(meals.daily)
    )


@dataclass
class ReportService:
    """Resolves scope and period, fetches records and builds reports."""

    membership: MembershipService
    records: RecordRepository
    resolver: PeriodResolver
    cache: Cache
    options: ReportOptions = field(default_factory=ReportOptions)
    cache_ttl_seconds: int = 3600

    async def generate(  # noqa: PLR0913
        self,
        identity: UUID,
        *,
        start: DateInput = None,
        end: DateInput = None,
        month: int | None = None,
        year: int | None = None,
        default_to_current_month: bool = False,
    ) -> MonthlyReport:
        """Return the settlement report requested by ``identity``.

        The period is validated before any query runs. The meal query and
        both expense queries are issued concurrently; failures of any of
        them propagate as-is.
        """
        period = self.resolver.resolve(
            start,
            end,
            month=month,
            year=year,
            default_to_current_month=default_to_current_month,
        )
        cache_key = self._cache_key(identity, period)
        if cache_key is not None:
            cached = self.cache.get(cache_key)
            if isinstance(cached, MonthlyReport):
                _logger.debug("Report cache hit: %s", cache_key)
                return cached

        scope = await asyncio.to_thread(self.membership.resolve_members, identity)
        member_ids = list(scope.member_ids)
        meal_records, consumable, fixed = await asyncio.gather(
            asyncio.to_thread(self.records.list_meals, member_ids, period),
            asyncio.to_thread(
                self.records.list_expenses,
                member_ids,
                period,
                ExpenseCategory.CONSUMABLE,
            ),
            asyncio.to_thread(
                self.records.list_expenses, member_ids, period, ExpenseCategory.FIXED
            ),
        )
        report = build_report(
            period, scope, meal_records, consumable, fixed, self.options
        )
        _logger.info(
            "Report built: identity=%s members=%s meals=%s period=%s..%s",
            identity,
            report.totals.member_count,
            report.totals.total_meals,
            period.start_day.isoformat(),
            period.end_day.isoformat(),
        )
        if not check_conservation(report):
            _logger.warning(
                "Report for %s does not balance; check for negative records",
                identity,
            )
        if cache_key is not None:
            self.cache.set(cache_key, report, ttl_seconds=self.cache_ttl_seconds)
        return report

    def clear_cache(self, identity: UUID | None = None) -> int:
        """Drop cached reports, for one identity or all of them."""
        prefix = f"report:{identity}:" if identity is not None else "report:"
        return self.cache.invalidate(prefix)

    def _cache_key(self, identity: UUID, period: ReportPeriod) -> str | None:
        if self.cache_ttl_seconds <= 0 or not self.resolver.is_closed(period):
            return None
        return (
            f"report:{identity}:{period.start.isoformat()}:{period.end.isoformat()}"
        )


def serialize_report(report: MonthlyReport) -> dict[str, object]:
    """Return a JSON-ready representation of a report."""
    totals = report.totals
    return {
        "period": {
            "start": report.period.start.isoformat(),
            "end": report.period.end.isoformat(),
            "start_date": report.period.start_day.isoformat(),
            "end_date": report.period.end_day.isoformat(),
        },
        "summary": {
            "total_meals": totals.total_meals,
            "total_guest_meals": totals.total_guest_meals,
            "total_consumable_expense": _money(totals.total_consumable_expense),
            "total_fixed_expense": _money(totals.total_fixed_expense),
            "member_count": totals.member_count,
            "meal_rate": _money(totals.meal_rate),
            "flat_share": _money(totals.flat_share),
        },
        "members": [_serialize_line(line) for line in report.lines],
        "daily": [_serialize_day(day) for day in report.daily],
    }


def _serialize_line(line: MemberReportLine) -> dict[str, object]:
    return {
        "member": {
            "id": str(line.member.id),
            "name": line.member.name,
            "email": line.member.email,
        },
        "meals": _serialize_meals(line.meals),
        "consumable": _serialize_expenses(line.consumable),
        "fixed": _serialize_expenses(line.fixed),
        "financial": {
            "meal_cost": _money(line.meal_cost),
            "meal_balance": _money(line.meal_balance),
            "flat_share": _money(line.flat_share),
            "flat_settlement": _money(line.flat_settlement),
            "net_balance": _money(line.net_balance),
        },
    }


def _serialize_meals(tally: MealTally) -> dict[str, object]:
    return {
        "total": tally.meal_count,
        "breakfast": tally.breakfast,
        "lunch": tally.lunch,
        "dinner": tally.dinner,
        "guest_meals": tally.guest_meals,
        "entry_count": tally.entry_count,
        "approved_count": tally.approved_count,
        "pending_count": tally.pending_count,
        "rejected_count": tally.rejected_count,
        "last_meal_date": tally.last_meal_date.isoformat()
        if tally.last_meal_date
        else None,
    }


def _serialize_expenses(tally: ExpenseTally) -> dict[str, object]:
    return {
        "total_contributed": _money(tally.total_contributed),
        "entry_count": tally.entry_count,
        "item_count": tally.item_count,
        "approved_amount": _money(tally.approved_amount),
        "pending_amount": _money(tally.pending_amount),
        "rejected_amount": _money(tally.rejected_amount),
    }


def _serialize_day(day: DailyMeals) -> dict[str, object]:
    return {
        "date": day.day.isoformat(),
        "breakfast": day.breakfast,
        "lunch": day.lunch,
        "dinner": day.dinner,
        "guest_meals": day.guest_meals,
        "total": day.total,
    }


def _money(value: Decimal) -> str:
    return str(to_money(value))
