"""Domain models for settlement reports."""

from dataclasses import dataclass, field
from datetime import date, datetime
from decimal import Decimal
from uuid import UUID

from mess_ledger.domain.models import MemberRecord

ZERO = Decimal(0)


@dataclass(frozen=True)
class ReportPeriod:
    """Closed interval covered by a report; both ends inclusive."""

    start: datetime
    end: datetime

    @property
    def start_day(self) -> date:
        return self.start.date()

    @property
    def end_day(self) -> date:
        return self.end.date()

    def contains(self, day: date) -> bool:
        """Return True when the calendar day falls inside the period."""
        return self.start_day <= day <= self.end_day


@dataclass(frozen=True)
class MealTally:
    """Meal consumption for one member, or for the whole group."""

    breakfast: int = 0
    lunch: int = 0
    dinner: int = 0
    meal_count: int = 0
    guest_meals: int = 0
    entry_count: int = 0
    approved_count: int = 0
    pending_count: int = 0
    rejected_count: int = 0
    last_meal_date: date | None = None


@dataclass(frozen=True)
class DailyMeals:
    """Slot totals for a single day."""

    day: date
    breakfast: int
    lunch: int
    dinner: int
    guest_meals: int

    @property
    def total(self) -> int:
        return self.breakfast + self.lunch + self.dinner


@dataclass
class MealAggregate:
    """Per-member and group meal tallies for a period."""

    per_member: dict[UUID, MealTally]
    total: MealTally
    daily: list[DailyMeals] = field(default_factory=list)


@dataclass(frozen=True)
class ExpenseTally:
    """Contributions of one member, or the group, to one expense category."""

    total_contributed: Decimal = ZERO
    entry_count: int = 0
    item_count: int = 0
    approved_amount: Decimal = ZERO
    pending_amount: Decimal = ZERO
    rejected_amount: Decimal = ZERO


@dataclass
class ExpenseAggregate:
    """Per-member and group contributions for a period and category."""

    per_member: dict[UUID, ExpenseTally]
    total: ExpenseTally


@dataclass(frozen=True)
class MemberReportLine:
    """Settlement figures for one member."""

    member: MemberRecord
    meals: MealTally
    consumable: ExpenseTally
    fixed: ExpenseTally
    meal_cost: Decimal
    meal_balance: Decimal
    flat_share: Decimal
    flat_settlement: Decimal

    @property
    def net_balance(self) -> Decimal:
        """Overall position; positive means the member is owed money."""
        return self.meal_balance + self.flat_settlement


@dataclass(frozen=True)
class GroupTotals:
    """Group-wide figures for a report."""

    total_meals: int
    total_guest_meals: int
    total_consumable_expense: Decimal
    total_fixed_expense: Decimal
    member_count: int
    meal_rate: Decimal
    flat_share: Decimal


@dataclass(frozen=True)
class MonthlyReport:
    """A settlement report over a period for an ordered set of members."""

    period: ReportPeriod
    totals: GroupTotals
    lines: tuple[MemberReportLine, ...]
    daily: tuple[DailyMeals, ...] = ()
