"""Settlement calculation: meal rate, meal balances and the flat split."""

import logging
from collections.abc import Sequence
from decimal import ROUND_HALF_UP, Decimal

from mess_ledger.domain.models import MemberRecord
from mess_ledger.domain.reports import (
    ZERO,
    ExpenseAggregate,
    ExpenseTally,
    GroupTotals,
    MealAggregate,
    MealTally,
    MemberReportLine,
    MonthlyReport,
)

CENT = Decimal("0.01")

_logger = logging.getLogger(__name__)


def to_money(value: Decimal) -> Decimal:
    """Round a full-precision amount to cents for display."""
    rounded = value.quantize(CENT, rounding=ROUND_HALF_UP)
    return rounded if rounded != 0 else ZERO.quantize(CENT)


def meal_rate(total_meals: int, total_consumable: Decimal) -> Decimal:
    """Consumable spend per meal; zero when nobody ate."""
    if total_meals > 0:
        return total_consumable / Decimal(total_meals)
    return ZERO


def flat_share(total_fixed: Decimal, member_count: int) -> Decimal:
    """Equal share of fixed costs per member; zero for an empty group."""
    if member_count > 0:
        return total_fixed / Decimal(member_count)
    return ZERO


def calculate_settlement(
    members: Sequence[MemberRecord],
    meals: MealAggregate,
    consumable: ExpenseAggregate,
    fixed: ExpenseAggregate,
) -> tuple[GroupTotals, list[MemberReportLine]]:
    """Combine meal and expense aggregates into per-member settlement lines.

    Amounts stay at full ``Decimal`` precision here; rounding happens once,
    when the report is serialized. Negative counts or amounts are passed
    through untouched so that reviewers can see them.
    """
    member_count = len(members)
    total_meals = meals.total.meal_count
    rate = meal_rate(total_meals, consumable.total.total_contributed)
    share = flat_share(fixed.total.total_contributed, member_count)

    lines = []
    for member in members:
        member_meals = meals.per_member.get(member.id) or MealTally()
        member_consumable = consumable.per_member.get(member.id) or ExpenseTally()
        member_fixed = fixed.per_member.get(member.id) or ExpenseTally()
        cost = member_meals.meal_count * rate
        lines.append(
            MemberReportLine(
                member=member,
                meals=member_meals,
                consumable=member_consumable,
                fixed=member_fixed,
                meal_cost=cost,
                meal_balance=member_consumable.total_contributed - cost,
                flat_share=share,
                flat_settlement=member_fixed.total_contributed - share,
            )
        )

    _warn_on_anomalies(lines)
    totals = GroupTotals(
        total_meals=total_meals,
        total_guest_meals=meals.total.guest_meals,
        total_consumable_expense=consumable.total.total_contributed,
        total_fixed_expense=fixed.total.total_contributed,
        member_count=member_count,
        meal_rate=rate,
        flat_share=share,
    )
    return totals, lines


def check_conservation(report: MonthlyReport) -> bool:
    """Return True when balances and flat settlements each net to ~zero.

    The tolerance is one cent per member, measured on the rounded values
    a reader of the report would add up.
    """
    if not report.lines:
        return True
    tolerance = CENT * len(report.lines)
    balance_sum = sum((to_money(line.meal_balance) for line in report.lines), ZERO)
    flat_sum = sum((to_money(line.flat_settlement) for line in report.lines), ZERO)
    return abs(balance_sum) <= tolerance and abs(flat_sum) <= tolerance


def _warn_on_anomalies(lines: list[MemberReportLine]) -> None:
    offenders = [
        str(line.member.id)
        for line in lines
        if line.meals.meal_count < 0
        or line.consumable.total_contributed < 0
        or line.fixed.total_contributed < 0
    ]
    if offenders:
        _logger.warning(
            "Negative meal counts or contributions for members: %s",
            ", ".join(offenders),
        )
