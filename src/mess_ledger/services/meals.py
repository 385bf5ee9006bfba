"""Meal consumption aggregation."""

from collections.abc import Iterable, Sequence
from dataclasses import replace
from datetime import date
from uuid import UUID

from mess_ledger.domain.records import ApprovalStatus, MealRecord
from mess_ledger.domain.reports import (
    DailyMeals,
    MealAggregate,
    MealTally,
    ReportPeriod,
)


def aggregate_meals(
    period: ReportPeriod,
    member_ids: Sequence[UUID],
    records: Iterable[MealRecord],
    *,
    count_guests: bool = False,
) -> MealAggregate:
    """Reduce meal records into per-member and group consumption.

    Approval state does not gate consumption: a pending or rejected entry
    still counts towards ``meal_count``. Guest meals are always tallied in
    ``guest_meals`` but only folded into ``meal_count`` when
    ``count_guests`` is set.
    """
    per_member = {member_id: MealTally() for member_id in member_ids}
    total = MealTally()
    daily: dict[date, DailyMeals] = {}
    for record in records:
        tally = per_member.get(record.member_id)
        if tally is None or not period.contains(record.day):
            continue
        per_member[record.member_id] = _add_record(tally, record, count_guests)
        total = _add_record(total, record, count_guests)
        daily[record.day] = _add_day(daily.get(record.day), record)
    return MealAggregate(
        per_member=per_member,
        total=total,
        daily=[daily[day] for day in sorted(daily)],
    )


def _add_record(
    tally: MealTally, record: MealRecord, count_guests: bool
) -> MealTally:
    meal_count = tally.meal_count + record.slot_count
    if count_guests:
        meal_count += record.guest_count
    last_meal_date = tally.last_meal_date
    if record.slot_count > 0 and (
        last_meal_date is None or record.day > last_meal_date
    ):
        last_meal_date = record.day
    approved, pending, rejected = (
        tally.approved_count,
        tally.pending_count,
        tally.rejected_count,
    )
    if record.status is ApprovalStatus.APPROVED:
        approved += 1
    elif record.status is ApprovalStatus.REJECTED:
        rejected += 1
    else:
        pending += 1
    return replace(
        tally,
        breakfast=tally.breakfast + int(record.breakfast),
        lunch=tally.lunch + int(record.lunch),
        dinner=tally.dinner + int(record.dinner),
        meal_count=meal_count,
        guest_meals=tally.guest_meals + record.guest_count,
        entry_count=tally.entry_count + 1,
        approved_count=approved,
        pending_count=pending,
        rejected_count=rejected,
        last_meal_date=last_meal_date,
    )


def _add_day(current: DailyMeals | None, record: MealRecord) -> DailyMeals:
    if current is None:
        current = DailyMeals(
            day=record.day, breakfast=0, lunch=0, dinner=0, guest_meals=0
        )
    return DailyMeals(
        day=current.day,
        breakfast=current.breakfast + int(record.breakfast),
        lunch=current.lunch + int(record.lunch),
        dinner=current.dinner + int(record.dinner),
        guest_meals=current.guest_meals + record.guest_count,
    )
