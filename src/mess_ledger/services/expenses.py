"""Expense contribution aggregation."""

from collections.abc import Iterable, Sequence
from dataclasses import replace
from uuid import UUID

from mess_ledger.domain.records import ApprovalStatus, ExpenseCategory, ExpenseRecord
from mess_ledger.domain.reports import ExpenseAggregate, ExpenseTally, ReportPeriod


def aggregate_expenses(
    period: ReportPeriod,
    member_ids: Sequence[UUID],
    records: Iterable[ExpenseRecord],
    category: ExpenseCategory,
    *,
    approved_only: bool = False,
) -> ExpenseAggregate:
    """Reduce expense records of one category into contributions.

    Records of any other category are skipped, so consumable and fixed
    costs never end up in the same sum. With ``approved_only`` only
    approved entries count towards ``total_contributed``; the per-status
    amounts are reported either way.
    """
    per_member = {member_id: ExpenseTally() for member_id in member_ids}
    total = ExpenseTally()
    for record in records:
        if record.category is not category:
            continue
        tally = per_member.get(record.member_id)
        if tally is None or not period.contains(record.day):
            continue
        per_member[record.member_id] = _add_record(tally, record, approved_only)
        total = _add_record(total, record, approved_only)
    return ExpenseAggregate(per_member=per_member, total=total)


def _add_record(
    tally: ExpenseTally, record: ExpenseRecord, approved_only: bool
) -> ExpenseTally:
    amount = record.total_amount
    if record.status is ApprovalStatus.APPROVED:
        tally = replace(tally, approved_amount=tally.approved_amount + amount)
    elif record.status is ApprovalStatus.REJECTED:
        tally = replace(tally, rejected_amount=tally.rejected_amount + amount)
    else:
        tally = replace(tally, pending_amount=tally.pending_amount + amount)
    if approved_only and record.status is not ApprovalStatus.APPROVED:
        return tally
    return replace(
        tally,
        total_contributed=tally.total_contributed + amount,
        entry_count=tally.entry_count + 1,
        item_count=tally.item_count + len(record.items),
    )
