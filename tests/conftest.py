"""Shared test fixtures."""

from collections.abc import Sequence
from dataclasses import dataclass, field
from datetime import UTC, date, datetime
from decimal import Decimal
from uuid import UUID, uuid4

import pytest

from mess_ledger.config import Settings
from mess_ledger.containers import AppContainer
from mess_ledger.domain.models import MemberRecord, MemberRole
from mess_ledger.domain.records import (
    ApprovalStatus,
    ExpenseCategory,
    ExpenseRecord,
    MealRecord,
)
from mess_ledger.domain.reports import ReportPeriod
from mess_ledger.services.cache import InMemoryCache
from mess_ledger.services.membership import MembershipRepository, MembershipService
from mess_ledger.services.periods import PeriodResolver
from mess_ledger.services.reports import RecordRepository, ReportService


@dataclass
class FixedClock:
    """Clock returning a settable instant."""

    now: datetime = field(
        default_factory=lambda: datetime(2024, 3, 17, 15, 30, tzinfo=UTC)
    )

    def __call__(self) -> datetime:
        return self.now


@dataclass
class InMemoryMemberRepository(MembershipRepository):
    """In-memory member repository for tests."""

    members: dict[UUID, MemberRecord] = field(default_factory=dict)
    inactive: set[UUID] = field(default_factory=set)

    def add(
        self,
        name: str,
        role: MemberRole = MemberRole.MEMBER,
        created_by: UUID | None = None,
    ) -> MemberRecord:
        member = MemberRecord(
            id=uuid4(),
            name=name,
            role=role,
            email=f"{name.lower()}@example.com",
            created_by=created_by,
        )
        self.members[member.id] = member
        return member

    def get_member(self, member_id: UUID) -> MemberRecord | None:
        return self.members.get(member_id)

    def list_group_members(self, admin_id: UUID) -> list[MemberRecord]:
        return [
            member
            for member in self.members.values()
            if member.created_by == admin_id and member.id not in self.inactive
        ]


@dataclass
class InMemoryRecordRepository(RecordRepository):
    """In-memory record reader that filters like the database would."""

    meals: list[MealRecord] = field(default_factory=list)
    expenses: list[ExpenseRecord] = field(default_factory=list)
    calls: list[str] = field(default_factory=list)
    fail_with: Exception | None = None

    def list_meals(
        self, member_ids: Sequence[UUID], period: ReportPeriod
    ) -> list[MealRecord]:
        self.calls.append("meals")
        if self.fail_with is not None:
            raise self.fail_with
        return [
            meal
            for meal in self.meals
            if meal.member_id in member_ids and period.contains(meal.day)
        ]

    def list_expenses(
        self,
        member_ids: Sequence[UUID],
        period: ReportPeriod,
        category: ExpenseCategory,
    ) -> list[ExpenseRecord]:
        self.calls.append(f"expenses:{category.value}")
        if self.fail_with is not None:
            raise self.fail_with
        return [
            expense
            for expense in self.expenses
            if expense.member_id in member_ids
            and expense.category is category
            and period.contains(expense.day)
        ]


def meal(  # noqa: PLR0913
    member_id: UUID,
    day: date,
    *,
    breakfast: bool = False,
    lunch: bool = False,
    dinner: bool = False,
    guests: tuple[int, int, int] = (0, 0, 0),
    status: ApprovalStatus = ApprovalStatus.APPROVED,
) -> MealRecord:
    return MealRecord(
        member_id=member_id,
        day=day,
        breakfast=breakfast,
        lunch=lunch,
        dinner=dinner,
        guest_breakfast=guests[0],
        guest_lunch=guests[1],
        guest_dinner=guests[2],
        status=status,
    )


def expense(
    member_id: UUID,
    day: date,
    amount: str,
    category: ExpenseCategory = ExpenseCategory.CONSUMABLE,
    status: ApprovalStatus = ApprovalStatus.APPROVED,
) -> ExpenseRecord:
    return ExpenseRecord(
        member_id=member_id,
        day=day,
        category=category,
        total_amount=Decimal(amount),
        status=status,
    )


@pytest.fixture
def settings() -> Settings:
    return Settings(
        supabase_url="https://example.supabase.co",
        supabase_service_key="eyJhbGciOiJIUzI1NiJ9.eyJyb2xlIjoic2VydmljZSJ9.signature",
        admin_token="admin-token",
    )


@pytest.fixture
def clock() -> FixedClock:
    return FixedClock()


@pytest.fixture
def member_repository() -> InMemoryMemberRepository:
    return InMemoryMemberRepository()


@pytest.fixture
def record_repository() -> InMemoryRecordRepository:
    return InMemoryRecordRepository()


@pytest.fixture
def report_service(
    member_repository: InMemoryMemberRepository,
    record_repository: InMemoryRecordRepository,
    clock: FixedClock,
) -> ReportService:
    return ReportService(
        membership=MembershipService(member_repository),
        records=record_repository,
        resolver=PeriodResolver("UTC", clock=clock),
        cache=InMemoryCache(clock=clock),
    )


@pytest.fixture
def container(settings: Settings, report_service: ReportService) -> AppContainer:
    async def close_resources() -> None:
        report_service.clear_cache()

    return AppContainer(
        settings=settings,
        membership_service=report_service.membership,
        report_service=report_service,
        close_resources=close_resources,
    )
