"""Domain models for meal and expense records."""

from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from enum import StrEnum
from uuid import UUID


class ApprovalStatus(StrEnum):
    """Review state shared by meal and expense records."""

    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"


class ExpenseCategory(StrEnum):
    """Expense category; consumables feed the meal rate, fixed costs split evenly."""

    CONSUMABLE = "consumable"
    FIXED = "fixed"

    @classmethod
    def parse(cls, raw: str) -> "ExpenseCategory":
        """Parse a stored category tag, accepting the legacy meal/flat names."""
        value = raw.strip().lower()
        if value == "meal":
            return cls.CONSUMABLE
        if value == "flat":
            return cls.FIXED
        return cls(value)

    @property
    def storage_tag(self) -> str:
        """Return the tag used by the bazar_entries table."""
        return "meal" if self is ExpenseCategory.CONSUMABLE else "flat"


@dataclass(frozen=True)
class MealRecord:
    """Meals a member took on one day."""

    member_id: UUID
    day: date
    breakfast: bool = False
    lunch: bool = False
    dinner: bool = False
    guest_breakfast: int = 0
    guest_lunch: int = 0
    guest_dinner: int = 0
    status: ApprovalStatus = ApprovalStatus.PENDING

    @property
    def slot_count(self) -> int:
        """Number of member meal slots taken."""
        return int(self.breakfast) + int(self.lunch) + int(self.dinner)

    @property
    def guest_count(self) -> int:
        """Number of guest meals across all slots."""
        return self.guest_breakfast + self.guest_lunch + self.guest_dinner


@dataclass(frozen=True)
class ExpenseItem:
    """Line item on a purchase; informational only."""

    name: str
    quantity: str
    price: Decimal


@dataclass(frozen=True)
class ExpenseRecord:
    """A shared purchase paid by one member."""

    member_id: UUID
    day: date
    category: ExpenseCategory
    total_amount: Decimal
    items: tuple[ExpenseItem, ...] = ()
    status: ApprovalStatus = ApprovalStatus.PENDING
    description: str | None = None
