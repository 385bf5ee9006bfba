"""Domain models for mess members and report scopes."""

from dataclasses import dataclass
from enum import StrEnum
from uuid import UUID


class MemberRole(StrEnum):
    """Role of a member account."""

    SUPER_ADMIN = "super_admin"
    ADMIN = "admin"
    MEMBER = "member"


@dataclass(frozen=True)
class MemberRecord:
    """Represents a member stored in the database."""

    id: UUID
    name: str
    role: MemberRole = MemberRole.MEMBER
    email: str | None = None
    created_by: UUID | None = None


@dataclass(frozen=True)
class GroupScope:
    """All members of one mess, the managing admin first."""

    members: tuple[MemberRecord, ...]

    @property
    def member_ids(self) -> tuple[UUID, ...]:
        return tuple(member.id for member in self.members)


@dataclass(frozen=True)
class SingleScope:
    """A single member viewed on their own."""

    member: MemberRecord

    @property
    def members(self) -> tuple[MemberRecord, ...]:
        return (self.member,)

    @property
    def member_ids(self) -> tuple[UUID, ...]:
        return (self.member.id,)


MemberScope = GroupScope | SingleScope
