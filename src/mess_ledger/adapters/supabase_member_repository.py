"""Supabase-backed member repository."""

from dataclasses import dataclass
from uuid import UUID

from supabase import Client

from mess_ledger.domain.models import MemberRecord, MemberRole
from mess_ledger.services.membership import MembershipRepository

_MEMBER_COLUMNS = "id, name, email, role, created_by"


@dataclass
class SupabaseMemberRepository(MembershipRepository):
    """Supabase implementation for member lookups."""

    client: Client

    def get_member(self, member_id: UUID) -> MemberRecord | None:
        """Return the member with the given id, if present."""
        response = (
            self.client.table("users")
            .select(_MEMBER_COLUMNS)
            .eq("id", str(member_id))
            .limit(1)
            .execute()
        )
        if response.data:
            return _parse_member(response.data[0])
        return None

    def list_group_members(self, admin_id: UUID) -> list[MemberRecord]:
        """Return active members created by the admin, oldest first."""
        response = (
            self.client.table("users")
            .select(_MEMBER_COLUMNS)
            .eq("created_by", str(admin_id))
            .eq("status", "active")
            .order("created_at", desc=False)
            .execute()
        )
        return [_parse_member(row) for row in response.data or []]


def _parse_member(row: dict[str, object]) -> MemberRecord:
    created_by = row.get("created_by")
    email = row.get("email")
    return MemberRecord(
        id=UUID(str(row["id"])),
        name=str(row.get("name") or ""),
        role=_parse_role(row.get("role")),
        email=email if isinstance(email, str) else None,
        created_by=(
            UUID(created_by) if isinstance(created_by, str) and created_by else None
        ),
    )


def _parse_role(raw: object) -> MemberRole:
    if isinstance(raw, str):
        try:
            return MemberRole(raw)
        except ValueError:
            pass
    return MemberRole.MEMBER
