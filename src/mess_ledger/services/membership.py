"""Membership resolution for report scopes."""

import logging
from dataclasses import dataclass
from typing import Protocol
from uuid import UUID

from mess_ledger.domain.models import (
    GroupScope,
    MemberRecord,
    MemberRole,
    MemberScope,
    SingleScope,
)
from mess_ledger.services.exceptions import MemberNotFoundError

_logger = logging.getLogger(__name__)


class MembershipRepository(Protocol):
    """Persistence interface for member lookups."""

    def get_member(self, member_id: UUID) -> MemberRecord | None:
        """Return the member with the given id, if present."""

    def list_group_members(self, admin_id: UUID) -> list[MemberRecord]:
        """Return active members created by the admin, in stable order."""


@dataclass
class MembershipService:
    """Resolves a requesting identity into the members a report covers."""

    repository: MembershipRepository

    def resolve_members(self, identity: UUID) -> MemberScope:
        """Return the group of the identity, or the identity alone.

        Admins see themselves plus the members they manage; members see
        their admin's group. Super admins and members without an admin
        get a single-member scope.
        """
        member = self.repository.get_member(identity)
        if member is None:
            raise MemberNotFoundError(identity)

        if member.role is MemberRole.ADMIN:
            admin = member
        elif member.role is MemberRole.MEMBER and member.created_by is not None:
            admin = self.repository.get_member(member.created_by)
            if admin is None:
                _logger.warning(
                    "Admin %s of member %s not found", member.created_by, member.id
                )
                return SingleScope(member)
        else:
            return SingleScope(member)

        members = [admin]
        for other in self.repository.list_group_members(admin.id):
            if other.id != admin.id:
                members.append(other)
        _logger.debug("Group scope for %s: %s members", identity, len(members))
        return GroupScope(tuple(members))
