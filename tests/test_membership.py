"""Tests for membership resolution."""

from uuid import uuid4

import pytest

from mess_ledger.domain.models import GroupScope, MemberRole, SingleScope
from mess_ledger.services.exceptions import MemberNotFoundError
from mess_ledger.services.membership import MembershipService
from tests.conftest import InMemoryMemberRepository


def test_admin_sees_admin_first_then_members(
    member_repository: InMemoryMemberRepository,
) -> None:
    admin = member_repository.add("Rahim", MemberRole.ADMIN)
    karim = member_repository.add("Karim", created_by=admin.id)
    salam = member_repository.add("Salam", created_by=admin.id)
    member_repository.add("Elsewhere", created_by=uuid4())

    scope = MembershipService(member_repository).resolve_members(admin.id)

    assert isinstance(scope, GroupScope)
    assert scope.member_ids == (admin.id, karim.id, salam.id)


def test_member_sees_their_admins_group(
    member_repository: InMemoryMemberRepository,
) -> None:
    admin = member_repository.add("Rahim", MemberRole.ADMIN)
    karim = member_repository.add("Karim", created_by=admin.id)
    salam = member_repository.add("Salam", created_by=admin.id)

    scope = MembershipService(member_repository).resolve_members(salam.id)

    assert isinstance(scope, GroupScope)
    assert scope.member_ids == (admin.id, karim.id, salam.id)


def test_inactive_members_are_left_out(
    member_repository: InMemoryMemberRepository,
) -> None:
    admin = member_repository.add("Rahim", MemberRole.ADMIN)
    gone = member_repository.add("Gone", created_by=admin.id)
    member_repository.inactive.add(gone.id)

    scope = MembershipService(member_repository).resolve_members(admin.id)

    assert scope.member_ids == (admin.id,)


@pytest.mark.parametrize("role", [MemberRole.SUPER_ADMIN, MemberRole.MEMBER])
def test_unaffiliated_identities_get_single_scope(
    member_repository: InMemoryMemberRepository, role: MemberRole
) -> None:
    loner = member_repository.add("Loner", role)

    scope = MembershipService(member_repository).resolve_members(loner.id)

    assert isinstance(scope, SingleScope)
    assert scope.members == (loner,)


def test_member_with_missing_admin_gets_single_scope(
    member_repository: InMemoryMemberRepository,
) -> None:
    orphan = member_repository.add("Orphan", created_by=uuid4())

    scope = MembershipService(member_repository).resolve_members(orphan.id)

    assert isinstance(scope, SingleScope)


def test_unknown_identity_raises(member_repository: InMemoryMemberRepository) -> None:
    with pytest.raises(MemberNotFoundError):
        MembershipService(member_repository).resolve_members(uuid4())
