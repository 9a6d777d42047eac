"""Tests for membership management."""

import pytest
from uuid import uuid4
from unittest.mock import AsyncMock

from tenant_rbac.core.exceptions import (
    CompanyNotFoundError,
    ConflictError,
    ForbiddenError,
    MembershipConflictError,
    MembershipNotFoundError,
    MultipleRolesError,
    RoleNotFoundError,
    UniqueConstraintViolationError,
    UserNotFoundError,
    ValidationError,
)
from tenant_rbac.features.users import Membership, MembershipService


class TestAssignRole:
    """Creating memberships."""

    @pytest.mark.asyncio
    async def test_assign_system_role(self, membership_service, system_roles, acme, alice):
        membership = await membership_service.assign_role(alice.id, acme.id, system_roles["USER"].id)

        assert membership.id is not None
        assert (membership.user_id, membership.company_id) == (alice.id, acme.id)
        assert membership.role_id == system_roles["USER"].id

    @pytest.mark.asyncio
    async def test_assign_own_custom_role(self, membership_service, store, acme, alice):
        supervisor = store.add_role("SUPERVISOR", acme)

        membership = await membership_service.assign_role(alice.id, acme.id, supervisor.id)

        assert membership.role_id == supervisor.id

    @pytest.mark.asyncio
    async def test_foreign_custom_role_is_forbidden(self, membership_service, store, acme, globex, alice):
        auditor = store.add_role("AUDITOR", globex)

        with pytest.raises(ForbiddenError):
            await membership_service.assign_role(alice.id, acme.id, auditor.id)

    @pytest.mark.asyncio
    async def test_identical_assignment_is_idempotent(self, membership_service, store, system_roles, acme, alice):
        role_id = system_roles["USER"].id

        first = await membership_service.assign_role(alice.id, acme.id, role_id)
        second = await membership_service.assign_role(alice.id, acme.id, role_id)

        assert first.id == second.id
        assert len(await store.memberships.find_by_user_id(alice.id)) == 1

    @pytest.mark.asyncio
    async def test_second_role_in_same_company(self, membership_service, system_roles, acme, alice):
        await membership_service.assign_role(alice.id, acme.id, system_roles["USER"].id)

        with pytest.raises(MultipleRolesError) as exc_info:
            await membership_service.assign_role(alice.id, acme.id, system_roles["MANAGER"].id)

        assert isinstance(exc_info.value, ValidationError)

    @pytest.mark.asyncio
    async def test_second_company_is_a_conflict(self, membership_service, store, system_roles, acme, globex, alice):
        await membership_service.assign_role(alice.id, acme.id, system_roles["USER"].id)

        with pytest.raises(MembershipConflictError) as exc_info:
            await membership_service.assign_role(alice.id, globex.id, system_roles["USER"].id)

        assert isinstance(exc_info.value, ConflictError)
        assert len(await store.memberships.find_by_user_id(alice.id)) == 1

    @pytest.mark.asyncio
    async def test_unknown_user(self, membership_service, system_roles, acme):
        with pytest.raises(UserNotFoundError):
            await membership_service.assign_role(uuid4(), acme.id, system_roles["USER"].id)

    @pytest.mark.asyncio
    async def test_unknown_company(self, membership_service, system_roles, alice):
        with pytest.raises(CompanyNotFoundError):
            await membership_service.assign_role(alice.id, uuid4(), system_roles["USER"].id)

    @pytest.mark.asyncio
    async def test_unknown_role(self, membership_service, acme, alice):
        with pytest.raises(RoleNotFoundError):
            await membership_service.assign_role(alice.id, acme.id, uuid4())

    @pytest.mark.asyncio
    async def test_concurrent_identical_create_returns_existing(self, store, role_resolver, system_roles, acme, alice):
        role_id = system_roles["USER"].id
        winner = Membership(id=uuid4(), user_id=alice.id, company_id=acme.id, role_id=role_id)
        memberships = AsyncMock()
        memberships.find_by_user_id.side_effect = [[], [winner]]
        memberships.create.side_effect = UniqueConstraintViolationError("user_roles")
        service = MembershipService(memberships, store.users, store.companies, role_resolver)

        assert await service.assign_role(alice.id, acme.id, role_id) is winner

    @pytest.mark.asyncio
    async def test_concurrent_different_role_is_rejected(self, store, role_resolver, system_roles, acme, alice):
        winner = Membership(id=uuid4(), user_id=alice.id, company_id=acme.id, role_id=system_roles["ADMIN"].id)
        memberships = AsyncMock()
        memberships.find_by_user_id.side_effect = [[], [winner]]
        memberships.create.side_effect = UniqueConstraintViolationError("user_roles")
        service = MembershipService(memberships, store.users, store.companies, role_resolver)

        with pytest.raises(MultipleRolesError):
            await service.assign_role(alice.id, acme.id, system_roles["USER"].id)


class TestReassignAndRemove:
    """Membership state transitions after creation."""

    @pytest.mark.asyncio
    async def test_reassign_overwrites_role_only(self, membership_service, store, system_roles, acme, alice):
        original = store.add_membership(alice, acme, system_roles["USER"])

        updated = await membership_service.reassign_role(alice.id, acme.id, system_roles["MANAGER"].id)

        assert updated.id == original.id
        assert (updated.user_id, updated.company_id) == (alice.id, acme.id)
        assert updated.role_id == system_roles["MANAGER"].id

    @pytest.mark.asyncio
    async def test_reassign_to_same_role_is_a_no_op(self, membership_service, store, system_roles, acme, alice):
        original = store.add_membership(alice, acme, system_roles["USER"])

        updated = await membership_service.reassign_role(alice.id, acme.id, system_roles["USER"].id)

        assert updated.id == original.id

    @pytest.mark.asyncio
    async def test_reassign_without_membership(self, membership_service, system_roles, acme, alice):
        with pytest.raises(MembershipNotFoundError):
            await membership_service.reassign_role(alice.id, acme.id, system_roles["MANAGER"].id)

    @pytest.mark.asyncio
    async def test_reassign_to_foreign_role(self, membership_service, store, system_roles, acme, globex, alice):
        store.add_membership(alice, acme, system_roles["USER"])
        auditor = store.add_role("AUDITOR", globex)

        with pytest.raises(ForbiddenError):
            await membership_service.reassign_role(alice.id, acme.id, auditor.id)

    @pytest.mark.asyncio
    async def test_remove_membership(self, membership_service, store, system_roles, acme, alice):
        store.add_membership(alice, acme, system_roles["USER"])

        removed = await membership_service.remove_membership(alice.id, acme.id)

        assert removed.user_id == alice.id
        assert await membership_service.get_membership(alice.id) is None

    @pytest.mark.asyncio
    async def test_remove_then_join_another_company(self, membership_service, store, system_roles, acme, globex, alice):
        store.add_membership(alice, acme, system_roles["USER"])

        await membership_service.remove_membership(alice.id, acme.id)
        membership = await membership_service.assign_role(alice.id, globex.id, system_roles["USER"].id)

        assert membership.company_id == globex.id

    @pytest.mark.asyncio
    async def test_remove_missing_membership(self, membership_service, acme, alice):
        with pytest.raises(MembershipNotFoundError):
            await membership_service.remove_membership(alice.id, acme.id)


class TestMembershipQueries:
    """Membership reads."""

    @pytest.mark.asyncio
    async def test_get_membership(self, membership_service, store, system_roles, acme, alice, bob):
        membership = store.add_membership(alice, acme, system_roles["USER"])

        assert (await membership_service.get_membership(alice.id)).id == membership.id
        assert await membership_service.get_membership(bob.id) is None

    @pytest.mark.asyncio
    async def test_get_membership_rejects_duplicates(self, membership_service, store, system_roles, acme, globex, alice):
        store.add_membership(alice, acme, system_roles["USER"])
        store.add_membership(alice, globex, system_roles["USER"])

        with pytest.raises(MembershipConflictError):
            await membership_service.get_membership(alice.id)

    @pytest.mark.asyncio
    async def test_list_company_members(self, membership_service, store, system_roles, acme, globex, alice, bob):
        store.add_membership(alice, acme, system_roles["ADMIN"])
        store.add_membership(bob, globex, system_roles["USER"])

        members = await membership_service.list_company_members(acme.id)

        assert [m.user_id for m in members] == [alice.id]
