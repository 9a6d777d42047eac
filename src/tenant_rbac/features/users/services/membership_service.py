"""Membership (user role) management.

A user belongs to at most one company and holds exactly one role there.
Assignment is idempotent for an identical request; anything else that
would add a second row is rejected.
"""

import logging
from typing import TYPE_CHECKING, List, Optional
from uuid import UUID

from ....core.exceptions import (
    CompanyNotFoundError,
    ForbiddenError,
    MembershipConflictError,
    MembershipNotFoundError,
    MultipleRolesError,
    RecordNotFoundError,
    UniqueConstraintViolationError,
    UserNotFoundError,
)
from ...permissions.entities import Role
from ...tenants.entities import CompanyRepository
from ..entities import Membership, MembershipRepository, UserRepository

if TYPE_CHECKING:
    from ...permissions.services import RoleResolver


logger = logging.getLogger(__name__)


class MembershipService:
    """Creates, re-assigns and removes user memberships."""

    def __init__(
        self,
        membership_repository: MembershipRepository,
        user_repository: UserRepository,
        company_repository: CompanyRepository,
        role_resolver: "RoleResolver",
    ):
        self._memberships = membership_repository
        self._users = user_repository
        self._companies = company_repository
        self._roles = role_resolver

    async def get_membership(self, user_id: UUID) -> Optional[Membership]:
        """The user's only membership, or None.

        Raises:
            MembershipConflictError: more than one membership is stored
        """
        memberships = await self._memberships.find_by_user_id(user_id)
        if len(memberships) > 1:
            raise MembershipConflictError(user_id)
        return memberships[0] if memberships else None

    async def list_company_members(self, company_id: UUID) -> List[Membership]:
        return await self._memberships.find_by_company_id(company_id)

    async def assign_role(self, user_id: UUID, company_id: UUID, role_id: UUID) -> Membership:
        """Bind ``user_id`` to ``role_id`` inside ``company_id``.

        Returns the existing row when the same assignment already exists.

        Raises:
            UserNotFoundError, CompanyNotFoundError, RoleNotFoundError
            ForbiddenError: the role is not usable in the company
            MultipleRolesError: the user already holds another role there
            MembershipConflictError: the user belongs to another company
        """
        if await self._users.find_by_id(user_id) is None:
            raise UserNotFoundError(user_id)
        if await self._companies.find_by_id(company_id) is None:
            raise CompanyNotFoundError(company_id)
        await self._check_role_scope(role_id, company_id)

        existing = self._match_existing(
            await self._memberships.find_by_user_id(user_id), user_id, company_id, role_id
        )
        if existing:
            return existing

        try:
            membership = await self._memberships.create(
                Membership(id=None, user_id=user_id, company_id=company_id, role_id=role_id)
            )
        except UniqueConstraintViolationError:
            existing = self._match_existing(
                await self._memberships.find_by_user_id(user_id), user_id, company_id, role_id
            )
            if existing is None:
                raise
            return existing

        logger.info(f"Assigned role {role_id} to user {user_id} in company {company_id}")
        return membership

    async def reassign_role(self, user_id: UUID, company_id: UUID, role_id: UUID) -> Membership:
        """Replace the role of an existing membership; user and company stay fixed."""
        membership = await self._memberships.find_by_user_and_company(user_id, company_id)
        if membership is None:
            raise MembershipNotFoundError(user_id, company_id)
        if membership.role_id == role_id:
            return membership

        await self._check_role_scope(role_id, company_id)
        try:
            updated = await self._memberships.update_role(membership.id, role_id)
        except RecordNotFoundError:
            raise MembershipNotFoundError(user_id, company_id)

        logger.info(
            f"Reassigned user {user_id} in company {company_id} from role {membership.role_id} to {role_id}"
        )
        return updated

    async def remove_membership(self, user_id: UUID, company_id: UUID) -> Membership:
        membership = await self._memberships.find_by_user_and_company(user_id, company_id)
        if membership is None:
            raise MembershipNotFoundError(user_id, company_id)
        try:
            removed = await self._memberships.delete(membership.id)
        except RecordNotFoundError:
            raise MembershipNotFoundError(user_id, company_id)

        logger.info(f"Removed user {user_id} from company {company_id}")
        return removed

    async def _check_role_scope(self, role_id: UUID, company_id: UUID) -> Role:
        """A role is assignable if it is owned by the company or already usable there."""
        role = await self._roles.get_role(role_id)
        if role.company_id == company_id:
            return role
        if await self._roles.find_role_with_company_validation(role_id, company_id) is None:
            logger.warning(f"Role {role_id} refused for company {company_id}")
            raise ForbiddenError(
                f"Role {role_id} is not available in company {company_id}",
                details={"role_id": str(role_id), "company_id": str(company_id)},
            )
        return role

    @staticmethod
    def _match_existing(
        memberships: List[Membership],
        user_id: UUID,
        company_id: UUID,
        role_id: UUID,
    ) -> Optional[Membership]:
        """Apply the one-membership rules to rows already stored for the user."""
        for membership in memberships:
            if membership.company_id != company_id:
                raise MembershipConflictError(user_id, membership.company_id)
            if membership.role_id != role_id:
                raise MultipleRolesError(user_id, company_id)
            return membership
        return None
