"""Top-level access decisions.

Composes tenant, role and permission resolution into allow/deny answers.
``is_system_admin`` callers bypass tenant scoping everywhere; it is
supplied by the caller, or derived from a membership by
:meth:`AccessGuard.resolve_access_context`.
"""

import logging
from typing import List
from uuid import UUID

from ....config.constants import SYSTEM_ADMIN_ROLE, DenyReason, is_system_role_name
from ....core.exceptions import (
    ForbiddenError,
    MembershipConflictError,
    NoRoleInCompanyError,
)
from ...permissions.entities import Role
from ...permissions.services import PermissionResolver, RoleResolver
from ...tenants.entities import Company, CompanyRepository
from ...tenants.services import TenantResolver
from ...users.entities import MembershipRepository
from ..entities import AccessContext, AccessDecision


logger = logging.getLogger(__name__)


class AccessGuard:
    """Membership, tenant-scope and permission checks for one request."""

    def __init__(
        self,
        tenant_resolver: TenantResolver,
        role_resolver: RoleResolver,
        permission_resolver: PermissionResolver,
        membership_repository: MembershipRepository,
        company_repository: CompanyRepository,
    ):
        self._tenants = tenant_resolver
        self._roles = role_resolver
        self._permissions = permission_resolver
        self._memberships = membership_repository
        self._companies = company_repository

    # Membership checks

    async def can_user_access_company(self, company_id: UUID, user_id: UUID, is_system_admin: bool = False) -> bool:
        """System admins always pass; anyone else needs a membership in the company."""
        if is_system_admin:
            return True
        membership = await self._memberships.find_by_user_and_company(user_id, company_id)
        return membership is not None

    async def get_companies_by_user(self, user_id: UUID, is_system_admin: bool = False) -> List[Company]:
        """Every company for a system admin, else the user's single company (or none)."""
        if is_system_admin:
            return await self._companies.find_all()

        memberships = await self._memberships.find_by_user_id(user_id)
        if not memberships:
            return []
        if len(memberships) > 1:
            raise MembershipConflictError(user_id)

        company = await self._companies.find_by_id(memberships[0].company_id)
        return [company] if company is not None else []

    async def require_company_access(self, company_id: UUID, user_id: UUID, is_system_admin: bool = False) -> None:
        if not await self.can_user_access_company(company_id, user_id, is_system_admin):
            logger.warning(f"User {user_id} denied access to company {company_id}")
            raise ForbiddenError(
                "Access to company denied",
                details={"user_id": str(user_id), "company_id": str(company_id)},
            )

    # Authorization

    async def authorize(
        self,
        user_id: UUID,
        company_id: UUID,
        required_permission: str,
        is_system_admin: bool = False,
    ) -> AccessDecision:
        """Decide whether ``user_id`` holds ``required_permission`` in ``company_id``.

        Unknown companies are denied for everyone. Inactive companies are a
        hard deny except for system admins, who are always allowed. The
        resolved role and permission names are attached to the decision.
        """
        company = await self._companies.find_by_id(company_id)
        if company is None:
            return AccessDecision.deny(DenyReason.COMPANY_NOT_FOUND)
        if not company.is_active and not is_system_admin:
            return AccessDecision.deny(DenyReason.COMPANY_INACTIVE)

        membership = await self._memberships.find_by_user_and_company(user_id, company_id)
        if membership is None:
            if is_system_admin:
                return AccessDecision.allow()
            return AccessDecision.deny(DenyReason.NO_MEMBERSHIP)

        role = await self._roles.find_role_with_company_validation(membership.role_id, company_id)
        if role is None:
            if is_system_admin:
                return AccessDecision.allow()
            logger.warning(f"Role {membership.role_id} of user {user_id} is out of scope for company {company_id}")
            return AccessDecision.deny(DenyReason.ROLE_OUT_OF_SCOPE)

        permissions = await self._permissions.resolve_permission_names(role.id)
        if is_system_admin or required_permission in permissions:
            return AccessDecision.allow(role, permissions)
        return AccessDecision.deny(DenyReason.MISSING_PERMISSION, role, permissions)

    async def require_permission(
        self,
        user_id: UUID,
        company_id: UUID,
        required_permission: str,
        is_system_admin: bool = False,
    ) -> AccessDecision:
        """Like :meth:`authorize` but raises ``ForbiddenError`` on deny."""
        decision = await self.authorize(user_id, company_id, required_permission, is_system_admin)
        if not decision.allowed:
            logger.warning(
                f"User {user_id} denied '{required_permission}' in company {company_id}: {decision.reason.value}"
            )
            raise ForbiddenError(
                f"Permission '{required_permission}' denied",
                details={
                    "user_id": str(user_id),
                    "company_id": str(company_id),
                    "permission": required_permission,
                    "reason": decision.reason.value,
                },
            )
        return decision

    async def resolve_access_context(self, user_id: UUID, company_id: UUID) -> AccessContext:
        """Resolve the user's role and permissions in a company.

        The user counts as a system admin when that role is the system
        ``ADMIN`` role.

        Raises:
            NoRoleInCompanyError: the user has no membership in the company
        """
        membership = await self._memberships.find_by_user_and_company(user_id, company_id)
        if membership is None:
            raise NoRoleInCompanyError(user_id, company_id)

        role = await self._roles.get_role(membership.role_id)
        permissions = await self._permissions.resolve_permission_names(role.id)
        return AccessContext(
            user_id=user_id,
            company_id=company_id,
            role=role,
            permissions=permissions,
            is_system_admin=role.is_system_scoped and role.name == SYSTEM_ADMIN_ROLE,
        )

    # Resource scoping

    async def validate_role_access(self, role_id: UUID, company_id: UUID, is_system_admin: bool = False) -> Role:
        """Return the role if the caller's company may see it."""
        if is_system_admin:
            return await self._roles.get_role(role_id)

        role = await self._roles.find_role_with_company_validation(role_id, company_id)
        if role is None:
            raise ForbiddenError(
                "Role not found or access denied",
                details={"role_id": str(role_id), "company_id": str(company_id)},
            )
        return role

    async def ensure_role_modifiable(self, role_id: UUID, is_system_admin: bool = False) -> None:
        """Only system admins may modify system roles."""
        if is_system_admin:
            return
        if await self._roles.is_system_role(role_id):
            raise ForbiddenError("Cannot modify system roles", details={"role_id": str(role_id)})

    def validate_role_creation(self, name: str, is_system_admin: bool = False) -> None:
        """Only system admins may create roles with a reserved name."""
        if is_system_admin:
            return
        role_name = (name or "").strip()
        if is_system_role_name(role_name):
            raise ForbiddenError("Cannot create system roles", details={"name": role_name})

    async def validate_domain_access(self, domain_id: UUID, company_id: UUID, is_system_admin: bool = False) -> None:
        """The domain must belong to the caller's company and that company must be active.

        A domain linked to more than one company raises ``ConflictError``.
        """
        if is_system_admin:
            return

        company = await self._tenants.find_company_for_domain(domain_id)
        if company is None:
            raise ForbiddenError("Domain not found or access denied", details={"domain_id": str(domain_id)})
        if not company.is_active or company.id != company_id:
            raise ForbiddenError(
                "Access to domain denied",
                details={"domain_id": str(domain_id), "company_id": str(company_id)},
            )

    async def validate_role_permission_assignment(
        self,
        role_id: UUID,
        permission_id: UUID,
        company_id: UUID,
        is_system_admin: bool = False,
    ) -> Role:
        """Check that a permission may be granted to or revoked from a role.

        The permission must exist and the role must be usable in the
        company; non-admins may not touch system roles.
        """
        if await self._permissions.find_permission(permission_id) is None:
            raise ForbiddenError("Permission not found", details={"permission_id": str(permission_id)})

        role = await self._roles.find_role_with_company_validation(role_id, company_id)
        if role is None:
            raise ForbiddenError(
                "Role not found or access denied",
                details={"role_id": str(role_id), "company_id": str(company_id)},
            )
        if not is_system_admin and role.has_system_name:
            raise ForbiddenError(
                "Cannot assign permissions to system roles",
                details={"role_id": str(role_id)},
            )
        return role
