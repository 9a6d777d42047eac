"""Role resolution and management.

System roles have no owning company and carry one of the reserved names
(ADMIN, MANAGER, USER). Custom roles belong to exactly one company and may
never reuse a reserved name.
"""

import logging
from typing import List, Optional
from uuid import UUID

from ....config.constants import SystemRole, is_system_role_name
from ....core.exceptions import (
    CompanyNotFoundError,
    MembershipConflictError,
    RecordNotFoundError,
    ReservedRoleNameError,
    RoleAlreadyExistsError,
    RoleInUseError,
    RoleNotFoundError,
    UniqueConstraintViolationError,
    ValidationError,
)
from ...tenants.entities import CompanyRepository
from ...users.entities import MembershipRepository
from ..entities import PermissionCache, Role, RoleRepository


logger = logging.getLogger(__name__)


class RoleResolver:
    """Determines which roles exist and which are visible to a company or user.

    Pass the same :class:`PermissionCache` the ``PermissionResolver`` uses so
    that deleting a role drops its cached permission names.
    """

    def __init__(
        self,
        role_repository: RoleRepository,
        membership_repository: MembershipRepository,
        company_repository: CompanyRepository,
        cache: Optional[PermissionCache] = None,
    ):
        self._roles = role_repository
        self._memberships = membership_repository
        self._companies = company_repository
        self._cache = cache

    # Queries

    async def find_system_roles(self) -> List[Role]:
        """Roles with no owning company and a reserved name."""
        roles = await self._roles.find_by_company(None)
        return [role for role in roles if role.has_system_name]

    async def find_custom_roles_by_company(self, company_id: UUID) -> List[Role]:
        """Roles owned by ``company_id``.

        Reserved names are filtered out even if one was stored with a company id.
        """
        roles = await self._roles.find_by_company(company_id)
        return [role for role in roles if not role.has_system_name]

    async def find_all_roles_for_company(self, company_id: UUID) -> List[Role]:
        """System roles followed by the company's custom roles."""
        system_roles = await self.find_system_roles()
        custom_roles = await self.find_custom_roles_by_company(company_id)
        return system_roles + custom_roles

    async def find_available_roles_for_user(self, user_id: UUID) -> List[Role]:
        """Roles a user may be assigned.

        Without a membership only system roles are available; with one, every
        role that is system scoped or owned by the membership's company.

        Raises:
            MembershipConflictError: the store holds more than one membership
                for the user
        """
        memberships = await self._memberships.find_by_user_id(user_id)
        if not memberships:
            return await self.find_system_roles()
        if len(memberships) > 1:
            logger.error(f"User {user_id} has {len(memberships)} memberships; expected at most one")
            raise MembershipConflictError(user_id)
        return await self._roles.find_visible_to_company(memberships[0].company_id)

    async def is_system_role(self, role_id: UUID) -> bool:
        """True iff the role exists and has a reserved name, whatever its company id."""
        role = await self._roles.find_by_id(role_id)
        return role is not None and role.has_system_name

    async def find_role_with_company_validation(self, role_id: UUID, company_id: UUID) -> Optional[Role]:
        """Return the role if ``company_id`` may use it, else None.

        System roles are returned unconditionally. A custom role is returned
        only when a membership binds it to ``company_id``.
        """
        role = await self._roles.find_by_id(role_id)
        if role is None:
            return None
        if role.has_system_name:
            return role
        if await self._memberships.exists_for_role_in_company(role_id, company_id):
            return role
        logger.debug(f"Role {role_id} is not bound to company {company_id}")
        return None

    async def find_by_name(self, name: str, company_id: Optional[UUID] = None) -> Optional[Role]:
        """Scope-exact lookup; ``company_id=None`` only matches system-scoped rows."""
        return await self._roles.find_by_name(self._validate_name(name), company_id)

    async def get_role(self, role_id: UUID) -> Role:
        role = await self._roles.find_by_id(role_id)
        if role is None:
            raise RoleNotFoundError(role_id)
        return role

    # Commands

    async def create_custom_role(
        self,
        name: str,
        company_id: UUID,
        description: Optional[str] = None,
    ) -> Role:
        """Create a role owned by ``company_id``.

        Raises:
            ValidationError: the name is blank
            ReservedRoleNameError: the name is a system role name
            CompanyNotFoundError: the company does not exist
            RoleAlreadyExistsError: the name is taken in that company
        """
        name = self._validate_name(name)
        if is_system_role_name(name):
            raise ReservedRoleNameError(name)

        if await self._companies.find_by_id(company_id) is None:
            raise CompanyNotFoundError(company_id)
        if await self._roles.find_by_name(name, company_id) is not None:
            raise RoleAlreadyExistsError(name, company_id)

        try:
            role = await self._roles.create(Role(id=None, name=name, description=description, company_id=company_id))
        except UniqueConstraintViolationError:
            raise RoleAlreadyExistsError(name, company_id)

        logger.info(f"Created custom role {role.name} ({role.id}) for company {company_id}")
        return role

    async def get_or_create_role(
        self,
        name: str,
        company_id: Optional[UUID] = None,
        description: Optional[str] = None,
    ) -> Role:
        """Find-or-create; an existing row is returned untouched."""
        name = self._validate_name(name)
        if company_id is not None and is_system_role_name(name):
            raise ReservedRoleNameError(name)

        existing = await self._roles.find_by_name(name, company_id)
        if existing is not None:
            return existing

        try:
            role = await self._roles.create(Role(id=None, name=name, description=description, company_id=company_id))
        except UniqueConstraintViolationError:
            existing = await self._roles.find_by_name(name, company_id)
            if existing is None:
                raise
            return existing

        logger.info(f"Created role {role.name} ({role.id})")
        return role

    async def ensure_system_roles(self) -> List[Role]:
        """Seed ADMIN, MANAGER and USER without touching existing rows."""
        return [await self.get_or_create_role(role.value) for role in SystemRole]

    async def update_role(
        self,
        role_id: UUID,
        name: Optional[str] = None,
        description: Optional[str] = None,
    ) -> Role:
        role = await self.get_role(role_id)

        if name is not None:
            name = self._validate_name(name)
            if name != role.name:
                if role.has_system_name:
                    raise ValidationError(
                        f"System role {role.name} cannot be renamed",
                        details={"role_id": str(role_id)},
                    )
                if is_system_role_name(name):
                    raise ReservedRoleNameError(name)
                if await self._roles.find_by_name(name, role.company_id) is not None:
                    raise RoleAlreadyExistsError(name, role.company_id)
                role.name = name

        if description is not None:
            role.description = description

        try:
            return await self._roles.update(role)
        except UniqueConstraintViolationError:
            raise RoleAlreadyExistsError(role.name, role.company_id)
        except RecordNotFoundError:
            raise RoleNotFoundError(role_id)

    async def delete_role(self, role_id: UUID) -> Role:
        """Delete a role no membership references.

        Raises:
            RoleNotFoundError: no such role
            RoleInUseError: at least one membership still uses it
        """
        await self.get_role(role_id)

        assignments = await self._memberships.find_by_role_id(role_id)
        if assignments:
            raise RoleInUseError(role_id, len(assignments))

        try:
            role = await self._roles.delete(role_id)
        except RecordNotFoundError:
            raise RoleNotFoundError(role_id)

        if self._cache is not None:
            await self._cache.invalidate_role(role_id)
        logger.info(f"Deleted role {role.name} ({role_id})")
        return role

    @staticmethod
    def _validate_name(name: Optional[str]) -> str:
        name = (name or "").strip()
        if not name:
            raise ValidationError("Role name cannot be empty")
        return name
