"""Domain exceptions for tenant, role, permission and membership logic.

Five kinds are exposed as base classes (NotFoundError, InactiveError,
ConflictError, ForbiddenError, ValidationError); concrete subclasses name
the entity involved.
"""

from typing import Any, Optional

from .base import TenantRbacError


# Error kinds
class NotFoundError(TenantRbacError):
    """Referenced entity does not exist."""

    def __init__(self, message: str, entity: Optional[str] = None, entity_id: Any = None, **kwargs):
        super().__init__(message, **kwargs)
        if entity:
            self.details["entity"] = entity
        if entity_id is not None:
            self.details["entity_id"] = str(entity_id)


class InactiveError(TenantRbacError):
    """Entity exists but is administratively disabled."""
    pass


class ConflictError(TenantRbacError):
    """A uniqueness invariant would be violated."""
    pass


class ForbiddenError(TenantRbacError):
    """A tenant-scope or access check failed."""
    pass


class ValidationError(TenantRbacError):
    """A request breaks a domain rule before reaching the store."""
    pass


# Not found
class UserNotFoundError(NotFoundError):
    def __init__(self, user_id: Any):
        super().__init__(f"User {user_id} not found", entity="user", entity_id=user_id)


class CompanyNotFoundError(NotFoundError):
    def __init__(self, company_id: Any = None, message: Optional[str] = None):
        super().__init__(
            message or f"Company {company_id} not found",
            entity="company",
            entity_id=company_id,
        )


class DomainNotFoundError(NotFoundError):
    def __init__(self, domain: Any):
        super().__init__(f"Domain {domain} not found", entity="domain", entity_id=domain)


class RoleNotFoundError(NotFoundError):
    def __init__(self, role_id: Any):
        super().__init__(f"Role {role_id} not found", entity="role", entity_id=role_id)


class PermissionNotFoundError(NotFoundError):
    def __init__(self, permission_id: Any):
        super().__init__(
            f"Permission {permission_id} not found", entity="permission", entity_id=permission_id
        )


class MembershipNotFoundError(NotFoundError):
    def __init__(self, user_id: Any, company_id: Any):
        super().__init__(
            f"User {user_id} has no membership in company {company_id}",
            entity="membership",
        )
        self.details["user_id"] = str(user_id)
        self.details["company_id"] = str(company_id)


# Inactive
class CompanyInactiveError(InactiveError):
    def __init__(self, company_id: Any):
        super().__init__(f"Company {company_id} is inactive", details={"company_id": str(company_id)})


class DomainInactiveError(InactiveError):
    def __init__(self, domain: str):
        super().__init__(f"Domain {domain} is inactive", details={"domain": domain})


# Conflicts
class RoleAlreadyExistsError(ConflictError):
    def __init__(self, name: str, company_id: Any = None):
        scope = f"company {company_id}" if company_id is not None else "system scope"
        super().__init__(
            f"Role '{name}' already exists in {scope}",
            details={"name": name, "company_id": str(company_id) if company_id is not None else None},
        )


class RoleInUseError(ConflictError):
    def __init__(self, role_id: Any, assignments: int):
        super().__init__(
            f"Role {role_id} is still assigned to {assignments} membership(s)",
            details={"role_id": str(role_id), "assignments": assignments},
        )


class PermissionAlreadyExistsError(ConflictError):
    def __init__(self, name: str):
        super().__init__(f"Permission '{name}' already exists", details={"name": name})


class MembershipConflictError(ConflictError):
    """A user may belong to at most one company."""

    def __init__(self, user_id: Any, company_id: Any = None):
        message = f"User {user_id} already has a company membership"
        if company_id is not None:
            message += f" (company {company_id})"
        super().__init__(
            message,
            details={"user_id": str(user_id), "company_id": str(company_id) if company_id is not None else None},
        )


# Validation
class ReservedRoleNameError(ValidationError):
    def __init__(self, name: str):
        super().__init__(
            f"'{name}' is a reserved system role name",
            details={"name": name},
        )


class MultipleRolesError(ValidationError):
    """A user holds exactly one role per company."""

    def __init__(self, user_id: Any, company_id: Any):
        super().__init__(
            f"User {user_id} already holds a role in company {company_id}",
            details={"user_id": str(user_id), "company_id": str(company_id)},
        )


# Forbidden
class NoRoleInCompanyError(ForbiddenError):
    def __init__(self, user_id: Any, company_id: Any):
        super().__init__(
            f"User {user_id} has no role in company {company_id}",
            details={"user_id": str(user_id), "company_id": str(company_id)},
        )
