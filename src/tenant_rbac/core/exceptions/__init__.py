"""Exception hierarchy for tenant-rbac."""

from .base import TenantRbacError, ConfigurationError, create_error_response
from .database import DatabaseError, RecordNotFoundError, UniqueConstraintViolationError
from .domain import (
    NotFoundError,
    InactiveError,
    ConflictError,
    ForbiddenError,
    ValidationError,
    UserNotFoundError,
    CompanyNotFoundError,
    DomainNotFoundError,
    RoleNotFoundError,
    PermissionNotFoundError,
    MembershipNotFoundError,
    CompanyInactiveError,
    DomainInactiveError,
    RoleAlreadyExistsError,
    RoleInUseError,
    PermissionAlreadyExistsError,
    MembershipConflictError,
    ReservedRoleNameError,
    MultipleRolesError,
    NoRoleInCompanyError,
)

__all__ = [
    "TenantRbacError",
    "ConfigurationError",
    "create_error_response",
    # Persistence
    "DatabaseError",
    "RecordNotFoundError",
    "UniqueConstraintViolationError",
    # Kinds
    "NotFoundError",
    "InactiveError",
    "ConflictError",
    "ForbiddenError",
    "ValidationError",
    # Concrete
    "UserNotFoundError",
    "CompanyNotFoundError",
    "DomainNotFoundError",
    "RoleNotFoundError",
    "PermissionNotFoundError",
    "MembershipNotFoundError",
    "CompanyInactiveError",
    "DomainInactiveError",
    "RoleAlreadyExistsError",
    "RoleInUseError",
    "PermissionAlreadyExistsError",
    "MembershipConflictError",
    "ReservedRoleNameError",
    "MultipleRolesError",
    "NoRoleInCompanyError",
]
