"""Users feature for tenant-rbac.

Feature-First layout:
- entities/: User, Membership and repository protocols
- repositories/: AsyncPG implementations
- services/: MembershipService
"""

from .entities import (
    User,
    Membership,
    UserRepository,
    MembershipRepository,
)
from .repositories import AsyncPGUserRepository, AsyncPGMembershipRepository
from .services import MembershipService

__all__ = [
    "User",
    "Membership",
    "UserRepository",
    "MembershipRepository",
    "AsyncPGUserRepository",
    "AsyncPGMembershipRepository",
    "MembershipService",
]
