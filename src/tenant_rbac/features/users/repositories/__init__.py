"""User repositories package."""

from .user_repository import AsyncPGUserRepository
from .membership_repository import AsyncPGMembershipRepository

__all__ = [
    "AsyncPGUserRepository",
    "AsyncPGMembershipRepository",
]
