"""User entities package."""

from .user import User
from .membership import Membership
from .protocols import UserRepository, MembershipRepository

__all__ = [
    "User",
    "Membership",
    "UserRepository",
    "MembershipRepository",
]
