"""User services package."""

from .membership_service import MembershipService

__all__ = ["MembershipService"]
