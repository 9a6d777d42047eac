"""Access entities package."""

from .decision import AccessDecision, AccessContext

__all__ = [
    "AccessDecision",
    "AccessContext",
]
