"""Tenant services package."""

from .tenant_resolver import TenantResolver

__all__ = [
    "TenantResolver",
]
