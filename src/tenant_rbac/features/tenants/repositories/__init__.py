"""Tenant repositories package.

Concrete implementations of tenant data access protocols using AsyncPG.
"""

from .company_repository import AsyncPGCompanyRepository
from .domain_repository import AsyncPGDomainRepository, AsyncPGCompanyDomainRepository

__all__ = [
    "AsyncPGCompanyRepository",
    "AsyncPGDomainRepository",
    "AsyncPGCompanyDomainRepository",
]
