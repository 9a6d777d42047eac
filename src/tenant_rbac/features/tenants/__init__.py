"""Tenants feature for tenant-rbac.

Feature-First layout:
- entities/: Company, Domain, CompanyDomain and repository protocols
- repositories/: AsyncPG implementations
- services/: TenantResolver
"""

from .entities import (
    Company,
    Domain,
    CompanyDomain,
    CompanyRepository,
    DomainRepository,
    CompanyDomainRepository,
)
from .repositories import (
    AsyncPGCompanyRepository,
    AsyncPGDomainRepository,
    AsyncPGCompanyDomainRepository,
)
from .services import TenantResolver

__all__ = [
    "Company",
    "Domain",
    "CompanyDomain",
    "CompanyRepository",
    "DomainRepository",
    "CompanyDomainRepository",
    "AsyncPGCompanyRepository",
    "AsyncPGDomainRepository",
    "AsyncPGCompanyDomainRepository",
    "TenantResolver",
]
