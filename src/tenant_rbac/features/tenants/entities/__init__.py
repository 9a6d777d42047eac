"""Tenant entities package."""

from .company import Company
from .domain import Domain, CompanyDomain, normalize_domain_name
from .protocols import CompanyRepository, DomainRepository, CompanyDomainRepository

__all__ = [
    "Company",
    "Domain",
    "CompanyDomain",
    "normalize_domain_name",
    "CompanyRepository",
    "DomainRepository",
    "CompanyDomainRepository",
]
