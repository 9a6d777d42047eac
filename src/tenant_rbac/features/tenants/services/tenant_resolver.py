"""Tenant resolution from inbound domain names.

Maps a domain (or the domain part of an email address) to the active
company that owns it. Inactive domains and companies are reported with
``InactiveError`` subclasses so callers can treat them as a hard deny
rather than a missing resource.
"""

import logging
from typing import Optional
from uuid import UUID

from ....core.exceptions import (
    CompanyInactiveError,
    CompanyNotFoundError,
    ConflictError,
    DomainInactiveError,
    DomainNotFoundError,
    UniqueConstraintViolationError,
    ValidationError,
)
from ..entities import (
    Company,
    CompanyDomain,
    CompanyDomainRepository,
    CompanyRepository,
    DomainRepository,
    normalize_domain_name,
)


logger = logging.getLogger(__name__)


class TenantResolver:
    """Resolves domains to companies.

    Read-only apart from :meth:`link_domain`, which maintains the
    one-company-per-domain invariant.
    """

    def __init__(
        self,
        company_repository: CompanyRepository,
        domain_repository: DomainRepository,
        company_domain_repository: CompanyDomainRepository,
    ):
        self._companies = company_repository
        self._domains = domain_repository
        self._company_domains = company_domain_repository

    async def resolve_tenant_by_domain(self, domain_name: str) -> Company:
        """Return the active company owning ``domain_name``.

        Raises:
            ValidationError: the name is blank
            DomainNotFoundError: no such domain
            DomainInactiveError: the domain is disabled
            CompanyNotFoundError: the domain is not linked to a company
            CompanyInactiveError: the owning company is disabled
        """
        name = normalize_domain_name(domain_name or "")
        if not name:
            raise ValidationError("Domain name cannot be empty")

        domain = await self._domains.find_by_name(name)
        if domain is None:
            raise DomainNotFoundError(name)
        if not domain.is_active:
            logger.warning(f"Tenant resolution refused for inactive domain {name}")
            raise DomainInactiveError(name)

        company_id = await self._owning_company_id(domain.id, name)
        if company_id is None:
            raise CompanyNotFoundError(message=f"Domain {name} is not linked to any company")

        company = await self._companies.find_by_id(company_id)
        if company is None:
            raise CompanyNotFoundError(company_id)
        if not company.is_active:
            logger.warning(f"Tenant resolution refused for inactive company {company.id} (domain {name})")
            raise CompanyInactiveError(company.id)

        return company

    async def resolve_tenant_by_email(self, email: str) -> Company:
        """Resolve the tenant from the domain part of an email address."""
        local, sep, domain = (email or "").strip().rpartition("@")
        if not sep or not local or not domain:
            raise ValidationError(f"Invalid email address: {email!r}")
        return await self.resolve_tenant_by_domain(domain)

    async def get_company(self, company_id: UUID) -> Company:
        company = await self._companies.find_by_id(company_id)
        if company is None:
            raise CompanyNotFoundError(company_id)
        return company

    async def find_company_for_domain(self, domain_id: UUID) -> Optional[Company]:
        """Return the company a domain is linked to, whatever its activation state.

        Raises:
            ConflictError: the domain is linked to more than one company
        """
        company_id = await self._owning_company_id(domain_id, domain_id)
        if company_id is None:
            return None
        return await self._companies.find_by_id(company_id)

    async def _owning_company_id(self, domain_id: UUID, label) -> Optional[UUID]:
        links = await self._company_domains.find_by_domain_id(domain_id)
        if not links:
            return None
        company_ids = {link.company_id for link in links}
        if len(company_ids) > 1:
            logger.error(f"Domain {label} is linked to {len(company_ids)} companies")
            raise ConflictError(
                f"Domain {label} is linked to more than one company",
                details={"domain": str(label)},
            )
        return links[0].company_id

    async def link_domain(self, company_id: UUID, domain_id: UUID) -> CompanyDomain:
        """Attach a domain to a company.

        Linking an already linked pair returns the existing row; linking a
        domain that belongs to another company is a conflict.
        """
        await self.get_company(company_id)
        if await self._domains.find_by_id(domain_id) is None:
            raise DomainNotFoundError(domain_id)

        existing = await self._company_domains.find_by_domain_id(domain_id)
        if existing:
            if existing[0].company_id == company_id:
                return existing[0]
            raise ConflictError(
                f"Domain {domain_id} already belongs to company {existing[0].company_id}",
                details={"domain_id": str(domain_id), "company_id": str(existing[0].company_id)},
            )

        try:
            link = await self._company_domains.create(
                CompanyDomain(id=None, company_id=company_id, domain_id=domain_id)
            )
        except UniqueConstraintViolationError:
            existing = await self._company_domains.find_by_domain_id(domain_id)
            if existing and existing[0].company_id == company_id:
                return existing[0]
            raise ConflictError(
                f"Domain {domain_id} was linked concurrently to another company",
                details={"domain_id": str(domain_id)},
            )

        logger.info(f"Linked domain {domain_id} to company {company_id}")
        return link
