"""Protocol interfaces for tenant persistence.

Implementations raise ``RecordNotFoundError`` when updating or deleting a
missing row and ``UniqueConstraintViolationError`` on duplicate keys.
"""

from abc import abstractmethod
from typing import List, Optional, Protocol, runtime_checkable
from uuid import UUID

from .company import Company
from .domain import CompanyDomain, Domain


@runtime_checkable
class CompanyRepository(Protocol):
    """Protocol for company data persistence operations."""

    @abstractmethod
    async def create(self, company: Company) -> Company:
        """Insert a company and return it with its generated id."""
        ...

    @abstractmethod
    async def find_by_id(self, company_id: UUID) -> Optional[Company]:
        ...

    @abstractmethod
    async def find_by_name(self, name: str) -> Optional[Company]:
        ...

    @abstractmethod
    async def find_all(self) -> List[Company]:
        ...

    @abstractmethod
    async def find_by_ids(self, company_ids: List[UUID]) -> List[Company]:
        ...

    @abstractmethod
    async def update(self, company: Company) -> Company:
        ...

    @abstractmethod
    async def delete(self, company_id: UUID) -> Company:
        ...


@runtime_checkable
class DomainRepository(Protocol):
    """Protocol for domain data persistence operations."""

    @abstractmethod
    async def create(self, domain: Domain) -> Domain:
        ...

    @abstractmethod
    async def find_by_id(self, domain_id: UUID) -> Optional[Domain]:
        ...

    @abstractmethod
    async def find_by_name(self, name: str) -> Optional[Domain]:
        """Exact-match lookup on the stored (lower-case) name."""
        ...

    @abstractmethod
    async def update(self, domain: Domain) -> Domain:
        ...

    @abstractmethod
    async def delete(self, domain_id: UUID) -> Domain:
        ...


@runtime_checkable
class CompanyDomainRepository(Protocol):
    """Protocol for company/domain link persistence operations."""

    @abstractmethod
    async def create(self, link: CompanyDomain) -> CompanyDomain:
        ...

    @abstractmethod
    async def find_by_domain_id(self, domain_id: UUID) -> List[CompanyDomain]:
        ...

    @abstractmethod
    async def find_by_company_id(self, company_id: UUID) -> List[CompanyDomain]:
        ...

    @abstractmethod
    async def delete(self, company_id: UUID, domain_id: UUID) -> bool:
        ...
