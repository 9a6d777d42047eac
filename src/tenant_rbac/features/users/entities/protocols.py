"""Protocol interfaces for user and membership persistence."""

from abc import abstractmethod
from typing import List, Optional, Protocol, runtime_checkable
from uuid import UUID

from .membership import Membership
from .user import User


@runtime_checkable
class UserRepository(Protocol):
    """Protocol for user data access operations."""

    @abstractmethod
    async def find_by_id(self, user_id: UUID) -> Optional[User]:
        ...

    @abstractmethod
    async def find_by_email(self, email: str) -> Optional[User]:
        ...


@runtime_checkable
class MembershipRepository(Protocol):
    """Protocol for membership (user role) persistence.

    The store enforces uniqueness on (user_id, company_id) and raises
    ``UniqueConstraintViolationError`` when it is broken.
    """

    @abstractmethod
    async def create(self, membership: Membership) -> Membership:
        ...

    @abstractmethod
    async def find_by_user_id(self, user_id: UUID) -> List[Membership]:
        ...

    @abstractmethod
    async def find_by_company_id(self, company_id: UUID) -> List[Membership]:
        ...

    @abstractmethod
    async def find_by_user_and_company(self, user_id: UUID, company_id: UUID) -> Optional[Membership]:
        ...

    @abstractmethod
    async def find_by_role_id(self, role_id: UUID) -> List[Membership]:
        ...

    @abstractmethod
    async def exists_for_role_in_company(self, role_id: UUID, company_id: UUID) -> bool:
        ...

    @abstractmethod
    async def update_role(self, membership_id: UUID, role_id: UUID) -> Membership:
        """Change only the role of an existing membership."""
        ...

    @abstractmethod
    async def delete(self, membership_id: UUID) -> Membership:
        ...
