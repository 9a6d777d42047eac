"""Pytest configuration and fixtures for tenant-rbac tests.

Service tests run against an in-memory store that honours the same
uniqueness and not-found contracts as the asyncpg repositories.
Repository tests use ``mock_database`` instead.
"""

import dataclasses
from typing import Any, Callable, Dict, List, Optional, Tuple
from unittest.mock import AsyncMock
from uuid import UUID, uuid4

import pytest

from tenant_rbac.config.constants import SystemRole
from tenant_rbac.core.exceptions import RecordNotFoundError, UniqueConstraintViolationError
from tenant_rbac.features.access import AccessGuard
from tenant_rbac.features.permissions import (
    Permission,
    PermissionResolver,
    Role,
    RolePermission,
    RoleResolver,
)
from tenant_rbac.features.tenants import Company, CompanyDomain, Domain, TenantResolver
from tenant_rbac.features.users import Membership, MembershipService, User


class InMemoryTable:
    """Insertion-ordered rows with unique keys, copied on the way in and out."""

    def __init__(self, name: str, unique: Optional[Dict[str, Callable[[Any], Tuple]]] = None):
        self.name = name
        self.unique = unique or {}
        self.rows: Dict[UUID, Any] = {}

    def insert(self, entity):
        if entity.id is None:
            entity = dataclasses.replace(entity, id=uuid4())
        self._check_unique(entity)
        self.rows[entity.id] = dataclasses.replace(entity)
        return dataclasses.replace(entity)

    def replace(self, entity):
        if entity.id not in self.rows:
            raise RecordNotFoundError(self.name, entity.id)
        self._check_unique(entity)
        self.rows[entity.id] = dataclasses.replace(entity)
        return dataclasses.replace(entity)

    def remove(self, row_id: UUID):
        if row_id not in self.rows:
            raise RecordNotFoundError(self.name, row_id)
        return self.rows.pop(row_id)

    def get(self, row_id: UUID):
        row = self.rows.get(row_id)
        return dataclasses.replace(row) if row is not None else None

    def select(self, predicate: Callable[[Any], bool] = lambda row: True) -> List[Any]:
        return [dataclasses.replace(row) for row in self.rows.values() if predicate(row)]

    def _check_unique(self, entity) -> None:
        for constraint, key in self.unique.items():
            for row in self.rows.values():
                if row.id != entity.id and key(row) == key(entity):
                    raise UniqueConstraintViolationError(self.name, constraint)


class InMemoryCompanyRepository:
    def __init__(self):
        self.table = InMemoryTable("companies")

    async def create(self, company):
        return self.table.insert(company)

    async def find_by_id(self, company_id):
        return self.table.get(company_id)

    async def find_by_name(self, name):
        found = self.table.select(lambda c: c.name == name)
        return found[0] if found else None

    async def find_all(self):
        return self.table.select()

    async def find_by_ids(self, company_ids):
        return self.table.select(lambda c: c.id in set(company_ids))

    async def update(self, company):
        return self.table.replace(company)

    async def delete(self, company_id):
        return self.table.remove(company_id)


class InMemoryDomainRepository:
    def __init__(self):
        self.table = InMemoryTable("domains", {"domains_name_key": lambda d: (d.name,)})

    async def create(self, domain):
        return self.table.insert(domain)

    async def find_by_id(self, domain_id):
        return self.table.get(domain_id)

    async def find_by_name(self, name):
        found = self.table.select(lambda d: d.name == name)
        return found[0] if found else None

    async def update(self, domain):
        return self.table.replace(domain)

    async def delete(self, domain_id):
        return self.table.remove(domain_id)


class InMemoryCompanyDomainRepository:
    def __init__(self):
        self.table = InMemoryTable(
            "company_domains",
            {"company_domains_pair_key": lambda l: (l.company_id, l.domain_id)},
        )

    async def create(self, link):
        return self.table.insert(link)

    async def find_by_domain_id(self, domain_id):
        return self.table.select(lambda l: l.domain_id == domain_id)

    async def find_by_company_id(self, company_id):
        return self.table.select(lambda l: l.company_id == company_id)

    async def delete(self, company_id, domain_id):
        for link in self.table.select(lambda l: l.company_id == company_id and l.domain_id == domain_id):
            self.table.remove(link.id)
            return True
        return False


class InMemoryRoleRepository:
    def __init__(self):
        self.table = InMemoryTable("roles", {"roles_name_company_key": lambda r: (r.name, r.company_id)})

    async def create(self, role):
        return self.table.insert(role)

    async def find_by_id(self, role_id):
        return self.table.get(role_id)

    async def find_by_name(self, name, company_id):
        found = self.table.select(lambda r: r.name == name and r.company_id == company_id)
        return found[0] if found else None

    async def find_by_company(self, company_id):
        return self.table.select(lambda r: r.company_id == company_id)

    async def find_visible_to_company(self, company_id):
        return self.table.select(lambda r: r.company_id is None or r.company_id == company_id)

    async def update(self, role):
        return self.table.replace(role)

    async def delete(self, role_id):
        return self.table.remove(role_id)


class InMemoryPermissionRepository:
    def __init__(self):
        self.table = InMemoryTable("permissions", {"permissions_name_key": lambda p: (p.name,)})

    async def create(self, permission):
        return self.table.insert(permission)

    async def find_by_id(self, permission_id):
        return self.table.get(permission_id)

    async def find_by_name(self, name):
        found = self.table.select(lambda p: p.name == name)
        return found[0] if found else None

    async def find_by_ids(self, permission_ids):
        return self.table.select(lambda p: p.id in set(permission_ids))

    async def find_all(self):
        return self.table.select()

    async def delete(self, permission_id):
        return self.table.remove(permission_id)


class InMemoryRolePermissionRepository:
    def __init__(self):
        self.table = InMemoryTable(
            "role_permissions",
            {"role_permissions_pair_key": lambda g: (g.role_id, g.permission_id)},
        )

    async def create(self, grant):
        return self.table.insert(grant)

    async def find(self, role_id, permission_id):
        found = self.table.select(lambda g: g.role_id == role_id and g.permission_id == permission_id)
        return found[0] if found else None

    async def find_by_role_id(self, role_id):
        return self.table.select(lambda g: g.role_id == role_id)

    async def delete(self, role_id, permission_id):
        grant = await self.find(role_id, permission_id)
        if grant is None:
            return False
        self.table.remove(grant.id)
        return True


class InMemoryUserRepository:
    def __init__(self):
        self.table = InMemoryTable("users", {"users_email_key": lambda u: (u.email,)})

    async def find_by_id(self, user_id):
        return self.table.get(user_id)

    async def find_by_email(self, email):
        found = self.table.select(lambda u: u.email == email.strip().lower())
        return found[0] if found else None


class InMemoryMembershipRepository:
    def __init__(self):
        self.table = InMemoryTable(
            "user_roles",
            {"user_roles_user_company_key": lambda m: (m.user_id, m.company_id)},
        )

    async def create(self, membership):
        return self.table.insert(membership)

    async def find_by_user_id(self, user_id):
        return self.table.select(lambda m: m.user_id == user_id)

    async def find_by_company_id(self, company_id):
        return self.table.select(lambda m: m.company_id == company_id)

    async def find_by_user_and_company(self, user_id, company_id):
        found = self.table.select(lambda m: m.user_id == user_id and m.company_id == company_id)
        return found[0] if found else None

    async def find_by_role_id(self, role_id):
        return self.table.select(lambda m: m.role_id == role_id)

    async def exists_for_role_in_company(self, role_id, company_id):
        return bool(self.table.select(lambda m: m.role_id == role_id and m.company_id == company_id))

    async def update_role(self, membership_id, role_id):
        membership = self.table.get(membership_id)
        if membership is None:
            raise RecordNotFoundError(self.table.name, membership_id)
        membership.role_id = role_id
        return self.table.replace(membership)

    async def delete(self, membership_id):
        return self.table.remove(membership_id)


class InMemoryPermissionCache:
    def __init__(self):
        self.entries: Dict[UUID, List[str]] = {}
        self.versions: Dict[UUID, int] = {}

    async def get_role_permissions(self, role_id):
        names = self.entries.get(role_id)
        return list(names) if names is not None else None

    async def get_role_version(self, role_id):
        return self.versions.get(role_id, 0)

    async def set_role_permissions(self, role_id, names, version):
        if self.versions.get(role_id, 0) != version:
            return False
        self.entries[role_id] = list(names)
        return True

    async def invalidate_role(self, role_id):
        self.versions[role_id] = self.versions.get(role_id, 0) + 1
        self.entries.pop(role_id, None)


class InMemoryStore:
    """All repositories plus synchronous seed helpers."""

    def __init__(self):
        self.companies = InMemoryCompanyRepository()
        self.domains = InMemoryDomainRepository()
        self.company_domains = InMemoryCompanyDomainRepository()
        self.roles = InMemoryRoleRepository()
        self.permissions = InMemoryPermissionRepository()
        self.role_permissions = InMemoryRolePermissionRepository()
        self.users = InMemoryUserRepository()
        self.memberships = InMemoryMembershipRepository()

    def add_company(self, name: str, is_active: bool = True) -> Company:
        return self.companies.table.insert(Company(id=None, name=name, is_active=is_active))

    def add_domain(self, name: str, company: Optional[Company] = None, is_active: bool = True) -> Domain:
        domain = self.domains.table.insert(Domain(id=None, name=name, is_active=is_active))
        if company is not None:
            self.link(company, domain)
        return domain

    def link(self, company: Company, domain: Domain) -> CompanyDomain:
        return self.company_domains.table.insert(
            CompanyDomain(id=None, company_id=company.id, domain_id=domain.id)
        )

    def add_role(self, name: str, company: Optional[Company] = None) -> Role:
        return self.roles.table.insert(Role(id=None, name=name, company_id=company.id if company else None))

    def add_permission(self, name: str) -> Permission:
        return self.permissions.table.insert(Permission(id=None, name=name))

    def grant(self, role: Role, *permissions: Permission) -> None:
        for permission in permissions:
            self.role_permissions.table.insert(
                RolePermission(id=None, role_id=role.id, permission_id=permission.id)
            )

    def add_user(self, email: str) -> User:
        return self.users.table.insert(User(id=None, email=email))

    def add_membership(self, user: User, company: Company, role: Role) -> Membership:
        return self.memberships.table.insert(
            Membership(id=None, user_id=user.id, company_id=company.id, role_id=role.id)
        )


@pytest.fixture
def store():
    """Empty in-memory store."""
    return InMemoryStore()


@pytest.fixture
def system_roles(store):
    """ADMIN, MANAGER and USER seeded with no owning company, keyed by name."""
    return {role.value: store.add_role(role.value) for role in SystemRole}


@pytest.fixture
def acme(store):
    """Active company owning acme.test."""
    company = store.add_company("Acme")
    store.add_domain("acme.test", company)
    return company


@pytest.fixture
def globex(store):
    """Second active company, used for cross-tenant checks."""
    company = store.add_company("Globex")
    store.add_domain("globex.test", company)
    return company


@pytest.fixture
def alice(store):
    return store.add_user("alice@acme.test")


@pytest.fixture
def bob(store):
    return store.add_user("bob@globex.test")


@pytest.fixture
def tenant_resolver(store):
    return TenantResolver(store.companies, store.domains, store.company_domains)


@pytest.fixture
def permission_cache():
    return InMemoryPermissionCache()


@pytest.fixture
def role_resolver(store, permission_cache):
    return RoleResolver(store.roles, store.memberships, store.companies, cache=permission_cache)


@pytest.fixture
def permission_resolver(store, permission_cache):
    return PermissionResolver(store.permissions, store.role_permissions, store.roles, cache=permission_cache)


@pytest.fixture
def membership_service(store, role_resolver):
    return MembershipService(store.memberships, store.users, store.companies, role_resolver)


@pytest.fixture
def access_guard(store, tenant_resolver, role_resolver, permission_resolver):
    return AccessGuard(tenant_resolver, role_resolver, permission_resolver, store.memberships, store.companies)


@pytest.fixture
def mock_database():
    """Mock DatabaseManager for repository tests."""
    mock_db = AsyncMock()
    mock_db.fetchrow = AsyncMock()
    mock_db.fetch = AsyncMock()
    mock_db.fetchval = AsyncMock()
    mock_db.execute = AsyncMock()
    return mock_db


@pytest.fixture
def sample_company_id():
    return uuid4()
