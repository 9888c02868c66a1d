"""
Test configuration and fixtures.

Provides:
- In-memory SQLite database, schema created fresh for each test
- Organizations, users and UserSession contexts for two tenants
- JWT cookie minting and HTTPX AsyncClient against the app
"""
import os
import uuid
from dataclasses import dataclass
from typing import AsyncGenerator, Generator

# Settings are read at import time
os.environ["DATABASE_URL"] = "sqlite+pysqlite:///:memory:"
os.environ["TESTING"] = "1"
os.environ["INTERNAL_SECRET"] = "test-internal-secret"

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.orm import Session

from fieldcrm.core.deps import COOKIE_NAME, get_db
from fieldcrm.core.security import create_session_token
from fieldcrm.db.base import Base
from fieldcrm.db.enums import Role
from fieldcrm.db.models import Account, Contact, Membership, Organization, User
from fieldcrm.db.session import SessionLocal, engine
from fieldcrm.main import app
from fieldcrm.schemas.auth import UserSession


# =============================================================================
# Database Fixtures
# =============================================================================

@pytest.fixture(scope="function")
def db() -> Generator[Session, None, None]:
    """
    Fresh schema per test.

    App code commits (and rolls back on code collisions), so fixtures
    commit their rows instead of relying on an outer transaction.
    """
    Base.metadata.create_all(bind=engine)
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


def _make_org(db: Session, name: str) -> Organization:
    org = Organization(
        id=uuid.uuid4(),
        name=name,
        code=f"{name[:3].upper()}-{uuid.uuid4().hex[:6]}",
    )
    db.add(org)
    db.commit()
    return org


def _make_member(db: Session, org: Organization, role: Role = Role.ADMIN) -> User:
    user = User(
        id=uuid.uuid4(),
        email=f"user-{uuid.uuid4().hex[:8]}@test.com",
        display_name="Test User",
    )
    db.add(user)
    db.flush()
    db.add(
        Membership(
            id=uuid.uuid4(),
            user_id=user.id,
            organization_id=org.id,
            role=role.value,
        )
    )
    db.commit()
    return user


@pytest.fixture(scope="function")
def test_org(db: Session) -> Organization:
    """Create a test organization."""
    return _make_org(db, "Test Organization")


@pytest.fixture(scope="function")
def test_user(db: Session, test_org: Organization) -> User:
    """Create an admin user in test_org."""
    return _make_member(db, test_org)


@pytest.fixture(scope="function")
def session(test_user: User, test_org: Organization) -> UserSession:
    """Tenant context for service-level tests."""
    return UserSession(
        user_id=test_user.id,
        org_id=test_org.id,
        role=Role.ADMIN,
        email=test_user.email,
        display_name=test_user.display_name,
    )


@pytest.fixture(scope="function")
def other_org(db: Session) -> Organization:
    return _make_org(db, "Other Organization")


@pytest.fixture(scope="function")
def other_session(db: Session, other_org: Organization) -> UserSession:
    """Tenant context for a second, unrelated organization."""
    user = _make_member(db, other_org)
    return UserSession(
        user_id=user.id,
        org_id=other_org.id,
        role=Role.ADMIN,
        email=user.email,
        display_name=user.display_name,
    )


@pytest.fixture(scope="function")
def account(db: Session, test_org: Organization, test_user: User) -> Account:
    account = Account(
        organization_id=test_org.id,
        name="Acme Industries",
        phone="+91 98765 43210",
        created_by_user_id=test_user.id,
    )
    db.add(account)
    db.commit()
    return account


@pytest.fixture(scope="function")
def contact(db: Session, test_org: Organization, account: Account) -> Contact:
    contact = Contact(
        organization_id=test_org.id,
        account_id=account.id,
        first_name="Priya",
        last_name="Sharma",
        phone="+91-90000-11111",
    )
    db.add(contact)
    db.commit()
    return contact


@pytest.fixture(scope="function")
def other_account(db: Session, other_org: Organization) -> Account:
    account = Account(organization_id=other_org.id, name="Globex")
    db.add(account)
    db.commit()
    return account


# =============================================================================
# Auth Fixtures
# =============================================================================

@dataclass
class TestAuth:
    """Test authentication context."""
    user: User
    org: Organization
    token: str
    cookie_name: str = COOKIE_NAME


@pytest.fixture(scope="function")
def test_auth(test_user: User, test_org: Organization) -> TestAuth:
    """Create JWT token for test user."""
    token = create_session_token(
        user_id=test_user.id,
        org_id=test_org.id,
        role=Role.ADMIN.value,
        token_version=test_user.token_version,
    )
    return TestAuth(user=test_user, org=test_org, token=token)


# =============================================================================
# Client Fixtures
# =============================================================================

@pytest.fixture(scope="function")
async def client(db: Session) -> AsyncGenerator[AsyncClient, None]:
    """Unauthenticated AsyncClient."""
    def override_get_db():
        yield db

    app.dependency_overrides[get_db] = override_get_db

    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as c:
        yield c

    app.dependency_overrides.clear()


@pytest.fixture(scope="function")
async def authed_client(
    db: Session,
    test_auth: TestAuth,
) -> AsyncGenerator[AsyncClient, None]:
    """Authenticated AsyncClient with JWT cookie and CSRF header."""
    def override_get_db():
        yield db

    app.dependency_overrides[get_db] = override_get_db

    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
        cookies={test_auth.cookie_name: test_auth.token},
        headers={"X-Requested-With": "XMLHttpRequest"},  # CSRF header
    ) as c:
        yield c

    app.dependency_overrides.clear()
