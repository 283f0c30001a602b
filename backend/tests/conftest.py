"""
Tenant Notes Backend — Test Configuration (conftest.py)
=======================================================

What:  Shared pytest fixtures for the entire test suite.
Why:   Reusable test infrastructure: mocked sessions for service unit tests,
       and an in-memory SQLite database behind the real app for HTTP tests.

Fixture Hierarchy (all function-scoped):
    ├── mock_db_session: AsyncMock session (no database)
    ├── codec: TokenCodec signing with the test secret
    ├── db_engine → session_factory → seeded: in-memory DB with two tenants
    └── test_client: HTTPX AsyncClient wired to the app with DB/codec overrides

Seed data:
    acme   (FREE)  admin@acme.test (ADMIN), user@acme.test (MEMBER)
    globex (FREE)  admin@globex.test (ADMIN), user@globex.test (MEMBER)
    Every password is "password".
"""

import os

# Must run before any tenant_notes import: settings are read at import time
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///:memory:"
os.environ["JWT_SECRET"] = "test-secret-not-for-production"
os.environ["PASSWORD_HASH_ROUNDS"] = "4"
os.environ["LOG_LEVEL"] = "WARNING"
os.environ.pop("VERCEL", None)
os.environ.pop("SERVERLESS", None)

from datetime import datetime, timezone
from types import SimpleNamespace
from typing import Optional
from unittest.mock import AsyncMock, MagicMock
from uuid import uuid4

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

import tenant_notes.models  # noqa: F401
from tenant_notes.auth.passwords import hash_password
from tenant_notes.auth.tokens import Identity, TokenCodec, get_token_codec
from tenant_notes.database import Base, get_db_session
from tenant_notes.models.note import Note
from tenant_notes.models.tenant import Plan, Tenant
from tenant_notes.models.user import Role, User

TEST_SECRET = os.environ["JWT_SECRET"]
TEST_PASSWORD = "password"


# ══════════════════════════════════════════════════════════════════════════
# Unit-test fixtures
# ══════════════════════════════════════════════════════════════════════════

@pytest.fixture
def mock_db_session():
    """
    A mock AsyncSession.

    Usage:
        mock_db_session.execute.return_value.scalar_one_or_none.return_value = tenant
    """
    session = AsyncMock()
    session.execute = AsyncMock()
    session.flush = AsyncMock()
    session.refresh = AsyncMock()
    session.delete = AsyncMock()
    session.commit = AsyncMock()
    session.rollback = AsyncMock()
    session.close = AsyncMock()
    session.add = MagicMock()
    return session


@pytest.fixture
def codec():
    return TokenCodec(secret=TEST_SECRET)


def make_tenant(plan: Plan = Plan.FREE, slug: str = "acme", tenant_id: Optional[str] = None) -> Tenant:
    now = datetime.now(timezone.utc)
    return Tenant(
        id=tenant_id or str(uuid4()),
        name=slug.title(),
        slug=slug,
        plan=plan,
        created_at=now,
        updated_at=now,
    )


def make_note(tenant_id: str, owner_id: Optional[str] = None, **overrides) -> Note:
    now = datetime.now(timezone.utc)
    fields = dict(
        id=str(uuid4()),
        title="Groceries",
        content="Milk, eggs",
        tenant_id=tenant_id,
        owner_id=owner_id,
        created_at=now,
        updated_at=now,
    )
    fields.update(overrides)
    return Note(**fields)


@pytest.fixture
def tenant_factory():
    return make_tenant


@pytest.fixture
def note_factory():
    return make_note


@pytest.fixture
def admin_identity():
    return Identity(user_id=str(uuid4()), tenant_id=str(uuid4()), role=Role.ADMIN)


@pytest.fixture
def member_identity():
    return Identity(user_id=str(uuid4()), tenant_id=str(uuid4()), role=Role.MEMBER)


# ══════════════════════════════════════════════════════════════════════════
# Database-backed fixtures
# ══════════════════════════════════════════════════════════════════════════

@pytest_asyncio.fixture
async def db_engine():
    """Fresh in-memory SQLite database per test; StaticPool keeps one shared connection."""
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(db_engine):
    return async_sessionmaker(db_engine, class_=AsyncSession, expire_on_commit=False)


@pytest_asyncio.fixture
async def seeded(session_factory):
    """Two FREE tenants with an admin and a member each."""
    password_hash = hash_password(TEST_PASSWORD)
    async with session_factory() as session:
        acme = Tenant(name="Acme", slug="acme", plan=Plan.FREE)
        globex = Tenant(name="Globex", slug="globex", plan=Plan.FREE)
        session.add_all([acme, globex])
        await session.flush()

        users = {
            "acme_admin": User(email="admin@acme.test", password=password_hash, role=Role.ADMIN, tenant_id=acme.id),
            "acme_member": User(email="user@acme.test", password=password_hash, role=Role.MEMBER, tenant_id=acme.id),
            "globex_admin": User(email="admin@globex.test", password=password_hash, role=Role.ADMIN, tenant_id=globex.id),
            "globex_member": User(email="user@globex.test", password=password_hash, role=Role.MEMBER, tenant_id=globex.id),
        }
        session.add_all(users.values())
        await session.commit()

        return SimpleNamespace(acme=acme, globex=globex, **users)


@pytest_asyncio.fixture
async def test_client(session_factory, codec):
    """
    HTTPX AsyncClient talking to the real app through ASGITransport.

    get_db_session is swapped for the in-memory database and get_token_codec
    for the test codec; everything else (handlers, gates, services,
    repositories) is the production code path.
    """
    from tenant_notes.main import app

    async def override_get_db_session():
        async with session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    app.dependency_overrides[get_db_session] = override_get_db_session
    app.dependency_overrides[get_token_codec] = lambda: codec

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client

    app.dependency_overrides.clear()


@pytest.fixture
def auth_headers(codec):
    """Build an Authorization header for a seeded user without going through /login."""

    def _headers(user: User) -> dict:
        token = codec.issue(Identity(user_id=user.id, tenant_id=user.tenant_id, role=user.role))
        return {"Authorization": f"Bearer {token}"}

    return _headers
