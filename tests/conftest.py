"""
Pytest fixtures for Recordkeep tests.

Uses a temp-file SQLite database so the app and the fixtures share one DB
(in-memory SQLite is per-connection).
"""

import os
import tempfile
import uuid
from typing import AsyncGenerator

import pytest
import pytest_asyncio

_tmp = tempfile.NamedTemporaryFile(suffix=".db", delete=False)
_tmp.close()
TEST_DB_PATH = _tmp.name
TEST_SECRET = "test-secret-key-for-testing-only"

os.environ["DATABASE_URL"] = f"sqlite+aiosqlite:///{TEST_DB_PATH}"
os.environ["JWT_SECRET"] = TEST_SECRET
os.environ["BCRYPT_ROUNDS"] = "4"
os.environ.pop("TOKEN_EXPIRE_MINUTES", None)

# Force config reload so the package picks up the test environment
from recordkeep.config import get_settings
get_settings.cache_clear()

from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession

from recordkeep.database import async_session_maker, engine
from recordkeep.kernel.identity.credential_store import SqlCredentialStore
from recordkeep.kernel.identity.identity_service import IdentityService
from recordkeep.kernel.identity.jwt import TokenCodec
from recordkeep.kernel.identity.password import PasswordHasher
from recordkeep.kernel.models import Base, User


def pytest_sessionfinish(session, exitstatus):
    """Clean up temp DB files after test run."""
    for path in (TEST_DB_PATH, f"{TEST_DB_PATH}-wal", f"{TEST_DB_PATH}-shm"):
        if os.path.exists(path):
            os.unlink(path)


@pytest_asyncio.fixture
async def db_engine():
    """Fresh schema for every test."""
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)


@pytest_asyncio.fixture
async def db_session(db_engine) -> AsyncGenerator[AsyncSession, None]:
    async with async_session_maker() as session:
        yield session
        await session.rollback()


@pytest.fixture
def hasher() -> PasswordHasher:
    return PasswordHasher(rounds=4)


@pytest.fixture
def codec() -> TokenCodec:
    return TokenCodec(secret_key=TEST_SECRET, algorithm="HS256")


@pytest.fixture
def store(db_engine) -> SqlCredentialStore:
    return SqlCredentialStore(async_session_maker)


@pytest.fixture
def identity_service(
    store: SqlCredentialStore,
    hasher: PasswordHasher,
    codec: TokenCodec,
) -> IdentityService:
    return IdentityService(store, hasher=hasher, codec=codec)


@pytest.fixture
def make_user():
    """Build an unsaved user with an empty token list."""

    def _make(email: str = "user@records.io", password_hash: str = "not-a-real-hash") -> User:
        return User(id=uuid.uuid4(), email=email, password_hash=password_hash, tokens=[])

    return _make


@pytest_asyncio.fixture
async def client(db_engine) -> AsyncGenerator[AsyncClient, None]:
    """Async HTTP client against the app, sharing the test database."""
    from recordkeep.main import app

    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as ac:
        yield ac
