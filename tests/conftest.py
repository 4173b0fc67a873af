"""Root conftest — shared test configuration and fixtures.

Invariants:
    - Every test gets a fresh in-memory SQLite database
    - get_db dependency overridden to use the test DB session
    - db_manager patched so readiness probes see the test engine
    - make_store builds a recording UserStore double with scripted outcomes
"""

import os

os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///test.db")
os.environ.setdefault("LOG_FORMAT", "text")

import pytest  # noqa: E402
from httpx import ASGITransport, AsyncClient  # noqa: E402
from sqlalchemy.ext.asyncio import (  # noqa: E402
    AsyncSession, async_sessionmaker, create_async_engine,
)

import user_registry.infrastructure.database as db_module  # noqa: E402
from user_registry.db.base import Base  # noqa: E402
from user_registry.infrastructure.database import (  # noqa: E402
    DatabaseSessionManager, get_db,
)
from user_registry.main import app  # noqa: E402


class FakeUserStore:
    """UserStore double: each method replays a configured result or raises a configured error.

    Calls are recorded in order as (method, argument) pairs.
    """

    def __init__(self, **outcomes):
        self.outcomes = outcomes
        self.calls: list[tuple[str, object]] = []

    async def _replay(self, method: str, arg):
        self.calls.append((method, arg))
        if method not in self.outcomes:
            raise AssertionError(f"unexpected call to {method}")
        outcome = self.outcomes[method]
        if isinstance(outcome, BaseException):
            raise outcome
        return outcome

    async def lookup_by_name(self, name):
        return await self._replay("lookup_by_name", name)

    async def create(self, name):
        return await self._replay("create", name)

    async def lookup_by_id(self, user_id):
        return await self._replay("lookup_by_id", user_id)

    def args_for(self, method: str) -> list:
        return [arg for called, arg in self.calls if called == method]


class StoredUser:
    """Minimal UserLike record."""

    def __init__(self, id: int, name: str):
        self.id = id
        self.name = name


@pytest.fixture
def make_store():
    return FakeUserStore


@pytest.fixture
def stored_user():
    return StoredUser


@pytest.fixture
async def test_engine():
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:", echo=False,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await engine.dispose()


@pytest.fixture
async def test_session_factory(test_engine):
    return async_sessionmaker(
        test_engine, class_=AsyncSession, expire_on_commit=False,
    )


@pytest.fixture
async def test_db(test_session_factory):
    async with test_session_factory() as session:
        yield session


@pytest.fixture
async def client(test_engine, test_session_factory):
    """FastAPI test client with DB dependency overridden."""
    async def override_get_db():
        async with test_session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db

    original_manager = db_module.db_manager
    fake_manager = DatabaseSessionManager.__new__(DatabaseSessionManager)
    fake_manager.engine = test_engine
    fake_manager._session_factory = test_session_factory
    db_module.db_manager = fake_manager

    async with AsyncClient(
        transport=ASGITransport(app=app), base_url="http://test",
    ) as c:
        yield c

    app.dependency_overrides.clear()
    db_module.db_manager = original_manager
