"""
Notes API - Test Configuration (conftest.py)
============================================

What:  Shared pytest fixtures for the entire test suite.
How:   Every test gets its own SQLite file under pytest's tmp_path, so tests
       never share rows and never touch a real server database.

Fixture Hierarchy (all function-scoped):
    ├── test_settings:     Settings pointing at a per-test SQLite file
    ├── db_engine:         Async engine with the schema created
    ├── db_session:        Session on db_engine (repository tests)
    ├── clock:             ManualClock for deterministic timestamps
    ├── mock_repository:   AsyncMock of NotesRepository (service tests)
    ├── app:               create_app(test_settings) with the schema created
    ├── test_client:       HTTPX AsyncClient over ASGITransport
    └── auth_headers:      Authorization headers for the test tokens
"""

import json
from datetime import datetime, timedelta, timezone
from unittest.mock import AsyncMock

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from notes_api.config import Settings
from notes_api.database import build_engine, build_session_factory, create_schema, dispose_engine
from notes_api.main import create_app

TEST_TOKENS = {
    "reader-token": [],
    "writer-token": ["notes:write"],
    "deleter-token": ["notes:delete"],
    "admin-token": ["notes:write", "notes:delete"],
}


class ManualClock:
    """
    Deterministic repository clock.

    Each call returns the current instant and then advances by `step`.
    `step=timedelta(0)` makes every note share one created_at.
    """

    def __init__(
        self,
        start: datetime = datetime(2025, 1, 1, tzinfo=timezone.utc),
        step: timedelta = timedelta(milliseconds=1),
    ):
        self.now = start
        self.step = step

    def __call__(self) -> datetime:
        current = self.now
        self.now = self.now + self.step
        return current


# ══════════════════════════════════════════════════════════════════════════
# Configuration & Database
# ══════════════════════════════════════════════════════════════════════════

@pytest.fixture
def test_settings(tmp_path):
    """Settings for an isolated SQLite database file."""
    db_path = tmp_path / "notes_test.db"
    return Settings(
        environment="test",
        database_url=f"sqlite+aiosqlite:///{db_path}",
        auth_tokens_json=json.dumps(TEST_TOKENS),
        legacy_sunset="Thu, 31 Dec 2026 23:59:59 GMT",
        log_level="WARNING",
        _env_file=None,
    )


@pytest_asyncio.fixture
async def db_engine(test_settings):
    engine = build_engine(test_settings)
    await create_schema(engine)
    yield engine
    await dispose_engine(engine)


@pytest_asyncio.fixture
async def db_session(db_engine):
    """
    A session for repository tests.

    The repository only flushes, so everything a test writes stays inside
    this session's transaction and is discarded on close.
    """
    session_factory = build_session_factory(db_engine)
    async with session_factory() as session:
        yield session


@pytest.fixture
def clock():
    return ManualClock()


@pytest.fixture
def mock_repository():
    """AsyncMock standing in for NotesRepository."""
    repo = AsyncMock()
    repo.list = AsyncMock()
    repo.create = AsyncMock()
    repo.find_by_id = AsyncMock()
    repo.update = AsyncMock()
    repo.delete = AsyncMock()
    return repo


# ══════════════════════════════════════════════════════════════════════════
# HTTP
# ══════════════════════════════════════════════════════════════════════════

@pytest_asyncio.fixture
async def app(test_settings):
    """
    A fresh application per test.

    ASGITransport does not run the lifespan, so the schema is created here
    and the engine disposed afterwards.
    """
    application = create_app(test_settings)
    await create_schema(application.state.engine)
    yield application
    await dispose_engine(application.state.engine)


@pytest_asyncio.fixture
async def test_client(app):
    """
    Usage:
        async def test_health(test_client):
            response = await test_client.get("/health")
            assert response.status_code == 200
    """
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client


@pytest.fixture
def auth_headers():
    """Authorization headers keyed by token name (reader, writer, deleter, admin)."""
    return {
        token.split("-")[0]: {"Authorization": f"Bearer {token}"}
        for token in TEST_TOKENS
    }
