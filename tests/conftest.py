"""
Root Pytest Fixtures.

Shared fixtures available to all test types.

Test Database Configuration:
    Tests use an in-memory SQLite database through aiosqlite. Every test
    gets a fresh engine and fresh tables, so ids always start from the
    beginning and no test can see another test's rows.
"""

from collections.abc import AsyncGenerator
from pathlib import Path

import pytest
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import StaticPool

from mynotes.core.config import get_app_config, get_settings
from mynotes.core.database import init_db
from mynotes.services.note_store import NoteStore

PROJECT_ROOT = Path(__file__).resolve().parent.parent


# =============================================================================
# Configuration Fixtures
# =============================================================================


@pytest.fixture
def project_root(monkeypatch: pytest.MonkeyPatch) -> Path:
    """Run the test from the project root so config/settings is found."""
    monkeypatch.chdir(PROJECT_ROOT)
    return PROJECT_ROOT


@pytest.fixture
def clear_config_cache():
    """Clear lru_cache between tests so each test gets a fresh load."""
    get_settings.cache_clear()
    get_app_config.cache_clear()
    yield
    get_settings.cache_clear()
    get_app_config.cache_clear()


# =============================================================================
# Database Fixtures
# =============================================================================


@pytest.fixture
async def db_engine() -> AsyncGenerator[AsyncEngine, None]:
    """
    Create an in-memory test database with the schema in place.

    StaticPool keeps the single in-memory connection alive across
    sessions for the lifetime of the engine.
    """
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        echo=False,
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    await init_db(engine)

    yield engine

    await engine.dispose()


@pytest.fixture
def db_session_factory(db_engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    """Session factory bound to the test engine."""
    return async_sessionmaker(
        db_engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )


# =============================================================================
# Store Fixtures
# =============================================================================


@pytest.fixture
def store(db_session_factory: async_sessionmaker[AsyncSession]) -> NoteStore:
    """Empty note store with event publishing on."""
    return NoteStore(db_session_factory, publish_events=True)


@pytest.fixture
async def seeded_store(store: NoteStore) -> NoteStore:
    """Note store holding the default palette and the two default notes."""
    await store.seed_if_empty()
    return store
