"""
Core pytest configuration for the entire test suite.

Only the essential setup shared by all tests lives here: logging, the test database
engine/session, and the FastAPI app wired to that database. Domain fixtures are in
tests/test_fixtures/ and imported at the bottom of this module.
"""

from __future__ import annotations

# -------------------------------
# Standard library imports
# -------------------------------
import os
import logging
from urllib.parse import urlparse
from typing import AsyncGenerator

# -------------------------------
# Early logging tuning (IMPORTANT)
# -------------------------------
# Quieten third-party loggers before importing modules that may initialize them.
NOISY_LOGGERS = (
    "sqlalchemy",
    "sqlalchemy.engine",
    "sqlalchemy.engine.Engine",
    "aiosqlite",
    "asyncio",
    "httpx",
)
for _name in NOISY_LOGGERS:
    logging.getLogger(_name).setLevel(logging.WARNING)

# -------------------------------
# Third-party / project imports
# -------------------------------
import httpx
import pytest
from fastapi import FastAPI
from pytest import FixtureRequest
from sqlalchemy.ext.asyncio import (
    AsyncSession,
    create_async_engine,
    async_sessionmaker,
    AsyncEngine,
)
from sqlalchemy.pool import StaticPool

from user_service.config import get_settings
from user_service.core.logging.builder import setup_logging
from user_service.database.base import Base
from user_service.database.session import get_async_session
from user_service.main import create_app
from user_service.models import user  # noqa: F401 - registers the users table on Base.metadata

settings = get_settings()
logger = logging.getLogger(__name__)


# -------------------------------
# Logging: install application logging once
# -------------------------------
@pytest.fixture(scope="session", autouse=True)
def configure_logging(request: FixtureRequest):
    """
    Install the application's dictConfig for the whole session.

    dictConfig drops the root handlers that exist at that moment, which can include
    pytest's capture handler; it is re-attached so `caplog.records` keeps working.
    """
    setup_logging(settings)

    caplog_plugin = request.config.pluginmanager.getplugin("logging-plugin")
    handler = getattr(caplog_plugin, "caplog_handler", None)
    if handler is not None and handler not in logging.getLogger().handlers:
        logging.getLogger().addHandler(handler)

    yield


# ------------------------------------------------------------------------------------------------
# Test database URL
# ------------------------------------------------------------------------------------------------

def safe_log_db_url(db_url: str) -> str:
    """
    Database URL without credentials, for logging.
    """
    parsed = urlparse(db_url)
    return f"{parsed.scheme}://{parsed.hostname or ''}:{parsed.port or ''}/{parsed.path.lstrip('/')}"


def get_test_database_url() -> str:
    """
    1. `TEST_DATABASE_URL` environment variable (CI override, e.g. a Postgres container)
    2. in-memory SQLite otherwise: fast, isolated, nothing to clean up
    """
    return os.getenv("TEST_DATABASE_URL", "sqlite+aiosqlite:///:memory:")


TEST_DATABASE_URL = get_test_database_url()
IS_SQLITE = TEST_DATABASE_URL.startswith("sqlite")
logger.info("Using test DB: %s", safe_log_db_url(TEST_DATABASE_URL))


# ------------------------------------------------------------------------------------------------
# DATABASE FIXTURES
# ------------------------------------------------------------------------------------------------

@pytest.fixture()
async def async_engine() -> AsyncGenerator[AsyncEngine, None]:
    """
    A fresh schema per test.

    In-memory SQLite lives as long as its connection, so the engine uses a StaticPool
    (one shared connection) and every session of the test sees the same database.
    """
    if IS_SQLITE:
        engine = create_async_engine(
            TEST_DATABASE_URL,
            connect_args={"check_same_thread": False},
            poolclass=StaticPool,
        )
    else:
        engine = create_async_engine(TEST_DATABASE_URL, pool_pre_ping=True)

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await engine.dispose()


@pytest.fixture()
def session_maker(async_engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(bind=async_engine, class_=AsyncSession, expire_on_commit=False)


@pytest.fixture()
async def db_session(session_maker: async_sessionmaker[AsyncSession]) -> AsyncGenerator[AsyncSession, None]:
    async with session_maker() as session:
        yield session
        await session.rollback()


# ------------------------------------------------------------------------------------------------
# APP / HTTP FIXTURES
# ------------------------------------------------------------------------------------------------

@pytest.fixture()
def app(session_maker: async_sessionmaker[AsyncSession]) -> FastAPI:
    """
    The real application, with the DB dependency pointed at the test engine.
    Logging is already configured by `configure_logging`.
    """
    application = create_app(settings, configure_logging=False, create_tables=False)

    async def _override_session() -> AsyncGenerator[AsyncSession, None]:
        async with session_maker() as session:
            yield session

    application.dependency_overrides[get_async_session] = _override_session
    return application


@pytest.fixture()
async def client(app: FastAPI) -> AsyncGenerator[httpx.AsyncClient, None]:
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


# Domain fixtures
from .test_fixtures.repository_fixtures import (  # noqa: E402,F401
    user_repository,
    user_service,
    sample_user_data,
    create_user,
    created_user,
    multiple_users,
)
