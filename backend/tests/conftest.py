"""
NoteKeeper Backend: Test Configuration (conftest.py)
====================================================

What:  Shared pytest fixtures for the entire test suite.
How:   pytest auto-discovers conftest.py and makes fixtures available to all tests.

Fixture Hierarchy (all function-scoped):
    ├── mock_db_session: Mock AsyncSession for row-count and error paths
    ├── db_engine:       In-memory aiosqlite engine with all tables created
    ├── db_session:      AsyncSession bound to db_engine
    ├── alice / bob:     Two registered users, as Identity values
    ├── auth_headers:    Factory for "Authorization: Bearer ..." headers
    └── test_client:     HTTPX AsyncClient with the DB dependency overridden
"""

import os

# Override settings BEFORE any notekeeper import: `settings` is built at import
os.environ["DATABASE_URL"] = "sqlite+aiosqlite://"
os.environ["JWT_SECRET_KEY"] = "test-secret-not-real"
os.environ["LOG_LEVEL"] = "WARNING"

from datetime import datetime, timezone
from typing import AsyncGenerator
from unittest.mock import AsyncMock, MagicMock

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from notekeeper.database import Base, get_db_session
from notekeeper.identity import Identity
from notekeeper.models import User
from notekeeper.services.token_service import token_service


# ══════════════════════════════════════════════════════════════════════════
# Mocked Session
# ══════════════════════════════════════════════════════════════════════════

@pytest.fixture
def mock_db_session():
    """
    Provides a mock async database session.

    Usage:
        mock_db_session.execute = AsyncMock(side_effect=[lock_result, write_result])
        ok = await note_service.update_note(mock_db_session, owner, 1, "t", "c")
    """
    session = AsyncMock()
    session.execute = AsyncMock()
    session.flush = AsyncMock()
    session.commit = AsyncMock()
    session.rollback = AsyncMock()
    session.close = AsyncMock()
    session.add = MagicMock()
    return session


# ══════════════════════════════════════════════════════════════════════════
# Real Database (in-memory SQLite)
# ══════════════════════════════════════════════════════════════════════════

@pytest_asyncio.fixture
async def db_engine():
    """
    A fresh in-memory database per test.

    StaticPool keeps one connection, so every session in the test sees the
    same in-memory database.
    """
    engine = create_async_engine("sqlite+aiosqlite://", poolclass=StaticPool)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(db_engine):
    return async_sessionmaker(db_engine, class_=AsyncSession, expire_on_commit=False)


@pytest_asyncio.fixture
async def db_session(session_factory) -> AsyncGenerator[AsyncSession, None]:
    async with session_factory() as session:
        yield session


async def _insert_user(session_factory, username: str) -> Identity:
    async with session_factory() as session:
        user = User(
            email=f"{username}@example.com",
            username=username,
            password_hash="not-a-real-hash",
            created_at=datetime.now(timezone.utc),
        )
        session.add(user)
        await session.commit()
        return Identity(user_id=user.id)


@pytest_asyncio.fixture
async def alice(session_factory) -> Identity:
    return await _insert_user(session_factory, "alice")


@pytest_asyncio.fixture
async def bob(session_factory) -> Identity:
    return await _insert_user(session_factory, "bob")


@pytest.fixture
def auth_headers():
    """
    Builds bearer headers for an Identity using the real token issuer.

    Usage:
        await test_client.get("/api/notes", headers=auth_headers(alice))
    """
    def _headers(identity: Identity) -> dict:
        user = User(id=identity.user_id, username=f"user{identity.user_id}",
                    email=f"user{identity.user_id}@example.com")
        token = token_service.create_token(user).token
        return {"Authorization": f"Bearer {token}"}
    return _headers


# ══════════════════════════════════════════════════════════════════════════
# HTTP Client
# ══════════════════════════════════════════════════════════════════════════

@pytest_asyncio.fixture
async def test_client(session_factory):
    """
    HTTPX AsyncClient talking to a fresh app over ASGITransport.

    get_db_session is overridden to use the in-memory database with the
    same commit/rollback behavior as production.
    """
    from notekeeper.main import create_app

    app = create_app()

    async def override_get_db_session():
        async with session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    app.dependency_overrides[get_db_session] = override_get_db_session

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client

    app.dependency_overrides.clear()
