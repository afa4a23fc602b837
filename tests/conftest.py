"""
Pytest fixtures for test database, client, and authentication.

Each test gets its own SQLite database file so concurrent-booking tests use
real separate connections and real write locks. Redis is disabled.
"""

import os

os.environ.setdefault("REDIS_ENABLED", "false")
os.environ.setdefault("ENVIRONMENT", "test")

from typing import AsyncGenerator

import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker

from tigertix.core.security import create_access_token, hash_password
from tigertix.db.init_db import init_db
from tigertix.db.session import create_db_engine, create_session_factory, get_db
from tigertix.main import app
from tigertix.models import Event, User


@pytest_asyncio.fixture
async def engine(tmp_path) -> AsyncGenerator[AsyncEngine, None]:
    """Fresh schema in a per-test database file."""
    test_engine = create_db_engine(f"sqlite+aiosqlite:///{tmp_path / 'tigertix_test.db'}")
    await init_db(test_engine, seed=False)
    yield test_engine
    await test_engine.dispose()


@pytest_asyncio.fixture
async def session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return create_session_factory(engine)


@pytest_asyncio.fixture
async def db_session(session_factory) -> AsyncGenerator[AsyncSession, None]:
    async with session_factory() as session:
        yield session


@pytest_asyncio.fixture
async def client(session_factory) -> AsyncGenerator[AsyncClient, None]:
    """HTTP client whose requests each get their own session on the test database."""

    async def override_get_db():
        async with session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    app.dependency_overrides[get_db] = override_get_db

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()


async def _add_event(session_factory, name: str, date: str, tickets: int) -> Event:
    async with session_factory() as session:
        event = Event(name=name, date=date, tickets=tickets)
        session.add(event)
        await session.commit()
        return event


@pytest_asyncio.fixture
async def jazz_night(session_factory) -> Event:
    """The reference scenario: Jazz Night with 50 tickets."""
    return await _add_event(session_factory, "Jazz Night", "2025-12-01", 50)


@pytest_asyncio.fixture
async def last_ticket_event(session_factory) -> Event:
    return await _add_event(session_factory, "Poetry Slam", "2025-11-20", 1)


@pytest_asyncio.fixture
async def small_event(session_factory) -> Event:
    return await _add_event(session_factory, "Chamber Trio", "2025-10-30", 3)


@pytest_asyncio.fixture
async def sold_out_event(session_factory) -> Event:
    return await _add_event(session_factory, "Sold Out Show", "2025-09-01", 0)


@pytest_asyncio.fixture
async def test_user(session_factory) -> User:
    async with session_factory() as session:
        user = User(email="test@example.com", password_hash=hash_password("testpassword123"))
        session.add(user)
        await session.commit()
        return user


@pytest_asyncio.fixture
async def auth_headers(test_user: User) -> dict:
    token = create_access_token(data={"sub": str(test_user.id)})
    return {"Authorization": f"Bearer {token}"}
