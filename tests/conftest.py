"""Pytest configuration and shared fixtures."""

import os

# Settings are read at import time; point them at an in-memory database first
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite://")
os.environ.setdefault("ENVIRONMENT", "test")
os.environ.setdefault("RELATIONSHIP_MAX_WORKERS", "1")

from datetime import date

import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from warmpath.core.database import Base
from warmpath.database import models  # noqa: F401

from factories import AS_OF


@pytest.fixture
def as_of() -> date:
    """Fixed reference day so recency bands are deterministic."""
    return AS_OF


@pytest_asyncio.fixture
async def db_engine():
    """In-memory SQLite engine with the full schema created."""
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest_asyncio.fixture
async def session_maker(db_engine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(db_engine, class_=AsyncSession, expire_on_commit=False)


@pytest_asyncio.fixture
async def db_session(session_maker):
    """Async session bound to the in-memory database."""
    async with session_maker() as session:
        yield session
