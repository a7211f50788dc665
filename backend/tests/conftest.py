"""
Pytest configuration and fixtures for the LeetSync backend tests.

Provides:
- In-memory SQLite database per test (aiosqlite)
- A stored user owning LeetCode sessions
- A throwaway SecretCipher
"""
import os

# Set test environment before importing app
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///:memory:"
os.environ["SECRET_KEY"] = "test-secret-key"
os.environ["ENVIRONMENT"] = "test"

import pytest
import pytest_asyncio
from cryptography.fernet import Fernet
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from app.core.security import SecretCipher
from app.models import Base, User


@pytest_asyncio.fixture
async def db_engine():
    engine = create_async_engine("sqlite+aiosqlite:///:memory:", poolclass=StaticPool)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest_asyncio.fixture
async def db(db_engine):
    """Database session for each test, discarded with the in-memory engine."""
    factory = async_sessionmaker(db_engine, class_=AsyncSession, expire_on_commit=False)
    async with factory() as session:
        yield session


@pytest_asyncio.fixture
async def user(db):
    user = User(email="alice@example.com", name="Alice", leetcode_username="alice")
    db.add(user)
    await db.commit()
    return user


@pytest.fixture
def cipher():
    return SecretCipher(Fernet.generate_key())
