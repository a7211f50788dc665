import pytest
from unittest.mock import AsyncMock, MagicMock, patch
from sqlalchemy.ext.asyncio import AsyncSession
from app.core.database import get_session, engine, init_db
from app.models.base import Base


@pytest.mark.asyncio
async def test_engine_created():
    assert engine is not None


@pytest.mark.asyncio
async def test_get_session_yields_async_session():
    async for session in get_session():
        assert isinstance(session, AsyncSession)
        break


@pytest.mark.asyncio
async def test_init_db_creates_all_tables():
    mock_conn = MagicMock()
    mock_conn.run_sync = AsyncMock()
    mock_begin = MagicMock()
    mock_begin.__aenter__ = AsyncMock(return_value=mock_conn)
    mock_begin.__aexit__ = AsyncMock(return_value=False)

    with patch("app.core.database.engine") as mock_engine:
        mock_engine.begin.return_value = mock_begin
        await init_db()

    mock_conn.run_sync.assert_awaited_once_with(Base.metadata.create_all)


def test_metadata_registers_tables():
    assert {"users", "leetcode_sessions", "problem_metadata"} <= set(Base.metadata.tables)
