"""Tests for the SQLite connection pool."""

import asyncio
from pathlib import Path
from unittest.mock import MagicMock, patch

import aiosqlite
import pytest

from erp.infrastructure.storage.sqlite import connection as conn_module
from erp.infrastructure.storage.sqlite.connection import (
    ConnectionPool,
    close_pool,
    get_connection,
    get_pool,
    get_transaction,
    open_connection,
)


@pytest.fixture
def mock_settings(temp_db_path: Path):
    settings = MagicMock()
    settings.storage.db_path = temp_db_path
    settings.storage.pool_size = 2
    settings.storage.busy_timeout = 1000
    return settings


@pytest.fixture
async def notes_pool(temp_db_path: Path):
    """Single-connection pool over a database with one scratch table."""
    async with aiosqlite.connect(temp_db_path) as conn:
        await conn.execute("CREATE TABLE notes (id INTEGER PRIMARY KEY, body TEXT)")
        await conn.commit()
    pool = ConnectionPool(temp_db_path, size=1)
    await pool.open()
    yield pool
    await pool.close()


class TestOpenConnection:
    async def test_pragmas_and_row_factory(self, temp_db_path: Path):
        conn = await open_connection(temp_db_path, busy_timeout=1234)

        cursor = await conn.execute("PRAGMA journal_mode")
        assert (await cursor.fetchone())[0].lower() == "wal"
        cursor = await conn.execute("PRAGMA foreign_keys")
        assert (await cursor.fetchone())[0] == 1
        cursor = await conn.execute("PRAGMA busy_timeout")
        assert (await cursor.fetchone())[0] == 1234
        assert conn.row_factory == aiosqlite.Row
        await conn.close()

    async def test_creates_missing_directory(self, tmp_path: Path):
        db_path = tmp_path / "data" / "nested" / "erp.db"
        conn = await open_connection(db_path)
        assert db_path.parent.exists()
        await conn.close()


class TestPoolLifecycle:
    def test_starts_closed(self, temp_db_path: Path):
        pool = ConnectionPool(temp_db_path)
        assert pool.size == 5
        assert pool.busy_timeout == 30000
        assert not pool.is_open
        assert pool.idle == 0

    async def test_open_is_idempotent(self, temp_db_path: Path):
        pool = ConnectionPool(temp_db_path, size=2)

        await pool.open()
        await pool.open()

        assert pool.idle == 2
        await pool.close()
        assert not pool.is_open
        assert pool.idle == 0

    async def test_acquire_opens_lazily(self, temp_db_path: Path):
        pool = ConnectionPool(temp_db_path, size=1)
        async with pool.acquire() as conn:
            await conn.execute("SELECT 1")
        assert pool.is_open
        await pool.close()


class TestAcquire:
    async def test_connection_goes_back(self, notes_pool: ConnectionPool):
        async with notes_pool.acquire():
            assert notes_pool.idle == 0
        assert notes_pool.idle == 1

    async def test_connection_goes_back_on_error(self, notes_pool: ConnectionPool):
        with pytest.raises(ValueError):
            async with notes_pool.acquire():
                raise ValueError("boom")
        assert notes_pool.idle == 1

    async def test_borrower_waits_when_exhausted(self, notes_pool: ConnectionPool):
        async with notes_pool.acquire():
            with pytest.raises(asyncio.TimeoutError):
                async with asyncio.timeout(0.1):
                    async with notes_pool.acquire():
                        pass


class TestTransaction:
    async def test_commits_on_success(self, notes_pool: ConnectionPool):
        async with notes_pool.transaction() as conn:
            await conn.execute("INSERT INTO notes (body) VALUES ('kept')")

        async with notes_pool.acquire() as conn:
            cursor = await conn.execute("SELECT body FROM notes")
            assert (await cursor.fetchone())["body"] == "kept"

    async def test_rolls_back_on_error(self, notes_pool: ConnectionPool):
        with pytest.raises(ValueError):
            async with notes_pool.transaction(immediate=True) as conn:
                await conn.execute("INSERT INTO notes (body) VALUES ('lost')")
                raise ValueError("boom")

        async with notes_pool.acquire() as conn:
            cursor = await conn.execute("SELECT COUNT(*) FROM notes")
            assert (await cursor.fetchone())[0] == 0

    async def test_immediate_takes_write_lock(self, temp_db_path: Path):
        pool = ConnectionPool(temp_db_path, size=2, busy_timeout=50)
        await pool.open()

        async with pool.transaction(immediate=True):
            with pytest.raises(aiosqlite.OperationalError, match="locked"):
                async with pool.transaction(immediate=True):
                    pass

        await pool.close()


class TestProcessPool:
    async def test_get_pool_is_shared(self, mock_settings):
        conn_module._pool = None

        with patch.object(conn_module, "get_settings", return_value=mock_settings):
            first = await get_pool()
            second = await get_pool()

            assert first is second
            assert first.db_path == mock_settings.storage.db_path
            assert first.size == 2

            await close_pool()
        assert conn_module._pool is None

    async def test_close_without_pool(self):
        conn_module._pool = None
        await close_pool()

    async def test_connection_helpers(self, mock_settings):
        conn_module._pool = None

        with patch.object(conn_module, "get_settings", return_value=mock_settings):
            async with get_transaction() as conn:
                await conn.execute("CREATE TABLE t (x INTEGER)")
                await conn.execute("INSERT INTO t VALUES (1)")

            async with get_connection() as conn:
                cursor = await conn.execute("SELECT x FROM t")
                assert (await cursor.fetchone())[0] == 1

            await close_pool()
