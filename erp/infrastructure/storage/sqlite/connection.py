"""Pooled aiosqlite connections to the ERP database."""

import asyncio
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from pathlib import Path

import aiosqlite

from erp.config import get_logger, get_settings

logger = get_logger(__name__)

# WAL lets the dashboard read while a lifecycle write holds the lock.
PRAGMAS = ("journal_mode=WAL", "synchronous=NORMAL", "foreign_keys=ON")


async def open_connection(db_path: Path, busy_timeout: int = 30000) -> aiosqlite.Connection:
    """Open one connection with rows addressable by column name."""
    db_path.parent.mkdir(parents=True, exist_ok=True)
    conn = await aiosqlite.connect(db_path)
    conn.row_factory = aiosqlite.Row
    for pragma in (*PRAGMAS, f"busy_timeout={busy_timeout}"):
        await conn.execute(f"PRAGMA {pragma}")
    return conn


class ConnectionPool:
    """
    Fixed number of connections lent out one borrower at a time.

    Borrowers wait when every connection is out. Connections are opened
    lazily on first use, or eagerly through ``open()`` at startup.
    """

    def __init__(self, db_path: Path, size: int = 5, busy_timeout: int = 30000):
        self.db_path = db_path
        self.size = size
        self.busy_timeout = busy_timeout
        self._idle: asyncio.Queue[aiosqlite.Connection] = asyncio.Queue()
        self._opened: list[aiosqlite.Connection] = []
        self._guard = asyncio.Lock()

    @property
    def is_open(self) -> bool:
        return bool(self._opened)

    @property
    def idle(self) -> int:
        """Connections currently available to borrow."""
        return self._idle.qsize()

    async def open(self) -> None:
        async with self._guard:
            if self._opened:
                return
            for _ in range(self.size):
                conn = await open_connection(self.db_path, self.busy_timeout)
                self._opened.append(conn)
                self._idle.put_nowait(conn)
        logger.info("connection_pool_opened", db_path=str(self.db_path), size=self.size)

    @asynccontextmanager
    async def acquire(self) -> AsyncIterator[aiosqlite.Connection]:
        if not self._opened:
            await self.open()
        conn = await self._idle.get()
        try:
            yield conn
        finally:
            self._idle.put_nowait(conn)

    @asynccontextmanager
    async def transaction(self, immediate: bool = False) -> AsyncIterator[aiosqlite.Connection]:
        """
        Borrow a connection for one transaction: commit on exit, roll back on error.

        ``immediate`` issues BEGIN IMMEDIATE so the write lock is held before
        the first read; competing writers wait up to ``busy_timeout``.
        """
        async with self.acquire() as conn:
            if immediate:
                await conn.execute("BEGIN IMMEDIATE")
            try:
                yield conn
            except Exception:
                await conn.rollback()
                raise
            await conn.commit()

    async def close(self) -> None:
        async with self._guard:
            opened, self._opened = self._opened, []
            self._idle = asyncio.Queue()
            for conn in opened:
                await conn.close()
        logger.info("connection_pool_closed", db_path=str(self.db_path))


_pool: ConnectionPool | None = None


async def get_pool() -> ConnectionPool:
    """Process-wide pool over the configured database, opened on first call."""
    global _pool
    if _pool is None:
        storage = get_settings().storage
        _pool = ConnectionPool(
            storage.db_path, size=storage.pool_size, busy_timeout=storage.busy_timeout
        )
        await _pool.open()
    return _pool


async def close_pool() -> None:
    global _pool
    pool, _pool = _pool, None
    if pool is not None:
        await pool.close()


@asynccontextmanager
async def get_connection() -> AsyncIterator[aiosqlite.Connection]:
    pool = await get_pool()
    async with pool.acquire() as conn:
        yield conn


@asynccontextmanager
async def get_transaction(immediate: bool = False) -> AsyncIterator[aiosqlite.Connection]:
    pool = await get_pool()
    async with pool.transaction(immediate=immediate) as conn:
        yield conn
