"""Shared plumbing for SQLite stores."""

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from datetime import date, datetime

import aiosqlite

from erp.infrastructure.storage.sqlite import connection


class SQLiteStore:
    """
    Base for stores that can run standalone or inside a unit of work.

    Standalone, every write opens its own pooled transaction. Bound to a
    connection, the store never commits; the unit of work owning the
    connection does.
    """

    def __init__(self, conn: aiosqlite.Connection | None = None):
        self._conn = conn

    @property
    def bound(self) -> bool:
        return self._conn is not None

    @asynccontextmanager
    async def _reading(self) -> AsyncIterator[aiosqlite.Connection]:
        if self._conn is not None:
            yield self._conn
        else:
            async with connection.get_connection() as conn:
                yield conn

    @asynccontextmanager
    async def _writing(self) -> AsyncIterator[aiosqlite.Connection]:
        if self._conn is not None:
            yield self._conn
        else:
            async with connection.get_transaction(immediate=True) as conn:
                yield conn


def parse_datetime(value: str | None) -> datetime:
    """Parse a stored timestamp, falling back to now for bad values."""
    if value:
        try:
            return datetime.fromisoformat(value)
        except (ValueError, TypeError):
            pass
    return datetime.utcnow()


def parse_date(value: str | None) -> date | None:
    if value:
        try:
            return date.fromisoformat(value[:10])
        except (ValueError, TypeError):
            pass
    return None


def iso(value: date | datetime | None) -> str | None:
    return value.isoformat() if value else None
