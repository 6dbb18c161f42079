"""
SQLite document number allocator.

The atomic path bumps a row of ``document_sequences`` with a single upsert
on the caller's transaction, so the number is only consumed if the
document insert commits. The scan path (max existing serial + 1) is kept
as a fallback for when the counter table cannot be used; two writers can
scan the same maximum, so it may hand out duplicates.
"""

from datetime import date, datetime

import aiosqlite

from erp.config import get_logger, get_settings
from erp.core.entities.document import DOCUMENT_PREFIXES, DocumentType
from erp.core.exceptions import SequenceAllocationError, UnknownDocumentTypeError
from erp.core.interfaces.document_store import ISequenceAllocator
from erp.core.services.document_numbers import (
    bucket_prefix,
    format_document_number,
    max_serial,
)
from erp.infrastructure.storage.sqlite.base import SQLiteStore, iso
from erp.infrastructure.storage.sqlite.document_store import HEADER_TABLES

logger = get_logger(__name__)


class SQLiteSequenceAllocator(SQLiteStore, ISequenceAllocator):
    """Allocates PREFIX-MM/YY/NNNN numbers per (type, year, month) bucket."""

    def __init__(
        self,
        conn: aiosqlite.Connection | None = None,
        width: int | None = None,
        atomic: bool | None = None,
    ):
        super().__init__(conn)
        settings = get_settings().documents
        self._width = width or settings.number_width
        self._atomic = settings.atomic_sequences if atomic is None else atomic

    async def allocate(
        self,
        document_type: DocumentType,
        on_date: date | None = None,
        resync: bool = False,
    ) -> str:
        """Return the next number for the bucket."""
        if document_type not in DOCUMENT_PREFIXES:
            raise UnknownDocumentTypeError(str(document_type))
        on_date = on_date or date.today()

        try:
            async with self._writing() as conn:
                if self._atomic:
                    try:
                        serial = await self._increment(conn, document_type, on_date, resync)
                    except aiosqlite.OperationalError as e:
                        logger.warning(
                            "sequence_allocation_degraded",
                            document_type=document_type.value,
                            reason=str(e),
                        )
                        serial = await self._scan_max(conn, document_type, on_date) + 1
                else:
                    logger.warning(
                        "sequence_allocation_degraded",
                        document_type=document_type.value,
                        reason="atomic sequences disabled",
                    )
                    serial = await self._scan_max(conn, document_type, on_date) + 1
        except aiosqlite.Error as e:
            raise SequenceAllocationError(document_type.value, str(e)) from e

        number = format_document_number(document_type, on_date, serial, self._width)
        logger.info(
            "document_number_allocated",
            document_type=document_type.value,
            number=number,
            resync=resync,
        )
        return number

    async def peek(self, document_type: DocumentType, on_date: date | None = None) -> int:
        """Last serial issued for the bucket (0 if none)."""
        on_date = on_date or date.today()
        try:
            async with self._reading() as conn:
                cursor = await conn.execute(
                    """
                    SELECT last_value FROM document_sequences
                    WHERE document_type = ? AND year = ? AND month = ?
                    """,
                    (document_type.value, on_date.year, on_date.month),
                )
                row = await cursor.fetchone()
        except aiosqlite.Error as e:
            raise SequenceAllocationError(document_type.value, str(e)) from e
        return int(row[0]) if row else 0

    async def _increment(
        self,
        conn: aiosqlite.Connection,
        document_type: DocumentType,
        on_date: date,
        resync: bool,
    ) -> int:
        floor = 1
        if resync:
            floor = await self._scan_max(conn, document_type, on_date) + 1

        await conn.execute(
            """
            INSERT INTO document_sequences (document_type, year, month, last_value, updated_at)
            VALUES (?, ?, ?, ?, ?)
            ON CONFLICT (document_type, year, month) DO UPDATE SET
                last_value = MAX(last_value + 1, excluded.last_value),
                updated_at = excluded.updated_at
            """,
            (
                document_type.value,
                on_date.year,
                on_date.month,
                floor,
                iso(datetime.utcnow()),
            ),
        )
        cursor = await conn.execute(
            """
            SELECT last_value FROM document_sequences
            WHERE document_type = ? AND year = ? AND month = ?
            """,
            (document_type.value, on_date.year, on_date.month),
        )
        row = await cursor.fetchone()
        return int(row[0])

    @staticmethod
    async def _scan_max(
        conn: aiosqlite.Connection, document_type: DocumentType, on_date: date
    ) -> int:
        """Highest serial already used in the bucket, across all document tables."""
        pattern = bucket_prefix(document_type, on_date) + "%"
        query = " UNION ALL ".join(
            f"SELECT document_number FROM {table} WHERE document_number LIKE ?"
            for table in HEADER_TABLES
        )
        cursor = await conn.execute(query, [pattern] * len(HEADER_TABLES))
        rows = await cursor.fetchall()
        return max_serial([row[0] for row in rows])
