"""Tests for the SQLite document number allocator."""

import asyncio
from datetime import date

from erp.core.entities.document import DocumentType
from erp.infrastructure.storage.sqlite.connection import get_connection
from erp.infrastructure.storage.sqlite.sequence_store import SQLiteSequenceAllocator

MARCH = date(2026, 3, 15)


async def _insert_invoice_header(number: str) -> None:
    async with get_connection() as conn:
        await conn.execute(
            "INSERT INTO invoices (id, document_number, date, status) "
            "VALUES (?, ?, '2026-03-01', 'draft')",
            (number, number),
        )
        await conn.commit()


class TestAtomicAllocation:
    async def test_sequential_numbers(self, migrated_db):
        allocator = SQLiteSequenceAllocator()

        first = await allocator.allocate(DocumentType.INVOICE, MARCH)
        second = await allocator.allocate(DocumentType.INVOICE, MARCH)

        assert first == "INV-03/26/0001"
        assert second == "INV-03/26/0002"
        assert await allocator.peek(DocumentType.INVOICE, MARCH) == 2

    async def test_buckets_are_independent(self, migrated_db):
        allocator = SQLiteSequenceAllocator()

        await allocator.allocate(DocumentType.INVOICE, MARCH)
        april = await allocator.allocate(DocumentType.INVOICE, date(2026, 4, 1))
        note = await allocator.allocate(DocumentType.DELIVERY_NOTE, MARCH)
        next_year = await allocator.allocate(DocumentType.INVOICE, date(2027, 3, 1))

        assert april == "INV-04/26/0001"
        assert note == "DN-03/26/0001"
        assert next_year == "INV-03/27/0001"

    async def test_peek_empty_bucket(self, migrated_db):
        assert await SQLiteSequenceAllocator().peek(DocumentType.ESTIMATE, MARCH) == 0

    async def test_width(self, migrated_db):
        allocator = SQLiteSequenceAllocator(width=6)
        assert await allocator.allocate(DocumentType.CREDIT_NOTE, MARCH) == "CN-03/26/000001"

    async def test_resync_skips_numbers_already_used(self, migrated_db):
        await _insert_invoice_header("INV-03/26/0007")
        allocator = SQLiteSequenceAllocator()

        plain = await allocator.allocate(DocumentType.INVOICE, MARCH)
        resynced = await allocator.allocate(DocumentType.INVOICE, MARCH, resync=True)
        after = await allocator.allocate(DocumentType.INVOICE, MARCH)

        assert plain == "INV-03/26/0001"
        assert resynced == "INV-03/26/0008"
        assert after == "INV-03/26/0009"

    async def test_resync_never_moves_backwards(self, migrated_db):
        allocator = SQLiteSequenceAllocator()
        for _ in range(3):
            await allocator.allocate(DocumentType.INVOICE, MARCH)

        assert await allocator.allocate(DocumentType.INVOICE, MARCH, resync=True) == (
            "INV-03/26/0004"
        )

    async def test_concurrent_allocations_are_unique(self, migrated_db):
        allocator = SQLiteSequenceAllocator()

        numbers = await asyncio.gather(
            *(allocator.allocate(DocumentType.DELIVERY_NOTE, MARCH) for _ in range(10))
        )

        assert len(set(numbers)) == 10
        assert sorted(numbers) == [f"DN-03/26/{n:04d}" for n in range(1, 11)]


class TestScanAllocation:
    async def test_starts_after_highest_existing(self, migrated_db):
        await _insert_invoice_header("INV-03/26/0004")
        allocator = SQLiteSequenceAllocator(atomic=False)

        assert await allocator.allocate(DocumentType.INVOICE, MARCH) == "INV-03/26/0005"

    async def test_repeats_until_a_document_is_stored(self, migrated_db):
        allocator = SQLiteSequenceAllocator(atomic=False)

        first = await allocator.allocate(DocumentType.INVOICE, MARCH)
        second = await allocator.allocate(DocumentType.INVOICE, MARCH)

        assert first == second == "INV-03/26/0001"
        assert await allocator.peek(DocumentType.INVOICE, MARCH) == 0

    async def test_ignores_other_buckets_and_prefixes(self, migrated_db):
        await _insert_invoice_header("INV-02/26/0009")
        allocator = SQLiteSequenceAllocator(atomic=False)

        assert await allocator.allocate(DocumentType.INVOICE, MARCH) == "INV-03/26/0001"
        assert await allocator.allocate(DocumentType.ESTIMATE, MARCH) == "EST-03/26/0001"
