"""Tests for the SQLite unit of work."""

from datetime import date

import pytest

from erp.core.entities import Product
from erp.core.entities.document import DocumentType
from erp.infrastructure.storage.sqlite import SQLiteProductStore
from erp.infrastructure.storage.sqlite.sequence_store import SQLiteSequenceAllocator
from erp.infrastructure.storage.sqlite.unit_of_work import (
    SQLiteUnitOfWork,
    unit_of_work_factory,
)

MARCH = date(2026, 3, 15)


class TestUnitOfWork:
    async def test_commits_on_success(self, migrated_db, sample_product: Product):
        sample_product.id = "committed"

        async with SQLiteUnitOfWork() as uow:
            created = await uow.products.create_product(sample_product)
            assert uow.products.bound

        assert await SQLiteProductStore().get_product(created.id)

    async def test_rolls_back_every_store(self, migrated_db, sample_product: Product):
        sample_product.id = "rolled-back"

        with pytest.raises(RuntimeError):
            async with SQLiteUnitOfWork() as uow:
                await uow.products.create_product(sample_product)
                await uow.sequences.allocate(DocumentType.INVOICE, MARCH)
                raise RuntimeError("boom")

        assert await SQLiteProductStore().get_product("rolled-back") is None
        assert await SQLiteSequenceAllocator().peek(DocumentType.INVOICE, MARCH) == 0

    async def test_number_is_reissued_after_rollback(self, migrated_db):
        with pytest.raises(RuntimeError):
            async with SQLiteUnitOfWork() as uow:
                await uow.sequences.allocate(DocumentType.INVOICE, MARCH)
                raise RuntimeError("insert failed")

        async with SQLiteUnitOfWork() as uow:
            number = await uow.sequences.allocate(DocumentType.INVOICE, MARCH)

        assert number == "INV-03/26/0001"

    async def test_read_only(self, migrated_db):
        async with SQLiteUnitOfWork(read_only=True) as uow:
            warehouses = await uow.warehouses.list_warehouses()

        assert [w.id for w in warehouses] == ["marrakech"]

    async def test_factory_passes_options(self, migrated_db):
        factory = unit_of_work_factory(atomic_sequences=False)

        reader = factory(read_only=True)
        assert reader.read_only

        async with factory() as uow:
            first = await uow.sequences.allocate(DocumentType.INVOICE, MARCH)
        async with factory() as uow:
            second = await uow.sequences.allocate(DocumentType.INVOICE, MARCH)

        assert first == second
