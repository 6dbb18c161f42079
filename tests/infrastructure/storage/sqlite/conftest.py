"""Pytest fixtures for SQLite storage tests."""

from pathlib import Path

import pytest

from erp.core.entities import Product
from erp.infrastructure.storage.sqlite import (
    SQLiteDocumentStore,
    SQLiteProductStore,
    SQLiteStockLedger,
)


@pytest.fixture
def temp_db_path(tmp_path: Path) -> Path:
    """Create a temporary database path."""
    return tmp_path / "test.db"


@pytest.fixture
def product_store(migrated_db: Path) -> SQLiteProductStore:
    return SQLiteProductStore()


@pytest.fixture
def ledger(migrated_db: Path) -> SQLiteStockLedger:
    return SQLiteStockLedger()


@pytest.fixture
def document_store(migrated_db: Path) -> SQLiteDocumentStore:
    return SQLiteDocumentStore()


@pytest.fixture
async def stored_product(
    product_store: SQLiteProductStore, sample_product: Product
) -> Product:
    """The sample product, persisted with zero stock."""
    sample_product.id = "prod-chair"
    return await product_store.create_product(sample_product)
