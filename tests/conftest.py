"""Pytest configuration and fixtures."""

from collections.abc import AsyncGenerator
from pathlib import Path

import pytest
from httpx import ASGITransport, AsyncClient

from erp.application.services import reset_services
from erp.config import reset_settings
from erp.core.entities import Contact, ContactType, Product
from erp.infrastructure.storage import sqlite as sqlite_module
from erp.infrastructure.storage.sqlite import (
    SQLiteContactStore,
    close_pool,
    connection,
)
from erp.infrastructure.storage.sqlite.migrations.migrator import initialize_database


def _reset_singletons() -> None:
    reset_settings()
    reset_services()
    connection._pool = None
    sqlite_module._product_store = None
    sqlite_module._stock_ledger = None
    sqlite_module._document_store = None
    sqlite_module._contact_store = None
    sqlite_module._warehouse_store = None


@pytest.fixture
async def migrated_db(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> AsyncGenerator[Path, None]:
    """Fresh, fully migrated database in a temp dir, wired into the global pool."""
    monkeypatch.setenv("STORAGE_DATA_DIR", str(tmp_path))
    monkeypatch.setenv("STORAGE_POOL_SIZE", "3")
    monkeypatch.setenv("STORAGE_BUSY_TIMEOUT", "5000")
    _reset_singletons()

    db_path = tmp_path / "erp.db"
    await initialize_database(db_path)

    yield db_path

    await close_pool()
    _reset_singletons()


@pytest.fixture
async def client_contact(migrated_db: Path) -> Contact:
    """A stored client."""
    store = SQLiteContactStore()
    return await store.create_contact(
        Contact(name="Hotel Atlas", company="Atlas SARL", contact_type=ContactType.CLIENT)
    )


@pytest.fixture
async def supplier_contact(migrated_db: Path) -> Contact:
    """A stored supplier."""
    store = SQLiteContactStore()
    return await store.create_contact(
        Contact(name="Sahara Supply", contact_type=ContactType.SUPPLIER)
    )


@pytest.fixture
def sample_product() -> Product:
    """Unsaved product with a reorder threshold of 5."""
    return Product(
        sku="CHAIR-001",
        name="Terrace Chair",
        category="Furniture",
        price=250.0,
        min_stock=5,
    )


@pytest.fixture
async def async_client() -> AsyncGenerator[AsyncClient, None]:
    """Async client against the app, without running its lifespan."""
    from erp.api.main import app

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
