"""SQLite storage implementations."""

from erp.infrastructure.storage.sqlite.connection import (
    ConnectionPool,
    close_pool,
    get_connection,
    get_pool,
    get_transaction,
)
from erp.infrastructure.storage.sqlite.contact_store import (
    SQLiteContactStore,
    SQLiteWarehouseStore,
)
from erp.infrastructure.storage.sqlite.document_store import (
    DOCUMENT_TABLES,
    SQLiteDocumentStore,
)
from erp.infrastructure.storage.sqlite.inventory_store import (
    SQLiteProductStore,
    SQLiteStockLedger,
)
from erp.infrastructure.storage.sqlite.sequence_store import SQLiteSequenceAllocator
from erp.infrastructure.storage.sqlite.unit_of_work import (
    SQLiteUnitOfWork,
    unit_of_work_factory,
)

# Singleton instances
_product_store: SQLiteProductStore | None = None
_stock_ledger: SQLiteStockLedger | None = None
_document_store: SQLiteDocumentStore | None = None
_contact_store: SQLiteContactStore | None = None
_warehouse_store: SQLiteWarehouseStore | None = None


async def get_product_store() -> SQLiteProductStore:
    """Get singleton product store instance."""
    global _product_store
    if _product_store is None:
        _product_store = SQLiteProductStore()
    return _product_store


async def get_stock_ledger() -> SQLiteStockLedger:
    """Get singleton stock ledger instance (read paths; writes use a unit of work)."""
    global _stock_ledger
    if _stock_ledger is None:
        _stock_ledger = SQLiteStockLedger()
    return _stock_ledger


async def get_document_store() -> SQLiteDocumentStore:
    """Get singleton document store instance."""
    global _document_store
    if _document_store is None:
        _document_store = SQLiteDocumentStore()
    return _document_store


async def get_contact_store() -> SQLiteContactStore:
    """Get singleton contact store instance."""
    global _contact_store
    if _contact_store is None:
        _contact_store = SQLiteContactStore()
    return _contact_store


async def get_warehouse_store() -> SQLiteWarehouseStore:
    """Get singleton warehouse store instance."""
    global _warehouse_store
    if _warehouse_store is None:
        _warehouse_store = SQLiteWarehouseStore()
    return _warehouse_store


__all__ = [
    # Connection
    "ConnectionPool",
    "get_pool",
    "close_pool",
    "get_connection",
    "get_transaction",
    # Store classes
    "SQLiteProductStore",
    "SQLiteStockLedger",
    "SQLiteDocumentStore",
    "SQLiteSequenceAllocator",
    "SQLiteContactStore",
    "SQLiteWarehouseStore",
    "DOCUMENT_TABLES",
    # Unit of work
    "SQLiteUnitOfWork",
    "unit_of_work_factory",
    # Factory functions
    "get_product_store",
    "get_stock_ledger",
    "get_document_store",
    "get_contact_store",
    "get_warehouse_store",
]
