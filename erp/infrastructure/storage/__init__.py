"""Storage infrastructure implementations."""

from erp.infrastructure.storage.sqlite import (
    SQLiteContactStore,
    SQLiteDocumentStore,
    SQLiteProductStore,
    SQLiteSequenceAllocator,
    SQLiteStockLedger,
    SQLiteUnitOfWork,
    SQLiteWarehouseStore,
    close_pool,
    get_connection,
    get_pool,
    get_transaction,
)

__all__ = [
    # SQLite stores
    "SQLiteProductStore",
    "SQLiteStockLedger",
    "SQLiteDocumentStore",
    "SQLiteSequenceAllocator",
    "SQLiteContactStore",
    "SQLiteWarehouseStore",
    "SQLiteUnitOfWork",
    # Connection pool
    "get_pool",
    "close_pool",
    "get_connection",
    "get_transaction",
]
