"""Core interfaces (ports) for dependency injection."""

from erp.core.interfaces.contact_store import IContactStore, IWarehouseStore
from erp.core.interfaces.document_store import IDocumentStore, ISequenceAllocator
from erp.core.interfaces.inventory_store import IProductStore, IStockLedger
from erp.core.interfaces.unit_of_work import IUnitOfWork

__all__ = [
    # Inventory interfaces
    "IProductStore",
    "IStockLedger",
    # Document interfaces
    "IDocumentStore",
    "ISequenceAllocator",
    # Contact interfaces
    "IContactStore",
    "IWarehouseStore",
    # Transactions
    "IUnitOfWork",
]
