"""Abstract unit of work: one transaction shared by a set of stores."""

from abc import ABC, abstractmethod
from types import TracebackType

from erp.core.interfaces.contact_store import IContactStore, IWarehouseStore
from erp.core.interfaces.document_store import IDocumentStore, ISequenceAllocator
from erp.core.interfaces.inventory_store import IProductStore, IStockLedger


class IUnitOfWork(ABC):
    """
    Transaction scope for a lifecycle operation.

    Entering opens a write transaction and binds every store to it.
    Leaving normally commits; leaving with an exception rolls back, so
    header, items, number allocation and ledger entries persist together
    or not at all.
    """

    products: IProductStore
    ledger: IStockLedger
    documents: IDocumentStore
    sequences: ISequenceAllocator
    contacts: IContactStore
    warehouses: IWarehouseStore

    @abstractmethod
    async def __aenter__(self) -> "IUnitOfWork":
        pass

    @abstractmethod
    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        pass
