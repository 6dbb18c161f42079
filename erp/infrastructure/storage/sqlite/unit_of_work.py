"""SQLite unit of work."""

from contextlib import AsyncExitStack
from types import TracebackType

from erp.config import get_logger
from erp.core.interfaces.unit_of_work import IUnitOfWork
from erp.infrastructure.storage.sqlite import connection
from erp.infrastructure.storage.sqlite.contact_store import (
    SQLiteContactStore,
    SQLiteWarehouseStore,
)
from erp.infrastructure.storage.sqlite.document_store import SQLiteDocumentStore
from erp.infrastructure.storage.sqlite.inventory_store import (
    SQLiteProductStore,
    SQLiteStockLedger,
)
from erp.infrastructure.storage.sqlite.sequence_store import SQLiteSequenceAllocator

logger = get_logger(__name__)


class SQLiteUnitOfWork(IUnitOfWork):
    """
    Binds every store to one pooled connection for the duration of a block.

    Writable units open ``BEGIN IMMEDIATE`` so concurrent lifecycle
    operations are serialized by SQLite's write lock. Read-only units just
    borrow a connection.

    Usage:
        async with SQLiteUnitOfWork() as uow:
            number = await uow.sequences.allocate(DocumentType.INVOICE)
            await uow.documents.insert_document(...)
    """

    def __init__(self, read_only: bool = False, atomic_sequences: bool | None = None):
        self.read_only = read_only
        self._atomic_sequences = atomic_sequences
        self._stack: AsyncExitStack | None = None

    async def __aenter__(self) -> "SQLiteUnitOfWork":
        self._stack = AsyncExitStack()
        pool = await connection.get_pool()
        if self.read_only:
            conn = await self._stack.enter_async_context(pool.acquire())
        else:
            conn = await self._stack.enter_async_context(pool.transaction(immediate=True))

        self.products = SQLiteProductStore(conn)
        self.ledger = SQLiteStockLedger(conn)
        self.documents = SQLiteDocumentStore(conn)
        self.sequences = SQLiteSequenceAllocator(conn, atomic=self._atomic_sequences)
        self.contacts = SQLiteContactStore(conn)
        self.warehouses = SQLiteWarehouseStore(conn)
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        stack, self._stack = self._stack, None
        if exc is not None and not self.read_only:
            logger.warning(
                "unit_of_work_rolled_back",
                error_type=exc_type.__name__,
                error=str(exc),
            )
        await stack.__aexit__(exc_type, exc, tb)


def unit_of_work_factory(atomic_sequences: bool | None = None):
    """Factory passed to services that open their own units of work."""

    def factory(read_only: bool = False) -> SQLiteUnitOfWork:
        return SQLiteUnitOfWork(read_only=read_only, atomic_sequences=atomic_sequences)

    return factory
