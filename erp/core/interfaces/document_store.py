"""Abstract interfaces for document storage and number allocation."""

from abc import ABC, abstractmethod
from datetime import date

from erp.core.entities.document import (
    Document,
    DocumentStatus,
    DocumentType,
    LineItem,
    MonthlySales,
    ProductSales,
)


class IDocumentStore(ABC):
    """Interface for document header and line item persistence."""

    @abstractmethod
    async def insert_document(self, document: Document) -> Document:
        """
        Insert header and items.

        Raises DuplicateDocumentNumberError if the number is taken.
        """
        pass

    @abstractmethod
    async def get_document(
        self, document_type: DocumentType, document_id: str
    ) -> Document | None:
        """Get a document with its items, ordered by position."""
        pass

    @abstractmethod
    async def update_header(self, document: Document) -> Document:
        """Rewrite header fields, status and totals."""
        pass

    @abstractmethod
    async def replace_items(self, document: Document) -> Document:
        """Delete the current items and insert document.items."""
        pass

    @abstractmethod
    async def delete_document(self, document: Document) -> bool:
        """Delete items then header."""
        pass

    @abstractmethod
    async def list_documents(
        self,
        document_type: DocumentType,
        status: DocumentStatus | None = None,
        contact_id: str | None = None,
        start_date: date | None = None,
        end_date: date | None = None,
        limit: int = 100,
        offset: int = 0,
    ) -> list[Document]:
        """List document headers (without items), newest first."""
        pass

    @abstractmethod
    async def find_orphaned_lines(self) -> list[LineItem]:
        """Stock-moving line items whose header no longer exists."""
        pass

    @abstractmethod
    async def delete_line(self, document_type: DocumentType, line_id: int) -> bool:
        """Delete one line item."""
        pass

    @abstractmethod
    async def sum_totals(
        self,
        document_type: DocumentType,
        start_date: date,
        end_date: date,
        exclude_status: DocumentStatus | None = None,
    ) -> float:
        """Sum of grand totals for documents dated within [start_date, end_date)."""
        pass

    @abstractmethod
    async def count_by_status(self, document_type: DocumentType) -> dict[str, int]:
        """Count documents of a type per status."""
        pass

    @abstractmethod
    async def product_sales(
        self,
        document_type: DocumentType,
        start_date: date,
        end_date: date,
        status: DocumentStatus,
        limit: int = 10,
    ) -> list[ProductSales]:
        """Best-selling products on documents in one status, by quantity."""
        pass

    @abstractmethod
    async def monthly_sales(
        self,
        document_type: DocumentType,
        start_date: date,
        end_date: date,
        status: DocumentStatus,
    ) -> list[MonthlySales]:
        """Document count and revenue per month that has any documents."""
        pass


class ISequenceAllocator(ABC):
    """Allocates PREFIX-MM/YY/NNNN document numbers."""

    @abstractmethod
    async def allocate(
        self,
        document_type: DocumentType,
        on_date: date | None = None,
        resync: bool = False,
    ) -> str:
        """
        Return the next number for the (type, year, month) bucket.

        With resync=True the counter is first raised to the highest number
        already present in the document tables.
        """
        pass

    @abstractmethod
    async def peek(self, document_type: DocumentType, on_date: date | None = None) -> int:
        """Last serial issued for the bucket (0 if none)."""
        pass
