"""SQLite implementation of document storage."""

from dataclasses import dataclass
from datetime import date, datetime

import aiosqlite

from erp.config import get_logger
from erp.core.entities.document import (
    Document,
    DocumentStatus,
    DocumentType,
    LineItem,
    MonthlySales,
    PaymentMethod,
    ProductSales,
)
from erp.core.exceptions import (
    DatabaseError,
    DuplicateDocumentNumberError,
    UnknownDocumentTypeError,
)
from erp.core.interfaces.document_store import IDocumentStore
from erp.infrastructure.storage.sqlite.base import (
    SQLiteStore,
    iso,
    parse_date,
    parse_datetime,
)

logger = get_logger(__name__)


@dataclass(frozen=True)
class DocumentTable:
    """Where a document type lives."""

    header: str
    items: str
    parent_column: str
    # Value of the header's document_type column for shared tables
    discriminator: str | None = None


DOCUMENT_TABLES: dict[DocumentType, DocumentTable] = {
    DocumentType.INVOICE: DocumentTable("invoices", "invoice_items", "invoice_id"),
    DocumentType.ESTIMATE: DocumentTable("estimates", "estimate_items", "estimate_id"),
    DocumentType.PURCHASE_ORDER: DocumentTable(
        "purchase_orders", "purchase_order_items", "purchase_order_id"
    ),
    DocumentType.DELIVERY_NOTE: DocumentTable(
        "delivery_notes", "delivery_note_items", "delivery_note_id", "delivery_note"
    ),
    DocumentType.DIVERS: DocumentTable(
        "delivery_notes", "delivery_note_items", "delivery_note_id", "divers"
    ),
    DocumentType.CREDIT_NOTE: DocumentTable(
        "credit_notes", "credit_note_items", "credit_note_id"
    ),
    DocumentType.PURCHASE_INVOICE: DocumentTable(
        "purchase_invoices", "purchase_invoice_items", "purchase_invoice_id"
    ),
}

HEADER_TABLES = sorted({table.header for table in DOCUMENT_TABLES.values()})

_HEADER_COLUMNS = (
    "id, document_number, contact_id, date, due_date, status, payment_method, "
    "note, warehouse_id, vat_rate, subtotal, vat_amount, total, created_at, updated_at"
)


def table_for(document_type: DocumentType) -> DocumentTable:
    try:
        return DOCUMENT_TABLES[document_type]
    except KeyError:
        raise UnknownDocumentTypeError(str(document_type)) from None


class SQLiteDocumentStore(SQLiteStore, IDocumentStore):
    """SQLite storage for every document family, keyed by DOCUMENT_TABLES."""

    async def insert_document(self, document: Document) -> Document:
        """Insert header and items."""
        table = table_for(document.document_type)
        now = datetime.utcnow()
        document.created_at = now
        document.updated_at = now

        columns = _HEADER_COLUMNS
        values = [
            document.id,
            document.document_number,
            document.contact_id,
            iso(document.date),
            iso(document.due_date),
            document.status.value,
            document.payment_method.value if document.payment_method else None,
            document.note,
            document.warehouse_id,
            document.vat_rate,
            document.subtotal,
            document.vat_amount,
            document.total,
            iso(document.created_at),
            iso(document.updated_at),
        ]
        if table.discriminator:
            columns += ", document_type"
            values.append(table.discriminator)
        placeholders = ", ".join("?" for _ in values)

        try:
            async with self._writing() as conn:
                await conn.execute(
                    f"INSERT INTO {table.header} ({columns}) VALUES ({placeholders})",
                    values,
                )
                await self._insert_items(conn, table, document)
        except aiosqlite.IntegrityError as e:
            if "document_number" in str(e):
                raise DuplicateDocumentNumberError(document.document_number) from e
            raise DatabaseError("insert_document", str(e)) from e
        except aiosqlite.Error as e:
            raise DatabaseError("insert_document", str(e)) from e

        logger.info(
            "document_stored",
            table=table.header,
            document_id=document.id,
            number=document.document_number,
        )
        return document

    async def get_document(
        self, document_type: DocumentType, document_id: str
    ) -> Document | None:
        """Get a document with its items."""
        table = table_for(document_type)
        query = f"SELECT * FROM {table.header} WHERE id = ?"
        params: list = [document_id]
        if table.discriminator:
            query += " AND document_type = ?"
            params.append(table.discriminator)

        try:
            async with self._reading() as conn:
                cursor = await conn.execute(query, params)
                row = await cursor.fetchone()
                if row is None:
                    return None
                cursor = await conn.execute(
                    f"SELECT * FROM {table.items} WHERE {table.parent_column} = ? "
                    "ORDER BY position, id",
                    (document_id,),
                )
                item_rows = await cursor.fetchall()
        except aiosqlite.Error as e:
            raise DatabaseError("get_document", str(e)) from e

        items = [self._row_to_line_item(r, table.parent_column) for r in item_rows]
        return self._row_to_document(row, document_type, items)

    async def update_header(self, document: Document) -> Document:
        """Rewrite header fields, status and totals."""
        table = table_for(document.document_type)
        try:
            async with self._writing() as conn:
                await conn.execute(
                    f"""
                    UPDATE {table.header} SET
                        contact_id = ?, date = ?, due_date = ?, status = ?,
                        payment_method = ?, note = ?, warehouse_id = ?,
                        vat_rate = ?, subtotal = ?, vat_amount = ?, total = ?,
                        updated_at = ?
                    WHERE id = ?
                    """,
                    (
                        document.contact_id,
                        iso(document.date),
                        iso(document.due_date),
                        document.status.value,
                        document.payment_method.value if document.payment_method else None,
                        document.note,
                        document.warehouse_id,
                        document.vat_rate,
                        document.subtotal,
                        document.vat_amount,
                        document.total,
                        iso(document.updated_at),
                        document.id,
                    ),
                )
        except aiosqlite.Error as e:
            raise DatabaseError("update_header", str(e)) from e
        return document

    async def replace_items(self, document: Document) -> Document:
        """Delete the current items and insert document.items."""
        table = table_for(document.document_type)
        try:
            async with self._writing() as conn:
                await conn.execute(
                    f"DELETE FROM {table.items} WHERE {table.parent_column} = ?",
                    (document.id,),
                )
                await self._insert_items(conn, table, document)
        except aiosqlite.Error as e:
            raise DatabaseError("replace_items", str(e)) from e
        return document

    async def delete_document(self, document: Document) -> bool:
        """Delete items then header."""
        table = table_for(document.document_type)
        try:
            async with self._writing() as conn:
                await conn.execute(
                    f"DELETE FROM {table.items} WHERE {table.parent_column} = ?",
                    (document.id,),
                )
                cursor = await conn.execute(
                    f"DELETE FROM {table.header} WHERE id = ?", (document.id,)
                )
                return cursor.rowcount > 0
        except aiosqlite.Error as e:
            raise DatabaseError("delete_document", str(e)) from e

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
        """List headers newest first. end_date is inclusive."""
        table = table_for(document_type)
        query = f"SELECT * FROM {table.header} WHERE 1 = 1"
        params: list = []
        if table.discriminator:
            query += " AND document_type = ?"
            params.append(table.discriminator)
        if status:
            query += " AND status = ?"
            params.append(status.value)
        if contact_id:
            query += " AND contact_id = ?"
            params.append(contact_id)
        if start_date:
            query += " AND date >= ?"
            params.append(start_date.isoformat())
        if end_date:
            query += " AND date <= ?"
            params.append(end_date.isoformat())
        query += " ORDER BY date DESC, document_number DESC LIMIT ? OFFSET ?"
        params.extend([limit, offset])

        try:
            async with self._reading() as conn:
                cursor = await conn.execute(query, params)
                rows = await cursor.fetchall()
        except aiosqlite.Error as e:
            logger.error(
                "list_documents_failed",
                document_type=document_type.value,
                error=str(e),
            )
            return []
        return [self._row_to_document(row, document_type, []) for row in rows]

    async def find_orphaned_lines(self) -> list[LineItem]:
        """Delivery note lines whose header no longer exists."""
        try:
            async with self._reading() as conn:
                cursor = await conn.execute(
                    """
                    SELECT i.* FROM delivery_note_items i
                    LEFT JOIN delivery_notes d ON d.id = i.delivery_note_id
                    WHERE d.id IS NULL
                    ORDER BY i.id
                    """
                )
                rows = await cursor.fetchall()
        except aiosqlite.Error as e:
            raise DatabaseError("find_orphaned_lines", str(e)) from e
        return [self._row_to_line_item(row, "delivery_note_id") for row in rows]

    async def delete_line(self, document_type: DocumentType, line_id: int) -> bool:
        """Delete one line item."""
        table = table_for(document_type)
        try:
            async with self._writing() as conn:
                cursor = await conn.execute(
                    f"DELETE FROM {table.items} WHERE id = ?", (line_id,)
                )
                return cursor.rowcount > 0
        except aiosqlite.Error as e:
            raise DatabaseError("delete_line", str(e)) from e

    async def sum_totals(
        self,
        document_type: DocumentType,
        start_date: date,
        end_date: date,
        exclude_status: DocumentStatus | None = None,
    ) -> float:
        """Sum of grand totals dated within [start_date, end_date)."""
        table = table_for(document_type)
        query = (
            f"SELECT COALESCE(SUM(total), 0) FROM {table.header} "
            "WHERE date >= ? AND date < ?"
        )
        params: list = [start_date.isoformat(), end_date.isoformat()]
        if table.discriminator:
            query += " AND document_type = ?"
            params.append(table.discriminator)
        if exclude_status:
            query += " AND status != ?"
            params.append(exclude_status.value)

        try:
            async with self._reading() as conn:
                cursor = await conn.execute(query, params)
                row = await cursor.fetchone()
        except aiosqlite.Error as e:
            logger.error("sum_totals_failed", document_type=document_type.value, error=str(e))
            return 0.0
        return float(row[0])

    async def count_by_status(self, document_type: DocumentType) -> dict[str, int]:
        """Count documents of a type per status."""
        table = table_for(document_type)
        query = f"SELECT status, COUNT(*) AS n FROM {table.header}"
        params: list = []
        if table.discriminator:
            query += " WHERE document_type = ?"
            params.append(table.discriminator)
        query += " GROUP BY status"

        try:
            async with self._reading() as conn:
                cursor = await conn.execute(query, params)
                rows = await cursor.fetchall()
        except aiosqlite.Error as e:
            logger.error("count_documents_failed", document_type=document_type.value, error=str(e))
            return {}
        return {row["status"]: row["n"] for row in rows}

    async def product_sales(
        self,
        document_type: DocumentType,
        start_date: date,
        end_date: date,
        status: DocumentStatus,
        limit: int = 10,
    ) -> list[ProductSales]:
        """Products on lines of documents in `status` dated within [start_date, end_date)."""
        table = table_for(document_type)
        query = f"""
            SELECT p.id, p.name, p.category,
                   SUM(li.quantity) AS quantity, SUM(li.total) AS revenue
            FROM {table.items} li
            JOIN {table.header} d ON li.{table.parent_column} = d.id
            JOIN products p ON li.product_id = p.id
            WHERE d.status = ? AND d.date >= ? AND d.date < ?
        """
        params: list = [status.value, start_date.isoformat(), end_date.isoformat()]
        if table.discriminator:
            query += " AND d.document_type = ?"
            params.append(table.discriminator)
        query += " GROUP BY p.id ORDER BY quantity DESC, revenue DESC, p.name LIMIT ?"
        params.append(limit)

        try:
            async with self._reading() as conn:
                cursor = await conn.execute(query, params)
                rows = await cursor.fetchall()
        except aiosqlite.Error as e:
            logger.error("product_sales_failed", document_type=document_type.value, error=str(e))
            return []
        return [
            ProductSales(
                product_id=row["id"],
                name=row["name"],
                category=row["category"],
                quantity=float(row["quantity"]),
                revenue=float(row["revenue"]),
            )
            for row in rows
        ]

    async def monthly_sales(
        self,
        document_type: DocumentType,
        start_date: date,
        end_date: date,
        status: DocumentStatus,
    ) -> list[MonthlySales]:
        """Per-month count and revenue; months without documents are absent."""
        table = table_for(document_type)
        query = (
            "SELECT substr(date, 1, 7) AS month, COUNT(*) AS n, COALESCE(SUM(total), 0) AS revenue "
            f"FROM {table.header} WHERE status = ? AND date >= ? AND date < ?"
        )
        params: list = [status.value, start_date.isoformat(), end_date.isoformat()]
        if table.discriminator:
            query += " AND document_type = ?"
            params.append(table.discriminator)
        query += " GROUP BY month ORDER BY month"

        try:
            async with self._reading() as conn:
                cursor = await conn.execute(query, params)
                rows = await cursor.fetchall()
        except aiosqlite.Error as e:
            logger.error("monthly_sales_failed", document_type=document_type.value, error=str(e))
            return []
        return [
            MonthlySales(
                month=date.fromisoformat(f"{row['month']}-01"),
                document_count=row["n"],
                revenue=float(row["revenue"]),
            )
            for row in rows
        ]

    @staticmethod
    async def _insert_items(
        conn: aiosqlite.Connection, table: DocumentTable, document: Document
    ) -> None:
        for position, item in enumerate(document.items):
            item.position = position
            item.document_id = document.id
            cursor = await conn.execute(
                f"""
                INSERT INTO {table.items} (
                    {table.parent_column}, product_id, description, quantity,
                    unit_price, total, position, created_at
                ) VALUES (?, ?, ?, ?, ?, ?, ?, ?)
                """,
                (
                    document.id,
                    item.product_id,
                    item.description,
                    item.quantity,
                    item.unit_price,
                    item.total,
                    item.position,
                    iso(item.created_at),
                ),
            )
            item.id = cursor.lastrowid

    @staticmethod
    def _row_to_document(
        row: aiosqlite.Row, document_type: DocumentType, items: list[LineItem]
    ) -> Document:
        """Convert a header row (plus its items) to a Document entity."""
        return Document(
            id=row["id"],
            document_type=document_type,
            document_number=row["document_number"],
            contact_id=row["contact_id"],
            date=parse_date(row["date"]) or date.today(),
            due_date=parse_date(row["due_date"]),
            status=DocumentStatus(row["status"]),
            payment_method=(
                PaymentMethod(row["payment_method"]) if row["payment_method"] else None
            ),
            note=row["note"],
            warehouse_id=row["warehouse_id"],
            vat_rate=float(row["vat_rate"]),
            subtotal=float(row["subtotal"]),
            vat_amount=float(row["vat_amount"]),
            total=float(row["total"]),
            items=items,
            created_at=parse_datetime(row["created_at"]),
            updated_at=parse_datetime(row["updated_at"]),
        )

    @staticmethod
    def _row_to_line_item(row: aiosqlite.Row, parent_column: str) -> LineItem:
        """Convert an item row to a LineItem entity."""
        return LineItem(
            id=row["id"],
            document_id=row[parent_column],
            product_id=row["product_id"],
            description=row["description"],
            quantity=float(row["quantity"]),
            unit_price=float(row["unit_price"]),
            position=row["position"],
            created_at=parse_datetime(row["created_at"]),
        )
