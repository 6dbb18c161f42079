"""Tests for the SQLite document store."""

from datetime import date

import pytest

from erp.core.entities import Contact, Product
from erp.core.entities.document import (
    Document,
    DocumentStatus,
    DocumentType,
    LineItem,
    MonthlySales,
    PaymentMethod,
)
from erp.core.exceptions import DuplicateDocumentNumberError
from erp.infrastructure.storage.sqlite import SQLiteDocumentStore, SQLiteProductStore
from erp.infrastructure.storage.sqlite.connection import get_connection
from erp.infrastructure.storage.sqlite.document_store import HEADER_TABLES


def _document(
    doc_id: str,
    number: str,
    document_type: DocumentType = DocumentType.INVOICE,
    on_date: date = date(2026, 3, 10),
    status: DocumentStatus = DocumentStatus.DRAFT,
    **kwargs,
) -> Document:
    items = kwargs.pop(
        "items",
        [
            LineItem(description="Chair", quantity=2, unit_price=100),
            LineItem(description="Table", quantity=1, unit_price=150),
        ],
    )
    document = Document(
        id=doc_id,
        document_type=document_type,
        document_number=number,
        date=on_date,
        status=status,
        items=items,
        **kwargs,
    )
    return document.apply_totals()


class TestInsertAndGet:
    async def test_round_trip(
        self, document_store: SQLiteDocumentStore, client_contact: Contact
    ):
        document = _document(
            "inv-1",
            "INV-03/26/0001",
            contact_id=client_contact.id,
            vat_rate=20,
            payment_method=PaymentMethod.BANK_TRANSFER,
            due_date=date(2026, 4, 10),
        )
        await document_store.insert_document(document)

        fetched = await document_store.get_document(DocumentType.INVOICE, "inv-1")

        assert fetched.document_number == "INV-03/26/0001"
        assert fetched.payment_method == PaymentMethod.BANK_TRANSFER
        assert fetched.due_date == date(2026, 4, 10)
        assert (fetched.subtotal, fetched.vat_amount, fetched.total) == (350, 70, 420)
        assert [i.position for i in fetched.items] == [0, 1]
        assert [i.description for i in fetched.items] == ["Chair", "Table"]
        assert all(i.document_id == "inv-1" for i in fetched.items)
        assert fetched.totals_match_items()

    async def test_missing(self, document_store: SQLiteDocumentStore):
        assert await document_store.get_document(DocumentType.ESTIMATE, "nope") is None

    async def test_shared_table_keeps_types_apart(self, document_store: SQLiteDocumentStore):
        await document_store.insert_document(
            _document("dn-1", "DN-03/26/0001", DocumentType.DELIVERY_NOTE)
        )
        await document_store.insert_document(
            _document("div-1", "DIV-03/26/0001", DocumentType.DIVERS)
        )

        assert await document_store.get_document(DocumentType.DIVERS, "dn-1") is None
        assert await document_store.get_document(DocumentType.DELIVERY_NOTE, "div-1") is None
        notes = await document_store.list_documents(DocumentType.DELIVERY_NOTE)
        divers = await document_store.list_documents(DocumentType.DIVERS)
        assert [d.id for d in notes] == ["dn-1"]
        assert [d.id for d in divers] == ["div-1"]

    async def test_duplicate_number(self, document_store: SQLiteDocumentStore):
        await document_store.insert_document(_document("inv-1", "INV-03/26/0001"))

        with pytest.raises(DuplicateDocumentNumberError):
            await document_store.insert_document(_document("inv-2", "INV-03/26/0001"))

        assert await document_store.get_document(DocumentType.INVOICE, "inv-2") is None


class TestUpdates:
    async def test_update_header(self, document_store: SQLiteDocumentStore):
        document = await document_store.insert_document(
            _document("est-1", "EST-03/26/0001", DocumentType.ESTIMATE)
        )

        document.status = DocumentStatus.SENT
        document.note = "Valid 30 days"
        await document_store.update_header(document)

        fetched = await document_store.get_document(DocumentType.ESTIMATE, "est-1")
        assert fetched.status == DocumentStatus.SENT
        assert fetched.note == "Valid 30 days"

    async def test_replace_items_renumbers_positions(
        self, document_store: SQLiteDocumentStore
    ):
        document = await document_store.insert_document(
            _document("inv-1", "INV-03/26/0001", vat_rate=20)
        )

        document.items = [document.items[1]]
        document.apply_totals()
        await document_store.replace_items(document)
        await document_store.update_header(document)

        fetched = await document_store.get_document(DocumentType.INVOICE, "inv-1")
        assert [(i.description, i.position) for i in fetched.items] == [("Table", 0)]
        assert (fetched.subtotal, fetched.vat_amount, fetched.total) == (150, 30, 180)

    async def test_delete_document(self, document_store: SQLiteDocumentStore):
        document = await document_store.insert_document(
            _document("po-1", "PO-03/26/0001", DocumentType.PURCHASE_ORDER)
        )

        assert await document_store.delete_document(document)
        assert not await document_store.delete_document(document)
        assert await document_store.get_document(DocumentType.PURCHASE_ORDER, "po-1") is None

        async with get_connection() as conn:
            cursor = await conn.execute("SELECT COUNT(*) FROM purchase_order_items")
            assert (await cursor.fetchone())[0] == 0


class TestListing:
    @pytest.fixture
    async def invoices(self, document_store: SQLiteDocumentStore, client_contact: Contact):
        rows = [
            ("a", "INV-02/26/0001", date(2026, 2, 27), DocumentStatus.PAID),
            ("b", "INV-03/26/0001", date(2026, 3, 1), DocumentStatus.SENT),
            ("c", "INV-03/26/0002", date(2026, 3, 1), DocumentStatus.CANCELLED),
            ("d", "INV-03/26/0003", date(2026, 3, 31), DocumentStatus.DRAFT),
            ("e", "INV-04/26/0001", date(2026, 4, 1), DocumentStatus.SENT),
        ]
        for doc_id, number, on_date, status in rows:
            await document_store.insert_document(
                _document(
                    doc_id,
                    number,
                    on_date=on_date,
                    status=status,
                    vat_rate=20,
                    contact_id=client_contact.id if doc_id in "bd" else None,
                )
            )

    async def test_newest_first(self, document_store: SQLiteDocumentStore, invoices):
        result = await document_store.list_documents(DocumentType.INVOICE)
        assert [d.id for d in result] == ["e", "d", "c", "b", "a"]
        assert all(d.items == [] for d in result)

    async def test_filters(
        self, document_store: SQLiteDocumentStore, invoices, client_contact: Contact
    ):
        march = await document_store.list_documents(
            DocumentType.INVOICE, start_date=date(2026, 3, 1), end_date=date(2026, 3, 31)
        )
        sent = await document_store.list_documents(
            DocumentType.INVOICE, status=DocumentStatus.SENT
        )
        for_client = await document_store.list_documents(
            DocumentType.INVOICE, contact_id=client_contact.id
        )
        page = await document_store.list_documents(DocumentType.INVOICE, limit=2, offset=1)

        assert [d.id for d in march] == ["d", "c", "b"]
        assert [d.id for d in sent] == ["e", "b"]
        assert [d.id for d in for_client] == ["d", "b"]
        assert [d.id for d in page] == ["d", "c"]

    async def test_sum_totals_half_open_range(
        self, document_store: SQLiteDocumentStore, invoices
    ):
        march = await document_store.sum_totals(
            DocumentType.INVOICE, date(2026, 3, 1), date(2026, 4, 1)
        )
        march_live = await document_store.sum_totals(
            DocumentType.INVOICE,
            date(2026, 3, 1),
            date(2026, 4, 1),
            exclude_status=DocumentStatus.CANCELLED,
        )

        assert march == 3 * 420
        assert march_live == 2 * 420

    async def test_count_by_status(self, document_store: SQLiteDocumentStore, invoices):
        assert await document_store.count_by_status(DocumentType.INVOICE) == {
            "paid": 1,
            "sent": 2,
            "cancelled": 1,
            "draft": 1,
        }
        assert await document_store.count_by_status(DocumentType.ESTIMATE) == {}


class TestSalesFigures:
    @pytest.fixture
    async def paid_sales(
        self,
        document_store: SQLiteDocumentStore,
        product_store: SQLiteProductStore,
        stored_product: Product,
    ):
        table = await product_store.create_product(
            Product(id="p-table", sku="TABLE-1", name="Table", category="Furniture", price=900)
        )

        def line(product_id, quantity, price):
            return LineItem(
                product_id=product_id, description="x", quantity=quantity, unit_price=price
            )

        rows = [
            ("x1", date(2026, 3, 5), DocumentStatus.PAID, [
                line(stored_product.id, 3, 100), line(table.id, 1, 900), line(None, 1, 50),
            ]),
            ("x2", date(2026, 3, 20), DocumentStatus.PAID, [line(stored_product.id, 2, 100)]),
            ("x3", date(2026, 3, 21), DocumentStatus.SENT, [line(table.id, 5, 900)]),
            ("x4", date(2026, 1, 15), DocumentStatus.PAID, [line(table.id, 1, 900)]),
        ]
        for serial, (doc_id, on_date, status, items) in enumerate(rows, start=1):
            await document_store.insert_document(
                _document(
                    doc_id,
                    f"INV-{on_date.month:02d}/26/{serial:04d}",
                    on_date=on_date,
                    status=status,
                    items=items,
                )
            )

    async def test_product_sales_ranked_by_quantity(
        self, document_store: SQLiteDocumentStore, paid_sales
    ):
        sales = await document_store.product_sales(
            DocumentType.INVOICE, date(2026, 3, 1), date(2026, 4, 1), DocumentStatus.PAID
        )

        assert [(s.product_id, s.quantity, s.revenue) for s in sales] == [
            ("prod-chair", 5, 500),
            ("p-table", 1, 900),
        ]
        assert sales[0].name == "Terrace Chair"
        top_one = await document_store.product_sales(
            DocumentType.INVOICE,
            date(2026, 3, 1),
            date(2026, 4, 1),
            DocumentStatus.PAID,
            limit=1,
        )
        assert len(top_one) == 1

    async def test_monthly_sales_skip_empty_months(
        self, document_store: SQLiteDocumentStore, paid_sales
    ):
        months = await document_store.monthly_sales(
            DocumentType.INVOICE, date(2026, 1, 1), date(2026, 4, 1), DocumentStatus.PAID
        )

        assert months == [
            MonthlySales(month=date(2026, 1, 1), document_count=1, revenue=900),
            MonthlySales(month=date(2026, 3, 1), document_count=2, revenue=1450),
        ]


class TestOrphanedLines:
    async def test_lines_left_behind_by_raw_header_delete(
        self, document_store: SQLiteDocumentStore
    ):
        await document_store.insert_document(
            _document("dn-1", "DN-03/26/0001", DocumentType.DELIVERY_NOTE)
        )
        await document_store.insert_document(
            _document("dn-2", "DN-03/26/0002", DocumentType.DELIVERY_NOTE)
        )
        async with get_connection() as conn:
            await conn.execute("DELETE FROM delivery_notes WHERE id = 'dn-1'")
            await conn.commit()

        orphans = await document_store.find_orphaned_lines()

        assert [o.document_id for o in orphans] == ["dn-1", "dn-1"]
        assert await document_store.delete_line(DocumentType.DELIVERY_NOTE, orphans[0].id)
        assert not await document_store.delete_line(DocumentType.DELIVERY_NOTE, orphans[0].id)
        assert len(await document_store.find_orphaned_lines()) == 1


def test_header_tables_cover_every_family():
    assert HEADER_TABLES == [
        "credit_notes",
        "delivery_notes",
        "estimates",
        "invoices",
        "purchase_invoices",
        "purchase_orders",
    ]
