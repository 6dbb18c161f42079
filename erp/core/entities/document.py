"""Sales and purchase document entities."""

import datetime as dt
from datetime import date, datetime
from enum import Enum

from pydantic import BaseModel, Field, model_validator


class DocumentType(str, Enum):
    """Kinds of numbered documents."""

    INVOICE = "invoice"
    ESTIMATE = "estimate"
    PURCHASE_ORDER = "purchase_order"
    DELIVERY_NOTE = "delivery_note"
    CREDIT_NOTE = "credit_note"
    STATEMENT = "statement"
    PURCHASE_INVOICE = "purchase_invoice"
    DIVERS = "divers"


DOCUMENT_PREFIXES: dict[DocumentType, str] = {
    DocumentType.INVOICE: "INV",
    DocumentType.ESTIMATE: "EST",
    DocumentType.PURCHASE_ORDER: "PO",
    DocumentType.DELIVERY_NOTE: "DN",
    DocumentType.CREDIT_NOTE: "CN",
    DocumentType.STATEMENT: "ST",
    DocumentType.PURCHASE_INVOICE: "PI",
    DocumentType.DIVERS: "DIV",
}

# Line items of these types move physical stock
STOCK_MOVING_TYPES = frozenset({DocumentType.DELIVERY_NOTE, DocumentType.DIVERS})

# Types whose totals carry VAT; the others are priced ex-tax
TAXED_TYPES = frozenset(
    {
        DocumentType.INVOICE,
        DocumentType.ESTIMATE,
        DocumentType.CREDIT_NOTE,
        DocumentType.PURCHASE_INVOICE,
    }
)


class DocumentStatus(str, Enum):
    """Union of every status used by any document type."""

    DRAFT = "draft"
    PENDING = "pending"
    SENT = "sent"
    PAID = "paid"
    OVERDUE = "overdue"
    CANCELLED = "cancelled"
    ACCEPTED = "accepted"
    EXPIRED = "expired"
    SHIPPED = "shipped"
    RECEIVED = "received"
    IN_TRANSIT = "in_transit"
    DELIVERED = "delivered"
    APPLIED = "applied"


class PaymentMethod(str, Enum):
    """Accepted payment methods."""

    CASH = "cash"
    CHECK = "check"
    BANK_TRANSFER = "bank_transfer"


def money(value: float) -> float:
    """Round an amount to cents."""
    return round(value + 0.0, 2)


class LineItem(BaseModel):
    """One product/quantity/price row of a document."""

    id: int | None = None
    document_id: str | None = None
    product_id: str | None = None
    description: str
    quantity: float
    unit_price: float
    total: float = 0.0
    position: int = 0
    created_at: datetime = Field(default_factory=datetime.utcnow)

    @model_validator(mode="after")
    def compute_total(self) -> "LineItem":
        """Compute total from quantity and unit_price."""
        self.total = money(self.quantity * self.unit_price)
        return self


class DocumentTotals(BaseModel):
    """Header totals derived from line items."""

    subtotal: float
    vat_amount: float
    total: float


def compute_totals(items: list[LineItem], vat_rate: float) -> DocumentTotals:
    """Derive subtotal, VAT and grand total from line items."""
    subtotal = money(sum(item.total for item in items))
    vat_amount = money(subtotal * vat_rate / 100)
    return DocumentTotals(
        subtotal=subtotal,
        vat_amount=vat_amount,
        total=money(subtotal + vat_amount),
    )


class Document(BaseModel):
    """A document header owning an ordered list of line items."""

    id: str | None = None
    document_type: DocumentType
    document_number: str
    contact_id: str | None = None
    date: date
    due_date: date | None = None
    status: DocumentStatus
    payment_method: PaymentMethod | None = None
    note: str | None = None
    warehouse_id: str | None = None
    vat_rate: float = 0.0
    subtotal: float = 0.0
    vat_amount: float = 0.0
    total: float = 0.0
    items: list[LineItem] = Field(default_factory=list)
    created_at: datetime = Field(default_factory=datetime.utcnow)
    updated_at: datetime = Field(default_factory=datetime.utcnow)

    @property
    def moves_stock(self) -> bool:
        return self.document_type in STOCK_MOVING_TYPES

    def apply_totals(self) -> "Document":
        """Rewrite the stored header totals from the current items."""
        totals = compute_totals(self.items, self.vat_rate)
        self.subtotal = totals.subtotal
        self.vat_amount = totals.vat_amount
        self.total = totals.total
        return self

    def apply_patch(self, patch: "DocumentPatch") -> "Document":
        """Copy the header fields explicitly set on the patch."""
        for field in ("contact_id", "date", "due_date", "payment_method", "note"):
            if field in patch.model_fields_set:
                setattr(self, field, getattr(patch, field))
        return self

    def totals_match_items(self) -> bool:
        """True if the stored header totals equal the recomputed ones."""
        totals = compute_totals(self.items, self.vat_rate)
        return (
            totals.subtotal == self.subtotal
            and totals.vat_amount == self.vat_amount
            and totals.total == self.total
        )


class DocumentPatch(BaseModel):
    """Partial update of a document. Only fields that are set get applied."""

    contact_id: str | None = None
    date: dt.date | None = None
    due_date: dt.date | None = None
    payment_method: PaymentMethod | None = None
    note: str | None = None
    status: DocumentStatus | None = None
    items: list[LineItem] | None = None


class ProductSales(BaseModel):
    """Units and revenue a product brought in over a period."""

    product_id: str
    name: str
    category: str
    quantity: float
    revenue: float


class MonthlySales(BaseModel):
    """Documents and revenue for one calendar month."""

    month: date
    document_count: int = 0
    revenue: float = 0.0
