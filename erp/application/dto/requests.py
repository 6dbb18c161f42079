"""Request DTOs for API endpoints.

Pydantic v2 models for API request validation.
These are the ONLY contracts between API and use cases.
"""

import datetime as dt

from pydantic import BaseModel, Field

from erp.core.entities.contact import ContactType
from erp.core.entities.document import DocumentStatus, PaymentMethod

# --- Products ---


class CreateProductRequest(BaseModel):
    """Request to create a product."""

    sku: str = Field(..., min_length=1, description="Unique stock keeping unit")
    name: str = Field(..., min_length=1, description="Product name")
    category: str = Field(..., min_length=1, description="Product category")
    description: str | None = Field(default=None, description="Free-text description")
    unit: str = Field(default="Piece", description="Unit of measure")
    price: float = Field(default=0.0, ge=0, description="Unit selling price")
    min_stock: float = Field(default=0.0, ge=0, description="Reorder threshold")
    initial_stock: float = Field(
        default=0.0,
        ge=0,
        description="Opening quantity, booked as an 'initial' ledger entry",
    )
    warehouse_id: str | None = Field(
        default=None,
        description="Warehouse receiving the opening stock (defaults to the main one)",
    )


class UpdateProductRequest(BaseModel):
    """Partial product update. Stock can only change through the ledger."""

    name: str | None = Field(default=None, min_length=1)
    category: str | None = Field(default=None, min_length=1)
    description: str | None = None
    unit: str | None = None
    price: float | None = Field(default=None, ge=0)
    min_stock: float | None = Field(default=None, ge=0)


# --- Inventory ---


class AdjustStockRequest(BaseModel):
    """Manual stock correction (count difference, breakage, ...)."""

    product_id: str = Field(..., description="Product ID")
    quantity: float = Field(
        ...,
        description="Signed quantity: positive adds stock, negative removes it",
        examples=[5, -2],
    )
    reason: str = Field(..., min_length=1, description="Why the stock is corrected")
    warehouse_id: str | None = Field(default=None, description="Warehouse ID")


# --- Contacts ---


class CreateContactRequest(BaseModel):
    """Request to create a client or supplier."""

    name: str = Field(..., min_length=1)
    contact_type: ContactType
    company: str | None = None
    email: str | None = None
    phone: str | None = None
    city: str | None = None
    ice: str | None = Field(default=None, description="Identifiant Commun de l'Entreprise")
    if_number: str | None = Field(default=None, description="Identifiant Fiscal")
    rc: str | None = Field(default=None, description="Registre de Commerce")


# --- Documents ---


class LineItemRequest(BaseModel):
    """A document line. Well-formedness is checked by the lifecycle manager."""

    description: str = Field(default="", description="Line description")
    product_id: str | None = Field(default=None, description="Linked product ID")
    quantity: float = Field(..., description="Quantity")
    unit_price: float = Field(..., description="Price per unit, excluding VAT")


class CreateDocumentRequest(BaseModel):
    """Request to create a document. The number is allocated by the server."""

    contact_id: str | None = Field(default=None, description="Client or supplier ID")
    date: dt.date | None = Field(default=None, description="Document date (defaults to today)")
    due_date: dt.date | None = None
    payment_method: PaymentMethod | None = None
    note: str | None = None
    warehouse_id: str | None = Field(
        default=None,
        description="Source warehouse for delivery notes (defaults to the main one)",
    )
    items: list[LineItemRequest] = Field(default_factory=list)


class UpdateDocumentRequest(BaseModel):
    """Partial document update. Omitted fields are left unchanged."""

    contact_id: str | None = None
    date: dt.date | None = None
    due_date: dt.date | None = None
    payment_method: PaymentMethod | None = None
    note: str | None = None
    status: DocumentStatus | None = None
    items: list[LineItemRequest] | None = Field(
        default=None,
        description="Full replacement of the line items",
    )


class ChangeStatusRequest(BaseModel):
    """Request to move a document to a new status."""

    status: DocumentStatus
