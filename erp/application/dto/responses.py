"""Response DTOs for API endpoints.

Pydantic v2 models for API response serialization.
These are the ONLY contracts between use cases and API layer.
"""

from datetime import date, datetime

from pydantic import BaseModel, Field


class HealthResponse(BaseModel):
    """Health check response."""

    status: str
    version: str = "1.0.0"
    uptime_seconds: float
    database: str = "unknown"
    schema_version: str | None = None


class ErrorResponse(BaseModel):
    """Standardized error response DTO.

    Every error response includes:
    - error_code: machine-readable code (e.g. DOCUMENT_NOT_FOUND)
    - message: human-readable description
    - hint: suggested recovery action
    - path: request path that triggered the error
    """

    error_code: str = Field(..., description="Machine-readable error code")
    message: str = Field(..., description="Human-readable error description")
    hint: str | None = Field(default=None, description="Suggested recovery action")
    detail: str | None = Field(default=None, description="Additional details")
    path: str | None = Field(default=None, description="Request path")
    timestamp: datetime = Field(default_factory=datetime.now)


# --- Products / Inventory ---


class ProductResponse(BaseModel):
    """Product response DTO."""

    id: str
    sku: str
    name: str
    category: str
    description: str | None = None
    unit: str
    price: float
    stock: float
    min_stock: float
    status: str
    stock_value: float
    last_movement: date | None = None
    created_at: datetime
    updated_at: datetime


class ProductListResponse(BaseModel):
    """List of products."""

    items: list[ProductResponse]
    total: int


class StockMovementResponse(BaseModel):
    """Ledger entry response DTO."""

    id: int
    product_id: str
    quantity: float
    movement_type: str
    source: str
    event: str
    reference_id: str | None = None
    reference_number: str | None = None
    warehouse_id: str | None = None
    description: str | None = None
    created_at: datetime


class AdjustStockResponse(BaseModel):
    """Response for a manual stock adjustment."""

    product: ProductResponse
    movement: StockMovementResponse


class WarehouseQuantityResponse(BaseModel):
    warehouse_id: str | None
    quantity: float


class StockProjectionResponse(BaseModel):
    """Cached stock vs ledger sum for one product."""

    product_id: str
    cached_stock: float
    ledger_stock: float
    drift: float
    in_sync: bool
    warehouses: list[WarehouseQuantityResponse] = Field(default_factory=list)


# --- Contacts / Warehouses ---


class ContactResponse(BaseModel):
    """Contact response DTO."""

    id: str
    name: str
    company: str | None = None
    contact_type: str
    email: str | None = None
    phone: str | None = None
    city: str | None = None
    ice: str | None = None
    if_number: str | None = None
    rc: str | None = None
    created_at: datetime


class WarehouseResponse(BaseModel):
    id: str
    name: str
    city: str | None = None


# --- Documents ---


class LineItemResponse(BaseModel):
    """Document line response DTO."""

    id: int | None = None
    position: int
    product_id: str | None = None
    description: str
    quantity: float
    unit_price: float
    total: float


class DocumentResponse(BaseModel):
    """Document response DTO. Items are empty in list views."""

    id: str
    document_type: str
    document_number: str
    contact_id: str | None = None
    status: str
    due_date: date | None = None
    payment_method: str | None = None
    note: str | None = None
    warehouse_id: str | None = None
    vat_rate: float
    subtotal: float
    vat_amount: float
    total: float
    allowed_transitions: list[str] = Field(default_factory=list)
    items: list[LineItemResponse] = Field(default_factory=list)
    created_at: datetime
    updated_at: datetime
    date: date


class DocumentListResponse(BaseModel):
    """List of documents of one type."""

    document_type: str
    documents: list[DocumentResponse]
    total: int


class DeleteResponse(BaseModel):
    """Result of a confirmed delete."""

    id: str
    deleted: bool


class PurgeOrphansResponse(BaseModel):
    lines_removed: int
    movements_recorded: int


class AllocatedNumberResponse(BaseModel):
    """A freshly allocated document number (numbering-only types)."""

    document_type: str
    document_number: str


# --- Dashboard ---


class CategoryStockResponse(BaseModel):
    category: str
    stock: float


class ProductSalesResponse(BaseModel):
    product_id: str
    name: str
    category: str
    quantity: float
    revenue: float


class MonthlySalesResponse(BaseModel):
    """Paid invoices in one month; `month` is its first day."""

    month: date
    document_count: int
    revenue: float


class DashboardSummaryResponse(BaseModel):
    """Dashboard KPI tiles."""

    month_start: date
    invoiced_this_month: float
    invoiced_last_month: float
    invoiced_change_pct: int
    invoice_status_counts: dict[str, int]
    stock_status_counts: dict[str, int]
    low_stock_count: int
    inventory_value: float
    stock_by_category: list[CategoryStockResponse] = Field(default_factory=list)
    top_products: list[ProductSalesResponse] = Field(default_factory=list)
    sales_by_month: list[MonthlySalesResponse] = Field(default_factory=list)
