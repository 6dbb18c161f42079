"""Inventory domain entities: products, ledger entries and warehouses."""

from datetime import date, datetime
from enum import Enum

from pydantic import BaseModel, Field, model_validator


class StockStatus(str, Enum):
    """Stock level classification of a product."""

    IN_STOCK = "in_stock"
    LOW_STOCK = "low_stock"
    OUT_OF_STOCK = "out_of_stock"


def derive_stock_status(stock: float, min_stock: float) -> StockStatus:
    """Classify a stock level against its reorder threshold."""
    if stock <= 0:
        return StockStatus.OUT_OF_STOCK
    if stock <= min_stock:
        return StockStatus.LOW_STOCK
    return StockStatus.IN_STOCK


class Product(BaseModel):
    """A stocked product. `stock` is a cache of the ledger sum."""

    id: str | None = None
    sku: str
    name: str
    category: str
    description: str | None = None
    unit: str = "Piece"
    price: float = 0.0
    stock: float = 0.0
    min_stock: float = 0.0
    status: StockStatus = StockStatus.IN_STOCK
    last_movement: date | None = None
    is_deleted: bool = False
    created_at: datetime = Field(default_factory=datetime.utcnow)
    updated_at: datetime = Field(default_factory=datetime.utcnow)

    @model_validator(mode="after")
    def sync_status(self) -> "Product":
        """Status always follows stock and min_stock."""
        self.status = derive_stock_status(self.stock, self.min_stock)
        return self

    @property
    def stock_value(self) -> float:
        """Inventory value = stock * price."""
        return self.stock * self.price


class MovementEvent(str, Enum):
    """Lifecycle event that caused a stock movement."""

    CREATE = "create"
    CANCEL = "cancel"
    UPDATE = "update"
    ADJUSTMENT = "adjustment"
    ORPHANED = "orphaned"


# Movement sources that are not documents
MANUAL_SOURCE = "manual"
INITIAL_SOURCE = "initial"


def movement_type_tag(source: str, event: MovementEvent) -> str:
    """Build the legacy movement type tag, e.g. 'delivery_note_cancel'."""
    if event == MovementEvent.CREATE:
        return source
    return f"{source}_{event.value}"


class StockMovement(BaseModel):
    """Immutable ledger entry: a signed quantity change and its cause."""

    id: int | None = None
    product_id: str
    quantity: float  # signed: negative leaves stock, positive returns it
    source: str  # document type, "manual" or "initial"
    event: MovementEvent = MovementEvent.CREATE
    reference_id: str | None = None  # document id
    reference_number: str | None = None  # e.g. DN-03/26/0004
    warehouse_id: str | None = None
    description: str | None = None
    created_at: datetime = Field(default_factory=datetime.utcnow)

    @property
    def movement_type(self) -> str:
        return movement_type_tag(self.source, self.event)


class StockProjection(BaseModel):
    """Cached product stock compared with the ledger sum."""

    product_id: str
    cached_stock: float
    ledger_stock: float

    @property
    def drift(self) -> float:
        return round(self.cached_stock - self.ledger_stock, 6)

    @property
    def in_sync(self) -> bool:
        return self.drift == 0


class WarehouseQuantity(BaseModel):
    """Quantity of a product held in one warehouse, derived from the ledger."""

    warehouse_id: str | None
    quantity: float


class CategoryStock(BaseModel):
    """Units on hand across the live products of one category."""

    category: str
    stock: float


class Warehouse(BaseModel):
    """A physical stock location."""

    id: str
    name: str
    city: str | None = None
