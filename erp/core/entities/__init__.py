"""Core domain entities."""

from erp.core.entities.contact import Contact, ContactType
from erp.core.entities.document import (
    DOCUMENT_PREFIXES,
    STOCK_MOVING_TYPES,
    TAXED_TYPES,
    Document,
    DocumentPatch,
    DocumentStatus,
    DocumentTotals,
    DocumentType,
    LineItem,
    MonthlySales,
    PaymentMethod,
    ProductSales,
    compute_totals,
    money,
)
from erp.core.entities.inventory import (
    INITIAL_SOURCE,
    MANUAL_SOURCE,
    CategoryStock,
    MovementEvent,
    Product,
    StockMovement,
    StockProjection,
    StockStatus,
    Warehouse,
    WarehouseQuantity,
    derive_stock_status,
    movement_type_tag,
)

__all__ = [
    # Inventory entities
    "Product",
    "StockStatus",
    "StockMovement",
    "StockProjection",
    "MovementEvent",
    "Warehouse",
    "WarehouseQuantity",
    "CategoryStock",
    "MANUAL_SOURCE",
    "INITIAL_SOURCE",
    "derive_stock_status",
    "movement_type_tag",
    # Document entities
    "Document",
    "DocumentType",
    "DocumentPatch",
    "DocumentStatus",
    "DocumentTotals",
    "LineItem",
    "PaymentMethod",
    "ProductSales",
    "MonthlySales",
    "DOCUMENT_PREFIXES",
    "STOCK_MOVING_TYPES",
    "TAXED_TYPES",
    "compute_totals",
    "money",
    # Contact entities
    "Contact",
    "ContactType",
]
