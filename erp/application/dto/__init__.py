"""Data Transfer Objects for API layer.

Request DTOs: Validate and parse incoming API requests.
Response DTOs: Structure and serialize API responses.

These are the ONLY contracts between API handlers and use cases.
"""

from erp.application.dto.requests import (
    AdjustStockRequest,
    ChangeStatusRequest,
    CreateContactRequest,
    CreateDocumentRequest,
    CreateProductRequest,
    LineItemRequest,
    UpdateDocumentRequest,
    UpdateProductRequest,
)
from erp.application.dto.responses import (
    AdjustStockResponse,
    AllocatedNumberResponse,
    ContactResponse,
    DashboardSummaryResponse,
    DeleteResponse,
    DocumentListResponse,
    DocumentResponse,
    ErrorResponse,
    HealthResponse,
    LineItemResponse,
    ProductListResponse,
    ProductResponse,
    PurgeOrphansResponse,
    StockMovementResponse,
    StockProjectionResponse,
    WarehouseQuantityResponse,
    WarehouseResponse,
)

__all__ = [
    # Requests
    "CreateProductRequest",
    "UpdateProductRequest",
    "AdjustStockRequest",
    "CreateContactRequest",
    "LineItemRequest",
    "CreateDocumentRequest",
    "UpdateDocumentRequest",
    "ChangeStatusRequest",
    # Responses
    "HealthResponse",
    "ErrorResponse",
    "ProductResponse",
    "ProductListResponse",
    "StockMovementResponse",
    "AdjustStockResponse",
    "WarehouseQuantityResponse",
    "StockProjectionResponse",
    "ContactResponse",
    "WarehouseResponse",
    "LineItemResponse",
    "DocumentResponse",
    "DocumentListResponse",
    "DeleteResponse",
    "PurgeOrphansResponse",
    "AllocatedNumberResponse",
    "DashboardSummaryResponse",
]
