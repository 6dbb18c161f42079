"""
Application layer - Use cases, DTOs, and service factories.

This layer orchestrates business logic by:
1. Defining request/response DTOs for API contracts
2. Implementing use cases that coordinate core services
3. Providing factory functions for dependency injection

Use cases are the only entry point for API handlers.
"""

from erp.application.dto import (
    AdjustStockRequest,
    ChangeStatusRequest,
    CreateContactRequest,
    CreateDocumentRequest,
    CreateProductRequest,
    DocumentListResponse,
    DocumentResponse,
    ErrorResponse,
    HealthResponse,
    LineItemRequest,
    LineItemResponse,
    ProductResponse,
    UpdateDocumentRequest,
    UpdateProductRequest,
)
from erp.application.services import (
    get_dashboard_service,
    get_lifecycle_manager,
    get_stock_service,
    reset_services,
)
from erp.application.use_cases import (
    AdjustStockUseCase,
    ChangeDocumentStatusUseCase,
    CreateDocumentUseCase,
    CreateProductUseCase,
    DeleteDocumentUseCase,
    UpdateDocumentUseCase,
)

__all__ = [
    # Request DTOs
    "CreateProductRequest",
    "UpdateProductRequest",
    "AdjustStockRequest",
    "CreateContactRequest",
    "LineItemRequest",
    "CreateDocumentRequest",
    "UpdateDocumentRequest",
    "ChangeStatusRequest",
    # Response DTOs
    "ProductResponse",
    "LineItemResponse",
    "DocumentResponse",
    "DocumentListResponse",
    "HealthResponse",
    "ErrorResponse",
    # Use Cases
    "CreateDocumentUseCase",
    "UpdateDocumentUseCase",
    "ChangeDocumentStatusUseCase",
    "DeleteDocumentUseCase",
    "CreateProductUseCase",
    "AdjustStockUseCase",
    # Service factories
    "get_lifecycle_manager",
    "get_stock_service",
    "get_dashboard_service",
    "reset_services",
]
