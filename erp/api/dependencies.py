"""
Dependency injection container for FastAPI.

Provides use case instances and path parsing to route handlers.
Tests override these through ``app.dependency_overrides``.
"""

from erp.application.use_cases import (
    AdjustStockUseCase,
    AllocateDocumentNumberUseCase,
    ChangeDocumentStatusUseCase,
    CreateContactUseCase,
    CreateDocumentUseCase,
    CreateProductUseCase,
    DashboardSummaryUseCase,
    DeleteDocumentUseCase,
    DeleteProductUseCase,
    GetContactUseCase,
    GetDocumentUseCase,
    GetProductUseCase,
    ListContactsUseCase,
    ListDocumentsUseCase,
    ListProductsUseCase,
    ListStockMovementsUseCase,
    ListWarehousesUseCase,
    PurgeOrphanedLinesUseCase,
    UpdateDocumentUseCase,
    UpdateProductUseCase,
    VerifyStockUseCase,
    WarehouseQuantitiesUseCase,
)
from erp.config import bind_request_context
from erp.core.entities.document import DocumentType
from erp.core.exceptions import UnknownDocumentTypeError


def resolve_document_type(document_type: str) -> DocumentType:
    """Parse the ``{document_type}`` path segment."""
    try:
        parsed = DocumentType(document_type)
    except ValueError:
        raise UnknownDocumentTypeError(document_type) from None
    bind_request_context(document_type=parsed.value)
    return parsed


# Document use case dependencies
def get_create_document_use_case() -> CreateDocumentUseCase:
    return CreateDocumentUseCase()


def get_update_document_use_case() -> UpdateDocumentUseCase:
    return UpdateDocumentUseCase()


def get_change_status_use_case() -> ChangeDocumentStatusUseCase:
    return ChangeDocumentStatusUseCase()


def get_delete_document_use_case() -> DeleteDocumentUseCase:
    return DeleteDocumentUseCase()


def get_get_document_use_case() -> GetDocumentUseCase:
    return GetDocumentUseCase()


def get_list_documents_use_case() -> ListDocumentsUseCase:
    return ListDocumentsUseCase()


def get_allocate_number_use_case() -> AllocateDocumentNumberUseCase:
    return AllocateDocumentNumberUseCase()


def get_purge_orphans_use_case() -> PurgeOrphanedLinesUseCase:
    return PurgeOrphanedLinesUseCase()


# Product use case dependencies
def get_create_product_use_case() -> CreateProductUseCase:
    return CreateProductUseCase()


def get_update_product_use_case() -> UpdateProductUseCase:
    return UpdateProductUseCase()


def get_delete_product_use_case() -> DeleteProductUseCase:
    return DeleteProductUseCase()


def get_get_product_use_case() -> GetProductUseCase:
    return GetProductUseCase()


def get_list_products_use_case() -> ListProductsUseCase:
    return ListProductsUseCase()


# Inventory use case dependencies
def get_adjust_stock_use_case() -> AdjustStockUseCase:
    return AdjustStockUseCase()


def get_movements_use_case() -> ListStockMovementsUseCase:
    return ListStockMovementsUseCase()


def get_warehouse_quantities_use_case() -> WarehouseQuantitiesUseCase:
    return WarehouseQuantitiesUseCase()


def get_verify_stock_use_case() -> VerifyStockUseCase:
    return VerifyStockUseCase()


# Contact / warehouse use case dependencies
def get_create_contact_use_case() -> CreateContactUseCase:
    return CreateContactUseCase()


def get_get_contact_use_case() -> GetContactUseCase:
    return GetContactUseCase()


def get_list_contacts_use_case() -> ListContactsUseCase:
    return ListContactsUseCase()


def get_list_warehouses_use_case() -> ListWarehousesUseCase:
    return ListWarehousesUseCase()


# Dashboard
def get_dashboard_use_case() -> DashboardSummaryUseCase:
    return DashboardSummaryUseCase()
