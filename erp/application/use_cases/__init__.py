"""Application use cases."""

from erp.application.use_cases.adjust_stock import AdjustStockResult, AdjustStockUseCase
from erp.application.use_cases.allocate_document_number import (
    AllocateDocumentNumberUseCase,
)
from erp.application.use_cases.change_document_status import ChangeDocumentStatusUseCase
from erp.application.use_cases.create_document import (
    CreateDocumentResult,
    CreateDocumentUseCase,
)
from erp.application.use_cases.dashboard_summary import DashboardSummaryUseCase
from erp.application.use_cases.delete_document import DeleteDocumentUseCase
from erp.application.use_cases.get_documents import GetDocumentUseCase, ListDocumentsUseCase
from erp.application.use_cases.manage_contacts import (
    CreateContactUseCase,
    GetContactUseCase,
    ListContactsUseCase,
    ListWarehousesUseCase,
)
from erp.application.use_cases.manage_products import (
    CreateProductResult,
    CreateProductUseCase,
    DeleteProductUseCase,
    GetProductUseCase,
    ListProductsUseCase,
    UpdateProductUseCase,
)
from erp.application.use_cases.purge_orphaned_lines import PurgeOrphanedLinesUseCase
from erp.application.use_cases.stock_queries import (
    ListStockMovementsUseCase,
    VerifyStockUseCase,
    WarehouseQuantitiesUseCase,
)
from erp.application.use_cases.update_document import UpdateDocumentUseCase

__all__ = [
    # Documents
    "CreateDocumentUseCase",
    "CreateDocumentResult",
    "UpdateDocumentUseCase",
    "ChangeDocumentStatusUseCase",
    "DeleteDocumentUseCase",
    "GetDocumentUseCase",
    "ListDocumentsUseCase",
    "AllocateDocumentNumberUseCase",
    "PurgeOrphanedLinesUseCase",
    # Products / stock
    "CreateProductUseCase",
    "CreateProductResult",
    "UpdateProductUseCase",
    "DeleteProductUseCase",
    "GetProductUseCase",
    "ListProductsUseCase",
    "AdjustStockUseCase",
    "AdjustStockResult",
    "ListStockMovementsUseCase",
    "WarehouseQuantitiesUseCase",
    "VerifyStockUseCase",
    # Contacts / warehouses
    "CreateContactUseCase",
    "GetContactUseCase",
    "ListContactsUseCase",
    "ListWarehousesUseCase",
    # Dashboard
    "DashboardSummaryUseCase",
]
