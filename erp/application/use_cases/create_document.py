"""Create Document Use Case: number allocation, totals and stock in one transaction."""

from dataclasses import dataclass

from erp.application.dto.mappers import document_response
from erp.application.dto.requests import CreateDocumentRequest, LineItemRequest
from erp.application.dto.responses import DocumentResponse
from erp.config import get_logger
from erp.core.entities.document import Document, DocumentType, LineItem
from erp.core.services.document_lifecycle import DocumentLifecycleManager

logger = get_logger(__name__)


def to_line_items(items: list[LineItemRequest]) -> list[LineItem]:
    """Convert request lines to entities; positions follow request order."""
    return [
        LineItem(
            description=item.description,
            product_id=item.product_id,
            quantity=item.quantity,
            unit_price=item.unit_price,
            position=position,
        )
        for position, item in enumerate(items)
    ]


@dataclass
class CreateDocumentResult:
    """Result of creating a document."""

    document: Document


class CreateDocumentUseCase:
    """Create a document of any stored type."""

    def __init__(self, lifecycle: DocumentLifecycleManager | None = None):
        self._lifecycle = lifecycle

    def _get_lifecycle(self) -> DocumentLifecycleManager:
        if self._lifecycle is None:
            from erp.application.services import get_lifecycle_manager

            self._lifecycle = get_lifecycle_manager()
        return self._lifecycle

    async def execute(
        self, document_type: DocumentType, request: CreateDocumentRequest
    ) -> CreateDocumentResult:
        """Execute create document use case."""
        logger.info(
            "create_document_started",
            document_type=document_type.value,
            items=len(request.items),
        )

        document = await self._get_lifecycle().create(
            document_type,
            to_line_items(request.items),
            contact_id=request.contact_id,
            on_date=request.date,
            due_date=request.due_date,
            payment_method=request.payment_method,
            note=request.note,
            warehouse_id=request.warehouse_id,
        )
        return CreateDocumentResult(document=document)

    def to_response(self, result: CreateDocumentResult) -> DocumentResponse:
        """Convert result to API response."""
        return document_response(result.document)
