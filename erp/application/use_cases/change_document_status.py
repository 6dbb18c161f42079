"""Change Document Status Use Case."""

from erp.application.dto.mappers import document_response
from erp.application.dto.requests import ChangeStatusRequest
from erp.application.dto.responses import DocumentResponse
from erp.core.entities.document import Document, DocumentType
from erp.core.services.document_lifecycle import DocumentLifecycleManager


class ChangeDocumentStatusUseCase:
    """Move a document along its status machine."""

    def __init__(self, lifecycle: DocumentLifecycleManager | None = None):
        self._lifecycle = lifecycle

    def _get_lifecycle(self) -> DocumentLifecycleManager:
        if self._lifecycle is None:
            from erp.application.services import get_lifecycle_manager

            self._lifecycle = get_lifecycle_manager()
        return self._lifecycle

    async def execute(
        self,
        document_type: DocumentType,
        document_id: str,
        request: ChangeStatusRequest,
    ) -> Document:
        return await self._get_lifecycle().change_status(
            document_type, document_id, request.status
        )

    def to_response(self, document: Document) -> DocumentResponse:
        return document_response(document)
