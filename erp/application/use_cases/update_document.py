"""Update Document Use Case: header patch, item replacement, status change."""

from erp.application.dto.mappers import document_response
from erp.application.dto.requests import UpdateDocumentRequest
from erp.application.dto.responses import DocumentResponse
from erp.application.use_cases.create_document import to_line_items
from erp.config import get_logger
from erp.core.entities.document import Document, DocumentPatch, DocumentType
from erp.core.services.document_lifecycle import DocumentLifecycleManager

logger = get_logger(__name__)


def to_patch(request: UpdateDocumentRequest) -> DocumentPatch:
    """Build a patch carrying only the fields the client actually sent."""
    values = {name: getattr(request, name) for name in request.model_fields_set}
    if request.items is not None:
        values["items"] = to_line_items(request.items)
    return DocumentPatch(**values)


class UpdateDocumentUseCase:
    """Apply a partial update to a document."""

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
        request: UpdateDocumentRequest,
    ) -> Document:
        patch = to_patch(request)
        logger.info(
            "update_document_started",
            document_type=document_type.value,
            document_id=document_id,
            fields=sorted(patch.model_fields_set),
        )
        return await self._get_lifecycle().update(document_type, document_id, patch)

    def to_response(self, document: Document) -> DocumentResponse:
        return document_response(document)
