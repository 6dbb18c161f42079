"""Delete Document Use Case: requires explicit confirmation."""

from erp.application.dto.responses import DeleteResponse
from erp.config import get_logger
from erp.core.entities.document import DocumentType
from erp.core.exceptions import ConfirmationRequiredError
from erp.core.services.document_lifecycle import DocumentLifecycleManager

logger = get_logger(__name__)


class DeleteDocumentUseCase:
    """Delete a document, returning any stock it still holds."""

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
        confirm: bool = False,
    ) -> DeleteResponse:
        """
        Execute delete document use case.

        Raises:
            ConfirmationRequiredError: If confirm is not set
            DocumentNotFoundError: If the document does not exist
        """
        if not confirm:
            raise ConfirmationRequiredError(f"delete {document_type.value}")

        deleted = await self._get_lifecycle().delete(document_type, document_id)
        return DeleteResponse(id=document_id, deleted=deleted)
