"""Allocate Document Number Use Case: numbering without a stored document."""

from datetime import date

from erp.application.dto.responses import AllocatedNumberResponse
from erp.core.entities.document import DocumentType
from erp.core.services.document_lifecycle import DocumentLifecycleManager


class AllocateDocumentNumberUseCase:
    """Reserve the next number of a type, e.g. for an account statement."""

    def __init__(self, lifecycle: DocumentLifecycleManager | None = None):
        self._lifecycle = lifecycle

    def _get_lifecycle(self) -> DocumentLifecycleManager:
        if self._lifecycle is None:
            from erp.application.services import get_lifecycle_manager

            self._lifecycle = get_lifecycle_manager()
        return self._lifecycle

    async def execute(
        self, document_type: DocumentType, on_date: date | None = None
    ) -> AllocatedNumberResponse:
        number = await self._get_lifecycle().allocate_number(document_type, on_date)
        return AllocatedNumberResponse(
            document_type=document_type.value, document_number=number
        )
