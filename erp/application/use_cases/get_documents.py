"""Document read use cases."""

from datetime import date

from erp.application.dto.mappers import document_response
from erp.application.dto.responses import DocumentListResponse, DocumentResponse
from erp.core.entities.document import Document, DocumentStatus, DocumentType
from erp.core.services.document_lifecycle import DocumentLifecycleManager


class _LifecycleReader:
    def __init__(self, lifecycle: DocumentLifecycleManager | None = None):
        self._lifecycle = lifecycle

    def _get_lifecycle(self) -> DocumentLifecycleManager:
        if self._lifecycle is None:
            from erp.application.services import get_lifecycle_manager

            self._lifecycle = get_lifecycle_manager()
        return self._lifecycle


class GetDocumentUseCase(_LifecycleReader):
    """Fetch one document with its items."""

    async def execute(self, document_type: DocumentType, document_id: str) -> Document:
        return await self._get_lifecycle().get(document_type, document_id)

    def to_response(self, document: Document) -> DocumentResponse:
        return document_response(document)


class ListDocumentsUseCase(_LifecycleReader):
    """List document headers of one type, newest first."""

    async def execute(
        self,
        document_type: DocumentType,
        status: DocumentStatus | None = None,
        contact_id: str | None = None,
        start_date: date | None = None,
        end_date: date | None = None,
        limit: int = 100,
        offset: int = 0,
    ) -> list[Document]:
        return await self._get_lifecycle().list_documents(
            document_type,
            status=status,
            contact_id=contact_id,
            start_date=start_date,
            end_date=end_date,
            limit=limit,
            offset=offset,
        )

    def to_response(
        self, document_type: DocumentType, documents: list[Document]
    ) -> DocumentListResponse:
        return DocumentListResponse(
            document_type=document_type.value,
            documents=[document_response(d) for d in documents],
            total=len(documents),
        )
