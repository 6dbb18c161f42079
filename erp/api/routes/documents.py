"""Commercial document endpoints (invoices, estimates, delivery notes, ...)."""

from datetime import date

from fastapi import APIRouter, Depends, Query, status

from erp.api.dependencies import (
    get_allocate_number_use_case,
    get_change_status_use_case,
    get_create_document_use_case,
    get_delete_document_use_case,
    get_get_document_use_case,
    get_list_documents_use_case,
    get_update_document_use_case,
    resolve_document_type,
)
from erp.application.dto.requests import (
    ChangeStatusRequest,
    CreateDocumentRequest,
    UpdateDocumentRequest,
)
from erp.application.dto.responses import (
    AllocatedNumberResponse,
    DeleteResponse,
    DocumentListResponse,
    DocumentResponse,
    ErrorResponse,
)
from erp.application.use_cases import (
    AllocateDocumentNumberUseCase,
    ChangeDocumentStatusUseCase,
    CreateDocumentUseCase,
    DeleteDocumentUseCase,
    GetDocumentUseCase,
    ListDocumentsUseCase,
    UpdateDocumentUseCase,
)
from erp.core.entities.document import DocumentStatus, DocumentType

router = APIRouter(prefix="/api/documents", tags=["documents"])


@router.post(
    "/{document_type}",
    response_model=DocumentResponse,
    status_code=status.HTTP_201_CREATED,
    responses={
        400: {"model": ErrorResponse},
        404: {"model": ErrorResponse},
        409: {"model": ErrorResponse},
    },
)
async def create_document(
    request: CreateDocumentRequest,
    document_type: DocumentType = Depends(resolve_document_type),
    use_case: CreateDocumentUseCase = Depends(get_create_document_use_case),
) -> DocumentResponse:
    """
    Create a document.

    The number is allocated server-side. Delivery notes and divers
    documents take their lines out of stock in the same transaction.
    """
    result = await use_case.execute(document_type, request)
    return use_case.to_response(result)


@router.get("/{document_type}", response_model=DocumentListResponse)
async def list_documents(
    document_type: DocumentType = Depends(resolve_document_type),
    status_filter: DocumentStatus | None = Query(default=None, alias="status"),
    contact_id: str | None = None,
    start_date: date | None = None,
    end_date: date | None = None,
    limit: int = Query(default=100, ge=1, le=500),
    offset: int = Query(default=0, ge=0),
    use_case: ListDocumentsUseCase = Depends(get_list_documents_use_case),
) -> DocumentListResponse:
    """List document headers, newest first. Items are not included."""
    documents = await use_case.execute(
        document_type,
        status=status_filter,
        contact_id=contact_id,
        start_date=start_date,
        end_date=end_date,
        limit=limit,
        offset=offset,
    )
    return use_case.to_response(document_type, documents)


@router.post(
    "/{document_type}/numbers",
    response_model=AllocatedNumberResponse,
    status_code=status.HTTP_201_CREATED,
)
async def allocate_number(
    document_type: DocumentType = Depends(resolve_document_type),
    on_date: date | None = Query(default=None, alias="date"),
    use_case: AllocateDocumentNumberUseCase = Depends(get_allocate_number_use_case),
) -> AllocatedNumberResponse:
    """Reserve the next number of a type without storing a document."""
    return await use_case.execute(document_type, on_date)


@router.get(
    "/{document_type}/{document_id}",
    response_model=DocumentResponse,
    responses={404: {"model": ErrorResponse}},
)
async def get_document(
    document_id: str,
    document_type: DocumentType = Depends(resolve_document_type),
    use_case: GetDocumentUseCase = Depends(get_get_document_use_case),
) -> DocumentResponse:
    """Get a document with its line items."""
    document = await use_case.execute(document_type, document_id)
    return use_case.to_response(document)


@router.patch(
    "/{document_type}/{document_id}",
    response_model=DocumentResponse,
    responses={400: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
)
async def update_document(
    document_id: str,
    request: UpdateDocumentRequest,
    document_type: DocumentType = Depends(resolve_document_type),
    use_case: UpdateDocumentUseCase = Depends(get_update_document_use_case),
) -> DocumentResponse:
    """Patch header fields, replace items or change status."""
    document = await use_case.execute(document_type, document_id, request)
    return use_case.to_response(document)


@router.post(
    "/{document_type}/{document_id}/status",
    response_model=DocumentResponse,
    responses={400: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
)
async def change_status(
    document_id: str,
    request: ChangeStatusRequest,
    document_type: DocumentType = Depends(resolve_document_type),
    use_case: ChangeDocumentStatusUseCase = Depends(get_change_status_use_case),
) -> DocumentResponse:
    """Move a document to a new status. Cancelling a delivery note returns its stock."""
    document = await use_case.execute(document_type, document_id, request)
    return use_case.to_response(document)


@router.delete(
    "/{document_type}/{document_id}",
    response_model=DeleteResponse,
    responses={400: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
)
async def delete_document(
    document_id: str,
    confirm: bool = Query(default=False, description="Must be true to delete"),
    document_type: DocumentType = Depends(resolve_document_type),
    use_case: DeleteDocumentUseCase = Depends(get_delete_document_use_case),
) -> DeleteResponse:
    """Delete a document and its items, returning any stock it holds."""
    return await use_case.execute(document_type, document_id, confirm=confirm)
