"""Unit tests for the document use cases."""

from datetime import date
from unittest.mock import AsyncMock

import pytest

from erp.application.dto.requests import (
    ChangeStatusRequest,
    CreateDocumentRequest,
    LineItemRequest,
    UpdateDocumentRequest,
)
from erp.application.use_cases import (
    AllocateDocumentNumberUseCase,
    ChangeDocumentStatusUseCase,
    CreateDocumentResult,
    CreateDocumentUseCase,
    DeleteDocumentUseCase,
    ListDocumentsUseCase,
    PurgeOrphanedLinesUseCase,
    UpdateDocumentUseCase,
)
from erp.application.use_cases.update_document import to_patch
from erp.core.entities.document import (
    Document,
    DocumentStatus,
    DocumentType,
    LineItem,
)
from erp.core.exceptions import ConfirmationRequiredError
from erp.core.services.document_lifecycle import PurgeResult


@pytest.fixture
def lifecycle():
    """Mocked lifecycle manager."""
    return AsyncMock()


@pytest.fixture
def sample_document() -> Document:
    document = Document(
        id="doc-1",
        document_type=DocumentType.DELIVERY_NOTE,
        document_number="DN-03/26/0004",
        date=date(2026, 3, 12),
        status=DocumentStatus.PENDING,
        warehouse_id="marrakech",
        items=[
            LineItem(id=7, product_id="p1", description="Chair", quantity=6, unit_price=250)
        ],
    )
    return document.apply_totals()


class TestCreateDocument:
    async def test_passes_lines_in_order(self, lifecycle, sample_document):
        lifecycle.create.return_value = sample_document
        use_case = CreateDocumentUseCase(lifecycle=lifecycle)
        request = CreateDocumentRequest(
            date=date(2026, 3, 12),
            items=[
                LineItemRequest(description="Chair", product_id="p1", quantity=6, unit_price=250),
                LineItemRequest(description="Cushion", quantity=6, unit_price=40),
            ],
        )

        result = await use_case.execute(DocumentType.DELIVERY_NOTE, request)

        args = lifecycle.create.call_args
        items = args.args[1]
        assert args.args[0] == DocumentType.DELIVERY_NOTE
        assert [(i.description, i.position) for i in items] == [("Chair", 0), ("Cushion", 1)]
        assert args.kwargs["on_date"] == date(2026, 3, 12)
        assert result.document is sample_document

    def test_response_lists_next_statuses(self, lifecycle, sample_document):
        use_case = CreateDocumentUseCase(lifecycle=lifecycle)

        response = use_case.to_response(CreateDocumentResult(document=sample_document))

        assert response.document_number == "DN-03/26/0004"
        assert response.total == 1500
        assert response.allowed_transitions == ["cancelled", "delivered", "in_transit"]
        assert response.items[0].position == 0


class TestUpdateDocument:
    def test_patch_only_carries_sent_fields(self):
        patch = to_patch(UpdateDocumentRequest(note="Gate B"))
        assert patch.model_fields_set == {"note"}

    def test_explicit_null_is_kept(self):
        patch = to_patch(UpdateDocumentRequest.model_validate({"due_date": None}))
        assert "due_date" in patch.model_fields_set
        assert patch.due_date is None

    def test_items_are_converted(self):
        patch = to_patch(
            UpdateDocumentRequest(
                items=[LineItemRequest(description="Lamp", quantity=2, unit_price=80)]
            )
        )
        assert isinstance(patch.items[0], LineItem)
        assert patch.items[0].total == 160

    async def test_delegates_to_lifecycle(self, lifecycle, sample_document):
        lifecycle.update.return_value = sample_document
        use_case = UpdateDocumentUseCase(lifecycle=lifecycle)

        await use_case.execute(
            DocumentType.DELIVERY_NOTE, "doc-1", UpdateDocumentRequest(status="delivered")
        )

        document_type, document_id, patch = lifecycle.update.call_args.args
        assert (document_type, document_id) == (DocumentType.DELIVERY_NOTE, "doc-1")
        assert patch.status == DocumentStatus.DELIVERED


class TestChangeStatus:
    async def test_change_status(self, lifecycle, sample_document):
        lifecycle.change_status.return_value = sample_document
        use_case = ChangeDocumentStatusUseCase(lifecycle=lifecycle)

        await use_case.execute(
            DocumentType.DELIVERY_NOTE,
            "doc-1",
            ChangeStatusRequest(status=DocumentStatus.CANCELLED),
        )

        lifecycle.change_status.assert_awaited_once_with(
            DocumentType.DELIVERY_NOTE, "doc-1", DocumentStatus.CANCELLED
        )


class TestDeleteDocument:
    async def test_requires_confirmation(self, lifecycle):
        use_case = DeleteDocumentUseCase(lifecycle=lifecycle)

        with pytest.raises(ConfirmationRequiredError):
            await use_case.execute(DocumentType.INVOICE, "doc-1")

        lifecycle.delete.assert_not_called()

    async def test_confirmed(self, lifecycle):
        lifecycle.delete.return_value = True
        use_case = DeleteDocumentUseCase(lifecycle=lifecycle)

        response = await use_case.execute(DocumentType.INVOICE, "doc-1", confirm=True)

        assert response.deleted is True
        assert response.id == "doc-1"


class TestListAndNumbers:
    async def test_list_response(self, lifecycle, sample_document):
        lifecycle.list_documents.return_value = [sample_document]
        use_case = ListDocumentsUseCase(lifecycle=lifecycle)

        documents = await use_case.execute(
            DocumentType.DELIVERY_NOTE, status=DocumentStatus.PENDING
        )
        response = use_case.to_response(DocumentType.DELIVERY_NOTE, documents)

        assert lifecycle.list_documents.call_args.kwargs["status"] == DocumentStatus.PENDING
        assert response.total == 1
        assert response.document_type == "delivery_note"

    async def test_allocate_number(self, lifecycle):
        lifecycle.allocate_number.return_value = "ST-03/26/0001"
        use_case = AllocateDocumentNumberUseCase(lifecycle=lifecycle)

        response = await use_case.execute(DocumentType.STATEMENT, date(2026, 3, 1))

        assert response.document_number == "ST-03/26/0001"
        assert response.document_type == "statement"


class TestPurgeOrphans:
    async def test_requires_confirmation(self, lifecycle):
        with pytest.raises(ConfirmationRequiredError):
            await PurgeOrphanedLinesUseCase(lifecycle=lifecycle).execute()
        lifecycle.purge_orphaned_lines.assert_not_called()

    async def test_response(self, lifecycle):
        lifecycle.purge_orphaned_lines.return_value = PurgeResult(
            lines_removed=3, movements_recorded=2
        )
        use_case = PurgeOrphanedLinesUseCase(lifecycle=lifecycle)

        response = use_case.to_response(await use_case.execute(confirm=True))

        assert (response.lines_removed, response.movements_recorded) == (3, 2)
