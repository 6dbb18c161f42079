"""
Document lifecycle manager.

The only component that writes document headers and their line items.
Each operation runs in a single unit of work, so number allocation,
header, items and the stock ledger entries they cause commit together.
"""

import uuid
from collections.abc import Callable
from dataclasses import dataclass
from datetime import date, datetime

from erp.config import get_logger, get_settings
from erp.config.settings import DocumentSettings
from erp.core.entities.contact import ContactType
from erp.core.entities.document import (
    TAXED_TYPES,
    Document,
    DocumentPatch,
    DocumentStatus,
    DocumentType,
    LineItem,
    PaymentMethod,
)
from erp.core.entities.inventory import MovementEvent, StockMovement
from erp.core.exceptions import (
    ContactNotFoundError,
    DocumentLockedError,
    DocumentNotFoundError,
    DuplicateDocumentNumberError,
    ProductNotFoundError,
    ValidationError,
    WarehouseNotFoundError,
)
from erp.core.interfaces.unit_of_work import IUnitOfWork
from erp.core.services.line_items import (
    PlannedMovement,
    plan_create,
    plan_line_changes,
    plan_reversal,
    validate_line_items,
)
from erp.core.services.status_transitions import (
    TRANSITIONS,
    ensure_transition,
    initial_status,
    is_terminal,
)

logger = get_logger(__name__)

CLIENT_TYPES = frozenset(
    {DocumentType.INVOICE, DocumentType.ESTIMATE, DocumentType.CREDIT_NOTE}
)
SUPPLIER_TYPES = frozenset({DocumentType.PURCHASE_ORDER, DocumentType.PURCHASE_INVOICE})

# Source tag for lines found without a header; they live in the delivery note table
ORPHAN_SOURCE = DocumentType.DELIVERY_NOTE.value


@dataclass
class PurgeResult:
    """Outcome of an orphaned line purge."""

    lines_removed: int
    movements_recorded: int


class DocumentLifecycleManager:
    """
    Creates, updates, deletes and transitions documents.

    The unit of work factory is called with ``read_only=True`` for reads,
    which skips taking the write lock.
    """

    def __init__(
        self,
        uow_factory: Callable[..., IUnitOfWork],
        settings: DocumentSettings | None = None,
    ) -> None:
        self._uow_factory = uow_factory
        self._settings = settings or get_settings().documents

    # Writes

    async def create(
        self,
        document_type: DocumentType,
        items: list[LineItem],
        contact_id: str | None = None,
        on_date: date | None = None,
        due_date: date | None = None,
        payment_method: PaymentMethod | None = None,
        note: str | None = None,
        warehouse_id: str | None = None,
    ) -> Document:
        """
        Create a document in its type's initial status.

        Raises:
            ValidationError: Bad lines, contact of the wrong kind, etc.
            NotFoundError: Unknown contact, product or warehouse
            DuplicateDocumentNumberError: Number still taken after one resync
        """
        status = self._initial_status(document_type)
        items = validate_line_items(items, strict=self._settings.strict_line_validation)

        document = Document(
            id=str(uuid.uuid4()),
            document_type=document_type,
            document_number="",
            contact_id=contact_id,
            date=on_date or date.today(),
            due_date=due_date,
            status=status,
            payment_method=payment_method,
            note=note,
            vat_rate=self._settings.vat_rate if document_type in TAXED_TYPES else 0.0,
            items=items,
        )

        async with self._uow_factory() as uow:
            await self._check_contact(uow, document_type, contact_id)
            await self._check_products(uow, items)
            if document.moves_stock:
                document.warehouse_id = await self._resolve_warehouse(uow, warehouse_id)

            document.document_number = await uow.sequences.allocate(
                document_type, document.date
            )
            document.apply_totals()

            try:
                document = await uow.documents.insert_document(document)
            except DuplicateDocumentNumberError as e:
                logger.warning(
                    "document_number_conflict",
                    document_type=document_type.value,
                    number=document.document_number,
                    error=e.message,
                )
                document.document_number = await uow.sequences.allocate(
                    document_type, document.date, resync=True
                )
                document = await uow.documents.insert_document(document)

            if document.moves_stock:
                await self._apply_plan(
                    uow, document, plan_create(document.items, document.document_number)
                )

        logger.info(
            "document_created",
            document_type=document_type.value,
            document_id=document.id,
            number=document.document_number,
            total=document.total,
            items=len(document.items),
        )
        return document

    async def update(
        self,
        document_type: DocumentType,
        document_id: str,
        patch: DocumentPatch,
    ) -> Document:
        """
        Patch header fields, replace items and/or change status.

        Replaced items are diffed against the stored ones so only the
        net stock change reaches the ledger.
        """
        if "date" in patch.model_fields_set and patch.date is None:
            raise ValidationError("date", "a document date cannot be cleared")

        async with self._uow_factory() as uow:
            document = await self._load(uow, document_type, document_id)

            if "contact_id" in patch.model_fields_set:
                await self._check_contact(uow, document_type, patch.contact_id)
            document.apply_patch(patch)

            if patch.items is not None:
                if is_terminal(document_type, document.status):
                    raise DocumentLockedError(
                        document.document_number, document.status.value
                    )
                new_items = validate_line_items(
                    patch.items, strict=self._settings.strict_line_validation
                )
                await self._check_products(
                    uow,
                    new_items,
                    known={item.product_id for item in document.items if item.product_id},
                )

                if document.moves_stock:
                    plan = plan_line_changes(
                        document.items, new_items, document.document_number
                    )
                    await self._apply_plan(uow, document, plan)

                document.items = new_items
                document.apply_totals()
                document = await uow.documents.replace_items(document)

            if patch.status is not None and patch.status != document.status:
                await self._transition(uow, document, patch.status)

            document.updated_at = datetime.utcnow()
            document = await uow.documents.update_header(document)

        logger.info(
            "document_updated",
            document_type=document_type.value,
            document_id=document_id,
            fields=sorted(patch.model_fields_set),
        )
        return document

    async def change_status(
        self,
        document_type: DocumentType,
        document_id: str,
        new_status: DocumentStatus,
    ) -> Document:
        """
        Move a document along its type's status machine.

        Cancelling a stock-moving document returns its stock. Other
        transitions never touch the ledger.
        """
        async with self._uow_factory() as uow:
            document = await self._load(uow, document_type, document_id)
            previous = document.status
            await self._transition(uow, document, new_status)
            document.updated_at = datetime.utcnow()
            document = await uow.documents.update_header(document)

        logger.info(
            "document_status_changed",
            document_type=document_type.value,
            number=document.document_number,
            previous=previous.value,
            status=new_status.value,
        )
        return document

    async def delete(self, document_type: DocumentType, document_id: str) -> bool:
        """
        Delete a document with its items.

        Stock still held by the document is returned first. A cancelled
        document already gave its stock back and is not reversed again.
        """
        async with self._uow_factory() as uow:
            document = await self._load(uow, document_type, document_id)

            if document.moves_stock and document.status != DocumentStatus.CANCELLED:
                await self._apply_plan(
                    uow, document, plan_reversal(document.items, document.document_number)
                )

            deleted = await uow.documents.delete_document(document)

        logger.info(
            "document_deleted",
            document_type=document_type.value,
            document_id=document_id,
            number=document.document_number,
        )
        return deleted

    async def purge_orphaned_lines(self) -> PurgeResult:
        """
        Return stock held by stock-moving lines whose header is gone, then drop them.

        Each reversal references the last known document id and is tagged
        as orphaned.
        """
        movements = 0
        history: dict[str, list[StockMovement]] = {}
        async with self._uow_factory() as uow:
            lines = await uow.documents.find_orphaned_lines()
            for line in lines:
                if line.product_id:
                    if line.document_id not in history:
                        history[line.document_id] = await uow.ledger.movements_for_reference(
                            line.document_id
                        )
                    await uow.ledger.record(
                        StockMovement(
                            product_id=line.product_id,
                            quantity=line.quantity,
                            source=ORPHAN_SOURCE,
                            event=MovementEvent.ORPHANED,
                            reference_id=line.document_id,
                            warehouse_id=self._origin_warehouse(
                                history[line.document_id], line.product_id
                            ),
                            description=f"Orphaned line reversal: {line.description}",
                        )
                    )
                    movements += 1
                await uow.documents.delete_line(DocumentType.DELIVERY_NOTE, line.id)

        if lines:
            logger.warning(
                "orphaned_lines_purged",
                lines=len(lines),
                movements=movements,
            )
        return PurgeResult(lines_removed=len(lines), movements_recorded=movements)

    async def allocate_number(
        self, document_type: DocumentType, on_date: date | None = None
    ) -> str:
        """
        Reserve a number without storing a document.

        Statements are only ever numbered this way.
        """
        async with self._uow_factory() as uow:
            number = await uow.sequences.allocate(document_type, on_date or date.today())

        logger.info(
            "document_number_reserved",
            document_type=document_type.value,
            number=number,
        )
        return number

    # Reads

    async def get(self, document_type: DocumentType, document_id: str) -> Document:
        async with self._uow_factory(read_only=True) as uow:
            return await self._load(uow, document_type, document_id)

    async def list_documents(
        self,
        document_type: DocumentType,
        status: DocumentStatus | None = None,
        contact_id: str | None = None,
        start_date: date | None = None,
        end_date: date | None = None,
        limit: int = 100,
        offset: int = 0,
    ) -> list[Document]:
        self._initial_status(document_type)
        async with self._uow_factory(read_only=True) as uow:
            return await uow.documents.list_documents(
                document_type,
                status=status,
                contact_id=contact_id,
                start_date=start_date,
                end_date=end_date,
                limit=limit,
                offset=offset,
            )

    # Helpers

    @staticmethod
    def _initial_status(document_type: DocumentType) -> DocumentStatus:
        if document_type not in TRANSITIONS:
            raise ValidationError(
                "document_type",
                f"'{document_type.value}' documents are numbered but not stored",
                document_type.value,
            )
        return initial_status(document_type)

    async def _load(
        self, uow: IUnitOfWork, document_type: DocumentType, document_id: str
    ) -> Document:
        self._initial_status(document_type)
        document = await uow.documents.get_document(document_type, document_id)
        if document is None:
            raise DocumentNotFoundError(document_id, document_type.value)
        return document

    async def _transition(
        self, uow: IUnitOfWork, document: Document, new_status: DocumentStatus
    ) -> None:
        ensure_transition(document.document_type, document.status, new_status)
        # Cancelled is terminal, so this reversal can only ever run once
        if document.moves_stock and new_status == DocumentStatus.CANCELLED:
            await self._apply_plan(
                uow, document, plan_reversal(document.items, document.document_number)
            )
        document.status = new_status

    async def _apply_plan(
        self, uow: IUnitOfWork, document: Document, plan: list[PlannedMovement]
    ) -> None:
        for step in plan:
            await uow.ledger.record(
                StockMovement(
                    product_id=step.product_id,
                    quantity=step.quantity,
                    source=document.document_type.value,
                    event=step.event,
                    reference_id=document.id,
                    reference_number=document.document_number,
                    warehouse_id=document.warehouse_id,
                    description=step.description,
                )
            )

    def _origin_warehouse(self, movements: list[StockMovement], product_id: str) -> str:
        """Warehouse the line was shipped from, per its original debit."""
        for movement in movements:
            if (
                movement.product_id == product_id
                and movement.event == MovementEvent.CREATE
                and movement.warehouse_id
            ):
                return movement.warehouse_id
        for movement in movements:
            if movement.warehouse_id:
                return movement.warehouse_id
        return self._settings.default_warehouse

    async def _check_contact(
        self, uow: IUnitOfWork, document_type: DocumentType, contact_id: str | None
    ) -> None:
        if contact_id is None:
            if document_type in CLIENT_TYPES or document_type in SUPPLIER_TYPES:
                raise ValidationError("contact_id", "a client or supplier is required")
            return

        contact = await uow.contacts.get_contact(contact_id)
        if contact is None:
            raise ContactNotFoundError(contact_id)

        expected = None
        if document_type in CLIENT_TYPES:
            expected = ContactType.CLIENT
        elif document_type in SUPPLIER_TYPES:
            expected = ContactType.SUPPLIER
        if expected is not None and contact.contact_type != expected:
            raise ValidationError(
                "contact_id",
                f"{document_type.value} requires a {expected.value}",
                contact_id,
            )

    async def _check_products(
        self, uow: IUnitOfWork, items: list[LineItem], known: set[str] | None = None
    ) -> None:
        """Products not already on the document must exist and be live."""
        referenced = {item.product_id for item in items if item.product_id}
        for product_id in referenced - (known or set()):
            if await uow.products.get_product(product_id) is None:
                raise ProductNotFoundError(product_id)

    async def _resolve_warehouse(
        self, uow: IUnitOfWork, warehouse_id: str | None
    ) -> str:
        warehouse_id = warehouse_id or self._settings.default_warehouse
        if await uow.warehouses.get_warehouse(warehouse_id) is None:
            raise WarehouseNotFoundError(warehouse_id)
        return warehouse_id
