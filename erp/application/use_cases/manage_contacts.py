"""Contact and warehouse use cases."""

import uuid

from erp.application.dto.mappers import contact_response
from erp.application.dto.requests import CreateContactRequest
from erp.application.dto.responses import ContactResponse, WarehouseResponse
from erp.config import get_logger
from erp.core.entities.contact import Contact, ContactType
from erp.core.entities.inventory import Warehouse
from erp.core.exceptions import ContactNotFoundError
from erp.core.interfaces.contact_store import IContactStore, IWarehouseStore

logger = get_logger(__name__)


class _ContactStoreMixin:
    _contact_store: IContactStore | None

    async def _get_contact_store(self) -> IContactStore:
        if self._contact_store is None:
            from erp.infrastructure.storage.sqlite import get_contact_store

            self._contact_store = await get_contact_store()
        return self._contact_store


class CreateContactUseCase(_ContactStoreMixin):
    """Register a client or supplier."""

    def __init__(self, contact_store: IContactStore | None = None):
        self._contact_store = contact_store

    async def execute(self, request: CreateContactRequest) -> Contact:
        store = await self._get_contact_store()
        contact = Contact(
            id=str(uuid.uuid4()),
            **request.model_dump(),
        )
        contact = await store.create_contact(contact)
        logger.info(
            "contact_created",
            contact_id=contact.id,
            contact_type=contact.contact_type.value,
        )
        return contact

    def to_response(self, contact: Contact) -> ContactResponse:
        return contact_response(contact)


class GetContactUseCase(_ContactStoreMixin):
    def __init__(self, contact_store: IContactStore | None = None):
        self._contact_store = contact_store

    async def execute(self, contact_id: str) -> Contact:
        store = await self._get_contact_store()
        contact = await store.get_contact(contact_id)
        if contact is None:
            raise ContactNotFoundError(contact_id)
        return contact

    def to_response(self, contact: Contact) -> ContactResponse:
        return contact_response(contact)


class ListContactsUseCase(_ContactStoreMixin):
    def __init__(self, contact_store: IContactStore | None = None):
        self._contact_store = contact_store

    async def execute(
        self,
        contact_type: ContactType | None = None,
        limit: int = 100,
        offset: int = 0,
    ) -> list[Contact]:
        store = await self._get_contact_store()
        return await store.list_contacts(contact_type=contact_type, limit=limit, offset=offset)

    def to_response(self, contacts: list[Contact]) -> list[ContactResponse]:
        return [contact_response(c) for c in contacts]


class ListWarehousesUseCase:
    def __init__(self, warehouse_store: IWarehouseStore | None = None):
        self._warehouse_store = warehouse_store

    async def execute(self) -> list[Warehouse]:
        if self._warehouse_store is None:
            from erp.infrastructure.storage.sqlite import get_warehouse_store

            self._warehouse_store = await get_warehouse_store()
        return await self._warehouse_store.list_warehouses()

    def to_response(self, warehouses: list[Warehouse]) -> list[WarehouseResponse]:
        return [WarehouseResponse(id=w.id, name=w.name, city=w.city) for w in warehouses]
