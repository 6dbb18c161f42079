"""Client, supplier and warehouse endpoints."""

from fastapi import APIRouter, Depends, Query, status

from erp.api.dependencies import (
    get_create_contact_use_case,
    get_get_contact_use_case,
    get_list_contacts_use_case,
    get_list_warehouses_use_case,
)
from erp.application.dto.requests import CreateContactRequest
from erp.application.dto.responses import ContactResponse, ErrorResponse, WarehouseResponse
from erp.application.use_cases import (
    CreateContactUseCase,
    GetContactUseCase,
    ListContactsUseCase,
    ListWarehousesUseCase,
)
from erp.core.entities.contact import ContactType

router = APIRouter(prefix="/api/contacts", tags=["contacts"])
warehouses_router = APIRouter(prefix="/api/warehouses", tags=["warehouses"])


@router.post("", response_model=ContactResponse, status_code=status.HTTP_201_CREATED)
async def create_contact(
    request: CreateContactRequest,
    use_case: CreateContactUseCase = Depends(get_create_contact_use_case),
) -> ContactResponse:
    contact = await use_case.execute(request)
    return use_case.to_response(contact)


@router.get("", response_model=list[ContactResponse])
async def list_contacts(
    contact_type: ContactType | None = Query(default=None, alias="type"),
    limit: int = Query(default=100, ge=1, le=500),
    offset: int = Query(default=0, ge=0),
    use_case: ListContactsUseCase = Depends(get_list_contacts_use_case),
) -> list[ContactResponse]:
    """List clients and/or suppliers by name."""
    contacts = await use_case.execute(contact_type=contact_type, limit=limit, offset=offset)
    return use_case.to_response(contacts)


@router.get(
    "/{contact_id}",
    response_model=ContactResponse,
    responses={404: {"model": ErrorResponse}},
)
async def get_contact(
    contact_id: str,
    use_case: GetContactUseCase = Depends(get_get_contact_use_case),
) -> ContactResponse:
    contact = await use_case.execute(contact_id)
    return use_case.to_response(contact)


@warehouses_router.get("", response_model=list[WarehouseResponse])
async def list_warehouses(
    use_case: ListWarehousesUseCase = Depends(get_list_warehouses_use_case),
) -> list[WarehouseResponse]:
    warehouses = await use_case.execute()
    return use_case.to_response(warehouses)
