"""Entity to response DTO conversion shared by several use cases."""

from erp.application.dto.responses import (
    ContactResponse,
    DocumentResponse,
    LineItemResponse,
    ProductResponse,
    StockMovementResponse,
    WarehouseQuantityResponse,
)
from erp.core.entities.contact import Contact
from erp.core.entities.document import Document
from erp.core.entities.inventory import Product, StockMovement, WarehouseQuantity
from erp.core.services.status_transitions import allowed_transitions


def product_response(product: Product) -> ProductResponse:
    return ProductResponse(
        id=product.id,  # type: ignore[arg-type]
        sku=product.sku,
        name=product.name,
        category=product.category,
        description=product.description,
        unit=product.unit,
        price=product.price,
        stock=product.stock,
        min_stock=product.min_stock,
        status=product.status.value,
        stock_value=round(product.stock_value, 2),
        last_movement=product.last_movement,
        created_at=product.created_at,
        updated_at=product.updated_at,
    )


def movement_response(movement: StockMovement) -> StockMovementResponse:
    return StockMovementResponse(
        id=movement.id,  # type: ignore[arg-type]
        product_id=movement.product_id,
        quantity=movement.quantity,
        movement_type=movement.movement_type,
        source=movement.source,
        event=movement.event.value,
        reference_id=movement.reference_id,
        reference_number=movement.reference_number,
        warehouse_id=movement.warehouse_id,
        description=movement.description,
        created_at=movement.created_at,
    )


def warehouse_quantity_response(row: WarehouseQuantity) -> WarehouseQuantityResponse:
    return WarehouseQuantityResponse(warehouse_id=row.warehouse_id, quantity=row.quantity)


def contact_response(contact: Contact) -> ContactResponse:
    return ContactResponse(
        id=contact.id,  # type: ignore[arg-type]
        name=contact.name,
        company=contact.company,
        contact_type=contact.contact_type.value,
        email=contact.email,
        phone=contact.phone,
        city=contact.city,
        ice=contact.ice,
        if_number=contact.if_number,
        rc=contact.rc,
        created_at=contact.created_at,
    )


def document_response(document: Document) -> DocumentResponse:
    """Map a document; the allowed next statuses are included for the UI."""
    return DocumentResponse(
        id=document.id,  # type: ignore[arg-type]
        document_type=document.document_type.value,
        document_number=document.document_number,
        contact_id=document.contact_id,
        status=document.status.value,
        due_date=document.due_date,
        payment_method=document.payment_method.value if document.payment_method else None,
        note=document.note,
        warehouse_id=document.warehouse_id,
        vat_rate=document.vat_rate,
        subtotal=document.subtotal,
        vat_amount=document.vat_amount,
        total=document.total,
        allowed_transitions=sorted(
            s.value for s in allowed_transitions(document.document_type, document.status)
        ),
        items=[
            LineItemResponse(
                id=item.id,
                position=item.position,
                product_id=item.product_id,
                description=item.description,
                quantity=item.quantity,
                unit_price=item.unit_price,
                total=item.total,
            )
            for item in document.items
        ],
        created_at=document.created_at,
        updated_at=document.updated_at,
        date=document.date,
    )
