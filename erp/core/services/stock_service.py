"""
Product and stock service.

Products are created with zero stock; any opening quantity is booked as an
``initial`` ledger entry, and later corrections as ``manual_adjustment``
entries. Nothing here sets stock directly.
"""

import uuid
from collections.abc import Callable

from erp.config import get_logger, get_settings
from erp.core.entities.inventory import (
    INITIAL_SOURCE,
    MANUAL_SOURCE,
    MovementEvent,
    Product,
    StockMovement,
    StockProjection,
)
from erp.core.exceptions import (
    DuplicateSkuError,
    ProductNotFoundError,
    ValidationError,
    WarehouseNotFoundError,
)
from erp.core.interfaces.unit_of_work import IUnitOfWork

logger = get_logger(__name__)


class StockService:
    """Product catalogue writes and manual stock movements."""

    def __init__(
        self,
        uow_factory: Callable[..., IUnitOfWork],
        default_warehouse: str | None = None,
    ) -> None:
        self._uow_factory = uow_factory
        self._default_warehouse = (
            default_warehouse or get_settings().documents.default_warehouse
        )

    async def create_product(
        self,
        product: Product,
        initial_stock: float = 0.0,
        warehouse_id: str | None = None,
    ) -> Product:
        """Create a product, booking any opening stock through the ledger."""
        if initial_stock < 0:
            raise ValidationError("initial_stock", "cannot be negative", initial_stock)

        product.id = product.id or str(uuid.uuid4())
        product.stock = 0.0

        async with self._uow_factory() as uow:
            if await uow.products.get_product_by_sku(product.sku) is not None:
                raise DuplicateSkuError(product.sku)
            warehouse_id = await self._resolve_warehouse(uow, warehouse_id)

            product = await uow.products.create_product(product)
            if initial_stock:
                await uow.ledger.record(
                    StockMovement(
                        product_id=product.id,
                        quantity=initial_stock,
                        source=INITIAL_SOURCE,
                        warehouse_id=warehouse_id,
                        description="Opening stock",
                    )
                )
                product = await uow.products.get_product(product.id)

        logger.info(
            "product_created",
            product_id=product.id,
            sku=product.sku,
            initial_stock=initial_stock,
        )
        return product

    async def adjust_stock(
        self,
        product_id: str,
        quantity: float,
        reason: str,
        warehouse_id: str | None = None,
    ) -> tuple[Product, StockMovement]:
        """
        Book a signed manual correction (count differences, breakage, ...).

        Raises:
            ValidationError: If quantity is zero or no reason is given
            ProductNotFoundError: If the product does not exist
        """
        if not quantity:
            raise ValidationError("quantity", "adjustment must be non-zero", quantity)
        if not reason or not reason.strip():
            raise ValidationError("reason", "a reason is required for manual adjustments")

        async with self._uow_factory() as uow:
            if await uow.products.get_product(product_id) is None:
                raise ProductNotFoundError(product_id)
            warehouse_id = await self._resolve_warehouse(uow, warehouse_id)
            movement = await uow.ledger.record(
                StockMovement(
                    product_id=product_id,
                    quantity=quantity,
                    source=MANUAL_SOURCE,
                    event=MovementEvent.ADJUSTMENT,
                    warehouse_id=warehouse_id,
                    description=reason.strip(),
                )
            )
            product = await uow.products.get_product(product_id)

        logger.info(
            "stock_adjusted",
            product_id=product_id,
            quantity=quantity,
            stock=product.stock,
            status=product.status.value,
        )
        return product, movement

    async def delete_product(self, product_id: str) -> bool:
        """Soft delete. Historical documents keep their product references."""
        async with self._uow_factory() as uow:
            if await uow.products.get_product(product_id) is None:
                raise ProductNotFoundError(product_id)
            deleted = await uow.products.soft_delete_product(product_id)

        logger.info("product_deleted", product_id=product_id)
        return deleted

    async def verify(self, product_id: str) -> StockProjection:
        """Compare the cached stock with the ledger sum."""
        async with self._uow_factory(read_only=True) as uow:
            product = await uow.products.get_product(product_id, include_deleted=True)
            if product is None:
                raise ProductNotFoundError(product_id)
            ledger_stock = await uow.ledger.project_stock(product_id)

        projection = StockProjection(
            product_id=product_id,
            cached_stock=product.stock,
            ledger_stock=ledger_stock,
        )
        if not projection.in_sync:
            logger.error(
                "stock_drift_detected",
                product_id=product_id,
                cached=product.stock,
                ledger=ledger_stock,
            )
        return projection

    async def _resolve_warehouse(self, uow: IUnitOfWork, warehouse_id: str | None) -> str:
        warehouse_id = warehouse_id or self._default_warehouse
        if await uow.warehouses.get_warehouse(warehouse_id) is None:
            raise WarehouseNotFoundError(warehouse_id)
        return warehouse_id
