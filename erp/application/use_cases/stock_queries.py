"""Ledger read use cases: history, per-warehouse quantities and drift checks."""

from erp.application.dto.mappers import movement_response, warehouse_quantity_response
from erp.application.dto.responses import (
    StockMovementResponse,
    StockProjectionResponse,
    WarehouseQuantityResponse,
)
from erp.core.entities.inventory import StockMovement, StockProjection, WarehouseQuantity
from erp.core.exceptions import ProductNotFoundError
from erp.core.interfaces.inventory_store import IProductStore, IStockLedger
from erp.core.services.stock_service import StockService


class _LedgerReader:
    def __init__(
        self,
        ledger: IStockLedger | None = None,
        product_store: IProductStore | None = None,
    ):
        self._ledger = ledger
        self._product_store = product_store

    async def _get_ledger(self) -> IStockLedger:
        if self._ledger is None:
            from erp.infrastructure.storage.sqlite import get_stock_ledger

            self._ledger = await get_stock_ledger()
        return self._ledger

    async def _ensure_product(self, product_id: str) -> None:
        if self._product_store is None:
            from erp.infrastructure.storage.sqlite import get_product_store

            self._product_store = await get_product_store()
        if await self._product_store.get_product(product_id, include_deleted=True) is None:
            raise ProductNotFoundError(product_id)


class ListStockMovementsUseCase(_LedgerReader):
    """Movement history for a product, newest first."""

    async def execute(
        self, product_id: str, limit: int = 100, offset: int = 0
    ) -> list[StockMovement]:
        await self._ensure_product(product_id)
        ledger = await self._get_ledger()
        return await ledger.list_movements(product_id, limit=limit, offset=offset)

    def to_response(self, movements: list[StockMovement]) -> list[StockMovementResponse]:
        return [movement_response(m) for m in movements]


class WarehouseQuantitiesUseCase(_LedgerReader):
    """Where a product's stock physically sits, derived from the ledger."""

    async def execute(self, product_id: str) -> list[WarehouseQuantity]:
        await self._ensure_product(product_id)
        ledger = await self._get_ledger()
        return await ledger.warehouse_quantities(product_id)

    def to_response(
        self, rows: list[WarehouseQuantity]
    ) -> list[WarehouseQuantityResponse]:
        return [warehouse_quantity_response(r) for r in rows]


class VerifyStockUseCase(_LedgerReader):
    """Compare a product's cached stock with its ledger sum."""

    def __init__(
        self,
        stock_service: StockService | None = None,
        ledger: IStockLedger | None = None,
    ):
        super().__init__(ledger=ledger)
        self._stock_service = stock_service

    def _get_stock_service(self) -> StockService:
        if self._stock_service is None:
            from erp.application.services import get_stock_service

            self._stock_service = get_stock_service()
        return self._stock_service

    async def execute(
        self, product_id: str
    ) -> tuple[StockProjection, list[WarehouseQuantity]]:
        projection = await self._get_stock_service().verify(product_id)
        ledger = await self._get_ledger()
        return projection, await ledger.warehouse_quantities(product_id)

    def to_response(
        self, result: tuple[StockProjection, list[WarehouseQuantity]]
    ) -> StockProjectionResponse:
        projection, warehouses = result
        return StockProjectionResponse(
            product_id=projection.product_id,
            cached_stock=projection.cached_stock,
            ledger_stock=projection.ledger_stock,
            drift=projection.drift,
            in_sync=projection.in_sync,
            warehouses=[warehouse_quantity_response(w) for w in warehouses],
        )
