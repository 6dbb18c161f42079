"""Adjust Stock Use Case: signed manual correction through the ledger."""

from dataclasses import dataclass

from erp.application.dto.mappers import movement_response, product_response
from erp.application.dto.requests import AdjustStockRequest
from erp.application.dto.responses import AdjustStockResponse
from erp.config import get_logger
from erp.core.entities.inventory import Product, StockMovement
from erp.core.services.stock_service import StockService

logger = get_logger(__name__)


@dataclass
class AdjustStockResult:
    """Result of a manual adjustment."""

    product: Product
    movement: StockMovement


class AdjustStockUseCase:
    """Correct a product's stock by a signed quantity, with a reason."""

    def __init__(self, stock_service: StockService | None = None):
        self._stock_service = stock_service

    def _get_stock_service(self) -> StockService:
        if self._stock_service is None:
            from erp.application.services import get_stock_service

            self._stock_service = get_stock_service()
        return self._stock_service

    async def execute(self, request: AdjustStockRequest) -> AdjustStockResult:
        """Execute adjust stock use case."""
        logger.info(
            "adjust_stock_started",
            product_id=request.product_id,
            quantity=request.quantity,
        )

        product, movement = await self._get_stock_service().adjust_stock(
            request.product_id,
            request.quantity,
            request.reason,
            warehouse_id=request.warehouse_id,
        )

        logger.info(
            "adjust_stock_complete",
            product_id=product.id,
            stock=product.stock,
            status=product.status.value,
        )
        return AdjustStockResult(product=product, movement=movement)

    def to_response(self, result: AdjustStockResult) -> AdjustStockResponse:
        """Convert result to API response."""
        return AdjustStockResponse(
            product=product_response(result.product),
            movement=movement_response(result.movement),
        )
