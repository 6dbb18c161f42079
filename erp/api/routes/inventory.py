"""Stock ledger endpoints."""

from fastapi import APIRouter, Depends, Query, status

from erp.api.dependencies import (
    get_adjust_stock_use_case,
    get_movements_use_case,
    get_purge_orphans_use_case,
    get_verify_stock_use_case,
    get_warehouse_quantities_use_case,
)
from erp.application.dto.requests import AdjustStockRequest
from erp.application.dto.responses import (
    AdjustStockResponse,
    ErrorResponse,
    PurgeOrphansResponse,
    StockMovementResponse,
    StockProjectionResponse,
    WarehouseQuantityResponse,
)
from erp.application.use_cases import (
    AdjustStockUseCase,
    ListStockMovementsUseCase,
    PurgeOrphanedLinesUseCase,
    VerifyStockUseCase,
    WarehouseQuantitiesUseCase,
)

router = APIRouter(prefix="/api/inventory", tags=["inventory"])


@router.post(
    "/adjust",
    response_model=AdjustStockResponse,
    status_code=status.HTTP_201_CREATED,
    responses={400: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
)
async def adjust_stock(
    request: AdjustStockRequest,
    use_case: AdjustStockUseCase = Depends(get_adjust_stock_use_case),
) -> AdjustStockResponse:
    """Book a signed manual correction with a reason."""
    result = await use_case.execute(request)
    return use_case.to_response(result)


@router.get(
    "/{product_id}/movements",
    response_model=list[StockMovementResponse],
    responses={404: {"model": ErrorResponse}},
)
async def list_movements(
    product_id: str,
    limit: int = Query(default=100, ge=1, le=500),
    offset: int = Query(default=0, ge=0),
    use_case: ListStockMovementsUseCase = Depends(get_movements_use_case),
) -> list[StockMovementResponse]:
    """Ledger history for a product, newest first."""
    movements = await use_case.execute(product_id, limit=limit, offset=offset)
    return use_case.to_response(movements)


@router.get(
    "/{product_id}/warehouses",
    response_model=list[WarehouseQuantityResponse],
    responses={404: {"model": ErrorResponse}},
)
async def warehouse_quantities(
    product_id: str,
    use_case: WarehouseQuantitiesUseCase = Depends(get_warehouse_quantities_use_case),
) -> list[WarehouseQuantityResponse]:
    rows = await use_case.execute(product_id)
    return use_case.to_response(rows)


@router.get(
    "/{product_id}/verify",
    response_model=StockProjectionResponse,
    responses={404: {"model": ErrorResponse}},
)
async def verify_stock(
    product_id: str,
    use_case: VerifyStockUseCase = Depends(get_verify_stock_use_case),
) -> StockProjectionResponse:
    """Compare cached stock with the ledger sum."""
    result = await use_case.execute(product_id)
    return use_case.to_response(result)


@router.post(
    "/purge-orphans",
    response_model=PurgeOrphansResponse,
    responses={400: {"model": ErrorResponse}},
)
async def purge_orphans(
    confirm: bool = Query(default=False, description="Must be true to purge"),
    use_case: PurgeOrphanedLinesUseCase = Depends(get_purge_orphans_use_case),
) -> PurgeOrphansResponse:
    """Return stock held by delivery lines whose header is gone, then drop them."""
    result = await use_case.execute(confirm=confirm)
    return use_case.to_response(result)
