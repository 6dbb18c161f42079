"""Product catalogue endpoints."""

from fastapi import APIRouter, Depends, Query, status

from erp.api.dependencies import (
    get_create_product_use_case,
    get_delete_product_use_case,
    get_get_product_use_case,
    get_list_products_use_case,
    get_update_product_use_case,
)
from erp.application.dto.requests import CreateProductRequest, UpdateProductRequest
from erp.application.dto.responses import (
    DeleteResponse,
    ErrorResponse,
    ProductListResponse,
    ProductResponse,
)
from erp.application.use_cases import (
    CreateProductUseCase,
    DeleteProductUseCase,
    GetProductUseCase,
    ListProductsUseCase,
    UpdateProductUseCase,
)
from erp.core.entities.inventory import StockStatus

router = APIRouter(prefix="/api/products", tags=["products"])


@router.post(
    "",
    response_model=ProductResponse,
    status_code=status.HTTP_201_CREATED,
    responses={409: {"model": ErrorResponse}},
)
async def create_product(
    request: CreateProductRequest,
    use_case: CreateProductUseCase = Depends(get_create_product_use_case),
) -> ProductResponse:
    """Create a product. Opening stock is booked as an 'initial' movement."""
    result = await use_case.execute(request)
    return use_case.to_response(result)


@router.get("", response_model=ProductListResponse)
async def list_products(
    category: str | None = None,
    status_filter: StockStatus | None = Query(default=None, alias="status"),
    limit: int = Query(default=100, ge=1, le=500),
    offset: int = Query(default=0, ge=0),
    use_case: ListProductsUseCase = Depends(get_list_products_use_case),
) -> ProductListResponse:
    """List live products."""
    products = await use_case.execute(
        category=category, status=status_filter, limit=limit, offset=offset
    )
    return use_case.to_response(products)


@router.get("/low-stock", response_model=ProductListResponse)
async def list_low_stock(
    limit: int = Query(default=100, ge=1, le=500),
    offset: int = Query(default=0, ge=0),
    use_case: ListProductsUseCase = Depends(get_list_products_use_case),
) -> ProductListResponse:
    """Products at or below their reorder threshold."""
    products = await use_case.execute(low_stock_only=True, limit=limit, offset=offset)
    return use_case.to_response(products)


@router.get(
    "/{product_id}",
    response_model=ProductResponse,
    responses={404: {"model": ErrorResponse}},
)
async def get_product(
    product_id: str,
    use_case: GetProductUseCase = Depends(get_get_product_use_case),
) -> ProductResponse:
    product = await use_case.execute(product_id)
    return use_case.to_response(product)


@router.patch(
    "/{product_id}",
    response_model=ProductResponse,
    responses={404: {"model": ErrorResponse}},
)
async def update_product(
    product_id: str,
    request: UpdateProductRequest,
    use_case: UpdateProductUseCase = Depends(get_update_product_use_case),
) -> ProductResponse:
    """Update descriptive fields. Use /api/inventory/adjust to change stock."""
    product = await use_case.execute(product_id, request)
    return use_case.to_response(product)


@router.delete(
    "/{product_id}",
    response_model=DeleteResponse,
    responses={400: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
)
async def delete_product(
    product_id: str,
    confirm: bool = Query(default=False, description="Must be true to delete"),
    use_case: DeleteProductUseCase = Depends(get_delete_product_use_case),
) -> DeleteResponse:
    """Soft delete a product."""
    return await use_case.execute(product_id, confirm=confirm)
