"""Product catalogue use cases."""

from dataclasses import dataclass

from erp.application.dto.mappers import product_response
from erp.application.dto.requests import CreateProductRequest, UpdateProductRequest
from erp.application.dto.responses import (
    DeleteResponse,
    ProductListResponse,
    ProductResponse,
)
from erp.config import get_logger
from erp.core.entities.inventory import Product, StockStatus
from erp.core.exceptions import ConfirmationRequiredError, ProductNotFoundError
from erp.core.interfaces.inventory_store import IProductStore
from erp.core.services.stock_service import StockService

logger = get_logger(__name__)


class _ProductStoreMixin:
    _product_store: IProductStore | None

    async def _get_product_store(self) -> IProductStore:
        if self._product_store is None:
            from erp.infrastructure.storage.sqlite import get_product_store

            self._product_store = await get_product_store()
        return self._product_store


class _StockServiceMixin:
    _stock_service: StockService | None

    def _get_stock_service(self) -> StockService:
        if self._stock_service is None:
            from erp.application.services import get_stock_service

            self._stock_service = get_stock_service()
        return self._stock_service


@dataclass
class CreateProductResult:
    """Result of creating a product."""

    product: Product
    initial_stock: float


class CreateProductUseCase(_StockServiceMixin):
    """Create a product; opening stock goes through the ledger."""

    def __init__(self, stock_service: StockService | None = None):
        self._stock_service = stock_service

    async def execute(self, request: CreateProductRequest) -> CreateProductResult:
        """Execute create product use case."""
        logger.info("create_product_started", sku=request.sku)

        product = Product(
            sku=request.sku.strip(),
            name=request.name.strip(),
            category=request.category.strip(),
            description=request.description,
            unit=request.unit,
            price=request.price,
            min_stock=request.min_stock,
        )
        product = await self._get_stock_service().create_product(
            product,
            initial_stock=request.initial_stock,
            warehouse_id=request.warehouse_id,
        )
        return CreateProductResult(product=product, initial_stock=request.initial_stock)

    def to_response(self, result: CreateProductResult) -> ProductResponse:
        return product_response(result.product)


class UpdateProductUseCase(_ProductStoreMixin):
    """Patch descriptive product fields. Stock is not writable here."""

    def __init__(self, product_store: IProductStore | None = None):
        self._product_store = product_store

    async def execute(self, product_id: str, request: UpdateProductRequest) -> Product:
        store = await self._get_product_store()
        product = await store.get_product(product_id)
        if product is None:
            raise ProductNotFoundError(product_id)

        changes = request.model_dump(exclude_unset=True)
        # Revalidate so status follows a changed min_stock
        product = Product.model_validate({**product.model_dump(), **changes})
        product = await store.update_product(product)

        logger.info("product_updated", product_id=product_id, fields=sorted(changes))
        return product

    def to_response(self, product: Product) -> ProductResponse:
        return product_response(product)


class DeleteProductUseCase(_StockServiceMixin):
    """Soft delete a product."""

    def __init__(self, stock_service: StockService | None = None):
        self._stock_service = stock_service

    async def execute(self, product_id: str, confirm: bool = False) -> DeleteResponse:
        if not confirm:
            raise ConfirmationRequiredError("delete product")
        deleted = await self._get_stock_service().delete_product(product_id)
        return DeleteResponse(id=product_id, deleted=deleted)


class GetProductUseCase(_ProductStoreMixin):
    def __init__(self, product_store: IProductStore | None = None):
        self._product_store = product_store

    async def execute(self, product_id: str) -> Product:
        store = await self._get_product_store()
        product = await store.get_product(product_id)
        if product is None:
            raise ProductNotFoundError(product_id)
        return product

    def to_response(self, product: Product) -> ProductResponse:
        return product_response(product)


class ListProductsUseCase(_ProductStoreMixin):
    """List live products, optionally only the ones needing a reorder."""

    def __init__(self, product_store: IProductStore | None = None):
        self._product_store = product_store

    async def execute(
        self,
        category: str | None = None,
        status: StockStatus | None = None,
        low_stock_only: bool = False,
        limit: int = 100,
        offset: int = 0,
    ) -> list[Product]:
        store = await self._get_product_store()
        if low_stock_only:
            return await store.list_low_stock(limit=limit, offset=offset)
        return await store.list_products(
            category=category, status=status, limit=limit, offset=offset
        )

    def to_response(self, products: list[Product]) -> ProductListResponse:
        return ProductListResponse(
            items=[product_response(p) for p in products],
            total=len(products),
        )
