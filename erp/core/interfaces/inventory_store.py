"""Abstract interfaces for product storage and the stock ledger."""

from abc import ABC, abstractmethod

from erp.core.entities.inventory import (
    CategoryStock,
    Product,
    StockMovement,
    StockStatus,
    WarehouseQuantity,
)


class IProductStore(ABC):
    """Interface for product persistence. Stock is never written here."""

    @abstractmethod
    async def create_product(self, product: Product) -> Product:
        """Create a product with zero stock."""
        pass

    @abstractmethod
    async def get_product(
        self, product_id: str, include_deleted: bool = False
    ) -> Product | None:
        """Get product by ID."""
        pass

    @abstractmethod
    async def get_product_by_sku(self, sku: str) -> Product | None:
        """Get product by SKU."""
        pass

    @abstractmethod
    async def update_product(self, product: Product) -> Product:
        """Update descriptive fields and min_stock (status is recomputed)."""
        pass

    @abstractmethod
    async def soft_delete_product(self, product_id: str) -> bool:
        """Flag a product as deleted."""
        pass

    @abstractmethod
    async def list_products(
        self,
        category: str | None = None,
        status: StockStatus | None = None,
        limit: int = 100,
        offset: int = 0,
    ) -> list[Product]:
        """List live products with optional filters."""
        pass

    @abstractmethod
    async def list_low_stock(self, limit: int = 100, offset: int = 0) -> list[Product]:
        """List live products that are low or out of stock."""
        pass

    @abstractmethod
    async def count_by_status(self) -> dict[str, int]:
        """Count live products per stock status."""
        pass

    @abstractmethod
    async def inventory_value(self) -> float:
        """Sum of stock * price over live products."""
        pass

    @abstractmethod
    async def stock_by_category(self) -> list[CategoryStock]:
        """Stock of live products per category, largest first."""
        pass


class IStockLedger(ABC):
    """Append-only stock ledger that keeps product stock in lockstep."""

    @abstractmethod
    async def record(self, movement: StockMovement) -> StockMovement | None:
        """
        Append a ledger entry and apply it to the product's cached stock.

        Both writes happen on the same connection, so they commit or roll
        back together. A zero quantity records nothing and returns None.
        """
        pass

    @abstractmethod
    async def list_movements(
        self, product_id: str, limit: int = 100, offset: int = 0
    ) -> list[StockMovement]:
        """Get movements for a product, newest first."""
        pass

    @abstractmethod
    async def movements_for_reference(self, reference_id: str) -> list[StockMovement]:
        """Get movements caused by one document, in creation order."""
        pass

    @abstractmethod
    async def project_stock(self, product_id: str) -> float:
        """Signed sum of all ledger entries for a product."""
        pass

    @abstractmethod
    async def warehouse_quantities(self, product_id: str) -> list[WarehouseQuantity]:
        """Ledger sum per warehouse for a product."""
        pass
