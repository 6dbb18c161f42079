"""SQLite implementation of product storage and the stock ledger."""

from datetime import date, datetime

import aiosqlite

from erp.config import get_logger
from erp.core.entities.inventory import (
    CategoryStock,
    MovementEvent,
    Product,
    StockMovement,
    StockStatus,
    WarehouseQuantity,
    derive_stock_status,
)
from erp.core.exceptions import DatabaseError, ProductNotFoundError
from erp.core.interfaces.inventory_store import IProductStore, IStockLedger
from erp.infrastructure.storage.sqlite.base import (
    SQLiteStore,
    iso,
    parse_date,
    parse_datetime,
)

logger = get_logger(__name__)


class SQLiteProductStore(SQLiteStore, IProductStore):
    """SQLite implementation of product storage."""

    async def create_product(self, product: Product) -> Product:
        """Create a product. Stock starts at zero; opening stock goes through the ledger."""
        now = datetime.utcnow()
        product.created_at = now
        product.updated_at = now
        product.stock = 0.0
        product.status = derive_stock_status(0.0, product.min_stock)
        try:
            async with self._writing() as conn:
                await conn.execute(
                    """
                    INSERT INTO products (
                        id, sku, name, category, description, unit, price,
                        stock, min_stock, status, last_movement, is_deleted,
                        created_at, updated_at
                    ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, 0, ?, ?)
                    """,
                    (
                        product.id,
                        product.sku,
                        product.name,
                        product.category,
                        product.description,
                        product.unit,
                        product.price,
                        product.stock,
                        product.min_stock,
                        product.status.value,
                        iso(product.last_movement),
                        iso(product.created_at),
                        iso(product.updated_at),
                    ),
                )
        except aiosqlite.Error as e:
            raise DatabaseError("create_product", str(e)) from e

        logger.info("product_stored", product_id=product.id, sku=product.sku)
        return product

    async def get_product(
        self, product_id: str, include_deleted: bool = False
    ) -> Product | None:
        """Get product by ID."""
        query = "SELECT * FROM products WHERE id = ?"
        if not include_deleted:
            query += " AND is_deleted = 0"
        try:
            async with self._reading() as conn:
                cursor = await conn.execute(query, (product_id,))
                row = await cursor.fetchone()
        except aiosqlite.Error as e:
            raise DatabaseError("get_product", str(e)) from e
        return self._row_to_product(row) if row else None

    async def get_product_by_sku(self, sku: str) -> Product | None:
        """Get product by SKU, deleted or not (SKUs are never reused)."""
        try:
            async with self._reading() as conn:
                cursor = await conn.execute("SELECT * FROM products WHERE sku = ?", (sku,))
                row = await cursor.fetchone()
        except aiosqlite.Error as e:
            raise DatabaseError("get_product_by_sku", str(e)) from e
        return self._row_to_product(row) if row else None

    async def update_product(self, product: Product) -> Product:
        """Update descriptive fields and min_stock. Stock is left to the ledger."""
        product.updated_at = datetime.utcnow()
        try:
            async with self._writing() as conn:
                cursor = await conn.execute(
                    "SELECT stock FROM products WHERE id = ? AND is_deleted = 0",
                    (product.id,),
                )
                row = await cursor.fetchone()
                if row is None:
                    raise ProductNotFoundError(product.id)
                product.stock = float(row["stock"])
                product.status = derive_stock_status(product.stock, product.min_stock)

                await conn.execute(
                    """
                    UPDATE products SET
                        name = ?, category = ?, description = ?, unit = ?,
                        price = ?, min_stock = ?, status = ?, updated_at = ?
                    WHERE id = ?
                    """,
                    (
                        product.name,
                        product.category,
                        product.description,
                        product.unit,
                        product.price,
                        product.min_stock,
                        product.status.value,
                        iso(product.updated_at),
                        product.id,
                    ),
                )
        except aiosqlite.Error as e:
            raise DatabaseError("update_product", str(e)) from e

        logger.info("product_updated", product_id=product.id)
        return product

    async def soft_delete_product(self, product_id: str) -> bool:
        """Flag a product as deleted."""
        try:
            async with self._writing() as conn:
                cursor = await conn.execute(
                    "UPDATE products SET is_deleted = 1, updated_at = ? "
                    "WHERE id = ? AND is_deleted = 0",
                    (iso(datetime.utcnow()), product_id),
                )
                return cursor.rowcount > 0
        except aiosqlite.Error as e:
            raise DatabaseError("soft_delete_product", str(e)) from e

    async def list_products(
        self,
        category: str | None = None,
        status: StockStatus | None = None,
        limit: int = 100,
        offset: int = 0,
    ) -> list[Product]:
        """List live products with optional filters."""
        query = "SELECT * FROM products WHERE is_deleted = 0"
        params: list = []
        if category:
            query += " AND category = ?"
            params.append(category)
        if status:
            query += " AND status = ?"
            params.append(status.value)
        query += " ORDER BY name LIMIT ? OFFSET ?"
        params.extend([limit, offset])

        try:
            async with self._reading() as conn:
                cursor = await conn.execute(query, params)
                rows = await cursor.fetchall()
        except aiosqlite.Error as e:
            logger.error("list_products_failed", error=str(e))
            return []
        return [self._row_to_product(row) for row in rows]

    async def list_low_stock(self, limit: int = 100, offset: int = 0) -> list[Product]:
        """List live products that are low or out of stock, emptiest first."""
        try:
            async with self._reading() as conn:
                cursor = await conn.execute(
                    """
                    SELECT * FROM products
                    WHERE is_deleted = 0 AND status IN ('low_stock', 'out_of_stock')
                    ORDER BY stock ASC, name
                    LIMIT ? OFFSET ?
                    """,
                    (limit, offset),
                )
                rows = await cursor.fetchall()
        except aiosqlite.Error as e:
            logger.error("list_low_stock_failed", error=str(e))
            return []
        return [self._row_to_product(row) for row in rows]

    async def count_by_status(self) -> dict[str, int]:
        """Count live products per stock status (every status present)."""
        counts = {status.value: 0 for status in StockStatus}
        try:
            async with self._reading() as conn:
                cursor = await conn.execute(
                    "SELECT status, COUNT(*) AS n FROM products "
                    "WHERE is_deleted = 0 GROUP BY status"
                )
                for row in await cursor.fetchall():
                    counts[row["status"]] = row["n"]
        except aiosqlite.Error as e:
            logger.error("count_products_failed", error=str(e))
        return counts

    async def inventory_value(self) -> float:
        """Sum of stock * price over live products with positive stock."""
        try:
            async with self._reading() as conn:
                cursor = await conn.execute(
                    "SELECT COALESCE(SUM(stock * price), 0) FROM products "
                    "WHERE is_deleted = 0 AND stock > 0"
                )
                row = await cursor.fetchone()
        except aiosqlite.Error as e:
            logger.error("inventory_value_failed", error=str(e))
            return 0.0
        return float(row[0])

    async def stock_by_category(self) -> list[CategoryStock]:
        """Stock of live products per category, largest first."""
        try:
            async with self._reading() as conn:
                cursor = await conn.execute(
                    """
                    SELECT COALESCE(NULLIF(category, ''), 'Uncategorized') AS category,
                           SUM(stock) AS stock
                    FROM products
                    WHERE is_deleted = 0
                    GROUP BY 1
                    ORDER BY stock DESC, category
                    """
                )
                rows = await cursor.fetchall()
        except aiosqlite.Error as e:
            logger.error("stock_by_category_failed", error=str(e))
            return []
        return [CategoryStock(category=row["category"], stock=float(row["stock"])) for row in rows]

    @staticmethod
    def _row_to_product(row: aiosqlite.Row) -> Product:
        """Convert a database row to a Product entity."""
        return Product(
            id=row["id"],
            sku=row["sku"],
            name=row["name"],
            category=row["category"],
            description=row["description"],
            unit=row["unit"],
            price=float(row["price"]),
            stock=float(row["stock"]),
            min_stock=float(row["min_stock"]),
            last_movement=parse_date(row["last_movement"]),
            is_deleted=bool(row["is_deleted"]),
            created_at=parse_datetime(row["created_at"]),
            updated_at=parse_datetime(row["updated_at"]),
        )


class SQLiteStockLedger(SQLiteStore, IStockLedger):
    """
    Append-only ledger backed by ``stock_movements``.

    ``record`` inserts the entry and rewrites the product's cached stock
    and status on the same connection, so both land in one transaction.
    """

    async def record(self, movement: StockMovement) -> StockMovement | None:
        """Append a ledger entry and apply it to the product."""
        if not movement.quantity:
            return None

        try:
            async with self._writing() as conn:
                cursor = await conn.execute(
                    "SELECT stock, min_stock FROM products WHERE id = ?",
                    (movement.product_id,),
                )
                row = await cursor.fetchone()
                if row is None:
                    raise ProductNotFoundError(movement.product_id)

                new_stock = round(float(row["stock"]) + movement.quantity, 6)
                status = derive_stock_status(new_stock, float(row["min_stock"]))

                cursor = await conn.execute(
                    """
                    INSERT INTO stock_movements (
                        product_id, quantity, source, event, movement_type,
                        reference_id, reference_number, warehouse_id,
                        description, created_at
                    ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
                    """,
                    (
                        movement.product_id,
                        movement.quantity,
                        movement.source,
                        movement.event.value,
                        movement.movement_type,
                        movement.reference_id,
                        movement.reference_number,
                        movement.warehouse_id,
                        movement.description,
                        iso(movement.created_at),
                    ),
                )
                movement.id = cursor.lastrowid

                await conn.execute(
                    """
                    UPDATE products SET
                        stock = ?, status = ?, last_movement = ?, updated_at = ?
                    WHERE id = ?
                    """,
                    (
                        new_stock,
                        status.value,
                        date.today().isoformat(),
                        iso(datetime.utcnow()),
                        movement.product_id,
                    ),
                )
        except aiosqlite.Error as e:
            raise DatabaseError("record_stock_movement", str(e)) from e

        if new_stock < 0:
            logger.warning(
                "stock_below_zero",
                product_id=movement.product_id,
                stock=new_stock,
                reference=movement.reference_number,
            )
        logger.info(
            "stock_movement_recorded",
            movement_id=movement.id,
            product_id=movement.product_id,
            type=movement.movement_type,
            qty=movement.quantity,
            stock=new_stock,
            status=status.value,
        )
        return movement

    async def list_movements(
        self, product_id: str, limit: int = 100, offset: int = 0
    ) -> list[StockMovement]:
        """Get movements for a product, newest first."""
        try:
            async with self._reading() as conn:
                cursor = await conn.execute(
                    """
                    SELECT * FROM stock_movements
                    WHERE product_id = ?
                    ORDER BY id DESC
                    LIMIT ? OFFSET ?
                    """,
                    (product_id, limit, offset),
                )
                rows = await cursor.fetchall()
        except aiosqlite.Error as e:
            logger.error("list_movements_failed", product_id=product_id, error=str(e))
            return []
        return [self._row_to_movement(row) for row in rows]

    async def movements_for_reference(self, reference_id: str) -> list[StockMovement]:
        """Get movements caused by one document, in creation order."""
        try:
            async with self._reading() as conn:
                cursor = await conn.execute(
                    "SELECT * FROM stock_movements WHERE reference_id = ? ORDER BY id",
                    (reference_id,),
                )
                rows = await cursor.fetchall()
        except aiosqlite.Error as e:
            logger.error(
                "list_reference_movements_failed",
                reference_id=reference_id,
                error=str(e),
            )
            return []
        return [self._row_to_movement(row) for row in rows]

    async def project_stock(self, product_id: str) -> float:
        """Signed sum of all ledger entries for a product."""
        try:
            async with self._reading() as conn:
                cursor = await conn.execute(
                    "SELECT COALESCE(SUM(quantity), 0) FROM stock_movements "
                    "WHERE product_id = ?",
                    (product_id,),
                )
                row = await cursor.fetchone()
        except aiosqlite.Error as e:
            raise DatabaseError("project_stock", str(e)) from e
        return round(float(row[0]), 6)

    async def warehouse_quantities(self, product_id: str) -> list[WarehouseQuantity]:
        """Ledger sum per warehouse for a product."""
        try:
            async with self._reading() as conn:
                cursor = await conn.execute(
                    """
                    SELECT warehouse_id, SUM(quantity) AS quantity
                    FROM stock_movements
                    WHERE product_id = ?
                    GROUP BY warehouse_id
                    ORDER BY warehouse_id
                    """,
                    (product_id,),
                )
                rows = await cursor.fetchall()
        except aiosqlite.Error as e:
            logger.error("warehouse_quantities_failed", product_id=product_id, error=str(e))
            return []
        return [
            WarehouseQuantity(
                warehouse_id=row["warehouse_id"],
                quantity=round(float(row["quantity"]), 6),
            )
            for row in rows
        ]

    @staticmethod
    def _row_to_movement(row: aiosqlite.Row) -> StockMovement:
        """Convert a database row to a StockMovement entity."""
        return StockMovement(
            id=row["id"],
            product_id=row["product_id"],
            quantity=float(row["quantity"]),
            source=row["source"],
            event=MovementEvent(row["event"]),
            reference_id=row["reference_id"],
            reference_number=row["reference_number"],
            warehouse_id=row["warehouse_id"],
            description=row["description"],
            created_at=parse_datetime(row["created_at"]),
        )
