"""SQLite implementation of contact and warehouse storage."""

import uuid
from datetime import datetime

import aiosqlite

from erp.config import get_logger
from erp.core.entities.contact import Contact, ContactType
from erp.core.entities.inventory import Warehouse
from erp.core.exceptions import DatabaseError
from erp.core.interfaces.contact_store import IContactStore, IWarehouseStore
from erp.infrastructure.storage.sqlite.base import SQLiteStore, iso, parse_datetime

logger = get_logger(__name__)


class SQLiteContactStore(SQLiteStore, IContactStore):
    """SQLite implementation of client/supplier storage."""

    async def create_contact(self, contact: Contact) -> Contact:
        """Create a new contact."""
        contact.id = contact.id or str(uuid.uuid4())
        now = datetime.utcnow()
        contact.created_at = now
        contact.updated_at = now
        try:
            async with self._writing() as conn:
                await conn.execute(
                    """
                    INSERT INTO contacts (
                        id, name, company, contact_type, email, phone, city,
                        ice, if_number, rc, created_at, updated_at
                    ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
                    """,
                    (
                        contact.id,
                        contact.name,
                        contact.company,
                        contact.contact_type.value,
                        contact.email,
                        contact.phone,
                        contact.city,
                        contact.ice,
                        contact.if_number,
                        contact.rc,
                        iso(contact.created_at),
                        iso(contact.updated_at),
                    ),
                )
        except aiosqlite.Error as e:
            raise DatabaseError("create_contact", str(e)) from e

        logger.info(
            "contact_created",
            contact_id=contact.id,
            contact_type=contact.contact_type.value,
        )
        return contact

    async def get_contact(self, contact_id: str) -> Contact | None:
        """Get contact by ID."""
        try:
            async with self._reading() as conn:
                cursor = await conn.execute(
                    "SELECT * FROM contacts WHERE id = ?", (contact_id,)
                )
                row = await cursor.fetchone()
        except aiosqlite.Error as e:
            raise DatabaseError("get_contact", str(e)) from e
        return self._row_to_contact(row) if row else None

    async def list_contacts(
        self,
        contact_type: ContactType | None = None,
        limit: int = 100,
        offset: int = 0,
    ) -> list[Contact]:
        """List contacts by name."""
        query = "SELECT * FROM contacts"
        params: list = []
        if contact_type:
            query += " WHERE contact_type = ?"
            params.append(contact_type.value)
        query += " ORDER BY name LIMIT ? OFFSET ?"
        params.extend([limit, offset])

        try:
            async with self._reading() as conn:
                cursor = await conn.execute(query, params)
                rows = await cursor.fetchall()
        except aiosqlite.Error as e:
            logger.error("list_contacts_failed", error=str(e))
            return []
        return [self._row_to_contact(row) for row in rows]

    @staticmethod
    def _row_to_contact(row: aiosqlite.Row) -> Contact:
        return Contact(
            id=row["id"],
            name=row["name"],
            company=row["company"],
            contact_type=ContactType(row["contact_type"]),
            email=row["email"],
            phone=row["phone"],
            city=row["city"],
            ice=row["ice"],
            if_number=row["if_number"],
            rc=row["rc"],
            created_at=parse_datetime(row["created_at"]),
            updated_at=parse_datetime(row["updated_at"]),
        )


class SQLiteWarehouseStore(SQLiteStore, IWarehouseStore):
    """Read access to the warehouses table."""

    async def get_warehouse(self, warehouse_id: str) -> Warehouse | None:
        try:
            async with self._reading() as conn:
                cursor = await conn.execute(
                    "SELECT * FROM warehouses WHERE id = ?", (warehouse_id,)
                )
                row = await cursor.fetchone()
        except aiosqlite.Error as e:
            raise DatabaseError("get_warehouse", str(e)) from e
        if row is None:
            return None
        return Warehouse(id=row["id"], name=row["name"], city=row["city"])

    async def list_warehouses(self) -> list[Warehouse]:
        try:
            async with self._reading() as conn:
                cursor = await conn.execute("SELECT * FROM warehouses ORDER BY name")
                rows = await cursor.fetchall()
        except aiosqlite.Error as e:
            logger.error("list_warehouses_failed", error=str(e))
            return []
        return [Warehouse(id=r["id"], name=r["name"], city=r["city"]) for r in rows]
