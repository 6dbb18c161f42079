"""Abstract interfaces for contacts and warehouses."""

from abc import ABC, abstractmethod

from erp.core.entities.contact import Contact, ContactType
from erp.core.entities.inventory import Warehouse


class IContactStore(ABC):
    """Interface for client/supplier persistence."""

    @abstractmethod
    async def create_contact(self, contact: Contact) -> Contact:
        """Create a new contact."""
        pass

    @abstractmethod
    async def get_contact(self, contact_id: str) -> Contact | None:
        """Get contact by ID."""
        pass

    @abstractmethod
    async def list_contacts(
        self,
        contact_type: ContactType | None = None,
        limit: int = 100,
        offset: int = 0,
    ) -> list[Contact]:
        """List contacts, optionally filtered by type."""
        pass


class IWarehouseStore(ABC):
    """Interface for warehouse lookup."""

    @abstractmethod
    async def get_warehouse(self, warehouse_id: str) -> Warehouse | None:
        """Get warehouse by ID."""
        pass

    @abstractmethod
    async def list_warehouses(self) -> list[Warehouse]:
        """List all warehouses."""
        pass
