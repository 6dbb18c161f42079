"""API route modules."""

from erp.api.routes.contacts import router as contacts_router
from erp.api.routes.contacts import warehouses_router
from erp.api.routes.dashboard import router as dashboard_router
from erp.api.routes.documents import router as documents_router
from erp.api.routes.health import router as health_router
from erp.api.routes.inventory import router as inventory_router
from erp.api.routes.products import router as products_router

__all__ = [
    "health_router",
    "products_router",
    "inventory_router",
    "contacts_router",
    "warehouses_router",
    "documents_router",
    "dashboard_router",
]
