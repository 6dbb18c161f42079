"""
Service factory functions for dependency injection.

This module provides factory functions that wire infrastructure
implementations to core services. Use cases should import from here.

Clean Architecture: Application layer orchestrates DI, not core layer.
"""

from erp.core.services import DashboardService, DocumentLifecycleManager, StockService

# Singleton service instances
_lifecycle_manager: DocumentLifecycleManager | None = None
_stock_service: StockService | None = None
_dashboard_service: DashboardService | None = None


def get_lifecycle_manager() -> DocumentLifecycleManager:
    """
    Get or create the DocumentLifecycleManager.

    Every operation of the manager opens its own SQLite unit of work.
    """
    global _lifecycle_manager

    if _lifecycle_manager is None:
        # Lazy import infrastructure to avoid circular imports
        from erp.config import get_settings
        from erp.infrastructure.storage.sqlite import unit_of_work_factory

        settings = get_settings().documents
        _lifecycle_manager = DocumentLifecycleManager(
            uow_factory=unit_of_work_factory(settings.atomic_sequences),
            settings=settings,
        )

    return _lifecycle_manager


def get_stock_service() -> StockService:
    """Get or create the StockService."""
    global _stock_service

    if _stock_service is None:
        from erp.infrastructure.storage.sqlite import unit_of_work_factory

        _stock_service = StockService(uow_factory=unit_of_work_factory())

    return _stock_service


async def get_dashboard_service() -> DashboardService:
    """
    Get or create the DashboardService.

    Async because the store getters it depends on are async.
    """
    global _dashboard_service

    if _dashboard_service is None:
        from erp.infrastructure.storage.sqlite import (
            get_document_store,
            get_product_store,
        )

        _dashboard_service = DashboardService(
            document_store=await get_document_store(),
            product_store=await get_product_store(),
        )

    return _dashboard_service


def reset_services() -> None:
    """
    Reset all singleton instances.

    Useful for testing or when configuration changes.
    """
    global _lifecycle_manager
    global _stock_service
    global _dashboard_service

    _lifecycle_manager = None
    _stock_service = None
    _dashboard_service = None
