"""
FastAPI application factory.

Creates and configures the main application instance.
"""

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from erp.api.middleware import ErrorHandlerMiddleware, LoggingMiddleware
from erp.api.middleware.error_handler import setup_exception_handlers
from erp.api.routes import (
    contacts_router,
    dashboard_router,
    documents_router,
    health_router,
    inventory_router,
    products_router,
    warehouses_router,
)
from erp.config import configure_logging, get_logger, get_settings
from erp.core.exceptions import ConfigurationError

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """
    Application lifespan handler.

    Migrates the database and opens the connection pool on startup,
    closes the pool on shutdown.
    """
    settings = get_settings()
    configure_logging()

    logger.info(
        "application_starting",
        host=settings.api.host,
        port=settings.api.port,
        db_path=str(settings.storage.db_path),
    )

    from erp.infrastructure.storage.sqlite import close_pool, get_pool
    from erp.infrastructure.storage.sqlite.migrations.migrator import initialize_database

    results = await initialize_database()
    failed = [r for r in results if not r.success]
    if failed:
        logger.error("database_init_failed", versions=[r.version for r in failed])
        raise ConfigurationError(
            f"Migration {failed[0].version} failed: {failed[0].error}",
            code="MIGRATION_FAILED",
        )
    logger.info("database_initialized", applied=len(results))

    await get_pool()
    logger.info("connection_pool_ready", size=settings.storage.pool_size)

    yield

    logger.info("application_stopping")
    await close_pool()
    logger.info("application_stopped")


def create_app() -> FastAPI:
    """
    Create and configure FastAPI application.

    Returns:
        Configured FastAPI instance
    """
    settings = get_settings()

    app = FastAPI(
        title=f"{settings.app_name} API",
        description="Stock ledger, document numbering and document lifecycle",
        version=settings.app_version,
        docs_url="/docs" if settings.api.debug else None,
        redoc_url="/redoc" if settings.api.debug else None,
        lifespan=lifespan,
    )

    # Add middleware
    app.add_middleware(LoggingMiddleware)
    app.add_middleware(ErrorHandlerMiddleware)

    # CORS
    if settings.api.cors_origins:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=settings.api.cors_origins,
            allow_credentials=True,
            allow_methods=["*"],
            allow_headers=["*"],
        )

    # Setup exception handlers
    setup_exception_handlers(app)

    # Register routers
    app.include_router(health_router)
    app.include_router(products_router)
    app.include_router(inventory_router)
    app.include_router(contacts_router)
    app.include_router(warehouses_router)
    app.include_router(documents_router)
    app.include_router(dashboard_router)

    # Root health endpoint (for docker health checks)
    @app.get("/health")
    async def root_health() -> dict[str, str]:
        """Simple health check at root level."""
        return {"status": "healthy", "version": settings.app_version}

    return app


# Create app instance
app = create_app()


if __name__ == "__main__":
    import uvicorn

    settings = get_settings()

    uvicorn.run(
        "erp.api.main:app",
        host=settings.api.host,
        port=settings.api.port,
        reload=settings.api.debug,
    )
