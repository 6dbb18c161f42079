"""Database migrations module."""

from erp.infrastructure.storage.sqlite.migrations.migrator import (
    MigrationInfo,
    MigrationResult,
    discover_migrations,
    find_lagging_sequences,
    find_stock_drift,
    get_current_version,
    get_migration_status,
    initialize_database,
    verify_schema_integrity,
)

__all__ = [
    "MigrationInfo",
    "MigrationResult",
    "discover_migrations",
    "find_lagging_sequences",
    "find_stock_drift",
    "get_current_version",
    "get_migration_status",
    "initialize_database",
    "verify_schema_integrity",
]
