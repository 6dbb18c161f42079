"""
Schema migrations for the ERP database.

Migration files live next to this module as ``vNNN_name.sql``. Each one
runs in its own transaction together with its ``schema_migrations`` row,
so a failing file leaves neither tables nor a version behind. Files must
not open or commit transactions themselves.

The same module carries the consistency checks run by ``erp-migrate
verify``: SQLite's own integrity checks, stock caches against the ledger,
and sequence counters against the numbers already stored.
"""

import argparse
import asyncio
import hashlib
import re
import time
from dataclasses import dataclass
from pathlib import Path

import aiosqlite

from erp.config import get_logger, get_settings
from erp.core.exceptions import InvalidIdentifierError
from erp.core.services.document_numbers import parse_document_number
from erp.infrastructure.storage.sqlite.document_store import DOCUMENT_TABLES, HEADER_TABLES

logger = get_logger(__name__)

MIGRATIONS_DIR = Path(__file__).parent

_FILENAME = re.compile(r"^v(?P<version>\d+)_(?P<name>\w+)\.sql$")

REQUIRED_TABLES = sorted(
    {"schema_migrations", "warehouses", "contacts", "products", "stock_movements",
     "document_sequences"}
    | {table.header for table in DOCUMENT_TABLES.values()}
    | {table.items for table in DOCUMENT_TABLES.values()}
)


@dataclass(frozen=True)
class MigrationInfo:
    """One migration file on disk."""

    version: str
    name: str
    path: Path
    checksum: str

    @classmethod
    def from_file(cls, path: Path) -> "MigrationInfo":
        match = _FILENAME.match(path.name)
        if not match:
            raise ValueError(f"Invalid migration filename: {path.name}")
        digest = hashlib.sha256(path.read_bytes()).hexdigest()
        return cls(match["version"], match["name"], path, digest[:16])


@dataclass
class MigrationResult:
    version: str
    name: str
    success: bool
    execution_time_ms: int = 0
    error: str | None = None


def discover_migrations() -> list[MigrationInfo]:
    """Migration files in version order. Other .sql files are ignored."""
    found = [
        MigrationInfo.from_file(path)
        for path in MIGRATIONS_DIR.glob("v*.sql")
        if _FILENAME.match(path.name)
    ]
    return sorted(found, key=lambda m: int(m.version))


async def get_applied_migrations(conn: aiosqlite.Connection) -> dict[str, str]:
    """Applied versions mapped to their checksums; empty on a blank database."""
    try:
        cursor = await conn.execute("SELECT version, checksum FROM schema_migrations")
    except aiosqlite.OperationalError:
        return {}
    return {row[0]: row[1] for row in await cursor.fetchall()}


async def get_current_version(conn: aiosqlite.Connection) -> str | None:
    applied = await get_applied_migrations(conn)
    return max(applied, key=int) if applied else None


async def apply_migration(conn: aiosqlite.Connection, migration: MigrationInfo) -> MigrationResult:
    """Run one file and record it, all or nothing."""
    started = time.monotonic()
    try:
        await conn.executescript("BEGIN;\n" + migration.path.read_text(encoding="utf-8"))
        await conn.execute(
            "INSERT INTO schema_migrations (version, name, checksum, execution_time_ms) "
            "VALUES (?, ?, ?, ?)",
            (
                migration.version,
                migration.name,
                migration.checksum,
                int((time.monotonic() - started) * 1000),
            ),
        )
        await conn.commit()
    except aiosqlite.Error as e:
        if conn.in_transaction:
            await conn.rollback()
        logger.error("migration_failed", version=migration.version, error=str(e))
        return MigrationResult(
            migration.version,
            migration.name,
            success=False,
            execution_time_ms=int((time.monotonic() - started) * 1000),
            error=str(e),
        )

    elapsed = int((time.monotonic() - started) * 1000)
    logger.info(
        "migration_applied",
        version=migration.version,
        name=migration.name,
        execution_time_ms=elapsed,
    )
    return MigrationResult(migration.version, migration.name, True, elapsed)


async def initialize_database(db_path: Path | None = None) -> list[MigrationResult]:
    """
    Bring the database up to the newest migration.

    Returns one result per migration attempted. Stops at the first failure,
    and refuses to continue past an applied file whose contents changed.
    """
    db_path = db_path or get_settings().storage.db_path
    db_path.parent.mkdir(parents=True, exist_ok=True)
    logger.info("initializing_database", db_path=str(db_path))

    results: list[MigrationResult] = []
    async with aiosqlite.connect(db_path) as conn:
        await conn.execute("PRAGMA journal_mode=WAL")
        await conn.execute("PRAGMA foreign_keys=ON")
        applied = await get_applied_migrations(conn)

        for migration in discover_migrations():
            recorded = applied.get(migration.version)
            if recorded == migration.checksum:
                continue
            if recorded is not None:
                logger.error("migration_checksum_changed", version=migration.version)
                results.append(
                    MigrationResult(
                        migration.version,
                        migration.name,
                        success=False,
                        error="file changed after it was applied",
                    )
                )
                break

            result = await apply_migration(conn, migration)
            results.append(result)
            if not result.success:
                break

    return results


async def get_migration_status(db_path: Path | None = None) -> dict:
    db_path = db_path or get_settings().storage.db_path
    discovered = discover_migrations()
    if not db_path.exists():
        return {
            "exists": False,
            "current_version": None,
            "applied_migrations": [],
            "pending_migrations": [m.version for m in discovered],
        }

    async with aiosqlite.connect(db_path) as conn:
        applied = await get_applied_migrations(conn)
        current = await get_current_version(conn)
    return {
        "exists": True,
        "current_version": current,
        "applied_migrations": sorted(applied, key=int),
        "pending_migrations": [m.version for m in discovered if m.version not in applied],
    }


async def find_stock_drift(conn: aiosqlite.Connection) -> list[dict]:
    """Products whose cached stock differs from the sum of their ledger entries."""
    cursor = await conn.execute(
        """
        SELECT p.id, p.sku, p.stock, COALESCE(SUM(m.quantity), 0) AS ledger_stock
        FROM products p
        LEFT JOIN stock_movements m ON m.product_id = p.id
        GROUP BY p.id
        HAVING ABS(p.stock - COALESCE(SUM(m.quantity), 0)) > 1e-9
        """
    )
    return [
        {"product_id": row[0], "sku": row[1], "stock": row[2], "ledger_stock": row[3]}
        for row in await cursor.fetchall()
    ]


async def find_lagging_sequences(conn: aiosqlite.Connection) -> list[dict]:
    """
    Sequence buckets whose counter is behind the highest stored serial.

    A lagging counter hands out numbers that collide with existing
    documents until an allocation runs with resync.
    """
    highest: dict[tuple[str, int, int], int] = {}
    for header in HEADER_TABLES:
        cursor = await conn.execute(f"SELECT document_number FROM {header}")
        for (number,) in await cursor.fetchall():
            try:
                parsed = parse_document_number(number)
            except InvalidIdentifierError:
                continue
            bucket = (parsed.document_type.value, parsed.year, parsed.month)
            highest[bucket] = max(highest.get(bucket, 0), parsed.serial)

    cursor = await conn.execute(
        "SELECT document_type, year, month, last_value FROM document_sequences"
    )
    counters = {(row[0], row[1], row[2]): row[3] for row in await cursor.fetchall()}

    return [
        {
            "document_type": kind,
            "year": year,
            "month": month,
            "last_value": counters.get((kind, year, month), 0),
            "max_serial": serial,
        }
        for (kind, year, month), serial in sorted(highest.items())
        if counters.get((kind, year, month), 0) < serial
    ]


async def verify_schema_integrity(db_path: Path | None = None) -> list[dict]:
    """Every consistency check, as ``{"check", "status", ...details}`` dicts."""
    db_path = db_path or get_settings().storage.db_path
    checks: list[dict] = []

    async with aiosqlite.connect(db_path) as conn:
        cursor = await conn.execute("PRAGMA foreign_key_check")
        violations = await cursor.fetchall()
        checks.append({
            "check": "foreign_keys",
            "status": "FAIL" if violations else "PASS",
            "violations": len(violations),
        })

        cursor = await conn.execute("PRAGMA integrity_check")
        (result,) = await cursor.fetchone()
        checks.append({
            "check": "integrity",
            "status": "PASS" if result == "ok" else "FAIL",
            "result": result,
        })

        cursor = await conn.execute("SELECT name FROM sqlite_master WHERE type = 'table'")
        existing = {row[0] for row in await cursor.fetchall()}
        missing = [table for table in REQUIRED_TABLES if table not in existing]
        checks.append({
            "check": "required_tables",
            "status": "FAIL" if missing else "PASS",
            "missing": missing,
        })
        if missing:
            return checks

        drift = await find_stock_drift(conn)
        checks.append({
            "check": "stock_ledger",
            "status": "FAIL" if drift else "PASS",
            "drift": drift,
        })

        # Scan allocation never reads the counters, so lag only matters in atomic mode.
        lagging = await find_lagging_sequences(conn)
        checks.append({
            "check": "sequences",
            "status": "WARN" if lagging else "PASS",
            "lagging": lagging,
        })

    return checks


async def _run(command: str, db_path: Path | None) -> int:
    if command == "status":
        status = await get_migration_status(db_path)
        print(f"Database exists: {status['exists']}")
        print(f"Current version: {status['current_version'] or 'none'}")
        print(f"Applied: {', '.join(status['applied_migrations']) or '-'}")
        print(f"Pending: {', '.join(status['pending_migrations']) or '-'}")
        return 0

    if command == "verify":
        checks = await verify_schema_integrity(db_path)
        for check in checks:
            print(f"[{check['status']}] {check['check']}")
            if check["status"] != "PASS":
                for key, value in check.items():
                    if key not in ("check", "status"):
                        print(f"       {key}: {value}")
        return 1 if any(c["status"] == "FAIL" for c in checks) else 0

    results = await initialize_database(db_path)
    if not results:
        print("Database is up to date")
    for result in results:
        label = "OK" if result.success else "FAILED"
        print(f"[{label}] v{result.version} {result.name} ({result.execution_time_ms}ms)")
        if result.error:
            print(f"       {result.error}")
    return 0 if all(r.success for r in results) else 1


def main() -> None:
    """``erp-migrate [migrate|status|verify] [--db-path PATH]``"""
    parser = argparse.ArgumentParser(description="Migrate and check the ERP database")
    parser.add_argument(
        "command",
        nargs="?",
        default="migrate",
        choices=("migrate", "status", "verify"),
    )
    parser.add_argument("--db-path", type=Path, help="Database file (default from settings)")
    args = parser.parse_args()
    raise SystemExit(asyncio.run(_run(args.command, args.db_path)))


if __name__ == "__main__":
    main()
