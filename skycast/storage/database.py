"""SQLite connection manager with WAL mode and migration support."""

import importlib
import logging
import sqlite3
from pathlib import Path

logger = logging.getLogger(__name__)

MIGRATIONS_PACKAGE = "skycast.storage.migrations"


def connect(db_path: str | Path) -> sqlite3.Connection:
    """Open a SQLite connection with WAL mode, creating the parent directory."""
    db_path = Path(db_path)
    db_path.parent.mkdir(parents=True, exist_ok=True)
    conn = sqlite3.connect(str(db_path))
    conn.row_factory = sqlite3.Row
    conn.execute("PRAGMA journal_mode=WAL")
    return conn


def open_store(db_path: str | Path) -> sqlite3.Connection:
    """Connect and bring the schema up to date."""
    conn = connect(db_path)
    run_migrations(conn)
    return conn


def run_migrations(conn: sqlite3.Connection) -> list[str]:
    """Apply pending migrations, oldest first, and return their names.

    Each migration runs in its own transaction together with its
    ``schema_versions`` row. A migration that raises is rolled back and
    leaves no version recorded, so the next run retries it.
    """
    conn.execute(
        "CREATE TABLE IF NOT EXISTS schema_versions ("
        "  version TEXT PRIMARY KEY,"
        "  applied_at TEXT NOT NULL DEFAULT CURRENT_TIMESTAMP"
        ")"
    )
    conn.commit()

    pending = pending_migrations(conn)
    for name in pending:
        _apply(conn, name)
    return pending


def pending_migrations(conn: sqlite3.Connection) -> list[str]:
    applied = {row[0] for row in conn.execute("SELECT version FROM schema_versions")}
    return [name for name in _discover_migrations() if name not in applied]


def _apply(conn: sqlite3.Connection, name: str) -> None:
    mod = importlib.import_module(f"{MIGRATIONS_PACKAGE}.{name}")
    # SQLite DDL is transactional only inside an explicit BEGIN
    conn.execute("BEGIN")
    try:
        mod.up(conn)
        conn.execute("INSERT INTO schema_versions (version) VALUES (?)", (name,))
    except Exception:
        conn.rollback()
        logger.error("Migration %s failed, rolled back", name)
        raise
    conn.commit()
    logger.info("Applied migration %s", name)


def _discover_migrations() -> list[str]:
    """Migration modules named v###_*.py, in version order."""
    migrations_dir = Path(__file__).parent / "migrations"
    return sorted(p.stem for p in migrations_dir.glob("v[0-9]*_*.py"))
