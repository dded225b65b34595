"""SQLite schema migrations for the Videoclub document store.

Lightweight internal migration registry so future schema changes are applied
deterministically without requiring Alembic.
"""
from __future__ import annotations

import logging
import sqlite3

logger = logging.getLogger("videoclub")


MIGRATIONS = [
    ("0001_documents_table", "Create collection-scoped JSON document table", "documents_table"),
    ("0002_documents_timestamps", "Ensure documents timestamps exist", "documents_timestamps"),
    ("0003_documents_indexes", "Index documents by collection and update time", "documents_indexes"),
]


def apply_migrations(conn: sqlite3.Connection) -> int:
    """Apply any pending migrations to the provided SQLite connection."""
    conn.execute("PRAGMA journal_mode=WAL")
    _ensure_registry(conn)
    applied = 0
    for name, description, handler in MIGRATIONS:
        exists = conn.execute(
            "SELECT 1 FROM schema_migrations WHERE name = ?",
            (name,),
        ).fetchone()
        if exists:
            continue
        _HANDLERS[handler](conn)
        conn.execute(
            "INSERT INTO schema_migrations (name, description) VALUES (?, ?)",
            (name, description),
        )
        applied += 1
        logger.info("Applied DB migration %s", name)
    conn.commit()
    return applied


def get_migration_status(conn: sqlite3.Connection):
    """Return applied migration names and counts for diagnostics/tests."""
    _ensure_registry(conn)
    rows = conn.execute(
        "SELECT name, description, applied_at FROM schema_migrations ORDER BY applied_at, name"
    ).fetchall()
    return [{"name": r[0], "description": r[1], "applied_at": r[2]} for r in rows]


def _ensure_registry(conn: sqlite3.Connection):
    conn.execute(
        """
        CREATE TABLE IF NOT EXISTS schema_migrations (
            name TEXT PRIMARY KEY,
            description TEXT NOT NULL,
            applied_at REAL DEFAULT (strftime('%s','now'))
        )
        """
    )


def _table_exists(conn: sqlite3.Connection, table: str) -> bool:
    row = conn.execute(
        "SELECT 1 FROM sqlite_master WHERE type = 'table' AND name = ?",
        (table,),
    ).fetchone()
    return row is not None


def _column_exists(conn: sqlite3.Connection, table: str, column: str) -> bool:
    if not _table_exists(conn, table):
        return False
    cols = conn.execute(f"PRAGMA table_info({table})").fetchall()
    return any(c[1] == column for c in cols)


def _migrate_documents_table(conn: sqlite3.Connection):
    conn.execute(
        """
        CREATE TABLE IF NOT EXISTS documents (
            collection TEXT NOT NULL,
            doc_id     TEXT NOT NULL,
            data       TEXT NOT NULL,
            created_at REAL DEFAULT (strftime('%s', 'now')),
            updated_at REAL DEFAULT (strftime('%s', 'now')),
            PRIMARY KEY (collection, doc_id)
        )
        """
    )


def _migrate_documents_indexes(conn: sqlite3.Connection):
    conn.execute("CREATE INDEX IF NOT EXISTS idx_documents_updated ON documents(collection, updated_at)")


def _migrate_documents_timestamps(conn: sqlite3.Connection):
    if not _table_exists(conn, "documents"):
        _migrate_documents_table(conn)
        return
    if not _column_exists(conn, "documents", "created_at"):
        conn.execute("ALTER TABLE documents ADD COLUMN created_at REAL DEFAULT 0")
    if not _column_exists(conn, "documents", "updated_at"):
        conn.execute("ALTER TABLE documents ADD COLUMN updated_at REAL DEFAULT 0")


_HANDLERS = {
    "documents_table": _migrate_documents_table,
    "documents_indexes": _migrate_documents_indexes,
    "documents_timestamps": _migrate_documents_timestamps,
}
