import sqlite3


def test_apply_migrations_creates_expected_tables(tmp_path):
    from db_migrations import apply_migrations, get_migration_status

    db = tmp_path / "fresh.db"
    conn = sqlite3.connect(str(db))
    try:
        applied = apply_migrations(conn)
        assert applied == 3
        tables = {
            row[0]
            for row in conn.execute("SELECT name FROM sqlite_master WHERE type='table'").fetchall()
        }
        assert "documents" in tables
        assert "schema_migrations" in tables
        status = get_migration_status(conn)
        assert [m["name"] for m in status] == [
            "0001_documents_table",
            "0002_documents_timestamps",
            "0003_documents_indexes",
        ]
    finally:
        conn.close()


def test_apply_migrations_is_idempotent(tmp_path):
    from db_migrations import apply_migrations

    conn = sqlite3.connect(str(tmp_path / "twice.db"))
    try:
        apply_migrations(conn)
        assert apply_migrations(conn) == 0
    finally:
        conn.close()


def test_apply_migrations_upgrades_legacy_documents_table(tmp_path):
    from db_migrations import apply_migrations

    db = tmp_path / "legacy.db"
    conn = sqlite3.connect(str(db))
    try:
        conn.execute(
            "CREATE TABLE documents (collection TEXT, doc_id TEXT, data TEXT NOT NULL, "
            "PRIMARY KEY (collection, doc_id))"
        )
        conn.execute("INSERT INTO documents VALUES ('curated_lists', 'x', '{}')")
        conn.commit()
        apply_migrations(conn)
        cols = [r[1] for r in conn.execute("PRAGMA table_info(documents)").fetchall()]
        assert "created_at" in cols
        assert "updated_at" in cols
        indexes = [r[1] for r in conn.execute("PRAGMA index_list(documents)").fetchall()]
        assert "idx_documents_updated" in indexes
        assert conn.execute("SELECT COUNT(*) FROM documents").fetchone()[0] == 1
    finally:
        conn.close()
