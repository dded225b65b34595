"""Document store for Videoclub: JSON documents grouped into named collections.

Backed by a single SQLite file. The connection is opened on first use and
reused by every caller of the same ContentStore instance.
"""
from __future__ import annotations

import json
import logging
import os
import sqlite3
import threading

from db_migrations import apply_migrations

logger = logging.getLogger("videoclub.store")

CURATED_LISTS_COLLECTION = "curated_lists"
FEATURED_CATEGORIES_COLLECTION = "featured_categories"


class ContentStoreError(Exception):
    """Raised when the document store cannot be opened or queried."""


class ContentStore:
    """Connection-memoized accessor over the SQLite document table.

    Thread-safe via locking; the connection is shared across threads.
    """

    def __init__(self, db_path):
        self._db_path = db_path
        self._lock = threading.RLock()
        self._conn = None

    @property
    def db_path(self):
        return self._db_path

    def connect(self):
        """Open the connection once; later calls reuse it."""
        with self._lock:
            if self._conn is not None:
                return self._conn
            try:
                directory = os.path.dirname(self._db_path)
                if directory:
                    os.makedirs(directory, exist_ok=True)
                conn = sqlite3.connect(self._db_path, timeout=10, check_same_thread=False)
                apply_migrations(conn)
            except (sqlite3.Error, OSError) as e:
                logger.error("Failed to open document store at %s: %s", self._db_path, e)
                raise ContentStoreError(f"Cannot open document store: {e}") from e
            self._conn = conn
            logger.info("Connected to document store at %s", self._db_path)
            return conn

    def execute(self, sql, params=(), *, fetch=None):
        with self._lock:
            conn = self.connect()
            try:
                with conn:
                    cur = conn.execute(sql, params)
                    if fetch == "one":
                        return cur.fetchone()
                    if fetch == "all":
                        return cur.fetchall()
                    return cur.rowcount
            except sqlite3.Error as e:
                raise ContentStoreError(str(e)) from e

    def collection(self, name):
        return Collection(self, name)

    def ping(self):
        self.execute("SELECT 1", fetch="one")
        return True

    def close(self):
        with self._lock:
            if self._conn is not None:
                self._conn.close()
                self._conn = None


class Collection:
    """Mongo-style helpers over the documents of one collection."""

    def __init__(self, store, name):
        self._store = store
        self.name = name

    def find_one(self, doc_id):
        row = self._store.execute(
            "SELECT data FROM documents WHERE collection = ? AND doc_id = ?",
            (self.name, str(doc_id)),
            fetch="one",
        )
        if row is None:
            return None
        return json.loads(row[0])

    def find(self, sort_key=None):
        rows = self._store.execute(
            "SELECT data FROM documents WHERE collection = ? ORDER BY created_at, doc_id",
            (self.name,),
            fetch="all",
        )
        docs = [json.loads(r[0]) for r in rows]
        if sort_key:
            docs.sort(key=lambda d: (d.get(sort_key) is None, d.get(sort_key) or 0))
        return docs

    def replace_one(self, doc_id, doc, upsert=True):
        """Replace the whole document. Returns False if absent and not upserting."""
        if not upsert and self.find_one(doc_id) is None:
            return False
        self._store.execute(
            """INSERT INTO documents (collection, doc_id, data, updated_at)
               VALUES (?, ?, ?, strftime('%s', 'now'))
               ON CONFLICT(collection, doc_id)
               DO UPDATE SET data = excluded.data, updated_at = excluded.updated_at""",
            (self.name, str(doc_id), json.dumps(doc)),
        )
        return True

    def update_one(self, doc_id, fields, upsert=False):
        """Merge `fields` into an existing document ($set semantics)."""
        with self._store._lock:
            current = self.find_one(doc_id)
            if current is None and not upsert:
                return False
            merged = dict(current or {})
            merged.update(fields)
            return self.replace_one(doc_id, merged, upsert=True)

    def insert_many(self, docs, id_field="id"):
        for doc in docs:
            self.replace_one(doc[id_field], doc, upsert=True)
        return len(docs)

    def delete_one(self, doc_id):
        return self._store.execute(
            "DELETE FROM documents WHERE collection = ? AND doc_id = ?",
            (self.name, str(doc_id)),
        )

    def count_documents(self):
        row = self._store.execute(
            "SELECT COUNT(*) FROM documents WHERE collection = ?",
            (self.name,),
            fetch="one",
        )
        return row[0]
