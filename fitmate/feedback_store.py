"""
Key-value persistence for feedback and progress history.
"""

import json
import os
import sqlite3
from contextlib import contextmanager


class SQLiteStore:
    """Small SQLite wrapper storing JSON documents by key."""

    def __init__(self, db_path):
        self.db_path = db_path
        parent = os.path.dirname(db_path)
        if parent:
            os.makedirs(parent, exist_ok=True)

        self.conn = sqlite3.connect(db_path, check_same_thread=False)
        self.conn.row_factory = sqlite3.Row
        self.init_schema()

    def close(self):
        self.conn.close()

    @contextmanager
    def transaction(self):
        """Context manager for atomic write operations."""
        try:
            yield
            self.conn.commit()
        except Exception:
            self.conn.rollback()
            raise

    def init_schema(self):
        """Create the key-value table if it does not already exist."""
        self.conn.executescript(
            """
            CREATE TABLE IF NOT EXISTS kv_store (
                key TEXT PRIMARY KEY,
                value TEXT NOT NULL,
                created_at TEXT NOT NULL DEFAULT (datetime('now')),
                updated_at TEXT NOT NULL DEFAULT (datetime('now'))
            );
            """
        )
        self.conn.commit()

    def get_raw(self, key):
        """Return the stored text for a key, or None."""
        row = self.conn.execute(
            "SELECT value FROM kv_store WHERE key = ?",
            (key,),
        ).fetchone()
        if row is None:
            return None
        return row["value"]

    def get(self, key):
        """
        Return the decoded JSON value for a key.

        Returns None when the key is absent. Raises ValueError when the
        stored text is not valid JSON.
        """
        raw = self.get_raw(key)
        if raw is None:
            return None
        return json.loads(raw)

    def put(self, key, value):
        """Insert or replace the JSON value stored under key."""
        payload = json.dumps(value)
        with self.transaction():
            self.put_raw(key, payload)

    def put_raw(self, key, text):
        self.conn.execute(
            """
            INSERT INTO kv_store (key, value, updated_at)
            VALUES (?, ?, datetime('now'))
            ON CONFLICT(key) DO UPDATE SET
                value = excluded.value,
                updated_at = datetime('now')
            """,
            (key, text),
        )

    def keys(self):
        rows = self.conn.execute("SELECT key FROM kv_store ORDER BY key").fetchall()
        return [row["key"] for row in rows]

    def count_summary(self):
        """Return stored entry counts per key for quick sanity checks."""
        summary = {}
        for key in self.keys():
            try:
                value = self.get(key)
            except ValueError:
                summary[key] = None
                continue
            summary[key] = len(value) if isinstance(value, list) else None
        return summary


class MemoryStore:
    """Dict-backed store holding JSON text, for tests and throwaway sessions."""

    def __init__(self, initial=None):
        self._data = dict(initial or {})

    def get(self, key):
        raw = self._data.get(key)
        if raw is None:
            return None
        return json.loads(raw)

    def put(self, key, value):
        self._data[key] = json.dumps(value)

    def put_raw(self, key, text):
        self._data[key] = text
