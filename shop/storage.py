import datetime
import json
import os
import sqlite3
from contextlib import contextmanager
from typing import Any, Optional

import pytz

from .logger import get_logger

logger = get_logger(__name__)

DB_PATH = os.getenv("DB_PATH", "data/storefront.sqlite3")


def now_utc_iso() -> str:
    return datetime.datetime.now(tz=pytz.UTC).isoformat()


class KeyValueStore:
    """
    Small persistent key-value table, the local stand-in for browser storage.

    Each set() replaces the whole value for its key.
    """

    def __init__(self, db_path: str = DB_PATH):
        self.db_path = db_path
        self.ensure_db()

    @contextmanager
    def _connect(self):
        db_dir = os.path.dirname(self.db_path)
        if db_dir:
            os.makedirs(db_dir, exist_ok=True)
        con = sqlite3.connect(self.db_path)
        try:
            with con:
                yield con
        finally:
            con.close()

    def ensure_db(self):
        with self._connect() as con:
            con.execute(
                """
                CREATE TABLE IF NOT EXISTS kv (
                    key TEXT PRIMARY KEY,
                    value TEXT NOT NULL,
                    updated_at TEXT
                )
            """
            )

    def get(self, key: str) -> Optional[str]:
        with self._connect() as con:
            row = con.execute("SELECT value FROM kv WHERE key=?", (key,)).fetchone()
        return row[0] if row else None

    def set(self, key: str, value: str) -> None:
        with self._connect() as con:
            con.execute(
                """
                INSERT INTO kv (key, value, updated_at)
                VALUES (?,?,?)
                ON CONFLICT(key) DO UPDATE SET
                    value=excluded.value,
                    updated_at=excluded.updated_at
            """,
                (key, value, now_utc_iso()),
            )

    def get_json(self, key: str, default: Any = None) -> Any:
        raw = self.get(key)
        if raw is None:
            return default
        try:
            return json.loads(raw)
        except ValueError as e:
            logger.warning("Stored value for %r is not valid JSON; ignoring it: %s", key, e)
            return default

    def set_json(self, key: str, value: Any) -> None:
        self.set(key, json.dumps(value))
