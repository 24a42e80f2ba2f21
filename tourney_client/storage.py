# storage.py
# -- small SQLite DB holding the persisted bearer token

import logging
import sqlite3
from contextlib import contextmanager
from typing import Optional

from .config import DB_PATH, TOKEN_KEY

log = logging.getLogger(__name__)

SCHEMA = """
PRAGMA journal_mode=WAL;

CREATE TABLE IF NOT EXISTS kv (
    key     TEXT PRIMARY KEY,
    value   TEXT NOT NULL
);
"""


@contextmanager
def connect(db_path: str = DB_PATH):
    con = sqlite3.connect(db_path)
    try:
        con.row_factory = sqlite3.Row
        yield con
        con.commit()
    except Exception:
        con.rollback()
        raise
    finally:
        con.close()


def init_db(db_path: str = DB_PATH):
    with connect(db_path) as con:
        con.executescript(SCHEMA)


class CredentialStore:
    """Durable home of the current bearer token.

    The value is read from disk once, on first ``get()``, and kept in memory
    afterwards; ``set()`` and ``clear()`` write through. A missing or
    unreadable value is reported as ``None``, and a failed write leaves the
    in-memory value in place for the rest of the process.
    """

    def __init__(self, db_path: str = DB_PATH, key: str = TOKEN_KEY) -> None:
        self.db_path = db_path
        self.key = key
        self._loaded = False
        self._token: Optional[str] = None

    def get(self) -> Optional[str]:
        if not self._loaded:
            self._token = self._read()
            self._loaded = True
        return self._token

    def set(self, token: Optional[str]) -> None:
        if not token:
            self.clear()
            return
        self._token = token
        self._loaded = True
        try:
            init_db(self.db_path)
            with connect(self.db_path) as con:
                con.execute(
                    "INSERT INTO kv(key, value) VALUES(?, ?) "
                    "ON CONFLICT(key) DO UPDATE SET value=excluded.value",
                    (self.key, token),
                )
        except sqlite3.DatabaseError as e:
            log.warning("could not persist token to %s, keeping it in memory: %s",
                        self.db_path, e)

    def clear(self) -> None:
        self._token = None
        self._loaded = True
        try:
            init_db(self.db_path)
            with connect(self.db_path) as con:
                con.execute("DELETE FROM kv WHERE key=?", (self.key,))
        except sqlite3.DatabaseError as e:
            log.warning("could not remove stored token from %s: %s", self.db_path, e)

    def _read(self) -> Optional[str]:
        try:
            init_db(self.db_path)
            with connect(self.db_path) as con:
                cur = con.cursor()
                cur.execute("SELECT value FROM kv WHERE key=?", (self.key,))
                row = cur.fetchone()
        except sqlite3.DatabaseError as e:
            # file is not a database, or cannot be opened
            log.warning("could not read stored token from %s: %s", self.db_path, e)
            return None

        if row is None:
            return None
        value = row["value"]
        if not isinstance(value, str) or not value:
            log.warning("ignoring malformed stored token in %s", self.db_path)
            return None
        return value
