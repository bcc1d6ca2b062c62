#  repocards - Key-Value Store
#
#  The persistence collaborator: get/set of JSON values by string key.
#  SQLiteStore keeps everything in one table of the app database;
#  MemoryStore is the in-process equivalent used by tests.
#
#  Key layout:
#    cards:<owner/repo>     generated card set for a repository
#    progress:<owner/repo>  card review-state mapping for that card set
#    streak                 cross-session aggregate counters
#    recent                 recently ingested repositories
#
#  Depends on: (none)
#  Used by:    deck.py, streak.py, recent.py, pipeline.py, server.py

import json
import sqlite3
import threading
from pathlib import Path
from typing import Any, Protocol

STREAK_KEY = "streak"
RECENT_KEY = "recent"


def cards_key(full_name: str) -> str:
    return f"cards:{full_name.lower()}"


def progress_key(full_name: str) -> str:
    return f"progress:{full_name.lower()}"


class KeyValueStore(Protocol):
    def get(self, key: str) -> Any | None: ...

    def set(self, key: str, value: Any) -> None: ...

    def delete(self, key: str) -> None: ...


class MemoryStore:
    """Dict-backed store. Values go through JSON so callers can't share references."""

    def __init__(self):
        self._data: dict[str, str] = {}

    def get(self, key: str) -> Any | None:
        raw = self._data.get(key)
        return json.loads(raw) if raw is not None else None

    def set(self, key: str, value: Any) -> None:
        self._data[key] = json.dumps(value)

    def delete(self, key: str) -> None:
        self._data.pop(key, None)


class SQLiteStore:
    """JSON values in a single `kv` table.

    One connection shared across threads; writes are serialized with a lock.
    """

    def __init__(self, path: Path | str):
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        self._conn = sqlite3.connect(str(path), check_same_thread=False)
        self._lock = threading.Lock()
        self._conn.execute(
            """CREATE TABLE IF NOT EXISTS kv (
                   key TEXT PRIMARY KEY,
                   value TEXT NOT NULL
               )"""
        )
        self._conn.commit()

    def get(self, key: str) -> Any | None:
        with self._lock:
            row = self._conn.execute("SELECT value FROM kv WHERE key = ?", (key,)).fetchone()
        return json.loads(row[0]) if row else None

    def set(self, key: str, value: Any) -> None:
        raw = json.dumps(value, ensure_ascii=False)
        with self._lock:
            self._conn.execute(
                """INSERT INTO kv (key, value) VALUES (?, ?)
                   ON CONFLICT(key) DO UPDATE SET value = excluded.value""",
                (key, raw),
            )
            self._conn.commit()

    def delete(self, key: str) -> None:
        with self._lock:
            self._conn.execute("DELETE FROM kv WHERE key = ?", (key,))
            self._conn.commit()

    def keys(self, prefix: str = "") -> list[str]:
        with self._lock:
            rows = self._conn.execute("SELECT key FROM kv ORDER BY key").fetchall()
        return [row[0] for row in rows if row[0].startswith(prefix)]

    def close(self):
        self._conn.close()
