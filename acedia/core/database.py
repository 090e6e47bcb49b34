"""
database.py — Process-wide In-Memory Store
===========================================
The host destroys and recreates every session object when it moves to the
next map, but keeps the hosting process alive. Anything that has to outlive
a session lives here, in module-level storage.

Only narrowly-typed services (checkpoint store, single-instance slot) touch
this module directly; session objects receive those services explicitly.
"""

from __future__ import annotations

import threading
from datetime import datetime, timezone
from typing import Any


class InMemoryDB:
    """Key-value store with collections, lives for the whole process."""

    def __init__(self):
        self._lock = threading.Lock()
        self._collections: dict[str, dict[str, dict]] = {}

    # ── Collection CRUD ──────────────────────────────

    def insert(self, collection: str, id: str, data: dict) -> dict:
        """Insert a record, replacing any record with the same id."""
        with self._lock:
            record = {**data, "_id": id, "_stored_at": datetime.now(timezone.utc).isoformat()}
            self._collections.setdefault(collection, {})[id] = record
            return record

    def get(self, collection: str, id: str) -> dict | None:
        with self._lock:
            return self._collections.get(collection, {}).get(id)

    def delete(self, collection: str, id: str) -> bool:
        with self._lock:
            coll = self._collections.get(collection, {})
            if id in coll:
                del coll[id]
                return True
            return False

    def pop(self, collection: str, id: str) -> dict | None:
        """Remove a record and return it (None if absent)."""
        with self._lock:
            return self._collections.get(collection, {}).pop(id, None)

    def clear(self, collection: str | None = None):
        """Clear one collection, or the whole store when collection is None."""
        with self._lock:
            if collection:
                self._collections.pop(collection, None)
            else:
                self._collections.clear()


# ── Singleton Instance ───────────────────────────────

db = InMemoryDB()


# ── Collection Names ─────────────────────────────────

CHECKPOINTS = "checkpoints"
SESSIONS = "sessions"
