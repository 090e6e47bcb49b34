"""
models.py — Single-Instance Slot
=================================
At most one orchestrator runs per session. The slot lives in the
process-wide store but only weakly references its holder: once the host
destroys a session's orchestrator (with or without stop()), the slot is
free for the next session.
"""

import weakref
from typing import Any

from acedia.core.database import SESSIONS, InMemoryDB, db

_SLOT_KEY = "orchestrator"


def get_running(database: InMemoryDB | None = None) -> Any | None:
    """The live orchestrator holding the slot, or None."""
    record = (database if database is not None else db).get(SESSIONS, _SLOT_KEY)
    return record["ref"]() if record else None


def claim_slot(instance: Any, database: InMemoryDB | None = None) -> bool:
    """Take the slot for `instance`. False if another live instance holds it."""
    database = database if database is not None else db
    holder = get_running(database)
    if holder is not None and holder is not instance:
        return False
    database.insert(SESSIONS, _SLOT_KEY, {"ref": weakref.ref(instance)})
    return True


def release_slot(instance: Any, database: InMemoryDB | None = None) -> None:
    """Free the slot if `instance` holds it."""
    database = database if database is not None else db
    if get_running(database) is instance:
        database.delete(SESSIONS, _SLOT_KEY)
