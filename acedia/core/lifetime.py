"""
Weak tracking of Acedia's own objects, per kind.

Used for the leftover diagnostic at session start: after a restart nothing
created by the previous session should still be alive.
"""

from __future__ import annotations

import weakref
from typing import Any

OBJECT = "object"
ENTITY = "entity"
RECORD = "record"

KINDS = (OBJECT, ENTITY, RECORD)

# kind → {id(obj) → weakref}
_alive: dict[str, dict[int, weakref.ref]] = {kind: {} for kind in KINDS}


def track(obj: Any, kind: str) -> None:
    if kind not in _alive:
        raise ValueError(f"Unknown lifetime kind: {kind}")
    bucket = _alive[kind]
    key = id(obj)
    bucket[key] = weakref.ref(obj, lambda _ref, key=key, bucket=bucket: bucket.pop(key, None))


def count_alive() -> dict[str, int]:
    counts: dict[str, int] = {}
    for kind, bucket in _alive.items():
        counts[kind] = sum(1 for ref in list(bucket.values()) if ref() is not None)
    return counts
