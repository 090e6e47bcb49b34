"""
models.py — Cross-Restart Checkpoint
=====================================
The only state that crosses the map restart boundary: which game mode was
voted for, and the host default difficulty to put back once the new map
has started with the overridden one.

The checkpoint is written once, right before the old session is torn down,
and consumed once, early in the new session. "Traveling" simply means a
checkpoint is waiting to be consumed.
"""

from __future__ import annotations

import logging
from dataclasses import asdict, dataclass

from acedia.core.database import CHECKPOINTS, InMemoryDB, db

logger = logging.getLogger(__name__)

_TRAVEL_KEY = "travel"


@dataclass(frozen=True)
class TravelCheckpoint:
    target_mode_name: str
    stored_difficulty: float


class CheckpointStore:
    def __init__(self, database: InMemoryDB | None = None) -> None:
        self._db = database if database is not None else db

    @property
    def is_traveling(self) -> bool:
        return self._db.get(CHECKPOINTS, _TRAVEL_KEY) is not None

    def write(self, checkpoint: TravelCheckpoint) -> None:
        if self.is_traveling:
            logger.warning("Overwriting a travel checkpoint that was never consumed")
        self._db.insert(CHECKPOINTS, _TRAVEL_KEY, asdict(checkpoint))

    def peek(self) -> TravelCheckpoint | None:
        return self._to_checkpoint(self._db.get(CHECKPOINTS, _TRAVEL_KEY))

    def consume(self) -> TravelCheckpoint | None:
        """Return the pending checkpoint and forget it."""
        return self._to_checkpoint(self._db.pop(CHECKPOINTS, _TRAVEL_KEY))

    def clear(self) -> None:
        self._db.delete(CHECKPOINTS, _TRAVEL_KEY)

    @staticmethod
    def _to_checkpoint(record: dict | None) -> TravelCheckpoint | None:
        if record is None:
            return None
        return TravelCheckpoint(
            target_mode_name=str(record["target_mode_name"]),
            stored_difficulty=float(record["stored_difficulty"]),
        )


_store: CheckpointStore | None = None


def get_checkpoint_store() -> CheckpointStore:
    global _store
    if not _store:
        _store = CheckpointStore()
    return _store
