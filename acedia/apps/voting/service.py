"""
service.py — Voting Handler Adapter
====================================
Puts Acedia's game modes into the host's map voting component and, when
the vote causes a map restart, carries the chosen mode over to the next
session.

The host reports the winner only as an index into its option table, so
row i of the injected table must always be game mode i of `self._modes`.
Both sides of that correspondence are checked at the one place it is read
(prepare_for_travel).

LIFECYCLE:
----------
    # session N
    adapter = VotingAdapter(host, registry, store)
    adapter.inject(modes)
    ...                                  # players vote
    adapter.prepare_for_travel()         # host announced the restart
    adapter.restore_backup()

    # session N + 1 (fresh objects, same process)
    adapter = VotingAdapter(host, registry, store)
    mode = adapter.setup_after_travel()  # the mode voted for in session N

Nothing here raises into the host: missing components and bad indices are
logged at CRITICAL and the operation is abandoned.
"""

from __future__ import annotations

import logging
from typing import Any

from acedia.apps.gamemode.models import GameMode
from acedia.apps.voting.difficulty import resolve_difficulty
from acedia.apps.voting.models import CheckpointStore, TravelCheckpoint
from acedia.apps.voting.schema import VotingTableRow
from acedia.core import lifetime
from acedia.core.host import HostSession, VotingHandler
from acedia.core.registry import ConfigRegistry

logger = logging.getLogger(__name__)

DEFAULT_HANDLER_CLASS = "KFMapVoteHandler"


class VotingAdapter:
    def __init__(
        self,
        host: HostSession,
        registry: ConfigRegistry,
        store: CheckpointStore,
        handler_class: str = DEFAULT_HANDLER_CLASS,
    ):
        self._host = host
        self._registry = registry
        self._store = store
        self._handler_class = handler_class

        self._handler: VotingHandler | None = None
        self._modes: list[GameMode] = []
        self._backup: list[Any] = []
        self._injected = False
        lifetime.track(self, lifetime.OBJECT)

    @property
    def is_injected(self) -> bool:
        return self._injected

    @property
    def modes(self) -> list[GameMode]:
        return list(self._modes)

    # ═══════════════════════════════════════════════════
    # Injection
    # ═══════════════════════════════════════════════════

    def inject(self, modes: list[GameMode]) -> bool:
        """
        Replace the host's voting options with one row per game mode.

        Returns:
            True if the table now holds our rows (also when it already did),
            False if the host has no voting component this session,
            or there are no game modes to offer (the host table is left alone).
        """
        if self._injected:
            return True
        if not modes:
            logger.warning(f"No game modes configured, leaving the {self._handler_class} table untouched")
            return False

        handler = self._host.find_live_instance(self._handler_class)
        if handler is None:
            logger.critical(f"No {self._handler_class} found, game mode voting is unavailable this session")
            return False

        self._handler = handler
        self._backup = list(handler.game_config)
        self._modes = list(modes)

        rows = []
        for mode in self._modes:
            mode.validate_options()
            mode.validate_mutators()
            rows.append(VotingTableRow.from_game_mode(mode))
        handler.game_config = rows
        self._injected = True

        logger.info(
            f"Injected {len(rows)} game mode(s) into {self._handler_class}: "
            + ", ".join(mode.name for mode in self._modes)
        )
        return True

    def restore_backup(self) -> None:
        """Put the host's own table back, both live and persisted-default copies."""
        if not self._injected or self._handler is None:
            return
        handler = self._handler
        handler.game_config = list(self._backup)
        handler.default_game_config = list(self._backup)
        handler.save_config()

        self._injected = False
        self._handler = None
        self._modes = []
        self._backup = []
        logger.info(f"Restored original {self._handler_class} table")

    # ═══════════════════════════════════════════════════
    # Restart boundary
    # ═══════════════════════════════════════════════════

    def prepare_for_travel(self) -> TravelCheckpoint | None:
        """
        Record the voted game mode before the host restarts the map.

        Only acts on restarts caused by a vote. The host's default
        difficulty is overridden with the mode's difficulty so the next map
        starts with it; the previous value goes into the checkpoint.
        """
        if not self._injected or self._handler is None:
            return None
        handler = self._handler
        if not handler.level_switch_pending:
            return None

        index = handler.current_game_config
        table_size = len(handler.game_config)
        if not 0 <= index < table_size:
            logger.critical(
                f"Selected voting option {index} is out of range for {self._handler_class}"
                f" table of size {table_size}; game mode will not carry over"
            )
            return None
        if index >= len(self._modes):
            logger.critical(
                f"Selected voting option {index} does not match any of the {len(self._modes)}"
                f" injected game modes; game mode will not carry over"
            )
            return None

        mode = self._modes[index]
        checkpoint = TravelCheckpoint(
            target_mode_name=mode.name,
            stored_difficulty=float(self._host.default_difficulty),
        )
        self._store.write(checkpoint)

        difficulty = resolve_difficulty(mode.get_difficulty())
        self._host.default_difficulty = difficulty
        logger.info(
            f"Traveling with game mode '{mode.name}' (difficulty {mode.get_difficulty()!r} -> {difficulty},"
            f" previous default {checkpoint.stored_difficulty})"
        )
        return checkpoint

    def setup_after_travel(self) -> GameMode | None:
        """
        Pick up the game mode voted for before the restart, if any.

        Restores the host's default difficulty and consumes the checkpoint,
        so a second call returns None.
        """
        checkpoint = self._store.consume()
        if checkpoint is None:
            return None

        self._host.default_difficulty = checkpoint.stored_difficulty
        mode = self._registry.get_instance(GameMode, checkpoint.target_mode_name)
        if mode is None:
            logger.critical(
                f"Game mode '{checkpoint.target_mode_name}' selected before the restart is no longer configured"
            )
            return None
        logger.info(f"Resumed game mode '{mode.name}' after travel")
        return mode
