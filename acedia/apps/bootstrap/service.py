"""
service.py — Session Orchestrator
==================================
The object the host creates once per session (per map). It brings Acedia
up, plugs the voting adapter in, republishes host callbacks, and tears
everything down again before the host restarts the map.

STARTUP ORDER (start):
----------------------
1. Leftover diagnostic: how many Acedia objects survived the last session
2. Claim the single-instance slot (AlreadyRunningError if taken)
3. Import declared packages, register their features
4. Start republishing host callbacks on the signal bus
5. Game mode voting: pick up the mode voted for before the restart,
   then inject all game modes into the host's voting component
6. Enable auto-configured features, adjusted by the current game mode

TEARDOWN ORDER (stop):
----------------------
1. Voting adapter: record the vote, restore the host's table
2. Release the single-instance slot
3. Disable all features, drop signal subscriptions
4. Forward the restart to the next handler in the host's chain
"""

from __future__ import annotations

import importlib
import logging
from typing import Any

from acedia.apps.bootstrap.models import claim_slot, get_running, release_slot
from acedia.apps.features.models import Feature
from acedia.apps.features.service import Environment
from acedia.apps.gamemode.models import GameMode
from acedia.apps.voting.models import CheckpointStore, get_checkpoint_store
from acedia.apps.voting.service import VotingAdapter
from acedia.core import lifetime
from acedia.core.config import Settings, get_settings
from acedia.core.database import InMemoryDB
from acedia.core.errors import AlreadyRunningError
from acedia.core.host import HostHandler, HostSession
from acedia.core.registry import ConfigRegistry, get_registry
from acedia.core.signals import LoginRequest, SignalBus, get_signal_bus

logger = logging.getLogger(__name__)

DEFAULT_FEATURE_CONFIG = "default"


class Orchestrator:
    def __init__(
        self,
        host: HostSession,
        *,
        settings: Settings | None = None,
        registry: ConfigRegistry | None = None,
        store: CheckpointStore | None = None,
        bus: SignalBus | None = None,
        environment: Environment | None = None,
        next_handler: HostHandler | None = None,
        database: InMemoryDB | None = None,
    ):
        self._host = host
        self._settings = settings or get_settings()
        self._registry = registry or get_registry()
        self._store = store or get_checkpoint_store()
        self._bus = bus or get_signal_bus()
        self._environment = environment or Environment(self._settings)
        self._database = database
        self.next_handler = next_handler

        self._adapter: VotingAdapter | None = None
        self._current_game_mode: GameMode | None = None
        self._running = False
        lifetime.track(self, lifetime.OBJECT)

    @property
    def is_running(self) -> bool:
        return self._running

    @property
    def current_game_mode(self) -> GameMode | None:
        return self._current_game_mode

    @property
    def voting_adapter(self) -> VotingAdapter | None:
        return self._adapter

    @property
    def environment(self) -> Environment:
        return self._environment

    @property
    def signals(self) -> SignalBus:
        return self._bus

    # ═══════════════════════════════════════════════════
    # STARTUP
    # ═══════════════════════════════════════════════════

    def start(self) -> GameMode | None:
        """
        Bring Acedia up for this session.

        Returns:
            The game mode voted for before the restart, or None.

        Raises:
            AlreadyRunningError: another orchestrator holds the slot
        """
        if self._running:
            return self._current_game_mode

        self._report_leftovers()

        if not claim_slot(self, self._database):
            holder = get_running(self._database)
            logger.error(f"Refusing to start: {holder!r} is already running")
            raise AlreadyRunningError(details={"running": repr(holder)})
        self._running = True

        logger.info(f"Starting {self._settings.APP_NAME} v{self._settings.VERSION}")
        self._load_packages()

        if self._settings.USE_GAME_MODE_VOTING:
            self._adapter = VotingAdapter(
                self._host,
                self._registry,
                self._store,
                handler_class=self._settings.VOTING_HANDLER_CLASS,
            )
            self._current_game_mode = self._adapter.setup_after_travel()
            self._adapter.inject(self._registry.get_named_instances(GameMode))

        self._enable_features()
        return self._current_game_mode

    def _report_leftovers(self) -> None:
        counts = lifetime.count_alive()
        # This orchestrator is already tracked.
        counts[lifetime.OBJECT] = max(0, counts[lifetime.OBJECT] - 1)
        summary = ", ".join(f"{kind}={count}" for kind, count in counts.items())
        if any(counts.values()):
            logger.info(f"Objects left over from the previous session: {summary}")
        else:
            logger.info(f"No objects left over from the previous session ({summary})")

    def _load_packages(self) -> None:
        for name in self._settings.PACKAGES:
            try:
                module = importlib.import_module(name)
            except Exception:
                logger.exception(f"Failed to load package '{name}'")
                continue
            count = self._environment.register_package(module)
            logger.info(f"Loaded package '{name}' ({count} feature(s))")

    def _enable_features(self) -> None:
        features = self._environment.auto_enabled_features()
        mode = self._current_game_mode
        if mode is not None:
            features = self._adjust_for_game_mode(features, mode)
        for cls, config_name in features:
            try:
                self._environment.enable_feature(cls, config_name)
            except Exception:
                logger.exception(f"Failed to enable feature '{cls.feature_name()}'")

    def _adjust_for_game_mode(
        self, features: list[tuple[type[Feature], str]], mode: GameMode
    ) -> list[tuple[type[Feature], str]]:
        excluded = set(mode.get_excluded_features())
        result = [(cls, cfg) for cls, cfg in features if cls.feature_name() not in excluded]
        present = {cls.feature_name() for cls, _ in result}
        for name in mode.get_included_features():
            cls = self._environment.find_feature_class(name)
            if cls is None:
                logger.warning(f"Game mode '{mode.name}' includes unknown feature '{name}'")
                continue
            if cls.feature_name() in present or cls.feature_name() in excluded:
                continue
            result.append((cls, DEFAULT_FEATURE_CONFIG))
            present.add(cls.feature_name())
        return result

    # ═══════════════════════════════════════════════════
    # TEARDOWN
    # ═══════════════════════════════════════════════════

    def stop(self, is_restart: bool = False, url: str = "", items: bool = False) -> None:
        if self._running:
            adapter = self._adapter
            if adapter is not None:
                self._adapter = None
                try:
                    adapter.prepare_for_travel()
                except Exception:
                    logger.exception("Failed to record the voted game mode")
                try:
                    adapter.restore_backup()
                except Exception:
                    logger.exception("Failed to restore the original voting table")

            release_slot(self, self._database)
            try:
                self._environment.disable_all_features()
            except Exception:
                logger.exception("Failed to disable features")
            self._bus.clear()
            self._current_game_mode = None
            self._running = False
            logger.info(f"{self._settings.APP_NAME} stopped" + (" for map restart" if is_restart else ""))

        if is_restart and self.next_handler is not None:
            self.next_handler.server_traveling(url, items)

    # ═══════════════════════════════════════════════════
    # HOST CALLBACKS
    # ═══════════════════════════════════════════════════

    def mutate(self, command: str, sender: Any) -> None:
        if self._running:
            self._bus.emit_mutate(command, sender)
        if self.next_handler is not None:
            self.next_handler.mutate(command, sender)

    def check_replacement(self, candidate: Any) -> bool:
        if self._running and not self._bus.emit_check_replacement(candidate):
            return False
        if self.next_handler is not None:
            return self.next_handler.check_replacement(candidate)
        return True

    def modify_login(self, portal: str, options: str) -> tuple[str, str]:
        if self._running:
            request = self._bus.emit_modify_login(LoginRequest(portal=portal, options=options))
            portal, options = request.portal, request.options
        if self.next_handler is not None:
            return self.next_handler.modify_login(portal, options)
        return portal, options

    def server_traveling(self, url: str, items: bool) -> None:
        """The host is about to restart on `url`."""
        self.stop(is_restart=True, url=url, items=items)
