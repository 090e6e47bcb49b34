"""
main.py — Orchestrator Factory
===============================
Wires the process-wide services into a new session orchestrator.

The host calls create_orchestrator() once per map and then start(); the
registry, checkpoint store and signal bus it receives are the same objects
every time, which is what lets the voted game mode survive the restart.

Usage:
    orchestrator = create_orchestrator(host_session, next_handler=chain)
    orchestrator.start()
    ...
    orchestrator.server_traveling(url, items)     # host restarts the map

    # Inspect configured game modes:
    python -m acedia.main modes --file game_modes.json
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path

from acedia.apps.bootstrap.service import Orchestrator
from acedia.apps.gamemode.service import list_game_modes
from acedia.apps.voting.models import get_checkpoint_store
from acedia.apps.voting.schema import VotingTableRow
from acedia.core.config import get_settings
from acedia.core.errors import ConfigError
from acedia.core.host import HostHandler, HostSession
from acedia.core.logs import configure_logging
from acedia.core.registry import ConfigRegistry, get_registry
from acedia.core.signals import get_signal_bus

logger = logging.getLogger(__name__)


def _ensure_config_loaded(registry: ConfigRegistry, path: Path) -> None:
    if registry.path == path:
        return
    if not path.exists():
        logger.warning(f"Game modes file {path} not found, no game modes configured")
        return
    try:
        registry.load_file(path)
    except ConfigError as e:
        logger.critical(f"{e.message}; continuing without game modes")


def create_orchestrator(host: HostSession, next_handler: HostHandler | None = None) -> Orchestrator:
    """
    Build the orchestrator for a new session.

    Returns:
        Orchestrator: not started yet
    """
    settings = get_settings()
    configure_logging(settings.LOG_LEVEL)

    registry = get_registry()
    _ensure_config_loaded(registry, Path(settings.GAME_MODES_FILE))

    return Orchestrator(
        host,
        settings=settings,
        registry=registry,
        store=get_checkpoint_store(),
        bus=get_signal_bus(),
        next_handler=next_handler,
    )


# ═══════════════════════════════════════════════════
# CLI Entry Point (python -m acedia.main)
# ═══════════════════════════════════════════════════

def _cmd_modes(args: argparse.Namespace) -> int:
    registry = ConfigRegistry()
    try:
        registry.load_file(args.file)
    except ConfigError as e:
        print(f"error: {e.message}", file=sys.stderr)
        return 1
    payload = {
        mode.name: {
            "data": mode.to_data(),
            "voting_row": VotingTableRow.from_game_mode(mode).model_dump(),
        }
        for mode in list_game_modes(registry)
    }
    print(json.dumps(payload, indent=2, ensure_ascii=False))
    return 0


def main(argv: list[str] | None = None) -> int:
    settings = get_settings()
    parser = argparse.ArgumentParser(prog="acedia", description=f"{settings.APP_NAME} v{settings.VERSION}")
    sub = parser.add_subparsers(dest="command", required=True)

    modes = sub.add_parser("modes", help="print configured game modes and their voting rows")
    modes.add_argument("--file", default=settings.GAME_MODES_FILE, help="game modes JSON file")
    modes.set_defaults(func=_cmd_modes)

    args = parser.parse_args(argv)
    configure_logging(settings.LOG_LEVEL)
    return args.func(args)


if __name__ == "__main__":
    sys.exit(main())
