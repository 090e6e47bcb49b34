"""
service.py — Game Mode Lookup
==============================
Thin helpers over the config registry for the GameMode kind.
"""

from acedia.apps.gamemode.models import GameMode
from acedia.core.errors import NotFoundError
from acedia.core.registry import ConfigRegistry, get_registry


def list_game_modes(registry: ConfigRegistry | None = None) -> list[GameMode]:
    """Every configured game mode, in config order."""
    return (registry or get_registry()).get_named_instances(GameMode)


def find_game_mode(name: str, registry: ConfigRegistry | None = None) -> GameMode | None:
    return (registry or get_registry()).get_instance(GameMode, name)


def get_game_mode(name: str, registry: ConfigRegistry | None = None) -> GameMode:
    """
    Like find_game_mode(), for callers that cannot continue without the mode.

    Raises:
        NotFoundError: no valid section named `name`
    """
    mode = find_game_mode(name, registry)
    if mode is None:
        raise NotFoundError("GAME_MODE_NOT_FOUND", f"Game mode '{name}' not found", {"name": name})
    return mode
