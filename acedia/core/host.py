"""
host.py — Host Engine Contracts
================================
Narrow views of the objects the game server owns. Acedia never creates
these; the host hands them in and keeps ownership.

VotingHandler
    The map voting component. `game_config` is the live option table,
    `default_game_config` the copy the host persists to its own storage.
    Row i of the table is reported back only as `current_game_config == i`.

HostSession
    Live-object lookup and the engine's default difficulty, which the next
    map is launched with.

HostHandler
    One link of the host's callback chain. Acedia's orchestrator is such a
    link and forwards every callback to the next one.
"""

from __future__ import annotations

from typing import Any, Protocol


class VotingHandler(Protocol):
    game_config: list[Any]
    default_game_config: list[Any]
    current_game_config: int
    level_switch_pending: bool

    def save_config(self) -> None: ...


class HostSession(Protocol):
    default_difficulty: float

    def find_live_instance(self, kind: str) -> Any | None: ...


class HostHandler(Protocol):
    def mutate(self, command: str, sender: Any) -> None: ...

    def check_replacement(self, candidate: Any) -> bool: ...

    def modify_login(self, portal: str, options: str) -> tuple[str, str]: ...

    def server_traveling(self, url: str, items: bool) -> None: ...
