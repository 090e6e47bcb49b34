from __future__ import annotations

from typing import Any

import pytest

from acedia.apps.voting.models import CheckpointStore
from acedia.core.config import reset_settings
from acedia.core.database import db
from acedia.core.registry import ConfigRegistry

HANDLER_CLASS = "KFMapVoteHandler"

HOST_ROWS: list[dict[str, str]] = [
    {
        "game_class": "KFMod.KFGameType",
        "game_name": "Killing Floor",
        "prefix": "KF",
        "acronym": "KF",
        "mutators": "",
        "options": "",
    },
    {
        "game_class": "KFStoryGame.KFStoryGameInfo",
        "game_name": "Objective Mode",
        "prefix": "KFO",
        "acronym": "KFO",
        "mutators": "",
        "options": "",
    },
]

GAME_MODES: dict[str, dict[str, Any]] = {
    "alpha": {
        "title": "Alpha",
        "difficulty": "beginner",
        "gameTypeClass": "KFMod.KFGameType",
        "acronym": "A",
        "option": [{"key": "GameLength", "value": "0"}],
    },
    "bravo": {
        "title": "Bravo",
        "difficulty": "Suicidal",
        "gameTypeClass": "KFMod.KFGameType",
        "mapPrefix": "KFB",
        "option": [
            {"key": "GameLength", "value": "1"},
            {"key": "Bad?Key", "value": "1"},
            {"key": "MaxPlayers", "value": "12"},
        ],
        "includeMutator": ["ServerPerks.ServerPerksMut"],
    },
    "charlie": {
        "title": "Charlie",
        "difficulty": "hoe",
        "gameTypeClass": "KFMod.KFGameType",
    },
}


class FakeVotingHandler:
    def __init__(self, rows: list[Any] | None = None) -> None:
        rows = [dict(row) for row in (HOST_ROWS if rows is None else rows)]
        self.game_config: list[Any] = list(rows)
        self.default_game_config: list[Any] = list(rows)
        self.current_game_config = 0
        self.level_switch_pending = False
        self.save_count = 0

    def save_config(self) -> None:
        self.save_count += 1


class FakeHost:
    def __init__(self, handler: FakeVotingHandler | None = None, default_difficulty: float = 4.0) -> None:
        self.handler = handler
        self.default_difficulty = default_difficulty
        self.lookups: list[str] = []

    def find_live_instance(self, kind: str) -> Any | None:
        self.lookups.append(kind)
        if kind == HANDLER_CLASS:
            return self.handler
        return None


class RecordingHandler:
    """Next link of the host's callback chain."""

    def __init__(self, keep: bool = True) -> None:
        self.keep = keep
        self.calls: list[tuple[Any, ...]] = []

    def mutate(self, command: str, sender: Any) -> None:
        self.calls.append(("mutate", command, sender))

    def check_replacement(self, candidate: Any) -> bool:
        self.calls.append(("check_replacement", candidate))
        return self.keep

    def modify_login(self, portal: str, options: str) -> tuple[str, str]:
        self.calls.append(("modify_login", portal, options))
        return portal, options + "?Chained=1"

    def server_traveling(self, url: str, items: bool) -> None:
        self.calls.append(("server_traveling", url, items))


@pytest.fixture(autouse=True)
def clean_process_state():
    db.clear()
    reset_settings()
    yield
    db.clear()
    reset_settings()


@pytest.fixture
def registry() -> ConfigRegistry:
    reg = ConfigRegistry()
    for name, data in GAME_MODES.items():
        reg.add_section("GameMode", name, data)
    return reg


@pytest.fixture
def store() -> CheckpointStore:
    return CheckpointStore()


@pytest.fixture
def handler() -> FakeVotingHandler:
    return FakeVotingHandler()


@pytest.fixture
def host(handler: FakeVotingHandler) -> FakeHost:
    return FakeHost(handler)
