"""
models.py — GameMode Entity
============================
A named, config-loaded description of one mode players can vote for.

Each section under "GameMode" in the config file becomes one GameMode; the
section name is the mode's name. Instances are immutable once loaded.

    mode = GameMode.load("hoe", {"title": "Hell on Earth", "difficulty": "hoe"})
    tree = mode.to_data()                      # plain dict / list / str tree
    same = GameMode.from_data("hoe", tree)     # == mode
"""

from __future__ import annotations

import logging
from typing import Any, ClassVar

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from acedia.apps.gamemode.schema import GameOption
from acedia.core.errors import ConfigError

logger = logging.getLogger(__name__)

DEFAULT_DIFFICULTY = "Hell On Earth"
DEFAULT_MAP_PREFIX = "KF"

# Mutator names are joined with "," and end up inside the host's option string
_UNSAFE_MUTATOR_CHARS = ",?="


def _is_valid_mutator_name(name: str) -> bool:
    return bool(name) and not any(ch in _UNSAFE_MUTATOR_CHARS or ch.isspace() for ch in name)


class GameMode(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="ignore")

    config_section: ClassVar[str] = "GameMode"

    name: str
    title: str = ""
    difficulty: str = ""
    game_type_class: str = Field("", alias="gameTypeClass")
    acronym: str = ""
    map_prefix: str = Field("", alias="mapPrefix")
    options: tuple[GameOption, ...] = Field((), alias="option")
    include_mutators: tuple[str, ...] = Field((), alias="includeMutator")
    exclude_mutators: tuple[str, ...] = Field((), alias="excludeMutator")
    include_features: tuple[str, ...] = Field((), alias="includeFeature")
    exclude_features: tuple[str, ...] = Field((), alias="excludeFeature")

    # ═══════════════════════════════════════════════════
    # Loading & data trees
    # ═══════════════════════════════════════════════════

    @classmethod
    def load(cls, name: str, section: dict[str, Any]) -> GameMode:
        """Build the mode described by config section `name`."""
        return cls.from_data(name, section)

    @classmethod
    def from_data(cls, name: str, data: dict[str, Any]) -> GameMode:
        try:
            return cls.model_validate({**data, "name": name})
        except ValidationError as e:
            raise ConfigError(
                message=f"Invalid game mode '{name}': {e.error_count()} error(s)",
                details={"name": name, "errors": e.errors(include_url=False)},
            ) from e

    def to_data(self) -> dict[str, Any]:
        """
        Generic tree of the declared fields, keyed like the config file.

        Raw values are written, not the fallbacks of the get_* accessors, so
        `GameMode.from_data(mode.name, mode.to_data()) == mode`.
        """
        return self.model_dump(mode="json", by_alias=True, exclude={"name"})

    # ═══════════════════════════════════════════════════
    # Accessors (with fallbacks)
    # ═══════════════════════════════════════════════════

    def get_title(self) -> str:
        return self.title or self.name

    def get_difficulty(self) -> str:
        return self.difficulty or DEFAULT_DIFFICULTY

    def get_game_type_class(self) -> str:
        return self.game_type_class

    def get_acronym(self) -> str:
        return self.acronym or self.name

    def get_map_prefix(self) -> str:
        return self.map_prefix or DEFAULT_MAP_PREFIX

    # ═══════════════════════════════════════════════════
    # Options
    # ═══════════════════════════════════════════════════

    def get_options(self) -> list[GameOption]:
        """Declared options in order, without the ones unsafe for the host."""
        return [option for option in self.options if option.is_url_safe()]

    def validate_options(self) -> list[GameOption]:
        """Warn once per unsafe option and return them."""
        bad = [option for option in self.options if not option.is_url_safe()]
        for option in bad:
            logger.warning(
                f"Game mode '{self.name}' has option with invalid characters"
                f" (key={option.key!r}, value={option.value!r}); it will be ignored"
            )
        return bad

    # ═══════════════════════════════════════════════════
    # Mutators
    # ═══════════════════════════════════════════════════

    def get_included_mutators(self) -> list[str]:
        excluded = set(self.get_excluded_mutators())
        return [m for m in self.include_mutators if _is_valid_mutator_name(m) and m not in excluded]

    def get_excluded_mutators(self) -> list[str]:
        return [m for m in self.exclude_mutators if _is_valid_mutator_name(m)]

    def validate_mutators(self) -> list[str]:
        """Warn once per unusable mutator name and return them."""
        bad = [m for m in [*self.include_mutators, *self.exclude_mutators] if not _is_valid_mutator_name(m)]
        for mutator in bad:
            logger.warning(f"Game mode '{self.name}' has invalid mutator name {mutator!r}; it will be ignored")
        return bad

    # ═══════════════════════════════════════════════════
    # Features
    # ═══════════════════════════════════════════════════

    def get_included_features(self) -> list[str]:
        return [f for f in self.include_features if f]

    def get_excluded_features(self) -> list[str]:
        return [f for f in self.exclude_features if f]
