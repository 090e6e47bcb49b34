"""
schema.py — Voting Table Rows
==============================
The row format the host's map voting component displays. Rows are derived
from game modes on injection and never stored by Acedia.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from acedia.apps.gamemode.models import GameMode
from acedia.core import lifetime


class VotingTableRow(BaseModel):
    """
    One voting option, field-for-field what the host keeps per row.
    """
    model_config = ConfigDict(frozen=True)

    game_class: str = Field(..., description="Host game type identifier")
    game_name: str = Field(..., description="Display name shown to voters")
    prefix: str = Field(..., description="Map name prefix, e.g. KF")
    acronym: str = Field(..., description="Short name shown next to map names")
    mutators: str = Field("", description="Comma-joined mutator list")
    options: str = Field("", description="key=value pairs joined by '?'")

    def model_post_init(self, context: Any, /) -> None:
        lifetime.track(self, lifetime.RECORD)

    @classmethod
    def from_game_mode(cls, mode: GameMode) -> "VotingTableRow":
        return cls(
            game_class=mode.get_game_type_class(),
            game_name=mode.get_title(),
            prefix=mode.get_map_prefix(),
            acronym=mode.get_acronym(),
            mutators=",".join(mode.get_included_mutators()),
            options="?".join(option.render() for option in mode.get_options()),
        )
