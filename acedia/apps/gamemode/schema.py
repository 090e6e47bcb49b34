"""
schema.py — Game Mode Config Models
====================================
Pieces of a game mode section that are structured rather than scalar.
"""

from pydantic import BaseModel, ConfigDict, Field


class GameOption(BaseModel):
    """
    One server option of a game mode, passed to the host as `key=value`.
    """
    model_config = ConfigDict(frozen=True)

    key: str = Field(..., description="Option name, e.g. GameLength")
    value: str = Field("", description="Option value as the host expects it")

    def is_url_safe(self) -> bool:
        """`?` and `=` would break the host's `?key=value` option string."""
        return not any(ch in self.key or ch in self.value for ch in "?=")

    def render(self) -> str:
        return f"{self.key}={self.value}"
