"""
Features are optional pieces of server behaviour that can be switched on
for a session with a named config ("default", "hardcore", ...).

Subclasses override `on_enabled` / `on_disabled`; the environment owns the
instances and decides when they run.
"""

from __future__ import annotations

from typing import ClassVar

from acedia.core import lifetime


class Feature:
    name: ClassVar[str] = ""

    def __init__(self) -> None:
        self._config_name: str | None = None
        lifetime.track(self, lifetime.ENTITY)

    @classmethod
    def feature_name(cls) -> str:
        return cls.name or cls.__name__

    @property
    def is_enabled(self) -> bool:
        return self._config_name is not None

    @property
    def config_name(self) -> str | None:
        return self._config_name

    def enable(self, config_name: str) -> None:
        if self._config_name == config_name:
            return
        if self._config_name is not None:
            self.on_disabled()
        self._config_name = config_name
        self.on_enabled()

    def disable(self) -> None:
        if self._config_name is None:
            return
        self.on_disabled()
        self._config_name = None

    def on_enabled(self) -> None:
        pass

    def on_disabled(self) -> None:
        pass
