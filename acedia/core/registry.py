"""
registry.py — Named Configuration Registry
===========================================
Config-backed entities (game modes, ...) are described by named sections
of a JSON file:

    {
        "GameMode": {
            "hoe":   {"title": "Hell on Earth", "difficulty": "hoe"},
            "short": {"title": "Short game", "option": [{"key": "GameLength", "value": "0"}]}
        }
    }

The top-level key is the kind's section name (`kind.config_section`, or the
class name). Each kind must provide `kind.load(name, section)`.

Instances are built on first use and cached for the process lifetime, so
asking for the same name twice (even from a session created after a map
restart) returns the very same object.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, TypeVar

from acedia.core.errors import ConfigError

logger = logging.getLogger(__name__)

T = TypeVar("T")


def section_name(kind: type) -> str:
    return getattr(kind, "config_section", None) or kind.__name__


class ConfigRegistry:
    def __init__(self) -> None:
        # section name → {entity name → raw mapping}
        self._sections: dict[str, dict[str, dict[str, Any]]] = {}
        # (section name, entity name) → instance
        self._instances: dict[tuple[str, str], Any] = {}
        self._path: Path | None = None

    @property
    def path(self) -> Path | None:
        """File the sections were last loaded from."""
        return self._path

    # ── Loading ──────────────────────────────────────

    def load_file(self, path: str | Path) -> None:
        """Replace the loaded sections with the contents of a JSON file."""
        p = Path(path)
        try:
            payload = json.loads(p.read_text(encoding="utf-8"))
        except (OSError, ValueError) as e:
            raise ConfigError(message=f"Cannot read config file {p}: {e}", details={"path": str(p)}) from e

        if not isinstance(payload, dict):
            raise ConfigError(message=f"Config file {p} must contain a JSON object", details={"path": str(p)})

        sections: dict[str, dict[str, dict[str, Any]]] = {}
        for kind_name, entries in payload.items():
            if not isinstance(entries, dict):
                raise ConfigError(
                    message=f"Section '{kind_name}' in {p} must map names to objects",
                    details={"path": str(p), "section": kind_name},
                )
            for name, data in entries.items():
                if not isinstance(data, dict):
                    raise ConfigError(
                        message=f"Entry '{kind_name}.{name}' in {p} must be an object",
                        details={"path": str(p), "section": kind_name, "name": name},
                    )
            sections[str(kind_name)] = {str(name): dict(data) for name, data in entries.items()}

        self._sections = sections
        self._instances.clear()
        self._path = p
        logger.info(f"Loaded config {p}: " + ", ".join(f"{k}={len(v)}" for k, v in sections.items()))

    def reload(self) -> None:
        """Re-read the last loaded file, dropping every cached instance."""
        if self._path is None:
            self._instances.clear()
            return
        self.load_file(self._path)

    def add_section(self, kind: type | str, name: str, data: dict[str, Any]) -> None:
        key = kind if isinstance(kind, str) else section_name(kind)
        self._sections.setdefault(key, {})[str(name)] = dict(data)
        self._instances.pop((key, str(name)), None)

    def clear(self) -> None:
        self._sections.clear()
        self._instances.clear()
        self._path = None

    # ── Lookup ───────────────────────────────────────

    def names(self, kind: type) -> list[str]:
        return list(self._sections.get(section_name(kind), {}).keys())

    def get_instance(self, kind: type[T], name: str) -> T | None:
        key = (section_name(kind), str(name))
        if key in self._instances:
            return self._instances[key]
        section = self._sections.get(key[0], {}).get(key[1])
        if section is None:
            return None
        try:
            instance = kind.load(key[1], section)
        except ConfigError as e:
            logger.error(f"Skipping {key[0]} '{key[1]}': {e.message}")
            return None
        self._instances[key] = instance
        return instance

    def get_named_instances(self, kind: type[T]) -> list[T]:
        """Every configured instance of `kind`, in config order."""
        result = []
        for name in self.names(kind):
            instance = self.get_instance(kind, name)
            if instance is not None:
                result.append(instance)
        return result


_registry: ConfigRegistry | None = None


def get_registry() -> ConfigRegistry:
    global _registry
    if not _registry:
        _registry = ConfigRegistry()
    return _registry
