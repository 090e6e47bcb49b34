"""
service.py — Feature Environment
=================================
Knows which feature classes exist and which of them run this session.

Feature classes come from:
- register_feature(cls)
- packages: any module listed in Settings.PACKAGES may expose
  `FEATURES = [SomeFeature, ...]`
- class paths "some.module:ClassName" (load_feature_class)

Which features start enabled is the environment's auto-configuration:
Settings.AUTO_ENABLE_FEATURES maps feature name → config name.
"""

from __future__ import annotations

import importlib
import logging
from types import ModuleType

from acedia.apps.features.models import Feature
from acedia.core.config import Settings, get_settings

logger = logging.getLogger(__name__)


def load_feature_class(path: str) -> type[Feature]:
    """
    Resolve "some.module:ClassName" to a Feature subclass.

    Raises:
        RuntimeError: malformed path, missing class, or not a Feature
    """
    if ":" not in path:
        raise RuntimeError(f"Feature class path must look like 'module:ClassName': {path}")
    mod_name, cls_name = path.split(":", 1)
    mod = importlib.import_module(mod_name)
    cls = getattr(mod, cls_name, None)
    if cls is None:
        raise RuntimeError(f"Feature class not found: {path}")
    if not (isinstance(cls, type) and issubclass(cls, Feature)):
        raise RuntimeError(f"Not a Feature subclass: {path}")
    return cls


class Environment:
    def __init__(self, settings: Settings | None = None) -> None:
        self._settings = settings or get_settings()
        # feature name → class
        self._available: dict[str, type[Feature]] = {}
        # feature name → running instance
        self._enabled: dict[str, Feature] = {}

    # ── Registration ─────────────────────────────────

    def register_feature(self, cls: type[Feature]) -> None:
        name = cls.feature_name()
        known = self._available.get(name)
        if known is not None and known is not cls:
            logger.warning(f"Feature name '{name}' already used by {known.__qualname__}, replacing")
        self._available[name] = cls

    def register_package(self, module: ModuleType) -> int:
        features = list(getattr(module, "FEATURES", []) or [])
        for cls in features:
            self.register_feature(cls)
        return len(features)

    def find_feature_class(self, name: str) -> type[Feature] | None:
        cls = self._available.get(name)
        if cls is not None:
            return cls
        if ":" in name:
            try:
                cls = load_feature_class(name)
            except (ImportError, RuntimeError) as e:
                logger.warning(f"Cannot load feature '{name}': {e}")
                return None
            self.register_feature(cls)
            return cls
        return None

    # ── Auto-configuration ───────────────────────────

    def auto_enabled_features(self) -> list[tuple[type[Feature], str]]:
        result: list[tuple[type[Feature], str]] = []
        for name, config_name in self._settings.AUTO_ENABLE_FEATURES.items():
            cls = self.find_feature_class(name)
            if cls is None:
                logger.warning(f"Auto-enabled feature '{name}' is not available, skipping")
                continue
            result.append((cls, config_name))
        return result

    # ── Enable / disable ─────────────────────────────

    def enable_feature(self, cls: type[Feature], config_name: str) -> Feature:
        name = cls.feature_name()
        feature = self._enabled.get(name)
        if feature is None or type(feature) is not cls:
            if feature is not None:
                feature.disable()
            feature = cls()
            self._enabled[name] = feature
        feature.enable(config_name)
        logger.info(f"Feature '{name}' enabled with config '{config_name}'")
        return feature

    def disable_feature(self, cls: type[Feature]) -> None:
        feature = self._enabled.pop(cls.feature_name(), None)
        if feature is not None:
            feature.disable()
            logger.info(f"Feature '{cls.feature_name()}' disabled")

    def disable_all_features(self) -> None:
        for name in list(self._enabled):
            feature = self._enabled.pop(name)
            feature.disable()
        logger.info("All features disabled")

    def is_enabled(self, cls: type[Feature]) -> bool:
        return cls.feature_name() in self._enabled

    def get_enabled_features(self) -> list[Feature]:
        return list(self._enabled.values())
