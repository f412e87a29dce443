"""Global backend settings store (stripping level, active target)."""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from enum import Enum
from pathlib import Path
from typing import Optional

import yaml

from .targets import Target, lookup_target

_logger = logging.getLogger("playerbuild.settings")


class StrippingLevel(str, Enum):
    """Backend code-stripping level."""

    DISABLED = "Disabled"
    STRIP_ASSEMBLIES = "StripAssemblies"
    STRIP_BYTECODE = "StripByteCode"
    USE_MICRO_MSCORLIB = "UseMicroMSCorlib"

    @classmethod
    def parse(cls, value: str) -> "StrippingLevel":
        key = (value or "").strip().casefold()
        for level in cls:
            if level.value.casefold() == key:
                return level
        raise ValueError(f"Unknown stripping level: {value}")


class SettingsStore(ABC):
    """Shared backend configuration the dispatcher borrows for one build."""

    @property
    @abstractmethod
    def stripping_level(self) -> StrippingLevel:
        ...

    @stripping_level.setter
    @abstractmethod
    def stripping_level(self, level: StrippingLevel) -> None:
        ...

    @property
    @abstractmethod
    def active_target(self) -> Target:
        ...


class MemorySettingsStore(SettingsStore):
    def __init__(
        self,
        stripping_level: StrippingLevel = StrippingLevel.STRIP_ASSEMBLIES,
        active_target: Target = Target.ANDROID,
    ):
        if active_target == Target.ACTIVE:
            raise ValueError("active_target must be a concrete target, not Active")
        self._stripping_level = stripping_level
        self._active_target = active_target

    @property
    def stripping_level(self) -> StrippingLevel:
        return self._stripping_level

    @stripping_level.setter
    def stripping_level(self, level: StrippingLevel) -> None:
        self._stripping_level = level

    @property
    def active_target(self) -> Target:
        return self._active_target


class YamlSettingsStore(SettingsStore):
    """Settings persisted in a YAML file.

    Only ``stripping_level`` and ``active_target`` are interpreted; every other
    key in the file is preserved on write.
    """

    DEFAULT_STRIPPING = StrippingLevel.STRIP_ASSEMBLIES
    DEFAULT_TARGET = Target.ANDROID

    def __init__(self, path: str | Path):
        self.path = Path(path)

    def _load(self) -> dict:
        if not self.path.exists():
            return {}
        with open(self.path) as f:
            data = yaml.safe_load(f)
        if data is None:
            return {}
        if not isinstance(data, dict):
            raise ValueError(f"Settings file must contain a mapping: {self.path}")
        return data

    def _save(self, data: dict) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        with open(self.path, "w") as f:
            yaml.dump(data, f, default_flow_style=False, sort_keys=False)

    @property
    def stripping_level(self) -> StrippingLevel:
        raw = self._load().get("stripping_level")
        if raw is None:
            return self.DEFAULT_STRIPPING
        return StrippingLevel.parse(str(raw))

    @stripping_level.setter
    def stripping_level(self, level: StrippingLevel) -> None:
        data = self._load()
        data["stripping_level"] = StrippingLevel(level).value
        self._save(data)
        _logger.debug("Stripping level set to %s in %s", level.value, self.path)

    @property
    def active_target(self) -> Target:
        raw = self._load().get("active_target")
        if raw is None:
            return self.DEFAULT_TARGET
        target: Optional[Target] = lookup_target(str(raw))
        if target is None or target == Target.ACTIVE:
            raise ValueError(f"Invalid active_target in {self.path}: {raw}")
        return target
