"""Scene list enumeration: which inputs go into the player build."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, Optional

_logger = logging.getLogger("playerbuild.scenes")


@dataclass
class SceneEntry:
    """One scene from the build settings list."""
    path: str
    enabled: bool = True

    @classmethod
    def from_dict(cls, data: dict | str) -> "SceneEntry":
        if isinstance(data, str):
            return cls(path=data)
        return cls(path=str(data["path"]), enabled=bool(data.get("enabled", True)))


def enabled_scenes(entries: Iterable[SceneEntry], base_path: Optional[Path] = None) -> list[str]:
    """Paths of scenes that are enabled and exist on disk, in list order.

    Paths are returned as written; *base_path* is only used for the existence check.
    """
    base = base_path or Path.cwd()
    paths: list[str] = []
    for entry in entries:
        if not entry.enabled:
            continue
        if not (base / entry.path).exists():
            _logger.warning("Scene listed in build settings is missing: %s", entry.path)
            continue
        paths.append(entry.path)
    return paths
