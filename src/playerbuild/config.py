"""Configuration models for playerbuild projects."""

import os
import tempfile

from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

import yaml

from .builders.command import validate_template
from .scenes import SceneEntry
from .targets import Target, lookup_target

DEFAULT_CONFIG_NAME = "playerbuild.yaml"

_BACKEND_TYPES = ("command", "dry-run")


@dataclass
class BackendConfig:
    """Which external builder to drive and how."""
    type: str = "dry-run"
    command: Optional[str] = None
    timeout: int = 3600
    env: dict[str, str] = field(default_factory=dict)
    default_options: list[str] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: dict) -> "BackendConfig":
        kind = str(data.get("type", "dry-run")).strip().lower().replace("_", "-")
        if kind not in _BACKEND_TYPES:
            raise ValueError(f"Unknown backend type: {kind} (expected one of {', '.join(_BACKEND_TYPES)})")
        command = data.get("command")
        if kind == "command" and not command:
            raise ValueError("Backend type 'command' requires a 'command' template")
        if command:
            validate_template(str(command))
        return cls(
            type=kind,
            command=command,
            timeout=int(data.get("timeout", 3600)),
            env={str(k): str(v) for k, v in (data.get("env") or {}).items()},
            default_options=list(data.get("default_options") or []),
        )


@dataclass
class LogConfig:
    log_dir: str
    level: str = "INFO"
    environment: Optional[str] = None

    @classmethod
    def from_env(cls, env: Optional[dict[str, str]] = None) -> "LogConfig":
        src = os.environ if env is None else env

        def clean(value: Optional[str]) -> Optional[str]:
            if value is None:
                return None
            v = str(value).strip()
            return v or None

        return cls(
            log_dir=clean(src.get("PLAYERBUILD_LOG_DIR")) or str(Path(tempfile.gettempdir()) / "playerbuild-logs"),
            level=(clean(src.get("PLAYERBUILD_LOG_LEVEL")) or "INFO").upper(),
            environment=clean(src.get("PLAYERBUILD_ENV")),
        )


@dataclass
class BuilderConfig:
    """Configuration for a project's player builds."""
    name: str
    backend: BackendConfig = field(default_factory=BackendConfig)
    settings_file: str = ".playerbuild/settings.yaml"
    scenes: list[SceneEntry] = field(default_factory=list)
    build_locations: dict[Target, str] = field(default_factory=dict)
    base_path: Path = field(default_factory=Path.cwd)

    @classmethod
    def from_yaml(cls, path: Path) -> "BuilderConfig":
        """Load builder configuration from YAML file."""
        with open(path) as f:
            data = yaml.safe_load(f)
        return cls.from_dict(data or {}, base_path=path.parent)

    @classmethod
    def from_dict(cls, data: dict, base_path: Optional[Path] = None) -> "BuilderConfig":
        """Create configuration from dictionary."""
        locations: dict[Target, str] = {}
        for name, location in (data.get("build_locations") or {}).items():
            target = lookup_target(str(name))
            if target is None or target == Target.ACTIVE:
                raise ValueError(f"Unknown target in build_locations: {name}")
            locations[target] = str(location)

        return cls(
            name=data.get("name", "unnamed-project"),
            backend=BackendConfig.from_dict(data.get("backend") or {}),
            settings_file=data.get("settings_file", ".playerbuild/settings.yaml"),
            scenes=[SceneEntry.from_dict(s) for s in data.get("scenes") or []],
            build_locations=locations,
            base_path=base_path or Path.cwd(),
        )

    @property
    def settings_path(self) -> Path:
        return self.base_path / self.settings_file

    def build_location(self, target: Target) -> Optional[str]:
        """Configured default output for *target*, if any."""
        return self.build_locations.get(target)

    def to_dict(self) -> dict:
        """Convert configuration to dictionary."""
        backend: dict = {"type": self.backend.type}
        if self.backend.command:
            backend["command"] = self.backend.command
        backend["timeout"] = self.backend.timeout
        if self.backend.env:
            backend["env"] = dict(self.backend.env)
        if self.backend.default_options:
            backend["default_options"] = list(self.backend.default_options)
        return {
            "name": self.name,
            "backend": backend,
            "settings_file": self.settings_file,
            "scenes": [{"path": s.path, "enabled": s.enabled} for s in self.scenes],
            "build_locations": {t.value: p for t, p in self.build_locations.items()},
        }

    def to_yaml(self, path: Path) -> None:
        """Save configuration to YAML file."""
        with open(path, "w") as f:
            yaml.dump(self.to_dict(), f, default_flow_style=False, sort_keys=False)


def load_config(path: str | Path) -> BuilderConfig:
    """Load builder configuration from file."""
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Config file not found: {path}")
    return BuilderConfig.from_yaml(path)
