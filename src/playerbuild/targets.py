"""Target platform definitions for player builds.

A build target names the platform the backend packages the player for:
- mobile: Android, iOS, tvOS
- desktop: WindowsDesktop, Windows64, MacOS, Linux64
- web: WebGL

``Active`` is a sentinel meaning "whatever target the environment currently
has selected"; it is resolved against the settings store at dispatch time.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional


class Target(str, Enum):
    """Build platform identifier."""

    ANDROID = "Android"
    IOS = "iOS"
    TVOS = "tvOS"
    WINDOWS_DESKTOP = "WindowsDesktop"
    WINDOWS_64 = "Windows64"
    MACOS = "MacOS"
    LINUX_64 = "Linux64"
    WEBGL = "WebGL"
    ACTIVE = "Active"

    def __str__(self) -> str:
        return self.value


class TargetFamily(str, Enum):
    """Broad platform family a target belongs to."""

    MOBILE = "mobile"
    DESKTOP = "desktop"
    WEB = "web"
    NONE = "none"


# ---------------------------------------------------------------------------
# Target metadata: family, output shape, default artifact naming
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class TargetMeta:
    """Metadata about a target used when composing options and defaults."""

    target: Target
    family: TargetFamily
    produces_folder: bool = False
    artifact_hint: str = ""  # suffix or folder name used for default outputs


TARGET_REGISTRY: dict[Target, TargetMeta] = {
    Target.ANDROID: TargetMeta(Target.ANDROID, TargetFamily.MOBILE, artifact_hint=".apk"),
    # Xcode project folders, finished by an external toolchain step
    Target.IOS: TargetMeta(Target.IOS, TargetFamily.MOBILE, produces_folder=True, artifact_hint="ios"),
    Target.TVOS: TargetMeta(Target.TVOS, TargetFamily.MOBILE, produces_folder=True, artifact_hint="tvos"),
    Target.WINDOWS_DESKTOP: TargetMeta(Target.WINDOWS_DESKTOP, TargetFamily.DESKTOP, artifact_hint=".exe"),
    Target.WINDOWS_64: TargetMeta(Target.WINDOWS_64, TargetFamily.DESKTOP, artifact_hint=".exe"),
    Target.MACOS: TargetMeta(Target.MACOS, TargetFamily.DESKTOP, artifact_hint=".app"),
    Target.LINUX_64: TargetMeta(Target.LINUX_64, TargetFamily.DESKTOP, artifact_hint=".x86_64"),
    Target.WEBGL: TargetMeta(Target.WEBGL, TargetFamily.WEB, artifact_hint="webgl"),
    Target.ACTIVE: TargetMeta(Target.ACTIVE, TargetFamily.NONE),
}

# Legacy engine spellings accepted on the command line.
_ALIASES: dict[str, Target] = {
    "iphone": Target.IOS,
    "standalonewindows": Target.WINDOWS_DESKTOP,
    "standalonewindows64": Target.WINDOWS_64,
    "standaloneosx": Target.MACOS,
    "standalonelinux64": Target.LINUX_64,
}


def _build_lookup() -> dict[str, Target]:
    table = {t.value.casefold(): t for t in Target}
    for alias, target in _ALIASES.items():
        table.setdefault(alias, target)
    return table


_LOOKUP: dict[str, Target] = _build_lookup()


def lookup_target(name: str) -> Optional[Target]:
    """Look up a target by name (case-insensitive). Returns None if unknown."""
    return _LOOKUP.get((name or "").strip().casefold())


def get_target_meta(target: Target) -> TargetMeta:
    return TARGET_REGISTRY[target]


def is_folder_target(target: Target) -> bool:
    """True when the backend writes a project folder rather than a binary."""
    return TARGET_REGISTRY[target].produces_folder


def list_targets(family: Optional[TargetFamily] = None, *, include_active: bool = False) -> list[TargetMeta]:
    """List known targets, optionally filtered by family."""
    metas = [m for m in TARGET_REGISTRY.values() if include_active or m.target != Target.ACTIVE]
    if family is None:
        return metas
    return [m for m in metas if m.family == family]


def default_output_name(target: Target, app_name: str = "app") -> str:
    """Default output file or folder name for a target (used by ``init``)."""
    meta = TARGET_REGISTRY[target]
    hint = meta.artifact_hint
    if not hint:
        return app_name
    if hint.startswith("."):
        return f"{app_name}{hint}"
    return hint
