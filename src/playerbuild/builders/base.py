"""Base backend interface for player builds."""

from __future__ import annotations

import enum
import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Callable, Optional

if TYPE_CHECKING:
    from ..targets import Target

_logger = logging.getLogger("playerbuild.builders")


class BuildError(Exception):
    """Raised when a build operation fails."""


class BackendError(BuildError):
    """Raised when the backend reports a non-empty error.

    ``error`` is the backend text, verbatim.
    """

    def __init__(self, error: str, outcome: Optional["BuildOutcome"] = None):
        super().__init__(error)
        self.error = error
        self.outcome = outcome


class BuildOptions(enum.Flag):
    """Backend build options composed by the dispatcher."""

    NONE = 0
    DEVELOPMENT = enum.auto()
    SYMLINK_LIBRARIES = enum.auto()
    ACCEPT_EXTERNAL_MODIFICATIONS = enum.auto()

    def names(self) -> list[str]:
        """Lowercase names of the set flags, in declaration order."""
        return [
            member.name.lower()
            for member in BuildOptions
            if member is not BuildOptions.NONE and member in self
        ]

    @classmethod
    def from_names(cls, names: list[str]) -> "BuildOptions":
        """Parse option names as written in config files (case-insensitive)."""
        result = cls.NONE
        for raw in names or []:
            key = str(raw).strip().upper().replace("-", "_")
            try:
                result |= cls[key]
            except KeyError:
                raise ValueError(f"Unknown build option: {raw}") from None
        return result


@dataclass
class BuildOutcome:
    """Result of one dispatched build."""

    success: bool
    target: Optional["Target"] = None
    output_path: str = ""
    options: BuildOptions = BuildOptions.NONE
    inputs: list[str] = field(default_factory=list)
    error: str = ""
    elapsed_seconds: float = 0.0


class Backend(ABC):
    """Abstract external builder.

    A backend receives the resolved inputs, output path, target and options and
    returns an empty string on success or a descriptive error text on failure.
    """

    #: Options the backend turns on by itself; the dispatcher composes on top.
    default_options: BuildOptions = BuildOptions.NONE

    @property
    @abstractmethod
    def name(self) -> str:
        """Return the backend identifier."""

    @abstractmethod
    def build_player(
        self,
        inputs: list[str],
        output_path: str,
        target: "Target",
        options: BuildOptions,
    ) -> str:
        """Run the build. Return "" on success, error text otherwise."""

    # ------------------------------------------------------------------
    # Helpers shared by all backends
    # ------------------------------------------------------------------

    @staticmethod
    def _log(on_log: Optional[Callable[[str], None]], msg: str) -> None:
        if on_log:
            try:
                on_log(msg)
            except Exception:
                _logger.debug("on_log callback failed", exc_info=True)
