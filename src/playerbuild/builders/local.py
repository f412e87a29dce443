"""In-process backends: wrap a Python callable, or record a dry run."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, Optional

from ..targets import Target
from .base import Backend, BuildOptions

_logger = logging.getLogger("playerbuild.builders.local")

BuildFunction = Callable[[list[str], str, Target, BuildOptions], Optional[str]]


class CallableBackend(Backend):
    """Adapts a plain function ``(inputs, output, target, options) -> str``."""

    def __init__(self, func: BuildFunction, *, default_options: BuildOptions = BuildOptions.NONE):
        self.func = func
        self.default_options = default_options

    @property
    def name(self) -> str:
        return "callable"

    def build_player(self, inputs, output_path, target, options) -> str:
        return self.func(list(inputs), output_path, target, options) or ""


@dataclass
class RecordedCall:
    inputs: list[str]
    output_path: str
    target: Target
    options: BuildOptions


class DryRunBackend(Backend):
    """Logs what would be built and always succeeds."""

    def __init__(self, *, default_options: BuildOptions = BuildOptions.NONE):
        self.default_options = default_options
        self.calls: list[RecordedCall] = []

    @property
    def name(self) -> str:
        return "dry-run"

    def build_player(self, inputs, output_path, target, options) -> str:
        self.calls.append(RecordedCall(list(inputs), output_path, target, options))
        _logger.info(
            "[dry-run] Would build %d input(s) for %s into '%s' with options [%s]",
            len(inputs), target, output_path, ", ".join(options.names()),
        )
        return ""
