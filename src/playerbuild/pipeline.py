"""Entry points tying the resolver and the dispatcher together."""

from __future__ import annotations

import logging
from enum import Enum
from typing import Optional, Sequence

from .builders.base import Backend, BuildOutcome
from .dispatcher import BuildDispatcher
from .nfo_config import log_call
from .resolver import BuildConfiguration, resolve_arguments
from .settings import SettingsStore
from .targets import Target

_logger = logging.getLogger("playerbuild.pipeline")


class BuildState(str, Enum):
    IDLE = "idle"
    RESOLVING = "resolving"
    DISPATCHING = "dispatching"
    SUCCEEDED = "succeeded"
    FAILED = "failed"


_TRANSITIONS: dict[BuildState, tuple[BuildState, ...]] = {
    BuildState.IDLE: (BuildState.RESOLVING, BuildState.DISPATCHING),
    BuildState.RESOLVING: (BuildState.DISPATCHING, BuildState.FAILED),
    BuildState.DISPATCHING: (BuildState.SUCCEEDED, BuildState.FAILED),
    BuildState.SUCCEEDED: (),
    BuildState.FAILED: (),
}


class BuildSession:
    """One build invocation: Idle -> Resolving -> Dispatching -> Succeeded/Failed.

    A session runs at most once; a second ``run`` raises ``RuntimeError``.
    """

    def __init__(self, backend: Backend, settings: SettingsStore, inputs: Sequence[str] = ()):
        self.dispatcher = BuildDispatcher(backend, settings)
        self.inputs = list(inputs)
        self.state = BuildState.IDLE
        self.history: list[BuildState] = [BuildState.IDLE]
        self.config: Optional[BuildConfiguration] = None
        self.outcome: Optional[BuildOutcome] = None
        self.error: Optional[Exception] = None

    def _enter(self, state: BuildState) -> None:
        if state not in _TRANSITIONS[self.state]:
            raise RuntimeError(f"Invalid build state transition: {self.state.value} -> {state.value}")
        self.state = state
        self.history.append(state)

    def run(self, tokens: Sequence[str]) -> BuildOutcome:
        """Resolve *tokens* and dispatch the build."""
        if self.state != BuildState.IDLE:
            raise RuntimeError("A build session can only run once")
        self._enter(BuildState.RESOLVING)
        try:
            config = resolve_arguments(tokens)
        except Exception as e:
            self.error = e
            self._enter(BuildState.FAILED)
            raise
        return self._dispatch(config)

    def run_config(self, config: BuildConfiguration) -> BuildOutcome:
        """Dispatch an already-resolved configuration."""
        if self.state != BuildState.IDLE:
            raise RuntimeError("A build session can only run once")
        return self._dispatch(config)

    def _dispatch(self, config: BuildConfiguration) -> BuildOutcome:
        self.config = config
        self._enter(BuildState.DISPATCHING)
        try:
            self.outcome = self.dispatcher.dispatch(config, self.inputs)
        except Exception as e:
            self.error = e
            self.outcome = getattr(e, "outcome", None)
            self._enter(BuildState.FAILED)
            raise
        self._enter(BuildState.SUCCEEDED)
        return self.outcome


@log_call
def build(
    target: Target,
    output_path: str,
    debug: bool = False,
    append: bool = False,
    *,
    backend: Backend,
    settings: SettingsStore,
    inputs: Sequence[str] = (),
) -> BuildOutcome:
    """Build *target* into *output_path*.

    The single parameterized entry point: the CLI and any menu layer call this
    with fixed arguments instead of one function per platform/debug combination.
    """
    config = BuildConfiguration(
        target=target,
        output_path=output_path,
        debug=debug,
        append_existing=append,
    )
    return BuildSession(backend, settings, inputs).run_config(config)


def build_from_args(
    tokens: Sequence[str],
    *,
    backend: Backend,
    settings: SettingsStore,
    inputs: Sequence[str] = (),
) -> BuildOutcome:
    """Headless entry: resolve raw command tokens, then build."""
    _logger.debug("Resolving build from %d token(s)", len(tokens))
    return BuildSession(backend, settings, inputs).run(tokens)
