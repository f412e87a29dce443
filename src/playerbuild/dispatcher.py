"""Build dispatcher: compose backend options, call the backend, restore settings."""

from __future__ import annotations

import logging
import time
from contextlib import contextmanager
from typing import Iterator, Optional, Sequence

from .builders.base import Backend, BackendError, BuildOptions, BuildOutcome
from .nfo_config import logged
from .resolver import BuildConfiguration
from .settings import SettingsStore, StrippingLevel
from .targets import Target, is_folder_target

_logger = logging.getLogger("playerbuild.dispatcher")


@contextmanager
def stripping_override(store: SettingsStore, level: Optional[StrippingLevel]) -> Iterator[StrippingLevel]:
    """Temporarily set the store's stripping level, restoring it on every exit path.

    With ``level=None`` the store is left untouched.
    """
    previous = store.stripping_level
    if level is None:
        yield previous
        return
    store.stripping_level = level
    try:
        yield previous
    finally:
        store.stripping_level = previous
        _logger.debug("Stripping level restored to %s", previous.value)


def compose_options(
    target: Target,
    *,
    debug: bool = False,
    append_existing: bool = False,
    base: BuildOptions = BuildOptions.NONE,
) -> BuildOptions:
    """Compose backend options for one build on top of the backend defaults."""
    options = base & ~BuildOptions.ACCEPT_EXTERNAL_MODIFICATIONS
    if is_folder_target(target):
        options |= BuildOptions.SYMLINK_LIBRARIES
        if append_existing:
            options |= BuildOptions.ACCEPT_EXTERNAL_MODIFICATIONS
    if debug:
        options |= BuildOptions.DEVELOPMENT
    return options


@logged
class BuildDispatcher:
    """Turns a BuildConfiguration into exactly one backend invocation."""

    def __init__(self, backend: Backend, settings: SettingsStore):
        self.backend = backend
        self.settings = settings

    def resolve_target(self, target: Target) -> Target:
        """Replace the ``Active`` sentinel with the environment's active target."""
        if target != Target.ACTIVE:
            return target
        active = self.settings.active_target
        _logger.debug("Active target resolved to %s", active)
        return active

    def dispatch(self, config: BuildConfiguration, inputs: Sequence[str]) -> BuildOutcome:
        """Run the build.

        Returns a successful :class:`BuildOutcome`, or raises
        :class:`BackendError` carrying the backend's error text verbatim. The
        stripping level is restored before either happens.
        """
        target = self.resolve_target(config.target)
        options = compose_options(
            target,
            debug=config.debug,
            append_existing=config.append_existing,
            base=self.backend.default_options,
        )
        scenes = list(inputs)

        override = StrippingLevel.DISABLED if config.debug else None
        t0 = time.monotonic()
        with stripping_override(self.settings, override):
            _logger.info("Building project for platform %s into '%s'", target, config.output_path)
            error = self.backend.build_player(scenes, config.output_path, target, options)

        outcome = BuildOutcome(
            success=not error,
            target=target,
            output_path=config.output_path,
            options=options,
            inputs=scenes,
            error=error or "",
            elapsed_seconds=time.monotonic() - t0,
        )
        if error:
            _logger.error("Build for %s failed: %s", target, error)
            raise BackendError(error, outcome)
        return outcome
