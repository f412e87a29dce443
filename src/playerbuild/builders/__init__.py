"""Backends that perform the actual player build (command, callable, dry-run)."""

from .base import Backend, BackendError, BuildError, BuildOptions, BuildOutcome
from .command import CommandBackend
from .local import CallableBackend, DryRunBackend
from .registry import get_backend, get_backend_for_config, list_backends

__all__ = [
    "Backend",
    "BackendError",
    "BuildError",
    "BuildOptions",
    "BuildOutcome",
    "CallableBackend",
    "CommandBackend",
    "DryRunBackend",
    "get_backend",
    "get_backend_for_config",
    "list_backends",
]
