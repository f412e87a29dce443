"""Backend registry – resolve the right Backend for a configured type."""

from __future__ import annotations

from pathlib import Path
from typing import Any, Callable, Optional

from .base import Backend, BuildOptions
from .command import CommandBackend
from .local import CallableBackend, DryRunBackend

_FACTORIES: dict[str, Callable[..., Backend]] = {
    "command": CommandBackend,
    "dry-run": DryRunBackend,
    "callable": CallableBackend,
}


def get_backend(kind: str, **kwargs: Any) -> Backend:
    """Instantiate the backend registered under *kind*."""
    key = (kind or "").strip().lower().replace("_", "-")
    factory = _FACTORIES.get(key)
    if factory is None:
        raise ValueError(f"No backend registered for type: {kind}")
    return factory(**kwargs)


def get_backend_for_config(backend_config: Any, *, base_path: Optional[Path] = None) -> Backend:
    """Build a backend from a :class:`~playerbuild.config.BackendConfig`."""
    options = BuildOptions.from_names(backend_config.default_options)
    if backend_config.type == "command":
        return get_backend(
            "command",
            command=backend_config.command,
            cwd=base_path,
            env=backend_config.env,
            timeout=backend_config.timeout,
            default_options=options,
        )
    return get_backend(backend_config.type, default_options=options)


def list_backends() -> list[str]:
    return sorted(_FACTORIES)
