"""
Centralized nfo logging configuration for playerbuild.

Usage at the CLI entry point:

    from playerbuild.nfo_config import setup_logging
    setup_logging()

For decorators (any module):

    from playerbuild.nfo_config import logged

    @logged
    class BuildDispatcher: ...

This configures nfo to:
- Write structured logs to SQLite (queryable after a headless build)
- Bridge the stdlib ``playerbuild.*`` loggers to the nfo sinks
- Tag logs with environment/version automatically
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional

from nfo import logged, log_call  # type: ignore[import-untyped]

from .config import LogConfig

__all__ = ["logged", "log_call", "setup_logging"]

_initialized = False

# Stdlib logger names to bridge to nfo sinks (captures logging.getLogger() calls).
_BRIDGE_MODULES = [
    "playerbuild.dispatcher",
    "playerbuild.pipeline",
    "playerbuild.settings",
    "playerbuild.scenes",
    "playerbuild.builders",
]


def setup_logging(
    config: Optional[LogConfig] = None,
    *,
    enable_sqlite: bool = True,
    enable_csv: bool = False,
) -> Optional[Path]:
    """
    Initialize nfo logging for playerbuild.

    Args:
        config: Log directory/level/environment. Defaults to ``LogConfig.from_env()``.
        enable_sqlite: Write logs to SQLite database.
        enable_csv: Write logs to CSV file.

    Returns the log directory, or None when no file sink was enabled.
    """
    global _initialized

    if _initialized:
        return None

    from nfo import configure  # type: ignore[import-untyped]

    from . import __version__

    config = config or LogConfig.from_env()
    sinks: list[str] = []
    log_path: Optional[Path] = None
    if enable_sqlite or enable_csv:
        log_path = Path(config.log_dir)
        log_path.mkdir(parents=True, exist_ok=True)
        if enable_sqlite:
            sinks.append(f"sqlite:{log_path / 'playerbuild.db'}")
        if enable_csv:
            sinks.append(f"csv:{log_path / 'playerbuild.csv'}")

    configure(
        name="playerbuild",
        level=config.level,
        sinks=sinks if sinks else None,
        modules=_BRIDGE_MODULES if sinks else None,
        propagate_stdlib=True,
        environment=config.environment,
        version=__version__,
    )

    _initialized = True
    return log_path
