"""playerbuild – command-line player build trigger for external build backends"""

__version__ = "0.1.0"

from .builders import (
    Backend,
    BackendError,
    BuildError,
    BuildOptions,
    BuildOutcome,
    CallableBackend,
    CommandBackend,
    DryRunBackend,
    get_backend,
)
from .config import BackendConfig, BuilderConfig, LogConfig, load_config
from .dispatcher import BuildDispatcher, compose_options, stripping_override
from .pipeline import BuildSession, BuildState, build, build_from_args
from .resolver import BuildConfiguration, ResolutionError, resolve_arguments
from .scenes import SceneEntry, enabled_scenes
from .settings import MemorySettingsStore, SettingsStore, StrippingLevel, YamlSettingsStore
from .targets import Target, TargetFamily, TargetMeta, is_folder_target, list_targets, lookup_target

__all__ = [
    "__version__",
    # Targets
    "Target",
    "TargetFamily",
    "TargetMeta",
    "is_folder_target",
    "list_targets",
    "lookup_target",
    # Resolution
    "BuildConfiguration",
    "ResolutionError",
    "resolve_arguments",
    # Dispatch
    "BuildDispatcher",
    "BuildOptions",
    "BuildOutcome",
    "compose_options",
    "stripping_override",
    "BuildSession",
    "BuildState",
    "build",
    "build_from_args",
    # Backends
    "Backend",
    "BackendError",
    "BuildError",
    "CallableBackend",
    "CommandBackend",
    "DryRunBackend",
    "get_backend",
    # Settings and config
    "SettingsStore",
    "MemorySettingsStore",
    "YamlSettingsStore",
    "StrippingLevel",
    "SceneEntry",
    "enabled_scenes",
    "BackendConfig",
    "BuilderConfig",
    "LogConfig",
    "load_config",
]
