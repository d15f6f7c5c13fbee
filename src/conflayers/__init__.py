"""
conflayers - layered configuration loading

Discovers and merges project configuration from a main config file, RC
dotfiles, ``pyproject.toml``, ``.env`` files, programmatic overrides and
defaults, and recursively extended base layers (local, installed packages or
git-hosted), keeping every contributing layer for introspection.
"""
from __future__ import annotations

from typing import Any, Mapping, TypeVar

from .core.dotenv import DotenvOptions, DotenvRegistry, load_dotenv, setup_dotenv
from .core.exceptions import (
    CircularExtendsError,
    ConfigLoadError,
    ConfigNotFoundError,
    ConfigUpdateError,
    ConfigValidationError,
    ConfLayersError,
    ExtendError,
    InvalidExtendEntry,
    RemoteSourceError,
)
from .core.formats import SUPPORTED_EXTENSIONS
from .core.loader import load_config
from .core.models import (
    ExtendOptions,
    LoadConfigOptions,
    RemoteOptions,
    RemoteTemplate,
    ResolvableConfigContext,
    ResolvedConfig,
    ResolvedLayer,
    SourceOptions,
)
from .core.rc import (
    parse_rc,
    read_rc,
    read_user_rc,
    serialize_rc,
    update_rc,
    update_user_rc,
    write_rc,
    write_user_rc,
)
from .core.update import UpdateConfigResult, update_config
from .core.utils.diff import DiffEntry, diff
from .core.utils.merge import merge
from .core.validation import validate_config
from .core.watch import ConfigChange, ConfigWatcher, WatchEvent, watch_config

__version__ = "0.1.0"

ConfigT = TypeVar("ConfigT", bound=Mapping[str, Any])


def define_config(config: ConfigT) -> ConfigT:
    """Return ``config`` unchanged; gives config modules a typed entry point."""
    return config


__all__ = [
    "__version__",
    "SUPPORTED_EXTENSIONS",
    "load_config",
    "watch_config",
    "define_config",
    "merge",
    "diff",
    "DiffEntry",
    "validate_config",
    "LoadConfigOptions",
    "ExtendOptions",
    "RemoteOptions",
    "RemoteTemplate",
    "SourceOptions",
    "ResolvedLayer",
    "ResolvedConfig",
    "ResolvableConfigContext",
    "ConfigWatcher",
    "ConfigChange",
    "WatchEvent",
    "DotenvOptions",
    "DotenvRegistry",
    "load_dotenv",
    "setup_dotenv",
    "parse_rc",
    "serialize_rc",
    "read_rc",
    "read_user_rc",
    "write_rc",
    "update_rc",
    "write_user_rc",
    "update_user_rc",
    "update_config",
    "UpdateConfigResult",
    "ConfLayersError",
    "ConfigNotFoundError",
    "ConfigLoadError",
    "ConfigUpdateError",
    "ExtendError",
    "InvalidExtendEntry",
    "CircularExtendsError",
    "RemoteSourceError",
    "ConfigValidationError",
]
