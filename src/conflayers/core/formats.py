"""Config file format loaders.

Extension → loader mapping (lookup priority follows ``SUPPORTED_EXTENSIONS``):

- ``.py``: imported as a module; its ``config`` attribute (or ``default``) is the
  layer's config and may be a mapping or a callable returning one
- ``.json``: strict JSON
- ``.jsonc`` / ``.json5``: JSON5 (comments, trailing commas)
- ``.yaml`` / ``.yml``: YAML (safe loader)
- ``.toml``: TOML
"""
from __future__ import annotations

import hashlib
import importlib.util
import json
import logging
import sys
import tomllib
from pathlib import Path
from typing import Any, Callable, Dict

import yaml

from .exceptions import ConfigLoadError
from .utils.io import parse_json5_string, parse_yaml_string, read_text

logger = logging.getLogger(__name__)

MODULE_EXTENSIONS = (".py",)
DATA_EXTENSIONS = (".json", ".jsonc", ".json5", ".yaml", ".yml", ".toml")
SUPPORTED_EXTENSIONS = MODULE_EXTENSIONS + DATA_EXTENSIONS

MODULE_EXPORTS = ("config", "default")


def _parse_toml(content: str) -> Dict[str, Any]:
    return tomllib.loads(content)


def _parse_yaml(content: str) -> Any:
    return parse_yaml_string(content, raise_on_error=True)


DATA_PARSERS: Dict[str, Callable[[str], Any]] = {
    ".json": json.loads,
    ".jsonc": parse_json5_string,
    ".json5": parse_json5_string,
    ".yaml": _parse_yaml,
    ".yml": _parse_yaml,
    ".toml": _parse_toml,
}

_PARSE_ERRORS = (
    ValueError,  # json.JSONDecodeError, json5 and tomllib.TOMLDecodeError derive from it
    yaml.YAMLError,
)


def _module_name(path: Path) -> str:
    digest = hashlib.sha256(str(path).encode("utf-8")).hexdigest()[:12]
    return f"_conflayers_config_{path.stem.replace('.', '_')}_{digest}"


def load_module_config(path: Path) -> Any:
    """Import a ``.py`` config file and return its exported config.

    The module is executed fresh on every call and is not left in
    ``sys.modules``.
    """
    name = _module_name(path)
    spec = importlib.util.spec_from_file_location(name, path)
    if spec is None or spec.loader is None:
        raise ConfigLoadError(
            f"Cannot import config module: {path}",
            context={"config_file": str(path)},
        )
    module = importlib.util.module_from_spec(spec)
    sys.modules[name] = module
    try:
        spec.loader.exec_module(module)
    except Exception as exc:
        raise ConfigLoadError(
            f"Failed to evaluate config module {path}: {exc}",
            context={"config_file": str(path)},
        ) from exc
    finally:
        sys.modules.pop(name, None)

    for attr in MODULE_EXPORTS:
        if hasattr(module, attr):
            return getattr(module, attr)
    raise ConfigLoadError(
        f"Config module {path} must define one of: {', '.join(MODULE_EXPORTS)}",
        context={"config_file": str(path)},
    )


def load_data_config(path: Path) -> Any:
    """Parse a structured-data config file according to its extension."""
    parser = DATA_PARSERS.get(path.suffix)
    if parser is None:
        raise ConfigLoadError(
            f"Unsupported config file extension: {path.suffix or '<none>'} ({path})",
            context={"config_file": str(path), "supported": list(SUPPORTED_EXTENSIONS)},
        )
    try:
        return parser(read_text(path))
    except _PARSE_ERRORS as exc:
        raise ConfigLoadError(
            f"Failed to parse config file {path}: {exc}",
            context={"config_file": str(path)},
        ) from exc


def load_config_file(path: Path) -> Any:
    """Load ``path`` with the loader registered for its extension."""
    path = Path(path)
    logger.debug("Loading config file %s", path)
    if path.suffix in MODULE_EXTENSIONS:
        return load_module_config(path)
    return load_data_config(path)


__all__ = [
    "MODULE_EXTENSIONS",
    "DATA_EXTENSIONS",
    "SUPPORTED_EXTENSIONS",
    "load_module_config",
    "load_data_config",
    "load_config_file",
]
