"""Config embedded in the project manifest (``pyproject.toml``).

Fields are read from ``[tool.<field>]`` tables of the nearest
``pyproject.toml`` at or above the working directory.
"""
from __future__ import annotations

import logging
import tomllib
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

from .exceptions import ConfigLoadError
from .utils.io import read_text
from .utils.paths import find_nearest_file

logger = logging.getLogger(__name__)

MANIFEST_FILE = "pyproject.toml"


def manifest_fields(value: Union[bool, str, List[str]], name: str) -> List[str]:
    """Normalize the ``package_json`` option into a list of field names."""
    if isinstance(value, (list, tuple)):
        fields = list(value)
    elif isinstance(value, str):
        fields = [value]
    else:
        fields = [name]
    return [f for f in fields if f and isinstance(f, str)]


def find_manifest(cwd: Path) -> Optional[Path]:
    return find_nearest_file(cwd, MANIFEST_FILE)


def read_manifest_fields(path: Optional[Path], fields: List[str]) -> List[Any]:
    """Return ``[tool.<field>]`` for each field, None where absent."""
    if path is None:
        return [None for _ in fields]
    try:
        data = tomllib.loads(read_text(path))
    except tomllib.TOMLDecodeError as exc:
        raise ConfigLoadError(
            f"Failed to parse {path}: {exc}",
            context={"config_file": str(path)},
        ) from exc
    tool: Dict[str, Any] = data.get("tool") or {}
    logger.debug("Reading %s fields from %s", fields, path)
    return [tool.get(field) for field in fields]


__all__ = ["MANIFEST_FILE", "manifest_fields", "find_manifest", "read_manifest_fields"]
