"""RC (``.<name>rc``) files.

RC files are flat ``key=value`` lines. Dotted keys nest (``db.host=x``),
numeric segments index lists (``tags.0=a``) and a trailing ``[]`` appends
(``plugins[]=a``). Values are JSON when they parse as JSON and plain strings
otherwise. Lines starting with ``#`` are comments.
"""
from __future__ import annotations

import json
import logging
import os
import re
from pathlib import Path
from typing import Any, Callable, Dict, Iterator, List, Mapping, Optional, Tuple, Union

from .utils.io import read_text, write_text
from .utils.merge import merge

logger = logging.getLogger(__name__)

DEFAULT_RC_NAME = ".conf"

_LINE_RE = re.compile(r"^(?P<key>[\w.\-]+(?:\[\])?)\s*=\s*(?P<value>.*)$")


def _parse_value(raw: str) -> Any:
    raw = raw.strip()
    if not raw:
        return ""
    try:
        return json.loads(raw)
    except ValueError:
        return raw


def _listify(node: Any) -> Any:
    """Turn mappings whose keys are all integer indices into lists."""
    if not isinstance(node, dict):
        return node
    for key, value in node.items():
        node[key] = _listify(value)
    if node and all(k.isdigit() for k in node):
        return [node[k] for k in sorted(node, key=int)]
    return node


def parse_rc(contents: str) -> Dict[str, Any]:
    """Parse RC file contents into a nested mapping."""
    root: Dict[str, Any] = {}
    for lineno, line in enumerate(contents.splitlines(), start=1):
        line = line.strip()
        if not line or line.startswith("#"):
            continue
        m = _LINE_RE.match(line)
        if not m:
            logger.debug("Ignoring malformed rc line %d: %s", lineno, line)
            continue
        key, value = m.group("key"), _parse_value(m.group("value"))
        append = key.endswith("[]")
        parts = key[:-2].split(".") if append else key.split(".")

        node = root
        for part in parts[:-1]:
            child = node.get(part)
            if not isinstance(child, dict):
                child = node[part] = {}
            node = child
        leaf = parts[-1]
        if append:
            existing = node.get(leaf)
            node[leaf] = [*existing, value] if isinstance(existing, list) else [value]
        else:
            node[leaf] = value
    return {key: _listify(value) for key, value in root.items()}


def _flatten(value: Any, prefix: str = "") -> Iterator[Tuple[str, Any]]:
    if isinstance(value, Mapping):
        for key, item in value.items():
            yield from _flatten(item, f"{prefix}.{key}" if prefix else str(key))
    elif isinstance(value, (list, tuple)):
        for index, item in enumerate(value):
            yield from _flatten(item, f"{prefix}.{index}" if prefix else str(index))
    else:
        yield prefix, value


def serialize_rc(config: Mapping[str, Any]) -> str:
    """Serialize ``config`` to RC lines (one flattened key per line)."""
    lines: List[str] = [f"{key}={json.dumps(value)}" for key, value in _flatten(config)]
    return "\n".join(lines) + "\n" if lines else ""


def _user_dir() -> Path:
    xdg = os.environ.get("XDG_CONFIG_HOME")
    return Path(xdg).expanduser() if xdg else Path.home()


def read_rc(name: str = DEFAULT_RC_NAME, directory: Optional[Union[str, Path]] = None) -> Dict[str, Any]:
    """Read ``<directory>/<name>``; a missing file reads as ``{}``."""
    path = Path(directory or os.getcwd()) / name
    if not path.is_file():
        return {}
    return parse_rc(read_text(path))


def read_user_rc(name: str = DEFAULT_RC_NAME) -> Dict[str, Any]:
    """Read ``name`` from ``$XDG_CONFIG_HOME`` or the home directory."""
    return read_rc(name, _user_dir())


def write_rc(
    config: Mapping[str, Any],
    name: str = DEFAULT_RC_NAME,
    directory: Optional[Union[str, Path]] = None,
) -> Path:
    path = Path(directory or os.getcwd()) / name
    write_text(path, serialize_rc(config))
    return path


def write_user_rc(config: Mapping[str, Any], name: str = DEFAULT_RC_NAME) -> Path:
    return write_rc(config, name, _user_dir())


def update_rc(
    config: Optional[Mapping[str, Any]] = None,
    name: str = DEFAULT_RC_NAME,
    directory: Optional[Union[str, Path]] = None,
    *,
    on_update: Optional[Callable[[Dict[str, Any]], Optional[Mapping[str, Any]]]] = None,
) -> Dict[str, Any]:
    """Merge ``config`` over the existing file contents, write, and return the result.

    ``on_update`` then edits the merged mapping in place or returns a replacement.
    """
    updated = merge(config, read_rc(name, directory))
    if on_update is not None:
        replaced = on_update(updated)
        if isinstance(replaced, Mapping):
            updated = dict(replaced)
    write_rc(updated, name, directory)
    return updated


def update_user_rc(
    config: Optional[Mapping[str, Any]] = None,
    name: str = DEFAULT_RC_NAME,
    *,
    on_update: Optional[Callable[[Dict[str, Any]], Optional[Mapping[str, Any]]]] = None,
) -> Dict[str, Any]:
    return update_rc(config, name, _user_dir(), on_update=on_update)


__all__ = [
    "DEFAULT_RC_NAME",
    "parse_rc",
    "serialize_rc",
    "read_rc",
    "read_user_rc",
    "write_rc",
    "write_user_rc",
    "update_rc",
    "update_user_rc",
]
