"""Path discovery helpers: workspace roots, nearest files and cache locations.

Global cache directory precedence (highest to lowest):
1. Environment variable: CONFLAYERS_CACHE_DIR
2. ``$XDG_CACHE_HOME/conflayers``
3. ``~/.cache/conflayers``
"""
from __future__ import annotations

import os
from pathlib import Path
from typing import Optional, Union

CACHE_DIR_ENV = "CONFLAYERS_CACHE_DIR"
CACHE_DIR_NAME = "conflayers"
WORKSPACE_MARKERS = (".git",)


def normalize_path(path: Union[str, Path, None]) -> Optional[str]:
    """Return ``path`` with forward slashes, or None."""
    if path is None:
        return None
    return str(path).replace("\\", "/")


def find_workspace_root(start: Path) -> Optional[Path]:
    """Return the nearest ancestor of ``start`` holding a workspace marker.

    Walks up parent directories looking for a ``.git`` entry (file or
    directory). This is a structural check and does not run git commands.
    """
    p = Path(start).resolve()
    if p.is_file():
        p = p.parent
    for candidate in [p, *p.parents]:
        for marker in WORKSPACE_MARKERS:
            if (candidate / marker).exists():
                return candidate
    return None


def find_nearest_file(start: Path, name: str) -> Optional[Path]:
    """Return the closest ``name`` file in ``start`` or any of its parents."""
    p = Path(start).resolve()
    for candidate in [p, *p.parents]:
        target = candidate / name
        if target.is_file():
            return target
    return None


def get_global_cache_dir() -> Path:
    """Return the user-global cache root for downloaded remote layers."""
    override = os.environ.get(CACHE_DIR_ENV)
    if override and override.strip():
        return Path(override.strip()).expanduser().resolve()

    xdg = os.environ.get("XDG_CACHE_HOME")
    if xdg and xdg.strip():
        return Path(xdg.strip()).expanduser().resolve() / CACHE_DIR_NAME

    return Path.home() / ".cache" / CACHE_DIR_NAME


__all__ = [
    "CACHE_DIR_ENV",
    "CACHE_DIR_NAME",
    "normalize_path",
    "find_workspace_root",
    "find_nearest_file",
    "get_global_cache_dir",
]
