"""Shared utilities (merge, diff, I/O, paths)."""
from __future__ import annotations

from .diff import DiffEntry, diff
from .merge import Merger, merge
from .paths import find_nearest_file, find_workspace_root, get_global_cache_dir, normalize_path

__all__ = [
    "DiffEntry",
    "diff",
    "Merger",
    "merge",
    "find_nearest_file",
    "find_workspace_root",
    "get_global_cache_dir",
    "normalize_path",
]
