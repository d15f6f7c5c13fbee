"""Remote layer cache locations.

Each remote source is downloaded into ``<cache-root>/<cache-key>``. The key
combines a readable prefix of the URI with a hash of the full URI, so repeated
resolutions of one URI land in the same directory while different URIs never
collide.

Cache root precedence:
1. The parent of ``cwd`` when it is itself a ``.conflayers`` cache directory
   (a remote layer extending another remote layer)
2. ``<cwd>/.venv/.conflayers`` when a local virtualenv exists
3. The global cache directory (see :func:`get_global_cache_dir`)
"""
from __future__ import annotations

import hashlib
import re
from pathlib import Path

from ..utils.paths import get_global_cache_dir

LOCAL_CACHE_DIR_NAME = ".conflayers"
LOCAL_DEPENDENCY_DIR = ".venv"


def get_cache_key(source: str) -> str:
    """Return a deterministic, filesystem-safe directory name for ``source``."""
    source_hash = hashlib.sha256(source.encode("utf-8")).hexdigest()[:10]
    prefix = "_".join(re.sub(r"\W+", "_", source).split("_")[:3])
    return f"{prefix}_{source_hash}"


def get_cache_dir(source: str, cwd: Path) -> Path:
    """Return the directory ``source`` is downloaded into when resolved from ``cwd``."""
    cwd = Path(cwd)
    name = get_cache_key(source)

    if cwd.parent.name == LOCAL_CACHE_DIR_NAME:
        return cwd.parent / name

    local_deps = cwd / LOCAL_DEPENDENCY_DIR
    if local_deps.is_dir():
        return local_deps / LOCAL_CACHE_DIR_NAME / name

    return get_global_cache_dir() / name


__all__ = [
    "LOCAL_CACHE_DIR_NAME",
    "LOCAL_DEPENDENCY_DIR",
    "get_cache_key",
    "get_cache_dir",
]
