"""Config file discovery.

Given a directory and a logical file name (e.g. ``config`` or ``app.config``),
candidates are probed in this order; the first existing file wins:

1. ``<dir>/<name>`` then ``<dir>/<name><ext>`` for each supported extension
2. ``<dir>/.config/<name>`` (same extension probing)
3. ``<dir>/.config/<name without trailing ".config">`` (same extension probing)
"""
from __future__ import annotations

from pathlib import Path
from typing import Iterator, List, Optional, Union

from .formats import SUPPORTED_EXTENSIONS

CONFIG_SUBDIR = ".config"


def strip_config_suffix(name: str) -> str:
    """``app.config`` -> ``app``; other names are returned unchanged."""
    return name[: -len(".config")] if name.endswith(".config") else name


def try_resolve_file(path: Path) -> Optional[Path]:
    """Return ``path`` itself or ``path`` + a supported extension, if it is a file."""
    if path.suffix in SUPPORTED_EXTENSIONS and path.is_file():
        return path
    for ext in SUPPORTED_EXTENSIONS:
        candidate = path.with_name(path.name + ext)
        if candidate.is_file():
            return candidate
    return None


def iter_candidate_stems(base_dir: Union[str, Path], name: str) -> Iterator[Path]:
    """Yield extension-less lookup paths in priority order."""
    base = Path(base_dir)
    yield base / name
    yield base / CONFIG_SUBDIR / name
    stripped = strip_config_suffix(name)
    if stripped != name:
        yield base / CONFIG_SUBDIR / stripped


def candidate_paths(base_dir: Union[str, Path], name: str) -> List[Path]:
    """Every concrete path :func:`locate_config_file` may pick, in priority order."""
    out: List[Path] = []
    for stem in iter_candidate_stems(base_dir, name):
        out.extend(stem.with_name(stem.name + ext) for ext in SUPPORTED_EXTENSIONS)
    return out


def locate_config_file(base_dir: Union[str, Path], name: str) -> Optional[Path]:
    """Find the config file for ``name`` in ``base_dir``; None when absent."""
    for stem in iter_candidate_stems(base_dir, name):
        found = try_resolve_file(stem)
        if found is not None:
            return found
    return None


__all__ = [
    "CONFIG_SUBDIR",
    "strip_config_suffix",
    "try_resolve_file",
    "iter_candidate_stems",
    "candidate_paths",
    "locate_config_file",
]
