"""``.env`` loading into an environment mapping.

Files are parsed with python-dotenv. Variables already present in the target
environment win over file values unless ``override`` is set, with one
exception: keys a previous :func:`setup_dotenv` call took from a file (tracked
in a :class:`DotenvRegistry`) may be replaced by a later load, so edited
``.env`` files take effect on reload.
"""
from __future__ import annotations

import logging
import os
import re
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Dict, Iterable, List, MutableMapping, Optional, Set, Tuple, Union

from dotenv import dotenv_values

logger = logging.getLogger(__name__)

DEFAULT_DOTENV_FILE = ".env"
FILE_SUFFIX = "_FILE"

_VAR_RE = re.compile(r"(?P<escape>\\?)\$(?:\{(?P<braced>[\w:]+)\}|(?P<bare>\w+))")


@dataclass
class DotenvRegistry:
    """Keys that were written into an environment from ``.env`` files."""

    keys: Set[str] = field(default_factory=set)

    def add(self, keys: Iterable[str]) -> None:
        self.keys.update(keys)

    def __contains__(self, key: object) -> bool:
        return key in self.keys


@dataclass
class DotenvOptions:
    """Options for :func:`load_dotenv` / :func:`setup_dotenv`."""

    cwd: Optional[Union[str, Path]] = None
    file_name: Union[str, List[str]] = DEFAULT_DOTENV_FILE
    interpolate: bool = True
    env: Optional[MutableMapping[str, str]] = None
    override: bool = False
    expand_env_files: bool = False
    registry: Optional[DotenvRegistry] = None

    @property
    def file_names(self) -> List[str]:
        if isinstance(self.file_name, str):
            return [self.file_name]
        return list(self.file_name)


def _read_files(options: DotenvOptions) -> Dict[str, str]:
    cwd = Path(options.cwd or os.getcwd())
    values: Dict[str, str] = {}
    for name in options.file_names:
        path = cwd / name
        if not path.is_file():
            continue
        logger.debug("Loading dotenv file %s", path)
        for key, value in dotenv_values(path, interpolate=False).items():
            values[key] = "" if value is None else value
    return values


def _expand_file_references(environment: Dict[str, str], cwd: Path) -> None:
    for key, value in list(environment.items()):
        if not key.endswith(FILE_SUFFIX) or len(key) == len(FILE_SUFFIX) or not value:
            continue
        path = (cwd / value).expanduser()
        if path.is_file():
            environment[key[: -len(FILE_SUFFIX)]] = path.read_text(encoding="utf-8").strip()


def interpolate_env(environment: Dict[str, str]) -> None:
    """Expand ``$VAR`` / ``${VAR}`` references in place; ``\\$`` escapes."""

    def expand(value: str, parents: Tuple[str, ...]) -> str:
        def substitute(m: "re.Match[str]") -> str:
            if m.group("escape"):
                return m.group(0)[1:]
            name = m.group("braced") or m.group("bare")
            if name in parents:
                logger.warning(
                    "Please avoid recursive environment variables (loop: %s > %s)",
                    " > ".join(parents),
                    name,
                )
                return ""
            ref = environment.get(name)
            if ref is None:
                return m.group(0)
            return expand(ref, (*parents, name))

        return _VAR_RE.sub(substitute, value)

    for key in list(environment):
        environment[key] = expand(environment[key], (key,))


def _load(options: DotenvOptions) -> Tuple[Dict[str, str], Set[str]]:
    env = options.env if options.env is not None else os.environ
    registry = options.registry or DotenvRegistry()

    environment = _read_files(options)
    if options.expand_env_files:
        _expand_file_references(environment, Path(options.cwd or os.getcwd()))
    file_keys = set(environment)

    for key, value in env.items():
        if key in file_keys and (options.override or key in registry):
            continue
        environment[key] = value

    if options.interpolate:
        interpolate_env(environment)
    return environment, file_keys


def load_dotenv(options: Optional[DotenvOptions] = None) -> Dict[str, str]:
    """Return the ``.env`` values combined with the environment, without writing anything."""
    environment, _ = _load(options or DotenvOptions())
    return environment


def setup_dotenv(options: Optional[DotenvOptions] = None) -> Dict[str, str]:
    """Load ``.env`` files and write their values into the target environment.

    Keys starting with ``_`` are never written. Returns the combined mapping.
    """
    options = options or DotenvOptions()
    target = options.env if options.env is not None else os.environ
    registry = options.registry if options.registry is not None else DotenvRegistry()
    options = replace(options, env=target, registry=registry)

    environment, file_keys = _load(options)
    written: List[str] = []
    for key, value in environment.items():
        if key.startswith("_") or key not in file_keys:
            continue
        if options.override or key not in target or key in registry:
            target[key] = value
            written.append(key)
    registry.add(written)
    return environment


__all__ = [
    "DEFAULT_DOTENV_FILE",
    "DotenvRegistry",
    "DotenvOptions",
    "interpolate_env",
    "load_dotenv",
    "setup_dotenv",
]
