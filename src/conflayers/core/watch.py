"""Live reload of a loaded config.

:func:`watch_config` loads once, then watches every file that could change
the result (each layer's config file under all supported extensions, RC
files, ``pyproject.toml`` and ``.env`` files) and reloads on change. Callbacks run on the
watcher thread.
"""
from __future__ import annotations

import logging
import threading
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Any, Callable, Dict, List, Mapping, Optional, Set, Union

from watchfiles import Change, watch

from .dotenv import DotenvOptions, DotenvRegistry
from .loader import coerce_options, dotenv_options, load_config
from .locator import candidate_paths
from .manifest import MANIFEST_FILE
from .models import LoadConfigOptions, ResolvedConfig
from .utils.diff import DiffEntry, diff
from .utils.paths import normalize_path

logger = logging.getLogger(__name__)

DEFAULT_DEBOUNCE_MS = 100

EVENT_TYPES: Dict[Change, str] = {
    Change.added: "created",
    Change.modified: "updated",
    Change.deleted: "removed",
}


@dataclass(frozen=True)
class WatchEvent:
    type: str  # "created" | "updated" | "removed"
    path: str


@dataclass
class ConfigChange:
    """Passed to ``accept_hmr`` and ``on_update``."""

    old_config: ResolvedConfig
    new_config: ResolvedConfig
    _diff: Optional[List[DiffEntry]] = field(default=None, repr=False)

    def get_diff(self) -> List[DiffEntry]:
        if self._diff is None:
            self._diff = diff(self.old_config.config, self.new_config.config)
        return self._diff


OnWatch = Callable[[WatchEvent], Any]
AcceptHMR = Callable[[ConfigChange], Any]
OnUpdate = Callable[[ConfigChange], Any]


def watched_paths(resolved: ResolvedConfig, options: LoadConfigOptions) -> List[str]:
    """Absolute paths whose creation, change or removal may alter ``resolved``.

    ``options`` must be normalized.
    """
    config_file = str(options.config_file)
    dirs = [resolved.cwd, *(layer.cwd for layer in resolved.layers)]
    paths: List[Path] = []
    for layer_cwd in dirs:
        if not layer_cwd:
            continue
        base = Path(layer_cwd)
        paths.extend(candidate_paths(base, config_file))
    for layer in resolved.layers:
        if layer.cwd and layer.source:
            paths.append(Path(layer.cwd) / layer.source)
    for layer_cwd in dirs:
        if not layer_cwd:
            continue
        if options.rc_file:
            paths.append(Path(layer_cwd) / str(options.rc_file))
        if options.package_json:
            paths.append(Path(layer_cwd) / MANIFEST_FILE)
    if options.dotenv:
        dotenv = dotenv_options(options.dotenv, Path(str(options.cwd)))
        paths.extend(Path(str(dotenv.cwd)) / name for name in dotenv.file_names)

    seen: Set[str] = set()
    out: List[str] = []
    for path in paths:
        key = normalize_path(path.resolve()) or ""
        if key not in seen:
            seen.add(key)
            out.append(key)
    return out


class ConfigWatcher:
    """A loaded config that reloads itself when its files change."""

    def __init__(
        self,
        options: LoadConfigOptions,
        *,
        on_watch: Optional[OnWatch] = None,
        accept_hmr: Optional[AcceptHMR] = None,
        on_update: Optional[OnUpdate] = None,
        debounce: Union[int, bool] = DEFAULT_DEBOUNCE_MS,
    ) -> None:
        self._options = options
        self._on_watch = on_watch
        self._accept_hmr = accept_hmr
        self._on_update = on_update
        self._debounce_ms = 0 if debounce is False else int(debounce)

        self._lock = threading.Lock()
        self._resolved = load_config(options)
        self._watched = watched_paths(self._resolved, options.normalized())
        self._stop = threading.Event()
        self._thread: Optional[threading.Thread] = None

    def get_config(self) -> Dict[str, Any]:
        with self._lock:
            return self._resolved.config

    def get_resolved(self) -> ResolvedConfig:
        with self._lock:
            return self._resolved

    def get_watched_files(self) -> List[str]:
        return list(self._watched)

    def start(self) -> "ConfigWatcher":
        if self._thread is not None:
            return self
        watch_dirs = sorted({str(Path(p).parent) for p in self._watched if Path(p).parent.is_dir()})
        if not watch_dirs:
            logger.debug("Nothing to watch for %s", self._resolved.cwd)
            return self
        self._thread = threading.Thread(
            target=self._run,
            args=(watch_dirs,),
            name="conflayers-watch",
            daemon=True,
        )
        self._thread.start()
        return self

    def unwatch(self) -> None:
        self._stop.set()
        if self._thread is not None:
            self._thread.join(timeout=1.0)
            self._thread = None

    def __enter__(self) -> "ConfigWatcher":
        return self.start()

    def __exit__(self, *exc: object) -> None:
        self.unwatch()

    def _is_watched(self, change: Change, path: str) -> bool:
        return normalize_path(Path(path).resolve()) in self._watched

    def _run(self, watch_dirs: List[str]) -> None:
        logger.debug("Watching %d file(s) in %s", len(self._watched), watch_dirs)
        for changes in watch(
            *watch_dirs,
            watch_filter=self._is_watched,
            debounce=max(self._debounce_ms, 1),
            stop_event=self._stop,
            recursive=False,
            raise_interrupt=False,
        ):
            events = [
                WatchEvent(type=EVENT_TYPES[change], path=normalize_path(path) or path)
                for change, path in sorted(changes, key=lambda c: c[1])
                if change in EVENT_TYPES
            ]
            if events:
                self.handle_events(events)

    def handle_events(self, events: List[WatchEvent]) -> None:
        """Notify ``on_watch`` for each event, then reload once."""
        for event in events:
            if self._on_watch is not None:
                self._on_watch(event)

        old = self.get_resolved()
        try:
            new = load_config(self._options)
        except Exception:
            logger.warning(
                "Failed to load config file at %s. Please check your config file for syntax errors.",
                events[-1].path,
                exc_info=True,
            )
            return
        with self._lock:
            self._resolved = new

        change = ConfigChange(old_config=old, new_config=new)
        if self._accept_hmr is not None and self._accept_hmr(change):
            return
        if self._on_update is not None:
            self._on_update(change)


def _with_dotenv_registry(options: LoadConfigOptions) -> LoadConfigOptions:
    """Keep one registry across reloads so edited ``.env`` values apply."""
    dotenv = options.dotenv
    if not dotenv:
        return options
    if isinstance(dotenv, DotenvOptions):
        if dotenv.registry is not None:
            return options
        return replace(options, dotenv=replace(dotenv, registry=DotenvRegistry()))
    if isinstance(dotenv, Mapping):
        return replace(options, dotenv=DotenvOptions(**{"registry": DotenvRegistry(), **dotenv}))
    return replace(options, dotenv=DotenvOptions(registry=DotenvRegistry()))


def watch_config(
    options: Union[LoadConfigOptions, Mapping[str, Any], None] = None,
    *,
    on_watch: Optional[OnWatch] = None,
    accept_hmr: Optional[AcceptHMR] = None,
    on_update: Optional[OnUpdate] = None,
    debounce: Union[int, bool] = DEFAULT_DEBOUNCE_MS,
    **kwargs: Any,
) -> ConfigWatcher:
    """Load config and start watching its files.

    Example:
        >>> watcher = watch_config(cwd=".", on_update=lambda c: print(c.get_diff()))
        >>> watcher.get_config()
        >>> watcher.unwatch()
    """
    opts = _with_dotenv_registry(coerce_options(options, kwargs))
    return ConfigWatcher(
        opts,
        on_watch=on_watch,
        accept_hmr=accept_hmr,
        on_update=on_update,
        debounce=debounce,
    ).start()


__all__ = [
    "WatchEvent",
    "ConfigChange",
    "ConfigWatcher",
    "watched_paths",
    "watch_config",
]
