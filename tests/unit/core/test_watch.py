from __future__ import annotations

import logging
import threading
import time
from pathlib import Path
from typing import List

import pytest

from conflayers.core.models import LoadConfigOptions
from conflayers.core.watch import ConfigChange, ConfigWatcher, WatchEvent, watch_config, watched_paths
from helpers.io_utils import write_text, write_yaml


def _posix(path: Path) -> str:
    return path.resolve().as_posix()


def test_watched_paths_cover_candidates_rc_and_extended_layers(project: Path) -> None:
    write_yaml(project / "config.yaml", {"extends": "./base"})
    write_yaml(project / "base" / "config.yaml", {"b": 1})
    options = LoadConfigOptions(cwd=project, package_json=True).normalized()
    watcher = ConfigWatcher(options)

    watched = watched_paths(watcher.get_resolved(), options)

    assert _posix(project / "config.yaml") in watched
    assert _posix(project / "config.toml") in watched
    assert _posix(project / ".config" / "config.json") in watched
    assert _posix(project / ".configrc") in watched
    assert _posix(project / "pyproject.toml") in watched
    assert _posix(project / "base" / "config.yaml") in watched
    assert _posix(project / "base" / ".configrc") in watched
    assert len(watched) == len(set(watched))
    assert watcher.get_watched_files() == watched


def test_manifest_not_watched_unless_enabled(project: Path) -> None:
    options = LoadConfigOptions(cwd=project).normalized()
    watched = ConfigWatcher(options).get_watched_files()
    assert _posix(project / "pyproject.toml") not in watched
    # a main file created later is picked up
    assert _posix(project / "config.json") in watched


def test_handle_events_reloads_and_reports_diff(project: Path) -> None:
    config_file = write_yaml(project / "config.yaml", {"a": 1, "keep": True})
    seen: List[WatchEvent] = []
    updates: List[ConfigChange] = []
    watcher = ConfigWatcher(
        LoadConfigOptions(cwd=project),
        on_watch=seen.append,
        on_update=updates.append,
    )
    assert watcher.get_config() == {"a": 1, "keep": True}

    write_yaml(config_file, {"a": 2, "keep": True, "new": "x"})
    event = WatchEvent(type="updated", path=_posix(config_file))
    watcher.handle_events([event])

    assert seen == [event]
    assert watcher.get_config() == {"a": 2, "keep": True, "new": "x"}
    assert len(updates) == 1
    change = updates[0]
    assert change.old_config.config == {"a": 1, "keep": True}
    assert [(e.key, e.type) for e in change.get_diff()] == [("a", "changed"), ("new", "added")]
    assert change.get_diff() is change.get_diff()


def test_accept_hmr_suppresses_on_update(project: Path) -> None:
    config_file = write_yaml(project / "config.yaml", {"a": 1})
    updates: List[ConfigChange] = []
    watcher = ConfigWatcher(
        LoadConfigOptions(cwd=project),
        accept_hmr=lambda change: all(e.key == "a" for e in change.get_diff()),
        on_update=updates.append,
    )

    write_yaml(config_file, {"a": 2})
    watcher.handle_events([WatchEvent(type="updated", path=_posix(config_file))])
    assert updates == []
    assert watcher.get_config() == {"a": 2}

    write_yaml(config_file, {"a": 2, "b": 1})
    watcher.handle_events([WatchEvent(type="updated", path=_posix(config_file))])
    assert len(updates) == 1


def test_reload_failure_keeps_previous_config(project: Path, caplog: pytest.LogCaptureFixture) -> None:
    config_file = write_yaml(project / "config.yaml", {"a": 1})
    updates: List[ConfigChange] = []
    watcher = ConfigWatcher(LoadConfigOptions(cwd=project), on_update=updates.append)

    write_text(config_file, "a: [1\n")
    with caplog.at_level(logging.WARNING, logger="conflayers.core.watch"):
        watcher.handle_events([WatchEvent(type="updated", path=_posix(config_file))])

    assert watcher.get_config() == {"a": 1}
    assert updates == []
    assert "Failed to load config file" in caplog.text


def test_dotenv_edits_apply_on_reload(project: Path) -> None:
    env_file = write_text(project / ".env", "A=1\n")
    target: dict = {}
    watcher = watch_config(cwd=project, dotenv={"env": target}, debounce=False)
    try:
        assert target["A"] == "1"
        write_text(env_file, "A=2\n")
        watcher.handle_events([WatchEvent(type="updated", path=_posix(env_file))])
        assert target["A"] == "2"
    finally:
        watcher.unwatch()


def test_watch_config_detects_file_changes(project: Path) -> None:
    config_file = write_yaml(project / "config.yaml", {"a": 1})
    changed = threading.Event()
    updates: List[ConfigChange] = []

    def on_update(change: ConfigChange) -> None:
        updates.append(change)
        changed.set()

    with watch_config(cwd=project, on_update=on_update, debounce=50) as watcher:
        time.sleep(0.5)
        config_file.write_text("a: 2\n", encoding="utf-8")
        assert changed.wait(timeout=10)
        assert watcher.get_config() == {"a": 2}

    assert updates[-1].new_config.config == {"a": 2}


def test_unwatch_is_idempotent(project: Path) -> None:
    watcher = watch_config(cwd=project)
    watcher.unwatch()
    watcher.unwatch()


def test_dotenv_files_are_watched(project: Path) -> None:
    options = LoadConfigOptions(cwd=project, dotenv={"file_name": [".env", ".env.local"], "env": {}}).normalized()
    watched = ConfigWatcher(options).get_watched_files()
    assert _posix(project / ".env") in watched
    assert _posix(project / ".env.local") in watched
