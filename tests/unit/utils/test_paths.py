from __future__ import annotations

from pathlib import Path

import pytest

from conflayers.core.utils.paths import (
    find_nearest_file,
    find_workspace_root,
    get_global_cache_dir,
    normalize_path,
)


def test_normalize_path_uses_forward_slashes() -> None:
    assert normalize_path("a\\b\\c.yaml") == "a/b/c.yaml"
    assert normalize_path(None) is None


def test_find_workspace_root_walks_up_to_git(tmp_path: Path) -> None:
    root = tmp_path / "repo"
    (root / ".git").mkdir(parents=True)
    nested = root / "packages" / "app"
    nested.mkdir(parents=True)

    assert find_workspace_root(nested) == root.resolve()


def test_find_workspace_root_ignores_dirs_without_marker(tmp_path: Path) -> None:
    nested = tmp_path / "plain"
    nested.mkdir()
    assert find_workspace_root(nested) not in (nested.resolve(), tmp_path.resolve())


def test_find_nearest_file(tmp_path: Path) -> None:
    (tmp_path / "pyproject.toml").write_text("", encoding="utf-8")
    nested = tmp_path / "a" / "b"
    nested.mkdir(parents=True)
    assert find_nearest_file(nested, "pyproject.toml") == (tmp_path / "pyproject.toml").resolve()


def test_global_cache_dir_precedence(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("CONFLAYERS_CACHE_DIR", str(tmp_path / "explicit"))
    monkeypatch.setenv("XDG_CACHE_HOME", str(tmp_path / "xdg"))
    assert get_global_cache_dir() == (tmp_path / "explicit").resolve()

    monkeypatch.delenv("CONFLAYERS_CACHE_DIR")
    assert get_global_cache_dir() == (tmp_path / "xdg").resolve() / "conflayers"

    monkeypatch.delenv("XDG_CACHE_HOME")
    assert get_global_cache_dir() == Path.home() / ".cache" / "conflayers"
