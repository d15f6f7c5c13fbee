from __future__ import annotations

from pathlib import Path

from conflayers.core.remote.cache import get_cache_dir, get_cache_key


def test_cache_key_is_stable_and_unique() -> None:
    key = get_cache_key("gh:acme/presets#v1")
    assert key == get_cache_key("gh:acme/presets#v1")
    assert key.startswith("gh_acme_presets_")
    assert key != get_cache_key("gh:acme/presets#v2")


def test_global_cache_dir(project: Path, tmp_path: Path) -> None:
    key = get_cache_key("gh:acme/presets")
    assert get_cache_dir("gh:acme/presets", project) == (tmp_path / "cache").resolve() / key


def test_local_virtualenv_cache_dir(project: Path) -> None:
    (project / ".venv").mkdir()
    key = get_cache_key("gh:acme/presets")
    assert get_cache_dir("gh:acme/presets", project) == project / ".venv" / ".conflayers" / key


def test_nested_remote_layers_share_the_parent_cache(tmp_path: Path) -> None:
    cache_root = tmp_path / "x" / ".conflayers"
    layer_dir = cache_root / "gh_acme_presets_0123456789"
    key = get_cache_key("gh:acme/colors")
    assert get_cache_dir("gh:acme/colors", layer_dir) == cache_root / key
