from __future__ import annotations

from pathlib import Path

from conflayers.core.formats import SUPPORTED_EXTENSIONS
from conflayers.core.locator import candidate_paths, locate_config_file, strip_config_suffix
from helpers.io_utils import write_text


def test_direct_file_wins_over_dot_config_fallback(project: Path) -> None:
    write_text(project / "config.py", "config = {'from': 'py'}\n")
    write_text(project / ".config" / "config.yaml", "from: yaml\n")

    assert locate_config_file(project, "config") == project / "config.py"


def test_extension_priority_within_directory(project: Path) -> None:
    write_text(project / "config.yaml", "a: 1\n")
    write_text(project / "config.json", "{}")

    assert locate_config_file(project, "config") == project / "config.json"


def test_dot_config_directory_fallback(project: Path) -> None:
    write_text(project / ".config" / "config.toml", "a = 1\n")
    assert locate_config_file(project, "config") == project / ".config" / "config.toml"


def test_dot_config_strips_trailing_config_suffix(project: Path) -> None:
    write_text(project / ".config" / "app.yaml", "a: 1\n")
    assert locate_config_file(project, "app.config") == project / ".config" / "app.yaml"


def test_name_with_supported_extension_is_used_as_is(project: Path) -> None:
    write_text(project / "settings.yml", "a: 1\n")
    assert locate_config_file(project, "settings.yml") == project / "settings.yml"


def test_missing_config_is_none(project: Path) -> None:
    assert locate_config_file(project, "config") is None


def test_candidate_paths_cover_every_extension(project: Path) -> None:
    paths = candidate_paths(project, "app.config")

    assert len(paths) == 3 * len(SUPPORTED_EXTENSIONS)
    assert paths[0] == project / "app.config.py"
    assert project / ".config" / "app.config.toml" in paths
    assert project / ".config" / "app.yaml" in paths


def test_strip_config_suffix() -> None:
    assert strip_config_suffix("app.config") == "app"
    assert strip_config_suffix("config") == "config"
