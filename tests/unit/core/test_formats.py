from __future__ import annotations

import sys
from pathlib import Path

import pytest

from conflayers.core.exceptions import ConfigLoadError
from conflayers.core.formats import load_config_file
from helpers.io_utils import write_json, write_text


def test_json(project: Path) -> None:
    path = write_json(project / "config.json", {"a": {"b": [1, 2]}})
    assert load_config_file(path) == {"a": {"b": [1, 2]}}


def test_jsonc_and_json5_allow_comments_and_trailing_commas(project: Path) -> None:
    content = """
    {
      // comment
      "a": 1,
      b: 'two',
    }
    """
    for ext in (".jsonc", ".json5"):
        path = write_text(project / f"config{ext}", content)
        assert load_config_file(path) == {"a": 1, "b": "two"}


def test_yaml(project: Path) -> None:
    path = write_text(project / "config.yml", "db:\n  host: localhost\n  port: 5432\n")
    assert load_config_file(path) == {"db": {"host": "localhost", "port": 5432}}


def test_toml(project: Path) -> None:
    path = write_text(project / "config.toml", '[db]\nhost = "localhost"\n')
    assert load_config_file(path) == {"db": {"host": "localhost"}}


def test_python_module_exports_config(project: Path) -> None:
    path = write_text(project / "config.py", "config = {'answer': 40 + 2}\n")
    assert load_config_file(path) == {"answer": 42}


def test_python_module_falls_back_to_default(project: Path) -> None:
    path = write_text(project / "config.py", "default = {'from': 'default'}\n")
    assert load_config_file(path) == {"from": "default"}


def test_python_module_is_not_left_in_sys_modules(project: Path) -> None:
    path = write_text(project / "config.py", "config = {}\n")
    before = set(sys.modules)
    load_config_file(path)
    assert not [name for name in set(sys.modules) - before if name.startswith("_conflayers_config_")]


def test_python_module_is_evaluated_fresh_each_time(project: Path) -> None:
    path = write_text(project / "config.py", "config = {'v': 1}\n")
    assert load_config_file(path) == {"v": 1}
    write_text(path, "config = {'v': 2}\n")
    assert load_config_file(path) == {"v": 2}


def test_python_module_without_export_is_an_error(project: Path) -> None:
    path = write_text(project / "config.py", "value = 1\n")
    with pytest.raises(ConfigLoadError, match="must define one of"):
        load_config_file(path)


def test_python_module_raising_is_wrapped(project: Path) -> None:
    path = write_text(project / "config.py", "raise RuntimeError('boom')\n")
    with pytest.raises(ConfigLoadError, match="boom") as exc_info:
        load_config_file(path)
    assert isinstance(exc_info.value.__cause__, RuntimeError)
    assert exc_info.value.context["config_file"] == str(path)


@pytest.mark.parametrize(
    "name,content",
    [
        ("config.json", "{not json"),
        ("config.yaml", "a: [unclosed\n"),
        ("config.toml", "a = \n"),
    ],
)
def test_parse_errors_are_wrapped(project: Path, name: str, content: str) -> None:
    path = write_text(project / name, content)
    with pytest.raises(ConfigLoadError, match="Failed to parse"):
        load_config_file(path)
