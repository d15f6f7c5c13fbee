from __future__ import annotations

import json
from pathlib import Path

import pytest
import yaml

from conflayers.cli import main
from conflayers.cli._dispatcher import discover_commands
from helpers.io_utils import write_text, write_yaml


@pytest.fixture
def app(project: Path) -> Path:
    write_yaml(project / "config.yaml", {"db": {"host": "x", "port": 5432}, "extends": "./base"})
    write_yaml(project / "base" / "config.yaml", {"tags": ["base"], "$meta": {"name": "base"}})
    return project


def test_commands_are_discovered() -> None:
    commands = discover_commands()
    assert {"show", "layers"} <= set(commands)
    assert commands["show"]["summary"] == "Show the resolved configuration"


def test_show_json(app: Path, capsys: pytest.CaptureFixture[str]) -> None:
    assert main(["show", "--cwd", str(app), "--json"]) == 0
    assert json.loads(capsys.readouterr().out) == {"db": {"host": "x", "port": 5432}, "tags": ["base"]}


def test_show_yaml_is_default(app: Path, capsys: pytest.CaptureFixture[str]) -> None:
    assert main(["show", "--cwd", str(app)]) == 0
    assert yaml.safe_load(capsys.readouterr().out)["db"]["port"] == 5432


def test_show_key(app: Path, capsys: pytest.CaptureFixture[str]) -> None:
    assert main(["show", "db.host", "--cwd", str(app), "--format", "text"]) == 0
    assert capsys.readouterr().out.strip() == "x"

    assert main(["show", "tags.0", "--cwd", str(app), "--json"]) == 0
    assert json.loads(capsys.readouterr().out) == "base"


def test_show_missing_key(app: Path, capsys: pytest.CaptureFixture[str]) -> None:
    assert main(["show", "db.user", "--cwd", str(app)]) == 1
    assert "Key not found: db.user" in capsys.readouterr().err


def test_show_reports_load_errors(project: Path, capsys: pytest.CaptureFixture[str]) -> None:
    write_text(project / "config.yaml", "a: [1\n")
    assert main(["show", "--cwd", str(project), "--json"]) == 1
    payload = json.loads(capsys.readouterr().err)
    assert payload["error"] == "config_show_error"
    assert payload["code"] == "ConfigLoadError"


def test_strict_flag(project: Path, capsys: pytest.CaptureFixture[str]) -> None:
    write_yaml(project / "config.yaml", {"extends": "./missing"})
    assert main(["show", "--cwd", str(project)]) == 0
    capsys.readouterr()
    assert main(["show", "--cwd", str(project), "--strict"]) == 1
    assert "Cannot extend config from `./missing`" in capsys.readouterr().err


def test_layers_json(app: Path, capsys: pytest.CaptureFixture[str]) -> None:
    assert main(["layers", "--cwd", str(app), "--json"]) == 0
    layers = json.loads(capsys.readouterr().out)
    assert [Path(layer["config_file"]).parent.name for layer in layers] == ["project", "base"]
    assert layers[1]["meta"] == {"name": "base"}


def test_layers_text(app: Path, capsys: pytest.CaptureFixture[str]) -> None:
    assert main(["layers", "--cwd", str(app), "--keys"]) == 0
    out = capsys.readouterr().out
    assert "1. " in out and "2. " in out
    assert "keys: db" in out
    assert "meta: {'name': 'base'}" in out


def test_no_command_prints_help(capsys: pytest.CaptureFixture[str]) -> None:
    assert main([]) == 2
    assert "usage:" in capsys.readouterr().err
