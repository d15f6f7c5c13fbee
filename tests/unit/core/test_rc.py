from __future__ import annotations

from pathlib import Path

import pytest

from conflayers.core.rc import (
    parse_rc,
    read_rc,
    read_user_rc,
    serialize_rc,
    update_rc,
    write_rc,
    write_user_rc,
)


def test_parse_dotted_indexed_and_typed_values() -> None:
    contents = """
# comment
database.host=localhost
database.port=5432
debug=true
name="quoted"
plain=some text
tags.0=a
tags.1=b
plugins[]=x
plugins[]=y
"""
    assert parse_rc(contents) == {
        "database": {"host": "localhost", "port": 5432},
        "debug": True,
        "name": "quoted",
        "plain": "some text",
        "tags": ["a", "b"],
        "plugins": ["x", "y"],
    }


def test_serialize_flattens_nested_values() -> None:
    text = serialize_rc({"db": {"host": "x", "port": 1}, "tags": ["a"], "on": False})
    assert text.splitlines() == ['db.host="x"', "db.port=1", 'tags.0="a"', "on=false"]


def test_serialize_then_parse_preserves_config() -> None:
    config = {"db": {"host": "x", "replicas": [{"host": "r1"}, {"host": "r2"}]}, "n": 1.5}
    assert parse_rc(serialize_rc(config)) == config


def test_read_missing_file_is_empty(tmp_path: Path) -> None:
    assert read_rc(".nope", tmp_path) == {}


def test_write_and_update(tmp_path: Path) -> None:
    write_rc({"a": 1, "nested": {"b": 2}}, ".apprc", tmp_path)
    assert read_rc(".apprc", tmp_path) == {"a": 1, "nested": {"b": 2}}

    updated = update_rc({"nested": {"b": 3, "c": 4}}, ".apprc", tmp_path)

    assert updated == {"a": 1, "nested": {"b": 3, "c": 4}}
    assert read_rc(".apprc", tmp_path) == updated


def test_user_rc_uses_xdg_config_home(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    write_user_rc({"where": "home"}, ".apprc")
    assert read_user_rc(".apprc") == {"where": "home"}
    assert (Path.home() / ".apprc").is_file()

    xdg = tmp_path / "xdg"
    monkeypatch.setenv("XDG_CONFIG_HOME", str(xdg))
    assert read_user_rc(".apprc") == {}
    write_user_rc({"where": "xdg"}, ".apprc")
    assert (xdg / ".apprc").is_file()


def test_update_with_callback(tmp_path: Path) -> None:
    write_rc({"a": 1}, ".apprc", tmp_path)

    def on_update(config: dict) -> None:
        config["b"] = {"c": True}
        del config["a"]

    assert update_rc(name=".apprc", directory=tmp_path, on_update=on_update) == {"b": {"c": True}}
    assert read_rc(".apprc", tmp_path) == {"b": {"c": True}}
