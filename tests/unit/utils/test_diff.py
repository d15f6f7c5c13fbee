from __future__ import annotations

from conflayers.core.utils.diff import DiffEntry, diff


def test_identical_configs_have_no_diff() -> None:
    assert diff({"a": {"b": 1}}, {"a": {"b": 1}}) == []


def test_reports_added_removed_and_changed_keys() -> None:
    entries = diff({"a": 1, "b": 2}, {"a": 3, "c": 4})

    by_key = {e.key: e for e in entries}
    assert by_key["a"].type == "changed"
    assert (by_key["a"].old_value, by_key["a"].new_value) == (1, 3)
    assert by_key["b"].type == "removed"
    assert by_key["c"].type == "added"


def test_nested_keys_use_dotted_paths() -> None:
    entries = diff({"db": {"host": "a", "port": 1}}, {"db": {"host": "b", "port": 1}})
    assert entries == [DiffEntry(key="db.host", type="changed", old_value="a", new_value="b")]


def test_lists_compare_as_a_whole() -> None:
    entries = diff({"tags": ["a"]}, {"tags": ["a", "b"]})
    assert [e.key for e in entries] == ["tags"]


def test_entry_str() -> None:
    assert str(DiffEntry(key="x", type="added", new_value=1)) == "Added `x`"
    assert str(DiffEntry(key="x", type="changed", old_value=1, new_value=2)) == "Changed `x` from `1` to `2`"
