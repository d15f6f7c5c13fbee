from __future__ import annotations

from conflayers.core.utils.merge import merge


def test_first_defined_scalar_wins() -> None:
    assert merge({"a": 1}, {"a": 2, "b": 2}, {"b": 3, "c": 3}) == {"a": 1, "b": 2, "c": 3}


def test_nested_mappings_merge_recursively() -> None:
    high = {"db": {"host": "prod"}}
    low = {"db": {"host": "localhost", "port": 5432}}
    assert merge(high, low) == {"db": {"host": "prod", "port": 5432}}


def test_lists_concatenate_high_first() -> None:
    assert merge({"tags": ["a"]}, {"tags": ["b", "c"]}) == {"tags": ["a", "b", "c"]}


def test_none_never_overrides() -> None:
    assert merge({"a": None, "b": {"c": None}}, {"a": 1, "b": {"c": 2}}) == {"a": 1, "b": {"c": 2}}


def test_non_mapping_sources_are_ignored() -> None:
    assert merge(None, {"a": 1}, None) == {"a": 1}
    assert merge() == {}


def test_scalar_replaces_mapping_from_lower_layer() -> None:
    assert merge({"db": "sqlite://"}, {"db": {"host": "x"}}) == {"db": "sqlite://"}


def test_inputs_are_not_mutated_or_aliased() -> None:
    high = {"nested": {"items": [1]}}
    low = {"nested": {"items": [2], "other": {"x": 1}}}
    result = merge(high, low)

    result["nested"]["items"].append(99)
    result["nested"]["other"]["x"] = 42

    assert high == {"nested": {"items": [1]}}
    assert low == {"nested": {"items": [2], "other": {"x": 1}}}


def test_single_source_result_is_a_copy() -> None:
    source = {"a": {"b": 1}}
    result = merge(source)
    assert result == source
    assert result["a"] is not source["a"]
