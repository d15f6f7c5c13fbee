"""Canonical deep merge utilities.

This module provides the single source of truth for combining config layers.
Every merge in conflayers (layer aggregation, environment overlays, layer
overrides, RC sources) goes through :func:`merge` unless the caller supplies a
custom merger.

Semantics (sources are given highest precedence first):
- Scalars: the first non-``None`` value wins
- Mappings: merged recursively with the same rule
- Lists: concatenated, higher-precedence items first
- ``None`` values never override anything
"""
from __future__ import annotations

import copy
from typing import Any, Callable, Dict, Mapping, Optional

Merger = Callable[..., Dict[str, Any]]


def merge(*sources: Optional[Mapping[str, Any]]) -> Dict[str, Any]:
    """Merge ``sources`` into a new dictionary, earlier sources winning.

    Inputs are never mutated and the result shares no containers with them.
    Non-mapping sources (``None``, scalars) are ignored.

    Example:
        >>> merge({"a": 1, "b": {"c": 2}}, {"a": 0, "b": {"d": 3}})
        {'a': 1, 'b': {'c': 2, 'd': 3}}
        >>> merge({"tags": ["a"]}, {"tags": ["b"]})
        {'tags': ['a', 'b']}
    """
    result: Dict[str, Any] = {}
    for source in reversed(sources):
        if isinstance(source, Mapping):
            result = _merge_pair(source, result)
    return result


def _merge_pair(high: Mapping[str, Any], low: Mapping[str, Any]) -> Dict[str, Any]:
    result: Dict[str, Any] = {key: copy.deepcopy(value) for key, value in low.items()}
    for key, value in high.items():
        if value is None:
            continue
        current = result.get(key)
        if isinstance(value, list) and isinstance(current, list):
            result[key] = [*copy.deepcopy(value), *current]
        elif isinstance(value, Mapping) and isinstance(current, Mapping):
            result[key] = _merge_pair(value, current)
        else:
            result[key] = copy.deepcopy(value)
    return result


__all__ = ["Merger", "merge"]
