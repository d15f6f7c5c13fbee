"""Structural diff between two resolved configs."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, List, Literal, Mapping

DiffType = Literal["added", "removed", "changed"]


@dataclass(frozen=True)
class DiffEntry:
    """A single difference at a dotted ``key`` path."""

    key: str
    type: DiffType
    old_value: Any = None
    new_value: Any = None

    def __str__(self) -> str:
        if self.type == "added":
            return f"Added `{self.key}`"
        if self.type == "removed":
            return f"Removed `{self.key}`"
        return f"Changed `{self.key}` from `{self.old_value!r}` to `{self.new_value!r}`"


def diff(old: Mapping[str, Any], new: Mapping[str, Any], *, prefix: str = "") -> List[DiffEntry]:
    """Return the differences between ``old`` and ``new``.

    Nested mappings are compared key by key; any other values (lists
    included) are compared as a whole.

    Example:
        >>> [str(e) for e in diff({"a": 1, "b": {"c": 1}}, {"a": 1, "b": {"c": 2}})]
        ['Changed `b.c` from `1` to `2`']
    """
    entries: List[DiffEntry] = []
    for key in [*old.keys(), *(k for k in new.keys() if k not in old)]:
        path = f"{prefix}{key}"
        if key not in new:
            entries.append(DiffEntry(key=path, type="removed", old_value=old[key]))
            continue
        if key not in old:
            entries.append(DiffEntry(key=path, type="added", new_value=new[key]))
            continue
        before, after = old[key], new[key]
        if isinstance(before, Mapping) and isinstance(after, Mapping):
            entries.extend(diff(before, after, prefix=f"{path}."))
        elif before != after:
            entries.append(DiffEntry(key=path, type="changed", old_value=before, new_value=after))
    return entries


__all__ = ["DiffEntry", "DiffType", "diff"]
