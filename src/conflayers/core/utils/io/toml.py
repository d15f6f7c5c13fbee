"""TOML dump utilities (reading goes through ``tomllib``)."""
from __future__ import annotations

from typing import Any, Mapping

import tomli_w


def dump_toml_string(data: Mapping[str, Any]) -> str:
    """Dump a mapping to a TOML document.

    Raises:
        TypeError: If a value has no TOML representation (e.g. None)
    """
    return tomli_w.dumps(dict(data))


__all__ = ["dump_toml_string"]
