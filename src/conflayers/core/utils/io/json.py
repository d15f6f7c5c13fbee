"""JSON / JSON5 / JSONC utilities."""
from __future__ import annotations

import json
from typing import Any

import json5


def parse_json5_string(content: str) -> Any:
    """Parse JSON5 (a superset of JSONC: comments, trailing commas, bare keys)."""
    return json5.loads(content)


def dump_json_string(data: Any, indent: int = 2) -> str:
    """Format data as a JSON document ending in a newline."""
    return json.dumps(data, indent=indent, ensure_ascii=False) + "\n"


__all__ = [
    "parse_json5_string",
    "dump_json_string",
]
