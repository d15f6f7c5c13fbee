"""CLI output formatting (text, JSON and YAML modes)."""
from __future__ import annotations

import json
import sys
from typing import Any, Optional

from conflayers.core.exceptions import ConfLayersError
from conflayers.core.utils.io import dump_yaml_string


class OutputFormatter:
    """Output formatter shared by all commands."""

    def __init__(self, json_mode: bool = False, indent: int = 2):
        self.json_mode = json_mode
        self.indent = indent

    def error(
        self,
        error: Exception,
        message: Optional[str] = None,
        *,
        error_code: str = "error",
    ) -> None:
        """Print an error to stderr; JSON mode includes the error context."""
        msg = message or str(error)
        if self.json_mode:
            output = {"error": error_code, "message": msg}
            if isinstance(error, ConfLayersError):
                output.update(error.to_json_error())
                output["error"] = error_code
            print(json.dumps(output, indent=self.indent, default=str), file=sys.stderr)
        else:
            print(f"Error: {msg}", file=sys.stderr)

    def json_output(self, data: Any) -> None:
        print(json.dumps(data, indent=self.indent, default=str))

    def yaml_output(self, data: Any) -> None:
        print(dump_yaml_string(data, sort_keys=False).rstrip())

    def text(self, message: str) -> None:
        print(message)

    def text_kv(self, key: str, value: Any, prefix: str = "  ") -> None:
        if not self.json_mode:
            print(f"{prefix}{key}: {value}")


def format_value(value: Any, indent: int = 0) -> str:
    """Format a value for indented text display."""
    prefix = "  " * indent
    if isinstance(value, dict):
        lines = []
        for k, v in value.items():
            formatted = format_value(v, indent + 1)
            if "\n" in formatted or (isinstance(v, dict) and v):
                lines.append(f"{prefix}{k}:")
                lines.append(formatted)
            else:
                lines.append(f"{prefix}{k}: {formatted.strip()}")
        return "\n".join(lines)
    if isinstance(value, list):
        if not value:
            return "[]"
        if all(isinstance(v, (str, int, float, bool)) for v in value):
            return f"[{', '.join(str(v) for v in value)}]"
        return "\n".join(f"{prefix}- {format_value(v).strip()}" for v in value)
    return str(value)


__all__ = ["OutputFormatter", "format_value"]
