"""
conflayers show command.

SUMMARY: Show the resolved configuration

Loads every layer for the project and prints the merged result, or a single
dotted key of it.
"""
from __future__ import annotations

import argparse
from typing import Any

from conflayers.cli._args import add_json_flag, add_load_options, options_from_args
from conflayers.cli._output import OutputFormatter, format_value
from conflayers.core.exceptions import ConfLayersError
from conflayers.core.loader import load_config

SUMMARY = "Show the resolved configuration"

_MISSING = object()


def _lookup(config: Any, key: str) -> Any:
    node = config
    for part in [p for p in key.split(".") if p]:
        if isinstance(node, dict) and part in node:
            node = node[part]
        elif isinstance(node, list) and part.isdigit() and int(part) < len(node):
            node = node[int(part)]
        else:
            return _MISSING
    return node


def register_args(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "key",
        nargs="?",
        help="Dotted key to show (e.g., 'database.host')",
    )
    parser.add_argument(
        "--format",
        choices=["json", "yaml", "text"],
        default="yaml",
        help="Output format (default: yaml)",
    )
    add_json_flag(parser)
    add_load_options(parser)


def main(args: argparse.Namespace) -> int:
    formatter = OutputFormatter(json_mode=args.json)
    output_format = "json" if args.json else args.format

    try:
        resolved = load_config(options_from_args(args))
    except ConfLayersError as e:
        formatter.error(e, error_code="config_show_error")
        return 1

    value: Any = resolved.config
    if args.key:
        value = _lookup(resolved.config, args.key)
        if value is _MISSING:
            formatter.error(KeyError(args.key), f"Key not found: {args.key}", error_code="key_not_found")
            return 1

    if output_format == "json":
        formatter.json_output(value)
    elif output_format == "yaml":
        formatter.yaml_output(value)
    else:
        formatter.text(format_value(value))
    return 0
