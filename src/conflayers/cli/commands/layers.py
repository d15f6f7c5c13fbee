"""
conflayers layers command.

SUMMARY: List the layers behind the resolved configuration

Layers are printed highest precedence first, the order in which they are
merged.
"""
from __future__ import annotations

import argparse

from conflayers.cli._args import add_json_flag, add_load_options, options_from_args
from conflayers.cli._output import OutputFormatter
from conflayers.core.exceptions import ConfLayersError
from conflayers.core.loader import load_config

SUMMARY = "List the layers behind the resolved configuration"


def register_args(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--keys",
        action="store_true",
        help="Also list each layer's top-level keys",
    )
    add_json_flag(parser)
    add_load_options(parser)


def main(args: argparse.Namespace) -> int:
    formatter = OutputFormatter(json_mode=args.json)

    try:
        resolved = load_config(options_from_args(args))
    except ConfLayersError as e:
        formatter.error(e, error_code="config_layers_error")
        return 1

    if args.json:
        formatter.json_output([layer.to_dict() for layer in resolved.layers])
        return 0

    formatter.text(f"Layers for {resolved.cwd} (highest precedence first)")
    for index, layer in enumerate(resolved.layers, start=1):
        label = layer.config_file or layer.source or "<inline>"
        formatter.text(f"{index}. {label}")
        if layer.cwd:
            formatter.text_kv("cwd", layer.cwd)
        if layer.meta:
            formatter.text_kv("meta", layer.meta)
        if args.keys:
            formatter.text_kv("keys", ", ".join(sorted(layer.config or {})) or "-")
    return 0
