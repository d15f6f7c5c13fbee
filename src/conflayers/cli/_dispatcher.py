"""
Auto-discovery CLI dispatcher for conflayers.

Every public module under ``cli/commands`` is a command exposing ``SUMMARY``,
``register_args(parser)`` and ``main(args) -> int``.
"""
from __future__ import annotations

import argparse
import importlib
import logging
import sys
from functools import lru_cache
from pathlib import Path
from typing import Any, Dict, List, Optional

from conflayers import __version__


@lru_cache(maxsize=1)
def discover_commands() -> Dict[str, Dict[str, Any]]:
    """Return command name -> {module, summary, register_args, main}."""
    commands_dir = Path(__file__).parent / "commands"
    commands: Dict[str, Dict[str, Any]] = {}
    for item in sorted(commands_dir.glob("*.py")):
        if item.name.startswith("_"):
            continue
        module = importlib.import_module(f"conflayers.cli.commands.{item.stem}")
        commands[item.stem] = {
            "module": module,
            "summary": getattr(module, "SUMMARY", item.stem),
            "register_args": getattr(module, "register_args", None),
            "main": getattr(module, "main", None),
        }
    return commands


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="conflayers",
        description="Inspect layered project configuration",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")

    subparsers = parser.add_subparsers(dest="command", metavar="<command>")
    for name, info in discover_commands().items():
        sub = subparsers.add_parser(name, help=info["summary"], description=info["summary"])
        if info["register_args"] is not None:
            info["register_args"](sub)
        sub.set_defaults(_handler=info["main"])
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")
    else:
        logging.basicConfig(level=logging.WARNING, format="%(levelname)s: %(message)s")

    handler = getattr(args, "_handler", None)
    if handler is None:
        parser.print_help(sys.stderr)
        return 2
    return int(handler(args))


__all__ = ["discover_commands", "build_parser", "main"]
