"""Argument helpers shared by commands."""
from __future__ import annotations

import argparse

from conflayers.core.models import LoadConfigOptions


def add_json_flag(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--json",
        action="store_true",
        help="Output as JSON",
    )


def add_load_options(parser: argparse.ArgumentParser) -> None:
    """Add the flags that map onto :class:`LoadConfigOptions`."""
    parser.add_argument("--cwd", type=str, help="Project directory (default: current directory)")
    parser.add_argument("--name", type=str, default="config", help="Logical config name (default: config)")
    parser.add_argument("--config-file", type=str, help="Main config file name without extension")
    parser.add_argument("--env", dest="env_name", type=str, help="Environment name for $<env> overlays")
    parser.add_argument("--dotenv", action="store_true", help="Load .env before resolving")
    parser.add_argument("--global-rc", action="store_true", help="Also read RC files from workspace root and home")
    parser.add_argument(
        "--pyproject",
        action="store_true",
        help="Read [tool.<name>] from the nearest pyproject.toml",
    )
    parser.add_argument("--no-remote", action="store_true", help="Disable remote (gh:, https://...) layers")
    parser.add_argument("--strict", action="store_true", help="Fail on unresolvable extends entries")
    parser.add_argument(
        "--omit-dollar-keys",
        action="store_true",
        help="Drop top-level $-prefixed keys from the result",
    )


def options_from_args(args: argparse.Namespace) -> LoadConfigOptions:
    return LoadConfigOptions(
        cwd=args.cwd,
        name=args.name,
        config_file=args.config_file,
        env_name=args.env_name,
        dotenv=args.dotenv,
        global_rc=args.global_rc,
        package_json=args.pyproject,
        remote=False if args.no_remote else None,
        strict=args.strict,
        omit_dollar_keys=args.omit_dollar_keys,
    )


__all__ = ["add_json_flag", "add_load_options", "options_from_args"]
