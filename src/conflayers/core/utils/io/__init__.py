"""I/O utilities for conflayers.

This package provides file operations:
- Core: atomic writes, text I/O
- JSON: JSON dumping and JSON5/JSONC parsing
- TOML: TOML dumping
- YAML: safe YAML parsing and dumping
"""
from __future__ import annotations

from .core import (
    PathLike,
    atomic_write,
    ensure_parent_dir,
    read_text,
    write_text,
)
from .json import dump_json_string, parse_json5_string
from .toml import dump_toml_string
from .yaml import (
    dump_yaml_string,
    parse_yaml_string,
    read_yaml,
)

__all__ = [
    # core
    "PathLike",
    "ensure_parent_dir",
    "atomic_write",
    "read_text",
    "write_text",
    # json
    "parse_json5_string",
    "dump_json_string",
    # toml
    "dump_toml_string",
    # yaml
    "read_yaml",
    "parse_yaml_string",
    "dump_yaml_string",
]
