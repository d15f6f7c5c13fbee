"""Schema validation of resolved configs.

Schemas are JSON Schema (draft 2020-12), given either as a mapping or as a
path to a YAML / JSON schema file.
"""
from __future__ import annotations

from pathlib import Path
from typing import Any, Dict, List, Mapping, Union

from jsonschema import Draft202012Validator
from jsonschema.exceptions import SchemaError

from .exceptions import ConfigValidationError
from .utils.io import read_yaml

SchemaLike = Union[Mapping[str, Any], str, Path]


def load_schema(path: Union[str, Path]) -> Dict[str, Any]:
    """Load a schema file (YAML is a superset of JSON, so both parse).

    Raises:
        FileNotFoundError: If the schema file doesn't exist
        ValueError: If the schema is not a mapping
    """
    schema_path = Path(path)
    if not schema_path.is_file():
        raise FileNotFoundError(f"Schema not found: {schema_path}")
    schema = read_yaml(schema_path, default=None, raise_on_error=True)
    if not isinstance(schema, dict):
        raise ValueError(f"Schema must be a mapping, got {type(schema).__name__}")
    return schema


def collect_issues(schema: SchemaLike, config: Any) -> List[Dict[str, Any]]:
    """Return every validation issue as ``{"path": ..., "message": ...}``."""
    resolved = load_schema(schema) if isinstance(schema, (str, Path)) else dict(schema)
    try:
        Draft202012Validator.check_schema(resolved)
        validator = Draft202012Validator(resolved)
        errors = sorted(validator.iter_errors(config), key=lambda e: [str(p) for p in e.path])
    except SchemaError as exc:
        raise ConfigValidationError(
            f"Invalid schema: {exc.message}",
            issues=[{"path": "", "message": exc.message}],
        ) from exc
    return [
        {"path": ".".join(str(p) for p in error.path), "message": error.message}
        for error in errors
    ]


def validate_config(schema: SchemaLike, config: Any) -> Any:
    """Validate ``config`` against ``schema`` and return it unchanged.

    Raises:
        ConfigValidationError: Carrying every issue found
    """
    issues = collect_issues(schema, config)
    if issues:
        lines = "\n".join(
            f"- {issue['path']}: {issue['message']}" if issue["path"] else f"- {issue['message']}"
            for issue in issues
        )
        raise ConfigValidationError(f"Config validation failed:\n{lines}", issues=issues)
    return config


__all__ = ["SchemaLike", "load_schema", "collect_issues", "validate_config"]
