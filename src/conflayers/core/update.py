"""Programmatic edits of a project's main config file.

:func:`update_config` finds the main config file the same way
:func:`conflayers.load_config` does, creates it when missing, hands the parsed
mapping to ``on_update`` and writes the result back in the file's format.
Only data formats are editable; comments are not preserved.

Example:
    >>> def enable_cache(config):
    ...     config.setdefault("cache", {})["enabled"] = True
    >>> update_config("/srv/app", "app.config", on_update=enable_cache)
"""
from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Callable, Dict, Optional, Union

from .exceptions import ConfigUpdateError
from .formats import DATA_EXTENSIONS, load_data_config
from .locator import locate_config_file
from .utils.io import dump_json_string, dump_toml_string, dump_yaml_string, read_text, write_text
from .utils.paths import normalize_path

logger = logging.getLogger(__name__)

DEFAULT_CREATE_EXTENSION = ".yaml"

DATA_DUMPERS: Dict[str, Callable[[Dict[str, Any]], str]] = {
    ".json": dump_json_string,
    ".jsonc": dump_json_string,
    ".json5": dump_json_string,
    ".yaml": lambda data: dump_yaml_string(data, sort_keys=False),
    ".yml": lambda data: dump_yaml_string(data, sort_keys=False),
    ".toml": dump_toml_string,
}

EMPTY_TEMPLATES: Dict[str, str] = {
    ".json": "{}\n",
    ".jsonc": "{}\n",
    ".json5": "{}\n",
    ".yaml": "{}\n",
    ".yml": "{}\n",
    ".toml": "",
}

OnCreate = Callable[[Dict[str, str]], Union[str, bool, None]]
OnUpdate = Callable[[Dict[str, Any]], Optional[Mapping[str, Any]]]


@dataclass
class UpdateConfigResult:
    config_file: str
    created: bool = False


def _check_updatable(path: Path) -> None:
    if path.suffix not in DATA_DUMPERS:
        raise ConfigUpdateError(
            f"Unsupported config file extension: {path.suffix or '<none>'} ({path}) "
            f"(supported: {', '.join(DATA_EXTENSIONS)})",
            context={"config_file": str(path), "supported": list(DATA_EXTENSIONS)},
        )


def update_config(
    cwd: Union[str, Path],
    config_file: str,
    *,
    create_extension: str = DEFAULT_CREATE_EXTENSION,
    on_create: Optional[OnCreate] = None,
    on_update: Optional[OnUpdate] = None,
) -> UpdateConfigResult:
    """Update the main config file, creating it when missing.

    ``on_create`` receives ``{"config_file": <path>}`` and returns a template
    string, True for the empty template, or False to abort. ``on_update``
    edits the parsed mapping in place or returns a replacement.

    Raises:
        ConfigUpdateError: Creation aborted, or the file is not a data format
        ConfigLoadError: The existing file failed to parse
    """
    base = Path(cwd).expanduser().resolve()
    path = locate_config_file(base, config_file)
    created = False

    if path is None:
        path = base / f"{config_file}{create_extension}"
        _check_updatable(path)
        outcome = on_create({"config_file": normalize_path(path) or ""}) if on_create else True
        if outcome is None:
            outcome = True
        if not outcome:
            raise ConfigUpdateError(
                "Config file creation aborted.",
                context={"config_file": str(path)},
            )
        write_text(path, outcome if isinstance(outcome, str) else EMPTY_TEMPLATES[path.suffix])
        created = True
        logger.info("Created config file %s", path)
    else:
        _check_updatable(path)

    config = load_data_config(path) if read_text(path).strip() else {}
    if config is None:
        config = {}
    if not isinstance(config, Mapping):
        raise ConfigUpdateError(
            f"Config in {path} must be a mapping, got {type(config).__name__}",
            context={"config_file": str(path)},
        )
    config = dict(config)

    if on_update is not None:
        replaced = on_update(config)
        if isinstance(replaced, Mapping):
            config = dict(replaced)

    try:
        text = DATA_DUMPERS[path.suffix](config)
    except (TypeError, ValueError) as exc:
        raise ConfigUpdateError(
            f"Cannot write {path}: {exc}",
            context={"config_file": str(path)},
        ) from exc
    write_text(path, text)
    logger.debug("Updated config file %s", path)
    return UpdateConfigResult(config_file=normalize_path(path) or "", created=created)


__all__ = ["DEFAULT_CREATE_EXTENSION", "UpdateConfigResult", "update_config"]
