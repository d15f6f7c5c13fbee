"""Layered config loading.

Sources, highest precedence first:

1. ``overrides`` (option)
2. Main config file (``<cwd>/<config_file>.<ext>`` or under ``.config/``)
3. RC files (``<cwd>/.<name>rc``; with ``global_rc`` also the workspace root
   and the user's home)
4. ``pyproject.toml`` ``[tool.<name>]`` (with ``package_json``)
5. ``default_config`` (option)
6. Layers reached through ``extends``, depth-first
7. ``defaults`` (option)

Example:
    >>> resolved = load_config(cwd="/srv/app", name="app", dotenv=True)
    >>> resolved.config["database"]["host"]
    >>> [layer.config_file for layer in resolved.layers]
"""
from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import replace
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional, Union

from .dotenv import DotenvOptions, setup_dotenv
from .exceptions import ConfigNotFoundError, ConfigValidationError
from .extends import expand_extensions, strip_extend_keys
from .manifest import MANIFEST_FILE, find_manifest, manifest_fields, read_manifest_fields
from .models import (
    CONFIG_SOURCES,
    ExtendOptions,
    LoadConfigOptions,
    ResolvableConfigContext,
    ResolvedConfig,
    ResolvedLayer,
)
from .rc import read_rc, read_user_rc
from .resolver import resolve_layer
from .utils.paths import find_workspace_root, normalize_path
from .validation import validate_config

logger = logging.getLogger(__name__)


def coerce_options(
    options: Union[LoadConfigOptions, Mapping[str, Any], None],
    kwargs: Dict[str, Any],
) -> LoadConfigOptions:
    """Build :class:`LoadConfigOptions` from an instance or mapping plus keyword overrides."""
    if options is None:
        return LoadConfigOptions(**kwargs)
    if isinstance(options, LoadConfigOptions):
        return replace(options, **kwargs) if kwargs else options
    return LoadConfigOptions(**{**dict(options), **kwargs})


def dotenv_options(value: Any, cwd: Path) -> DotenvOptions:
    if isinstance(value, DotenvOptions):
        return value if value.cwd is not None else replace(value, cwd=cwd)
    if isinstance(value, Mapping):
        return DotenvOptions(**{"cwd": cwd, **value})
    return DotenvOptions(cwd=cwd)


def _load_rc(options: LoadConfigOptions, cwd: Path) -> Dict[str, Any]:
    rc_file = str(options.rc_file)
    sources = [read_rc(rc_file, cwd)]
    if options.global_rc:
        workspace = find_workspace_root(cwd)
        if workspace is not None:
            sources.append(read_rc(rc_file, workspace))
        sources.append(read_user_rc(rc_file))
    return options.get_merger()({}, *sources)


def _config_or_none(value: Any) -> Optional[Dict[str, Any]]:
    return dict(value) if isinstance(value, Mapping) else None


def load_config(
    options: Union[LoadConfigOptions, Mapping[str, Any], None] = None,
    **kwargs: Any,
) -> ResolvedConfig:
    """Discover, resolve and merge every config source for a project.

    Keyword arguments map onto :class:`LoadConfigOptions` fields and take
    precedence over ``options``.

    Raises:
        ConfigNotFoundError: No main config file and ``config_file_required``
        ConfigLoadError: A config file failed to parse or evaluate
        ExtendError: Unresolvable ``extends`` entries in strict mode
        CircularExtendsError: A layer extends itself
        RemoteSourceError: A remote layer could not be fetched
        ConfigValidationError: ``schema`` / ``validate`` rejected the result
    """
    opts = coerce_options(options, kwargs).normalized()
    merger = opts.get_merger()
    cwd = Path(str(opts.cwd))

    resolved = ResolvedConfig(
        config={},
        cwd=normalize_path(cwd) or "",
        config_file=normalize_path(cwd / str(opts.config_file)) or "",
        layers=[],
    )

    raw_configs: Dict[str, Any] = {
        "overrides": opts.overrides,
        "main": None,
        "rc": None,
        "package_json": None,
        "default_config": opts.default_config,
    }

    if opts.dotenv:
        setup_dotenv(dotenv_options(opts.dotenv, cwd))

    main_layer = resolve_layer(".", opts)
    if main_layer.config_file:
        raw_configs["main"] = main_layer.config
        resolved.config_file = main_layer.config_file
    elif opts.config_file_required:
        raise ConfigNotFoundError(
            f"Required config file `{opts.config_file}` not found in {cwd}",
            context={"config_file": str(opts.config_file), "cwd": str(cwd)},
        )

    if opts.rc_file:
        raw_configs["rc"] = _load_rc(opts, cwd)

    manifest_path: Optional[Path] = None
    if opts.package_json:
        manifest_path = find_manifest(cwd)
        values = read_manifest_fields(manifest_path, manifest_fields(opts.package_json, opts.name))
        raw_configs["package_json"] = merger({}, *values)

    configs: Dict[str, Optional[Dict[str, Any]]] = {}
    context = ResolvableConfigContext(configs=configs, raw_configs=raw_configs)
    for key in CONFIG_SOURCES:
        value = raw_configs[key]
        configs[key] = _config_or_none(value(context) if callable(value) else value)

    combined = merger(*(configs[key] for key in CONFIG_SOURCES))

    extension_layers: List[ResolvedLayer] = []
    if isinstance(opts.extend, ExtendOptions):
        chain = (main_layer.config_file,) if main_layer.config_file else ()
        combined, extension_layers = expand_extensions(combined, opts, chain=chain)
        config = merger(combined, *(layer.config for layer in extension_layers))
    else:
        config = combined

    base_layers = [
        ResolvedLayer(config=configs["overrides"]),
        ResolvedLayer(
            config=configs["main"],
            config_file=main_layer.config_file,
            cwd=normalize_path(cwd),
            source=main_layer.source,
            meta=main_layer.meta,
        ),
        ResolvedLayer(config=configs["rc"], config_file=str(opts.rc_file) if opts.rc_file else None),
        ResolvedLayer(
            config=configs["package_json"],
            config_file=normalize_path(manifest_path) if manifest_path else MANIFEST_FILE,
        ),
        ResolvedLayer(config=configs["default_config"]),
    ]
    for layer in base_layers:
        if layer.config:
            layer.config = strip_extend_keys(layer.config, opts)
    resolved.layers = [layer for layer in base_layers if layer.config] + extension_layers

    if opts.defaults:
        defaults = dict(opts.defaults)
        config = merger(config, defaults)
        resolved.layers.append(ResolvedLayer(config=defaults))

    if opts.omit_dollar_keys:
        config = {key: value for key, value in config.items() if not key.startswith("$")}

    resolved.config = config
    logger.debug("Loaded config from %d layer(s) in %s", len(resolved.layers), cwd)

    if opts.schema is not None:
        validate_config(opts.schema, resolved.config)
    if opts.validate is not None:
        _run_validate_hook(opts.validate, resolved)

    return resolved


def _run_validate_hook(validate: Callable[..., Any], resolved: ResolvedConfig) -> None:
    outcome = validate(resolved.config, resolved)
    if outcome is False:
        raise ConfigValidationError(
            "Config rejected by validate hook",
            context={"cwd": resolved.cwd, "config_file": resolved.config_file},
        )
    if isinstance(outcome, (list, tuple)) and outcome:
        issues = [
            issue if isinstance(issue, Mapping) else {"path": "", "message": str(issue)}
            for issue in outcome
        ]
        raise ConfigValidationError(
            "Config validation failed:\n" + "\n".join(f"- {i.get('message')}" for i in issues),
            issues=[dict(i) for i in issues],
            context={"cwd": resolved.cwd, "config_file": resolved.config_file},
        )


__all__ = ["coerce_options", "dotenv_options", "load_config"]
