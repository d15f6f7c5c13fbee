"""Single-layer resolution.

Turns one source reference (``"."``, ``"./base"``, ``"../shared/app.config.yaml"``,
an importable package name or a remote URI) into a :class:`ResolvedLayer`:
locate the file, load it, apply the environment overlay, extract ``$meta``
and merge per-reference overrides.
"""
from __future__ import annotations

import importlib.util
import inspect
import logging
import re
from collections.abc import Mapping
from pathlib import Path
from typing import Any, Dict, Optional

from .env_overlay import apply_env_overlay
from .exceptions import ConfigLoadError
from .formats import load_config_file
from .locator import locate_config_file
from .models import LoadConfigOptions, ResolvedLayer, RemoteOptions, SourceOptions
from .remote import is_remote_source, resolve_remote_source
from .utils.merge import merge
from .utils.paths import normalize_path

logger = logging.getLogger(__name__)

META_KEY = "$meta"

# Importable dotted module name, optionally followed by "/sub/path".
PACKAGE_SOURCE_RE = re.compile(r"^(?P<module>[A-Za-z_]\w*(?:\.[A-Za-z_]\w*)*)(?P<subpath>/.*)?$")


def resolve_package_source(source: str) -> Optional[str]:
    """Resolve ``pkg[.mod][/subpath]`` to a filesystem path via the import system."""
    m = PACKAGE_SOURCE_RE.match(source)
    if not m:
        return None
    try:
        spec = importlib.util.find_spec(m.group("module"))
    except (ImportError, ValueError):
        return None
    if spec is None:
        return None

    if spec.submodule_search_locations:
        base = Path(list(spec.submodule_search_locations)[0])
    elif spec.origin and spec.has_location:
        base = Path(spec.origin)
    else:
        return None

    subpath = (m.group("subpath") or "").strip("/")
    if subpath:
        base = (base if base.is_dir() else base.parent) / subpath
    return str(base)


def _call_config(value: Any, options: LoadConfigOptions) -> Any:
    if not callable(value):
        return value
    try:
        params = inspect.signature(value).parameters
    except (TypeError, ValueError):
        return value()
    if params:
        return value(dict(options.context or {}))
    return value()


def _is_directory_source(source: str, cwd: Path) -> bool:
    path = Path(source)
    ext = path.suffix
    return not ext or ext == path.name or (cwd / path).is_dir()


def resolve_layer(
    source: str,
    options: LoadConfigOptions,
    source_options: Optional[SourceOptions] = None,
) -> ResolvedLayer:
    """Resolve ``source`` relative to ``options.cwd`` into a single layer.

    ``options`` must be normalized. A missing file yields a layer whose
    ``config`` is None; load and fetch failures propagate.
    """
    source_options = source_options or SourceOptions()
    reference = source

    if options.resolve is not None:
        custom = options.resolve(source, options)
        if custom is not None:
            return ResolvedLayer.coerce(custom)

    base_cwd = Path(options.cwd or ".")
    merger = options.get_merger()

    if isinstance(options.remote, RemoteOptions) and is_remote_source(source, options.remote):
        source = str(resolve_remote_source(source, base_cwd, options.remote, source_options))
    elif not (base_cwd / source).exists():
        source = resolve_package_source(source) or source

    if _is_directory_source(source, base_cwd):
        cwd = (base_cwd / source).resolve()
        source = str(options.config_file)
    else:
        target = (base_cwd / source).resolve()
        cwd = target.parent
        source = target.name

    layer = ResolvedLayer(
        cwd=normalize_path(cwd),
        source=normalize_path(source),
        source_options=source_options,
    )

    config_file = locate_config_file(cwd, source)
    if config_file is None:
        logger.debug("No config file for %s in %s", source, cwd)
        return layer

    try:
        loaded = load_config_file(config_file)
    except ConfigLoadError as exc:
        raise ConfigLoadError(
            f"{exc} (source `{reference}` in {base_cwd})",
            context={**exc.context, "source": reference, "cwd": str(base_cwd)},
        ) from exc
    config = _call_config(loaded, options)
    if config is None:
        config = {}
    if not isinstance(config, Mapping):
        raise ConfigLoadError(
            f"Config in {config_file} must be a mapping, got {type(config).__name__}",
            context={"config_file": str(config_file), "source": reference, "cwd": str(base_cwd)},
        )
    config = dict(config)

    config = apply_env_overlay(config, options.env_name, merger)

    meta: Dict[str, Any] = merge(source_options.meta, config.pop(META_KEY, None))

    if source_options.overrides:
        config = merger(source_options.overrides, config)

    layer.config = config
    layer.config_file = normalize_path(config_file)
    layer.meta = meta
    logger.debug("Resolved layer %s from %s", layer.source, layer.config_file)
    return layer


__all__ = ["META_KEY", "resolve_package_source", "resolve_layer"]
