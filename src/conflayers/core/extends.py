"""Recursive ``extends`` resolution.

A config may reference base layers under its extend key(s)::

    extends:
      - ./base
      - [gh:acme/presets#v2, {meta: {name: presets}}]
      - {source: ../shared, options: {overrides: {debug: false}}}

Bases are resolved depth-first in list order. Each base is resolved relative
to the directory of the layer that references it, and its own bases follow it
directly in the returned layer list.
"""
from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Any, Dict, List, Sequence, Tuple

from .exceptions import CircularExtendsError, ExtendError, InvalidExtendEntry
from .models import ExtendOptions, LoadConfigOptions, ResolvedLayer, SourceOptions
from .resolver import resolve_layer

logger = logging.getLogger(__name__)


@dataclass
class ExtendEntry:
    """A parsed ``extends`` reference."""

    source: str
    options: SourceOptions = field(default_factory=SourceOptions)


def parse_extend_entry(raw: Any) -> ExtendEntry:
    """Normalize the accepted reference shapes into an :class:`ExtendEntry`.

    Accepted: ``"source"``, ``{"source": ..., "options": {...}}`` and
    ``[source, options]`` / ``(source, options)``.

    Raises:
        InvalidExtendEntry: For any other shape
    """
    source: Any = raw
    options: Any = None
    if isinstance(raw, Mapping) and "source" in raw:
        source, options = raw.get("source"), raw.get("options")
    elif isinstance(raw, (list, tuple)) and 1 <= len(raw) <= 2:
        source = raw[0]
        options = raw[1] if len(raw) > 1 else None

    if not isinstance(source, str) or not source:
        raise InvalidExtendEntry(
            f"Cannot extend config from `{raw!r}`",
            context={"entry": repr(raw)},
        )
    if options is not None and not isinstance(options, (Mapping, SourceOptions)):
        raise InvalidExtendEntry(
            f"Extend options for `{source}` must be a mapping",
            context={"entry": repr(raw)},
        )
    return ExtendEntry(source=source, options=SourceOptions.from_mapping(options))


def _is_source_pair(value: Any) -> bool:
    return (
        isinstance(value, tuple)
        and len(value) == 2
        and isinstance(value[0], str)
        and isinstance(value[1], (Mapping, SourceOptions))
    )


def collect_extend_entries(config: Dict[str, Any], keys: Sequence[str]) -> List[Any]:
    """Pop every extend key from ``config`` and return the raw entries, in key order.

    A list or tuple holds several entries, except a ``(source, options)`` tuple,
    which is one entry.
    """
    entries: List[Any] = []
    for key in keys:
        value = config.pop(key, None)
        if isinstance(value, (list, tuple)) and not _is_source_pair(value):
            values = list(value)
        else:
            values = [value]
        entries.extend(v for v in values if v)
    return entries


def strip_extend_keys(config: Dict[str, Any], options: LoadConfigOptions) -> Dict[str, Any]:
    """Return ``config`` without its extend keys (shallow copy)."""
    if not isinstance(options.extend, ExtendOptions):
        return dict(config)
    return {k: v for k, v in config.items() if k not in options.extend.keys}


def _layer_key(layer: ResolvedLayer, source: str, cwd: str) -> str:
    """Identity of a layer in the ancestor chain; file-less layers use cwd and source."""
    if layer.config_file:
        return str(layer.config_file)
    return f"{layer.cwd or cwd}:{layer.source or source}"


def _soft_fail(options: LoadConfigOptions, message: str, **context: Any) -> None:
    if options.strict:
        raise ExtendError(message, context=context)
    logger.warning(message)


def expand_extensions(
    config: Dict[str, Any],
    options: LoadConfigOptions,
    *,
    chain: Tuple[str, ...] = (),
) -> Tuple[Dict[str, Any], List[ResolvedLayer]]:
    """Resolve the bases of ``config``.

    Returns ``(stripped_config, layers)``: a copy of ``config`` without its
    extend keys, and every reachable base layer in depth-first order (each
    with its own extend keys stripped). ``chain`` holds the identities of the
    referencing ancestors (config file, or ``cwd:source`` without one).

    Raises:
        CircularExtendsError: When a base is already an ancestor
        ExtendError: Invalid or unresolvable entries when ``options.strict``
    """
    stripped = dict(config)
    if not isinstance(options.extend, ExtendOptions):
        return stripped, []

    layers: List[ResolvedLayer] = []
    cwd = str(options.cwd)
    for raw in collect_extend_entries(stripped, options.extend.keys):
        try:
            entry = parse_extend_entry(raw)
        except InvalidExtendEntry as exc:
            if options.strict:
                raise InvalidExtendEntry(f"{exc} in {cwd}", context={**exc.context, "cwd": cwd}) from exc
            logger.warning("%s in %s", exc, cwd)
            continue

        layer = resolve_layer(entry.source, options, entry.options)
        if layer.config is None:
            _soft_fail(
                options,
                f"Cannot extend config from `{entry.source}` in {cwd}",
                source=entry.source,
                cwd=cwd,
            )
            continue

        key = _layer_key(layer, entry.source, cwd)
        if key in chain:
            cycle = [*chain, key]
            raise CircularExtendsError(
                f"Circular extends: {' -> '.join(cycle)}",
                chain=cycle,
                context={"source": entry.source, "cwd": cwd},
            )

        child_options = replace(options, cwd=Path(layer.cwd or cwd))
        layer.config, children = expand_extensions(
            layer.config,
            child_options,
            chain=(*chain, key),
        )
        layers.append(layer)
        layers.extend(children)

    return stripped, layers


__all__ = [
    "ExtendEntry",
    "parse_extend_entry",
    "collect_extend_entries",
    "strip_extend_keys",
    "expand_extensions",
]
