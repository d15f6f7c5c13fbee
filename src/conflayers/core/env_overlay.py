"""Environment-specific config overlays.

A layer may carry per-environment sections in two forms::

    {"$production": {...}, "$env": {"production": {...}}}

For the selected environment both sections are combined (the ``$env`` form
wins on overlapping keys) and merged over the layer. The sections themselves
are left in place; ``omit_dollar_keys`` removes them from the final config.
"""
from __future__ import annotations

from typing import Any, Dict, Mapping, Optional, Union

from .utils.merge import Merger, merge

ENV_KEY = "$env"


def build_env_overlay(config: Mapping[str, Any], env_name: str) -> Dict[str, Any]:
    """Return the shallow overlay for ``env_name`` (possibly empty)."""
    overlay: Dict[str, Any] = {}
    direct = config.get(f"${env_name}")
    if isinstance(direct, Mapping):
        overlay.update(direct)
    env_sections = config.get(ENV_KEY)
    if isinstance(env_sections, Mapping):
        nested = env_sections.get(env_name)
        if isinstance(nested, Mapping):
            overlay.update(nested)
    return overlay


def apply_env_overlay(
    config: Dict[str, Any],
    env_name: Union[str, bool, None],
    merger: Optional[Merger] = None,
) -> Dict[str, Any]:
    """Merge the overlay for ``env_name`` over ``config``.

    A falsy ``env_name`` disables the step; an empty overlay returns
    ``config`` unchanged.
    """
    if not env_name or not isinstance(config, Mapping):
        return config
    overlay = build_env_overlay(config, str(env_name))
    if not overlay:
        return config
    return (merger or merge)(overlay, config)


__all__ = ["ENV_KEY", "build_env_overlay", "apply_env_overlay"]
