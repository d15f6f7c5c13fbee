"""Data models for config layers and loader options."""
from __future__ import annotations

import os
from dataclasses import dataclass, field, fields, replace
from pathlib import Path
from typing import TYPE_CHECKING, Any, Callable, Dict, List, Mapping, Optional, Union

from .utils.merge import Merger, merge

if TYPE_CHECKING:
    from .dotenv import DotenvOptions

ENV_NAME_VAR = "PYTHON_ENV"
DEFAULT_NAME = "config"
DEFAULT_EXTEND_KEY = "extends"

ConfigSource = str  # "overrides" | "main" | "rc" | "package_json" | "default_config"
CONFIG_SOURCES = ("overrides", "main", "rc", "package_json", "default_config")


@dataclass
class SourceOptions:
    """Per-reference options attached to an ``extends`` entry."""

    meta: Dict[str, Any] = field(default_factory=dict)
    overrides: Optional[Dict[str, Any]] = None
    remote: Dict[str, Any] = field(default_factory=dict)
    install: bool = False
    auth: Optional[str] = None
    extra: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_mapping(cls, raw: Optional[Mapping[str, Any]]) -> "SourceOptions":
        if isinstance(raw, SourceOptions):
            return raw
        data = dict(raw or {})
        known = {f.name for f in fields(cls)} - {"extra"}
        kwargs = {k: data.pop(k) for k in list(data) if k in known}
        kwargs["meta"] = dict(kwargs.get("meta") or {})
        kwargs["remote"] = dict(kwargs.get("remote") or {})
        kwargs["install"] = bool(kwargs.get("install", False))
        return cls(**kwargs, extra=data)

    def to_dict(self) -> Dict[str, Any]:
        out: Dict[str, Any] = dict(self.extra)
        if self.meta:
            out["meta"] = dict(self.meta)
        if self.overrides:
            out["overrides"] = dict(self.overrides)
        if self.remote:
            out["remote"] = dict(self.remote)
        if self.install:
            out["install"] = True
        if self.auth:
            out["auth"] = self.auth
        return out


@dataclass
class ResolvedLayer:
    """One resolved configuration source."""

    config: Optional[Dict[str, Any]] = None
    config_file: Optional[str] = None
    cwd: Optional[str] = None
    source: Optional[str] = None
    source_options: SourceOptions = field(default_factory=SourceOptions)
    meta: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def coerce(cls, value: Union["ResolvedLayer", Mapping[str, Any]]) -> "ResolvedLayer":
        """Build a layer from a custom resolver's return value."""
        if isinstance(value, ResolvedLayer):
            return value
        data = dict(value)
        config = data.get("config")
        return cls(
            config=dict(config) if isinstance(config, Mapping) else None,
            config_file=data.get("config_file"),
            cwd=data.get("cwd"),
            source=data.get("source"),
            source_options=SourceOptions.from_mapping(data.get("source_options")),
            meta=dict(data.get("meta") or {}),
        )

    def to_dict(self) -> Dict[str, Any]:
        out: Dict[str, Any] = {"config": self.config}
        for key in ("config_file", "cwd", "source"):
            value = getattr(self, key)
            if value is not None:
                out[key] = value
        if self.meta:
            out["meta"] = dict(self.meta)
        options = self.source_options.to_dict()
        if options:
            out["source_options"] = options
        return out


@dataclass
class ResolvedConfig:
    """Fully merged config plus the layers it was built from (highest first)."""

    config: Dict[str, Any]
    cwd: str
    config_file: str
    layers: List[ResolvedLayer] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "config": self.config,
            "cwd": self.cwd,
            "config_file": self.config_file,
            "layers": [layer.to_dict() for layer in self.layers],
        }


@dataclass
class ResolvableConfigContext:
    """Context handed to callable ``overrides`` / ``default_config`` values."""

    configs: Dict[ConfigSource, Optional[Dict[str, Any]]] = field(default_factory=dict)
    raw_configs: Dict[ConfigSource, Any] = field(default_factory=dict)


ResolvableConfig = Union[
    None,
    Mapping[str, Any],
    Callable[[ResolvableConfigContext], Optional[Mapping[str, Any]]],
]


@dataclass
class ExtendOptions:
    """Which field(s) trigger recursive extension, checked in order."""

    extend_key: Union[str, List[str]] = DEFAULT_EXTEND_KEY

    @property
    def keys(self) -> List[str]:
        if isinstance(self.extend_key, str):
            return [self.extend_key]
        return [str(k) for k in self.extend_key]


@dataclass
class RemoteTemplate:
    """Download instructions produced by a remote provider."""

    tar: str
    name: str = ""
    subdir: Optional[str] = None
    headers: Dict[str, str] = field(default_factory=dict)


RemoteProvider = Callable[[str, "RemoteOptions"], RemoteTemplate]


@dataclass
class RemoteOptions:
    """Options for downloading remote (git-hosted) layers."""

    providers: Dict[str, RemoteProvider] = field(default_factory=dict)
    auth: Optional[str] = None
    headers: Dict[str, str] = field(default_factory=dict)
    timeout: float = 60.0
    install: bool = False

    def with_overrides(self, overrides: Mapping[str, Any]) -> "RemoteOptions":
        known = {f.name for f in fields(self)}
        return replace(self, **{k: v for k, v in overrides.items() if k in known})


@dataclass
class LoadConfigOptions:
    """Input options for :func:`conflayers.load_config`."""

    cwd: Optional[Union[str, Path]] = None
    name: str = DEFAULT_NAME
    config_file: Optional[str] = None
    rc_file: Union[str, bool, None] = None
    global_rc: bool = False
    dotenv: Union[bool, "DotenvOptions"] = False
    env_name: Union[str, bool, None] = None
    package_json: Union[bool, str, List[str]] = False
    defaults: Optional[Mapping[str, Any]] = None
    default_config: ResolvableConfig = None
    overrides: ResolvableConfig = None
    omit_dollar_keys: bool = False
    context: Optional[Mapping[str, Any]] = None
    resolve: Optional[
        Callable[[str, "LoadConfigOptions"], Union[None, ResolvedLayer, Mapping[str, Any]]]
    ] = None
    remote: Union[RemoteOptions, bool, None] = None
    merger: Optional[Merger] = None
    extend: Union[ExtendOptions, bool, None] = None
    config_file_required: bool = False
    schema: Optional[Mapping[str, Any]] = None
    validate: Optional[Callable[[Optional[Mapping[str, Any]], ResolvedConfig], Any]] = None
    strict: bool = False

    def normalized(self) -> "LoadConfigOptions":
        """Return a copy with every derived default filled in."""
        name = self.name or DEFAULT_NAME
        cwd = Path(self.cwd or os.getcwd()).expanduser().resolve()

        config_file = self.config_file
        if config_file is None:
            config_file = DEFAULT_NAME if name == DEFAULT_NAME else f"{name}.config"

        rc_file = self.rc_file
        if rc_file is None or rc_file is True:
            rc_file = f".{name}rc"

        env_name = self.env_name
        if env_name is None or env_name is True:
            env_name = os.environ.get(ENV_NAME_VAR) or False

        extend = self.extend
        if extend is None or extend is True:
            extend = ExtendOptions()
        elif isinstance(extend, Mapping):
            extend = ExtendOptions(**extend)

        remote = self.remote
        if remote is None or remote is True:
            remote = RemoteOptions()
        elif isinstance(remote, Mapping):
            remote = RemoteOptions(**remote)

        return replace(
            self,
            cwd=cwd,
            name=name,
            config_file=config_file,
            rc_file=rc_file,
            env_name=env_name,
            extend=extend,
            remote=remote,
        )

    def get_merger(self) -> Merger:
        return self.merger or merge


__all__ = [
    "ENV_NAME_VAR",
    "CONFIG_SOURCES",
    "SourceOptions",
    "ResolvedLayer",
    "ResolvedConfig",
    "ResolvableConfigContext",
    "ResolvableConfig",
    "ExtendOptions",
    "RemoteTemplate",
    "RemoteProvider",
    "RemoteOptions",
    "LoadConfigOptions",
]
