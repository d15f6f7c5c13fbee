"""Remote source providers.

A provider turns the part of a URI after its scheme into a
:class:`RemoteTemplate` (archive URL + optional subdirectory). Git hosts use
the ``<owner>/<repo>[/<subdir>][#<ref>]`` syntax, e.g.
``gh:acme/presets/web#v2``. ``http://`` and ``https://`` sources point at a
``.tar.gz`` archive directly.
"""
from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Dict, List, Optional, Union

from ..exceptions import RemoteSourceError
from ..models import RemoteOptions, RemoteProvider, RemoteTemplate

DEFAULT_REF = "main"

_GIT_URI_RE = re.compile(
    r"^(?P<repo>[\w.-]+/[\w.-]+)(?P<subdir>/[^#]*)?(?:#(?P<ref>[\w./@+-]+))?$"
)


@dataclass(frozen=True)
class GitURI:
    repo: str
    ref: str = DEFAULT_REF
    subdir: Optional[str] = None

    @property
    def name(self) -> str:
        return f"{self.repo.replace('/', '-')}-{self.ref.replace('/', '-')}"


def parse_git_uri(value: str) -> GitURI:
    """Parse ``owner/repo[/subdir][#ref]``."""
    m = _GIT_URI_RE.match(value.strip())
    if not m:
        raise RemoteSourceError(
            f"Invalid remote source '{value}'. Expected <owner>/<repo>[/<subdir>][#<ref>]",
            context={"input": value},
        )
    subdir = (m.group("subdir") or "").strip("/") or None
    return GitURI(repo=m.group("repo"), ref=m.group("ref") or DEFAULT_REF, subdir=subdir)


def github_provider(value: str, options: RemoteOptions) -> RemoteTemplate:
    uri = parse_git_uri(value)
    return RemoteTemplate(
        tar=f"https://api.github.com/repos/{uri.repo}/tarball/{uri.ref}",
        name=uri.name,
        subdir=uri.subdir,
        headers={"X-GitHub-Api-Version": "2022-11-28"},
    )


def gitlab_provider(value: str, options: RemoteOptions) -> RemoteTemplate:
    uri = parse_git_uri(value)
    return RemoteTemplate(
        tar=f"https://gitlab.com/{uri.repo}/-/archive/{uri.ref}.tar.gz",
        name=uri.name,
        subdir=uri.subdir,
    )


def bitbucket_provider(value: str, options: RemoteOptions) -> RemoteTemplate:
    uri = parse_git_uri(value)
    return RemoteTemplate(
        tar=f"https://bitbucket.org/{uri.repo}/get/{uri.ref}.tar.gz",
        name=uri.name,
        subdir=uri.subdir,
    )


def http_provider(value: str, options: RemoteOptions) -> RemoteTemplate:
    name = value.rstrip("/").rsplit("/", 1)[-1] or "archive"
    for ext in (".tar.gz", ".tgz", ".tar"):
        if name.endswith(ext):
            name = name[: -len(ext)]
            break
    return RemoteTemplate(tar=value, name=name)


BUILTIN_PROVIDERS: Dict[str, RemoteProvider] = {
    "gh": github_provider,
    "github": github_provider,
    "gitlab": gitlab_provider,
    "bitbucket": bitbucket_provider,
}

HTTP_PREFIXES = ("https://", "http://")


def _providers(options: RemoteOptions) -> Dict[str, RemoteProvider]:
    return {**BUILTIN_PROVIDERS, **(options.providers or {})}


def remote_prefixes(options: Union[RemoteOptions, bool, None]) -> List[str]:
    """Every source prefix treated as remote, or none when remote is disabled."""
    if options is False:
        return []
    opts = options if isinstance(options, RemoteOptions) else RemoteOptions()
    return [f"{name}:" for name in _providers(opts)] + list(HTTP_PREFIXES)


def is_remote_source(source: str, options: Union[RemoteOptions, bool, None]) -> bool:
    return any(source.startswith(prefix) for prefix in remote_prefixes(options))


def get_template(source: str, options: RemoteOptions) -> RemoteTemplate:
    """Resolve ``source`` to download instructions via its provider."""
    for name, provider in _providers(options).items():
        prefix = f"{name}:"
        if source.startswith(prefix):
            return provider(source[len(prefix):], options)
    if source.startswith(HTTP_PREFIXES):
        return http_provider(source, options)
    raise RemoteSourceError(
        f"No remote provider for source '{source}'",
        context={"source": source, "providers": sorted(_providers(options))},
    )


__all__ = [
    "DEFAULT_REF",
    "GitURI",
    "parse_git_uri",
    "github_provider",
    "gitlab_provider",
    "bitbucket_provider",
    "http_provider",
    "BUILTIN_PROVIDERS",
    "remote_prefixes",
    "is_remote_source",
    "get_template",
]
