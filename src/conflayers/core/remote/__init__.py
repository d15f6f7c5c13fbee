"""Remote (git-hosted) config layers.

Key components:
- providers: URI scheme → archive URL (gh:, github:, gitlab:, bitbucket:, http(s)://, custom)
- cache: deterministic cache directory per URI
- fetch: download, extraction and optional dependency install
"""
from __future__ import annotations

from .cache import get_cache_dir, get_cache_key
from .fetch import download_template, extract_archive, resolve_remote_source
from .providers import get_template, is_remote_source, parse_git_uri, remote_prefixes

__all__ = [
    "get_cache_dir",
    "get_cache_key",
    "download_template",
    "extract_archive",
    "resolve_remote_source",
    "get_template",
    "is_remote_source",
    "parse_git_uri",
    "remote_prefixes",
]
