"""Redaction helpers for remote source URIs and error output.

Prevents accidental credential leakage when users provide credential-bearing
URLs (e.g., https://token@host/archive.tar.gz) or auth tokens.
"""
from __future__ import annotations

import re
from urllib.parse import urlsplit, urlunsplit

_SCHEME_CRED_RE = re.compile(r"([a-zA-Z][a-zA-Z0-9+.-]*://)([^\s/@]+(:[^\s/@]*)?@)")


def redact_url_credentials(url: str) -> str:
    """Return a URL with any embedded credentials removed."""
    raw = str(url)
    if "://" not in raw:
        return raw
    parts = urlsplit(raw)
    if parts.username is None and parts.password is None:
        return raw
    host = parts.hostname or ""
    port = f":{parts.port}" if parts.port else ""
    return urlunsplit((parts.scheme, f"{host}{port}", parts.path, parts.query, parts.fragment))


def redact_text_credentials(text: str, *secrets: str | None) -> str:
    """Redact credential-bearing URL fragments and known secrets from text."""
    s = _SCHEME_CRED_RE.sub(r"\1<redacted>@", str(text))
    for secret in secrets:
        if secret:
            s = s.replace(secret, "<redacted>")
    return s


__all__ = ["redact_url_credentials", "redact_text_credentials"]
