"""Local tarball fixtures for remote layer tests (no network)."""
from __future__ import annotations

import io
import tarfile
from pathlib import Path
from typing import Dict, Optional

from conflayers.core.models import RemoteOptions, RemoteTemplate


def make_tarball(dest: Path, files: Dict[str, str], *, top: str = "repo-main") -> Path:
    """Create a ``.tar.gz`` whose members live under a single ``top`` directory."""
    dest.parent.mkdir(parents=True, exist_ok=True)
    with tarfile.open(dest, "w:gz") as tar:
        for name, content in files.items():
            data = content.encode("utf-8")
            info = tarfile.TarInfo(f"{top}/{name}")
            info.size = len(data)
            tar.addfile(info, io.BytesIO(data))
    return dest


def local_provider(archives: Dict[str, Path], *, subdir: Optional[str] = None):
    """A provider mapping ``<prefix>:<name>`` to a local archive via ``file://``."""

    def provider(value: str, options: RemoteOptions) -> RemoteTemplate:
        name, _, sub = value.partition("/")
        return RemoteTemplate(
            tar=archives[name].resolve().as_uri(),
            name=name,
            subdir=sub or subdir,
        )

    return provider
