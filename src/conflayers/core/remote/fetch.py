"""Remote layer download, extraction and dependency install."""
from __future__ import annotations

import logging
import os
import shutil
import subprocess
import sys
import tarfile
import tempfile
from pathlib import Path, PurePosixPath
from typing import Dict, Optional
from urllib.error import URLError
from urllib.request import Request, urlopen

from ..exceptions import RemoteSourceError
from ..models import RemoteOptions, RemoteTemplate, SourceOptions
from .cache import get_cache_dir
from .providers import get_template
from .redaction import redact_text_credentials, redact_url_credentials

logger = logging.getLogger(__name__)

AUTH_ENV = "CONFLAYERS_AUTH"
REQUIREMENTS_FILE = "requirements.txt"


def _request_headers(template: RemoteTemplate, options: RemoteOptions, auth: Optional[str]) -> Dict[str, str]:
    headers = {"User-Agent": "conflayers", **options.headers, **template.headers}
    if auth:
        headers["Authorization"] = f"Bearer {auth}"
    return headers


def _member_target(member_name: str, subdir: Optional[str]) -> Optional[PurePosixPath]:
    """Map an archive member to its path inside the target directory.

    The archive's top-level directory is stripped; with ``subdir`` only members
    below it are kept. Unsafe paths map to None.
    """
    parts = PurePosixPath(member_name).parts
    if len(parts) <= 1:
        return None
    rel = PurePosixPath(*parts[1:])
    if subdir:
        try:
            rel = rel.relative_to(subdir)
        except ValueError:
            return None
        if rel == PurePosixPath("."):
            return None
    if rel.is_absolute() or ".." in rel.parts:
        return None
    return rel


def extract_archive(archive: Path, target_dir: Path, *, subdir: Optional[str] = None) -> None:
    """Extract regular files and directories of ``archive`` into ``target_dir``."""
    with tarfile.open(archive, "r:*") as tar:
        for member in tar.getmembers():
            rel = _member_target(member.name, subdir)
            if rel is None:
                continue
            dest = target_dir.joinpath(*rel.parts)
            if member.isdir():
                dest.mkdir(parents=True, exist_ok=True)
                continue
            if not member.isfile():
                # Links and special files are never materialized.
                continue
            extracted = tar.extractfile(member)
            if extracted is None:
                continue
            dest.parent.mkdir(parents=True, exist_ok=True)
            with extracted, open(dest, "wb") as fh:
                shutil.copyfileobj(extracted, fh)


def download_template(
    template: RemoteTemplate,
    target_dir: Path,
    *,
    options: RemoteOptions,
    auth: Optional[str] = None,
) -> Path:
    """Download ``template`` and extract it into ``target_dir``.

    Raises:
        RemoteSourceError: On network, HTTP or archive errors
    """
    safe_url = redact_url_credentials(template.tar)
    target_dir.mkdir(parents=True, exist_ok=True)
    request = Request(template.tar, headers=_request_headers(template, options, auth))

    logger.debug("Downloading %s into %s", safe_url, target_dir)
    with tempfile.TemporaryDirectory(prefix="conflayers-") as tmp:
        archive = Path(tmp) / "archive.tar.gz"
        try:
            with urlopen(request, timeout=options.timeout) as response, open(archive, "wb") as fh:
                shutil.copyfileobj(response, fh)
            extract_archive(archive, target_dir, subdir=template.subdir)
        except (URLError, OSError, tarfile.TarError) as exc:
            raise RemoteSourceError(
                f"Failed to download {safe_url}: {redact_text_credentials(str(exc), auth)}",
                context={"url": safe_url, "dir": str(target_dir)},
            ) from exc
    return target_dir


def install_dependencies(directory: Path) -> None:
    """Install a downloaded layer's Python requirements, when it declares any."""
    requirements = directory / REQUIREMENTS_FILE
    if not requirements.is_file():
        return
    args = [sys.executable, "-m", "pip", "install", "-r", str(requirements)]
    logger.info("Installing dependencies for %s", directory)
    try:
        subprocess.run(args, cwd=directory, capture_output=True, text=True, check=True)
    except (subprocess.CalledProcessError, OSError) as exc:
        output = getattr(exc, "stderr", None) or getattr(exc, "stdout", None) or str(exc)
        raise RemoteSourceError(
            f"Dependency install failed in {directory}\n{redact_text_credentials(output)}",
            context={"dir": str(directory)},
        ) from exc


def resolve_remote_source(
    source: str,
    cwd: Path,
    options: RemoteOptions,
    source_options: Optional[SourceOptions] = None,
) -> Path:
    """Ensure a local copy of remote ``source`` exists and return its directory.

    Without ``install`` an existing copy is removed and downloaded again; with
    ``install`` the existing directory is reused and dependencies installed.
    """
    source_options = source_options or SourceOptions()
    effective = options.with_overrides(source_options.remote)
    install = source_options.install or effective.install
    auth = source_options.auth or effective.auth or os.environ.get(AUTH_ENV)

    template = get_template(source, effective)
    clone_dir = get_cache_dir(source, cwd)

    if clone_dir.exists() and not install:
        shutil.rmtree(clone_dir)

    try:
        download_template(template, clone_dir, options=effective, auth=auth)
    except RemoteSourceError as exc:
        raise RemoteSourceError(
            f"Cannot fetch remote layer `{redact_url_credentials(source)}` in {cwd}: {exc}",
            context={"source": redact_url_credentials(source), "cwd": str(cwd), **exc.context},
        ) from exc

    if install:
        install_dependencies(clone_dir)
    return clone_dir


__all__ = [
    "AUTH_ENV",
    "extract_archive",
    "download_template",
    "install_dependencies",
    "resolve_remote_source",
]
