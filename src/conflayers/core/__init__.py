"""conflayers core library.

Module map (leaf-first):
- locator: config file discovery in a directory and its ``.config/``
- formats: per-extension file loaders
- env_overlay: ``$<env>`` / ``$env`` sections
- remote: git-hosted and archive layers
- resolver: one source reference -> one layer
- extends: recursive ``extends`` resolution
- loader: ``load_config``, the aggregating entry point
- watch: live reload on file changes
"""
from . import exceptions  # noqa: F401

__all__ = ["exceptions"]
