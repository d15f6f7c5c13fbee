from __future__ import annotations

from typing import Any, Dict, List, Mapping, Optional


class ConfLayersError(Exception):
    """Base exception for conflayers."""

    context: Dict[str, Any]

    def __init__(self, message: str = "", *, context: Mapping[str, Any] | None = None) -> None:
        super().__init__(message)
        if context is not None:
            # Store a shallow copy to avoid accidental mutation.
            self.context = dict(context)
        else:
            self.context = {}

    def to_json_error(self) -> Dict[str, Any]:
        """Return a JSON-serializable error payload."""
        return {
            "message": str(self),
            "code": self.__class__.__name__,
            "context": self.context,
        }


class ConfigNotFoundError(ConfLayersError, FileNotFoundError):
    """Raised when a required main config file cannot be found."""

    def __init__(self, message: str = "", *, context: Mapping[str, Any] | None = None) -> None:
        ConfLayersError.__init__(self, message, context=context)
        FileNotFoundError.__init__(self, message)


class ConfigLoadError(ConfLayersError):
    """Raised when a config file cannot be parsed or evaluated."""


class ConfigUpdateError(ConfigLoadError):
    """Raised when a config file cannot be created or rewritten."""


class ExtendError(ConfLayersError):
    """Raised for invalid or unresolvable ``extends`` entries in strict mode."""


class InvalidExtendEntry(ExtendError):
    """Raised when an ``extends`` entry has an unsupported shape."""


class CircularExtendsError(ExtendError):
    """Raised when a layer extends itself directly or through its bases."""

    def __init__(
        self,
        message: str,
        *,
        chain: Optional[List[str]] = None,
        context: Mapping[str, Any] | None = None,
    ) -> None:
        ctx = dict(context or {})
        if chain:
            ctx["chain"] = list(chain)
        super().__init__(message, context=ctx)
        self.chain = list(chain or [])


class RemoteSourceError(ConfLayersError):
    """Raised when a remote layer cannot be downloaded, extracted or installed."""


class ConfigValidationError(ConfLayersError, ValueError):
    """Raised when the resolved config is rejected by a schema or validator."""

    def __init__(
        self,
        message: str = "",
        *,
        issues: Optional[List[Dict[str, Any]]] = None,
        context: Mapping[str, Any] | None = None,
    ) -> None:
        ctx = dict(context or {})
        if issues:
            ctx["issues"] = list(issues)
        ConfLayersError.__init__(self, message, context=ctx)
        ValueError.__init__(self, message)
        self.issues = list(issues or [])


__all__ = [
    "ConfLayersError",
    "ConfigNotFoundError",
    "ConfigLoadError",
    "ConfigUpdateError",
    "ExtendError",
    "InvalidExtendEntry",
    "CircularExtendsError",
    "RemoteSourceError",
    "ConfigValidationError",
]
