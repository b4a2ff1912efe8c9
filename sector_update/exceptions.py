"""Exception hierarchy for sector package updates.

Every failure that aborts an entry is an ``UpdaterError`` carrying an
``ErrorContext`` so the pipeline can log and summarise it uniformly.
"""
from __future__ import annotations

import time
from dataclasses import dataclass, field
from typing import Any, Dict, Optional


@dataclass
class ErrorContext:
    """Structured information attached to an error."""
    fir: Optional[str] = None
    operation: Optional[str] = None
    file_path: Optional[str] = None
    url: Optional[str] = None
    timestamp: float = field(default_factory=time.time)
    metadata: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for logging."""
        return {
            "fir": self.fir,
            "operation": self.operation,
            "file_path": self.file_path,
            "url": self.url,
            "timestamp": self.timestamp,
            "metadata": self.metadata,
        }


class UpdaterError(Exception):
    """Base exception for all updater errors."""

    def __init__(
        self,
        message: str,
        *,
        context: Optional[ErrorContext] = None,
        cause: Optional[Exception] = None,
    ):
        super().__init__(message)
        self.message = message
        self.context = context or ErrorContext()
        self.cause = cause

        if cause:
            self.__cause__ = cause

    def __str__(self) -> str:
        parts = [self.message]

        if self.context.fir:
            parts.append(f"[fir: {self.context.fir}]")

        if self.context.operation:
            parts.append(f"[operation: {self.context.operation}]")

        return " ".join(parts)

    def to_dict(self) -> Dict[str, Any]:
        """Convert error to dictionary for structured logging."""
        return {
            "error_type": self.__class__.__name__,
            "message": self.message,
            "context": self.context.to_dict(),
            "cause": str(self.cause) if self.cause else None,
        }


class ConfigurationError(UpdaterError):
    """The entries or settings file is missing or invalid."""

    def __init__(
        self,
        message: str,
        *,
        config_file: Optional[str] = None,
        config_key: Optional[str] = None,
        **kwargs,
    ):
        context = kwargs.pop("context", None) or ErrorContext(operation="load_config")
        context.file_path = config_file
        if config_key:
            context.metadata["config_key"] = config_key

        super().__init__(message, context=context, **kwargs)

        self.config_file = config_file
        self.config_key = config_key


class DownloadError(UpdaterError):
    """Network or HTTP failure while fetching the listing page or archive."""

    def __init__(
        self,
        message: str,
        *,
        url: Optional[str] = None,
        status_code: Optional[int] = None,
        **kwargs,
    ):
        context = kwargs.pop("context", None) or ErrorContext(operation="download")
        context.url = url
        if status_code:
            context.metadata["status_code"] = status_code

        super().__init__(message, context=context, **kwargs)

        self.url = url
        self.status_code = status_code


class ExtractError(UpdaterError):
    """The downloaded archive is corrupt or lacks the expected content."""

    def __init__(self, message: str, *, file_path: Optional[str] = None, **kwargs):
        context = kwargs.pop("context", None) or ErrorContext(operation="extract")
        context.file_path = file_path

        super().__init__(message, context=context, **kwargs)

        self.file_path = file_path


class LinkNotFound(UpdaterError):
    """No link on the listing page matches the package name."""

    def __init__(self, message: str, *, package_name: Optional[str] = None, **kwargs):
        context = kwargs.pop("context", None) or ErrorContext(operation="find_link")
        if package_name:
            context.metadata["package_name"] = package_name

        super().__init__(message, context=context, **kwargs)

        self.package_name = package_name


class NoPrfFound(UpdaterError):
    """No profile file in the EuroScope directory matches the prefix."""

    def __init__(
        self,
        message: str,
        *,
        es_path: Optional[str] = None,
        prf_prefix: Optional[str] = None,
        **kwargs,
    ):
        context = kwargs.pop("context", None) or ErrorContext(operation="update_prf")
        context.file_path = es_path
        if prf_prefix:
            context.metadata["prf_prefix"] = prf_prefix

        super().__init__(message, context=context, **kwargs)

        self.es_path = es_path
        self.prf_prefix = prf_prefix


def format_error_for_logging(error: Exception) -> Dict[str, Any]:
    """Format error for structured logging."""
    if isinstance(error, UpdaterError):
        return error.to_dict()

    return {
        "error_type": error.__class__.__name__,
        "message": str(error),
        "context": {"operation": "unknown"},
        "cause": None,
    }


__all__ = [
    "ErrorContext",
    "UpdaterError",
    "ConfigurationError",
    "DownloadError",
    "ExtractError",
    "LinkNotFound",
    "NoPrfFound",
    "format_error_for_logging",
]
