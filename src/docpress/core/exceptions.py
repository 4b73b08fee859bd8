"""
Docpress Exception Hierarchy.

Defines the custom exceptions used across docpress. Only NotFoundError is
expected to reach callers of the lifecycle manager; the others describe
failures that are raised upstream or only logged.
"""

from pathlib import Path
from typing import Any


class DocpressError(Exception):
    """
    Base exception for all docpress errors.

    All custom exceptions inherit from this class, allowing
    generic catch blocks and consistent error handling.
    """

    def __init__(self, message: str, *, details: dict[str, Any] | None = None):
        """
        Initialize a DocpressError.

        Args:
            message: Human-readable error message
            details: Optional structured data for debugging
        """
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def __str__(self) -> str:
        """Return string representation with details."""
        base = self.message
        if self.details:
            details_str = ", ".join(f"{k}={v}" for k, v in self.details.items())
            return f"{base} ({details_str})"
        return base

    def to_dict(self) -> dict[str, Any]:
        """Convert exception to dictionary for serialization."""
        return {
            "error_type": self.__class__.__name__,
            "message": self.message,
            "details": self.details,
        }


class NotFoundError(DocpressError):
    """
    Raised when a handle does not resolve to a live processed file.

    Covers files that were never registered, were already downloaded and
    reclaimed, or were removed by a sweep.
    """

    def __init__(self, message: str = "File not found or expired", *, handle: str | None = None):
        details = {"handle": handle} if handle is not None else None
        super().__init__(message, details=details)
        self.handle = handle


class TransformFailure(DocpressError):
    """
    Raised when a conversion fails before producing an output file.

    No processed-file record exists for a failed transform, so nothing
    needs to be cleaned up.
    """

    def __init__(
        self,
        message: str,
        *,
        operation: str | None = None,
        cause: BaseException | None = None,
        details: dict[str, Any] | None = None,
    ):
        details = details or {}
        if operation:
            details["operation"] = operation
        if cause is not None:
            details["cause"] = f"{type(cause).__name__}: {cause}"
        super().__init__(message, details=details)
        self.operation = operation
        self.cause = cause


class ReclaimWarning(DocpressError):
    """Physical deletion of an output file failed. Logged, never raised."""

    def __init__(self, path: Path, *, file_id: str | None = None, cause: OSError | None = None):
        details: dict[str, Any] = {"path": str(path)}
        if file_id:
            details["file_id"] = file_id
        if cause is not None:
            details["cause"] = str(cause)
        super().__init__("Failed to reclaim output file", details=details)
        self.path = path
        self.file_id = file_id
        self.cause = cause


class ConfigurationError(DocpressError):
    """Raised when settings are invalid."""

    def __init__(self, message: str, *, setting: str | None = None, value: Any = None):
        details: dict[str, Any] = {}
        if setting:
            details["setting"] = setting
        if value is not None:
            details["value"] = value
        super().__init__(message, details=details)
        self.setting = setting
        self.value = value
