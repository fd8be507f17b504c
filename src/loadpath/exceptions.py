"""
Load Path Exception Hierarchy

This module defines the exception hierarchy for the virtual filesystem and the
load path builtins. Every error raised by a store derives from
``LoadPathError`` and carries the canonical path it was raised for, so the
interpreter's ``require``/``load`` builtins can convert it into a user-visible
failure without inspecting host error numbers.

Kinds:
1. Lookup errors (``PathNotFoundError``)
2. Entry type mismatches (``PathIsADirectoryError``, ``PathNotADirectoryError``)
3. Path encoding errors (``PathEncodingError``)
4. Host I/O errors (``PathPermissionError``, ``HostIOError``)
5. Extension hook failures (``HookFailureError``)
6. Store capability and configuration errors
"""

import os
import time
from typing import Any, Dict, Optional, Union

PathArg = Union[str, bytes, "os.PathLike[str]", "os.PathLike[bytes]", None]


def _display_path(path: PathArg) -> Optional[str]:
    if path is None:
        return None
    path = os.fspath(path)
    if isinstance(path, bytes):
        return path.decode("utf-8", errors="backslashreplace")
    return path


class LoadPathError(Exception):
    """
    Base exception class for all virtual filesystem errors.

    Attributes:
        error_code: Unique error code for programmatic handling
        path: Canonical (or as-given) path the error refers to
        timestamp: When the error occurred
        context: Additional context information
        user_message: User-friendly error message
        developer_message: Detailed technical error message
        suggestion: Suggested fix or next steps (if applicable)
    """

    def __init__(
        self,
        message: str,
        error_code: str = "LOAD_PATH_ERROR",
        path: PathArg = None,
        context: Optional[Dict[str, Any]] = None,
        user_message: Optional[str] = None,
        suggestion: Optional[str] = None,
    ):
        super().__init__(message)
        self.error_code = error_code
        self.path = _display_path(path)
        self.timestamp = time.time()
        self.context = context or {}
        self.user_message = user_message or message
        self.developer_message = message
        self.suggestion = suggestion

    @property
    def message(self) -> str:
        return self.developer_message

    def to_dict(self) -> Dict[str, Any]:
        """Convert error to dictionary for logging/serialization."""
        return {
            "error_type": self.__class__.__name__,
            "error_code": self.error_code,
            "message": self.developer_message,
            "user_message": self.user_message,
            "path": self.path,
            "timestamp": self.timestamp,
            "context": self.context,
            "suggestion": self.suggestion,
        }

    def __str__(self) -> str:
        parts = [f"[{self.error_code}]", self.developer_message]
        if self.path and self.path not in self.developer_message:
            parts.append(f"(path: {self.path})")
        return " ".join(parts)


# =============================================================================
# LOOKUP AND ENTRY TYPE ERRORS
# =============================================================================

class PathNotFoundError(LoadPathError):
    """Raised when no entry or host file exists at the resolved path."""

    def __init__(self, message: str, **kwargs):
        error_code = kwargs.pop("error_code", "NOT_FOUND")
        kwargs.setdefault("user_message", "cannot load such file")
        super().__init__(message, error_code=error_code, **kwargs)


class PathIsADirectoryError(LoadPathError):
    """Raised when a file operation targets a directory."""

    def __init__(self, message: str, **kwargs):
        super().__init__(message, error_code="IS_A_DIRECTORY", **kwargs)


class PathNotADirectoryError(LoadPathError):
    """
    Raised when a path component that must be a directory is a file.

    Examples:
    - Writing ``/lib/a.rb/b.rb`` after ``/lib/a.rb`` was written as source
    """

    def __init__(self, message: str, **kwargs):
        super().__init__(message, error_code="NOT_A_DIRECTORY", **kwargs)


class PathEncodingError(LoadPathError):
    """Raised when a path cannot be represented as a byte sequence on the host."""

    def __init__(self, message: str, **kwargs):
        super().__init__(
            message,
            error_code="ENCODING_ERROR",
            suggestion="Use paths encodable with the filesystem encoding.",
            **kwargs
        )


# =============================================================================
# HOST I/O ERRORS
# =============================================================================

class HostIOError(LoadPathError):
    """
    Raised for host filesystem failures with no more specific kind.

    The host ``errno`` is kept so callers can still tell failures apart.
    """

    def __init__(self, message: str, errno: Optional[int] = None, **kwargs):
        self.errno = errno
        error_code = kwargs.pop("error_code", "HOST_IO_ERROR")
        context = kwargs.pop("context", None) or {}
        if errno is not None:
            context["errno"] = errno
        super().__init__(message, error_code=error_code, context=context, **kwargs)


class PathPermissionError(HostIOError):
    """Raised when the host denies access to a file."""

    def __init__(self, message: str, **kwargs):
        super().__init__(message, error_code="PERMISSION_DENIED", **kwargs)


# =============================================================================
# EXTENSION HOOK ERRORS
# =============================================================================

class HookFailureError(LoadPathError):
    """
    Raised when an extension hook fails while being required or loaded.

    The original exception is chained as ``__cause__``.
    """

    def __init__(self, message: str, hook_name: Optional[str] = None, **kwargs):
        self.hook_name = hook_name
        context = kwargs.pop("context", None) or {}
        if hook_name:
            context["hook_name"] = hook_name
        super().__init__(
            message,
            error_code="HOOK_FAILURE",
            context=context,
            user_message="The extension failed to initialize.",
            **kwargs
        )


# =============================================================================
# STORE CAPABILITY AND CONFIGURATION ERRORS
# =============================================================================

class UnsupportedOperationError(LoadPathError):
    """Raised when a store strategy does not support an operation."""

    def __init__(self, message: str, operation: Optional[str] = None, **kwargs):
        self.operation = operation
        context = kwargs.pop("context", None) or {}
        if operation:
            context["operation"] = operation
        super().__init__(
            message, error_code="UNSUPPORTED_OPERATION", context=context, **kwargs
        )


class LoadPathConfigurationError(LoadPathError):
    """Raised when a store cannot be built from the given configuration."""

    def __init__(
        self,
        message: str,
        config_field: Optional[str] = None,
        config_value: Optional[Any] = None,
        **kwargs
    ):
        self.config_field = config_field
        self.config_value = config_value
        context = kwargs.pop("context", None) or {}
        if config_field:
            context["config_field"] = config_field
        if config_value is not None:
            context["config_value"] = str(config_value)
        super().__init__(
            message,
            error_code="CONFIGURATION_ERROR",
            context=context,
            suggestion="Check the backend name and search paths.",
            **kwargs
        )
