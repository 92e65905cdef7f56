"""Capture, enumeration and policy exceptions.

This module contains the error taxonomy surfaced to callers: input errors
(malformed regions), not-found errors (windows and displays) and backend
failures (external tool or API errors), plus the policy errors raised by
collaborators that guard the engine.
"""

import errno
from enum import Enum
from typing import Any

from .base_exceptions import DeskCaptureException


class ErrorCode(Enum):
    """Machine-readable error codes relayed to protocol clients."""

    PERMISSION_DENIED = "PERMISSION_DENIED"
    INVALID_PATH = "INVALID_PATH"
    WINDOW_NOT_FOUND = "WINDOW_NOT_FOUND"
    DISPLAY_NOT_FOUND = "DISPLAY_NOT_FOUND"
    UNSUPPORTED_FORMAT = "UNSUPPORTED_FORMAT"
    CAPTURE_FAILED = "CAPTURE_FAILED"
    RATE_LIMIT_EXCEEDED = "RATE_LIMIT_EXCEEDED"
    SECURITY_ERROR = "SECURITY_ERROR"
    INVALID_REGION = "INVALID_REGION"
    OUT_OF_MEMORY = "OUT_OF_MEMORY"
    ENCODING_FAILED = "ENCODING_FAILED"
    FILE_SYSTEM_ERROR = "FILE_SYSTEM_ERROR"
    UNSUPPORTED_PLATFORM = "UNSUPPORTED_PLATFORM"
    INVALID_PATTERN = "INVALID_PATTERN"


REMEDIATIONS: dict[ErrorCode, str] = {
    ErrorCode.PERMISSION_DENIED: (
        "Ensure the process is allowed to capture the screen. On macOS, grant "
        "Screen Recording permission in System Settings > Privacy & Security."
    ),
    ErrorCode.INVALID_PATH: (
        "Provide a file path inside one of the allowed directories and check the "
        "security policy configuration."
    ),
    ErrorCode.WINDOW_NOT_FOUND: (
        "Verify the window exists and is not minimized. List the available windows "
        "to get a current id."
    ),
    ErrorCode.DISPLAY_NOT_FOUND: (
        "Verify the display id. List the available displays to get a current id."
    ),
    ErrorCode.UNSUPPORTED_FORMAT: "Use one of the supported formats: png, jpeg, webp or bmp.",
    ErrorCode.CAPTURE_FAILED: (
        "Check that the platform capture tool is installed and that the process has "
        "permission to capture, then retry."
    ),
    ErrorCode.RATE_LIMIT_EXCEEDED: (
        "Wait before issuing more capture requests. The limit resets after the "
        "configured time window."
    ),
    ErrorCode.SECURITY_ERROR: (
        "Review the security policy configuration and ensure the operation is allowed."
    ),
    ErrorCode.INVALID_REGION: (
        "Use non-negative coordinates and positive dimensions, and keep the region "
        "inside the screen bounds."
    ),
    ErrorCode.OUT_OF_MEMORY: "Reduce the capture size or close other applications to free memory.",
    ErrorCode.ENCODING_FAILED: (
        "Try a different image format or quality setting and check available disk space."
    ),
    ErrorCode.FILE_SYSTEM_ERROR: (
        "Check file permissions, ensure the directory exists and that disk space is available."
    ),
    ErrorCode.UNSUPPORTED_PLATFORM: (
        "Run on Windows, macOS, Linux (X11 or Wayland) or WSL, or set "
        "DESKCAPTURE_BACKEND explicitly."
    ),
    ErrorCode.INVALID_PATTERN: "Provide a valid regular expression or escape special characters.",
}


def get_remediation(code: str | None) -> str:
    """Look up the remediation text for an error code.

    Args:
        code: Error code string

    Returns:
        Remediation text, empty if the code is unknown
    """
    try:
        return REMEDIATIONS[ErrorCode(code)]
    except ValueError:
        return ""


class CaptureException(DeskCaptureException):
    """Base exception for capture engine errors."""

    default_code = ErrorCode.CAPTURE_FAILED.value


class InvalidRegionError(CaptureException):
    """Raised when a region request is malformed or lies outside every display."""

    default_code = ErrorCode.INVALID_REGION.value


class WindowNotFoundError(CaptureException):
    """Raised when a window id or title does not resolve to a capturable window."""

    default_code = ErrorCode.WINDOW_NOT_FOUND.value

    def __init__(self, message: str, window_id: str | None = None, **kwargs: Any) -> None:
        """Initialize with the unresolved window id."""
        super().__init__(message, context={"window_id": window_id, **kwargs})


class DisplayNotFoundError(CaptureException):
    """Raised when a display id is not part of the current enumeration."""

    default_code = ErrorCode.DISPLAY_NOT_FOUND.value

    def __init__(self, display_id: str, available: list[str] | None = None) -> None:
        """Initialize with the requested id and the ids that do exist."""
        super().__init__(
            f"Display not found: {display_id}",
            context={"display_id": display_id, "available_displays": available or []},
        )


class CaptureFailedError(CaptureException):
    """Raised when the platform tool or API fails to produce an image."""

    default_code = ErrorCode.CAPTURE_FAILED.value

    def __init__(self, reason: str, operation: str | None = None, **kwargs: Any) -> None:
        """Initialize with capture details."""
        message = "Capture failed"
        if operation:
            message += f" during {operation}"
        message += f": {reason}"

        super().__init__(
            message,
            context={"reason": reason, "operation": operation, **kwargs},
        )


class EncodingFailedError(CaptureException):
    """Raised when captured pixels cannot be encoded."""

    default_code = ErrorCode.ENCODING_FAILED.value


class CommandError(CaptureException):
    """Raised when an external command is missing, times out or exits non-zero."""

    def __init__(
        self,
        command: str,
        reason: str,
        returncode: int | None = None,
        stderr: str | None = None,
    ) -> None:
        """Initialize with the failing command and its exit status."""
        super().__init__(
            f"Command '{command}' failed: {reason}",
            context={"command": command, "returncode": returncode, "stderr": stderr},
        )
        self.command = command
        self.returncode = returncode


class UnsupportedPlatformError(DeskCaptureException):
    """Raised when no capture backend exists for the running platform."""

    default_code = ErrorCode.UNSUPPORTED_PLATFORM.value

    def __init__(self, platform: str) -> None:
        """Initialize with the platform identifier."""
        super().__init__(f"Unsupported platform: {platform}", context={"platform": platform})


class InvalidPatternError(DeskCaptureException):
    """Raised when a window title pattern is not a valid regular expression."""

    default_code = ErrorCode.INVALID_PATTERN.value

    def __init__(self, pattern: str, reason: str) -> None:
        """Initialize with the offending pattern."""
        super().__init__(
            f"Invalid title pattern '{pattern}': {reason}",
            context={"pattern": pattern, "reason": reason},
        )


class SecurityException(DeskCaptureException):
    """Base exception for policy violations raised by engine collaborators."""

    default_code = ErrorCode.SECURITY_ERROR.value


class PathValidationError(SecurityException):
    """Raised when a save path escapes the allowed directories."""

    default_code = ErrorCode.INVALID_PATH.value

    def __init__(self, path: str, reason: str) -> None:
        """Initialize with the rejected path."""
        super().__init__(f"Invalid path '{path}': {reason}", context={"path": path})


class RateLimitError(SecurityException):
    """Raised when an agent exceeds its capture rate limit."""

    default_code = ErrorCode.RATE_LIMIT_EXCEEDED.value

    def __init__(self, agent_id: str, limit: int, window_seconds: float = 60.0) -> None:
        """Initialize with the limit that was exceeded."""
        super().__init__(
            f"Rate limit exceeded for '{agent_id}': {limit} requests per {window_seconds:g}s",
            context={"agent_id": agent_id, "limit": limit, "window_seconds": window_seconds},
        )


def format_error_response(error: BaseException) -> dict[str, Any]:
    """Build the structured error payload relayed to protocol clients.

    Library exceptions keep their own code and details. Other exceptions are
    classified from their type: permission problems, missing files, a full
    disk and memory exhaustion get dedicated codes, everything else is
    reported as a capture failure.

    Args:
        error: Exception to format

    Returns:
        Dictionary with ``status`` and an ``error`` object holding code,
        message, details and remediation
    """
    if isinstance(error, DeskCaptureException):
        payload = error.to_dict()
    elif isinstance(error, PermissionError):
        payload = {
            "code": ErrorCode.PERMISSION_DENIED.value,
            "message": f"Permission denied: {error}",
        }
    elif isinstance(error, FileNotFoundError):
        payload = {
            "code": ErrorCode.FILE_SYSTEM_ERROR.value,
            "message": f"File or directory not found: {error}",
        }
    elif isinstance(error, OSError) and error.errno == errno.ENOSPC:
        payload = {
            "code": ErrorCode.FILE_SYSTEM_ERROR.value,
            "message": f"No space left on device: {error}",
        }
    elif isinstance(error, MemoryError):
        payload = {
            "code": ErrorCode.OUT_OF_MEMORY.value,
            "message": str(error) or "Out of memory",
        }
    else:
        payload = {
            "code": ErrorCode.CAPTURE_FAILED.value,
            "message": str(error) or "An unknown error occurred",
        }

    payload["remediation"] = get_remediation(payload["code"])
    return {"status": "error", "error": payload}
