"""Base exception classes for deskcapture.

Every error raised by the capture engine derives from
:class:`DeskCaptureException`, so callers and the protocol layer can catch
one type and still read a machine-readable code plus a structured payload.
"""

from typing import Any


class DeskCaptureException(Exception):
    """Base exception for all deskcapture errors.

    Attributes:
        message: Human-readable error message
        error_code: Machine-readable error code, relayed to protocol clients
        context: Structured details (offending coordinates, ids, tool output)
    """

    default_code: str | None = None

    def __init__(
        self, message: str, error_code: str | None = None, context: dict[str, Any] | None = None
    ) -> None:
        """Initialize the exception.

        Args:
            message: Error message
            error_code: Error code, defaults to the class-level code
            context: Optional context dictionary
        """
        super().__init__(message)
        self.message = message
        self.error_code = error_code or self.default_code
        self.context = context or {}

    def __str__(self) -> str:
        """Return string representation."""
        if self.error_code:
            return f"[{self.error_code}] {self.message}"
        return self.message

    def to_dict(self) -> dict[str, Any]:
        """Serialize the error for relaying to a client."""
        return {
            "code": self.error_code,
            "message": self.message,
            "details": dict(self.context),
        }
