"""
ReviewWeb Errors - Error taxonomy shared by the client, controller and front ends.

Every failure that crosses a component boundary is a ``ReviewWebError``
carrying a human-readable message, an ``ErrorType``, an HTTP-status-like code
and diagnostic metadata. Front ends format it for their transport; nothing
lets a raw exception escape to the caller.
"""

from __future__ import annotations

import json
from enum import Enum
from typing import Any, Dict, List, Optional


class ErrorType(str, Enum):
    """Kinds of failure an operation can report."""

    CONFIG_ERROR = "CONFIG_ERROR"
    VALIDATION_ERROR = "VALIDATION_ERROR"
    API_ERROR = "API_ERROR"
    UNEXPECTED_ERROR = "UNEXPECTED_ERROR"


class ReviewWebError(Exception):
    """
    Normalized error raised by every layer of the adapter.

    Args:
        message: Human-readable description.
        error_type: The kind of failure.
        status_code: HTTP status of the upstream response, or a status-like code.
        metadata: Diagnostic context (operation, primary argument, source, ...).
        cause: The original exception, kept for logs only.
    """

    def __init__(
        self,
        message: str,
        error_type: ErrorType = ErrorType.UNEXPECTED_ERROR,
        status_code: int = 500,
        metadata: Optional[Dict[str, Any]] = None,
        cause: Optional[BaseException] = None,
    ):
        super().__init__(message)
        self.message = message
        self.error_type = error_type
        self.status_code = status_code
        self.metadata: Dict[str, Any] = metadata or {}
        self.cause = cause

    def with_context(self, **context: Any) -> "ReviewWebError":
        """Attach context without overwriting keys set closer to the failure."""
        for key, value in context.items():
            self.metadata.setdefault(key, value)
        return self

    def to_dict(self) -> Dict[str, Any]:
        """Serializable form. The cause is deliberately left out."""
        return {
            "message": self.message,
            "type": self.error_type.value,
            "statusCode": self.status_code,
            "metadata": self.metadata,
        }

    def __repr__(self) -> str:
        return f"ReviewWebError({self.error_type.value}, {self.status_code}, {self.message!r})"


def config_error(message: str, **metadata: Any) -> ReviewWebError:
    return ReviewWebError(message, ErrorType.CONFIG_ERROR, 500, metadata)


def validation_error(message: str, violations: List[Dict[str, str]], **metadata: Any) -> ReviewWebError:
    return ReviewWebError(
        message,
        ErrorType.VALIDATION_ERROR,
        400,
        {"violations": violations, **metadata},
    )


def ensure_error(exc: BaseException, **metadata: Any) -> ReviewWebError:
    """Return ``exc`` as a ``ReviewWebError``, wrapping anything unexpected."""
    if isinstance(exc, ReviewWebError):
        return exc
    return ReviewWebError(
        "An unexpected error occurred",
        ErrorType.UNEXPECTED_ERROR,
        500,
        dict(metadata),
        cause=exc,
    )


def format_error_for_tool(error: ReviewWebError) -> str:
    """Render an error as the text of an MCP content block."""
    detail = json.dumps(
        {
            "type": error.error_type.value,
            "statusCode": error.status_code,
            "metadata": error.metadata,
        },
        indent=2,
        ensure_ascii=False,
        default=str,
    )
    return f"Error: {error.message}\n\n{detail}"


def format_error_for_cli(error: ReviewWebError) -> str:
    """Render an error for the terminal."""
    lines = [f"Error: {error.message}"]
    if error.error_type is ErrorType.VALIDATION_ERROR:
        for violation in error.metadata.get("violations", []):
            lines.append(f"  - {violation['field']}: {violation['message']}")
    elif error.error_type is ErrorType.API_ERROR:
        code = error.metadata.get("errorCode")
        suffix = f", {code}" if code else ""
        lines.append(f"  (HTTP {error.status_code}{suffix})")
    return "\n".join(lines)
