"""Application-level exception types.

This module defines domain errors used across services/adapters, enabling
consistent error handling, logging, and API responses.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, NotRequired, TypedDict


class ErrorDetails(TypedDict, total=False):
    """Structured error context for observability and clients."""

    parameter: str
    action: str
    http_status: int
    url: str
    window_ms: int
    max: int
    retry_after: int
    context: NotRequired[dict[str, Any]]


@dataclass
class AppError(Exception):
    """Base error for application/domain failures.

    Attributes:
        code: Stable, machine-readable error code.
        message: Human-readable error message.
        details: Optional structured details for debugging/observability.
    """

    code: str
    message: str
    details: ErrorDetails | None = None

    def __post_init__(self) -> None:
        # Populate Exception args so str(error) is useful in logs/tracebacks.
        super().__init__(self.message)


class ValidationAppError(AppError):
    """Raised when a required request parameter is missing."""


class InvalidActionError(AppError):
    """Raised when the requested action is unknown or absent."""


class RateLimitedError(AppError):
    """Raised when a client exceeds its request budget for the window."""


class UpstreamError(AppError):
    """Raised when the upstream API is unreachable or returns unusable data."""
