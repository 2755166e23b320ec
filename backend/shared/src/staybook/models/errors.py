"""Typed failure results for core operations.

Operations return either their value or a ``Failure``. Nothing in the core
raises for an expected outcome (bad input, unknown property, date conflict,
gateway refusal); the API layer is the only place that turns a Failure into
an HTTP response.

Usage:
    result = booking.create_booking(...)
    if isinstance(result, Failure):
        ...
"""

from typing import Optional

from pydantic import BaseModel, ConfigDict

from .enums import FailureKind

# Default human-readable messages
FAILURE_MESSAGES: dict[FailureKind, str] = {
    FailureKind.INVALID_INPUT: "Invalid request",
    FailureKind.NOT_FOUND: "Property not found",
    FailureKind.CONFLICT: "The requested dates are not available",
    FailureKind.UPSTREAM_FAILURE: "Payment session could not be created",
    FailureKind.INTERNAL: "An unexpected error occurred",
}


class Failure(BaseModel):
    """Outcome of an operation that did not succeed.

    All kinds leave persisted state exactly as it was before the attempt.
    """

    model_config = ConfigDict(frozen=True)

    kind: FailureKind
    message: str
    details: Optional[dict[str, str]] = None

    @classmethod
    def of(
        cls,
        kind: FailureKind,
        message: Optional[str] = None,
        details: Optional[dict[str, str]] = None,
    ) -> "Failure":
        """Create a Failure, using the default message for the kind if none given."""
        return cls(kind=kind, message=message or FAILURE_MESSAGES[kind], details=details)

    @classmethod
    def invalid_input(cls, message: str, **details: str) -> "Failure":
        return cls.of(FailureKind.INVALID_INPUT, message, details or None)

    @classmethod
    def not_found(cls, message: Optional[str] = None, **details: str) -> "Failure":
        return cls.of(FailureKind.NOT_FOUND, message, details or None)

    @classmethod
    def conflict(cls, message: Optional[str] = None, **details: str) -> "Failure":
        return cls.of(FailureKind.CONFLICT, message, details or None)

    @classmethod
    def upstream(cls, message: Optional[str] = None, **details: str) -> "Failure":
        return cls.of(FailureKind.UPSTREAM_FAILURE, message, details or None)

    @classmethod
    def internal(cls, message: Optional[str] = None, **details: str) -> "Failure":
        return cls.of(FailureKind.INTERNAL, message, details or None)
