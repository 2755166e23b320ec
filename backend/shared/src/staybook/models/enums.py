"""Enumeration types for Staybook data models."""

from enum import Enum


class ReservationStatus(str, Enum):
    """Status of a reservation."""

    PENDING = "pending"
    PAID = "paid"
    EXPIRED = "expired"


# Statuses that hold the dates and count toward conflicts
BLOCKING_STATUSES: tuple[ReservationStatus, ...] = (
    ReservationStatus.PENDING,
    ReservationStatus.PAID,
)


class FailureKind(str, Enum):
    """Category of a failed operation."""

    INVALID_INPUT = "invalid_input"
    NOT_FOUND = "not_found"
    CONFLICT = "conflict"
    UPSTREAM_FAILURE = "upstream_failure"
    INTERNAL = "internal"
