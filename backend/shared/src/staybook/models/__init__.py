"""Pydantic models for Staybook data entities."""

from .booking import BookingConfirmation, PaymentSession
from .enums import BLOCKING_STATUSES, FailureKind, ReservationStatus
from .errors import FAILURE_MESSAGES, Failure
from .pricing import PriceQuote
from .property import DEFAULT_CURRENCY, Property
from .reservation import OccupiedRange

__all__ = [
    # Enums
    "BLOCKING_STATUSES",
    "FailureKind",
    "ReservationStatus",
    # Errors
    "FAILURE_MESSAGES",
    "Failure",
    # Property
    "DEFAULT_CURRENCY",
    "Property",
    # Reservation
    "OccupiedRange",
    # Pricing
    "PriceQuote",
    # Booking
    "BookingConfirmation",
    "PaymentSession",
]
