"""API request/response models."""

from staybook_api.models.availability import AvailabilityResponse, DateRange, OccupiedRangeResponse
from staybook_api.models.checkout import CheckoutRequest, CheckoutResponse
from staybook_api.models.common import (
    ErrorResponse,
    HealthResponse,
    PropertyResponse,
    PropertySelector,
)
from staybook_api.models.quote import QuoteRequest, QuoteResponse
from staybook_api.models.webhooks import WebhookResponse

__all__ = [
    "AvailabilityResponse",
    "CheckoutRequest",
    "CheckoutResponse",
    "DateRange",
    "ErrorResponse",
    "HealthResponse",
    "OccupiedRangeResponse",
    "PropertyResponse",
    "PropertySelector",
    "QuoteRequest",
    "QuoteResponse",
    "WebhookResponse",
]
