"""Business logic services for Staybook."""

from .availability import AvailabilityService, ranges_overlap
from .booking import BookingService
from .database import DatabaseService, get_database_service, reset_database_service
from .pricing import PricingService, format_amount
from .properties import PropertyService
from .ssm_service import SSMService, SSMServiceError, get_ssm_service
from .stripe_service import (
    PaymentSessionError,
    PaymentSessionFactory,
    StripeService,
    WebhookSignatureError,
)
from .webhook_handler import WebhookHandler, WebhookResult

__all__ = [
    "AvailabilityService",
    "BookingService",
    "DatabaseService",
    "PaymentSessionError",
    "PaymentSessionFactory",
    "PricingService",
    "PropertyService",
    "SSMService",
    "SSMServiceError",
    "StripeService",
    "WebhookHandler",
    "WebhookResult",
    "WebhookSignatureError",
    "format_amount",
    "get_database_service",
    "get_ssm_service",
    "ranges_overlap",
    "reset_database_service",
]
