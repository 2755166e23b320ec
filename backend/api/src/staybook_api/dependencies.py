"""FastAPI dependency injection providers for shared services.

Service instances are created lazily and cached with @lru_cache so every
request shares the same engine, connection pool and Stripe client.

Usage in routes:
    from staybook_api.dependencies import get_booking_service

    @router.post("/checkout")
    def checkout(
        booking: BookingService = Depends(get_booking_service),
    ):
        ...

Service Dependency Graph:
    DatabaseService (singleton via get_database_service)
        ├── PropertyService
        ├── AvailabilityService
        ├── WebhookHandler
        └── BookingService
                ├── PricingService
                └── StripeService (PaymentSessionFactory)

Testing:
    Override providers with app.dependency_overrides and call
    reset_services() to clear cached instances between tests.
"""

from functools import lru_cache

from staybook.config import get_settings
from staybook.services.availability import AvailabilityService
from staybook.services.booking import BookingService
from staybook.services.database import get_database_service
from staybook.services.pricing import PricingService
from staybook.services.properties import PropertyService
from staybook.services.stripe_service import StripeService
from staybook.services.webhook_handler import WebhookHandler


@lru_cache
def get_property_service() -> PropertyService:
    """Get cached PropertyService instance."""
    return PropertyService(db=get_database_service())


@lru_cache
def get_availability_service() -> AvailabilityService:
    """Get cached AvailabilityService instance."""
    return AvailabilityService(db=get_database_service())


@lru_cache
def get_pricing_service() -> PricingService:
    """Get cached PricingService instance."""
    return PricingService()


@lru_cache
def get_stripe_service() -> StripeService:
    """Get cached StripeService instance.

    Returns:
        StripeService configured from process settings.
    """
    return StripeService(settings=get_settings())


@lru_cache
def get_booking_service() -> BookingService:
    """Get cached BookingService instance.

    Returns:
        BookingService configured with all required dependencies.
    """
    return BookingService(
        db=get_database_service(),
        properties=get_property_service(),
        availability=get_availability_service(),
        pricing=get_pricing_service(),
        payments=get_stripe_service(),
        settings=get_settings(),
    )


@lru_cache
def get_webhook_handler() -> WebhookHandler:
    """Get cached WebhookHandler instance."""
    return WebhookHandler(db=get_database_service())


def reset_services() -> None:
    """Clear all cached service instances.

    Also resets the database singleton and the cached settings.

    Example:
        @pytest.fixture(autouse=True)
        def reset_state():
            yield
            reset_services()
    """
    from staybook.services.database import reset_database_service

    get_property_service.cache_clear()
    get_availability_service.cache_clear()
    get_pricing_service.cache_clear()
    get_stripe_service.cache_clear()
    get_booking_service.cache_clear()
    get_webhook_handler.cache_clear()

    reset_database_service()
    get_settings.cache_clear()
