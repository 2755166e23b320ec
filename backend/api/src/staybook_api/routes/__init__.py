"""API routes package.

Routers are organized by domain:

- health: Health check
- availability: Occupied date ranges for a property
- quote: Stay pricing
- checkout: Booking plus Stripe Checkout session
- webhooks: Stripe payment confirmations

All routers are registered in main.py at the root path.
"""

from staybook_api.routes.availability import router as availability_router
from staybook_api.routes.checkout import router as checkout_router
from staybook_api.routes.health import router as health_router
from staybook_api.routes.quote import router as quote_router
from staybook_api.routes.webhooks import router as webhooks_router

__all__ = [
    "availability_router",
    "checkout_router",
    "health_router",
    "quote_router",
    "webhooks_router",
]
