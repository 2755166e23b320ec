"""Pytest configuration and fixtures for Staybook backend tests.

This module provides reusable fixtures for testing:
- In-memory SQLite database with the villa-x sample property
- A fake payment gateway standing in for Stripe Checkout
- A FastAPI TestClient wired to those fixtures
"""

import datetime as dt
import hashlib
import hmac
import json
import os
import threading
import time
from typing import Any, Generator

import pytest

# === Environment Setup ===

# Set environment variables for testing before imports
os.environ.setdefault("AWS_DEFAULT_REGION", "eu-west-1")
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("ENVIRONMENT", "test")

# Only set fake credentials for moto if no real credentials are present
if not os.environ.get("AWS_PROFILE") and not os.environ.get("AWS_ACCESS_KEY_ID"):
    os.environ.setdefault("AWS_ACCESS_KEY_ID", "testing")
    os.environ.setdefault("AWS_SECRET_ACCESS_KEY", "testing")

from staybook.config import Settings  # noqa: E402
from staybook.models import PaymentSession, Property, ReservationStatus  # noqa: E402
from staybook.services.availability import AvailabilityService  # noqa: E402
from staybook.services.booking import BookingService  # noqa: E402
from staybook.services.database import DatabaseService  # noqa: E402
from staybook.services.pricing import PricingService  # noqa: E402
from staybook.services.properties import PropertyService  # noqa: E402
from staybook.services.stripe_service import PaymentSessionError  # noqa: E402
from staybook.services.tables import PropertyRecord, ReservationRecord  # noqa: E402

TEST_SECRET_KEY = "sk_test_abc123xyz"
TEST_WEBHOOK_SECRET = "whsec_test_secret_for_testing"
VILLA_ID = "0b7f2c1e-villa-x"


# === Fakes ===


class FakePaymentGateway:
    """In-process PaymentSessionFactory recording every call.

    Set ``error`` to make the next calls raise it.
    """

    def __init__(self) -> None:
        self.calls: list[dict[str, Any]] = []
        self.error: Exception | None = None
        self._lock = threading.Lock()

    def create_checkout_session(self, **kwargs: Any) -> PaymentSession:
        with self._lock:
            self.calls.append(kwargs)
            number = len(self.calls)
        if self.error is not None:
            raise self.error
        return PaymentSession(
            session_id=f"cs_test_{number}",
            checkout_url=f"https://checkout.stripe.com/c/pay/cs_test_{number}",
            expires_at=dt.datetime.now(dt.timezone.utc) + dt.timedelta(minutes=30),
        )


# === Helpers ===


def _add_reservation(
    db: DatabaseService,
    checkin: dt.date,
    checkout: dt.date,
    status: ReservationStatus = ReservationStatus.PENDING,
    property_id: str = VILLA_ID,
    reservation_id: str | None = None,
) -> str:
    """Insert a reservation row directly and return its ID."""
    record = ReservationRecord(
        property_id=property_id,
        checkin=checkin,
        checkout=checkout,
        guests=2,
        email="guest@example.com",
        status=status.value,
    )
    if reservation_id:
        record.id = reservation_id
    with db.session_scope() as session:
        session.add(record)
        session.flush()
        return record.id


def _reservation_status(db: DatabaseService, reservation_id: str) -> str | None:
    """Read a reservation's stored status (None if the row is gone)."""
    with db.session_scope() as session:
        record = session.get(ReservationRecord, reservation_id)
        return record.status if record else None


def _count_reservations(db: DatabaseService) -> int:
    with db.session_scope() as session:
        return session.query(ReservationRecord).count()


def _sign_payload(payload: bytes, secret: str = TEST_WEBHOOK_SECRET) -> str:
    """Create a valid Stripe-Signature header value.

    Stripe signatures use HMAC-SHA256 with format: t={timestamp},v1={signature}
    """
    timestamp = str(int(time.time()))
    signed_payload = f"{timestamp}.{payload.decode('utf-8')}"
    signature = hmac.new(
        secret.encode("utf-8"),
        signed_payload.encode("utf-8"),
        hashlib.sha256,
    ).hexdigest()
    return f"t={timestamp},v1={signature}"


def _checkout_event(
    event_type: str,
    reservation_id: str | None,
    payment_status: str = "paid",
    event_id: str = "evt_test_123",
) -> dict[str, Any]:
    """Build a checkout.session.* Stripe event payload."""
    metadata = {"reservation_id": reservation_id} if reservation_id else {}
    return {
        "id": event_id,
        "object": "event",
        "type": event_type,
        "data": {
            "object": {
                "id": "cs_test_abc",
                "object": "checkout.session",
                "payment_status": payment_status,
                "metadata": metadata,
            }
        },
    }


# === Fixtures ===


@pytest.fixture
def settings() -> Settings:
    """Settings for tests; no network or SSM access needed."""
    return Settings(
        environment="test",
        database_url="sqlite://",
        stripe_secret_key=TEST_SECRET_KEY,
        stripe_webhook_secret=TEST_WEBHOOK_SECRET,
        frontend_url="http://localhost:3000",
        booking_max_attempts=3,
    )


@pytest.fixture
def db() -> Generator[DatabaseService, None, None]:
    """Fresh in-memory SQLite database with the schema created."""
    service = DatabaseService("sqlite://")
    service.create_schema()
    yield service
    service.dispose()


@pytest.fixture
def villa(db: DatabaseService) -> Property:
    """Sample property: villa-x at 100.00 EUR per night."""
    with db.session_scope() as session:
        session.add(
            PropertyRecord(
                id=VILLA_ID,
                slug="villa-x",
                name="Villa X",
                currency="EUR",
                price_per_night_cents=10000,
            )
        )
    return Property(
        id=VILLA_ID,
        slug="villa-x",
        name="Villa X",
        currency="EUR",
        price_per_night_cents=10000,
    )


@pytest.fixture
def make_reservation(db: DatabaseService):
    """Insert a reservation row: make_reservation(checkin, checkout, status=..., property_id=...)."""

    def _make(checkin: dt.date, checkout: dt.date, status=ReservationStatus.PENDING, **kwargs) -> str:
        return _add_reservation(db, checkin, checkout, status, **kwargs)

    return _make


@pytest.fixture
def stored_status(db: DatabaseService):
    """Read a reservation's stored status; None if the row does not exist."""
    return lambda reservation_id: _reservation_status(db, reservation_id)


@pytest.fixture
def reservation_count(db: DatabaseService):
    """Count all reservation rows."""
    return lambda: _count_reservations(db)


@pytest.fixture
def checkout_event():
    """Build a checkout.session.* event: checkout_event(event_type, reservation_id, ...)."""
    return _checkout_event


@pytest.fixture
def signed_webhook():
    """Encode an event and sign it: returns (payload, headers) for POST /webhooks/stripe."""

    def _signed(event: dict[str, Any], secret: str = TEST_WEBHOOK_SECRET) -> tuple[bytes, dict[str, str]]:
        payload = json.dumps(event).encode("utf-8")
        headers = {
            "Stripe-Signature": _sign_payload(payload, secret),
            "Content-Type": "application/json",
        }
        return payload, headers

    return _signed


@pytest.fixture
def gateway() -> FakePaymentGateway:
    return FakePaymentGateway()


@pytest.fixture
def booking_service(
    db: DatabaseService,
    villa: Property,
    gateway: FakePaymentGateway,
    settings: Settings,
) -> BookingService:
    """BookingService over the test database and the fake gateway."""
    return BookingService(
        db=db,
        properties=PropertyService(db),
        availability=AvailabilityService(db),
        pricing=PricingService(),
        payments=gateway,
        settings=settings,
    )


@pytest.fixture
def failing_gateway(gateway: FakePaymentGateway) -> FakePaymentGateway:
    """Gateway that rejects every session with a transient error."""
    gateway.error = PaymentSessionError(
        "Failed to create checkout session: Request timed out",
        stripe_error_code=None,
        retryable=True,
    )
    return gateway


@pytest.fixture
def client(
    db: DatabaseService,
    villa: Property,
    booking_service: BookingService,
    settings: Settings,
) -> Generator[Any, None, None]:
    """TestClient with every service dependency pointed at the test fixtures."""
    from fastapi.testclient import TestClient

    from staybook.services.stripe_service import StripeService
    from staybook.services.webhook_handler import WebhookHandler
    from staybook_api import dependencies
    from staybook_api.main import app

    app.dependency_overrides[dependencies.get_property_service] = lambda: PropertyService(db)
    app.dependency_overrides[dependencies.get_availability_service] = (
        lambda: AvailabilityService(db)
    )
    app.dependency_overrides[dependencies.get_pricing_service] = PricingService
    app.dependency_overrides[dependencies.get_booking_service] = lambda: booking_service
    app.dependency_overrides[dependencies.get_webhook_handler] = lambda: WebhookHandler(db)
    app.dependency_overrides[dependencies.get_stripe_service] = lambda: StripeService(settings)

    yield TestClient(app, raise_server_exceptions=False)

    app.dependency_overrides.clear()
    dependencies.reset_services()
