"""Booking and payment session result models."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class PaymentSession(BaseModel):
    """Hosted payment session returned by the payment gateway."""

    model_config = ConfigDict(frozen=True)

    session_id: str = Field(..., description="Gateway session ID (cs_xxx for Stripe)")
    checkout_url: str = Field(..., description="URL the guest is redirected to")
    expires_at: datetime | None = Field(default=None, description="When the session lapses")


class BookingConfirmation(BaseModel):
    """Successful outcome of a booking attempt.

    The reservation is persisted as ``pending`` until the gateway confirms payment.
    """

    model_config = ConfigDict(frozen=True)

    reservation_id: str
    checkout_url: str
    amount_cents: int = Field(..., ge=0)
    currency: str = Field(..., description="ISO currency code (upper case)")
    session_id: str | None = None
