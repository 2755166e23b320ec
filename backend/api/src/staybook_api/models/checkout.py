"""API models for the checkout endpoint."""

import datetime as dt

from pydantic import BaseModel, ConfigDict, EmailStr, Field

from staybook.models import BookingConfirmation

from .common import PropertySelector


class CheckoutRequest(PropertySelector):
    """Request body for booking a stay and opening a payment session."""

    # strict=False allows string-to-date coercion from JSON
    model_config = ConfigDict(
        strict=False,
        json_schema_extra={
            "examples": [
                {
                    "property_slug": "villa-x",
                    "checkin": "2024-06-01",
                    "checkout": "2024-06-04",
                    "email": "guest@example.com",
                    "guests": 2,
                }
            ]
        },
    )

    checkin: dt.date = Field(..., description="Check-in date (YYYY-MM-DD)")
    checkout: dt.date = Field(..., description="Check-out date (YYYY-MM-DD), exclusive")
    email: EmailStr = Field(..., description="Guest email, also used for the Stripe receipt")
    guests: int = Field(default=1, ge=1, description="Number of guests")


class CheckoutResponse(BaseModel):
    """Pending reservation plus the hosted payment page to complete it."""

    ok: bool = True
    reservation_id: str
    checkout_url: str = Field(..., description="Redirect the guest here to pay")
    amount_cents: int = Field(..., examples=[30000])
    currency: str = Field(..., examples=["EUR"])

    @classmethod
    def from_confirmation(cls, confirmation: BookingConfirmation) -> "CheckoutResponse":
        return cls(
            reservation_id=confirmation.reservation_id,
            checkout_url=confirmation.checkout_url,
            amount_cents=confirmation.amount_cents,
            currency=confirmation.currency,
        )
