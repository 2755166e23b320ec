"""API models for the quote endpoint."""

import datetime as dt

from pydantic import BaseModel, ConfigDict, Field

from staybook.models import PriceQuote, Property

from .common import PropertyResponse, PropertySelector


class QuoteRequest(PropertySelector):
    """Request body for pricing a stay."""

    # strict=False allows string-to-date coercion from JSON
    model_config = ConfigDict(
        strict=False,
        json_schema_extra={
            "examples": [
                {"property_slug": "villa-x", "checkin": "2024-06-01", "checkout": "2024-06-04"}
            ]
        },
    )

    checkin: dt.date = Field(..., description="Check-in date (YYYY-MM-DD)")
    checkout: dt.date = Field(..., description="Check-out date (YYYY-MM-DD), exclusive")


class QuoteResponse(BaseModel):
    """Price of a stay at a property."""

    model_config = ConfigDict(populate_by_name=True)

    ok: bool = True
    property_: PropertyResponse = Field(..., alias="property")
    checkin: dt.date
    checkout: dt.date
    nights: int = Field(..., examples=[3])
    currency: str = Field(..., examples=["EUR"])
    price_per_night_cents: int = Field(..., examples=[10000])
    total_cents: int = Field(..., examples=[30000])
    total_formatted: str = Field(..., examples=["300.00 EUR"])

    @classmethod
    def from_quote(cls, prop: Property, quote: PriceQuote) -> "QuoteResponse":
        return cls(
            property_=PropertyResponse.from_property(prop),
            checkin=quote.checkin,
            checkout=quote.checkout,
            nights=quote.nights,
            currency=quote.currency,
            price_per_night_cents=quote.price_per_night_cents,
            total_cents=quote.total_cents,
            total_formatted=quote.total_formatted,
        )
