"""Price quote model."""

import datetime as dt

from pydantic import BaseModel, ConfigDict, Field


class PriceQuote(BaseModel):
    """Price for a stay.

    All amounts are integer minor currency units; ``total_formatted`` is the
    major-unit rendering, e.g. ``"300.00 EUR"``.
    """

    model_config = ConfigDict(strict=True, frozen=True)

    checkin: dt.date
    checkout: dt.date
    nights: int = Field(..., ge=1, description="Number of nights")
    currency: str = Field(..., description="ISO currency code (upper case)")
    price_per_night_cents: int = Field(..., ge=0)
    total_cents: int = Field(..., ge=0, description="nights x price_per_night_cents")
    total_formatted: str = Field(..., examples=["300.00 EUR"])
