"""Property model (read-only from the booking core's perspective)."""

from pydantic import BaseModel, ConfigDict, Field

DEFAULT_CURRENCY = "EUR"


class Property(BaseModel):
    """A bookable property.

    Prices are stored in minor currency units (cents).
    """

    model_config = ConfigDict(strict=True, frozen=True)

    id: str = Field(..., description="Property identifier")
    slug: str = Field(..., description="Unique human-readable key", examples=["villa-x"])
    name: str = Field(..., description="Display name")
    currency: str = Field(default=DEFAULT_CURRENCY, description="ISO currency code")
    price_per_night_cents: int = Field(
        ...,
        ge=0,
        description="Nightly price in minor currency units",
        examples=[10000],
    )

