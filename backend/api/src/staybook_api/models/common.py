"""Shared API request/response models.

Domain models (Property, OccupiedRange, PriceQuote, ...) live in
staybook.models; this module holds HTTP layer concerns only.
"""

from pydantic import BaseModel, ConfigDict, Field

from staybook.models import Property

__all__ = [
    "ErrorResponse",
    "HealthResponse",
    "PropertyResponse",
    "PropertySelector",
]


class PropertyResponse(BaseModel):
    """Public reference to a property embedded in responses."""

    id: str
    slug: str = Field(..., examples=["villa-x"])
    name: str

    @classmethod
    def from_property(cls, prop: Property) -> "PropertyResponse":
        return cls(id=prop.id, slug=prop.slug, name=prop.name)


class ErrorResponse(BaseModel):
    """Uniform error body returned by every endpoint."""

    model_config = ConfigDict(
        json_schema_extra={"examples": [{"ok": False, "error": "Property not found"}]}
    )

    ok: bool = False
    error: str = Field(..., description="Human-readable error message")


class HealthResponse(BaseModel):
    """Liveness response."""

    status: str = Field(default="healthy", examples=["healthy"])
    version: str = Field(..., examples=["0.1.0"])


class PropertySelector(BaseModel):
    """Property addressed by identifier or slug (identifier wins if both given)."""

    property_id: str | None = Field(
        default=None,
        description="Property identifier",
        examples=["8b0d1d9e-3b0a-4d0b-9a1e-0b1c2d3e4f50"],
    )
    property_slug: str | None = Field(
        default=None,
        description="Property slug",
        examples=["villa-x"],
    )
