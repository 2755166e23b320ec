"""API models for the availability endpoint."""

import datetime as dt

from pydantic import BaseModel, ConfigDict, Field

from staybook.models import OccupiedRange, ReservationStatus

from .common import PropertyResponse


class DateRange(BaseModel):
    """Queried date range, serialized as {"from": ..., "to": ...}."""

    model_config = ConfigDict(populate_by_name=True)

    from_: dt.date = Field(..., alias="from", examples=["2024-06-01"])
    to: dt.date = Field(..., examples=["2024-06-30"])


class OccupiedRangeResponse(BaseModel):
    """A blocking reservation in the availability view."""

    id: str
    checkin: dt.date
    checkout: dt.date
    status: ReservationStatus

    @classmethod
    def from_range(cls, occupied: OccupiedRange) -> "OccupiedRangeResponse":
        return cls(
            id=occupied.id,
            checkin=occupied.checkin,
            checkout=occupied.checkout,
            status=occupied.status,
        )


class AvailabilityResponse(BaseModel):
    """Blocking reservations overlapping the queried range."""

    model_config = ConfigDict(
        populate_by_name=True,
        json_schema_extra={
            "examples": [
                {
                    "ok": True,
                    "property": {"id": "8b0d1d9e", "slug": "villa-x", "name": "Villa X"},
                    "range": {"from": "2024-06-01", "to": "2024-06-30"},
                    "occupied": [
                        {
                            "id": "3f7c2a10",
                            "checkin": "2024-06-01",
                            "checkout": "2024-06-04",
                            "status": "pending",
                        }
                    ],
                }
            ]
        },
    )

    ok: bool = True
    property_: PropertyResponse = Field(..., alias="property")
    range_: DateRange = Field(..., alias="range")
    occupied: list[OccupiedRangeResponse] = Field(
        default_factory=list,
        description="Pending or paid reservations ordered by checkin",
    )
