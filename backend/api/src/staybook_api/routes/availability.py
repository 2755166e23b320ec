"""Availability endpoint.

Lists the pending and paid reservations that overlap a date range, so a
client can render which nights are taken. All dates are YYYY-MM-DD.
"""

import datetime as dt

from fastapi import APIRouter, Depends, Query

from staybook.services.availability import AvailabilityService
from staybook.services.properties import PropertyService
from staybook_api.dependencies import get_availability_service, get_property_service
from staybook_api.exceptions import raise_for_failure
from staybook_api.models.availability import (
    AvailabilityResponse,
    DateRange,
    OccupiedRangeResponse,
)
from staybook_api.models.common import ErrorResponse, PropertyResponse

router = APIRouter(tags=["availability"])


@router.get(
    "/availability",
    summary="List occupied date ranges",
    description="""
List reservations that block a property within [from, to).

**Notes:**
- Address the property with `property_id` or `property_slug` (id wins)
- `to` is exclusive
- Only `pending` and `paid` reservations are listed; `expired` ones free their dates
- An empty or inverted range lists nothing
""",
    response_model=AvailabilityResponse,
    responses={
        400: {"description": "from/to missing or malformed", "model": ErrorResponse},
        404: {"description": "Property not found", "model": ErrorResponse},
    },
)
def get_availability(
    from_date: dt.date = Query(
        ...,
        alias="from",
        description="Start of range (YYYY-MM-DD)",
        examples=["2024-06-01"],
    ),
    to_date: dt.date = Query(
        ...,
        alias="to",
        description="End of range (YYYY-MM-DD), exclusive",
        examples=["2024-06-30"],
    ),
    property_id: str | None = Query(default=None, description="Property identifier"),
    property_slug: str | None = Query(default=None, description="Property slug"),
    properties: PropertyService = Depends(get_property_service),
    availability: AvailabilityService = Depends(get_availability_service),
) -> AvailabilityResponse:
    """Get blocking reservations for a property."""
    prop = raise_for_failure(properties.get_property(property_id=property_id, slug=property_slug))
    occupied = availability.get_occupied(prop.id, from_date, to_date)

    return AvailabilityResponse(
        property_=PropertyResponse.from_property(prop),
        range_=DateRange(from_=from_date, to=to_date),
        occupied=[OccupiedRangeResponse.from_range(o) for o in occupied],
    )
