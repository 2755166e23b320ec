"""Quote endpoint: price a stay without reserving it."""

from fastapi import APIRouter, Depends

from staybook.services.pricing import PricingService
from staybook.services.properties import PropertyService
from staybook_api.dependencies import get_pricing_service, get_property_service
from staybook_api.exceptions import raise_for_failure
from staybook_api.models.common import ErrorResponse
from staybook_api.models.quote import QuoteRequest, QuoteResponse

router = APIRouter(tags=["pricing"])


@router.post(
    "/quote",
    summary="Price a stay",
    description="""
Calculate nights and total price for a stay.

Amounts are integer minor units (e.g. 30000 = 300.00 EUR).
Does not check availability.
""",
    response_model=QuoteResponse,
    responses={
        400: {"description": "Missing or invalid dates", "model": ErrorResponse},
        404: {"description": "Property not found", "model": ErrorResponse},
    },
)
def create_quote(
    request: QuoteRequest,
    properties: PropertyService = Depends(get_property_service),
    pricing: PricingService = Depends(get_pricing_service),
) -> QuoteResponse:
    """Quote the stay described by the request."""
    raise_for_failure(pricing.validate_range(request.checkin, request.checkout))

    prop = raise_for_failure(
        properties.get_property(property_id=request.property_id, slug=request.property_slug)
    )
    quote = raise_for_failure(pricing.quote(prop, request.checkin, request.checkout))

    return QuoteResponse.from_quote(prop, quote)
