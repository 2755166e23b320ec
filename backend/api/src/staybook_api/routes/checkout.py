"""Checkout endpoint: reserve dates and open a Stripe Checkout session.

The reservation is created as ``pending`` and blocks the dates until the
Stripe webhook marks it paid or expired.
"""

from fastapi import APIRouter, Depends
from starlette.status import HTTP_201_CREATED

from staybook.services.booking import BookingService
from staybook_api.dependencies import get_booking_service
from staybook_api.exceptions import raise_for_failure
from staybook_api.models.checkout import CheckoutRequest, CheckoutResponse
from staybook_api.models.common import ErrorResponse

router = APIRouter(tags=["checkout"])


@router.post(
    "/checkout",
    status_code=HTTP_201_CREATED,
    summary="Book a stay",
    description="""
Reserve the requested dates and create a hosted payment page.

Redirect the guest to `checkout_url` to pay. If the payment session cannot be
created the reservation is removed again and the dates stay free.
""",
    response_model=CheckoutResponse,
    responses={
        400: {"description": "Invalid email or dates", "model": ErrorResponse},
        404: {"description": "Property not found", "model": ErrorResponse},
        409: {"description": "Dates not available", "model": ErrorResponse},
        500: {"description": "Payment gateway or internal failure", "model": ErrorResponse},
    },
)
def create_checkout(
    request: CheckoutRequest,
    booking: BookingService = Depends(get_booking_service),
) -> CheckoutResponse:
    """Book the stay and return the payment redirect."""
    confirmation = raise_for_failure(
        booking.checkout(
            property_id=request.property_id,
            slug=request.property_slug,
            checkin=request.checkin,
            checkout=request.checkout,
            guests=request.guests,
            email=str(request.email),
        )
    )
    return CheckoutResponse.from_confirmation(confirmation)
