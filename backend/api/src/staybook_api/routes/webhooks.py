"""Webhook endpoints for Stripe events.

Handles:
- checkout.session.completed: marks the reservation paid
- checkout.session.expired: releases the dates of an unpaid reservation

No authentication; payloads are verified with the Stripe webhook secret.
"""

from fastapi import APIRouter, Depends, Request
from starlette.concurrency import run_in_threadpool

from staybook.models import Failure
from staybook.services.stripe_service import (
    PaymentSessionError,
    StripeService,
    WebhookSignatureError,
)
from staybook.services.webhook_handler import WebhookHandler
from staybook.utils.logging import get_logger
from staybook_api.dependencies import get_stripe_service, get_webhook_handler
from staybook_api.exceptions import FailureError
from staybook_api.models.common import ErrorResponse
from staybook_api.models.webhooks import WebhookResponse

logger = get_logger(__name__)

router = APIRouter(tags=["webhooks"])

STRIPE_SIGNATURE_HEADER = "Stripe-Signature"


@router.post(
    "/webhooks/stripe",
    summary="Receive Stripe webhook events",
    description="""
Endpoint for Stripe webhook events.

**Idempotent**: a redelivered event leaves the reservation as it is and
reports `duplicate` or `skipped`.
""",
    response_model=WebhookResponse,
    responses={
        400: {"description": "Invalid signature or missing header", "model": ErrorResponse},
    },
)
async def handle_stripe_webhook(
    request: Request,
    stripe_service: StripeService = Depends(get_stripe_service),
    handler: WebhookHandler = Depends(get_webhook_handler),
) -> WebhookResponse:
    """Verify the event signature and apply the status transition."""
    signature = request.headers.get(STRIPE_SIGNATURE_HEADER)
    if not signature:
        logger.warning("Webhook request missing Stripe-Signature header")
        raise FailureError(Failure.invalid_input("Missing Stripe-Signature header"))

    payload = await request.body()

    try:
        event = stripe_service.verify_webhook_signature(payload, signature)
    except WebhookSignatureError as e:
        raise FailureError(Failure.invalid_input(str(e))) from e
    except PaymentSessionError as e:
        raise FailureError(Failure.upstream(str(e))) from e

    result = await run_in_threadpool(handler.handle_event, event)

    return WebhookResponse(
        received=True,
        event_id=event.get("id"),
        event_type=event.get("type"),
        processing_result=result.result,
        reservation_id=result.reservation_id,
        message=result.message,
    )
