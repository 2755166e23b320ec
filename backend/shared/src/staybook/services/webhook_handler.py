"""Webhook handler for processing Stripe events.

Moves reservations out of ``pending`` once the gateway reports the outcome
of a checkout session. Kept separate from HTTP routing so it can be unit
tested without a request.

Status transitions are conditional updates (``WHERE status = 'pending'``),
so redelivered events are harmless.
"""

from typing import Any, Literal

from pydantic import BaseModel
from sqlalchemy import select, update

from staybook.models import ReservationStatus
from staybook.utils.logging import get_logger, log_webhook_event

from .database import DatabaseService
from .tables import ReservationRecord

logger = get_logger(__name__)

CHECKOUT_COMPLETED = "checkout.session.completed"
CHECKOUT_EXPIRED = "checkout.session.expired"

WebhookOutcome = Literal["success", "duplicate", "skipped", "error"]


class WebhookResult(BaseModel):
    """Outcome of processing one webhook event."""

    result: WebhookOutcome
    reservation_id: str | None = None
    message: str | None = None


class WebhookHandler:
    """Handler for processing Stripe webhook events."""

    def __init__(self, db: DatabaseService) -> None:
        """Initialize webhook handler.

        Args:
            db: Database service instance
        """
        self.db = db

    def handle_event(self, event: dict[str, Any]) -> WebhookResult:
        """Dispatch a verified Stripe event.

        Args:
            event: Parsed Stripe webhook event

        Returns:
            WebhookResult describing what happened
        """
        event_type = event.get("type", "")
        event_id = event.get("id", "")
        session = event.get("data", {}).get("object", {}) or {}
        reservation_id = (session.get("metadata") or {}).get("reservation_id")

        if event_type == CHECKOUT_COMPLETED:
            result = self.process_checkout_completed(session, reservation_id)
        elif event_type == CHECKOUT_EXPIRED:
            result = self.process_checkout_expired(reservation_id)
        else:
            result = WebhookResult(result="skipped", message=f"Unhandled event type: {event_type}")

        log_webhook_event(
            logger,
            event_type,
            event_id,
            reservation_id=result.reservation_id,
            result=result.result,
            error=result.message if result.result == "error" else None,
        )
        return result

    def process_checkout_completed(
        self, session: dict[str, Any], reservation_id: str | None
    ) -> WebhookResult:
        """Mark the reservation paid when the session reports payment.

        Args:
            session: Checkout session object from the event
            reservation_id: Reservation ID from the session metadata

        Returns:
            success, duplicate (already paid), skipped (not paid) or error
        """
        if not reservation_id:
            return WebhookResult(result="error", message="Missing reservation_id in metadata")

        payment_status = session.get("payment_status")
        if payment_status != "paid":
            return WebhookResult(
                result="skipped",
                reservation_id=reservation_id,
                message=f"Payment status is '{payment_status}', not 'paid'",
            )

        if self._transition(reservation_id, ReservationStatus.PENDING, ReservationStatus.PAID):
            return WebhookResult(result="success", reservation_id=reservation_id)

        current = self._current_status(reservation_id)
        if current is None:
            return WebhookResult(
                result="error",
                reservation_id=reservation_id,
                message=f"Reservation {reservation_id} not found",
            )
        if current == ReservationStatus.PAID:
            return WebhookResult(
                result="duplicate",
                reservation_id=reservation_id,
                message="Reservation already paid",
            )
        # Paid after the session lapsed; the dates may be taken already
        return WebhookResult(
            result="error",
            reservation_id=reservation_id,
            message=f"Reservation {reservation_id} is {current.value}, cannot mark paid",
        )

    def process_checkout_expired(self, reservation_id: str | None) -> WebhookResult:
        """Release the dates of a reservation whose session lapsed unpaid."""
        if not reservation_id:
            return WebhookResult(result="skipped", message="Missing reservation_id in metadata")

        if self._transition(reservation_id, ReservationStatus.PENDING, ReservationStatus.EXPIRED):
            return WebhookResult(result="success", reservation_id=reservation_id)

        return WebhookResult(
            result="skipped",
            reservation_id=reservation_id,
            message="Reservation is not pending",
        )

    def _transition(
        self,
        reservation_id: str,
        from_status: ReservationStatus,
        to_status: ReservationStatus,
    ) -> bool:
        with self.db.session_scope() as session:
            outcome = session.execute(
                update(ReservationRecord)
                .where(
                    ReservationRecord.id == reservation_id,
                    ReservationRecord.status == from_status.value,
                )
                .values(status=to_status.value)
            )
            return outcome.rowcount == 1

    def _current_status(self, reservation_id: str) -> ReservationStatus | None:
        with self.db.session_scope() as session:
            status = session.scalars(
                select(ReservationRecord.status).where(ReservationRecord.id == reservation_id)
            ).one_or_none()
        return ReservationStatus(status) if status else None
