"""Booking service: the reservation transaction manager.

A booking attempt commits a ``pending`` reservation before the payment
gateway is called, so no database transaction is held open across the
network round-trip:

1. validate the date range (before any database access)
2. serializable transaction: re-check conflicts, insert pending, commit
3. create the payment session outside any transaction
4. on gateway failure, delete the pending reservation (compensation)

A failed attempt leaves no reservation row behind.
"""

import datetime as dt
import uuid
from urllib.parse import quote

from sqlalchemy import delete
from sqlalchemy.exc import DBAPIError, SQLAlchemyError

from staybook.config import Settings, get_settings
from staybook.models import (
    BookingConfirmation,
    Failure,
    PriceQuote,
    Property,
    ReservationStatus,
)
from staybook.utils.logging import get_logger, log_booking_operation

from .availability import AvailabilityService
from .database import DatabaseService, is_overlap_violation, is_serialization_failure
from .pricing import PricingService
from .properties import PropertyService
from .stripe_service import PaymentSessionError, PaymentSessionFactory
from .tables import ReservationRecord

logger = get_logger(__name__)


class BookingService:
    """Service that turns a priced stay into a pending reservation plus payment session."""

    def __init__(
        self,
        db: DatabaseService,
        properties: PropertyService,
        availability: AvailabilityService,
        pricing: PricingService,
        payments: PaymentSessionFactory,
        settings: Settings | None = None,
    ) -> None:
        """Initialize booking service.

        Args:
            db: Database service instance
            properties: Property lookup
            availability: Conflict guard
            pricing: Price calculation
            payments: Hosted payment session provider
            settings: Process settings. Defaults to get_settings().
        """
        self.db = db
        self.properties = properties
        self.availability = availability
        self.pricing = pricing
        self.payments = payments
        self.settings = settings or get_settings()

    def checkout(
        self,
        *,
        property_id: str | None = None,
        slug: str | None = None,
        checkin: dt.date,
        checkout: dt.date,
        guests: int = 1,
        email: str,
    ) -> BookingConfirmation | Failure:
        """Resolve the property and book it.

        Range validation runs before the property lookup, so an inverted
        range is reported as invalid input even for an unknown property.
        """
        invalid = self.pricing.validate_range(checkin, checkout)
        if invalid:
            return invalid

        prop = self.properties.get_property(property_id=property_id, slug=slug)
        if isinstance(prop, Failure):
            return prop

        return self.create_booking(prop, checkin, checkout, guests, email)

    def create_booking(
        self,
        prop: Property,
        checkin: dt.date,
        checkout: dt.date,
        guests: int,
        email: str,
    ) -> BookingConfirmation | Failure:
        """Book a stay and open a payment session for it.

        Args:
            prop: Property being booked
            checkin: Check-in date
            checkout: Check-out date (exclusive)
            guests: Number of guests
            email: Guest email address

        Returns:
            BookingConfirmation, or a Failure of kind INVALID_INPUT, CONFLICT,
            UPSTREAM_FAILURE or INTERNAL
        """
        quote_or_failure = self.pricing.quote(prop, checkin, checkout)
        if isinstance(quote_or_failure, Failure):
            return quote_or_failure
        price = quote_or_failure

        reserved = self._reserve(prop, checkin, checkout, guests, email)
        if isinstance(reserved, Failure):
            return reserved
        reservation_id = reserved

        try:
            session = self.payments.create_checkout_session(
                reservation_id=reservation_id,
                amount_cents=price.total_cents,
                currency=price.currency,
                description=self._description(prop, price),
                product_name=f"Stay: {prop.name}",
                customer_email=email,
                success_url=self._success_url(reservation_id),
                cancel_url=self._cancel_url(reservation_id),
                metadata={
                    "reservation_id": reservation_id,
                    "property_id": prop.id,
                    "property_slug": prop.slug,
                    "checkin": checkin.isoformat(),
                    "checkout": checkout.isoformat(),
                },
            )
        except PaymentSessionError as e:
            log_booking_operation(
                logger,
                "create_payment_session",
                reservation_id=reservation_id,
                property_id=prop.id,
                amount_cents=price.total_cents,
                error=str(e),
                retryable=e.retryable,
            )
            details = {"reservation_id": reservation_id}
            if e.stripe_error_code:
                details["gateway_code"] = e.stripe_error_code
            compensation_error = self._compensate(reservation_id)
            if compensation_error:
                details["compensation_error"] = compensation_error
            return Failure.upstream(str(e), **details)
        except Exception:
            logger.exception("Unexpected payment gateway error for reservation %s", reservation_id)
            self._compensate(reservation_id)
            raise

        log_booking_operation(
            logger,
            "create_payment_session",
            reservation_id=reservation_id,
            property_id=prop.id,
            amount_cents=price.total_cents,
            status=ReservationStatus.PENDING.value,
            session_id=session.session_id,
        )

        return BookingConfirmation(
            reservation_id=reservation_id,
            checkout_url=session.checkout_url,
            amount_cents=price.total_cents,
            currency=price.currency.upper(),
            session_id=session.session_id,
        )

    def _reserve(
        self,
        prop: Property,
        checkin: dt.date,
        checkout: dt.date,
        guests: int,
        email: str,
    ) -> str | Failure:
        """Insert a pending reservation in a serializable transaction.

        Returns:
            The new reservation ID, or a CONFLICT/INTERNAL Failure
        """
        max_attempts = self.settings.booking_max_attempts
        conflict = Failure.conflict(
            property_id=prop.id,
            checkin=checkin.isoformat(),
            checkout=checkout.isoformat(),
        )

        for attempt in range(1, max_attempts + 1):
            reservation_id = str(uuid.uuid4())
            try:
                with self.db.session_scope(serializable=True) as session:
                    if self.availability.has_conflict(session, prop.id, checkin, checkout):
                        log_booking_operation(
                            logger,
                            "reserve",
                            property_id=prop.id,
                            status="conflict",
                            checkin=checkin.isoformat(),
                            checkout=checkout.isoformat(),
                        )
                        return conflict

                    session.add(
                        ReservationRecord(
                            id=reservation_id,
                            property_id=prop.id,
                            checkin=checkin,
                            checkout=checkout,
                            guests=guests,
                            email=email,
                            status=ReservationStatus.PENDING.value,
                        )
                    )
            except DBAPIError as e:
                if is_overlap_violation(e):
                    log_booking_operation(
                        logger, "reserve", property_id=prop.id, status="conflict", constraint=True
                    )
                    return conflict
                if is_serialization_failure(e):
                    logger.warning(
                        "Serialization failure on booking attempt %d/%d for property %s",
                        attempt,
                        max_attempts,
                        prop.id,
                    )
                    continue
                logger.exception("Database error while reserving property %s", prop.id)
                return Failure.internal(property_id=prop.id)
            except SQLAlchemyError:
                logger.exception("Database error while reserving property %s", prop.id)
                return Failure.internal(property_id=prop.id)

            log_booking_operation(
                logger,
                "reserve",
                reservation_id=reservation_id,
                property_id=prop.id,
                status=ReservationStatus.PENDING.value,
                attempt=attempt,
            )
            return reservation_id

        return conflict

    def _compensate(self, reservation_id: str) -> str | None:
        """Delete a pending reservation after a failed payment session.

        Returns:
            None on success, otherwise the error message
        """
        try:
            with self.db.session_scope() as session:
                session.execute(
                    delete(ReservationRecord).where(
                        ReservationRecord.id == reservation_id,
                        ReservationRecord.status == ReservationStatus.PENDING.value,
                    )
                )
        except SQLAlchemyError as e:
            log_booking_operation(
                logger, "compensate", reservation_id=reservation_id, error=str(e)
            )
            return str(e)

        log_booking_operation(logger, "compensate", reservation_id=reservation_id, status="deleted")
        return None

    def _description(self, prop: Property, price: PriceQuote) -> str:
        unit = "night" if price.nights == 1 else "nights"
        return f"{prop.name}: {price.checkin.isoformat()} → {price.checkout.isoformat()} · {price.nights} {unit}"

    def _success_url(self, reservation_id: str) -> str:
        # {CHECKOUT_SESSION_ID} is substituted by Stripe
        return (
            f"{self.settings.frontend_url}/success"
            f"?session_id={{CHECKOUT_SESSION_ID}}&reservation_id={quote(reservation_id)}"
        )

    def _cancel_url(self, reservation_id: str) -> str:
        return f"{self.settings.frontend_url}/cancel?reservation_id={quote(reservation_id)}"
