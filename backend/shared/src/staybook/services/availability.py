"""Availability service: which blocking reservations overlap a date range."""

import datetime as dt

from sqlalchemy import ColumnElement, not_, or_, select
from sqlalchemy.orm import Session

from staybook.models import BLOCKING_STATUSES, OccupiedRange, ReservationStatus

from .database import DatabaseService
from .tables import ReservationRecord


def ranges_overlap(
    a_start: dt.date,
    a_end: dt.date,
    b_start: dt.date,
    b_end: dt.date,
) -> bool:
    """Whether half-open ranges [a_start, a_end) and [b_start, b_end) intersect."""
    return not (a_end <= b_start or a_start >= b_end)


def _overlap_condition(start_date: dt.date, end_date: dt.date) -> ColumnElement[bool]:
    # SQL form of ranges_overlap against the stored reservation range
    return not_(
        or_(
            ReservationRecord.checkout <= start_date,
            ReservationRecord.checkin >= end_date,
        )
    )


class AvailabilityService:
    """Service for availability checking.

    Used both by the public availability view and, inside the booking
    transaction, as the conflict guard.
    """

    def __init__(self, db: DatabaseService) -> None:
        """Initialize availability service.

        Args:
            db: Database service instance
        """
        self.db = db

    def get_occupied(
        self,
        property_id: str,
        start_date: dt.date,
        end_date: dt.date,
    ) -> list[OccupiedRange]:
        """Get blocking reservations overlapping a date range.

        Args:
            property_id: Property to check
            start_date: Start of range
            end_date: End of range (exclusive)

        Returns:
            Overlapping pending/paid reservations ordered by checkin
        """
        with self.db.session_scope() as session:
            return self.find_overlapping(session, property_id, start_date, end_date)

    def find_overlapping(
        self,
        session: Session,
        property_id: str,
        start_date: dt.date,
        end_date: dt.date,
    ) -> list[OccupiedRange]:
        """Query overlapping blocking reservations within an existing session.

        An empty or inverted query range overlaps nothing.
        """
        if end_date <= start_date:
            return []

        stmt = (
            select(ReservationRecord)
            .where(
                ReservationRecord.property_id == property_id,
                ReservationRecord.status.in_([s.value for s in BLOCKING_STATUSES]),
                _overlap_condition(start_date, end_date),
            )
            .order_by(ReservationRecord.checkin.asc())
        )
        return [self._record_to_range(r) for r in session.scalars(stmt)]

    def has_conflict(
        self,
        session: Session,
        property_id: str,
        start_date: dt.date,
        end_date: dt.date,
    ) -> bool:
        """Whether any blocking reservation overlaps the range."""
        stmt = (
            select(ReservationRecord.id)
            .where(
                ReservationRecord.property_id == property_id,
                ReservationRecord.status.in_([s.value for s in BLOCKING_STATUSES]),
                _overlap_condition(start_date, end_date),
            )
            .limit(1)
        )
        return session.scalars(stmt).first() is not None

    def _record_to_range(self, record: ReservationRecord) -> OccupiedRange:
        return OccupiedRange(
            id=record.id,
            checkin=record.checkin,
            checkout=record.checkout,
            status=ReservationStatus(record.status),
        )
