"""SQLAlchemy table mappings for properties and reservations.

The reservations table carries the non-overlap invariant as a PostgreSQL
exclusion constraint over (property_id, [checkin, checkout)) restricted to
blocking statuses. Other dialects rely on the serialized booking transaction
in ``BookingService``.
"""

import datetime as dt
import uuid

from sqlalchemy import (
    DDL,
    CheckConstraint,
    Date,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    String,
    event,
    func,
    literal_column,
)
from sqlalchemy.dialects.postgresql import ExcludeConstraint
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column

from staybook.models.enums import BLOCKING_STATUSES, ReservationStatus

OVERLAP_CONSTRAINT_NAME = "ex_reservations_no_overlap"


def _new_id() -> str:
    return str(uuid.uuid4())


def _utcnow() -> dt.datetime:
    return dt.datetime.now(dt.UTC)


class Base(DeclarativeBase):
    pass


class PropertyRecord(Base):
    __tablename__ = "properties"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_new_id)
    slug: Mapped[str] = mapped_column(String(128), unique=True, index=True)
    name: Mapped[str] = mapped_column(String(255))
    currency: Mapped[str | None] = mapped_column(String(3), default="EUR")
    price_per_night_cents: Mapped[int] = mapped_column(Integer, default=0)


class ReservationRecord(Base):
    __tablename__ = "reservations"
    __table_args__ = (
        CheckConstraint("checkout > checkin", name="ck_reservations_range"),
        Index("ix_reservations_property_checkin", "property_id", "checkin"),
    )

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_new_id)
    property_id: Mapped[str] = mapped_column(ForeignKey("properties.id"))
    checkin: Mapped[dt.date] = mapped_column(Date)
    checkout: Mapped[dt.date] = mapped_column(Date)
    guests: Mapped[int] = mapped_column(Integer, default=1)
    email: Mapped[str] = mapped_column(String(320))
    status: Mapped[str] = mapped_column(String(16), default=ReservationStatus.PENDING.value)
    created_at: Mapped[dt.datetime] = mapped_column(DateTime(timezone=True), default=_utcnow)


_reservations = ReservationRecord.__table__
_reservations.append_constraint(
    ExcludeConstraint(
        (_reservations.c.property_id, "="),
        (
            func.daterange(
                _reservations.c.checkin,
                _reservations.c.checkout,
                literal_column("'[)'"),
            ),
            "&&",
        ),
        name=OVERLAP_CONSTRAINT_NAME,
        using="gist",
        where=_reservations.c.status.in_([s.value for s in BLOCKING_STATUSES]),
    ).ddl_if(dialect="postgresql")
)

# gist equality on a plain column needs btree_gist
event.listen(
    Base.metadata,
    "before_create",
    DDL("CREATE EXTENSION IF NOT EXISTS btree_gist").execute_if(dialect="postgresql"),
)
