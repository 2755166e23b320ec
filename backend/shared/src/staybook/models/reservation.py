"""Reservation views exposed by the booking core."""

import datetime as dt

from pydantic import BaseModel, ConfigDict

from .enums import ReservationStatus


class OccupiedRange(BaseModel):
    """A blocking reservation as exposed by the availability view."""

    model_config = ConfigDict(strict=True)

    id: str
    checkin: dt.date
    checkout: dt.date
    status: ReservationStatus
