"""Logging with a per-request correlation ID.

The API middleware sets the ID for each request; every record emitted while
the request is handled carries it as ``record.correlation_id`` and the
console format prints it.

Booking and webhook outcomes are logged through ``log_booking_operation``
and ``log_webhook_event`` so they share one greppable shape, e.g.::

    booking reserve property_id=villa-x reservation_id=3f7c... status=pending
"""

import logging
import uuid
from contextvars import ContextVar
from typing import Any

_correlation_id: ContextVar[str | None] = ContextVar("correlation_id", default=None)

NO_CORRELATION_ID = "-"
LOG_FORMAT = "%(asctime)s %(levelname)s [%(correlation_id)s] %(name)s: %(message)s"


def set_correlation_id(correlation_id: str | None = None) -> str:
    """Bind the request's correlation ID, generating one if the client sent none."""
    cid = correlation_id or uuid.uuid4().hex
    _correlation_id.set(cid)
    return cid


def get_correlation_id() -> str | None:
    return _correlation_id.get()


def clear_correlation_id() -> None:
    _correlation_id.set(None)


class _ConsoleHandler(logging.StreamHandler):
    pass


class CorrelationIdFilter(logging.Filter):
    """Stamp records with the current correlation ID."""

    def filter(self, record: logging.LogRecord) -> bool:
        record.correlation_id = get_correlation_id() or NO_CORRELATION_ID
        return True


def configure_logging(level: str = "INFO") -> None:
    """Send records to stderr in ``LOG_FORMAT``; repeated calls only change the level."""
    root = logging.getLogger()
    root.setLevel(level)

    if any(isinstance(h, _ConsoleHandler) for h in root.handlers):
        return

    handler = _ConsoleHandler()
    handler.addFilter(CorrelationIdFilter())
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    root.addHandler(handler)


def get_logger(name: str) -> logging.Logger:
    """Module logger whose records carry the correlation ID."""
    logger = logging.getLogger(name)
    if not any(isinstance(f, CorrelationIdFilter) for f in logger.filters):
        logger.addFilter(CorrelationIdFilter())
    return logger


def _render(fields: dict[str, Any]) -> str:
    return " ".join(f"{key}={value}" for key, value in fields.items())


def log_booking_operation(
    logger: logging.Logger,
    operation: str,
    *,
    error: str | None = None,
    **fields: Any,
) -> None:
    """Log one step of the booking flow (reserve, create_payment_session, compensate).

    ``None`` fields are dropped. A set ``error`` logs at ERROR level. The
    fields are also attached to the record as ``record.booking``.
    """
    present = {key: value for key, value in fields.items() if value is not None}
    extra = {"booking": {"operation": operation, **present}}

    if error is None:
        logger.info("booking %s %s", operation, _render(present), extra=extra)
    else:
        extra["booking"]["error"] = error
        logger.error("booking %s failed: %s %s", operation, error, _render(present), extra=extra)


_WEBHOOK_LEVELS = {
    "success": logging.INFO,
    "duplicate": logging.WARNING,
    "skipped": logging.WARNING,
    "error": logging.ERROR,
}


def log_webhook_event(
    logger: logging.Logger,
    event_type: str,
    event_id: str,
    *,
    result: str,
    reservation_id: str | None = None,
    error: str | None = None,
) -> None:
    """Log how a Stripe event was applied; the level follows ``result``."""
    webhook = {
        "event_type": event_type,
        "event_id": event_id,
        "result": result,
        "reservation_id": reservation_id,
    }
    message = f"webhook {event_type} {event_id} result={result}"
    if reservation_id:
        message += f" reservation_id={reservation_id}"
    if error:
        webhook["error"] = error
        message += f" error={error}"

    logger.log(_WEBHOOK_LEVELS.get(result, logging.INFO), message, extra={"webhook": webhook})
