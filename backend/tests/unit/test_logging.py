"""Unit tests for correlation-aware logging."""

import logging

import pytest

from staybook.utils.logging import (
    LOG_FORMAT,
    CorrelationIdFilter,
    clear_correlation_id,
    configure_logging,
    get_correlation_id,
    get_logger,
    log_booking_operation,
    log_webhook_event,
    set_correlation_id,
)


@pytest.fixture(autouse=True)
def _clear_correlation():
    clear_correlation_id()
    yield
    clear_correlation_id()


class TestCorrelationId:
    def test_keeps_incoming_id(self):
        assert set_correlation_id("req-123") == "req-123"
        assert get_correlation_id() == "req-123"

    def test_generates_when_missing(self):
        cid = set_correlation_id(None)

        assert cid
        assert get_correlation_id() == cid

    def test_clear(self):
        set_correlation_id("req-123")
        clear_correlation_id()

        assert get_correlation_id() is None


class TestFilter:
    def test_stamps_current_id(self):
        set_correlation_id("req-abc")
        record = logging.LogRecord("staybook", logging.INFO, __file__, 1, "hello", None, None)
        CorrelationIdFilter().filter(record)

        output = logging.Formatter("%(levelname)s [%(correlation_id)s] %(message)s").format(record)

        assert output == "INFO [req-abc] hello"

    def test_placeholder_without_context(self):
        record = logging.LogRecord("staybook", logging.INFO, __file__, 1, "hello", None, None)
        CorrelationIdFilter().filter(record)

        assert record.correlation_id == "-"

    def test_get_logger_adds_filter_once(self):
        logger = get_logger("staybook.test.once")
        get_logger("staybook.test.once")

        assert sum(isinstance(f, CorrelationIdFilter) for f in logger.filters) == 1


class TestConfigureLogging:
    def test_installs_one_handler(self):
        root = logging.getLogger()
        before = list(root.handlers)
        level = root.level
        try:
            configure_logging("DEBUG")
            configure_logging("WARNING")

            added = [h for h in root.handlers if h not in before]
            assert len(added) <= 1
            assert root.level == logging.WARNING
            for handler in added:
                assert handler.formatter._fmt == LOG_FORMAT
        finally:
            for handler in [h for h in root.handlers if h not in before]:
                root.removeHandler(handler)
            root.setLevel(level)


class TestBookingOperationLog:
    def test_info_with_fields(self, caplog):
        logger = get_logger("staybook.test.booking")

        with caplog.at_level(logging.INFO, logger="staybook.test.booking"):
            log_booking_operation(
                logger,
                "reserve",
                reservation_id="r1",
                property_id="p1",
                amount_cents=None,
                status="pending",
            )

        record = caplog.records[-1]
        assert record.levelno == logging.INFO
        assert record.getMessage() == "booking reserve reservation_id=r1 property_id=p1 status=pending"
        assert record.booking == {
            "operation": "reserve",
            "reservation_id": "r1",
            "property_id": "p1",
            "status": "pending",
        }

    def test_error_level_when_failed(self, caplog):
        logger = get_logger("staybook.test.booking")

        with caplog.at_level(logging.INFO, logger="staybook.test.booking"):
            log_booking_operation(logger, "compensate", reservation_id="r1", error="db down")

        record = caplog.records[-1]
        assert record.levelno == logging.ERROR
        assert record.getMessage() == "booking compensate failed: db down reservation_id=r1"
        assert record.booking["error"] == "db down"


class TestWebhookEventLog:
    @pytest.mark.parametrize(
        ("result", "level"),
        [
            ("success", logging.INFO),
            ("duplicate", logging.WARNING),
            ("skipped", logging.WARNING),
            ("error", logging.ERROR),
        ],
    )
    def test_level_follows_result(self, caplog, result: str, level: int):
        logger = get_logger("staybook.test.webhook")

        with caplog.at_level(logging.INFO, logger="staybook.test.webhook"):
            log_webhook_event(
                logger, "checkout.session.completed", "evt_1", reservation_id="r1", result=result
            )

        record = caplog.records[-1]
        assert record.levelno == level
        assert record.webhook["event_id"] == "evt_1"
        assert f"result={result}" in record.getMessage()
        assert "reservation_id=r1" in record.getMessage()
