"""Tests for logging configuration."""

import json
import logging
from io import StringIO

import pytest

from hubintake.app.logging import (
    BoundLogger,
    IntakeJsonFormatter,
    bind_logger,
    setup_logging,
)


@pytest.fixture(autouse=True)
def restore_root_logger():
    """Put the root logger back the way pytest configured it."""
    root_logger = logging.getLogger()
    handlers = list(root_logger.handlers)
    level = root_logger.level
    yield
    root_logger.handlers[:] = handlers
    root_logger.setLevel(level)


def _capture(logger: logging.Logger) -> StringIO:
    stream = StringIO()
    handler = logging.StreamHandler(stream)
    handler.setFormatter(IntakeJsonFormatter("%(message)s", service="test-service"))
    logger.addHandler(handler)
    logger.setLevel(logging.DEBUG)
    logger.propagate = False
    return stream


class TestSetupLogging:
    """Tests for setup_logging function."""

    def test_configures_root_logger(self) -> None:
        setup_logging()
        root_logger = logging.getLogger()

        assert root_logger.level == logging.INFO
        assert len(root_logger.handlers) == 1

    def test_debug_level(self) -> None:
        setup_logging(level="DEBUG")

        assert logging.getLogger().level == logging.DEBUG

    def test_clears_existing_handlers(self) -> None:
        root_logger = logging.getLogger()
        root_logger.addHandler(logging.StreamHandler())
        root_logger.addHandler(logging.StreamHandler())

        setup_logging()

        assert len(root_logger.handlers) == 1

    def test_json_format_default(self) -> None:
        setup_logging()

        handler = logging.getLogger().handlers[0]
        assert isinstance(handler.formatter, IntakeJsonFormatter)

    def test_text_format(self) -> None:
        setup_logging(json_format=False)

        handler = logging.getLogger().handlers[0]
        assert not isinstance(handler.formatter, IntakeJsonFormatter)

    def test_level_from_environment(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("HUBINTAKE_LOGGING__LEVEL", "WARNING")

        setup_logging()

        assert logging.getLogger().level == logging.WARNING


class TestIntakeJsonFormatter:
    """Tests for IntakeJsonFormatter."""

    def test_json_output_format(self) -> None:
        logger = logging.getLogger("test.formatter.basic")
        stream = _capture(logger)

        logger.info("Test message")

        log_data = json.loads(stream.getvalue().strip())
        assert log_data["message"] == "Test message"
        assert log_data["level"] == "INFO"
        assert log_data["logger"] == "test.formatter.basic"
        assert log_data["service"] == "test-service"
        assert "timestamp" in log_data
        assert "levelname" not in log_data

    def test_extra_fields(self) -> None:
        logger = logging.getLogger("test.formatter.extra")
        stream = _capture(logger)

        logger.info("Item added", extra={"event": "item_added", "hub_id": "hub-1"})

        log_data = json.loads(stream.getvalue().strip())
        assert log_data["event"] == "item_added"
        assert log_data["hub_id"] == "hub-1"

    def test_exception_field(self) -> None:
        logger = logging.getLogger("test.formatter.exc")
        stream = _capture(logger)

        try:
            raise ValueError("boom")
        except ValueError:
            logger.exception("Failed")

        log_data = json.loads(stream.getvalue().strip())
        assert "ValueError: boom" in log_data["exception"]


class TestBoundLogger:
    """Tests for bind_logger / BoundLogger."""

    def test_bound_fields_in_every_record(self) -> None:
        logger = logging.getLogger("test.bound.fields")
        stream = _capture(logger)
        log = bind_logger(logger, request_id="req-1")

        log.info("first")
        log.info("second", extra={"hub_id": "hub-1"})

        first, second = (json.loads(line) for line in stream.getvalue().splitlines())
        assert first["request_id"] == "req-1"
        assert second["request_id"] == "req-1"
        assert second["hub_id"] == "hub-1"

    def test_call_site_fields_win(self) -> None:
        logger = logging.getLogger("test.bound.override")
        stream = _capture(logger)
        log = bind_logger(logger, request_id="req-1")

        log.info("override", extra={"request_id": "req-2"})

        assert json.loads(stream.getvalue())["request_id"] == "req-2"

    def test_is_logger_adapter(self) -> None:
        log = bind_logger(logging.getLogger("test.bound.type"), request_id="x")

        assert isinstance(log, BoundLogger)
        assert isinstance(log, logging.LoggerAdapter)
