"""Logging configuration for hub-intake.

Provides consistent JSON structured logging across all modules.

Request-scoped fields (request_id) are bound explicitly with bind_logger()
and handed to the services; nothing is read from ambient context.
"""

import logging
import sys
from collections.abc import Mapping, MutableMapping
from datetime import datetime, timezone
from typing import Any

from pythonjsonlogger.json import JsonFormatter

from hubintake.app.config import get_settings


class IntakeJsonFormatter(JsonFormatter):
    """JSON formatter with consistent field names.

    Adds:
    - timestamp (ISO 8601, UTC)
    - level
    - logger
    - service
    """

    def __init__(self, *args: Any, service: str = "hub-intake", **kwargs: Any) -> None:
        super().__init__(*args, **kwargs)
        self._service = service

    def add_fields(
        self,
        log_record: dict[str, Any],
        record: logging.LogRecord,
        message_dict: dict[str, Any],
    ) -> None:
        super().add_fields(log_record, record, message_dict)

        log_record["timestamp"] = datetime.fromtimestamp(
            record.created, tz=timezone.utc
        ).isoformat()
        log_record["level"] = record.levelname
        log_record["logger"] = record.name
        log_record["service"] = self._service

        if record.exc_info:
            log_record["exception"] = self.formatException(record.exc_info)

        log_record.pop("levelname", None)
        log_record.pop("name", None)
        log_record.pop("color_message", None)


class BoundLogger(logging.LoggerAdapter):
    """LoggerAdapter that merges bound fields with per-call extra.

    The stock adapter replaces the caller's extra with its own; here the
    call-site fields win over the bound ones.
    """

    def process(
        self, msg: Any, kwargs: MutableMapping[str, Any]
    ) -> tuple[Any, MutableMapping[str, Any]]:
        bound: Mapping[str, Any] = self.extra or {}
        kwargs["extra"] = {**bound, **kwargs.get("extra", {})}
        return msg, kwargs


def bind_logger(logger: logging.Logger, **fields: Any) -> BoundLogger:
    """Bind structured fields (e.g. request_id) to a logger."""
    return BoundLogger(logger, fields)


def setup_logging(level: str | None = None, json_format: bool | None = None) -> None:
    """Configure logging for the application.

    Args:
        level: Log level name. If None, uses settings.logging.level.
        json_format: Emit JSON lines. If None, uses settings.logging.json_format.
    """
    settings = get_settings()
    level = level or settings.logging.level
    if json_format is None:
        json_format = settings.logging.json_format

    root_logger = logging.getLogger()

    # Clear existing handlers to avoid duplicate logs
    root_logger.handlers.clear()
    root_logger.setLevel(getattr(logging, level))

    handler = logging.StreamHandler(sys.stdout)
    handler.setLevel(getattr(logging, level))

    formatter: logging.Formatter
    if json_format:
        formatter = IntakeJsonFormatter(
            "%(message)s", service=settings.logging.service_name
        )
    else:
        formatter = logging.Formatter(
            fmt="%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )

    handler.setFormatter(formatter)
    root_logger.addHandler(handler)

    # Request logging middleware writes the canonical access line
    logging.getLogger("uvicorn.access").disabled = True

    # Reduce noise from third-party libraries
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
    logging.getLogger("aiosqlite").setLevel(logging.WARNING)
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)
