"""Request logging middleware.

Provides canonical log line per request with request ID propagation.
"""

import logging
import re
import time
from uuid import uuid4

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

from hubintake.app.config import get_settings
from hubintake.app.metrics.collector import HTTP_REQUEST_DURATION, HTTP_REQUESTS_TOTAL
from hubintake.core.logging_schema import LogEvent

logger = logging.getLogger(__name__)

REQUEST_ID_HEADER = "X-Request-ID"

# Path normalization patterns (replace dynamic IDs with placeholders)
_PATH_PATTERNS = [
    (re.compile(r"^/api/v1/hubs/[^/]+"), "/api/v1/hubs/:id"),
]

# Whitelist of known endpoints for metrics (cardinality control)
_KNOWN_ENDPOINTS = frozenset({
    "/api/v1/hubs",
    "/api/v1/hubs/:id/sessions",
    "/api/v1/hubs/:id/sessions/close",
    "/api/v1/hubs/:id/items",
    "/api/v1/hubs/:id/items/last",
    "/api/v1/report",
})

_SKIP_PATHS = ("/health", "/metrics")


def _normalize_path(path: str) -> str:
    """Normalize path and apply whitelist for cardinality control."""
    for pattern, replacement in _PATH_PATTERNS:
        path = pattern.sub(replacement, path)
    return path if path in _KNOWN_ENDPOINTS else "other"


def _record_http_metrics(
    method: str, path: str, status: int, duration_seconds: float
) -> None:
    endpoint = _normalize_path(path)
    HTTP_REQUESTS_TOTAL.labels(
        method=method,
        endpoint=endpoint,
        status=str(status),
    ).inc()
    HTTP_REQUEST_DURATION.labels(method=method, endpoint=endpoint).observe(
        duration_seconds
    )


class LoggingMiddleware(BaseHTTPMiddleware):
    """Middleware for request logging with request ID propagation.

    Features:
    - Takes request_id from X-Request-ID header or generates a new one
    - Stores it on request.state for the request-bound service logger
    - Logs canonical request log line (one per request)
    - Records HTTP request count and latency
    - Adds X-Request-ID header to response

    Usage:
        app.add_middleware(LoggingMiddleware)
    """

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        request_id = request.headers.get(REQUEST_ID_HEADER) or str(uuid4())
        request.state.request_id = request_id
        path = request.url.path

        start = time.monotonic()
        try:
            response = await call_next(request)
        except Exception:
            duration_seconds = time.monotonic() - start
            duration_ms = duration_seconds * 1000
            if path not in _SKIP_PATHS:
                _record_http_metrics(request.method, path, 500, duration_seconds)
            logger.error(
                "Request failed",
                extra={
                    "event": LogEvent.REQUEST_FAILED,
                    "method": request.method,
                    "path": path,
                    "duration_ms": duration_ms,
                    "request_id": request_id,
                },
            )
            raise

        duration_seconds = time.monotonic() - start
        duration_ms = duration_seconds * 1000

        if path not in _SKIP_PATHS:
            _record_http_metrics(
                request.method, path, response.status_code, duration_seconds
            )

            logger.info(
                "Request completed",
                extra={
                    "event": LogEvent.REQUEST_COMPLETE,
                    "method": request.method,
                    "path": path,
                    "status": response.status_code,
                    "duration_ms": duration_ms,
                    "request_id": request_id,
                },
            )

            threshold_ms = get_settings().logging.slow_threshold_ms
            if duration_ms > threshold_ms:
                logger.warning(
                    "Slow request detected",
                    extra={
                        "event": LogEvent.REQUEST_SLOW,
                        "method": request.method,
                        "path": path,
                        "status": response.status_code,
                        "duration_ms": duration_ms,
                        "threshold_ms": threshold_ms,
                        "request_id": request_id,
                    },
                )

        response.headers[REQUEST_ID_HEADER] = request_id
        return response
