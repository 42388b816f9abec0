"""HTTP middleware."""

from hubintake.app.middleware.logging import LoggingMiddleware

__all__ = ["LoggingMiddleware"]
