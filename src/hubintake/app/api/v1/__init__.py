"""API v1 module."""

from hubintake.app.api.v1.hubs import router as hubs_router
from hubintake.app.api.v1.items import router as items_router
from hubintake.app.api.v1.report import router as report_router
from hubintake.app.api.v1.sessions import router as sessions_router

__all__ = ["hubs_router", "items_router", "report_router", "sessions_router"]
