"""FastAPI application entry point."""

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy import text

from hubintake import __version__
from hubintake.app.api.v1 import (
    hubs_router,
    items_router,
    report_router,
    sessions_router,
)
from hubintake.app.config import get_settings
from hubintake.app.logging import setup_logging
from hubintake.app.metrics import get_metrics_response
from hubintake.app.middleware import LoggingMiddleware
from hubintake.app.middleware.logging import REQUEST_ID_HEADER
from hubintake.core.errors import IntakeError, InternalError, InvalidRequestError
from hubintake.core.logging_schema import LogEvent
from hubintake.infra import close_db, get_engine, init_db

setup_logging()
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(_app: FastAPI) -> AsyncIterator[None]:
    settings = get_settings()
    await init_db(settings.database)

    logger.info(
        "Starting application",
        extra={"event": LogEvent.APP_STARTED, "version": __version__},
    )

    yield

    logger.info("Shutting down application", extra={"event": LogEvent.APP_STOPPED})
    await close_db()


app = FastAPI(title="Hub Intake", version=__version__, lifespan=lifespan)
app.add_middleware(LoggingMiddleware)


@app.exception_handler(IntakeError)
async def intake_error_handler(_request: Request, exc: IntakeError) -> JSONResponse:
    """Handle IntakeError exceptions and return standardized error responses."""
    return JSONResponse(
        status_code=exc.status_code,
        content=exc.to_response().model_dump(),
    )


@app.exception_handler(RequestValidationError)
async def validation_error_handler(
    _request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Report malformed requests as INVALID_REQUEST."""
    errors = exc.errors()
    error = InvalidRequestError()
    if errors:
        location = ".".join(str(part) for part in errors[0].get("loc", ()))
        error = InvalidRequestError(f"{location}: {errors[0].get('msg', 'invalid value')}")
    return JSONResponse(
        status_code=error.status_code,
        content=error.to_response().model_dump(),
    )


@app.exception_handler(Exception)
async def generic_error_handler(request: Request, exc: Exception) -> JSONResponse:
    """Handle unexpected exceptions and return standardized error responses.

    Runs outside LoggingMiddleware, so the request id header is set here.
    """
    logger.exception("Unexpected error: %s", exc)
    error = InternalError()
    request_id = getattr(request.state, "request_id", None)
    return JSONResponse(
        status_code=error.status_code,
        content=error.to_response().model_dump(),
        headers={REQUEST_ID_HEADER: request_id} if request_id else None,
    )


app.include_router(hubs_router, prefix="/api/v1")
app.include_router(sessions_router, prefix="/api/v1")
app.include_router(items_router, prefix="/api/v1")
app.include_router(report_router, prefix="/api/v1")


async def _check_postgres() -> str:
    try:
        engine = get_engine()
        async with engine.connect() as conn:
            await conn.execute(text("SELECT 1"))
    except RuntimeError:
        return "not initialized"
    except Exception as e:
        return f"error: {e}"
    return "connected"


@app.get("/health")
async def health() -> dict[str, object]:
    database = await _check_postgres()
    return {
        "status": "ok" if database == "connected" else "degraded",
        "version": __version__,
        "services": {"database": database},
    }


@app.get("/metrics", include_in_schema=False)
async def metrics():
    """Prometheus metrics endpoint."""
    return get_metrics_response()


def run() -> None:
    """Run the API server with uvicorn."""
    import uvicorn

    uvicorn.run("hubintake.app.main:app", host="0.0.0.0", port=8080)
