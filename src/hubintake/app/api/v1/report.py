"""Hub report API endpoint."""

from datetime import UTC, datetime

from fastapi import APIRouter, Query

from hubintake.app.api.v1.dependencies import AppSettings, Reporter
from hubintake.app.schemas import ReportEntryResponse, ReportResponse
from hubintake.core.errors import InvalidRequestError

router = APIRouter(prefix="/report", tags=["report"])


def _as_utc(value: datetime) -> datetime:
    """Naive query timestamps are taken as UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value.astimezone(UTC)


@router.get("", response_model=ReportResponse)
async def get_report(
    reporter: Reporter,
    settings: AppSettings,
    start: datetime = Query(...),
    end: datetime = Query(...),
    page: int = Query(default=1, ge=1),
    limit: int | None = Query(default=None, ge=1),
) -> ReportResponse:
    """Hubs with their sessions and items registered in [start, end].

    limit defaults to report.default_limit and is capped by report.max_limit.
    """
    start = _as_utc(start)
    end = _as_utc(end)
    if start > end:
        raise InvalidRequestError("start must not be after end")

    if limit is None:
        limit = settings.report.default_limit
    if limit > settings.report.max_limit:
        raise InvalidRequestError(
            f"limit must be <= {settings.report.max_limit}, got {limit}"
        )

    entries = await reporter.generate(start, end, page, limit)
    return ReportResponse(
        items=[ReportEntryResponse.model_validate(entry) for entry in entries],
        page=page,
        limit=limit,
    )
