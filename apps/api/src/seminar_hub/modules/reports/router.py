"""
Report Router

Admin endpoints for report definitions, runs and results.
"""

import logging
from datetime import datetime

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from seminar_hub.core.auth import require_admin
from seminar_hub.core.database import get_db
from seminar_hub.core.errors import ServiceError, internal_error, to_http_exception
from seminar_hub.core.rate_limit import RATE_LIMIT_REPORT_RUN, enforce_rate_limit
from seminar_hub.modules.identity.session import Session
from seminar_hub.modules.reports import engine
from seminar_hub.modules.reports.models import ReportType
from seminar_hub.modules.reports.schemas import (
    ReportDefinitionCreate,
    ReportDefinitionListResponse,
    ReportDefinitionResponse,
    ReportResultListResponse,
    ReportResultResponse,
    ReportRunRequest,
)
from seminar_hub.modules.shared.filters import ListFilters
from seminar_hub.modules.shared.pagination import PageRequest

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("", response_model=ReportDefinitionListResponse, summary="List Reports")
async def list_reports(
    report_type: ReportType | None = Query(None, alias="type"),
    search: str | None = Query(None, max_length=100),
    skip: int = Query(0, ge=0),
    limit: int = Query(50, ge=1, le=100),
    db: AsyncSession = Depends(get_db),
    session: Session = Depends(require_admin),
) -> ReportDefinitionListResponse:
    try:
        page = await engine.list_definitions(
            db,
            session,
            ListFilters(search=search, exact={"type": report_type}),
            PageRequest(limit=limit, skip=skip),
        )
    except ServiceError as e:
        raise to_http_exception(e) from e
    except Exception as e:
        logger.exception(f"Error listing reports: {e}")
        raise internal_error() from e

    return ReportDefinitionListResponse(
        items=[ReportDefinitionResponse.model_validate(item) for item in page.items],
        has_more=page.has_more,
        limit=page.limit,
        skip=page.skip,
    )


@router.post(
    "",
    response_model=ReportDefinitionResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create Report",
    description="""
Create a report definition.

`schedule` is optional: `{enabled, frequency: daily|weekly|monthly,
dayOfWeek: 0..6}` with `dayOfWeek` (0 = Sunday) required for weekly.

**Access:** Admin only
""",
)
async def create_report(
    body: ReportDefinitionCreate,
    db: AsyncSession = Depends(get_db),
    session: Session = Depends(require_admin),
) -> ReportDefinitionResponse:
    try:
        definition = await engine.create_definition(
            db,
            session,
            name=body.name,
            report_type=body.type,
            parameters=body.parameters,
            schedule=body.schedule.model_dump(by_alias=True) if body.schedule else None,
        )
    except ServiceError as e:
        raise to_http_exception(e) from e
    return ReportDefinitionResponse.model_validate(definition)


@router.get("/{report_id}", response_model=ReportDefinitionResponse, summary="Get Report")
async def get_report(
    report_id: str,
    db: AsyncSession = Depends(get_db),
    session: Session = Depends(require_admin),
) -> ReportDefinitionResponse:
    try:
        definition = await engine.get_definition(db, session, report_id)
    except ServiceError as e:
        raise to_http_exception(e) from e
    return ReportDefinitionResponse.model_validate(definition)


@router.post(
    "/{report_id}/run",
    response_model=ReportResultResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Run Report",
    description="Generate the report now and store the result. Rate limited per admin.",
)
async def run_report(
    report_id: str,
    body: ReportRunRequest | None = None,
    db: AsyncSession = Depends(get_db),
    session: Session = Depends(require_admin),
) -> ReportResultResponse:
    await enforce_rate_limit(f"report_run:{session.principal_id}", *RATE_LIMIT_REPORT_RUN)
    try:
        result = await engine.run(db, session, report_id, body.parameters if body else None)
    except ServiceError as e:
        raise to_http_exception(e) from e
    except Exception as e:
        logger.exception(f"Error running report {report_id}: {e}")
        raise internal_error() from e
    return ReportResultResponse.model_validate(result)


@router.get(
    "/{report_id}/results",
    response_model=ReportResultListResponse,
    summary="List Report Results",
    description="Stored results for one report, newest first.",
)
async def list_report_results(
    report_id: str,
    date_from: datetime | None = Query(None, alias="dateFrom"),
    date_to: datetime | None = Query(None, alias="dateTo"),
    limit: int = Query(50, ge=1, le=100),
    db: AsyncSession = Depends(get_db),
    session: Session = Depends(require_admin),
) -> ReportResultListResponse:
    try:
        results = await engine.list_results(
            db, session, report_id, date_from=date_from, date_to=date_to, limit=limit
        )
    except ServiceError as e:
        raise to_http_exception(e) from e

    return ReportResultListResponse(
        items=[ReportResultResponse.model_validate(item) for item in results],
        total=len(results),
    )
