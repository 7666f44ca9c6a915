"""
Report Engine

Creates report definitions, runs them on request and lists their
results. A run stores one ReportResult, moves the definition's
``last_run_at`` and records ``report_executed`` in a single write.

Schedules are stored and validated here; recurring execution lives in
``reports.jobs``.
"""

import logging
from datetime import datetime
from typing import Any

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from seminar_hub.core.database import store_errors
from seminar_hub.core.errors import ValidationFailedError
from seminar_hub.modules.audit.recorded_write import RecordedWrite
from seminar_hub.modules.identity.capabilities import EntityKind
from seminar_hub.modules.identity.session import Session
from seminar_hub.modules.reports.generators import get_generator
from seminar_hub.modules.reports.models import (
    ReportDefinition,
    ReportResult,
    ReportType,
    ScheduleFrequency,
)
from seminar_hub.modules.shared.filters import ListFilters
from seminar_hub.modules.shared.models import new_id, utc_now
from seminar_hub.modules.shared.pagination import Page, PageRequest
from seminar_hub.modules.shared.repository import TenantRepository

logger = logging.getLogger(__name__)

definitions = TenantRepository(
    ReportDefinition,
    EntityKind.REPORT,
    search_fields=("name",),
    filter_fields=("type",),
)


def parse_report_type(value: str | ReportType) -> ReportType:
    try:
        return ReportType(value)
    except ValueError as e:
        raise ValidationFailedError(
            f"Unknown report type: {value}",
            error_code="UNKNOWN_REPORT_TYPE",
        ) from e


def validate_schedule(schedule: dict[str, Any] | None) -> dict[str, Any] | None:
    """
    Check a schedule's shape and return it normalized (camelCase keys).

    Raises:
        ValidationFailedError: Unknown frequency, or a weekly schedule
            without a dayOfWeek in 0..6
    """
    if schedule is None:
        return None

    try:
        frequency = ScheduleFrequency(schedule.get("frequency", ScheduleFrequency.DAILY))
    except ValueError as e:
        raise ValidationFailedError(
            f"Unknown schedule frequency: {schedule.get('frequency')}",
            error_code="INVALID_SCHEDULE",
        ) from e

    day_of_week = schedule.get("dayOfWeek", schedule.get("day_of_week"))
    if day_of_week is not None and (
        isinstance(day_of_week, bool) or not isinstance(day_of_week, int) or not 0 <= day_of_week <= 6
    ):
        raise ValidationFailedError(
            "dayOfWeek must be an integer from 0 (Sunday) to 6 (Saturday)",
            error_code="INVALID_SCHEDULE",
        )
    if frequency == ScheduleFrequency.WEEKLY and day_of_week is None:
        raise ValidationFailedError(
            "dayOfWeek is required for weekly schedules",
            error_code="INVALID_SCHEDULE",
        )

    return {
        "enabled": bool(schedule.get("enabled", False)),
        "frequency": frequency.value,
        "dayOfWeek": day_of_week,
    }


async def create_definition(
    db: AsyncSession,
    session: Session,
    *,
    name: str,
    report_type: str | ReportType,
    parameters: dict[str, Any] | None = None,
    schedule: dict[str, Any] | None = None,
) -> ReportDefinition:
    """
    Raises:
        ValidationFailedError: Unknown type or malformed schedule
    """
    report_type = parse_report_type(report_type)
    schedule = validate_schedule(schedule)

    return await definitions.create(
        db,
        session,
        {
            "name": name,
            "type": report_type,
            "parameters": parameters or {},
            "schedule": schedule,
            "last_run_at": None,
            "created_by": session.principal_id,
        },
        details={"name": name, "type": report_type, "schedule": schedule},
    )


async def list_definitions(
    db: AsyncSession,
    session: Session,
    filters: ListFilters | None = None,
    page: PageRequest | None = None,
) -> Page[ReportDefinition]:
    return await definitions.list(db, session, filters, page)


async def get_definition(db: AsyncSession, session: Session, report_id: str) -> ReportDefinition:
    return await definitions.get_or_raise(db, session, report_id)


async def run(
    db: AsyncSession,
    session: Session,
    report_id: str,
    parameters: dict[str, Any] | None = None,
) -> ReportResult:
    """
    Generate the report now and store the result.

    Run-time ``parameters`` override the definition's stored ones for
    this run only.
    """
    definition = await definitions.get_or_raise(db, session, report_id)
    parameters = parameters or {}

    generator = get_generator(definition.type)
    result_data = await generator(
        db,
        definition.tenant_id,
        {**definition.parameters, **parameters},
    )

    now = utc_now()
    result = ReportResult(
        id=new_id(),
        report_id=definition.id,
        tenant_id=definition.tenant_id,
        result_data=result_data,
        parameters=parameters,
        run_by=session.principal_id,
        created_at=now,
    )
    definition.last_run_at = now
    definition.updated_at = now

    # ATOMIC TRANSACTION: result, last_run_at and the audit entry
    await RecordedWrite(
        action="report_executed",
        entity_type=EntityKind.REPORT.value,
        entity_id=definition.id,
        details={"resultId": result.id, "parameters": parameters},
        added=[result, definition],
    ).execute(db, session)

    logger.info(f"Report {definition.id} ({definition.type.value}) run by {session.principal_id}")
    return result


async def list_results(
    db: AsyncSession,
    session: Session,
    report_id: str,
    *,
    date_from: datetime | None = None,
    date_to: datetime | None = None,
    limit: int | None = None,
) -> list[ReportResult]:
    """Results of one definition, newest first, optionally within a date range."""
    definition = await definitions.get_or_raise(db, session, report_id)

    query = select(ReportResult).where(
        ReportResult.report_id == definition.id,
        ReportResult.tenant_id == definition.tenant_id,
    )
    if date_from is not None:
        query = query.where(ReportResult.created_at >= date_from)
    if date_to is not None:
        query = query.where(ReportResult.created_at <= date_to)
    query = query.order_by(ReportResult.created_at.desc())
    if limit is not None:
        query = query.limit(limit)

    with store_errors("list report results"):
        result = await db.execute(query)
    return list(result.scalars().all())
