"""
Report Background Jobs

Runs scheduled report definitions when they are due.

A definition is due when its schedule is enabled and:
- daily: it has not run yet today
- weekly: today is its ``dayOfWeek`` (0 = Sunday) and it has not run today
- monthly: it has not run yet this calendar month

The job is idempotent within a day: a run moves ``last_run_at``, so a
second pass the same day finds nothing due. Each report runs in its own
database session with a system Session of its tenant; one failing
report does not stop the others.
"""

import logging
from datetime import UTC, datetime
from typing import Any

from apscheduler.triggers.interval import IntervalTrigger
from sqlalchemy import select

from seminar_hub.core.config import settings
from seminar_hub.core.database import async_session_maker
from seminar_hub.core.scheduler import register_job
from seminar_hub.modules.identity.session import Session
from seminar_hub.modules.reports import engine
from seminar_hub.modules.reports.models import ReportDefinition, ScheduleFrequency

logger = logging.getLogger(__name__)

JOB_ID_RUN_DUE_REPORTS = "reports_run_due"
SYSTEM_ACTOR = "report_scheduler"


def js_weekday(moment: datetime) -> int:
    """Day of week with 0 = Sunday ... 6 = Saturday."""
    return (moment.weekday() + 1) % 7


def is_due(schedule: dict[str, Any] | None, last_run_at: datetime | None, now: datetime) -> bool:
    if not schedule or not schedule.get("enabled"):
        return False

    ran_today = last_run_at is not None and last_run_at.astimezone(UTC).date() == now.date()
    frequency = schedule.get("frequency")

    if frequency == ScheduleFrequency.DAILY.value:
        return not ran_today
    if frequency == ScheduleFrequency.WEEKLY.value:
        return js_weekday(now) == schedule.get("dayOfWeek") and not ran_today
    if frequency == ScheduleFrequency.MONTHLY.value:
        if last_run_at is None:
            return True
        last = last_run_at.astimezone(UTC)
        return (last.year, last.month) != (now.year, now.month)

    logger.warning(f"Unknown schedule frequency: {frequency}")
    return False


async def _run_one(definition_id: str, tenant_id: str) -> dict[str, Any]:
    session = Session.system(tenant_id, SYSTEM_ACTOR)
    async with async_session_maker() as db:
        result = await engine.run(db, session, definition_id)
    return {"report_id": definition_id, "status": "executed", "result_id": result.id}


async def run_due_reports(now: datetime | None = None) -> dict[str, Any]:
    """
    Run every enabled definition that is due.

    Returns:
        Dict with executed_at, per-report results and error count
    """
    now = now or datetime.now(UTC)
    results: dict[str, Any] = {
        "executed_at": now.isoformat(),
        "reports": [],
        "total_executed": 0,
        "total_errors": 0,
    }

    async with async_session_maker() as db:
        rows = (
            await db.execute(
                select(
                    ReportDefinition.id,
                    ReportDefinition.tenant_id,
                    ReportDefinition.schedule,
                    ReportDefinition.last_run_at,
                )
            )
        ).all()

    due = [row for row in rows if is_due(row.schedule, row.last_run_at, now)]
    logger.info(f"Found {len(due)} scheduled reports due out of {len(rows)} definitions")

    for row in due:
        try:
            results["reports"].append(await _run_one(row.id, row.tenant_id))
            results["total_executed"] += 1
        except Exception as e:
            logger.error(f"Error running scheduled report {row.id}: {e}", exc_info=True)
            results["reports"].append({"report_id": row.id, "status": "error", "error": str(e)})
            results["total_errors"] += 1

    logger.info(
        f"Scheduled report job completed. "
        f"Executed: {results['total_executed']}, Errors: {results['total_errors']}"
    )
    return results


def register_report_jobs() -> None:
    """Register the due-report job; call before the scheduler starts."""
    if not settings.report_scheduler_enabled:
        logger.info("Report scheduler disabled, not registering jobs")
        return

    interval = settings.report_scheduler_interval_minutes
    register_job(
        job_id=JOB_ID_RUN_DUE_REPORTS,
        func=run_due_reports,
        trigger=IntervalTrigger(minutes=interval),
    )
    logger.info(f"Registered job: {JOB_ID_RUN_DUE_REPORTS} (interval: {interval} minutes)")
