"""
Report Generators

One async callable per report type, computing the result payload for a
tenant. Types without a data source yet return their empty shape.

Register replacements with ``register_generator``.
"""

import logging
from collections import Counter
from collections.abc import Awaitable, Callable
from datetime import timedelta
from typing import Any

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from seminar_hub.core.database import store_errors
from seminar_hub.modules.audit.models import AuditLogEntry
from seminar_hub.modules.audit.service import summarize
from seminar_hub.modules.reports.models import ReportType
from seminar_hub.modules.shared.models import utc_now
from seminar_hub.modules.users.models import User

logger = logging.getLogger(__name__)

Generator = Callable[[AsyncSession, str, dict[str, Any]], Awaitable[dict[str, Any]]]

RECENT_REGISTRATIONS_LIMIT = 10
DEFAULT_USAGE_WINDOW_DAYS = 30


async def user_summary(db: AsyncSession, tenant_id: str, parameters: dict[str, Any]) -> dict[str, Any]:
    """User counts by role and status, plus the latest registrations."""
    with store_errors("user_summary report"):
        rows = (
            await db.execute(
                select(User.role, User.status, func.count())
                .where(User.tenant_id == tenant_id)
                .group_by(User.role, User.status)
            )
        ).all()
        recent = (
            await db.execute(
                select(User.id, User.display_name, User.role, User.created_at)
                .where(User.tenant_id == tenant_id)
                .order_by(User.created_at.desc())
                .limit(RECENT_REGISTRATIONS_LIMIT)
            )
        ).all()

    by_role: Counter[str] = Counter()
    by_status: Counter[str] = Counter()
    for role, status, count in rows:
        by_role[getattr(role, "value", role) or "unknown"] += count
        by_status[getattr(status, "value", status) or "unknown"] += count

    return {
        "totalUsers": sum(by_role.values()),
        "byRole": dict(by_role),
        "byStatus": dict(by_status),
        "recentRegistrations": [
            {
                "id": row.id,
                "displayName": row.display_name,
                "role": getattr(row.role, "value", row.role),
                "createdAt": row.created_at.isoformat(),
            }
            for row in recent
        ],
    }


async def credit_tracking(db: AsyncSession, tenant_id: str, parameters: dict[str, Any]) -> dict[str, Any]:
    return {
        "totalCreditsAwarded": 0,
        "creditsByType": {},
        "studentProgress": [],
        "deficiencies": [],
    }


async def attendance_summary(db: AsyncSession, tenant_id: str, parameters: dict[str, Any]) -> dict[str, Any]:
    return {
        "overallAttendanceRate": 0,
        "attendanceByClass": {},
        "attendanceTrends": [],
        "absenteeism": [],
    }


async def system_usage(db: AsyncSession, tenant_id: str, parameters: dict[str, Any]) -> dict[str, Any]:
    """
    Activity over the last ``days`` (default 30) from the audit log.

    Success/failure counts use the same classification as the audit
    log statistics.
    """
    days = int(parameters.get("days") or DEFAULT_USAGE_WINDOW_DAYS)
    since = utc_now() - timedelta(days=days)

    with store_errors("system_usage report"):
        rows = (
            await db.execute(
                select(AuditLogEntry.actor_id, AuditLogEntry.action, AuditLogEntry.entity_type).where(
                    AuditLogEntry.tenant_id == tenant_id,
                    AuditLogEntry.created_at >= since,
                )
            )
        ).all()

    stats = summarize([row.action for row in rows])
    total = stats["total"]
    return {
        "windowDays": days,
        "activeUsers": len({row.actor_id for row in rows if row.actor_id}),
        "featureUsage": dict(Counter(row.entity_type for row in rows)),
        "performanceMetrics": {},
        "errorRates": {
            "total": total,
            "success": stats["success"],
            "failures": stats["failures"],
            "failureRate": round(stats["failures"] / total, 4) if total else 0,
        },
    }


_GENERATORS: dict[ReportType, Generator] = {
    ReportType.USER_SUMMARY: user_summary,
    ReportType.CREDIT_TRACKING: credit_tracking,
    ReportType.ATTENDANCE_SUMMARY: attendance_summary,
    ReportType.SYSTEM_USAGE: system_usage,
}


def register_generator(report_type: ReportType, generator: Generator) -> None:
    """Replace the generator for a report type."""
    _GENERATORS[report_type] = generator
    logger.info(f"Registered report generator for {report_type.value}")


def get_generator(report_type: ReportType) -> Generator:
    return _GENERATORS[report_type]
