"""
Tests for report definitions, runs and generators.
"""

from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from seminar_hub.core.errors import PermissionDeniedError, ValidationFailedError
from seminar_hub.modules.audit.models import AuditLogEntry
from seminar_hub.modules.reports import engine, generators
from seminar_hub.modules.reports.models import ReportDefinition, ReportResult, ReportType
from seminar_hub.modules.reports.schemas import ReportSchedule


def _definition(tenant_id: str, report_type=ReportType.CREDIT_TRACKING, **overrides):
    values = {
        "id": "report-1",
        "tenant_id": tenant_id,
        "name": "Fall credits",
        "type": report_type,
        "parameters": {"term": "fall"},
        "schedule": None,
        "last_run_at": None,
        "created_by": "admin-1",
    }
    values.update(overrides)
    return ReportDefinition(**values)


def _all_result(rows):
    result = MagicMock()
    result.all.return_value = list(rows)
    return result


# ============================================
# Schedules
# ============================================


@pytest.mark.parametrize(
    ("schedule", "expected"),
    [
        (None, None),
        (
            {"enabled": True, "frequency": "daily"},
            {"enabled": True, "frequency": "daily", "dayOfWeek": None},
        ),
        (
            {"enabled": True, "frequency": "weekly", "dayOfWeek": 0},
            {"enabled": True, "frequency": "weekly", "dayOfWeek": 0},
        ),
        (
            {"frequency": "monthly", "day_of_week": 6},
            {"enabled": False, "frequency": "monthly", "dayOfWeek": 6},
        ),
    ],
)
def test_validate_schedule(schedule, expected):
    assert engine.validate_schedule(schedule) == expected


@pytest.mark.parametrize(
    "schedule",
    [
        {"enabled": True, "frequency": "hourly"},
        {"enabled": True, "frequency": "weekly"},
        {"enabled": True, "frequency": "weekly", "dayOfWeek": 7},
        {"enabled": True, "frequency": "weekly", "dayOfWeek": "monday"},
        {"enabled": True, "frequency": "weekly", "dayOfWeek": True},
    ],
)
def test_validate_schedule_rejects(schedule):
    with pytest.raises(ValidationFailedError) as exc_info:
        engine.validate_schedule(schedule)
    assert exc_info.value.error_code == "INVALID_SCHEDULE"


def test_schedule_schema_requires_day_for_weekly():
    with pytest.raises(ValueError):
        ReportSchedule(enabled=True, frequency="weekly")


def test_unknown_report_type():
    with pytest.raises(ValidationFailedError) as exc_info:
        engine.parse_report_type("grade_distribution")
    assert exc_info.value.error_code == "UNKNOWN_REPORT_TYPE"


# ============================================
# Definitions
# ============================================


@pytest.mark.asyncio
async def test_create_definition(mock_db, admin_session):
    definition = await engine.create_definition(
        mock_db,
        admin_session,
        name="Weekly usage",
        report_type="system_usage",
        schedule={"enabled": True, "frequency": "weekly", "dayOfWeek": 1},
    )

    assert definition.type == ReportType.SYSTEM_USAGE
    assert definition.tenant_id == admin_session.tenant_id
    assert definition.created_by == admin_session.principal_id
    assert definition.last_run_at is None
    assert definition.schedule == {"enabled": True, "frequency": "weekly", "dayOfWeek": 1}
    [entry] = [c.args[0] for c in mock_db.add.call_args_list if isinstance(c.args[0], AuditLogEntry)]
    assert entry.action == "report_created"


@pytest.mark.asyncio
async def test_reports_are_admin_only(mock_db, specialist_session):
    with pytest.raises(PermissionDeniedError):
        await engine.create_definition(
            mock_db, specialist_session, name="Usage", report_type="system_usage"
        )


# ============================================
# Runs
# ============================================


@pytest.mark.asyncio
async def test_run_stores_result_and_audits_once(mock_db, admin_session, tenant_id):
    definition = _definition(tenant_id)
    mock_db.get.return_value = definition

    result = await engine.run(mock_db, admin_session, "report-1", {"studentId": "s-1"})

    assert result.report_id == "report-1"
    assert result.tenant_id == tenant_id
    assert result.run_by == admin_session.principal_id
    assert result.parameters == {"studentId": "s-1"}
    assert result.result_data["totalCreditsAwarded"] == 0
    assert definition.last_run_at == result.created_at

    added = [c.args[0] for c in mock_db.add.call_args_list]
    assert result in added
    assert definition in added
    [entry] = [obj for obj in added if isinstance(obj, AuditLogEntry)]
    assert entry.action == "report_executed"
    assert entry.entity_id == "report-1"
    assert entry.details == {"resultId": result.id, "parameters": {"studentId": "s-1"}}
    mock_db.commit.assert_awaited_once()


@pytest.mark.asyncio
async def test_run_parameters_override_stored_ones(mock_db, admin_session, tenant_id):
    mock_db.get.return_value = _definition(
        tenant_id, ReportType.USER_SUMMARY, parameters={"term": "fall", "limit": 5}
    )
    fake = AsyncMock(return_value={"ok": True})

    with patch.dict(generators._GENERATORS, {ReportType.USER_SUMMARY: fake}):
        result = await engine.run(mock_db, admin_session, "report-1", {"term": "spring"})

    fake.assert_awaited_once_with(mock_db, tenant_id, {"term": "spring", "limit": 5})
    assert result.result_data == {"ok": True}


@pytest.mark.asyncio
async def test_failed_run_writes_nothing(mock_db, admin_session, tenant_id):
    mock_db.get.return_value = _definition(tenant_id, ReportType.USER_SUMMARY)
    fake = AsyncMock(side_effect=RuntimeError("boom"))

    with patch.dict(generators._GENERATORS, {ReportType.USER_SUMMARY: fake}):
        with pytest.raises(RuntimeError):
            await engine.run(mock_db, admin_session, "report-1")

    mock_db.add.assert_not_called()
    mock_db.commit.assert_not_called()


@pytest.mark.asyncio
async def test_run_other_tenant_definition_refused(mock_db, foreign_admin_session, tenant_id):
    mock_db.get.return_value = _definition(tenant_id)

    with pytest.raises(PermissionDeniedError):
        await engine.run(mock_db, foreign_admin_session, "report-1")


@pytest.mark.asyncio
async def test_list_results_newest_first(mock_db, rows_result, admin_session, tenant_id):
    mock_db.get.return_value = _definition(tenant_id)
    rows = [ReportResult(id="r2", report_id="report-1"), ReportResult(id="r1", report_id="report-1")]
    mock_db.execute.return_value = rows_result(rows)

    results = await engine.list_results(mock_db, admin_session, "report-1", limit=2)

    assert [r.id for r in results] == ["r2", "r1"]
    sql = str(mock_db.execute.await_args.args[0])
    assert "ORDER BY report_results.created_at DESC" in sql


# ============================================
# Generators
# ============================================


@pytest.mark.asyncio
async def test_system_usage_counts_failures(mock_db, tenant_id):
    mock_db.execute.return_value = _all_result(
        [
            SimpleNamespace(actor_id="a-1", action="user_created", entity_type="user"),
            SimpleNamespace(actor_id="a-1", action="login_failed", entity_type="user"),
            SimpleNamespace(actor_id="a-2", action="report_executed", entity_type="report"),
            SimpleNamespace(actor_id=None, action="sync_error", entity_type="report"),
        ]
    )

    data = await generators.system_usage(mock_db, tenant_id, {"days": 7})

    assert data["windowDays"] == 7
    assert data["activeUsers"] == 2
    assert data["featureUsage"] == {"user": 2, "report": 2}
    assert data["errorRates"] == {"total": 4, "success": 2, "failures": 2, "failureRate": 0.5}


@pytest.mark.asyncio
async def test_system_usage_with_no_activity(mock_db, tenant_id):
    mock_db.execute.return_value = _all_result([])

    data = await generators.system_usage(mock_db, tenant_id, {})

    assert data["windowDays"] == 30
    assert data["errorRates"]["failureRate"] == 0
