"""
Tests for TenantRepository: tenant isolation, has_more, audited writes.
"""

from types import SimpleNamespace

import pytest

from seminar_hub.core.errors import (
    InvalidStatusTransitionError,
    NotFoundError,
    PermissionDeniedError,
    RecoverableProfileError,
    ValidationFailedError,
)
from seminar_hub.modules.appointments.models import (
    VALID_APPOINTMENT_TRANSITIONS,
    Appointment,
    AppointmentStatus,
)
from seminar_hub.modules.appointments.repository import appointments
from seminar_hub.modules.audit.models import AuditLogEntry
from seminar_hub.modules.identity.session import AuthEvent, Session
from seminar_hub.modules.interventions.repository import plans
from seminar_hub.modules.shared.filters import ListFilters
from seminar_hub.modules.shared.pagination import PageRequest


def _row(location: str, notes: str | None = None):
    return SimpleNamespace(appointment_type="consultation", location=location, notes=notes)


def _added(mock_db, cls):
    return [call.args[0] for call in mock_db.add.call_args_list if isinstance(call.args[0], cls)]


def _appointment(tenant_id: str, status=AppointmentStatus.SCHEDULED) -> Appointment:
    return Appointment(
        id="dddddddd-0000-0000-0000-000000000001",
        tenant_id=tenant_id,
        student_id="s-1",
        staff_id="t-1",
        appointment_type="consultation",
        duration_minutes=30,
        status=status,
    )


# ============================================
# list
# ============================================


@pytest.mark.asyncio
async def test_full_page_reports_has_more(mock_db, rows_result, specialist_session):
    mock_db.execute.return_value = rows_result([_row(f"Room {i}") for i in range(5)])

    page = await appointments.list(mock_db, specialist_session, page=PageRequest(limit=5))

    assert len(page.items) == 5
    assert page.has_more is True


@pytest.mark.asyncio
async def test_short_page_reports_no_more(mock_db, rows_result, specialist_session):
    mock_db.execute.return_value = rows_result([_row(f"Room {i}") for i in range(4)])

    page = await appointments.list(mock_db, specialist_session, page=PageRequest(limit=5))

    assert page.has_more is False


@pytest.mark.asyncio
async def test_has_more_measured_before_search(mock_db, rows_result, specialist_session):
    rows = [_row("Room 1"), _row("Library"), _row("Room 2")]
    mock_db.execute.return_value = rows_result(rows)

    page = await appointments.list(
        mock_db,
        specialist_session,
        ListFilters(search="library"),
        PageRequest(limit=3),
    )

    assert [item.location for item in page.items] == ["Library"]
    assert page.has_more is True


@pytest.mark.asyncio
async def test_list_query_is_scoped_to_session_tenant(mock_db, rows_result, specialist_session):
    mock_db.execute.return_value = rows_result([])

    await appointments.list(mock_db, specialist_session)

    query = mock_db.execute.await_args.args[0]
    sql = str(query)
    assert "appointments.tenant_id = " in sql
    assert "ORDER BY appointments.created_at DESC" in sql
    assert specialist_session.tenant_id in query.compile().params.values()


@pytest.mark.asyncio
async def test_list_without_capability_is_denied(mock_db, student_session):
    with pytest.raises(PermissionDeniedError):
        await plans.list(mock_db, student_session)
    mock_db.execute.assert_not_called()


@pytest.mark.asyncio
async def test_fallback_session_reaches_no_tenant_data(mock_db):
    fallback = Session.fallback(
        AuthEvent(principal_id="p-1"), RecoverableProfileError("p-1", "no profile exists")
    )

    with pytest.raises(PermissionDeniedError):
        await appointments.list(mock_db, fallback)
    mock_db.execute.assert_not_called()


# ============================================
# get
# ============================================


@pytest.mark.asyncio
async def test_get_in_tenant(mock_db, specialist_session, tenant_id):
    appointment = _appointment(tenant_id)
    mock_db.get.return_value = appointment

    assert await appointments.get(mock_db, specialist_session, appointment.id) is appointment


@pytest.mark.asyncio
async def test_get_other_tenant_is_denied_not_hidden(mock_db, specialist_session, other_tenant_id):
    mock_db.get.return_value = _appointment(other_tenant_id)

    with pytest.raises(PermissionDeniedError):
        await appointments.get(mock_db, specialist_session, "dddddddd-0000-0000-0000-000000000001")


@pytest.mark.asyncio
async def test_get_missing(mock_db, specialist_session):
    mock_db.get.return_value = None

    assert await appointments.get(mock_db, specialist_session, "missing") is None
    with pytest.raises(NotFoundError):
        await appointments.get_or_raise(mock_db, specialist_session, "missing")


# ============================================
# writes
# ============================================


@pytest.mark.asyncio
async def test_create_forces_session_tenant_and_audits(mock_db, specialist_session, tenant_id):
    created = await appointments.create(
        mock_db,
        specialist_session,
        {
            "student_id": "s-1",
            "staff_id": specialist_session.principal_id,
            "scheduled_at": None,
            "status": AppointmentStatus.SCHEDULED,
        },
    )

    assert created.tenant_id == tenant_id
    assert created.id
    entries = _added(mock_db, AuditLogEntry)
    assert len(entries) == 1
    assert entries[0].action == "appointment_created"
    assert entries[0].tenant_id == tenant_id
    assert entries[0].actor_id == specialist_session.principal_id
    mock_db.commit.assert_awaited_once()


@pytest.mark.asyncio
async def test_create_in_other_tenant_is_denied(mock_db, specialist_session, other_tenant_id):
    with pytest.raises(PermissionDeniedError):
        await appointments.create(
            mock_db,
            specialist_session,
            {"tenant_id": other_tenant_id, "student_id": "s-1", "staff_id": "t-1"},
        )
    mock_db.commit.assert_not_called()


@pytest.mark.asyncio
async def test_update_rejects_protected_fields(mock_db, specialist_session):
    with pytest.raises(ValidationFailedError) as exc_info:
        await appointments.update(mock_db, specialist_session, "a-1", {"tenant_id": "x"})
    assert exc_info.value.error_code == "PROTECTED_FIELD"


@pytest.mark.asyncio
async def test_update_writes_one_audit_entry(mock_db, specialist_session, tenant_id):
    appointment = _appointment(tenant_id)
    mock_db.get.return_value = appointment

    updated = await appointments.update(
        mock_db, specialist_session, appointment.id, {"location": "Room 12"}
    )

    assert updated.location == "Room 12"
    entries = _added(mock_db, AuditLogEntry)
    assert [entry.action for entry in entries] == ["appointment_updated"]
    assert entries[0].details == {"fields": ["location"]}


@pytest.mark.asyncio
async def test_set_status_follows_state_machine(mock_db, specialist_session, tenant_id):
    mock_db.get.return_value = _appointment(tenant_id, AppointmentStatus.COMPLETED)

    with pytest.raises(InvalidStatusTransitionError):
        await appointments.set_status(
            mock_db,
            specialist_session,
            "dddddddd-0000-0000-0000-000000000001",
            AppointmentStatus.CANCELLED,
            transitions=VALID_APPOINTMENT_TRANSITIONS,
        )
    mock_db.commit.assert_not_called()


@pytest.mark.asyncio
async def test_set_status_records_from_and_to(mock_db, specialist_session, tenant_id):
    mock_db.get.return_value = _appointment(tenant_id)

    result = await appointments.set_status(
        mock_db,
        specialist_session,
        "dddddddd-0000-0000-0000-000000000001",
        AppointmentStatus.COMPLETED,
        transitions=VALID_APPOINTMENT_TRANSITIONS,
    )

    assert result.status == AppointmentStatus.COMPLETED
    entry = _added(mock_db, AuditLogEntry)[0]
    assert entry.action == "appointment_status_updated"
    assert entry.details == {"from": "scheduled", "to": "completed"}
