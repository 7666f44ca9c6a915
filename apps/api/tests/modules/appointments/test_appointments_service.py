"""
Tests for the appointment request workflow.
"""

from datetime import UTC, datetime

import pytest

from seminar_hub.core.errors import (
    InvalidStatusTransitionError,
    PermissionDeniedError,
    ValidationFailedError,
)
from seminar_hub.modules.appointments import service
from seminar_hub.modules.appointments.models import (
    Appointment,
    AppointmentRequest,
    AppointmentStatus,
    Urgency,
)
from seminar_hub.modules.appointments.schemas import AppointmentRequestCreate, RequestResponse
from seminar_hub.modules.audit.models import AuditLogEntry
from seminar_hub.modules.shared.filters import ListFilters

WHEN = datetime(2026, 3, 2, 14, 0, tzinfo=UTC)


def _request(tenant_id: str, student_id: str, status=AppointmentStatus.REQUESTED, staff_id=None):
    return AppointmentRequest(
        id="rrrrrrrr-0000-0000-0000-000000000001",
        tenant_id=tenant_id,
        student_id=student_id,
        requested_by=student_id,
        staff_id=staff_id,
        reason="Need help planning next term",
        preferred_times=[],
        urgency=Urgency.NORMAL,
        status=status,
    )


def _added(mock_db, cls):
    return [c.args[0] for c in mock_db.add.call_args_list if isinstance(c.args[0], cls)]


@pytest.mark.asyncio
async def test_student_always_requests_for_self(mock_db, student_session):
    request = await service.create_request(
        mock_db,
        student_session,
        AppointmentRequestCreate(student_id="someone-else", reason="Study plan"),
    )

    assert request.student_id == student_session.principal_id
    assert request.status == AppointmentStatus.REQUESTED
    assert request.tenant_id == student_session.tenant_id


@pytest.mark.asyncio
async def test_staff_must_name_the_student(mock_db, specialist_session):
    with pytest.raises(ValidationFailedError) as exc_info:
        await service.create_request(
            mock_db, specialist_session, AppointmentRequestCreate(reason="Check-in")
        )
    assert exc_info.value.error_code == "STUDENT_REQUIRED"


@pytest.mark.asyncio
async def test_student_listing_is_limited_to_own_requests(
    mock_db, rows_result, student_session
):
    mock_db.execute.return_value = rows_result([])

    await service.list_requests(mock_db, student_session)

    query = mock_db.execute.await_args.args[0]
    params = query.compile().params
    assert student_session.principal_id in params.values()
    assert student_session.tenant_id in params.values()


@pytest.mark.asyncio
async def test_scoping_leaves_caller_filters_untouched(
    mock_db, rows_result, student_session, specialist_session
):
    mock_db.execute.return_value = rows_result([])
    filters = ListFilters(exact={"status": "requested"})

    await service.list_requests(mock_db, student_session, filters)
    await service.list_appointments(mock_db, specialist_session, filters)

    assert filters.exact == {"status": "requested"}
    params = mock_db.execute.await_args.args[0].compile().params
    assert specialist_session.principal_id in params.values()
    assert student_session.principal_id not in params.values()


@pytest.mark.asyncio
async def test_schedule_creates_appointment_with_single_audit_entry(
    mock_db, specialist_session, tenant_id
):
    mock_db.get.return_value = _request(tenant_id, "student-1")

    request = await service.respond_to_request(
        mock_db,
        specialist_session,
        "rrrrrrrr-0000-0000-0000-000000000001",
        RequestResponse(status=AppointmentStatus.SCHEDULED, scheduled_at=WHEN, location="Room 4"),
    )

    [appointment] = _added(mock_db, Appointment)
    assert request.status == AppointmentStatus.SCHEDULED
    assert request.appointment_id == appointment.id
    assert appointment.staff_id == specialist_session.principal_id
    assert appointment.student_id == "student-1"
    assert appointment.scheduled_at == WHEN

    [entry] = _added(mock_db, AuditLogEntry)
    assert entry.action == "appointment_request_responded"
    assert entry.details["to"] == "scheduled"
    mock_db.commit.assert_awaited_once()


@pytest.mark.asyncio
async def test_scheduling_needs_a_time(mock_db, specialist_session, tenant_id):
    mock_db.get.return_value = _request(tenant_id, "student-1")

    with pytest.raises(ValidationFailedError) as exc_info:
        await service.respond_to_request(
            mock_db,
            specialist_session,
            "rrrrrrrr-0000-0000-0000-000000000001",
            RequestResponse(status=AppointmentStatus.SCHEDULED),
        )
    assert exc_info.value.error_code == "SCHEDULE_TIME_REQUIRED"
    mock_db.commit.assert_not_called()


@pytest.mark.asyncio
async def test_deny_closes_request(mock_db, counselor_session, tenant_id):
    mock_db.get.return_value = _request(tenant_id, "student-1")

    request = await service.respond_to_request(
        mock_db,
        counselor_session,
        "rrrrrrrr-0000-0000-0000-000000000001",
        RequestResponse(status=AppointmentStatus.DENIED, message="Please book through your tutor"),
    )

    assert request.status == AppointmentStatus.DENIED
    assert request.appointment_id is None
    assert _added(mock_db, Appointment) == []


@pytest.mark.asyncio
async def test_answered_request_cannot_be_answered_again(mock_db, specialist_session, tenant_id):
    mock_db.get.return_value = _request(tenant_id, "student-1", status=AppointmentStatus.DENIED)

    with pytest.raises(InvalidStatusTransitionError):
        await service.respond_to_request(
            mock_db,
            specialist_session,
            "rrrrrrrr-0000-0000-0000-000000000001",
            RequestResponse(status=AppointmentStatus.SCHEDULED, scheduled_at=WHEN),
        )


@pytest.mark.asyncio
async def test_cancel_is_not_a_response(mock_db, specialist_session, tenant_id):
    mock_db.get.return_value = _request(tenant_id, "student-1")

    with pytest.raises(InvalidStatusTransitionError):
        await service.respond_to_request(
            mock_db,
            specialist_session,
            "rrrrrrrr-0000-0000-0000-000000000001",
            RequestResponse(status=AppointmentStatus.CANCELLED),
        )


@pytest.mark.asyncio
async def test_students_cannot_respond(mock_db, student_session):
    with pytest.raises(PermissionDeniedError):
        await service.respond_to_request(
            mock_db,
            student_session,
            "rrrrrrrr-0000-0000-0000-000000000001",
            RequestResponse(status=AppointmentStatus.DENIED),
        )


@pytest.mark.asyncio
async def test_request_addressed_to_other_staff_is_refused(
    mock_db, specialist_session, other_specialist_session, tenant_id
):
    mock_db.get.return_value = _request(
        tenant_id, "student-1", staff_id=other_specialist_session.principal_id
    )

    with pytest.raises(PermissionDeniedError):
        await service.respond_to_request(
            mock_db,
            specialist_session,
            "rrrrrrrr-0000-0000-0000-000000000001",
            RequestResponse(status=AppointmentStatus.DENIED),
        )


@pytest.mark.asyncio
async def test_student_cancels_own_request(mock_db, student_session, tenant_id):
    mock_db.get.return_value = _request(tenant_id, student_session.principal_id)

    request = await service.cancel_request(
        mock_db, student_session, "rrrrrrrr-0000-0000-0000-000000000001"
    )

    assert request.status == AppointmentStatus.CANCELLED


@pytest.mark.asyncio
async def test_student_cannot_cancel_someone_elses_request(mock_db, student_session, tenant_id):
    mock_db.get.return_value = _request(tenant_id, "another-student")

    with pytest.raises(PermissionDeniedError):
        await service.cancel_request(
            mock_db, student_session, "rrrrrrrr-0000-0000-0000-000000000001"
        )


@pytest.mark.asyncio
async def test_cancel_appointment_records_reason(mock_db, specialist_session, tenant_id):
    mock_db.get.return_value = Appointment(
        id="appt-1",
        tenant_id=tenant_id,
        student_id="student-1",
        staff_id=specialist_session.principal_id,
        appointment_type="consultation",
        scheduled_at=WHEN,
        duration_minutes=30,
        status=AppointmentStatus.SCHEDULED,
    )

    appointment = await service.cancel_appointment(
        mock_db, specialist_session, "appt-1", "Student unwell"
    )

    assert appointment.status == AppointmentStatus.CANCELLED
    assert appointment.cancellation_reason == "Student unwell"
    assert appointment.cancelled_at is not None
    [entry] = _added(mock_db, AuditLogEntry)
    assert entry.details == {"from": "scheduled", "to": "cancelled", "reason": "Student unwell"}
