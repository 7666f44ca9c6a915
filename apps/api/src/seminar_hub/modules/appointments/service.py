"""
Appointment Service

Request/response workflow between students and support staff:

1. A student (or staff on their behalf) raises a request: ``requested``
2. A specialist or counselor responds:
   - ``scheduled``: an Appointment is created with the response
   - ``denied``: the request is closed with a message
3. The student may cancel a pending request
4. Appointments end ``completed`` or ``cancelled`` (with a reason)

Students only ever see their own requests and appointments.
"""

import logging
from dataclasses import replace
from datetime import datetime

from sqlalchemy.ext.asyncio import AsyncSession

from seminar_hub.core.errors import (
    InvalidStatusTransitionError,
    PermissionDeniedError,
    ValidationFailedError,
)
from seminar_hub.modules.appointments.models import (
    VALID_APPOINTMENT_TRANSITIONS,
    VALID_REQUEST_TRANSITIONS,
    Appointment,
    AppointmentRequest,
    AppointmentStatus,
)
from seminar_hub.modules.appointments.repository import appointment_requests, appointments
from seminar_hub.modules.appointments.schemas import (
    AppointmentCreate,
    AppointmentRequestCreate,
    RequestResponse,
)
from seminar_hub.modules.audit.recorded_write import RecordedWrite
from seminar_hub.modules.identity.session import Session
from seminar_hub.modules.shared.filters import ListFilters
from seminar_hub.modules.shared.models import new_id, utc_now
from seminar_hub.modules.shared.pagination import Page, PageRequest
from seminar_hub.modules.users.models import UserRole

logger = logging.getLogger(__name__)

STAFF_ROLES = frozenset({UserRole.SPECIALIST, UserRole.COUNSELOR, UserRole.ADMIN})


def _require_staff(session: Session) -> None:
    if session.role not in STAFF_ROLES:
        raise PermissionDeniedError("Only specialists, counselors and admins can do this.")


def _ensure_participant(session: Session, record: Appointment | AppointmentRequest) -> None:
    """Students may only touch their own records; staff only their own or unassigned ones."""
    if session.role == UserRole.ADMIN:
        return
    if session.role == UserRole.STUDENT:
        if record.student_id != session.principal_id:
            raise PermissionDeniedError("This record belongs to another student.")
        return
    if record.staff_id not in (None, session.principal_id):
        raise PermissionDeniedError("This record is assigned to another staff member.")


def _own_records_filters(
    session: Session, filters: ListFilters | None, *, staff_scoped: bool = False
) -> ListFilters:
    """A copy of ``filters`` narrowed to the caller's own records."""
    filters = filters or ListFilters()
    exact = dict(filters.exact)
    if session.role == UserRole.STUDENT:
        exact["student_id"] = session.principal_id
    elif staff_scoped and session.role in (
        UserRole.SPECIALIST,
        UserRole.COUNSELOR,
        UserRole.TEACHER,
    ):
        exact["staff_id"] = session.principal_id
    return replace(filters, exact=exact)


# ============================================
# Appointment requests
# ============================================


async def create_request(
    db: AsyncSession,
    session: Session,
    data: AppointmentRequestCreate,
) -> AppointmentRequest:
    """
    Raise a request. Students always raise it for themselves.

    Raises:
        ValidationFailedError: Staff did not say which student it is for
    """
    if session.role == UserRole.STUDENT:
        student_id = session.principal_id
    elif data.student_id:
        student_id = data.student_id
    else:
        raise ValidationFailedError("studentId is required", error_code="STUDENT_REQUIRED")

    return await appointment_requests.create(
        db,
        session,
        {
            "student_id": student_id,
            "requested_by": session.principal_id,
            "staff_id": data.staff_id,
            "reason": data.reason,
            "preferred_times": [t.isoformat() for t in data.preferred_times],
            "urgency": data.urgency,
            "status": AppointmentStatus.REQUESTED,
        },
        details={"studentId": student_id, "urgency": data.urgency},
    )


async def list_requests(
    db: AsyncSession,
    session: Session,
    filters: ListFilters | None = None,
    page: PageRequest | None = None,
) -> Page[AppointmentRequest]:
    return await appointment_requests.list(db, session, _own_records_filters(session, filters), page)


async def respond_to_request(
    db: AsyncSession,
    session: Session,
    request_id: str,
    data: RequestResponse,
) -> AppointmentRequest:
    """
    Schedule or deny a pending request.

    Scheduling creates the Appointment in the same write as the request
    update and its single audit entry.

    Raises:
        PermissionDeniedError: Caller is not staff
        InvalidStatusTransitionError: Request is no longer pending
        ValidationFailedError: Scheduling without a time
    """
    _require_staff(session)
    request = await appointment_requests.get_or_raise(db, session, request_id)
    _ensure_participant(session, request)

    if data.status not in VALID_REQUEST_TRANSITIONS[request.status] or data.status not in (
        AppointmentStatus.SCHEDULED,
        AppointmentStatus.DENIED,
    ):
        raise InvalidStatusTransitionError(
            "appointment_request", request.status.value, data.status.value
        )

    now = utc_now()
    added: list[Appointment | AppointmentRequest] = [request]

    if data.status == AppointmentStatus.SCHEDULED:
        if data.scheduled_at is None:
            raise ValidationFailedError(
                "scheduledAt is required to schedule a request",
                error_code="SCHEDULE_TIME_REQUIRED",
            )
        appointment = Appointment(
            id=new_id(),
            tenant_id=request.tenant_id,
            student_id=request.student_id,
            staff_id=session.principal_id,
            request_id=request.id,
            appointment_type=data.appointment_type,
            scheduled_at=data.scheduled_at,
            duration_minutes=data.duration_minutes,
            location=data.location,
            status=AppointmentStatus.SCHEDULED,
            created_at=now,
            updated_at=now,
        )
        request.appointment_id = appointment.id
        added.append(appointment)

    previous = request.status
    request.status = data.status
    request.response_message = data.message
    request.responded_by = session.principal_id
    request.responded_at = now
    request.updated_at = now

    await RecordedWrite(
        action="appointment_request_responded",
        entity_type="appointment_request",
        entity_id=request.id,
        details={
            "from": previous,
            "to": data.status,
            "appointmentId": request.appointment_id,
        },
        added=added,
    ).execute(db, session)

    logger.info(f"Request {request.id} {data.status.value} by {session.principal_id}")
    return request


async def cancel_request(db: AsyncSession, session: Session, request_id: str) -> AppointmentRequest:
    request = await appointment_requests.get_or_raise(db, session, request_id)
    _ensure_participant(session, request)
    return await appointment_requests.set_status(
        db,
        session,
        request_id,
        AppointmentStatus.CANCELLED,
        transitions=VALID_REQUEST_TRANSITIONS,
    )


# ============================================
# Appointments
# ============================================


async def create_appointment(
    db: AsyncSession,
    session: Session,
    data: AppointmentCreate,
) -> Appointment:
    """Staff book an appointment directly (no request)."""
    _require_staff(session)
    return await appointments.create(
        db,
        session,
        {
            "student_id": data.student_id,
            "staff_id": session.principal_id,
            "appointment_type": data.appointment_type,
            "scheduled_at": data.scheduled_at,
            "duration_minutes": data.duration_minutes,
            "location": data.location,
            "notes": data.notes,
            "status": AppointmentStatus.SCHEDULED,
        },
        details={"studentId": data.student_id, "scheduledAt": data.scheduled_at},
    )


async def list_appointments(
    db: AsyncSession,
    session: Session,
    filters: ListFilters | None = None,
    page: PageRequest | None = None,
) -> Page[Appointment]:
    filters = _own_records_filters(session, filters, staff_scoped=True)
    return await appointments.list(db, session, filters, page)


async def get_appointment(db: AsyncSession, session: Session, appointment_id: str) -> Appointment:
    appointment = await appointments.get_or_raise(db, session, appointment_id)
    _ensure_participant(session, appointment)
    return appointment


async def cancel_appointment(
    db: AsyncSession,
    session: Session,
    appointment_id: str,
    reason: str,
) -> Appointment:
    appointment = await get_appointment(db, session, appointment_id)
    return await appointments.set_status(
        db,
        session,
        appointment.id,
        AppointmentStatus.CANCELLED,
        transitions=VALID_APPOINTMENT_TRANSITIONS,
        extra={"cancellation_reason": reason, "cancelled_at": utc_now()},
        details={"reason": reason},
    )


async def complete_appointment(
    db: AsyncSession,
    session: Session,
    appointment_id: str,
    notes: str | None = None,
) -> Appointment:
    _require_staff(session)
    appointment = await get_appointment(db, session, appointment_id)
    extra: dict[str, datetime | str] = {"completed_at": utc_now()}
    if notes:
        extra["notes"] = notes
    return await appointments.set_status(
        db,
        session,
        appointment.id,
        AppointmentStatus.COMPLETED,
        transitions=VALID_APPOINTMENT_TRANSITIONS,
        extra=extra,
    )
