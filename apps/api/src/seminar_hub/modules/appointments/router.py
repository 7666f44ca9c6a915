"""
Appointment Router

Endpoints for appointment requests and appointments. Any signed-in
role with the matching capability may call them; the service narrows
students to their own records.
"""

import logging

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from seminar_hub.core.auth import get_current_session
from seminar_hub.core.database import get_db
from seminar_hub.core.errors import ServiceError, internal_error, to_http_exception
from seminar_hub.modules.appointments import service
from seminar_hub.modules.appointments.models import AppointmentStatus, Urgency
from seminar_hub.modules.appointments.schemas import (
    AppointmentCancel,
    AppointmentComplete,
    AppointmentCreate,
    AppointmentListResponse,
    AppointmentRequestCreate,
    AppointmentRequestListResponse,
    AppointmentRequestResponse,
    AppointmentResponse,
    RequestResponse,
)
from seminar_hub.modules.identity.session import Session
from seminar_hub.modules.shared.filters import ListFilters
from seminar_hub.modules.shared.pagination import PageRequest

logger = logging.getLogger(__name__)

router = APIRouter()


# ============================================
# Requests
# ============================================


@router.get("/requests", response_model=AppointmentRequestListResponse, summary="List Requests")
async def list_requests(
    request_status: AppointmentStatus | None = Query(None, alias="status"),
    urgency: Urgency | None = Query(None),
    search: str | None = Query(None, max_length=100),
    skip: int = Query(0, ge=0),
    limit: int = Query(50, ge=1, le=100),
    db: AsyncSession = Depends(get_db),
    session: Session = Depends(get_current_session),
) -> AppointmentRequestListResponse:
    try:
        page = await service.list_requests(
            db,
            session,
            ListFilters(search=search, exact={"status": request_status, "urgency": urgency}),
            PageRequest(limit=limit, skip=skip),
        )
    except ServiceError as e:
        raise to_http_exception(e) from e
    except Exception as e:
        logger.exception(f"Error listing appointment requests: {e}")
        raise internal_error() from e

    return AppointmentRequestListResponse(
        items=[AppointmentRequestResponse.model_validate(item) for item in page.items],
        has_more=page.has_more,
        limit=page.limit,
        skip=page.skip,
    )


@router.post(
    "/requests",
    response_model=AppointmentRequestResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Request Appointment",
)
async def create_request(
    body: AppointmentRequestCreate,
    db: AsyncSession = Depends(get_db),
    session: Session = Depends(get_current_session),
) -> AppointmentRequestResponse:
    try:
        request = await service.create_request(db, session, body)
    except ServiceError as e:
        raise to_http_exception(e) from e
    return AppointmentRequestResponse.model_validate(request)


@router.post(
    "/requests/{request_id}/respond",
    response_model=AppointmentRequestResponse,
    summary="Respond to Request",
    description="Schedule (creates the appointment) or deny a pending request. Staff only.",
)
async def respond_to_request(
    request_id: str,
    body: RequestResponse,
    db: AsyncSession = Depends(get_db),
    session: Session = Depends(get_current_session),
) -> AppointmentRequestResponse:
    try:
        request = await service.respond_to_request(db, session, request_id, body)
    except ServiceError as e:
        raise to_http_exception(e) from e
    return AppointmentRequestResponse.model_validate(request)


@router.post(
    "/requests/{request_id}/cancel",
    response_model=AppointmentRequestResponse,
    summary="Cancel Request",
)
async def cancel_request(
    request_id: str,
    db: AsyncSession = Depends(get_db),
    session: Session = Depends(get_current_session),
) -> AppointmentRequestResponse:
    try:
        request = await service.cancel_request(db, session, request_id)
    except ServiceError as e:
        raise to_http_exception(e) from e
    return AppointmentRequestResponse.model_validate(request)


# ============================================
# Appointments
# ============================================


@router.get("", response_model=AppointmentListResponse, summary="List Appointments")
async def list_appointments(
    appointment_status: AppointmentStatus | None = Query(None, alias="status"),
    search: str | None = Query(None, max_length=100),
    skip: int = Query(0, ge=0),
    limit: int = Query(50, ge=1, le=100),
    db: AsyncSession = Depends(get_db),
    session: Session = Depends(get_current_session),
) -> AppointmentListResponse:
    try:
        page = await service.list_appointments(
            db,
            session,
            ListFilters(search=search, exact={"status": appointment_status}),
            PageRequest(limit=limit, skip=skip),
        )
    except ServiceError as e:
        raise to_http_exception(e) from e

    return AppointmentListResponse(
        items=[AppointmentResponse.model_validate(item) for item in page.items],
        has_more=page.has_more,
        limit=page.limit,
        skip=page.skip,
    )


@router.post(
    "",
    response_model=AppointmentResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Book Appointment",
)
async def create_appointment(
    body: AppointmentCreate,
    db: AsyncSession = Depends(get_db),
    session: Session = Depends(get_current_session),
) -> AppointmentResponse:
    try:
        appointment = await service.create_appointment(db, session, body)
    except ServiceError as e:
        raise to_http_exception(e) from e
    return AppointmentResponse.model_validate(appointment)


@router.get("/{appointment_id}", response_model=AppointmentResponse, summary="Get Appointment")
async def get_appointment(
    appointment_id: str,
    db: AsyncSession = Depends(get_db),
    session: Session = Depends(get_current_session),
) -> AppointmentResponse:
    try:
        appointment = await service.get_appointment(db, session, appointment_id)
    except ServiceError as e:
        raise to_http_exception(e) from e
    return AppointmentResponse.model_validate(appointment)


@router.post(
    "/{appointment_id}/cancel",
    response_model=AppointmentResponse,
    summary="Cancel Appointment",
)
async def cancel_appointment(
    appointment_id: str,
    body: AppointmentCancel,
    db: AsyncSession = Depends(get_db),
    session: Session = Depends(get_current_session),
) -> AppointmentResponse:
    try:
        appointment = await service.cancel_appointment(db, session, appointment_id, body.reason)
    except ServiceError as e:
        raise to_http_exception(e) from e
    return AppointmentResponse.model_validate(appointment)


@router.post(
    "/{appointment_id}/complete",
    response_model=AppointmentResponse,
    summary="Complete Appointment",
)
async def complete_appointment(
    appointment_id: str,
    body: AppointmentComplete,
    db: AsyncSession = Depends(get_db),
    session: Session = Depends(get_current_session),
) -> AppointmentResponse:
    try:
        appointment = await service.complete_appointment(db, session, appointment_id, body.notes)
    except ServiceError as e:
        raise to_http_exception(e) from e
    return AppointmentResponse.model_validate(appointment)
