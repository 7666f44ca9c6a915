"""
Appointment Schemas
"""

from datetime import datetime

from pydantic import Field

from seminar_hub.modules.appointments.models import AppointmentStatus, Urgency
from seminar_hub.modules.shared.schemas import CamelModel


class AppointmentRequestCreate(CamelModel):
    # Ignored for students, who always request for themselves
    student_id: str | None = None
    staff_id: str | None = None
    reason: str = Field(..., min_length=1, max_length=2000)
    preferred_times: list[datetime] = Field(default_factory=list, max_length=10)
    urgency: Urgency = Urgency.NORMAL


class RequestResponse(CamelModel):
    status: AppointmentStatus = Field(..., description="scheduled or denied")
    message: str | None = Field(None, max_length=2000)
    scheduled_at: datetime | None = None
    duration_minutes: int = Field(30, ge=5, le=480)
    location: str | None = Field(None, max_length=200)
    appointment_type: str = Field("consultation", max_length=50)


class AppointmentCreate(CamelModel):
    student_id: str
    scheduled_at: datetime
    duration_minutes: int = Field(30, ge=5, le=480)
    location: str | None = Field(None, max_length=200)
    notes: str | None = Field(None, max_length=5000)
    appointment_type: str = Field("consultation", max_length=50)


class AppointmentCancel(CamelModel):
    reason: str = Field(..., min_length=1, max_length=1000)


class AppointmentComplete(CamelModel):
    notes: str | None = Field(None, max_length=5000)


class AppointmentRequestResponse(CamelModel):
    id: str
    tenant_id: str
    student_id: str
    requested_by: str
    staff_id: str | None
    reason: str
    preferred_times: list[str]
    urgency: Urgency
    status: AppointmentStatus
    response_message: str | None
    responded_by: str | None
    responded_at: datetime | None
    appointment_id: str | None
    created_at: datetime
    updated_at: datetime


class AppointmentResponse(CamelModel):
    id: str
    tenant_id: str
    student_id: str
    staff_id: str
    request_id: str | None
    appointment_type: str
    scheduled_at: datetime
    duration_minutes: int
    location: str | None
    notes: str | None
    status: AppointmentStatus
    cancellation_reason: str | None
    cancelled_at: datetime | None
    completed_at: datetime | None
    created_at: datetime
    updated_at: datetime


class AppointmentRequestListResponse(CamelModel):
    items: list[AppointmentRequestResponse]
    has_more: bool
    limit: int
    skip: int


class AppointmentListResponse(CamelModel):
    items: list[AppointmentResponse]
    has_more: bool
    limit: int
    skip: int
