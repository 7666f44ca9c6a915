"""
Appointment Models

Appointment requests (raised by or for a student) and the scheduled
appointments that come out of them.
"""

from datetime import datetime
from enum import Enum
from typing import Any

from sqlalchemy import DateTime, ForeignKey, Integer, String, Text
from sqlalchemy.dialects.postgresql import JSONB, UUID
from sqlalchemy.orm import Mapped, mapped_column

from seminar_hub.modules.shared import BaseModel, TenantScopedMixin
from seminar_hub.modules.shared.enums import pg_enum


class AppointmentStatus(str, Enum):
    REQUESTED = "requested"
    SCHEDULED = "scheduled"
    COMPLETED = "completed"
    CANCELLED = "cancelled"
    DENIED = "denied"


class Urgency(str, Enum):
    LOW = "low"
    NORMAL = "normal"
    HIGH = "high"
    URGENT = "urgent"


VALID_REQUEST_TRANSITIONS: dict[AppointmentStatus, set[AppointmentStatus]] = {
    AppointmentStatus.REQUESTED: {
        AppointmentStatus.SCHEDULED,
        AppointmentStatus.DENIED,
        AppointmentStatus.CANCELLED,
    },
    AppointmentStatus.SCHEDULED: set(),
    AppointmentStatus.DENIED: set(),
    AppointmentStatus.CANCELLED: set(),
}

VALID_APPOINTMENT_TRANSITIONS: dict[AppointmentStatus, set[AppointmentStatus]] = {
    AppointmentStatus.SCHEDULED: {AppointmentStatus.COMPLETED, AppointmentStatus.CANCELLED},
    AppointmentStatus.COMPLETED: set(),
    AppointmentStatus.CANCELLED: set(),
}


class AppointmentRequest(BaseModel, TenantScopedMixin):
    __tablename__ = "appointment_requests"

    student_id: Mapped[str] = mapped_column(
        UUID(as_uuid=False),
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    requested_by: Mapped[str] = mapped_column(UUID(as_uuid=False), nullable=False)
    # Specialist or counselor the request is addressed to, if any
    staff_id: Mapped[str | None] = mapped_column(
        UUID(as_uuid=False),
        ForeignKey("users.id", ondelete="SET NULL"),
        nullable=True,
        index=True,
    )

    reason: Mapped[str] = mapped_column(Text, nullable=False)
    preferred_times: Mapped[list[Any]] = mapped_column(JSONB, nullable=False, default=list)
    urgency: Mapped[Urgency] = mapped_column(
        pg_enum(Urgency, "appointment_urgency"),
        nullable=False,
        default=Urgency.NORMAL,
    )
    status: Mapped[AppointmentStatus] = mapped_column(
        pg_enum(AppointmentStatus, "appointment_status"),
        nullable=False,
        default=AppointmentStatus.REQUESTED,
        index=True,
    )

    response_message: Mapped[str | None] = mapped_column(Text, nullable=True)
    responded_by: Mapped[str | None] = mapped_column(UUID(as_uuid=False), nullable=True)
    responded_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    appointment_id: Mapped[str | None] = mapped_column(UUID(as_uuid=False), nullable=True)


class Appointment(BaseModel, TenantScopedMixin):
    __tablename__ = "appointments"

    student_id: Mapped[str] = mapped_column(
        UUID(as_uuid=False),
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    staff_id: Mapped[str] = mapped_column(
        UUID(as_uuid=False),
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    request_id: Mapped[str | None] = mapped_column(
        UUID(as_uuid=False),
        ForeignKey("appointment_requests.id", ondelete="SET NULL"),
        nullable=True,
    )

    appointment_type: Mapped[str] = mapped_column(String(50), nullable=False, default="consultation")
    scheduled_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, index=True)
    duration_minutes: Mapped[int] = mapped_column(Integer, nullable=False, default=30)
    location: Mapped[str | None] = mapped_column(String(200), nullable=True)
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)

    status: Mapped[AppointmentStatus] = mapped_column(
        pg_enum(AppointmentStatus, "appointment_status"),
        nullable=False,
        default=AppointmentStatus.SCHEDULED,
        index=True,
    )
    cancellation_reason: Mapped[str | None] = mapped_column(Text, nullable=True)
    cancelled_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    completed_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
