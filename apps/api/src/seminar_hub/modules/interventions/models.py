"""
Intervention Plan Models

Support plans written by specialists or counselors for one student.
Progress is derived from goal statuses and never stored.
"""

from datetime import datetime
from enum import Enum
from typing import Any

from sqlalchemy import Boolean, DateTime, ForeignKey, String, Text
from sqlalchemy.dialects.postgresql import JSONB, UUID
from sqlalchemy.orm import Mapped, mapped_column

from seminar_hub.modules.shared import BaseModel, TenantScopedMixin
from seminar_hub.modules.shared.enums import Priority, pg_enum


class PlanStatus(str, Enum):
    ACTIVE = "active"
    COMPLETED = "completed"
    ON_HOLD = "on_hold"
    CANCELLED = "cancelled"


class GoalStatus(str, Enum):
    NOT_STARTED = "not_started"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"


VALID_PLAN_TRANSITIONS: dict[PlanStatus, set[PlanStatus]] = {
    PlanStatus.ACTIVE: {PlanStatus.COMPLETED, PlanStatus.ON_HOLD, PlanStatus.CANCELLED},
    PlanStatus.ON_HOLD: {PlanStatus.ACTIVE, PlanStatus.CANCELLED},
    PlanStatus.COMPLETED: set(),
    PlanStatus.CANCELLED: set(),
}


class InterventionPlan(BaseModel, TenantScopedMixin):
    __tablename__ = "intervention_plans"

    student_id: Mapped[str] = mapped_column(
        UUID(as_uuid=False),
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    author_id: Mapped[str] = mapped_column(
        UUID(as_uuid=False),
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    title: Mapped[str] = mapped_column(String(200), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)

    # [{"id": str, "description": str, "status": GoalStatus value}]
    goals: Mapped[list[dict[str, Any]]] = mapped_column(JSONB, nullable=False, default=list)
    strategies: Mapped[list[str]] = mapped_column(JSONB, nullable=False, default=list)
    timeline: Mapped[str | None] = mapped_column(String(200), nullable=True)

    priority: Mapped[Priority] = mapped_column(
        pg_enum(Priority, "record_priority"),
        nullable=False,
        default=Priority.MEDIUM,
    )
    status: Mapped[PlanStatus] = mapped_column(
        pg_enum(PlanStatus, "intervention_plan_status"),
        nullable=False,
        default=PlanStatus.ACTIVE,
        index=True,
    )

    # Teachers allowed to read this plan
    authorized_teachers: Mapped[list[str]] = mapped_column(JSONB, nullable=False, default=list)
    parent_notified: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    review_date: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
