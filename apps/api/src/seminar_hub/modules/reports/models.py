"""
Report Models

Report definitions (what to compute, optional schedule metadata) and
the immutable results each run produces.
"""

from datetime import datetime
from enum import Enum
from typing import Any

from sqlalchemy import DateTime, ForeignKey, Index, String
from sqlalchemy.dialects.postgresql import JSONB, UUID
from sqlalchemy.orm import Mapped, mapped_column

from seminar_hub.core.database import Base
from seminar_hub.modules.shared import BaseModel, TenantScopedMixin
from seminar_hub.modules.shared.enums import pg_enum
from seminar_hub.modules.shared.models import new_id, utc_now


class ReportType(str, Enum):
    USER_SUMMARY = "user_summary"
    CREDIT_TRACKING = "credit_tracking"
    ATTENDANCE_SUMMARY = "attendance_summary"
    SYSTEM_USAGE = "system_usage"


class ScheduleFrequency(str, Enum):
    DAILY = "daily"
    WEEKLY = "weekly"
    MONTHLY = "monthly"


class ReportDefinition(BaseModel, TenantScopedMixin):
    __tablename__ = "report_definitions"

    name: Mapped[str] = mapped_column(String(200), nullable=False)
    type: Mapped[ReportType] = mapped_column(
        pg_enum(ReportType, "report_type"),
        nullable=False,
        index=True,
    )
    parameters: Mapped[dict[str, Any]] = mapped_column(JSONB, nullable=False, default=dict)

    # {"enabled": bool, "frequency": "daily|weekly|monthly", "dayOfWeek": 0..6}
    schedule: Mapped[dict[str, Any] | None] = mapped_column(JSONB, nullable=True)
    last_run_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)

    created_by: Mapped[str | None] = mapped_column(String(100), nullable=True)

    @property
    def schedule_enabled(self) -> bool:
        return bool(self.schedule and self.schedule.get("enabled"))

    def __repr__(self) -> str:
        return f"<ReportDefinition {self.name} ({self.type})>"


class ReportResult(Base):
    """Output of one run. Written once, never updated."""

    __tablename__ = "report_results"
    __table_args__ = (Index("ix_report_results_report_created", "report_id", "created_at"),)

    id: Mapped[str] = mapped_column(
        UUID(as_uuid=False),
        primary_key=True,
        default=new_id,
    )
    report_id: Mapped[str] = mapped_column(
        UUID(as_uuid=False),
        ForeignKey("report_definitions.id", ondelete="CASCADE"),
        nullable=False,
    )
    tenant_id: Mapped[str] = mapped_column(
        UUID(as_uuid=False),
        ForeignKey("tenants.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    result_data: Mapped[dict[str, Any]] = mapped_column(JSONB, nullable=False, default=dict)
    parameters: Mapped[dict[str, Any]] = mapped_column(JSONB, nullable=False, default=dict)
    run_by: Mapped[str | None] = mapped_column(String(100), nullable=True)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utc_now,
    )
