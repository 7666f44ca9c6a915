"""
Report Schemas
"""

from datetime import datetime
from typing import Any

from pydantic import Field, model_validator

from seminar_hub.modules.reports.models import ReportType, ScheduleFrequency
from seminar_hub.modules.shared.schemas import CamelModel


class ReportSchedule(CamelModel):
    enabled: bool = False
    frequency: ScheduleFrequency = ScheduleFrequency.DAILY
    # 0 = Sunday ... 6 = Saturday
    day_of_week: int | None = Field(None, ge=0, le=6)

    @model_validator(mode="after")
    def weekly_needs_day(self) -> "ReportSchedule":
        if self.frequency == ScheduleFrequency.WEEKLY and self.day_of_week is None:
            raise ValueError("dayOfWeek is required for weekly schedules")
        return self


class ReportDefinitionCreate(CamelModel):
    name: str = Field(..., min_length=1, max_length=200)
    type: ReportType
    parameters: dict[str, Any] = Field(default_factory=dict)
    schedule: ReportSchedule | None = None


class ReportRunRequest(CamelModel):
    parameters: dict[str, Any] = Field(default_factory=dict)


class ReportDefinitionResponse(CamelModel):
    id: str
    tenant_id: str
    name: str
    type: ReportType
    parameters: dict[str, Any]
    schedule: dict[str, Any] | None
    last_run_at: datetime | None
    created_by: str | None
    created_at: datetime
    updated_at: datetime


class ReportDefinitionListResponse(CamelModel):
    items: list[ReportDefinitionResponse]
    has_more: bool
    limit: int
    skip: int


class ReportResultResponse(CamelModel):
    id: str
    report_id: str
    tenant_id: str
    result_data: dict[str, Any]
    parameters: dict[str, Any]
    run_by: str | None
    created_at: datetime


class ReportResultListResponse(CamelModel):
    items: list[ReportResultResponse]
    total: int
