"""
Audit Log Schemas
"""

from datetime import datetime
from typing import Any

from pydantic import Field

from seminar_hub.modules.shared.schemas import CamelModel


class AuditLogEntryResponse(CamelModel):
    id: str
    tenant_id: str | None
    actor_id: str | None
    action: str
    entity_type: str
    entity_id: str | None
    details: dict[str, Any]
    created_at: datetime
    category: str = Field(..., description="Display category derived from the action")


class AuditLogListResponse(CamelModel):
    items: list[AuditLogEntryResponse]
    has_more: bool
    limit: int
    skip: int


class AuditLogStatsResponse(CamelModel):
    total: int
    success: int
    failures: int
    by_category: dict[str, int]
