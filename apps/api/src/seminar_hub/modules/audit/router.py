"""
Audit Log Router

Admin endpoints for browsing the tenant's audit log.

All endpoints require the admin role and only ever return entries of
the admin's own tenant.
"""

import logging
from datetime import datetime

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from seminar_hub.core.auth import require_admin
from seminar_hub.core.database import get_db
from seminar_hub.core.errors import ServiceError, internal_error, to_http_exception
from seminar_hub.modules.audit import service
from seminar_hub.modules.audit.schemas import (
    AuditLogEntryResponse,
    AuditLogListResponse,
    AuditLogStatsResponse,
)
from seminar_hub.modules.identity.session import Session
from seminar_hub.modules.shared.filters import ListFilters
from seminar_hub.modules.shared.pagination import PageRequest

logger = logging.getLogger(__name__)

router = APIRouter()


def _filters(
    search: str | None = Query(None, max_length=100, description="Substring over action and entity"),
    action: str | None = Query(None, max_length=100),
    entity_type: str | None = Query(None, alias="entityType", max_length=50),
    actor_id: str | None = Query(None, alias="actorId", max_length=100),
    date_from: datetime | None = Query(None, alias="dateFrom"),
    date_to: datetime | None = Query(None, alias="dateTo"),
) -> ListFilters:
    return ListFilters(
        search=search,
        exact={"action": action, "entity_type": entity_type, "actor_id": actor_id},
        created_from=date_from,
        created_to=date_to,
    )


@router.get(
    "",
    response_model=AuditLogListResponse,
    summary="List Audit Log",
    description="""
List audit entries for the caller's tenant, newest first.

Entries with identical timestamps are returned in insertion order.

**Access:** Admin only
""",
)
async def list_logs(
    filters: ListFilters = Depends(_filters),
    skip: int = Query(0, ge=0),
    limit: int = Query(100, ge=1, le=100),
    db: AsyncSession = Depends(get_db),
    session: Session = Depends(require_admin),
) -> AuditLogListResponse:
    try:
        page = await service.list_entries(db, session, filters, PageRequest(limit=limit, skip=skip))
    except ServiceError as e:
        raise to_http_exception(e) from e
    except Exception as e:
        logger.exception(f"Error listing audit log: {e}")
        raise internal_error() from e

    items = [
        AuditLogEntryResponse(
            id=entry.id,
            tenant_id=entry.tenant_id,
            actor_id=entry.actor_id,
            action=entry.action,
            entity_type=entry.entity_type,
            entity_id=entry.entity_id,
            details=entry.details,
            created_at=entry.created_at,
            category=service.classify_action(entry.action).value,
        )
        for entry in page.items
    ]
    return AuditLogListResponse(
        items=items, has_more=page.has_more, limit=page.limit, skip=page.skip
    )


@router.get(
    "/stats",
    response_model=AuditLogStatsResponse,
    summary="Audit Log Statistics",
    description="""
Success and failure counts over the most recent entries.

An action counts as a failure when it contains `failed` or `error`.

**Access:** Admin only
""",
)
async def get_log_stats(
    filters: ListFilters = Depends(_filters),
    db: AsyncSession = Depends(get_db),
    session: Session = Depends(require_admin),
) -> AuditLogStatsResponse:
    try:
        stats = await service.get_stats(db, session, filters)
    except ServiceError as e:
        raise to_http_exception(e) from e

    return AuditLogStatsResponse(**stats)
