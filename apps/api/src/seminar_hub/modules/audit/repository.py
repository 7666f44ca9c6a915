"""
Audit Log Repository

Insert and query operations only; there is deliberately no update or
delete function.
"""

import logging
from datetime import datetime
from enum import Enum
from typing import Any

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from seminar_hub.core.database import store_errors
from seminar_hub.modules.audit.models import AuditLogEntry
from seminar_hub.modules.shared.models import new_id, utc_now

logger = logging.getLogger(__name__)

# Exact-match filters accepted by list_entries
FILTER_FIELDS = ("actor_id", "action", "entity_type")


def _plain(value: Any) -> Any:
    """Make ``details`` JSON-safe (enums, datetimes, nested containers)."""
    if isinstance(value, dict):
        return {str(key): _plain(item) for key, item in value.items()}
    if isinstance(value, (list, tuple, set, frozenset)):
        return [_plain(item) for item in value]
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, datetime):
        return value.isoformat()
    return value


def build_entry(
    *,
    actor_id: str | None,
    tenant_id: str | None,
    action: str,
    entity_type: str,
    entity_id: str | None,
    details: dict[str, Any] | None = None,
) -> AuditLogEntry:
    """Construct an entry with its id and timestamp assigned up front."""
    return AuditLogEntry(
        id=new_id(),
        actor_id=actor_id,
        tenant_id=tenant_id,
        action=action,
        entity_type=entity_type,
        entity_id=str(entity_id) if entity_id is not None else None,
        details=_plain(details or {}),
        created_at=utc_now(),
    )


async def append(db: AsyncSession, entry: AuditLogEntry) -> AuditLogEntry:
    """
    Persist a standalone entry (no paired data write).

    Raises:
        TransientError: If the store is unavailable
    """
    with store_errors(f"record {entry.action}"):
        try:
            db.add(entry)
            await db.commit()
        except Exception:
            await db.rollback()
            raise

    logger.info(f"Audit: {entry.action} {entry.entity_type}:{entry.entity_id} by {entry.actor_id}")
    return entry


async def list_entries(
    db: AsyncSession,
    *,
    tenant_id: str,
    exact: dict[str, Any] | None = None,
    created_from: datetime | None = None,
    created_to: datetime | None = None,
    skip: int = 0,
    limit: int = 100,
) -> list[AuditLogEntry]:
    """
    List a tenant's entries, newest first.

    Entries sharing a timestamp keep insertion order (sequence ascending),
    so the ordering is a stable sort of the log.
    """
    query = select(AuditLogEntry).where(AuditLogEntry.tenant_id == tenant_id)

    for name, value in (exact or {}).items():
        query = query.where(getattr(AuditLogEntry, name) == value)
    if created_from is not None:
        query = query.where(AuditLogEntry.created_at >= created_from)
    if created_to is not None:
        query = query.where(AuditLogEntry.created_at <= created_to)

    query = (
        query.order_by(AuditLogEntry.created_at.desc(), AuditLogEntry.sequence.asc())
        .offset(skip)
        .limit(limit)
    )

    with store_errors("list audit log"):
        result = await db.execute(query)
    return list(result.scalars().all())
