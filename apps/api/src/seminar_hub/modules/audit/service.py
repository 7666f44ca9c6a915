"""
Audit Log Service

Recording, listing and classifying audit entries.

Classification is a substring match on the action string, checked in
a fixed order. Statistics depend on it, so the rules must not be
"improved" (e.g. ``login_failed`` is a login for display purposes but
still counts as a failure).
"""

import logging
from collections import Counter
from enum import Enum
from typing import Any

from sqlalchemy.ext.asyncio import AsyncSession

from seminar_hub.core.config import settings
from seminar_hub.core.errors import PermissionDeniedError, ValidationFailedError
from seminar_hub.modules.audit import repository
from seminar_hub.modules.audit.models import AuditLogEntry
from seminar_hub.modules.identity.capabilities import EntityKind
from seminar_hub.modules.identity.session import Session
from seminar_hub.modules.shared.filters import ListFilters
from seminar_hub.modules.shared.pagination import ApproximateHasMore, Page, PageRequest

logger = logging.getLogger(__name__)

pagination = ApproximateHasMore()


class ActionCategory(str, Enum):
    CREATED = "created"
    UPDATED = "updated"
    DELETED = "deleted"
    LOGIN = "login"
    FAILURE = "failure"
    OTHER = "other"


def classify_action(action: str) -> ActionCategory:
    """Display category of an action, first matching substring wins."""
    if "created" in action:
        return ActionCategory.CREATED
    if "updated" in action:
        return ActionCategory.UPDATED
    if "deleted" in action:
        return ActionCategory.DELETED
    if "login" in action:
        return ActionCategory.LOGIN
    if "error" in action or "failed" in action:
        return ActionCategory.FAILURE
    return ActionCategory.OTHER


def is_failure(action: str) -> bool:
    return "failed" in action or "error" in action


def summarize(actions: list[str]) -> dict[str, Any]:
    """
    Counts used by the activity dashboard.

    Returns:
        Dict with total, success, failures and per-category counts
    """
    failures = sum(1 for action in actions if is_failure(action))
    categories = Counter(classify_action(action).value for action in actions)
    return {
        "total": len(actions),
        "success": len(actions) - failures,
        "failures": failures,
        "by_category": dict(categories),
    }


async def record(
    db: AsyncSession,
    *,
    actor_id: str | None,
    tenant_id: str | None,
    action: str,
    entity_type: str,
    entity_id: str | None,
    details: dict[str, Any] | None = None,
) -> AuditLogEntry:
    """
    Append a standalone audit entry.

    Data writes must use RecordedWrite instead so the entry shares
    their transaction. This is for events with no data change (logins,
    profile lookup failures).
    """
    entry = repository.build_entry(
        actor_id=actor_id,
        tenant_id=tenant_id,
        action=action,
        entity_type=entity_type,
        entity_id=entity_id,
        details=details,
    )
    return await repository.append(db, entry)


def _tenant_of(session: Session) -> str:
    if not session.capabilities.can_access(EntityKind.AUDIT_LOG):
        logger.warning(f"Audit log access denied for {session.principal_id} ({session.role.value})")
        raise PermissionDeniedError("Audit log access requires the admin role.")
    if session.tenant_id is None:
        raise PermissionDeniedError("Session has no tenant scope.")
    return session.tenant_id


def _check_filters(filters: ListFilters) -> dict[str, Any]:
    exact = filters.active_exact()
    unknown = set(exact) - set(repository.FILTER_FIELDS)
    if unknown:
        raise ValidationFailedError(
            f"Cannot filter audit log by: {', '.join(sorted(unknown))}",
            error_code="INVALID_FILTER",
        )
    return exact


async def list_entries(
    db: AsyncSession,
    session: Session,
    filters: ListFilters | None = None,
    page: PageRequest | None = None,
) -> Page[AuditLogEntry]:
    """
    List the session tenant's audit entries, newest first.

    ``filters.search`` matches action, entity type and entity id. As with
    every other listing, ``has_more`` is measured before the search.
    """
    tenant_id = _tenant_of(session)
    filters = filters or ListFilters()
    page = page or PageRequest(limit=settings.audit_log_page_size)

    entries = await repository.list_entries(
        db,
        tenant_id=tenant_id,
        exact=_check_filters(filters),
        created_from=filters.created_from,
        created_to=filters.created_to,
        skip=page.skip,
        limit=pagination.fetch_size(page),
    )
    has_more = pagination.has_more(page, len(entries))
    entries = entries[: page.limit]

    if filters.search:
        needle = filters.search.lower()
        entries = [
            entry
            for entry in entries
            if needle in entry.action.lower()
            or needle in entry.entity_type.lower()
            or needle in (entry.entity_id or "").lower()
        ]
    return Page(items=entries, has_more=has_more, limit=page.limit, skip=page.skip)


async def get_stats(
    db: AsyncSession,
    session: Session,
    filters: ListFilters | None = None,
) -> dict[str, Any]:
    """Classification counts over the most recent page of entries."""
    entries = await list_entries(db, session, filters)
    return summarize([entry.action for entry in entries.items])
