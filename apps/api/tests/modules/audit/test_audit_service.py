"""
Tests for audit classification, listing and immutability.
"""

from unittest.mock import AsyncMock, patch

import pytest

from seminar_hub.core.errors import PermissionDeniedError, ValidationFailedError
from seminar_hub.modules.audit import repository, service
from seminar_hub.modules.audit.models import (
    AuditLogEntry,
    AuditLogImmutableError,
    _refuse_delete,
    _refuse_update,
)
from seminar_hub.modules.audit.service import ActionCategory, classify_action, summarize
from seminar_hub.modules.shared.filters import ListFilters
from seminar_hub.modules.shared.pagination import PageRequest


@pytest.mark.parametrize(
    ("action", "category"),
    [
        ("user_created", ActionCategory.CREATED),
        ("tenant_status_updated", ActionCategory.UPDATED),
        ("student_note_deleted", ActionCategory.DELETED),
        ("login_success", ActionCategory.LOGIN),
        ("login_failed", ActionCategory.LOGIN),
        ("profile_lookup_failed", ActionCategory.FAILURE),
        ("sync_error", ActionCategory.FAILURE),
        ("report_executed", ActionCategory.OTHER),
    ],
)
def test_classify_action(action, category):
    assert classify_action(action) == category


def test_summarize_counts_failures_by_substring():
    stats = summarize(["user_created", "login_failed", "report_generated"])

    assert stats["total"] == 3
    assert stats["success"] == 2
    assert stats["failures"] == 1
    assert stats["by_category"] == {"created": 1, "login": 1, "other": 1}


def test_summarize_empty():
    assert summarize([]) == {"total": 0, "success": 0, "failures": 0, "by_category": {}}


def test_build_entry_makes_details_json_safe(tenant_id):
    entry = repository.build_entry(
        actor_id="a-1",
        tenant_id=tenant_id,
        action="user_status_updated",
        entity_type="user",
        entity_id="u-1",
        details={"from": ActionCategory.CREATED, "ids": ("x", "y")},
    )

    assert entry.id
    assert entry.created_at is not None
    assert entry.details == {"from": "created", "ids": ["x", "y"]}


def test_entries_refuse_update_and_delete():
    entry = AuditLogEntry(id="e-1", action="user_created", entity_type="user")

    with pytest.raises(AuditLogImmutableError):
        _refuse_update(None, None, entry)
    with pytest.raises(AuditLogImmutableError):
        _refuse_delete(None, None, entry)


@pytest.mark.asyncio
async def test_list_orders_newest_first_then_insertion(mock_db, rows_result, tenant_id):
    mock_db.execute.return_value = rows_result([])

    await repository.list_entries(mock_db, tenant_id=tenant_id, limit=100)

    sql = str(mock_db.execute.await_args.args[0])
    assert "ORDER BY audit_log_entries.created_at DESC, audit_log_entries.sequence ASC" in sql


@pytest.mark.asyncio
async def test_list_entries_requires_admin(mock_db, specialist_session):
    with pytest.raises(PermissionDeniedError):
        await service.list_entries(mock_db, specialist_session)


@pytest.mark.asyncio
async def test_list_entries_rejects_unknown_filter(mock_db, admin_session):
    with pytest.raises(ValidationFailedError):
        await service.list_entries(mock_db, admin_session, ListFilters(exact={"details": "x"}))


@pytest.mark.asyncio
async def test_list_entries_scopes_to_tenant_and_searches(mock_db, admin_session):
    entries = [
        AuditLogEntry(id="1", action="user_created", entity_type="user", entity_id="u-1"),
        AuditLogEntry(id="2", action="report_executed", entity_type="report", entity_id="r-1"),
    ]

    with patch.object(
        repository, "list_entries", new_callable=AsyncMock, return_value=entries
    ) as mock_list:
        result = await service.list_entries(
            mock_db,
            admin_session,
            ListFilters(search="REPORT", exact={"actor_id": "a-1"}),
        )

    assert [entry.id for entry in result.items] == ["2"]
    assert result.has_more is False
    kwargs = mock_list.await_args.kwargs
    assert kwargs["tenant_id"] == admin_session.tenant_id
    assert kwargs["exact"] == {"actor_id": "a-1"}
    assert kwargs["limit"] == 100


@pytest.mark.asyncio
async def test_stats_over_listed_entries(mock_db, admin_session):
    entries = [
        AuditLogEntry(id="1", action="user_created", entity_type="user"),
        AuditLogEntry(id="2", action="login_failed", entity_type="user"),
    ]

    with patch.object(repository, "list_entries", new_callable=AsyncMock, return_value=entries):
        stats = await service.get_stats(mock_db, admin_session)

    assert stats["total"] == 2
    assert stats["failures"] == 1


@pytest.mark.asyncio
async def test_list_entries_reports_has_more_before_search(mock_db, admin_session):
    entries = [
        AuditLogEntry(id=str(i), action="user_updated", entity_type="user", entity_id=f"u-{i}")
        for i in range(2)
    ]

    with patch.object(repository, "list_entries", new_callable=AsyncMock, return_value=entries):
        result = await service.list_entries(
            mock_db,
            admin_session,
            ListFilters(search="report"),
            PageRequest(limit=2, skip=4),
        )

    assert result.items == []
    assert result.has_more is True
    assert (result.limit, result.skip) == (2, 4)
