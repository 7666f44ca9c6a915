"""
Tests for student notes: confidentiality, authorship and note views.
"""

from datetime import UTC, datetime, timedelta
from unittest.mock import patch

import pytest

from seminar_hub.core.errors import PermissionDeniedError
from seminar_hub.modules.audit.models import AuditLogEntry
from seminar_hub.modules.notes import service
from seminar_hub.modules.notes.helpers import NoteSort, NoteView, classify, sort_notes
from seminar_hub.modules.notes.models import StudentNote
from seminar_hub.modules.notes.schemas import StudentNoteCreate
from seminar_hub.modules.notes.store import ConfidentialRecordStore
from seminar_hub.modules.shared.enums import Priority

NOW = datetime(2026, 4, 20, 12, 0, tzinfo=UTC)


def _note(
    tenant_id: str,
    author_id: str = "author-1",
    *,
    title: str = "Check-in",
    confidential: bool = False,
    visible_to=(),
    tags=(),
    priority=Priority.MEDIUM,
    age_days: int = 0,
) -> StudentNote:
    return StudentNote(
        id=f"note-{title}",
        tenant_id=tenant_id,
        student_id="student-1",
        author_id=author_id,
        title=title,
        content="Observations",
        is_confidential=confidential,
        priority=priority,
        tags=list(tags),
        visible_to=list(visible_to),
        created_at=NOW - timedelta(days=age_days),
    )


# ============================================
# Confidential record store
# ============================================


@pytest.mark.asyncio
async def test_list_for_student_returns_only_own_notes(
    mock_db, rows_result, specialist_session
):
    mock_db.execute.return_value = rows_result([])
    store = ConfidentialRecordStore(enforced=False)

    await store.list_for_student(mock_db, specialist_session, "student-1")

    query = mock_db.execute.await_args.args[0]
    sql = str(query)
    params = query.compile().params
    assert "student_notes.author_id" in sql
    assert specialist_session.principal_id in params.values()
    assert "student-1" in params.values()


@pytest.mark.asyncio
async def test_list_for_student_refuses_other_requester(
    mock_db, specialist_session, other_specialist_session
):
    store = ConfidentialRecordStore(enforced=False)

    with pytest.raises(PermissionDeniedError):
        await store.list_for_student(
            mock_db,
            specialist_session,
            "student-1",
            requester_id=other_specialist_session.principal_id,
        )
    mock_db.execute.assert_not_called()


@pytest.mark.asyncio
async def test_unenforced_get_returns_confidential_note(
    mock_db, other_specialist_session, tenant_id
):
    mock_db.get.return_value = _note(tenant_id, confidential=True)
    store = ConfidentialRecordStore(enforced=False)

    note = await store.get(mock_db, other_specialist_session, "note-1")
    assert note.is_confidential is True


@pytest.mark.asyncio
async def test_enforced_get_withholds_confidential_note(
    mock_db, other_specialist_session, tenant_id
):
    mock_db.get.return_value = _note(tenant_id, confidential=True)
    store = ConfidentialRecordStore(enforced=True)

    with pytest.raises(PermissionDeniedError):
        await store.get(mock_db, other_specialist_session, "note-1")


@pytest.mark.asyncio
async def test_enforced_get_allows_visible_to(mock_db, other_specialist_session, tenant_id):
    mock_db.get.return_value = _note(
        tenant_id, confidential=True, visible_to=[other_specialist_session.principal_id]
    )
    store = ConfidentialRecordStore(enforced=True)

    assert await store.get(mock_db, other_specialist_session, "note-1") is not None


@pytest.mark.asyncio
async def test_enforced_listing_adds_visibility_clause(mock_db, rows_result, specialist_session):
    mock_db.execute.return_value = rows_result([])

    await ConfidentialRecordStore(enforced=True).list(mock_db, specialist_session)
    enforced_sql = str(mock_db.execute.await_args.args[0])

    await ConfidentialRecordStore(enforced=False).list(mock_db, specialist_session)
    plain_sql = str(mock_db.execute.await_args.args[0])

    assert "student_notes.visible_to @>" in enforced_sql
    assert "visible_to @>" not in plain_sql


@pytest.mark.asyncio
async def test_default_note_listing_is_author_scoped(
    mock_db, rows_result, other_specialist_session
):
    mock_db.execute.return_value = rows_result([])

    with patch.object(service, "notes", ConfidentialRecordStore(enforced=False)):
        await service.list_notes(mock_db, other_specialist_session)

    stmt = mock_db.execute.await_args.args[0]
    where = str(stmt.whereclause)
    assert "student_notes.tenant_id" in where
    assert "student_notes.author_id" in where
    assert other_specialist_session.principal_id in stmt.compile().params.values()


@pytest.mark.asyncio
async def test_enforced_note_listing_never_drops_author_scope(
    mock_db, rows_result, specialist_session
):
    mock_db.execute.return_value = rows_result([])

    await ConfidentialRecordStore(enforced=True).list(mock_db, specialist_session)

    where = str(mock_db.execute.await_args.args[0].whereclause)
    assert "student_notes.author_id" in where
    assert "is_confidential" not in where


@pytest.mark.asyncio
async def test_notes_cross_tenant_refused(mock_db, specialist_session, other_tenant_id):
    mock_db.get.return_value = _note(other_tenant_id)

    with pytest.raises(PermissionDeniedError):
        await ConfidentialRecordStore(enforced=False).get(mock_db, specialist_session, "note-1")


@pytest.mark.asyncio
async def test_counselors_have_no_note_access(mock_db, counselor_session):
    with pytest.raises(PermissionDeniedError):
        await ConfidentialRecordStore().list(mock_db, counselor_session)


# ============================================
# Service
# ============================================


@pytest.mark.asyncio
async def test_create_note_keeps_content_out_of_audit(mock_db, specialist_session):
    note = await service.create_note(
        mock_db,
        specialist_session,
        StudentNoteCreate(
            student_id="student-1",
            title="Family situation",
            content="Sensitive details",
            is_confidential=True,
            tags=[" Flagged ", "flagged", "Home"],
        ),
    )

    assert note.author_id == specialist_session.principal_id
    assert note.tags == ["flagged", "home"]
    [entry] = [c.args[0] for c in mock_db.add.call_args_list if isinstance(c.args[0], AuditLogEntry)]
    assert entry.action == "student_note_created"
    assert entry.details == {"studentId": "student-1", "isConfidential": True}


@pytest.mark.asyncio
async def test_only_author_deletes(mock_db, specialist_session, other_specialist_session, tenant_id):
    mock_db.get.return_value = _note(tenant_id, author_id=specialist_session.principal_id)

    with pytest.raises(PermissionDeniedError):
        await service.delete_note(mock_db, other_specialist_session, "note-1")
    mock_db.delete.assert_not_called()

    await service.delete_note(mock_db, specialist_session, "note-1")
    mock_db.delete.assert_awaited_once()
    [entry] = [c.args[0] for c in mock_db.add.call_args_list if isinstance(c.args[0], AuditLogEntry)]
    assert entry.action == "student_note_deleted"
    assert entry.details == {"studentId": "student-1", "title": "Check-in"}


# ============================================
# Views and ordering
# ============================================


def test_views(tenant_id):
    recent = _note(tenant_id, title="recent", age_days=1)
    old = _note(tenant_id, title="old", age_days=30, tags=["flagged"])
    secret = _note(tenant_id, title="secret", age_days=10, confidential=True)
    notes = [recent, old, secret]

    assert classify(notes, NoteView.ALL, NOW) == notes
    assert classify(notes, NoteView.RECENT, NOW) == [recent]
    assert classify(notes, NoteView.FLAGGED, NOW) == [old]
    assert classify(notes, NoteView.CONFIDENTIAL, NOW) == [secret]


def test_sort_orders(tenant_id):
    a = _note(tenant_id, title="banana", age_days=3, priority=Priority.LOW)
    b = _note(tenant_id, title="Apple", age_days=1, priority=Priority.HIGH)
    c = _note(tenant_id, title="cherry", age_days=2, priority=Priority.MEDIUM)

    assert sort_notes([a, b, c], NoteSort.RECENT) == [b, c, a]
    assert sort_notes([a, b, c], NoteSort.ALPHABETICAL) == [b, a, c]
    assert sort_notes([a, b, c], NoteSort.PRIORITY) == [b, c, a]
