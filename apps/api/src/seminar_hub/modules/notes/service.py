"""
Student Note Service

Notes are written by specialists. Only the author may edit or delete
a note.
"""

import logging

from sqlalchemy.ext.asyncio import AsyncSession

from seminar_hub.core.errors import PermissionDeniedError, ValidationFailedError
from seminar_hub.modules.identity.session import Session
from seminar_hub.modules.notes.helpers import NoteSort, NoteView, classify, sort_notes
from seminar_hub.modules.notes.models import StudentNote
from seminar_hub.modules.notes.schemas import StudentNoteCreate, StudentNoteUpdate
from seminar_hub.modules.notes.store import notes
from seminar_hub.modules.shared.filters import ListFilters
from seminar_hub.modules.shared.pagination import Page, PageRequest

logger = logging.getLogger(__name__)


def _ensure_author(session: Session, note: StudentNote) -> None:
    if note.author_id != session.principal_id:
        raise PermissionDeniedError("Only the note's author can change it.")


async def create_note(db: AsyncSession, session: Session, data: StudentNoteCreate) -> StudentNote:
    note = await notes.create(
        db,
        session,
        {
            "student_id": data.student_id,
            "author_id": session.principal_id,
            "title": data.title,
            "content": data.content,
            "is_confidential": data.is_confidential,
            "priority": data.priority,
            "tags": data.tags,
            "visible_to": data.visible_to,
        },
        # Note content stays out of the audit log
        details={"studentId": data.student_id, "isConfidential": data.is_confidential},
    )
    logger.info(f"Note {note.id} created by {session.principal_id}")
    return note


async def list_notes(
    db: AsyncSession,
    session: Session,
    filters: ListFilters | None = None,
    page: PageRequest | None = None,
    *,
    view: NoteView = NoteView.ALL,
    order: NoteSort = NoteSort.RECENT,
) -> Page[StudentNote]:
    """
    The requester's visible notes in one classification view and sort order.

    View and order apply to the fetched page; ``has_more`` is unaffected.
    """
    result = await notes.list(db, session, filters, page)
    result.items = sort_notes(classify(result.items, view), order)
    return result


async def list_for_student(
    db: AsyncSession,
    session: Session,
    student_id: str,
    page: PageRequest | None = None,
) -> Page[StudentNote]:
    return await notes.list_for_student(db, session, student_id, session.principal_id, page)


async def get_note(db: AsyncSession, session: Session, note_id: str) -> StudentNote:
    return await notes.get_or_raise(db, session, note_id)


async def update_note(
    db: AsyncSession,
    session: Session,
    note_id: str,
    data: StudentNoteUpdate,
) -> StudentNote:
    note = await notes.get_or_raise(db, session, note_id)
    _ensure_author(session, note)

    patch = data.model_dump(exclude_none=True)
    if not patch:
        raise ValidationFailedError("No changes supplied", error_code="EMPTY_UPDATE")

    return await notes.update(db, session, note_id, patch, entity=note)


async def delete_note(db: AsyncSession, session: Session, note_id: str) -> None:
    """Hard delete. Callers confirm before getting here."""
    note = await notes.get_or_raise(db, session, note_id)
    _ensure_author(session, note)
    await notes.delete(
        db,
        session,
        note_id,
        details={"studentId": note.student_id, "title": note.title},
        entity=note,
    )
    logger.info(f"Note {note_id} deleted by {session.principal_id}")
