"""
Student Note Router

Specialist-only endpoints for student notes.
"""

import logging

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from seminar_hub.core.auth import require_specialist
from seminar_hub.core.database import get_db
from seminar_hub.core.errors import (
    ServiceError,
    ValidationFailedError,
    internal_error,
    to_http_exception,
)
from seminar_hub.modules.identity.session import Session
from seminar_hub.modules.notes import service
from seminar_hub.modules.notes.helpers import NoteSort, NoteView
from seminar_hub.modules.notes.schemas import (
    StudentNoteCreate,
    StudentNoteListResponse,
    StudentNoteResponse,
    StudentNoteUpdate,
)
from seminar_hub.modules.shared.enums import Priority
from seminar_hub.modules.shared.filters import ListFilters
from seminar_hub.modules.shared.pagination import Page, PageRequest

logger = logging.getLogger(__name__)

router = APIRouter()


def _page_response(page: Page) -> StudentNoteListResponse:
    return StudentNoteListResponse(
        items=[StudentNoteResponse.model_validate(note) for note in page.items],
        has_more=page.has_more,
        limit=page.limit,
        skip=page.skip,
    )


@router.get(
    "",
    response_model=StudentNoteListResponse,
    summary="List Notes",
    description="""
List the tenant's notes in one view (`all`, `confidential`, `recent`,
`flagged`) and sort order (`recent`, `alphabetical`, `priority`).

**Access:** Specialist only
""",
)
async def list_notes(
    view: NoteView = Query(NoteView.ALL),
    sort: NoteSort = Query(NoteSort.RECENT),
    student_id: str | None = Query(None, alias="studentId"),
    is_confidential: bool | None = Query(None, alias="isConfidential"),
    priority: Priority | None = Query(None),
    search: str | None = Query(None, max_length=100),
    skip: int = Query(0, ge=0),
    limit: int = Query(50, ge=1, le=100),
    db: AsyncSession = Depends(get_db),
    session: Session = Depends(require_specialist),
) -> StudentNoteListResponse:
    try:
        page = await service.list_notes(
            db,
            session,
            ListFilters(
                search=search,
                exact={
                    "student_id": student_id,
                    "is_confidential": is_confidential,
                    "priority": priority,
                },
            ),
            PageRequest(limit=limit, skip=skip),
            view=view,
            order=sort,
        )
    except ServiceError as e:
        raise to_http_exception(e) from e
    except Exception as e:
        logger.exception(f"Error listing notes: {e}")
        raise internal_error() from e

    return _page_response(page)


@router.get(
    "/students/{student_id}",
    response_model=StudentNoteListResponse,
    summary="My Notes for Student",
    description="The caller's own notes about one student, newest first.",
)
async def list_for_student(
    student_id: str,
    skip: int = Query(0, ge=0),
    limit: int = Query(50, ge=1, le=100),
    db: AsyncSession = Depends(get_db),
    session: Session = Depends(require_specialist),
) -> StudentNoteListResponse:
    try:
        page = await service.list_for_student(
            db, session, student_id, PageRequest(limit=limit, skip=skip)
        )
    except ServiceError as e:
        raise to_http_exception(e) from e
    return _page_response(page)


@router.post(
    "",
    response_model=StudentNoteResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create Note",
)
async def create_note(
    body: StudentNoteCreate,
    db: AsyncSession = Depends(get_db),
    session: Session = Depends(require_specialist),
) -> StudentNoteResponse:
    try:
        note = await service.create_note(db, session, body)
    except ServiceError as e:
        raise to_http_exception(e) from e
    return StudentNoteResponse.model_validate(note)


@router.get("/{note_id}", response_model=StudentNoteResponse, summary="Get Note")
async def get_note(
    note_id: str,
    db: AsyncSession = Depends(get_db),
    session: Session = Depends(require_specialist),
) -> StudentNoteResponse:
    try:
        note = await service.get_note(db, session, note_id)
    except ServiceError as e:
        raise to_http_exception(e) from e
    return StudentNoteResponse.model_validate(note)


@router.patch("/{note_id}", response_model=StudentNoteResponse, summary="Update Note")
async def update_note(
    note_id: str,
    body: StudentNoteUpdate,
    db: AsyncSession = Depends(get_db),
    session: Session = Depends(require_specialist),
) -> StudentNoteResponse:
    try:
        note = await service.update_note(db, session, note_id, body)
    except ServiceError as e:
        raise to_http_exception(e) from e
    return StudentNoteResponse.model_validate(note)


@router.delete(
    "/{note_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete Note",
    description="""
Permanently delete a note. There is no undo.

Pass `confirm=true`; without it the request is rejected with 422.
""",
)
async def delete_note(
    note_id: str,
    confirm: bool = Query(False),
    db: AsyncSession = Depends(get_db),
    session: Session = Depends(require_specialist),
) -> None:
    try:
        if not confirm:
            raise ValidationFailedError(
                "Deleting a note is permanent; pass confirm=true",
                error_code="CONFIRMATION_REQUIRED",
            )
        await service.delete_note(db, session, note_id)
    except ServiceError as e:
        raise to_http_exception(e) from e
