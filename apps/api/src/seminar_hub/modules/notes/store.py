"""
Confidential Record Store

TenantRepository for student notes.

Listings only ever return the requester's own notes. By default the
confidentiality flag is otherwise a handling hint: any specialist of
the tenant may read a note by id. With ``confidential_notes_enforced``
on, listings also include notes that list the requester in
``visible_to``, and confidential notes are withheld from reads by id
unless the requester is the author or listed in ``visible_to``.
"""

import logging
from collections.abc import Iterable
from typing import Any

from sqlalchemy import ColumnElement, or_
from sqlalchemy.ext.asyncio import AsyncSession

from seminar_hub.core.config import settings
from seminar_hub.core.errors import PermissionDeniedError
from seminar_hub.modules.identity.capabilities import EntityKind
from seminar_hub.modules.identity.session import Session
from seminar_hub.modules.notes.models import StudentNote
from seminar_hub.modules.shared.filters import ListFilters
from seminar_hub.modules.shared.pagination import Page, PageRequest
from seminar_hub.modules.shared.repository import TenantRepository

logger = logging.getLogger(__name__)


class ConfidentialRecordStore(TenantRepository[StudentNote]):
    def __init__(self, *, enforced: bool | None = None, **kwargs: Any):
        super().__init__(
            StudentNote,
            EntityKind.STUDENT_NOTE,
            search_fields=("title", "content"),
            filter_fields=("student_id", "author_id", "is_confidential", "priority"),
            **kwargs,
        )
        self._enforced = enforced

    @property
    def enforced(self) -> bool:
        if self._enforced is not None:
            return self._enforced
        return settings.confidential_notes_enforced

    def visibility_criteria(self, session: Session) -> list[ColumnElement[bool]]:
        """Listing scope: own notes, plus notes shared via ``visible_to`` when enforced."""
        if not self.enforced:
            return [StudentNote.author_id == session.principal_id]
        return [
            or_(
                StudentNote.author_id == session.principal_id,
                StudentNote.visible_to.contains([session.principal_id]),
            )
        ]

    async def list(
        self,
        db: AsyncSession,
        session: Session,
        filters: ListFilters | None = None,
        page: PageRequest | None = None,
        *,
        criteria: Iterable[ColumnElement[bool]] = (),
    ) -> Page[StudentNote]:
        return await super().list(
            db,
            session,
            filters,
            page,
            criteria=[*criteria, *self.visibility_criteria(session)],
        )

    async def get(self, db: AsyncSession, session: Session, entity_id: str) -> StudentNote | None:
        note = await super().get(db, session, entity_id)
        if note is not None and self.enforced and not note.readable_by(session.principal_id):
            logger.warning(
                f"Confidential note {note.id} withheld from {session.principal_id}"
            )
            raise PermissionDeniedError("This note is confidential.")
        return note

    async def list_for_student(
        self,
        db: AsyncSession,
        session: Session,
        student_id: str,
        requester_id: str | None = None,
        page: PageRequest | None = None,
    ) -> Page[StudentNote]:
        """
        The requester's own notes about one student, newest first.

        ``requester_id`` defaults to the session principal; asking for
        another author's notes is refused.
        """
        requester_id = requester_id or session.principal_id
        if requester_id != session.principal_id:
            raise PermissionDeniedError("You can only list your own notes.")

        return await super().list(
            db,
            session,
            ListFilters(exact={"student_id": student_id}),
            page,
            criteria=[StudentNote.author_id == requester_id],
        )


notes = ConfidentialRecordStore()
