"""
Tenant Repository

Generic tenant-scoped access to one entity collection. Every call takes
the acting Session explicitly; its tenant is the only scope that can be
read or written. A target entity belonging to another tenant raises
PermissionDeniedError rather than being filtered out silently.

Writes go through RecordedWrite, so each create/update/status change
commits together with exactly one audit entry.

Concurrent updates are last-write-wins: there is no version column.
"""

import logging
from collections.abc import Iterable, Mapping, Sequence
from typing import Any, Generic, TypeVar

from sqlalchemy import ColumnElement, select
from sqlalchemy.ext.asyncio import AsyncSession

from seminar_hub.core.database import store_errors
from seminar_hub.core.errors import (
    InvalidStatusTransitionError,
    NotFoundError,
    PermissionDeniedError,
    ValidationFailedError,
)
from seminar_hub.modules.audit.recorded_write import RecordedWrite
from seminar_hub.modules.identity.capabilities import EntityKind
from seminar_hub.modules.identity.session import Session
from seminar_hub.modules.shared.filters import ListFilters, apply_filters, matches_search
from seminar_hub.modules.shared.models import new_id, utc_now
from seminar_hub.modules.shared.pagination import (
    ApproximateHasMore,
    Page,
    PageRequest,
    PaginationStrategy,
)

logger = logging.getLogger(__name__)

ModelT = TypeVar("ModelT")

# Never writable through update()
PROTECTED_FIELDS = frozenset({"id", "tenant_id", "created_at", "updated_at"})


class TenantRepository(Generic[ModelT]):
    """
    Args:
        model: ORM model class
        entity_kind: Kind checked against the session capabilities
        search_fields: String fields matched by free-text search
        filter_fields: Fields accepted as exact-match filters
        scope_field: Attribute holding the owning tenant id
        pagination: has_more strategy (ApproximateHasMore by default)
    """

    def __init__(
        self,
        model: type[ModelT],
        entity_kind: EntityKind,
        *,
        search_fields: Sequence[str] = (),
        filter_fields: Sequence[str] = (),
        scope_field: str = "tenant_id",
        pagination: PaginationStrategy | None = None,
    ):
        self.model = model
        self.entity_kind = entity_kind
        self.search_fields = tuple(search_fields)
        self.filter_fields = tuple(filter_fields)
        self.scope_field = scope_field
        self.pagination = pagination or ApproximateHasMore()

    @property
    def entity_type(self) -> str:
        return self.entity_kind.value

    # ------------------------------------------------------------------
    # Scope checks
    # ------------------------------------------------------------------

    def require_kind(self, session: Session) -> None:
        if not session.capabilities.can_access(self.entity_kind):
            logger.warning(
                f"Role {session.role.value} may not access {self.entity_type} "
                f"(principal {session.principal_id})"
            )
            raise PermissionDeniedError(
                f"Your role does not have access to {self.entity_type} records."
            )

    def require_tenant(self, session: Session) -> str:
        if session.tenant_id is None:
            logger.warning(f"Session {session.principal_id} has no tenant scope")
            raise PermissionDeniedError("Your session is not associated with a tenant.")
        return session.tenant_id

    def in_scope(self, session: Session, entity: ModelT) -> bool:
        return getattr(entity, self.scope_field) == session.tenant_id

    def ensure_in_scope(self, session: Session, entity: ModelT) -> None:
        self.require_tenant(session)
        if not self.in_scope(session, entity):
            logger.warning(
                f"Cross-tenant access refused: {session.principal_id} (tenant "
                f"{session.tenant_id}) -> {self.entity_type}:{getattr(entity, 'id', None)}"
            )
            raise PermissionDeniedError(f"This {self.entity_type} belongs to another tenant.")

    def scope_criteria(self, session: Session) -> list[ColumnElement[bool]]:
        """WHERE clauses restricting a listing to the session's tenant."""
        return [getattr(self.model, self.scope_field) == self.require_tenant(session)]

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    async def list(
        self,
        db: AsyncSession,
        session: Session,
        filters: ListFilters | None = None,
        page: PageRequest | None = None,
        *,
        criteria: Iterable[ColumnElement[bool]] = (),
    ) -> Page[ModelT]:
        """
        List entities in the session tenant, newest first.

        ``has_more`` comes from the pagination strategy and is measured on
        the fetched rows, before free-text search narrows them in memory.
        """
        self.require_kind(session)
        filters = filters or ListFilters()
        page = page or PageRequest()

        query = select(self.model).where(*self.scope_criteria(session), *criteria)
        query = apply_filters(query, self.model, filters, self.filter_fields)
        query = (
            query.order_by(self.model.created_at.desc())
            .offset(page.skip)
            .limit(self.pagination.fetch_size(page))
        )

        with store_errors(f"list {self.entity_type}"):
            result = await db.execute(query)
        rows = list(result.scalars().all())

        has_more = self.pagination.has_more(page, len(rows))
        rows = rows[: page.limit]
        items = [row for row in rows if matches_search(row, self.search_fields, filters.search)]

        return Page(items=items, has_more=has_more, limit=page.limit, skip=page.skip)

    async def get(self, db: AsyncSession, session: Session, entity_id: str) -> ModelT | None:
        """
        Fetch one entity by id.

        Returns:
            The entity, or None if it does not exist

        Raises:
            PermissionDeniedError: If it belongs to another tenant
        """
        self.require_kind(session)
        with store_errors(f"get {self.entity_type}"):
            entity = await db.get(self.model, entity_id)
        if entity is None:
            return None
        self.ensure_in_scope(session, entity)
        return entity

    async def get_or_raise(self, db: AsyncSession, session: Session, entity_id: str) -> ModelT:
        entity = await self.get(db, session, entity_id)
        if entity is None:
            raise NotFoundError(self.entity_type, entity_id)
        return entity

    # ------------------------------------------------------------------
    # Writes
    # ------------------------------------------------------------------

    async def create(
        self,
        db: AsyncSession,
        session: Session,
        values: Mapping[str, Any],
        *,
        action: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> ModelT:
        """
        Create an entity in the session tenant with one audit entry.

        Raises:
            PermissionDeniedError: If ``values`` names a different tenant
        """
        self.require_kind(session)
        tenant_id = self.require_tenant(session)

        values = dict(values)
        requested_tenant = values.pop(self.scope_field, None)
        if requested_tenant is not None and requested_tenant != tenant_id:
            logger.warning(
                f"{session.principal_id} tried to create {self.entity_type} in tenant {requested_tenant}"
            )
            raise PermissionDeniedError(f"Cannot create {self.entity_type} in another tenant.")

        now = utc_now()
        entity = self.model(
            id=new_id(),
            created_at=now,
            updated_at=now,
            **{self.scope_field: tenant_id},
            **values,
        )

        await RecordedWrite(
            action=action or f"{self.entity_type}_created",
            entity_type=self.entity_type,
            entity_id=entity.id,
            details=details if details is not None else {},
            added=[entity],
        ).execute(db, session)
        return entity

    async def update(
        self,
        db: AsyncSession,
        session: Session,
        entity_id: str,
        patch: Mapping[str, Any],
        *,
        action: str | None = None,
        details: dict[str, Any] | None = None,
        entity: ModelT | None = None,
    ) -> ModelT:
        """
        Apply a partial update (last write wins) with one audit entry.

        Pass ``entity`` when the caller already loaded and checked it.
        """
        illegal = PROTECTED_FIELDS.intersection(patch)
        if illegal:
            raise ValidationFailedError(
                f"Cannot update protected fields: {', '.join(sorted(illegal))}",
                error_code="PROTECTED_FIELD",
            )

        if entity is None:
            entity = await self.get_or_raise(db, session, entity_id)

        for name, value in patch.items():
            setattr(entity, name, value)
        entity.updated_at = utc_now()

        await RecordedWrite(
            action=action or f"{self.entity_type}_updated",
            entity_type=self.entity_type,
            entity_id=entity_id,
            details=details if details is not None else {"fields": sorted(patch)},
            added=[entity],
        ).execute(db, session)
        return entity

    async def set_status(
        self,
        db: AsyncSession,
        session: Session,
        entity_id: str,
        new_status: Any,
        *,
        transitions: Mapping[Any, set[Any]] | None = None,
        action: str | None = None,
        extra: Mapping[str, Any] | None = None,
        details: dict[str, Any] | None = None,
    ) -> ModelT:
        """
        Move an entity to ``new_status`` with one audit entry.

        Args:
            transitions: Optional state machine {current: {allowed next}}
            extra: Additional fields set with the status (e.g. cancelled_at)

        Raises:
            InvalidStatusTransitionError: If the state machine forbids the move
        """
        entity = await self.get_or_raise(db, session, entity_id)
        current = entity.status

        if transitions is not None and new_status not in transitions.get(current, set()):
            raise InvalidStatusTransitionError(
                self.entity_type,
                getattr(current, "value", str(current)),
                getattr(new_status, "value", str(new_status)),
            )

        entity.status = new_status
        for name, value in (extra or {}).items():
            setattr(entity, name, value)
        entity.updated_at = utc_now()

        payload = {"from": current, "to": new_status}
        payload.update(details or {})

        await RecordedWrite(
            action=action or f"{self.entity_type}_status_updated",
            entity_type=self.entity_type,
            entity_id=entity_id,
            details=payload,
            added=[entity],
        ).execute(db, session)
        return entity

    async def delete(
        self,
        db: AsyncSession,
        session: Session,
        entity_id: str,
        *,
        details: dict[str, Any] | None = None,
        entity: ModelT | None = None,
    ) -> None:
        """Hard delete (no tombstone) with one audit entry."""
        if entity is None:
            entity = await self.get_or_raise(db, session, entity_id)

        await RecordedWrite(
            action=f"{self.entity_type}_deleted",
            entity_type=self.entity_type,
            entity_id=entity_id,
            details=details or {},
            deleted=[entity],
        ).execute(db, session)


__all__ = ["TenantRepository", "PROTECTED_FIELDS"]
