"""
Audit Log Models

Append-only record of mutating actions. Entries are never updated or
deleted: the ORM refuses both, and the migration installs a trigger
that does the same at the database level.
"""

from datetime import datetime
from typing import Any

from sqlalchemy import BigInteger, DateTime, Identity, Index, String, event
from sqlalchemy.dialects.postgresql import JSONB, UUID
from sqlalchemy.orm import Mapped, mapped_column

from seminar_hub.core.database import Base
from seminar_hub.core.errors import ServiceError
from seminar_hub.modules.shared.models import new_id, utc_now


class AuditLogImmutableError(ServiceError):
    """Raised on any attempt to change or remove an audit entry."""

    def __init__(self, entry_id: str | None):
        super().__init__(
            message=f"Audit log entries are immutable (entry {entry_id})",
            error_code="AUDIT_LOG_IMMUTABLE",
            status_code=409,
        )


class AuditLogEntry(Base):
    """
    One audited action.

    ``sequence`` is assigned by the database in insertion order and
    breaks ties between entries sharing a ``created_at``.
    """

    __tablename__ = "audit_log_entries"
    __table_args__ = (
        Index("ix_audit_log_entries_tenant_created", "tenant_id", "created_at"),
    )

    id: Mapped[str] = mapped_column(
        UUID(as_uuid=False),
        primary_key=True,
        default=new_id,
    )
    sequence: Mapped[int] = mapped_column(
        BigInteger,
        Identity(always=True),
        unique=True,
        nullable=False,
    )

    # NULL for platform-level events (e.g. failed login for an unknown email)
    tenant_id: Mapped[str | None] = mapped_column(
        UUID(as_uuid=False),
        nullable=True,
        index=True,
    )
    actor_id: Mapped[str | None] = mapped_column(
        String(100),
        nullable=True,
        index=True,
    )

    action: Mapped[str] = mapped_column(String(100), nullable=False, index=True)
    entity_type: Mapped[str] = mapped_column(String(50), nullable=False, index=True)
    entity_id: Mapped[str | None] = mapped_column(String(100), nullable=True)
    details: Mapped[dict[str, Any]] = mapped_column(JSONB, nullable=False, default=dict)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utc_now,
    )

    def __repr__(self) -> str:
        return f"<AuditLogEntry(id={self.id}, action={self.action}, entity={self.entity_type}:{self.entity_id})>"


@event.listens_for(AuditLogEntry, "before_update")
def _refuse_update(mapper, connection, target: AuditLogEntry) -> None:
    raise AuditLogImmutableError(target.id)


@event.listens_for(AuditLogEntry, "before_delete")
def _refuse_delete(mapper, connection, target: AuditLogEntry) -> None:
    raise AuditLogImmutableError(target.id)
