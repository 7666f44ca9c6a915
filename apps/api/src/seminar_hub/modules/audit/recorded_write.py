"""
Recorded Write

A data change and its audit entry committed as one unit. Both are
flushed inside the same database transaction; if either fails the
transaction is rolled back and the error propagates, so a write is
never persisted without its audit entry.
"""

import logging
from collections.abc import Sequence
from dataclasses import dataclass, field
from typing import Any

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from seminar_hub.core.database import store_errors
from seminar_hub.core.errors import ConflictError
from seminar_hub.modules.audit.models import AuditLogEntry
from seminar_hub.modules.audit.repository import build_entry
from seminar_hub.modules.identity.session import Session

logger = logging.getLogger(__name__)

_UNSET = object()


@dataclass
class RecordedWrite:
    """
    Attributes:
        action: Audit action (e.g. "user_created")
        entity_type: Audited entity kind
        entity_id: Id of the primary entity touched
        details: Structured payload stored on the audit entry
        added: New or modified objects to persist
        deleted: Objects to hard-delete
        tenant_id: Audit tenant override; defaults to the session tenant
    """

    action: str
    entity_type: str
    entity_id: str | None
    details: dict[str, Any] = field(default_factory=dict)
    added: Sequence[Any] = ()
    deleted: Sequence[Any] = ()
    tenant_id: Any = _UNSET

    async def execute(self, db: AsyncSession, session: Session) -> AuditLogEntry:
        """
        Apply the write and its audit entry atomically.

        Raises:
            ConflictError: On a unique constraint violation
            TransientError: If the store is unavailable
        """
        entry = build_entry(
            actor_id=session.principal_id,
            tenant_id=session.tenant_id if self.tenant_id is _UNSET else self.tenant_id,
            action=self.action,
            entity_type=self.entity_type,
            entity_id=self.entity_id,
            details=self.details,
        )

        # ATOMIC TRANSACTION: data rows and the audit row commit together
        try:
            with store_errors(self.action):
                for obj in self.added:
                    db.add(obj)
                for obj in self.deleted:
                    await db.delete(obj)
                await db.flush()
                # Load server defaults inside the transaction
                for obj in self.added:
                    await db.refresh(obj)
                db.add(entry)
                await db.commit()
        except IntegrityError as e:
            await db.rollback()
            logger.warning(f"{self.action} rejected by constraint: {e.orig}")
            raise ConflictError(f"{self.action} conflicts with existing data") from e
        except Exception:
            await db.rollback()
            logger.error(f"{self.action} rolled back for {self.entity_type}:{self.entity_id}")
            raise

        logger.info(
            f"{self.action}: {self.entity_type}:{self.entity_id} by {session.principal_id}"
        )
        return entry
