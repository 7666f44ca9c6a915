"""
Tenant Repository

Tenants scope by their own id. Admins see only their own tenant,
except admins of the configured platform tenant, who operate the
platform and may manage every Tenant record.
"""

import logging

from sqlalchemy import ColumnElement, select
from sqlalchemy.ext.asyncio import AsyncSession

from seminar_hub.core.config import settings
from seminar_hub.core.database import store_errors
from seminar_hub.modules.identity.capabilities import EntityKind
from seminar_hub.modules.identity.session import Session
from seminar_hub.modules.shared.repository import TenantRepository
from seminar_hub.modules.tenants.models import Tenant
from seminar_hub.modules.users.models import UserRole

logger = logging.getLogger(__name__)


def is_platform_admin(session: Session) -> bool:
    return (
        settings.platform_tenant_id is not None
        and session.role == UserRole.ADMIN
        and session.tenant_id == settings.platform_tenant_id
    )


class TenantRecords(TenantRepository[Tenant]):
    def in_scope(self, session: Session, entity: Tenant) -> bool:
        return is_platform_admin(session) or super().in_scope(session, entity)

    def scope_criteria(self, session: Session) -> list[ColumnElement[bool]]:
        if is_platform_admin(session):
            return []
        return super().scope_criteria(session)


async def domain_exists(db: AsyncSession, domain: str) -> bool:
    with store_errors("check tenant domain"):
        result = await db.execute(select(Tenant.id).where(Tenant.domain == domain.lower()))
    return result.scalar_one_or_none() is not None


async def get_by_id(db: AsyncSession, tenant_id: str) -> Tenant | None:
    """Unscoped lookup for internal checks (e.g. max users on create)."""
    with store_errors("load tenant"):
        return await db.get(Tenant, tenant_id)


tenants = TenantRecords(
    Tenant,
    EntityKind.TENANT,
    search_fields=("name", "domain"),
    filter_fields=("status",),
    scope_field="id",
)
