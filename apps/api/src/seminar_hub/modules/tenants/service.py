"""
Tenant Service

Business logic for tenant management.
"""

import logging
from typing import Any

from sqlalchemy.ext.asyncio import AsyncSession

from seminar_hub.core.errors import ConflictError, PermissionDeniedError, ValidationFailedError
from seminar_hub.modules.audit.recorded_write import RecordedWrite
from seminar_hub.modules.identity.session import Session
from seminar_hub.modules.shared.filters import ListFilters
from seminar_hub.modules.shared.models import new_id, utc_now
from seminar_hub.modules.shared.pagination import Page, PageRequest
from seminar_hub.modules.tenants import repository
from seminar_hub.modules.tenants.models import (
    DEFAULT_TENANT_SETTINGS,
    VALID_TENANT_STATUS_TRANSITIONS,
    Tenant,
    TenantStatus,
)
from seminar_hub.modules.tenants.schemas import TenantCreate, TenantUpdate

logger = logging.getLogger(__name__)


async def create_tenant(db: AsyncSession, session: Session, data: TenantCreate) -> Tenant:
    """
    Create a tenant with default status and settings.

    Only platform admins may create tenants.

    Raises:
        PermissionDeniedError: Caller is not a platform admin
        ConflictError: Domain already registered
    """
    repository.tenants.require_kind(session)
    if not repository.is_platform_admin(session):
        logger.warning(f"Tenant creation refused for {session.principal_id}")
        raise PermissionDeniedError("Only platform administrators can create tenants.")

    if await repository.domain_exists(db, data.domain):
        raise ConflictError(
            f"A tenant with domain '{data.domain}' already exists",
            error_code="DOMAIN_EXISTS",
        )

    now = utc_now()
    tenant = Tenant(
        id=new_id(),
        name=data.name,
        domain=data.domain,
        status=TenantStatus.ACTIVE,
        settings={**DEFAULT_TENANT_SETTINGS, **data.settings.model_dump(by_alias=True)},
        created_at=now,
        updated_at=now,
    )

    await RecordedWrite(
        action="tenant_created",
        entity_type="tenant",
        entity_id=tenant.id,
        details={"name": tenant.name, "domain": tenant.domain, "tenantId": tenant.id},
        added=[tenant],
    ).execute(db, session)

    logger.info(f"Created tenant: {tenant.domain} ({tenant.id})")
    return tenant


async def list_tenants(
    db: AsyncSession,
    session: Session,
    filters: ListFilters | None = None,
    page: PageRequest | None = None,
) -> Page[Tenant]:
    return await repository.tenants.list(db, session, filters, page)


async def get_tenant(db: AsyncSession, session: Session, tenant_id: str) -> Tenant:
    return await repository.tenants.get_or_raise(db, session, tenant_id)


async def update_tenant(
    db: AsyncSession,
    session: Session,
    tenant_id: str,
    data: TenantUpdate,
) -> Tenant:
    """
    Update name and/or settings. Settings are merged key by key.

    Raises:
        ValidationFailedError: If the update would change the domain
    """
    tenant = await repository.tenants.get_or_raise(db, session, tenant_id)

    if data.domain is not None and data.domain.strip().lower() != tenant.domain:
        raise ValidationFailedError(
            "A tenant's domain cannot be changed after creation",
            error_code="DOMAIN_IMMUTABLE",
        )

    patch: dict[str, Any] = {}
    if data.name is not None:
        patch["name"] = data.name
    if data.settings is not None:
        changes = data.settings.model_dump(by_alias=True, exclude_none=True)
        patch["settings"] = {**DEFAULT_TENANT_SETTINGS, **(tenant.settings or {}), **changes}

    if not patch:
        raise ValidationFailedError("No changes supplied", error_code="EMPTY_UPDATE")

    return await repository.tenants.update(
        db,
        session,
        tenant_id,
        patch,
        action="tenant_updated",
        details={"fields": sorted(patch), "tenantId": tenant_id},
        entity=tenant,
    )


async def set_tenant_status(
    db: AsyncSession,
    session: Session,
    tenant_id: str,
    new_status: TenantStatus,
) -> Tenant:
    return await repository.tenants.set_status(
        db,
        session,
        tenant_id,
        new_status,
        transitions=VALID_TENANT_STATUS_TRANSITIONS,
        action="tenant_status_updated",
        details={"tenantId": tenant_id},
    )
