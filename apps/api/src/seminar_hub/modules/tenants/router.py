"""
Tenant Router

Admin endpoints for tenant management.

**Access:** Admin only. Admins see their own tenant; platform admins
manage every tenant and are the only ones who can create tenants.
"""

import logging

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from seminar_hub.core.auth import require_admin
from seminar_hub.core.database import get_db
from seminar_hub.core.errors import ServiceError, internal_error, to_http_exception
from seminar_hub.modules.identity.session import Session
from seminar_hub.modules.shared.filters import ListFilters
from seminar_hub.modules.shared.pagination import PageRequest
from seminar_hub.modules.tenants import service
from seminar_hub.modules.tenants.models import TenantStatus
from seminar_hub.modules.tenants.schemas import (
    TenantCreate,
    TenantListResponse,
    TenantResponse,
    TenantStatusUpdate,
    TenantUpdate,
)

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("", response_model=TenantListResponse, summary="List Tenants")
async def list_tenants(
    search: str | None = Query(None, max_length=100),
    tenant_status: TenantStatus | None = Query(None, alias="status"),
    skip: int = Query(0, ge=0),
    limit: int = Query(50, ge=1, le=100),
    db: AsyncSession = Depends(get_db),
    session: Session = Depends(require_admin),
) -> TenantListResponse:
    try:
        page = await service.list_tenants(
            db,
            session,
            ListFilters(search=search, exact={"status": tenant_status}),
            PageRequest(limit=limit, skip=skip),
        )
    except ServiceError as e:
        raise to_http_exception(e) from e
    except Exception as e:
        logger.exception(f"Error listing tenants: {e}")
        raise internal_error() from e

    return TenantListResponse(
        items=[TenantResponse.model_validate(tenant) for tenant in page.items],
        has_more=page.has_more,
        limit=page.limit,
        skip=page.skip,
    )


@router.post(
    "",
    response_model=TenantResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create Tenant",
)
async def create_tenant(
    body: TenantCreate,
    db: AsyncSession = Depends(get_db),
    session: Session = Depends(require_admin),
) -> TenantResponse:
    try:
        tenant = await service.create_tenant(db, session, body)
    except ServiceError as e:
        raise to_http_exception(e) from e
    return TenantResponse.model_validate(tenant)


@router.get("/{tenant_id}", response_model=TenantResponse, summary="Get Tenant")
async def get_tenant(
    tenant_id: str,
    db: AsyncSession = Depends(get_db),
    session: Session = Depends(require_admin),
) -> TenantResponse:
    try:
        tenant = await service.get_tenant(db, session, tenant_id)
    except ServiceError as e:
        raise to_http_exception(e) from e
    return TenantResponse.model_validate(tenant)


@router.patch("/{tenant_id}", response_model=TenantResponse, summary="Update Tenant")
async def update_tenant(
    tenant_id: str,
    body: TenantUpdate,
    db: AsyncSession = Depends(get_db),
    session: Session = Depends(require_admin),
) -> TenantResponse:
    try:
        tenant = await service.update_tenant(db, session, tenant_id, body)
    except ServiceError as e:
        raise to_http_exception(e) from e
    return TenantResponse.model_validate(tenant)


@router.put("/{tenant_id}/status", response_model=TenantResponse, summary="Set Tenant Status")
async def set_tenant_status(
    tenant_id: str,
    body: TenantStatusUpdate,
    db: AsyncSession = Depends(get_db),
    session: Session = Depends(require_admin),
) -> TenantResponse:
    try:
        tenant = await service.set_tenant_status(db, session, tenant_id, body.status)
    except ServiceError as e:
        raise to_http_exception(e) from e
    return TenantResponse.model_validate(tenant)
