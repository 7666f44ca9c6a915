"""
User Management Router

Admin endpoints for the users of the admin's tenant.

**Access:** Admin only
"""

import logging

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from seminar_hub.core.auth import require_admin
from seminar_hub.core.database import get_db
from seminar_hub.core.errors import ServiceError, internal_error, to_http_exception
from seminar_hub.core.rate_limit import RATE_LIMIT_BULK_IMPORT, enforce_rate_limit
from seminar_hub.modules.identity.session import Session
from seminar_hub.modules.shared.filters import ListFilters
from seminar_hub.modules.shared.pagination import PageRequest
from seminar_hub.modules.users import service
from seminar_hub.modules.users.models import UserRole, UserStatus
from seminar_hub.modules.users.schemas import (
    UserCreate,
    UserImportRequest,
    UserImportResponse,
    UserListResponse,
    UserResponse,
    UserStatusUpdate,
    UserUpdate,
)

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get(
    "",
    response_model=UserListResponse,
    summary="List Users",
    description="""
List users of the caller's tenant, newest first.

- `search` matches display name or email (case-insensitive substring)
- `hasMore` is true whenever a full page was fetched

**Access:** Admin only
""",
)
async def list_users(
    search: str | None = Query(None, max_length=100),
    role: UserRole | None = Query(None),
    user_status: UserStatus | None = Query(None, alias="status"),
    skip: int = Query(0, ge=0),
    limit: int = Query(50, ge=1, le=100),
    db: AsyncSession = Depends(get_db),
    session: Session = Depends(require_admin),
) -> UserListResponse:
    try:
        page = await service.list_users(
            db,
            session,
            ListFilters(search=search, exact={"role": role, "status": user_status}),
            PageRequest(limit=limit, skip=skip),
        )
    except ServiceError as e:
        raise to_http_exception(e) from e
    except Exception as e:
        logger.exception(f"Error listing users: {e}")
        raise internal_error() from e

    return UserListResponse(
        items=[UserResponse.model_validate(user) for user in page.items],
        has_more=page.has_more,
        limit=page.limit,
        skip=page.skip,
    )


@router.post(
    "",
    response_model=UserResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create User",
)
async def create_user(
    body: UserCreate,
    db: AsyncSession = Depends(get_db),
    session: Session = Depends(require_admin),
) -> UserResponse:
    try:
        user = await service.create_user(db, session, body)
    except ServiceError as e:
        raise to_http_exception(e) from e

    logger.info(f"Admin {session.principal_id} created user {user.id}")
    return UserResponse.model_validate(user)


@router.post(
    "/import",
    response_model=UserImportResponse,
    summary="Bulk Import Users",
    description="""
Create many users at once with temporary passwords.

Rows with a registered email, or beyond the tenant's user limit, are
returned under `failed`. Imported users must change their password on
first sign-in.

**Rate limit:** 5 imports per hour per admin
""",
)
async def import_users(
    body: UserImportRequest,
    db: AsyncSession = Depends(get_db),
    session: Session = Depends(require_admin),
) -> UserImportResponse:
    await enforce_rate_limit(f"user_import:{session.principal_id}", *RATE_LIMIT_BULK_IMPORT)

    try:
        result = await service.import_users(db, session, body.users)
    except ServiceError as e:
        raise to_http_exception(e) from e

    return UserImportResponse.model_validate(result)


@router.get("/{user_id}", response_model=UserResponse, summary="Get User")
async def get_user(
    user_id: str,
    db: AsyncSession = Depends(get_db),
    session: Session = Depends(require_admin),
) -> UserResponse:
    try:
        user = await service.get_user(db, session, user_id)
    except ServiceError as e:
        raise to_http_exception(e) from e
    return UserResponse.model_validate(user)


@router.patch("/{user_id}", response_model=UserResponse, summary="Update User")
async def update_user(
    user_id: str,
    body: UserUpdate,
    db: AsyncSession = Depends(get_db),
    session: Session = Depends(require_admin),
) -> UserResponse:
    try:
        user = await service.update_user(db, session, user_id, body)
    except ServiceError as e:
        raise to_http_exception(e) from e
    return UserResponse.model_validate(user)


@router.put(
    "/{user_id}/status",
    response_model=UserResponse,
    summary="Set User Status",
    description="Activate, deactivate or suspend a user. Users are never deleted.",
)
async def set_user_status(
    user_id: str,
    body: UserStatusUpdate,
    db: AsyncSession = Depends(get_db),
    session: Session = Depends(require_admin),
) -> UserResponse:
    try:
        user = await service.set_user_status(db, session, user_id, body.status)
    except ServiceError as e:
        raise to_http_exception(e) from e
    return UserResponse.model_validate(user)
