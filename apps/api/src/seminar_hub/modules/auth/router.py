"""Authentication router."""

import logging

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from seminar_hub.core.database import get_db
from seminar_hub.core.errors import ServiceError, to_http_exception
from seminar_hub.core.rate_limit import RATE_LIMIT_LOGIN, enforce_rate_limit
from seminar_hub.modules.auth import service
from seminar_hub.modules.auth.schemas import LoginRequest, LoginResponse
from seminar_hub.modules.users.schemas import UserResponse

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/login", response_model=LoginResponse)
async def login(
    credentials: LoginRequest,
    db: AsyncSession = Depends(get_db),
) -> LoginResponse:
    """
    Authenticate a user and return JWT tokens.

    Raises:
        HTTPException 401: Invalid credentials
        HTTPException 403: Account inactive or suspended
        HTTPException 429: Too many attempts for this email
    """
    await enforce_rate_limit(f"login:{credentials.email.lower()}", *RATE_LIMIT_LOGIN)

    try:
        user, tokens = await service.authenticate(db, credentials.email, credentials.password)
    except ServiceError as e:
        raise to_http_exception(e) from e

    return LoginResponse(
        access_token=tokens["access_token"],
        refresh_token=tokens["refresh_token"],
        must_change_password=user.must_change_password,
        user=UserResponse.model_validate(user),
    )
