"""
Authentication Service

Credential checks for sign-in. Every attempt is audited: successes as
``login_success`` and rejections as ``login_failed``.
"""

import logging

from fastapi import status
from sqlalchemy.ext.asyncio import AsyncSession

from seminar_hub.core.errors import ServiceError
from seminar_hub.core.security import create_access_token, create_refresh_token, verify_password
from seminar_hub.modules.audit import service as audit_service
from seminar_hub.modules.users.models import User
from seminar_hub.modules.users.repository import UserRepository

logger = logging.getLogger(__name__)


class InvalidCredentialsError(ServiceError):
    def __init__(self):
        super().__init__(
            message="Invalid email or password.",
            error_code="INVALID_CREDENTIALS",
            status_code=status.HTTP_401_UNAUTHORIZED,
        )


class AccountInactiveError(ServiceError):
    def __init__(self, account_status: str):
        super().__init__(
            message=f"Your account is {account_status}.",
            error_code="ACCOUNT_INACTIVE",
            status_code=status.HTTP_403_FORBIDDEN,
        )


async def _record_failure(db: AsyncSession, email: str, user: User | None, reason: str) -> None:
    await audit_service.record(
        db,
        actor_id=str(user.id) if user else None,
        tenant_id=user.tenant_id if user else None,
        action="login_failed",
        entity_type="user",
        entity_id=str(user.id) if user else None,
        details={"email": email, "reason": reason},
    )


async def authenticate(db: AsyncSession, email: str, password: str) -> tuple[User, dict[str, str]]:
    """
    Verify credentials and issue tokens.

    Returns:
        The user and a dict with access_token and refresh_token

    Raises:
        InvalidCredentialsError: Unknown email or wrong password
        AccountInactiveError: Account is inactive or suspended
    """
    email = email.lower()
    user = await UserRepository.get_by_email(db, email)

    if user is None:
        logger.warning(f"Login attempt for non-existent email: {email}")
        await _record_failure(db, email, None, "unknown_email")
        raise InvalidCredentialsError()

    if not verify_password(password, user.password_hash):
        logger.warning(f"Invalid password for user: {email}")
        await _record_failure(db, email, user, "invalid_password")
        raise InvalidCredentialsError()

    if not user.is_active:
        logger.warning(f"Login attempt for {user.status.value} account: {email}")
        await _record_failure(db, email, user, f"account_{user.status.value}")
        raise AccountInactiveError(user.status.value)

    await UserRepository.record_login(db, user)
    await audit_service.record(
        db,
        actor_id=str(user.id),
        tenant_id=user.tenant_id,
        action="login_success",
        entity_type="user",
        entity_id=str(user.id),
        details={"email": email, "role": user.role},
    )

    tokens = {
        "access_token": create_access_token(
            subject=str(user.id),
            additional_claims={"email": user.email, "name": user.display_name},
        ),
        "refresh_token": create_refresh_token(subject=str(user.id)),
    }

    logger.info(f"User logged in: {user.email} (role: {user.role.value})")
    return user, tokens
