"""
Authentication and Authorization Dependencies

FastAPI dependencies that turn a Bearer token into a Session and gate
endpoints by role using the AccessGate.

- No token or an invalid token -> unauthenticated -> 401 (redirect to login)
- Signed in without the required role -> 403 (access denied)
- A principal with no resolvable profile still gets the student
  fallback Session; see IdentityResolver.
"""

import logging
from collections.abc import Awaitable, Callable

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from seminar_hub.core.database import get_db
from seminar_hub.core.security import decode_token
from seminar_hub.modules.access.gate import AccessDecision, authorize
from seminar_hub.modules.identity.resolver import IdentityResolver
from seminar_hub.modules.identity.session import AuthEvent, Session
from seminar_hub.modules.users.models import UserRole

logger = logging.getLogger(__name__)

# auto_error=False: a missing token is "unauthenticated", decided by the gate
security = HTTPBearer(
    auto_error=False,
    description="JWT Bearer token for authentication",
)


def auth_event_from_token(token: str) -> AuthEvent | None:
    """
    Decode an access token into an AuthEvent.

    Returns:
        None for invalid, expired or non-access tokens
    """
    payload = decode_token(token)
    if payload is None:
        logger.debug("Invalid or expired JWT token")
        return None

    if payload.get("type", "access") != "access":
        logger.warning(f"Rejected token of type {payload.get('type')}")
        return None

    principal_id = payload.get("sub")
    if not principal_id:
        logger.warning("Token is missing the 'sub' claim")
        return None

    return AuthEvent(
        principal_id=str(principal_id),
        display_name=payload.get("name"),
        email=payload.get("email"),
    )


async def get_auth_event(
    credentials: HTTPAuthorizationCredentials | None = Depends(security),
) -> AuthEvent | None:
    if credentials is None:
        return None
    return auth_event_from_token(credentials.credentials)


async def get_optional_session(
    event: AuthEvent | None = Depends(get_auth_event),
    db: AsyncSession = Depends(get_db),
) -> Session | None:
    """Resolve the caller's Session, or None when unauthenticated."""
    return await IdentityResolver().resolve(db, event)


def _unauthenticated() -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail={
            "error": "AUTHENTICATION_REQUIRED",
            "message": "Sign in to continue.",
            "decision": AccessDecision.REDIRECT_TO_LOGIN.value,
        },
        headers={"WWW-Authenticate": "Bearer"},
    )


async def get_current_session(
    session: Session | None = Depends(get_optional_session),
) -> Session:
    """
    Require a signed-in, active principal.

    Raises:
        HTTPException 401: Not authenticated
        HTTPException 403: Account inactive or suspended
    """
    if authorize(session) == AccessDecision.REDIRECT_TO_LOGIN:
        raise _unauthenticated()

    if not session.is_active:
        logger.warning(f"Inactive account attempted access: {session.principal_id}")
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail={
                "error": "ACCOUNT_INACTIVE",
                "message": "Your account is not active.",
            },
        )

    logger.debug(f"Authenticated {session.principal_id} as {session.role.value}")
    return session


def require_role(role: UserRole) -> Callable[..., Awaitable[Session]]:
    """
    Dependency factory gating an endpoint on one role.

    Usage:
        @router.get("/admin/users")
        async def list_users(session: Session = Depends(require_role(UserRole.ADMIN))):
            ...
    """

    async def dependency(session: Session = Depends(get_current_session)) -> Session:
        if authorize(session, role) == AccessDecision.DENIED:
            logger.warning(
                f"Access denied: {session.principal_id} has role '{session.role.value}', "
                f"'{role.value}' is required"
            )
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail={
                    "error": "ACCESS_DENIED",
                    "message": f"The {role.value} role is required for this endpoint.",
                    "decision": AccessDecision.DENIED.value,
                },
            )
        return session

    return dependency


require_admin = require_role(UserRole.ADMIN)
require_specialist = require_role(UserRole.SPECIALIST)


__all__ = [
    "auth_event_from_token",
    "get_auth_event",
    "get_optional_session",
    "get_current_session",
    "require_role",
    "require_admin",
    "require_specialist",
]
