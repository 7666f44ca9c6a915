"""
Identity Resolver

Turns an authentication event into a Session.

Availability wins over precision here: a principal with no profile,
or whose profile lookup fails, still gets a usable student Session
instead of a sign-in error. The failure is absorbed as a
RecoverableProfileError carried on the Session, logged, and recorded
in the audit log on a best-effort basis.
"""

import contextlib
import logging
from collections.abc import Awaitable, Callable
from enum import Enum
from typing import Protocol

from sqlalchemy.ext.asyncio import AsyncSession

from seminar_hub.core.config import settings
from seminar_hub.core.errors import RecoverableProfileError
from seminar_hub.modules.audit import service as audit_service
from seminar_hub.modules.identity.session import AuthEvent, Profile, Session
from seminar_hub.modules.users.models import User, UserRole
from seminar_hub.modules.users.repository import UserRepository

logger = logging.getLogger(__name__)

ProfileLoader = Callable[[AsyncSession, str], Awaitable[User | None]]


class TenantResolver(Protocol):
    """Decides the tenant scope for a loaded profile."""

    def resolve(self, user: User) -> str | None: ...


class ProfileTenantResolver:
    """Tenant comes from the profile only."""

    def resolve(self, user: User) -> str | None:
        return user.tenant_id


class ConfiguredTenantResolver:
    """Profile tenant, else a deployment-wide default."""

    def __init__(self, default_tenant_id: str | None):
        self.default_tenant_id = default_tenant_id

    def resolve(self, user: User) -> str | None:
        return user.tenant_id or self.default_tenant_id


def default_tenant_resolver() -> TenantResolver:
    if settings.default_tenant_id:
        return ConfiguredTenantResolver(settings.default_tenant_id)
    return ProfileTenantResolver()


class IdentityResolver:
    def __init__(
        self,
        tenant_resolver: TenantResolver | None = None,
        profile_loader: ProfileLoader | None = None,
    ):
        self.tenant_resolver = tenant_resolver or default_tenant_resolver()
        self.profile_loader = profile_loader or UserRepository.get_by_id

    async def resolve(self, db: AsyncSession, event: AuthEvent | None) -> Session | None:
        """
        Resolve an auth event.

        Returns:
            None when unauthenticated, otherwise a Session (possibly the
            student fallback). Never raises for profile problems.
        """
        if event is None:
            return None

        try:
            user = await self.profile_loader(db, event.principal_id)
        except Exception as e:
            error = RecoverableProfileError(event.principal_id, str(e) or type(e).__name__)
            logger.exception(
                f"Profile lookup failed for {event.principal_id}, using student fallback"
            )
            await self._record_lookup_failure(db, event, error)
            return Session.fallback(event, error)

        if user is None:
            logger.warning(f"No profile for {event.principal_id}, using student fallback")
            return Session.fallback(
                event, RecoverableProfileError(event.principal_id, "no profile exists")
            )

        return Session(
            principal_id=str(user.id),
            role=user.role or UserRole.STUDENT,
            tenant_id=self.tenant_resolver.resolve(user),
            profile=Profile(
                display_name=user.display_name,
                email=user.email,
                status=user.status,
            ),
        )

    async def _record_lookup_failure(
        self,
        db: AsyncSession,
        event: AuthEvent,
        error: RecoverableProfileError,
    ) -> None:
        # Best effort: the store that just failed may still be down
        with contextlib.suppress(Exception):
            await db.rollback()
            await audit_service.record(
                db,
                actor_id=event.principal_id,
                tenant_id=None,
                action="profile_lookup_failed",
                entity_type="user",
                entity_id=event.principal_id,
                details={"reason": error.reason, "email": event.email},
            )


class ResolutionState(str, Enum):
    UNAUTHENTICATED = "unauthenticated"
    RESOLVING = "resolving"
    RESOLVED = "resolved"
    RESOLVED_FALLBACK = "resolved_fallback"
    SIGNED_OUT = "signed_out"


class SessionTracker:
    """
    Follows the auth provider's change stream for one client.

    Every change re-runs resolution; nothing is polled. Signing out
    passes through SIGNED_OUT back to UNAUTHENTICATED.
    """

    def __init__(self, resolver: IdentityResolver | None = None):
        self.resolver = resolver or IdentityResolver()
        self.state = ResolutionState.UNAUTHENTICATED
        self.session: Session | None = None
        self.history: list[ResolutionState] = [self.state]

    def _move(self, state: ResolutionState) -> None:
        self.state = state
        self.history.append(state)

    @property
    def is_resolving(self) -> bool:
        return self.state == ResolutionState.RESOLVING

    async def on_auth_changed(self, db: AsyncSession, event: AuthEvent | None) -> Session | None:
        if event is None:
            if self.session is not None:
                logger.info(f"Signed out: {self.session.principal_id}")
                self._move(ResolutionState.SIGNED_OUT)
            self.session = None
            if self.state != ResolutionState.UNAUTHENTICATED:
                self._move(ResolutionState.UNAUTHENTICATED)
            return None

        self._move(ResolutionState.RESOLVING)
        session = await self.resolver.resolve(db, event)
        self.session = session
        self._move(
            ResolutionState.RESOLVED_FALLBACK if session.is_fallback else ResolutionState.RESOLVED
        )
        return session
