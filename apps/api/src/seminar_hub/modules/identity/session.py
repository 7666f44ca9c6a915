"""
Session

Resolved, role- and tenant-bearing view of an authenticated principal.
Sessions are immutable values passed explicitly to every repository
and gate call; there is no ambient "current user".
"""

from dataclasses import dataclass, field

from seminar_hub.core.errors import RecoverableProfileError
from seminar_hub.modules.identity.capabilities import RoleCapabilities, capabilities_for
from seminar_hub.modules.users.models import UserRole, UserStatus

SYSTEM_PRINCIPAL_PREFIX = "system:"


@dataclass(frozen=True)
class AuthEvent:
    """Sign-in event from the auth provider (decoded access token)."""

    principal_id: str
    display_name: str | None = None
    email: str | None = None


@dataclass(frozen=True)
class Profile:
    display_name: str
    email: str
    status: UserStatus


@dataclass(frozen=True)
class Session:
    """
    Attributes:
        principal_id: Authenticated user id
        role: Effective role (student when resolution fell back)
        tenant_id: Isolation scope, None for fallback sessions
        profile: Profile snapshot, None when no profile could be loaded
        capabilities: Routes and entity kinds for the role
        recovered_error: Absorbed profile error when the fallback was used
    """

    principal_id: str
    role: UserRole
    tenant_id: str | None
    profile: Profile | None = None
    capabilities: RoleCapabilities = field(init=False)
    recovered_error: RecoverableProfileError | None = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "capabilities", capabilities_for(self.role))

    @property
    def is_fallback(self) -> bool:
        return self.recovered_error is not None

    @property
    def is_active(self) -> bool:
        return self.profile is None or self.profile.status == UserStatus.ACTIVE

    @classmethod
    def fallback(cls, event: AuthEvent, error: RecoverableProfileError) -> "Session":
        """Minimally privileged session used when no profile is available."""
        return cls(
            principal_id=event.principal_id,
            role=UserRole.STUDENT,
            tenant_id=None,
            profile=None,
            recovered_error=error,
        )

    @classmethod
    def system(cls, tenant_id: str, name: str) -> "Session":
        """Admin-capable session for background jobs acting inside one tenant."""
        return cls(
            principal_id=f"{SYSTEM_PRINCIPAL_PREFIX}{name}",
            role=UserRole.ADMIN,
            tenant_id=tenant_id,
        )
