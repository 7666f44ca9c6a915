"""
Session Schemas
"""

from seminar_hub.modules.identity.capabilities import EntityKind
from seminar_hub.modules.identity.session import Session
from seminar_hub.modules.shared.schemas import CamelModel
from seminar_hub.modules.users.models import UserRole, UserStatus


class ProfileResponse(CamelModel):
    display_name: str
    email: str
    status: UserStatus


class CapabilitiesResponse(CamelModel):
    role: UserRole
    allowed_routes: list[str]
    allowed_entity_kinds: list[EntityKind]


class SessionResponse(CamelModel):
    principal_id: str
    role: UserRole
    tenant_id: str | None
    profile: ProfileResponse | None
    capabilities: CapabilitiesResponse
    is_fallback: bool

    @classmethod
    def from_session(cls, session: Session) -> "SessionResponse":
        profile = None
        if session.profile is not None:
            profile = ProfileResponse(
                display_name=session.profile.display_name,
                email=session.profile.email,
                status=session.profile.status,
            )
        return cls(
            principal_id=session.principal_id,
            role=session.role,
            tenant_id=session.tenant_id,
            profile=profile,
            capabilities=CapabilitiesResponse(
                role=session.capabilities.role,
                allowed_routes=list(session.capabilities.allowed_routes),
                allowed_entity_kinds=sorted(
                    session.capabilities.allowed_entity_kinds, key=lambda kind: kind.value
                ),
            ),
            is_fallback=session.is_fallback,
        )
