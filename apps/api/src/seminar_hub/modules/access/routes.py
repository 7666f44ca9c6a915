"""
Route Table

Required role per view path. Paths not listed only need a signed-in
principal; public paths need nothing.
"""

from seminar_hub.modules.access.gate import AccessDecision, authorize
from seminar_hub.modules.identity.capabilities import SPECIALIST_ROUTES
from seminar_hub.modules.identity.session import Session
from seminar_hub.modules.users.models import UserRole

PUBLIC_ROUTES = frozenset({"/login"})

ROUTE_REQUIREMENTS: dict[str, UserRole] = {path: UserRole.SPECIALIST for path in SPECIALIST_ROUTES}

ADMIN_PREFIX = "/admin"


def _normalize(path: str) -> str:
    path = "/" + path.strip().strip("/")
    return path.split("?", 1)[0]


def required_role_for(path: str) -> UserRole | None:
    path = _normalize(path)
    if path == ADMIN_PREFIX or path.startswith(ADMIN_PREFIX + "/"):
        return UserRole.ADMIN
    return ROUTE_REQUIREMENTS.get(path)


def authorize_route(
    session: Session | None,
    path: str,
    *,
    resolving: bool = False,
) -> AccessDecision:
    if _normalize(path) in PUBLIC_ROUTES:
        return AccessDecision.RENDER
    return authorize(session, required_role_for(path), resolving=resolving)
