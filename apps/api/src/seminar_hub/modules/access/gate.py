"""
Access Gate

Pure decision function: given the resolution state, a Session and a
route's required role, decide what the caller should show. No I/O.

"Not signed in" (redirect) is kept distinct from "signed in without
the required role" (an explicit denied view).
"""

from enum import Enum

from seminar_hub.modules.identity.session import Session
from seminar_hub.modules.users.models import UserRole


class AccessDecision(str, Enum):
    PENDING = "pending"
    RENDER = "render"
    REDIRECT_TO_LOGIN = "redirect_to_login"
    DENIED = "denied"


def authorize(
    session: Session | None,
    required_role: UserRole | None = None,
    *,
    resolving: bool = False,
) -> AccessDecision:
    if resolving:
        return AccessDecision.PENDING
    if session is None:
        return AccessDecision.REDIRECT_TO_LOGIN
    if required_role is not None and session.role != required_role:
        return AccessDecision.DENIED
    return AccessDecision.RENDER
