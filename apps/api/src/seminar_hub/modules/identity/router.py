"""
Session Router

Exposes the caller's resolved Session and capabilities to the view layer.
"""

from fastapi import APIRouter, Depends

from seminar_hub.core.auth import get_current_session
from seminar_hub.modules.identity.schemas import SessionResponse
from seminar_hub.modules.identity.session import Session

router = APIRouter()


@router.get(
    "/me",
    response_model=SessionResponse,
    summary="Current Session",
    description="""
Return the resolved Session for the bearer token.

`isFallback` is true when no profile could be loaded; the Session then
has the `student` role and no tenant.
""",
)
async def get_me(session: Session = Depends(get_current_session)) -> SessionResponse:
    return SessionResponse.from_session(session)
