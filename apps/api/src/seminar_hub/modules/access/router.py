"""
Access Router

Lets the view layer ask how to treat a route for the current caller.
Unauthenticated callers get ``redirect_to_login`` rather than a 401.
"""

import logging

from fastapi import APIRouter, Depends

from seminar_hub.core.auth import get_optional_session
from seminar_hub.modules.access.routes import authorize_route, required_role_for
from seminar_hub.modules.access.schemas import AccessCheckRequest, AccessCheckResponse
from seminar_hub.modules.identity.session import Session

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post(
    "/check",
    response_model=AccessCheckResponse,
    summary="Check Route Access",
)
async def check_access(
    body: AccessCheckRequest,
    session: Session | None = Depends(get_optional_session),
) -> AccessCheckResponse:
    decision = authorize_route(session, body.path)
    logger.debug(f"Access check {body.path}: {decision.value}")
    return AccessCheckResponse(
        path=body.path,
        decision=decision,
        required_role=required_role_for(body.path),
    )
