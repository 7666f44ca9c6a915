"""
Access Check Schemas
"""

from pydantic import Field

from seminar_hub.modules.access.gate import AccessDecision
from seminar_hub.modules.shared.schemas import CamelModel
from seminar_hub.modules.users.models import UserRole


class AccessCheckRequest(CamelModel):
    path: str = Field(..., min_length=1, max_length=300, examples=["/admin/users"])


class AccessCheckResponse(CamelModel):
    path: str
    decision: AccessDecision
    required_role: UserRole | None = None
