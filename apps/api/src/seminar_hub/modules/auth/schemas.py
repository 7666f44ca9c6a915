"""Authentication schemas."""

from pydantic import EmailStr

from seminar_hub.modules.shared.schemas import CamelModel
from seminar_hub.modules.users.schemas import UserResponse


class LoginRequest(CamelModel):
    """Login request schema."""

    email: EmailStr
    password: str


class LoginResponse(CamelModel):
    """Login response schema."""

    access_token: str
    refresh_token: str
    token_type: str = "bearer"
    must_change_password: bool = False
    user: UserResponse
