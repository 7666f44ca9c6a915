"""Authentication module."""

from seminar_hub.modules.auth.schemas import LoginRequest, LoginResponse

__all__ = ["LoginRequest", "LoginResponse"]
