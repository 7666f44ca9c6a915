"""
Users module - Tenant user management (profiles behind Sessions).
"""

from seminar_hub.modules.users.models import User, UserRole, UserStatus

__all__ = ["User", "UserRole", "UserStatus"]
