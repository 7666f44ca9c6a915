"""
Identity module - Session resolution and role capabilities.

Resolution flow:
1. A bearer token is decoded into an AuthEvent
2. IdentityResolver loads the User profile for the principal
3. Missing profile or lookup failure degrades to the student fallback
4. The resulting Session is passed explicitly to gates and repositories
"""

from seminar_hub.modules.identity.capabilities import EntityKind, RoleCapabilities, capabilities_for
from seminar_hub.modules.identity.session import AuthEvent, Profile, Session

__all__ = [
    "AuthEvent",
    "EntityKind",
    "Profile",
    "RoleCapabilities",
    "Session",
    "capabilities_for",
]
