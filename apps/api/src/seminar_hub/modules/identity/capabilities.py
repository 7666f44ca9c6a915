"""
Role Capabilities

What each role may navigate to and which entity kinds it may read or
write. Resolved once per Session from the role.
"""

from dataclasses import dataclass
from enum import Enum

from seminar_hub.modules.users.models import UserRole

BASE_ROUTES: tuple[str, ...] = ("/dashboard", "/schedule", "/messages", "/notifications")

SPECIALIST_ROUTES: tuple[str, ...] = (
    "/specialist-dashboard",
    "/specialist-appointments",
    "/student-notes",
    "/intervention-plans",
    "/progress-tracking",
    "/communication-logs",
    "/resource-library",
    "/specialist-analytics",
)

ADMIN_ROUTES: tuple[str, ...] = (
    "/admin",
    "/admin/users",
    "/admin/tenants",
    "/admin/settings",
    "/admin/reports",
    "/admin/logs",
    "/admin/security",
    "/admin/database",
)


class EntityKind(str, Enum):
    """Tenant-scoped collections."""

    USER = "user"
    TENANT = "tenant"
    AUDIT_LOG = "audit_log"
    REPORT = "report"
    APPOINTMENT = "appointment"
    APPOINTMENT_REQUEST = "appointment_request"
    INTERVENTION_PLAN = "intervention_plan"
    STUDENT_NOTE = "student_note"


@dataclass(frozen=True)
class RoleCapabilities:
    role: UserRole
    allowed_routes: tuple[str, ...]
    allowed_entity_kinds: frozenset[EntityKind]

    def can_access(self, kind: EntityKind) -> bool:
        return kind in self.allowed_entity_kinds

    def can_visit(self, path: str) -> bool:
        return path in self.allowed_routes


_ROLE_CAPABILITIES: dict[UserRole, RoleCapabilities] = {
    UserRole.STUDENT: RoleCapabilities(
        role=UserRole.STUDENT,
        allowed_routes=BASE_ROUTES
        + ("/seminars", "/enrollments", "/waitlists", "/appointments", "/progress"),
        allowed_entity_kinds=frozenset(
            {EntityKind.APPOINTMENT, EntityKind.APPOINTMENT_REQUEST}
        ),
    ),
    UserRole.TEACHER: RoleCapabilities(
        role=UserRole.TEACHER,
        allowed_routes=BASE_ROUTES
        + ("/my-seminars", "/rosters", "/attendance", "/grading", "/reports", "/analytics"),
        allowed_entity_kinds=frozenset({EntityKind.APPOINTMENT, EntityKind.INTERVENTION_PLAN}),
    ),
    UserRole.COUNSELOR: RoleCapabilities(
        role=UserRole.COUNSELOR,
        allowed_routes=BASE_ROUTES
        + (
            "/student-management",
            "/counselor-appointments",
            "/student-progress",
            "/counselor-reports",
            "/resources",
        ),
        allowed_entity_kinds=frozenset(
            {
                EntityKind.APPOINTMENT,
                EntityKind.APPOINTMENT_REQUEST,
                EntityKind.INTERVENTION_PLAN,
            }
        ),
    ),
    UserRole.SPECIALIST: RoleCapabilities(
        role=UserRole.SPECIALIST,
        allowed_routes=BASE_ROUTES + SPECIALIST_ROUTES,
        allowed_entity_kinds=frozenset(
            {
                EntityKind.APPOINTMENT,
                EntityKind.APPOINTMENT_REQUEST,
                EntityKind.INTERVENTION_PLAN,
                EntityKind.STUDENT_NOTE,
            }
        ),
    ),
    UserRole.ADMIN: RoleCapabilities(
        role=UserRole.ADMIN,
        allowed_routes=BASE_ROUTES + ADMIN_ROUTES,
        allowed_entity_kinds=frozenset(
            {
                EntityKind.USER,
                EntityKind.TENANT,
                EntityKind.AUDIT_LOG,
                EntityKind.REPORT,
                EntityKind.APPOINTMENT,
                EntityKind.APPOINTMENT_REQUEST,
            }
        ),
    ),
}


def capabilities_for(role: UserRole) -> RoleCapabilities:
    return _ROLE_CAPABILITIES[role]
