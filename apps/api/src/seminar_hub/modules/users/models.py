"""
User Models

Database model for platform users (the profile behind a Session).
"""

from datetime import datetime
from enum import Enum

from sqlalchemy import Boolean, DateTime, ForeignKey, String, Text
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import Mapped, mapped_column

from seminar_hub.modules.shared import BaseModel
from seminar_hub.modules.shared.enums import pg_enum


class UserRole(str, Enum):
    """User roles in the system."""

    STUDENT = "student"
    TEACHER = "teacher"
    COUNSELOR = "counselor"
    SPECIALIST = "specialist"
    ADMIN = "admin"


class UserStatus(str, Enum):
    """Account status. Users are never hard-deleted."""

    ACTIVE = "active"
    INACTIVE = "inactive"
    SUSPENDED = "suspended"


# Any status may move to any other; deletion is not a status
VALID_USER_STATUS_TRANSITIONS: dict[UserStatus, set[UserStatus]] = {
    UserStatus.ACTIVE: {UserStatus.INACTIVE, UserStatus.SUSPENDED},
    UserStatus.INACTIVE: {UserStatus.ACTIVE, UserStatus.SUSPENDED},
    UserStatus.SUSPENDED: {UserStatus.ACTIVE, UserStatus.INACTIVE},
}


class User(BaseModel):
    """
    User model for authentication and authorization.

    Multi-tenant: tenant_id links the user to its organization. It is
    nullable only for profiles provisioned before tenant assignment;
    such users resolve through the configured TenantResolver.
    """

    __tablename__ = "users"

    tenant_id: Mapped[str | None] = mapped_column(
        UUID(as_uuid=False),
        ForeignKey("tenants.id", ondelete="SET NULL"),
        nullable=True,
        index=True,
    )

    email: Mapped[str] = mapped_column(
        String(255),
        unique=True,
        index=True,
        nullable=False,
    )
    display_name: Mapped[str] = mapped_column(
        String(200),
        nullable=False,
    )
    password_hash: Mapped[str] = mapped_column(
        Text,
        nullable=False,
    )

    role: Mapped[UserRole] = mapped_column(
        pg_enum(UserRole, "user_role"),
        nullable=False,
        default=UserRole.STUDENT,
        index=True,
    )
    status: Mapped[UserStatus] = mapped_column(
        pg_enum(UserStatus, "user_status"),
        nullable=False,
        default=UserStatus.ACTIVE,
        index=True,
    )

    # Set for imported users who received a temporary password
    must_change_password: Mapped[bool] = mapped_column(
        Boolean,
        default=False,
        nullable=False,
    )
    last_login_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True),
        nullable=True,
    )

    def __repr__(self) -> str:
        return f"<User(id={self.id}, email={self.email}, role={self.role.value})>"

    @property
    def is_active(self) -> bool:
        return self.status == UserStatus.ACTIVE
