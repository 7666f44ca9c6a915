"""
User Schemas

Request/response models for admin user management.
"""

from datetime import datetime

from pydantic import EmailStr, Field

from seminar_hub.modules.shared.schemas import CamelModel
from seminar_hub.modules.users.models import UserRole, UserStatus

MIN_PASSWORD_LENGTH = 8


class UserCreate(CamelModel):
    email: EmailStr
    display_name: str = Field(..., min_length=1, max_length=200)
    role: UserRole = UserRole.STUDENT
    password: str = Field(..., min_length=MIN_PASSWORD_LENGTH, max_length=128)
    confirm_password: str = Field(..., max_length=128)


class UserUpdate(CamelModel):
    display_name: str | None = Field(None, min_length=1, max_length=200)
    role: UserRole | None = None


class UserStatusUpdate(CamelModel):
    status: UserStatus


class UserResponse(CamelModel):
    id: str
    tenant_id: str | None
    email: str
    display_name: str
    role: UserRole
    status: UserStatus
    must_change_password: bool
    last_login_at: datetime | None = None
    created_at: datetime
    updated_at: datetime


class UserListResponse(CamelModel):
    items: list[UserResponse]
    has_more: bool
    limit: int
    skip: int


class UserImportRow(CamelModel):
    email: EmailStr
    display_name: str = Field(..., min_length=1, max_length=200)
    role: UserRole = UserRole.STUDENT


class UserImportRequest(CamelModel):
    users: list[UserImportRow] = Field(..., min_length=1, max_length=500)


class ImportedUser(CamelModel):
    email: str
    id: str
    temporary_password: str


class FailedImport(CamelModel):
    email: str
    error: str


class UserImportResponse(CamelModel):
    successful: list[ImportedUser]
    failed: list[FailedImport]
    total: int
