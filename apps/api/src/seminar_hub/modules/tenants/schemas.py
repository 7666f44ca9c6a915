"""
Tenant Schemas
"""

import re
from datetime import datetime

from pydantic import Field, field_validator

from seminar_hub.modules.shared.schemas import CamelModel
from seminar_hub.modules.tenants.models import TenantStatus

DOMAIN_PATTERN = re.compile(r"^(?=.{3,255}$)[a-z0-9]([a-z0-9-]*[a-z0-9])?(\.[a-z0-9]([a-z0-9-]*[a-z0-9])?)+$")


class TenantSettings(CamelModel):
    allow_self_registration: bool = False
    require_email_verification: bool = True
    session_timeout: int = Field(30, ge=5, le=1440, description="Minutes")
    max_users: int = Field(1000, ge=1)


class TenantSettingsPatch(CamelModel):
    allow_self_registration: bool | None = None
    require_email_verification: bool | None = None
    session_timeout: int | None = Field(None, ge=5, le=1440)
    max_users: int | None = Field(None, ge=1)


class TenantCreate(CamelModel):
    name: str = Field(..., min_length=2, max_length=200)
    domain: str = Field(..., min_length=3, max_length=255)
    settings: TenantSettings = Field(default_factory=TenantSettings)

    @field_validator("domain")
    @classmethod
    def validate_domain(cls, value: str) -> str:
        value = value.strip().lower()
        if not DOMAIN_PATTERN.match(value):
            raise ValueError("Invalid domain")
        return value


class TenantUpdate(CamelModel):
    name: str | None = Field(None, min_length=2, max_length=200)
    # Accepted only so a change can be rejected explicitly
    domain: str | None = None
    settings: TenantSettingsPatch | None = None


class TenantStatusUpdate(CamelModel):
    status: TenantStatus


class TenantResponse(CamelModel):
    id: str
    name: str
    domain: str
    status: TenantStatus
    settings: TenantSettings
    created_at: datetime
    updated_at: datetime


class TenantListResponse(CamelModel):
    items: list[TenantResponse]
    has_more: bool
    limit: int
    skip: int
