"""
Tenant Models

A tenant is one organization and the root of the isolation boundary.
"""

from enum import Enum
from typing import Any

from sqlalchemy import String
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import Mapped, mapped_column

from seminar_hub.modules.shared import BaseModel
from seminar_hub.modules.shared.enums import pg_enum


class TenantStatus(str, Enum):
    ACTIVE = "active"
    INACTIVE = "inactive"
    SUSPENDED = "suspended"


VALID_TENANT_STATUS_TRANSITIONS: dict[TenantStatus, set[TenantStatus]] = {
    TenantStatus.ACTIVE: {TenantStatus.INACTIVE, TenantStatus.SUSPENDED},
    TenantStatus.INACTIVE: {TenantStatus.ACTIVE},
    TenantStatus.SUSPENDED: {TenantStatus.ACTIVE, TenantStatus.INACTIVE},
}

# Stored verbatim (camelCase) since the view layer reads these keys
DEFAULT_TENANT_SETTINGS: dict[str, Any] = {
    "allowSelfRegistration": False,
    "requireEmailVerification": True,
    "sessionTimeout": 30,
    "maxUsers": 1000,
}


class Tenant(BaseModel):
    """
    Organization record.

    ``domain`` is fixed at creation; updates may not change it.
    """

    __tablename__ = "tenants"

    name: Mapped[str] = mapped_column(String(200), nullable=False)
    domain: Mapped[str] = mapped_column(
        String(255),
        unique=True,
        index=True,
        nullable=False,
    )
    status: Mapped[TenantStatus] = mapped_column(
        pg_enum(TenantStatus, "tenant_status"),
        nullable=False,
        default=TenantStatus.ACTIVE,
        index=True,
    )
    settings: Mapped[dict[str, Any]] = mapped_column(
        JSONB,
        nullable=False,
        default=lambda: dict(DEFAULT_TENANT_SETTINGS),
    )

    def __repr__(self) -> str:
        return f"<Tenant(id={self.id}, domain={self.domain}, status={self.status.value})>"

    def setting(self, key: str) -> Any:
        """Read a setting, falling back to the platform default."""
        return (self.settings or {}).get(key, DEFAULT_TENANT_SETTINGS.get(key))
