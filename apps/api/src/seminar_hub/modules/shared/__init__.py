"""
Shared building blocks for feature modules.
"""

from seminar_hub.modules.shared.models import BaseModel, TenantScopedMixin, utc_now

__all__ = ["BaseModel", "TenantScopedMixin", "utc_now"]
