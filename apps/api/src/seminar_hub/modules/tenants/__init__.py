"""
Tenants module - Organization records and their settings.

API Endpoints:
- GET /admin/tenants - List tenants visible to the admin
- POST /admin/tenants - Create tenant (platform admins)
- GET /admin/tenants/{id} - Get tenant
- PATCH /admin/tenants/{id} - Update name/settings (domain is immutable)
- PUT /admin/tenants/{id}/status - Change status
"""

from seminar_hub.modules.tenants.models import DEFAULT_TENANT_SETTINGS, Tenant, TenantStatus

__all__ = ["DEFAULT_TENANT_SETTINGS", "Tenant", "TenantStatus"]
