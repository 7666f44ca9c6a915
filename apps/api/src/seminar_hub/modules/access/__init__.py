"""
Access module - Route gating by role.

API Endpoints:
- POST /access/check - Decide render / redirect_to_login / denied for a path
"""

from seminar_hub.modules.access.gate import AccessDecision, authorize
from seminar_hub.modules.access.routes import authorize_route, required_role_for

__all__ = ["AccessDecision", "authorize", "authorize_route", "required_role_for"]
