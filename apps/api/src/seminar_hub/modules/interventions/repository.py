"""
Intervention Plan Repository
"""

from seminar_hub.modules.identity.capabilities import EntityKind
from seminar_hub.modules.interventions.models import InterventionPlan
from seminar_hub.modules.shared.repository import TenantRepository

plans = TenantRepository(
    InterventionPlan,
    EntityKind.INTERVENTION_PLAN,
    search_fields=("title", "description"),
    filter_fields=("student_id", "author_id", "status", "priority"),
)
