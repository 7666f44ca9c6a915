"""
Interventions module - Student intervention plans.

API Endpoints:
- GET/POST /intervention-plans - List / create plans
- GET/PATCH /intervention-plans/{id} - Read / edit (author only)
- PUT /intervention-plans/{id}/status - Change plan status
- PUT /intervention-plans/{id}/goals/{goal_id} - Change one goal's status
"""

from seminar_hub.modules.interventions.helpers import calculate_progress
from seminar_hub.modules.interventions.models import GoalStatus, InterventionPlan, PlanStatus

__all__ = ["GoalStatus", "InterventionPlan", "PlanStatus", "calculate_progress"]
