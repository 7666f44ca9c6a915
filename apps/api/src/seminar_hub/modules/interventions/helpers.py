"""
Intervention Plan Helpers
"""

import math
from collections.abc import Iterable
from typing import Any
from uuid import uuid4

from seminar_hub.modules.interventions.models import GoalStatus


def calculate_progress(goals: Iterable[dict[str, Any]]) -> int:
    """
    Percentage of completed goals, rounded half up. 0 with no goals.

    >>> calculate_progress([{"status": "completed"}, {"status": "in_progress"}, {"status": "not_started"}])
    33
    """
    goals = list(goals)
    if not goals:
        return 0
    completed = sum(1 for goal in goals if goal.get("status") == GoalStatus.COMPLETED.value)
    return math.floor(completed * 100 / len(goals) + 0.5)


def normalize_goal(goal: dict[str, Any]) -> dict[str, Any]:
    """Give a goal an id and a status if it lacks them."""
    status = goal.get("status") or GoalStatus.NOT_STARTED.value
    return {
        "id": goal.get("id") or uuid4().hex[:12],
        "description": goal["description"],
        "status": GoalStatus(status).value,
    }
