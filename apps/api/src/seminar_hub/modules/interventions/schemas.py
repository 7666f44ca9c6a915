"""
Intervention Plan Schemas
"""

from datetime import datetime

from pydantic import Field

from seminar_hub.modules.interventions.helpers import calculate_progress
from seminar_hub.modules.interventions.models import GoalStatus, InterventionPlan, PlanStatus
from seminar_hub.modules.shared.enums import Priority
from seminar_hub.modules.shared.schemas import CamelModel


class Goal(CamelModel):
    id: str | None = None
    description: str = Field(..., min_length=1, max_length=500)
    status: GoalStatus = GoalStatus.NOT_STARTED


class InterventionPlanCreate(CamelModel):
    student_id: str
    title: str = Field(..., min_length=1, max_length=200)
    description: str | None = Field(None, max_length=5000)
    goals: list[Goal] = Field(default_factory=list, max_length=50)
    strategies: list[str] = Field(default_factory=list, max_length=50)
    timeline: str | None = Field(None, max_length=200)
    priority: Priority = Priority.MEDIUM
    authorized_teachers: list[str] = Field(default_factory=list)
    parent_notified: bool = False
    review_date: datetime | None = None


class InterventionPlanUpdate(CamelModel):
    title: str | None = Field(None, min_length=1, max_length=200)
    description: str | None = Field(None, max_length=5000)
    goals: list[Goal] | None = Field(None, max_length=50)
    strategies: list[str] | None = Field(None, max_length=50)
    timeline: str | None = Field(None, max_length=200)
    priority: Priority | None = None
    authorized_teachers: list[str] | None = None
    parent_notified: bool | None = None
    review_date: datetime | None = None


class GoalStatusUpdate(CamelModel):
    status: GoalStatus


class PlanStatusUpdate(CamelModel):
    status: PlanStatus


class InterventionPlanResponse(CamelModel):
    id: str
    tenant_id: str
    student_id: str
    author_id: str
    title: str
    description: str | None
    goals: list[Goal]
    strategies: list[str]
    timeline: str | None
    priority: Priority
    status: PlanStatus
    authorized_teachers: list[str]
    parent_notified: bool
    review_date: datetime | None
    progress: int = Field(..., ge=0, le=100, description="Completed goals, percent")
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_plan(cls, plan: InterventionPlan) -> "InterventionPlanResponse":
        return cls(
            id=plan.id,
            tenant_id=plan.tenant_id,
            student_id=plan.student_id,
            author_id=plan.author_id,
            title=plan.title,
            description=plan.description,
            goals=[Goal.model_validate(goal) for goal in plan.goals],
            strategies=list(plan.strategies),
            timeline=plan.timeline,
            priority=plan.priority,
            status=plan.status,
            authorized_teachers=list(plan.authorized_teachers),
            parent_notified=plan.parent_notified,
            review_date=plan.review_date,
            progress=calculate_progress(plan.goals),
            created_at=plan.created_at,
            updated_at=plan.updated_at,
        )


class InterventionPlanListResponse(CamelModel):
    items: list[InterventionPlanResponse]
    has_more: bool
    limit: int
    skip: int
