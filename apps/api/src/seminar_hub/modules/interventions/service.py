"""
Intervention Plan Service

Specialists and counselors author plans; teachers may read the plans
that list them in ``authorized_teachers``. Only the author edits a plan.
"""

import logging
from typing import Any

from sqlalchemy.ext.asyncio import AsyncSession

from seminar_hub.core.errors import NotFoundError, PermissionDeniedError, ValidationFailedError
from seminar_hub.modules.identity.session import Session
from seminar_hub.modules.interventions.helpers import normalize_goal
from seminar_hub.modules.interventions.models import (
    VALID_PLAN_TRANSITIONS,
    GoalStatus,
    InterventionPlan,
    PlanStatus,
)
from seminar_hub.modules.interventions.repository import plans
from seminar_hub.modules.interventions.schemas import InterventionPlanCreate, InterventionPlanUpdate
from seminar_hub.modules.shared.filters import ListFilters
from seminar_hub.modules.shared.pagination import Page, PageRequest
from seminar_hub.modules.users.models import UserRole

logger = logging.getLogger(__name__)

AUTHOR_ROLES = frozenset({UserRole.SPECIALIST, UserRole.COUNSELOR})


def _ensure_can_read(session: Session, plan: InterventionPlan) -> None:
    if session.role == UserRole.TEACHER and session.principal_id not in plan.authorized_teachers:
        logger.warning(f"Teacher {session.principal_id} not authorized for plan {plan.id}")
        raise PermissionDeniedError("You are not authorized to view this intervention plan.")


def _ensure_author(session: Session, plan: InterventionPlan) -> None:
    if plan.author_id != session.principal_id:
        raise PermissionDeniedError("Only the plan's author can change it.")


async def create_plan(
    db: AsyncSession,
    session: Session,
    data: InterventionPlanCreate,
) -> InterventionPlan:
    """Create an active plan authored by the caller."""
    if session.role not in AUTHOR_ROLES:
        raise PermissionDeniedError("Only specialists and counselors can create intervention plans.")

    return await plans.create(
        db,
        session,
        {
            "student_id": data.student_id,
            "author_id": session.principal_id,
            "title": data.title,
            "description": data.description,
            "goals": [normalize_goal(goal.model_dump()) for goal in data.goals],
            "strategies": data.strategies,
            "timeline": data.timeline,
            "priority": data.priority,
            "status": PlanStatus.ACTIVE,
            "authorized_teachers": data.authorized_teachers,
            "parent_notified": data.parent_notified,
            "review_date": data.review_date,
        },
        details={"studentId": data.student_id, "title": data.title},
    )


async def list_plans(
    db: AsyncSession,
    session: Session,
    filters: ListFilters | None = None,
    page: PageRequest | None = None,
) -> Page[InterventionPlan]:
    criteria = []
    if session.role == UserRole.TEACHER:
        criteria.append(InterventionPlan.authorized_teachers.contains([session.principal_id]))
    return await plans.list(db, session, filters, page, criteria=criteria)


async def get_plan(db: AsyncSession, session: Session, plan_id: str) -> InterventionPlan:
    plan = await plans.get_or_raise(db, session, plan_id)
    _ensure_can_read(session, plan)
    return plan


async def update_plan(
    db: AsyncSession,
    session: Session,
    plan_id: str,
    data: InterventionPlanUpdate,
) -> InterventionPlan:
    plan = await plans.get_or_raise(db, session, plan_id)
    _ensure_author(session, plan)

    patch: dict[str, Any] = data.model_dump(exclude_none=True)
    if not patch:
        raise ValidationFailedError("No changes supplied", error_code="EMPTY_UPDATE")
    if data.goals is not None:
        patch["goals"] = [normalize_goal(goal.model_dump()) for goal in data.goals]

    return await plans.update(db, session, plan_id, patch, entity=plan)


async def update_goal_status(
    db: AsyncSession,
    session: Session,
    plan_id: str,
    goal_id: str,
    status: GoalStatus,
) -> InterventionPlan:
    plan = await plans.get_or_raise(db, session, plan_id)
    _ensure_author(session, plan)

    goals = [dict(goal) for goal in plan.goals]
    for goal in goals:
        if goal.get("id") == goal_id:
            previous = goal.get("status")
            goal["status"] = status.value
            break
    else:
        raise NotFoundError("goal", goal_id)

    # Reassign so the JSONB change is detected
    return await plans.update(
        db,
        session,
        plan_id,
        {"goals": goals},
        details={"goalId": goal_id, "from": previous, "to": status},
        entity=plan,
    )


async def set_plan_status(
    db: AsyncSession,
    session: Session,
    plan_id: str,
    new_status: PlanStatus,
) -> InterventionPlan:
    plan = await plans.get_or_raise(db, session, plan_id)
    _ensure_author(session, plan)
    return await plans.set_status(
        db,
        session,
        plan_id,
        new_status,
        transitions=VALID_PLAN_TRANSITIONS,
    )
