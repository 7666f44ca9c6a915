"""
Intervention Plan Router

Specialists and counselors manage plans; teachers read the plans they
are authorized on.
"""

import logging

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from seminar_hub.core.auth import get_current_session
from seminar_hub.core.database import get_db
from seminar_hub.core.errors import ServiceError, internal_error, to_http_exception
from seminar_hub.modules.identity.session import Session
from seminar_hub.modules.interventions import service
from seminar_hub.modules.interventions.models import PlanStatus
from seminar_hub.modules.interventions.schemas import (
    GoalStatusUpdate,
    InterventionPlanCreate,
    InterventionPlanListResponse,
    InterventionPlanResponse,
    InterventionPlanUpdate,
    PlanStatusUpdate,
)
from seminar_hub.modules.shared.enums import Priority
from seminar_hub.modules.shared.filters import ListFilters
from seminar_hub.modules.shared.pagination import PageRequest

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("", response_model=InterventionPlanListResponse, summary="List Intervention Plans")
async def list_plans(
    student_id: str | None = Query(None, alias="studentId"),
    plan_status: PlanStatus | None = Query(None, alias="status"),
    priority: Priority | None = Query(None),
    search: str | None = Query(None, max_length=100),
    skip: int = Query(0, ge=0),
    limit: int = Query(50, ge=1, le=100),
    db: AsyncSession = Depends(get_db),
    session: Session = Depends(get_current_session),
) -> InterventionPlanListResponse:
    try:
        page = await service.list_plans(
            db,
            session,
            ListFilters(
                search=search,
                exact={"student_id": student_id, "status": plan_status, "priority": priority},
            ),
            PageRequest(limit=limit, skip=skip),
        )
    except ServiceError as e:
        raise to_http_exception(e) from e
    except Exception as e:
        logger.exception(f"Error listing intervention plans: {e}")
        raise internal_error() from e

    return InterventionPlanListResponse(
        items=[InterventionPlanResponse.from_plan(plan) for plan in page.items],
        has_more=page.has_more,
        limit=page.limit,
        skip=page.skip,
    )


@router.post(
    "",
    response_model=InterventionPlanResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create Intervention Plan",
    description="""
Create an active plan authored by the caller.

**Access:** Specialist or counselor
""",
)
async def create_plan(
    body: InterventionPlanCreate,
    db: AsyncSession = Depends(get_db),
    session: Session = Depends(get_current_session),
) -> InterventionPlanResponse:
    try:
        plan = await service.create_plan(db, session, body)
    except ServiceError as e:
        raise to_http_exception(e) from e
    return InterventionPlanResponse.from_plan(plan)


@router.get("/{plan_id}", response_model=InterventionPlanResponse, summary="Get Intervention Plan")
async def get_plan(
    plan_id: str,
    db: AsyncSession = Depends(get_db),
    session: Session = Depends(get_current_session),
) -> InterventionPlanResponse:
    try:
        plan = await service.get_plan(db, session, plan_id)
    except ServiceError as e:
        raise to_http_exception(e) from e
    return InterventionPlanResponse.from_plan(plan)


@router.patch(
    "/{plan_id}",
    response_model=InterventionPlanResponse,
    summary="Update Intervention Plan",
    description="Partial update. **Access:** the plan's author",
)
async def update_plan(
    plan_id: str,
    body: InterventionPlanUpdate,
    db: AsyncSession = Depends(get_db),
    session: Session = Depends(get_current_session),
) -> InterventionPlanResponse:
    try:
        plan = await service.update_plan(db, session, plan_id, body)
    except ServiceError as e:
        raise to_http_exception(e) from e
    return InterventionPlanResponse.from_plan(plan)


@router.put(
    "/{plan_id}/status",
    response_model=InterventionPlanResponse,
    summary="Change Plan Status",
)
async def set_plan_status(
    plan_id: str,
    body: PlanStatusUpdate,
    db: AsyncSession = Depends(get_db),
    session: Session = Depends(get_current_session),
) -> InterventionPlanResponse:
    try:
        plan = await service.set_plan_status(db, session, plan_id, body.status)
    except ServiceError as e:
        raise to_http_exception(e) from e
    return InterventionPlanResponse.from_plan(plan)


@router.put(
    "/{plan_id}/goals/{goal_id}",
    response_model=InterventionPlanResponse,
    summary="Change Goal Status",
)
async def update_goal_status(
    plan_id: str,
    goal_id: str,
    body: GoalStatusUpdate,
    db: AsyncSession = Depends(get_db),
    session: Session = Depends(get_current_session),
) -> InterventionPlanResponse:
    try:
        plan = await service.update_goal_status(db, session, plan_id, goal_id, body.status)
    except ServiceError as e:
        raise to_http_exception(e) from e
    return InterventionPlanResponse.from_plan(plan)
