"""
Portfolio API - Learning Tracker
================================

Plans, phases and tasks. Reads are public, mutations need an admin token.
"""

from uuid import UUID, uuid4

from fastapi import APIRouter, status
from sqlalchemy import select

from portfolio_api.api.deps import CurrentAdmin, DbSession
from portfolio_api.core.exceptions import NotFoundError, ValidationError
from portfolio_api.core.learning import delete_phase, delete_plan, delete_task, get_plan_stats
from portfolio_api.core.models import LearningPlan, LearningTask, Phase, as_utc
from portfolio_api.core.schemas import (
    CascadeDeleteResponse,
    MessageResponse,
    PhaseCreate,
    PhaseResponse,
    PhaseUpdate,
    PlanCreate,
    PlanDetailResponse,
    PlanResponse,
    PlanStats,
    PlanUpdate,
    TaskCreate,
    TaskResponse,
    TaskUpdate,
)

router = APIRouter(prefix="/learning", tags=["Learning"])


# ==========================================================================
# Helper Functions
# ==========================================================================

async def get_plan_or_404(plan_id: UUID, db) -> LearningPlan:
    plan = await db.get(LearningPlan, plan_id)
    if plan is None:
        raise NotFoundError("Plan not found")
    return plan


async def get_phase_or_404(phase_id: UUID, db) -> Phase:
    phase = await db.get(Phase, phase_id)
    if phase is None:
        raise NotFoundError("Phase not found")
    return phase


async def get_phase_in_plan(phase_id: UUID, plan_id: UUID, db) -> Phase:
    """Phase lookup for task placement; the phase must belong to the task's plan."""
    phase = await get_phase_or_404(phase_id, db)
    if phase.plan_id != plan_id:
        raise ValidationError("Phase belongs to a different plan")
    return phase


async def get_task_or_404(task_id: UUID, db) -> LearningTask:
    task = await db.get(LearningTask, task_id)
    if task is None:
        raise NotFoundError("Task not found")
    return task


def check_plan_dates(plan: LearningPlan) -> None:
    if plan.start_date is None or plan.target_end_date is None:
        return
    if as_utc(plan.target_end_date) < as_utc(plan.start_date):
        raise ValidationError("target_end_date must not be before start_date")


# ==========================================================================
# Plans
# ==========================================================================

@router.get("/plans", response_model=list[PlanResponse], summary="List plans")
async def list_plans(db: DbSession) -> list[PlanResponse]:
    result = await db.execute(select(LearningPlan).order_by(LearningPlan.created_at.desc()))
    return [PlanResponse.model_validate(plan) for plan in result.scalars().all()]


@router.get("/plans/{plan_id}", response_model=PlanDetailResponse, summary="Get plan with phases and tasks")
async def get_plan(plan_id: UUID, db: DbSession) -> PlanDetailResponse:
    plan = await get_plan_or_404(plan_id, db)

    phases = await db.execute(
        select(Phase).where(Phase.plan_id == plan_id).order_by(Phase.order, Phase.created_at)
    )
    tasks = await db.execute(
        select(LearningTask)
        .where(LearningTask.plan_id == plan_id)
        .order_by(LearningTask.created_at)
    )

    return PlanDetailResponse(
        plan=PlanResponse.model_validate(plan),
        phases=[PhaseResponse.model_validate(p) for p in phases.scalars().all()],
        tasks=[TaskResponse.model_validate(t) for t in tasks.scalars().all()],
    )


@router.post(
    "/plans",
    response_model=PlanResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create plan",
)
async def create_plan(data: PlanCreate, current_admin: CurrentAdmin, db: DbSession) -> PlanResponse:
    plan = LearningPlan(id=uuid4(), **data.model_dump())
    check_plan_dates(plan)
    db.add(plan)
    await db.commit()
    await db.refresh(plan)
    return PlanResponse.model_validate(plan)


@router.put("/plans/{plan_id}", response_model=PlanResponse, summary="Update plan")
async def update_plan(
    plan_id: UUID,
    data: PlanUpdate,
    current_admin: CurrentAdmin,
    db: DbSession,
) -> PlanResponse:
    plan = await get_plan_or_404(plan_id, db)

    for field, value in data.model_dump(exclude_unset=True).items():
        setattr(plan, field, value)
    check_plan_dates(plan)

    await db.commit()
    await db.refresh(plan)
    return PlanResponse.model_validate(plan)


@router.delete(
    "/plans/{plan_id}",
    response_model=CascadeDeleteResponse,
    summary="Delete plan and its phases, tasks and time logs",
)
async def remove_plan(plan_id: UUID, current_admin: CurrentAdmin, db: DbSession) -> CascadeDeleteResponse:
    """
    Delete a plan, then its children.

    If child cleanup fails part way, the plan stays deleted and the response
    reports ``complete: false`` with the step that failed.
    """
    result = await delete_plan(db, plan_id)

    if result.complete:
        message = "Plan deleted successfully"
    else:
        message = (
            f"Plan deleted, but removing its {result.failed_step} failed; "
            "remaining records need manual cleanup"
        )

    return CascadeDeleteResponse(
        message=message,
        complete=result.complete,
        deleted=result.deleted,
        failed_step=result.failed_step,
    )


@router.get("/plans/{plan_id}/stats", response_model=PlanStats, summary="Plan time statistics")
async def plan_stats(plan_id: UUID, db: DbSession) -> PlanStats:
    return await get_plan_stats(db, plan_id)


# ==========================================================================
# Phases
# ==========================================================================

@router.post(
    "/phases",
    response_model=PhaseResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create phase",
)
async def create_phase(data: PhaseCreate, current_admin: CurrentAdmin, db: DbSession) -> PhaseResponse:
    await get_plan_or_404(data.plan_id, db)

    phase = Phase(id=uuid4(), **data.model_dump())
    db.add(phase)
    await db.commit()
    await db.refresh(phase)
    return PhaseResponse.model_validate(phase)


@router.put("/phases/{phase_id}", response_model=PhaseResponse, summary="Update phase")
async def update_phase(
    phase_id: UUID,
    data: PhaseUpdate,
    current_admin: CurrentAdmin,
    db: DbSession,
) -> PhaseResponse:
    phase = await get_phase_or_404(phase_id, db)

    for field, value in data.model_dump(exclude_unset=True).items():
        setattr(phase, field, value)

    await db.commit()
    await db.refresh(phase)
    return PhaseResponse.model_validate(phase)


@router.delete("/phases/{phase_id}", response_model=MessageResponse, summary="Delete phase")
async def remove_phase(phase_id: UUID, current_admin: CurrentAdmin, db: DbSession) -> MessageResponse:
    """Delete a phase. Its tasks are kept and moved out of the phase."""
    unassigned = await delete_phase(db, phase_id)
    return MessageResponse(message=f"Phase deleted successfully; {unassigned} task(s) unassigned")


# ==========================================================================
# Tasks
# ==========================================================================

@router.get("/tasks/{task_id}", response_model=TaskResponse, summary="Get task")
async def get_task(task_id: UUID, db: DbSession) -> TaskResponse:
    return TaskResponse.model_validate(await get_task_or_404(task_id, db))


@router.post(
    "/tasks",
    response_model=TaskResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create task",
)
async def create_task(data: TaskCreate, current_admin: CurrentAdmin, db: DbSession) -> TaskResponse:
    await get_plan_or_404(data.plan_id, db)
    if data.phase_id is not None:
        await get_phase_in_plan(data.phase_id, data.plan_id, db)

    task = LearningTask(id=uuid4(), total_time_spent=0, **data.model_dump())
    db.add(task)
    await db.commit()
    await db.refresh(task)
    return TaskResponse.model_validate(task)


@router.put("/tasks/{task_id}", response_model=TaskResponse, summary="Update task")
async def update_task(
    task_id: UUID,
    data: TaskUpdate,
    current_admin: CurrentAdmin,
    db: DbSession,
) -> TaskResponse:
    task = await get_task_or_404(task_id, db)

    update_data = data.model_dump(exclude_unset=True)
    if update_data.get("phase_id") is not None:
        await get_phase_in_plan(update_data["phase_id"], task.plan_id, db)

    for field, value in update_data.items():
        setattr(task, field, value)

    await db.commit()
    await db.refresh(task)
    return TaskResponse.model_validate(task)


@router.delete("/tasks/{task_id}", response_model=MessageResponse, summary="Delete task")
async def remove_task(task_id: UUID, current_admin: CurrentAdmin, db: DbSession) -> MessageResponse:
    await delete_task(db, task_id)
    return MessageResponse(message="Task deleted successfully")
