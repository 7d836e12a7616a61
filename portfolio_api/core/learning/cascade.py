"""
Cascading deletes for learning records.

The store has no foreign keys between plans, phases, tasks, time logs and
comments, so children are removed explicitly here.

Plan deletion is committed first; each child collection is then removed in
its own commit. If a step fails, the remaining children are left orphaned
and the failure is reported in the returned ``CascadeResult``.
"""

import uuid
from collections.abc import Awaitable, Callable, Sequence
from dataclasses import dataclass, field
from typing import Optional

import structlog
from sqlalchemy import delete, select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from portfolio_api.core.exceptions import NotFoundError
from portfolio_api.core.models import LearningPlan, LearningTask, Phase, TaskComment, TimeLog

logger = structlog.get_logger()


@dataclass
class CascadeResult:
    deleted: dict[str, int] = field(default_factory=dict)
    failed_step: Optional[str] = None
    error: Optional[str] = None

    @property
    def complete(self) -> bool:
        return self.failed_step is None


# ==========================================================================
# Cascade Steps
# ==========================================================================

async def _delete_phases(db: AsyncSession, plan_id: uuid.UUID, task_ids: Sequence[uuid.UUID]) -> int:
    result = await db.execute(delete(Phase).where(Phase.plan_id == plan_id))
    return result.rowcount


async def _delete_tasks(db: AsyncSession, plan_id: uuid.UUID, task_ids: Sequence[uuid.UUID]) -> int:
    result = await db.execute(delete(LearningTask).where(LearningTask.plan_id == plan_id))
    return result.rowcount


async def _delete_time_logs(db: AsyncSession, plan_id: uuid.UUID, task_ids: Sequence[uuid.UUID]) -> int:
    if not task_ids:
        return 0
    result = await db.execute(delete(TimeLog).where(TimeLog.task_id.in_(task_ids)))
    return result.rowcount


async def _delete_comments(db: AsyncSession, plan_id: uuid.UUID, task_ids: Sequence[uuid.UUID]) -> int:
    if not task_ids:
        return 0
    result = await db.execute(delete(TaskComment).where(TaskComment.task_id.in_(task_ids)))
    return result.rowcount


# ==========================================================================
# Public API
# ==========================================================================

async def delete_plan(db: AsyncSession, plan_id: uuid.UUID) -> CascadeResult:
    """
    Delete a plan and then its phases, tasks, time logs and comments.

    Raises:
        NotFoundError: If the plan does not exist
    """
    plan = await db.get(LearningPlan, plan_id)
    if plan is None:
        raise NotFoundError("Plan not found")

    # Task ids are needed after the tasks themselves are gone
    task_ids = list(
        (await db.execute(select(LearningTask.id).where(LearningTask.plan_id == plan_id)))
        .scalars()
        .all()
    )

    await db.delete(plan)
    await db.commit()
    logger.info("plan_deleted", plan_id=str(plan_id), task_count=len(task_ids))

    steps: list[tuple[str, Callable[..., Awaitable[int]]]] = [
        ("phases", _delete_phases),
        ("tasks", _delete_tasks),
        ("time_logs", _delete_time_logs),
        ("comments", _delete_comments),
    ]

    result = CascadeResult(deleted={"plans": 1})
    for name, step in steps:
        try:
            result.deleted[name] = await step(db, plan_id, task_ids)
            await db.commit()
        except SQLAlchemyError as e:
            await db.rollback()
            result.failed_step = name
            result.error = str(e)
            logger.error(
                "plan_cascade_step_failed",
                plan_id=str(plan_id),
                step=name,
                error=str(e),
            )
            break

    return result


async def delete_phase(db: AsyncSession, phase_id: uuid.UUID) -> int:
    """
    Delete a phase, keeping its tasks.

    Tasks of the phase stay in the plan with ``phase_id`` cleared.

    Returns:
        Number of tasks unassigned
    """
    phase = await db.get(Phase, phase_id)
    if phase is None:
        raise NotFoundError("Phase not found")

    unassigned = await db.execute(
        update(LearningTask)
        .where(LearningTask.phase_id == phase_id)
        .values(phase_id=None)
        .execution_options(synchronize_session="fetch")
    )
    await db.delete(phase)
    await db.commit()

    logger.info("phase_deleted", phase_id=str(phase_id), tasks_unassigned=unassigned.rowcount)
    return unassigned.rowcount


async def delete_task(db: AsyncSession, task_id: uuid.UUID) -> None:
    """Delete a task together with its time logs and comments."""
    task = await db.get(LearningTask, task_id)
    if task is None:
        raise NotFoundError("Task not found")

    await db.execute(delete(TimeLog).where(TimeLog.task_id == task_id))
    await db.execute(delete(TaskComment).where(TaskComment.task_id == task_id))
    await db.delete(task)
    await db.commit()

    logger.info("task_deleted", task_id=str(task_id))
