"""
Timer Tracker - per-task time logging sessions.

A task has at most one active TimeLog. Starting a timer opens one, stopping
it closes the log and adds the elapsed whole seconds to the task's
``total_time_spent``.
"""

import math
import uuid
from collections.abc import Callable
from datetime import datetime
from typing import Optional

import structlog
from sqlalchemy import select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from portfolio_api.core.exceptions import ConflictError, NotFoundError
from portfolio_api.core.models import LearningTask, TimeLog, as_utc, utcnow

logger = structlog.get_logger()


def elapsed_seconds(start: datetime, end: datetime) -> int:
    """Whole seconds between two instants, clamped to zero."""
    delta = (as_utc(end) - as_utc(start)).total_seconds()
    return max(0, math.floor(delta))


class TimerTracker:
    """
    Start/stop timer sessions for learning tasks.

    The clock is injectable so tests can control elapsed time.
    """

    def __init__(
        self,
        db: AsyncSession,
        clock: Callable[[], datetime] = utcnow,
    ):
        self.db = db
        self.clock = clock

    async def _get_task(self, task_id: uuid.UUID) -> LearningTask:
        result = await self.db.execute(
            select(LearningTask).where(LearningTask.id == task_id)
        )
        task = result.scalar_one_or_none()
        if task is None:
            raise NotFoundError("Task not found")
        return task

    async def get_active_timer(self, task_id: uuid.UUID) -> Optional[TimeLog]:
        result = await self.db.execute(
            select(TimeLog).where(
                TimeLog.task_id == task_id,
                TimeLog.is_active.is_(True),
            )
        )
        return result.scalars().first()

    async def start_timer(self, task_id: uuid.UUID) -> TimeLog:
        """
        Open a new timer session for a task.

        Raises:
            NotFoundError: If the task does not exist
            ConflictError: If the task already has a running timer
        """
        await self._get_task(task_id)

        if await self.get_active_timer(task_id) is not None:
            raise ConflictError("Timer already running for this task")

        time_log = TimeLog(
            id=uuid.uuid4(),
            task_id=task_id,
            start_time=self.clock(),
            duration=0,
            is_active=True,
        )
        self.db.add(time_log)

        try:
            await self.db.commit()
        except IntegrityError as e:
            # A concurrent start won the race on the active-timer index
            await self.db.rollback()
            raise ConflictError("Timer already running for this task") from e

        await self.db.refresh(time_log)
        logger.info("timer_started", task_id=str(task_id), time_log_id=str(time_log.id))
        return time_log

    async def stop_timer(self, task_id: uuid.UUID) -> tuple[TimeLog, int]:
        """
        Close the running timer session for a task.

        Returns:
            The closed TimeLog and the task's updated total_time_spent

        Raises:
            NotFoundError: If the task has no running timer
        """
        time_log = await self.get_active_timer(task_id)
        if time_log is None:
            raise NotFoundError("No active timer found for this task")

        end_time = self.clock()
        duration = elapsed_seconds(time_log.start_time, end_time)

        # Conditional close: only one stop can flip is_active
        closed = await self.db.execute(
            update(TimeLog)
            .where(TimeLog.id == time_log.id, TimeLog.is_active.is_(True))
            .values(end_time=end_time, duration=duration, is_active=False)
            .execution_options(synchronize_session=False)
        )
        if closed.rowcount == 0:
            await self.db.rollback()
            raise NotFoundError("No active timer found for this task")

        await self.db.execute(
            update(LearningTask)
            .where(LearningTask.id == task_id)
            .values(total_time_spent=LearningTask.total_time_spent + duration)
            .execution_options(synchronize_session=False)
        )
        await self.db.commit()

        await self.db.refresh(time_log)
        task = await self._get_task(task_id)
        await self.db.refresh(task)

        logger.info(
            "timer_stopped",
            task_id=str(task_id),
            time_log_id=str(time_log.id),
            duration=duration,
            total_time_spent=task.total_time_spent,
        )
        return time_log, task.total_time_spent

    async def list_logs(self, task_id: uuid.UUID) -> list[TimeLog]:
        """All sessions for a task, newest first."""
        result = await self.db.execute(
            select(TimeLog)
            .where(TimeLog.task_id == task_id)
            .order_by(TimeLog.start_time.desc())
        )
        return list(result.scalars().all())
