"""
Learning Analytics - time and completion statistics.

Everything is recomputed from current Task and TimeLog rows on each call.
"""

import uuid
from datetime import date, datetime, time, timedelta, timezone
from typing import Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from portfolio_api.core.exceptions import NotFoundError
from portfolio_api.core.models import LearningPlan, LearningTask, TaskStatus, TimeLog, as_utc
from portfolio_api.core.schemas import (
    DailyStats,
    PlanStats,
    TaskTimeBreakdown,
    TimeLogResponse,
    WeeklyStats,
)


def format_hours(seconds: int) -> str:
    """Seconds as hours with one decimal, e.g. 5400 -> "1.5"."""
    return f"{seconds / 3600:.1f}"


def completion_percentage(completed: int, total: int) -> float:
    """Percentage of completed tasks, 0.0 for an empty plan."""
    if total <= 0:
        return 0.0
    return round(completed / total * 100, 1)


def _day_bounds(day: date) -> tuple[datetime, datetime]:
    start = datetime.combine(day, time.min, tzinfo=timezone.utc)
    return start, start + timedelta(days=1)


async def get_plan_stats(db: AsyncSession, plan_id: uuid.UUID) -> PlanStats:
    plan = await db.get(LearningPlan, plan_id)
    if plan is None:
        raise NotFoundError("Plan not found")

    result = await db.execute(
        select(LearningTask)
        .where(LearningTask.plan_id == plan_id)
        .order_by(LearningTask.created_at)
    )
    tasks = result.scalars().all()

    total_seconds = sum(task.total_time_spent for task in tasks)
    completed = sum(1 for task in tasks if task.status == TaskStatus.COMPLETED)

    return PlanStats(
        plan_id=plan_id,
        total_seconds=total_seconds,
        total_hours=format_hours(total_seconds),
        total_tasks=len(tasks),
        completed_tasks=completed,
        completion_percentage=completion_percentage(completed, len(tasks)),
        task_breakdown=[
            TaskTimeBreakdown(
                task_id=task.id,
                title=task.title,
                total_time_spent=task.total_time_spent,
                total_hours=format_hours(task.total_time_spent),
                status=task.status,
            )
            for task in tasks
        ],
    )


async def _logs_between(db: AsyncSession, start: datetime, end: datetime) -> list[TimeLog]:
    result = await db.execute(
        select(TimeLog)
        .where(TimeLog.start_time >= start, TimeLog.start_time < end)
        .order_by(TimeLog.start_time)
    )
    return list(result.scalars().all())


async def get_daily_stats(db: AsyncSession, day: date) -> DailyStats:
    """Sessions started on a UTC calendar day. Running sessions count as 0s."""
    start, end = _day_bounds(day)
    logs = await _logs_between(db, start, end)
    total_seconds = sum(log.duration for log in logs)

    return DailyStats(
        date=day,
        total_seconds=total_seconds,
        total_hours=format_hours(total_seconds),
        sessions_count=len(logs),
        time_logs=[TimeLogResponse.model_validate(log) for log in logs],
    )


def week_start_for(day: date) -> date:
    """Monday of the week containing ``day``."""
    return day - timedelta(days=day.weekday())


async def get_weekly_stats(db: AsyncSession, week_start: Optional[date] = None) -> WeeklyStats:
    """Seven days from ``week_start`` (default: this week's Monday)."""
    if week_start is None:
        week_start = week_start_for(datetime.now(timezone.utc).date())
    week_end = week_start + timedelta(days=6)

    start, _ = _day_bounds(week_start)
    _, end = _day_bounds(week_end)
    logs = await _logs_between(db, start, end)

    daily_breakdown = {
        (week_start + timedelta(days=offset)).isoformat(): 0 for offset in range(7)
    }
    for log in logs:
        key = as_utc(log.start_time).date().isoformat()
        daily_breakdown[key] += log.duration

    total_seconds = sum(daily_breakdown.values())
    return WeeklyStats(
        week_start=week_start,
        week_end=week_end,
        total_seconds=total_seconds,
        total_hours=format_hours(total_seconds),
        sessions_count=len(logs),
        daily_breakdown=daily_breakdown,
    )
