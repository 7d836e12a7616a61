"""
Portfolio API - Time Tracking
=============================

Per-task timers and daily/weekly time statistics.
"""

from datetime import date, datetime, timezone
from typing import Annotated, Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query

from portfolio_api.api.deps import CurrentAdmin, DbSession
from portfolio_api.core.learning import TimerTracker, get_daily_stats, get_weekly_stats
from portfolio_api.core.schemas import (
    ActiveTimerResponse,
    DailyStats,
    TimeLogResponse,
    TimerStopResponse,
    WeeklyStats,
)

router = APIRouter(prefix="/learning", tags=["Time Tracking"])


def get_timer_tracker(db: DbSession) -> TimerTracker:
    return TimerTracker(db)


Tracker = Annotated[TimerTracker, Depends(get_timer_tracker)]


# ==========================================================================
# Timers
# ==========================================================================

@router.post(
    "/tasks/{task_id}/timer/start",
    response_model=TimeLogResponse,
    summary="Start the task timer",
    responses={
        404: {"description": "Task not found"},
        409: {"description": "Timer already running"},
    },
)
async def start_timer(task_id: UUID, current_admin: CurrentAdmin, tracker: Tracker) -> TimeLogResponse:
    return TimeLogResponse.model_validate(await tracker.start_timer(task_id))


@router.post(
    "/tasks/{task_id}/timer/stop",
    response_model=TimerStopResponse,
    summary="Stop the task timer",
    responses={404: {"description": "No active timer"}},
)
async def stop_timer(task_id: UUID, current_admin: CurrentAdmin, tracker: Tracker) -> TimerStopResponse:
    time_log, total_time_spent = await tracker.stop_timer(task_id)
    return TimerStopResponse(
        time_log=TimeLogResponse.model_validate(time_log),
        total_time_spent=total_time_spent,
    )


@router.get(
    "/tasks/{task_id}/timer/active",
    response_model=ActiveTimerResponse,
    summary="Get the running timer, if any",
)
async def get_active_timer(task_id: UUID, tracker: Tracker) -> ActiveTimerResponse:
    time_log = await tracker.get_active_timer(task_id)
    return ActiveTimerResponse(
        active_timer=TimeLogResponse.model_validate(time_log) if time_log else None
    )


@router.get(
    "/tasks/{task_id}/logs",
    response_model=list[TimeLogResponse],
    summary="List timer sessions for a task",
)
async def list_time_logs(task_id: UUID, tracker: Tracker) -> list[TimeLogResponse]:
    return [TimeLogResponse.model_validate(log) for log in await tracker.list_logs(task_id)]


# ==========================================================================
# Statistics
# ==========================================================================

@router.get("/stats/daily", response_model=DailyStats, summary="Time spent on a day")
async def daily_stats(
    db: DbSession,
    day: Optional[date] = Query(None, alias="date", description="UTC day, defaults to today"),
) -> DailyStats:
    return await get_daily_stats(db, day or datetime.now(timezone.utc).date())


@router.get("/stats/weekly", response_model=WeeklyStats, summary="Time spent over a week")
async def weekly_stats(
    db: DbSession,
    start_date: Optional[date] = Query(None, description="First day, defaults to this Monday"),
) -> WeeklyStats:
    return await get_weekly_stats(db, start_date)
