"""
Learning Tracker
================

Plans, phases and tasks with per-task timers.

Components:
- TimerTracker: start/stop timer sessions per task
- analytics: plan, daily and weekly time statistics
- cascade: referential cleanup when deleting plans, phases and tasks
"""

from portfolio_api.core.learning.analytics import (
    completion_percentage,
    get_daily_stats,
    get_plan_stats,
    get_weekly_stats,
)
from portfolio_api.core.learning.cascade import (
    CascadeResult,
    delete_phase,
    delete_plan,
    delete_task,
)
from portfolio_api.core.learning.timer import TimerTracker

__all__ = [
    "CascadeResult",
    "TimerTracker",
    "completion_percentage",
    "delete_phase",
    "delete_plan",
    "delete_task",
    "get_daily_stats",
    "get_plan_stats",
    "get_weekly_stats",
]
