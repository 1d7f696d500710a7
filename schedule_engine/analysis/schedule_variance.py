"""
Baseline Schedule Variance.

Compares each task's live dates against its frozen baseline.
"""

from typing import Iterable

from ..cpm.models import ScheduleVariance, Task
from ..utils.helpers import days_between


def calculate_schedule_variance(tasks: Iterable[Task]) -> list[ScheduleVariance]:
    """
    Calculate start/end variance in days (positive = later than baseline).

    Tasks without a complete baseline or without current dates are skipped.
    """
    variances = []
    for task in tasks:
        if not task.has_baseline() or task.start_date is None or task.end_date is None:
            continue
        variances.append(ScheduleVariance(
            task_id=task.id,
            task_name=task.name,
            start_variance_days=days_between(task.baseline_start, task.start_date),
            end_variance_days=days_between(task.baseline_end, task.end_date),
        ))
    return variances


def get_slipping_tasks(variances: list[ScheduleVariance], min_days: int = 1) -> list[ScheduleVariance]:
    """Get tasks finishing at least min_days late, worst first."""
    slipping = [v for v in variances if v.end_variance_days >= min_days]
    return sorted(slipping, key=lambda v: -v.end_variance_days)
