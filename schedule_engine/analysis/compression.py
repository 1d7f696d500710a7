"""
Schedule Compression Risk.

Flags critical tasks whose duration leaves no buffer against upstream slip.
"""

from typing import Union

from ..config.settings import settings
from ..cpm.models import CompressionRisk, CriticalPathResult, ProjectSchedule


def check_schedule_compression(
    result: Union[CriticalPathResult, ProjectSchedule],
    max_duration_days: int = None,
) -> list[CompressionRisk]:
    """
    Find critical tasks shorter than max_duration_days.

    Args:
        result: Output of the critical path calculation
        max_duration_days: Durations strictly below this are flagged
                           (default: settings.COMPRESSION_MAX_DURATION_DAYS)

    Returns:
        List of CompressionRisk records in task order
    """
    if max_duration_days is None:
        max_duration_days = settings.COMPRESSION_MAX_DURATION_DAYS

    return [
        CompressionRisk(
            task_id=task.task_id,
            task_name=task.task_name,
            duration=task.duration_days,
        )
        for task in result.tasks.values()
        if task.is_critical and task.duration_days < max_duration_days
    ]
