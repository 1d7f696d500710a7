"""
Resource Conflict Detection.

Finds pairs of active tasks that double-book a resource. Unlike the CPM
calculation this check is resource-centric and spans projects.
"""

import logging
from typing import Iterable

from ..cpm.models import ResourceConflict, Task

logger = logging.getLogger(__name__)


def group_tasks_by_resource(tasks: Iterable[Task]) -> dict[str, list[Task]]:
    """
    Group schedulable tasks by assigned resource.

    Cancelled tasks and tasks missing a start or end date are skipped.
    Resources appear in first-seen order.
    """
    by_resource: dict[str, list[Task]] = {}
    skipped = 0

    for task in tasks or []:
        if task.is_cancelled() or task.start_date is None or task.end_date is None:
            skipped += 1
            continue
        for resource_id in dict.fromkeys(task.assigned_resources):
            by_resource.setdefault(resource_id, []).append(task)

    if skipped:
        logger.debug(f"Skipped {skipped} cancelled or undated tasks for conflict detection")
    return by_resource


def intervals_overlap(task1: Task, task2: Task) -> bool:
    """Inclusive overlap: a task ending the day another starts overlaps it."""
    return task1.start_date <= task2.end_date and task2.start_date <= task1.end_date


def detect_resource_conflicts(tasks: Iterable[Task]) -> list[ResourceConflict]:
    """
    Detect resource double-booking.

    Every pair of active tasks sharing a resource is compared; a pair that
    shares two resources yields two records.

    Args:
        tasks: Task collection (any number of projects)

    Returns:
        List of ResourceConflict records with the overlap window
    """
    conflicts = []

    for resource_id, resource_tasks in group_tasks_by_resource(tasks).items():
        for i in range(len(resource_tasks)):
            for j in range(i + 1, len(resource_tasks)):
                task1 = resource_tasks[i]
                task2 = resource_tasks[j]

                if not intervals_overlap(task1, task2):
                    continue

                conflicts.append(ResourceConflict(
                    resource_id=resource_id,
                    task1=task1,
                    task2=task2,
                    overlap_start=max(task1.start_date, task2.start_date),
                    overlap_end=min(task1.end_date, task2.end_date),
                ))

    if conflicts:
        logger.info(f"Detected {len(conflicts)} resource conflicts")
    return conflicts


def get_conflicts_by_resource(conflicts: list[ResourceConflict]) -> dict[str, list[ResourceConflict]]:
    """Group conflict records by resource."""
    grouped: dict[str, list[ResourceConflict]] = {}
    for conflict in conflicts:
        grouped.setdefault(conflict.resource_id, []).append(conflict)
    return grouped
