"""
Per-project partitioning of a flat task snapshot.

Every CPM calculation runs on one project's tasks only, so the snapshot is
split by project before any network is built.
"""

from types import MappingProxyType
from typing import Iterable, Mapping

from .models import Task
from ..config.settings import settings


def project_key(task: Task, unassigned_key: str = None) -> str:
    """Partition key for a task; tasks without a project share the sentinel key."""
    if unassigned_key is None:
        unassigned_key = settings.UNASSIGNED_PROJECT_KEY
    return task.project_id or unassigned_key


def partition_by_project(
    tasks: Iterable[Task],
    unassigned_key: str = None,
) -> Mapping[str, tuple[Task, ...]]:
    """
    Group tasks by owning project.

    Args:
        tasks: Flat task collection, possibly spanning several projects
        unassigned_key: Key for tasks with no project_id
                        (default: settings.UNASSIGNED_PROJECT_KEY)

    Returns:
        Read-only mapping of project key -> tasks, keys in first-seen order
        and input order preserved within each group
    """
    groups: dict[str, list[Task]] = {}
    for task in tasks:
        groups.setdefault(project_key(task, unassigned_key), []).append(task)

    return MappingProxyType({key: tuple(group) for key, group in groups.items()})
