"""
Schedule & Dependency Validation.

Checks a task snapshot for problems the CPM calculation tolerates silently:
dependency cycles, inverted date ranges, dangling or cross-project
predecessors, and predecessors that finish after their successor starts.
"""

import logging
from dataclasses import dataclass, field
from typing import Iterable

from ..cpm.models import Task
from ..cpm.network import TaskNetwork

logger = logging.getLogger(__name__)

CIRCULAR_DEPENDENCY = 'circular_dependency'
MISSING_DATES = 'missing_dates'
INVALID_DATE_RANGE = 'invalid_date_range'
INVALID_BASELINE_RANGE = 'invalid_baseline_range'
MISSING_PREDECESSOR = 'missing_predecessor'
CROSS_PROJECT_PREDECESSOR = 'cross_project_predecessor'
PREDECESSOR_OVERLAP = 'predecessor_overlap'


@dataclass
class ValidationIssue:
    """A single problem found in a task snapshot."""

    kind: str
    message: str
    task_ids: list[str] = field(default_factory=list)

    def __str__(self) -> str:
        return f"[{self.kind}] {self.message}"


def detect_circular_dependencies(tasks: Iterable[Task]) -> list[ValidationIssue]:
    """Report every dependency cycle, naming the tasks along it."""
    tasks = list(tasks)
    names = {t.id: t.name or t.id for t in tasks}

    issues = []
    for cycle in TaskNetwork.from_tasks(tasks).find_cycles():
        path = ' -> '.join(names[tid] for tid in cycle + cycle[:1])
        issues.append(ValidationIssue(
            kind=CIRCULAR_DEPENDENCY,
            message=f"Circular dependency detected: {path}",
            task_ids=cycle,
        ))
    return issues


def validate_task_dates(task: Task) -> list[ValidationIssue]:
    """Validate a task's date ordering, including its baseline."""
    if task.start_date is None or task.end_date is None:
        return [ValidationIssue(
            kind=MISSING_DATES,
            message=f"Task {task.id} must have start and end dates",
            task_ids=[task.id],
        )]

    issues = []
    if task.start_date > task.end_date:
        issues.append(ValidationIssue(
            kind=INVALID_DATE_RANGE,
            message=(f"Task {task.id}: start date ({task.start_date}) cannot be after "
                     f"end date ({task.end_date})"),
            task_ids=[task.id],
        ))

    if task.has_baseline() and task.baseline_start > task.baseline_end:
        issues.append(ValidationIssue(
            kind=INVALID_BASELINE_RANGE,
            message=f"Task {task.id}: baseline start cannot be after baseline end",
            task_ids=[task.id],
        ))

    return issues


def validate_dependencies(task: Task, all_tasks: Iterable[Task]) -> list[ValidationIssue]:
    """Validate a task's predecessor references against the full collection."""
    if not task.predecessor_ids:
        return []

    by_id = {t.id: t for t in all_tasks}
    issues = []

    for pred_id in task.predecessor_ids:
        pred = by_id.get(pred_id)
        if pred is None:
            issues.append(ValidationIssue(
                kind=MISSING_PREDECESSOR,
                message=f"Task {task.id}: predecessor task {pred_id} not found",
                task_ids=[task.id],
            ))
            continue

        if pred.project_id != task.project_id:
            issues.append(ValidationIssue(
                kind=CROSS_PROJECT_PREDECESSOR,
                message=f"Task {task.id}: predecessor {pred.name or pred.id} is from a different project",
                task_ids=[task.id, pred.id],
            ))

        if pred.end_date and task.start_date and pred.end_date > task.start_date:
            issues.append(ValidationIssue(
                kind=PREDECESSOR_OVERLAP,
                message=(f"Task {task.id}: predecessor \"{pred.name or pred.id}\" finishes "
                         f"({pred.end_date}) after this task starts ({task.start_date})"),
                task_ids=[task.id, pred.id],
            ))

    return issues


def validate_schedule(tasks: Iterable[Task]) -> list[ValidationIssue]:
    """
    Run all validations over a task snapshot.

    Returns:
        List of issues found (empty if valid)
    """
    tasks = list(tasks)
    issues = detect_circular_dependencies(tasks)

    for task in tasks:
        issues.extend(validate_task_dates(task))
        issues.extend(validate_dependencies(task, tasks))

    if issues:
        logger.info(f"Schedule validation found {len(issues)} issues in {len(tasks)} tasks")
    return issues
