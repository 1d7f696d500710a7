"""
Data models for CPM calculations.

Defines dataclasses for task snapshots, computed schedule annotations,
and analysis results.
"""

from dataclasses import dataclass, field, replace
from datetime import date
from enum import Enum
from typing import Any, Mapping, Optional

from ..utils.helpers import coerce_date, coerce_id, coerce_id_list, coerce_int, days_between


CANCELLED_STATUS = 'cancelled'
COMPRESSION_RISK_MESSAGE = 'Very short duration on critical path'


@dataclass
class Task:
    """Represents a schedule task snapshot supplied by the caller."""

    id: str
    project_id: Optional[str] = None
    name: str = ''
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    duration_days: int = 0
    predecessor_ids: list[str] = field(default_factory=list)
    lag_days: int = 0                # negative = lead
    assigned_resources: list[str] = field(default_factory=list)
    status: str = 'not_started'

    # Frozen plan dates for variance comparison
    baseline_start: Optional[date] = None
    baseline_end: Optional[date] = None

    @classmethod
    def from_record(cls, record: Mapping[str, Any]) -> 'Task':
        """
        Build a Task from a loosely-typed mapping (API payload, CSV row).

        Missing or unparsable values degrade to their defaults.
        """
        task_id = coerce_id(record.get('id'))
        if task_id is None:
            raise ValueError(f"Task record has no id: {dict(record)}")

        status = record.get('status')
        name = record.get('name')
        return cls(
            id=task_id,
            project_id=coerce_id(record.get('project_id')) or None,
            name='' if coerce_id(name) is None else str(name),
            start_date=coerce_date(record.get('start_date')),
            end_date=coerce_date(record.get('end_date')),
            duration_days=max(0, coerce_int(record.get('duration_days'))),
            predecessor_ids=coerce_id_list(record.get('predecessor_ids')),
            lag_days=coerce_int(record.get('lag_days')),
            assigned_resources=coerce_id_list(record.get('assigned_resources')),
            status=coerce_id(status) or 'not_started',
            baseline_start=coerce_date(record.get('baseline_start')),
            baseline_end=coerce_date(record.get('baseline_end')),
        )

    def copy(self, **changes) -> 'Task':
        """Return a copy with independent list fields."""
        changes.setdefault('predecessor_ids', list(self.predecessor_ids))
        changes.setdefault('assigned_resources', list(self.assigned_resources))
        return replace(self, **changes)

    def is_cancelled(self) -> bool:
        """Check if task is cancelled."""
        return (self.status or '').lower() == CANCELLED_STATUS

    def is_root(self) -> bool:
        """Check if task has no predecessors."""
        return not self.predecessor_ids

    def has_baseline(self) -> bool:
        return self.baseline_start is not None and self.baseline_end is not None


@dataclass
class Dependency:
    """Represents a finish-to-start predecessor-successor relationship."""

    pred_task_id: str
    succ_task_id: str
    lag_days: int = 0     # taken from the successor task


class ScheduleStatus(str, Enum):
    """Outcome of a per-project CPM calculation."""

    OK = 'ok'
    EMPTY = 'empty'
    CYCLIC = 'cyclic'                  # dependency cycle found before the passes
    NOT_CONVERGED = 'not_converged'    # iteration cap hit on an acyclic graph


@dataclass
class TaskSchedule:
    """Computed early/late dates, float and criticality for one task."""

    task_id: str
    project_id: str
    task_name: str
    duration_days: int
    early_start: date
    early_finish: date
    late_start: date
    late_finish: date
    raw_float: int
    total_float: int
    is_critical: bool

    @property
    def is_infeasible(self) -> bool:
        """Late start falls before early start (over-constrained schedule)."""
        return self.raw_float < 0

    def to_record(self) -> dict:
        return {
            'task_id': self.task_id,
            'project_id': self.project_id,
            'task_name': self.task_name,
            'duration_days': self.duration_days,
            'early_start': self.early_start.isoformat(),
            'early_finish': self.early_finish.isoformat(),
            'late_start': self.late_start.isoformat(),
            'late_finish': self.late_finish.isoformat(),
            'total_float': self.total_float,
            'raw_float': self.raw_float,
            'is_critical': self.is_critical,
            'is_infeasible': self.is_infeasible,
        }


@dataclass
class ProjectSchedule:
    """Results from a CPM calculation over one project."""

    project_id: str
    tasks: dict[str, TaskSchedule]
    critical_task_ids: list[str]
    project_start: Optional[date]
    project_finish: Optional[date]
    longest_path_days: int
    status: ScheduleStatus = ScheduleStatus.OK
    forward_iterations: int = 0
    backward_iterations: int = 0
    forward_converged: bool = True
    backward_converged: bool = True
    cycles: list[list[str]] = field(default_factory=list)
    unscheduled_task_ids: list[str] = field(default_factory=list)

    @classmethod
    def empty(cls, project_id: str) -> 'ProjectSchedule':
        return cls(
            project_id=project_id,
            tasks={},
            critical_task_ids=[],
            project_start=None,
            project_finish=None,
            longest_path_days=0,
            status=ScheduleStatus.EMPTY,
        )

    @property
    def converged(self) -> bool:
        """Both passes reached a fixed point before the iteration cap."""
        return self.forward_converged and self.backward_converged

    @property
    def infeasible_task_ids(self) -> list[str]:
        return [tid for tid, ts in self.tasks.items() if ts.is_infeasible]

    def get_critical_tasks(self) -> list[TaskSchedule]:
        """Get annotations on the critical path, in input order."""
        return [self.tasks[tid] for tid in self.critical_task_ids if tid in self.tasks]


@dataclass
class CriticalPathResult:
    """Aggregated CPM results across all projects in a task snapshot."""

    by_project: dict[str, ProjectSchedule]

    @property
    def tasks(self) -> dict[str, TaskSchedule]:
        merged = {}
        for schedule in self.by_project.values():
            merged.update(schedule.tasks)
        return merged

    @property
    def critical_task_ids(self) -> list[str]:
        ids = []
        for schedule in self.by_project.values():
            ids.extend(schedule.critical_task_ids)
        return ids

    @property
    def longest_path_days(self) -> int:
        return max((s.longest_path_days for s in self.by_project.values()), default=0)

    @property
    def converged(self) -> bool:
        return all(s.converged for s in self.by_project.values())

    def get_task(self, task_id: str) -> Optional[TaskSchedule]:
        """Get a task annotation by ID."""
        for schedule in self.by_project.values():
            if task_id in schedule.tasks:
                return schedule.tasks[task_id]
        return None

    def get_critical_tasks(self) -> list[TaskSchedule]:
        tasks = self.tasks
        return [tasks[tid] for tid in self.critical_task_ids]

    def get_tasks_by_float(self, max_float: int = None) -> list[TaskSchedule]:
        """Get task annotations sorted by float (ascending)."""
        tasks = list(self.tasks.values())
        if max_float is not None:
            tasks = [t for t in tasks if t.total_float <= max_float]
        return sorted(tasks, key=lambda t: t.total_float)

    def get_near_critical_tasks(self, threshold_days: int) -> list[TaskSchedule]:
        """Get non-critical tasks whose float is within threshold_days."""
        return [t for t in self.get_tasks_by_float(threshold_days) if not t.is_critical]

    def float_distribution(self) -> dict[str, int]:
        """Count tasks per float bucket."""
        buckets = {
            '0 (critical)': 0,
            '1-5 days': 0,
            '6-10 days': 0,
            '11-20 days': 0,
            '> 20 days': 0,
        }
        for task in self.tasks.values():
            if task.total_float <= 0:
                buckets['0 (critical)'] += 1
            elif task.total_float <= 5:
                buckets['1-5 days'] += 1
            elif task.total_float <= 10:
                buckets['6-10 days'] += 1
            elif task.total_float <= 20:
                buckets['11-20 days'] += 1
            else:
                buckets['> 20 days'] += 1
        return buckets


@dataclass
class ResourceConflict:
    """Two active tasks double-booking the same resource."""

    resource_id: str
    task1: Task
    task2: Task
    overlap_start: date
    overlap_end: date

    @property
    def overlap_days(self) -> int:
        """Inclusive number of overlapping days."""
        return days_between(self.overlap_start, self.overlap_end) + 1

    def to_record(self) -> dict:
        return {
            'resource_id': self.resource_id,
            'task1_id': self.task1.id,
            'task2_id': self.task2.id,
            'overlap_start': self.overlap_start.isoformat(),
            'overlap_end': self.overlap_end.isoformat(),
            'overlap_days': self.overlap_days,
        }


@dataclass
class DateUpdate:
    """A suggested new date range for a task downstream of a change."""

    id: str
    start_date: date
    end_date: date

    def to_record(self) -> dict:
        return {
            'id': self.id,
            'start_date': self.start_date.isoformat(),
            'end_date': self.end_date.isoformat(),
        }


@dataclass
class CompressionRisk:
    """A critical task with almost no duration buffer."""

    task_id: str
    task_name: str
    duration: int
    risk: str = COMPRESSION_RISK_MESSAGE

    def to_record(self) -> dict:
        return {
            'task_id': self.task_id,
            'task_name': self.task_name,
            'duration': self.duration,
            'risk': self.risk,
        }


@dataclass
class ScheduleVariance:
    """Baseline vs current date variance for one task."""

    task_id: str
    task_name: str
    start_variance_days: int
    end_variance_days: int

    @property
    def total_variance_days(self) -> int:
        return self.end_variance_days

    def get_summary(self) -> str:
        """Get human-readable variance summary."""
        if self.end_variance_days > 0:
            return f"{self.task_name or self.task_id}: finishing {self.end_variance_days}d late"
        if self.end_variance_days < 0:
            return f"{self.task_name or self.task_id}: finishing {-self.end_variance_days}d early"
        return f"{self.task_name or self.task_id}: on baseline"

    def to_record(self) -> dict:
        return {
            'task_id': self.task_id,
            'task_name': self.task_name,
            'start_variance_days': self.start_variance_days,
            'end_variance_days': self.end_variance_days,
            'total_variance_days': self.total_variance_days,
        }
