"""
Analysis modules built on the CPM engine and task snapshots.
"""

from .critical_path import calculate_critical_path, calculate_project_schedule
from .resource_conflicts import detect_resource_conflicts
from .dependency_propagation import propagate_date_change, apply_date_updates
from .compression import check_schedule_compression
from .schedule_variance import calculate_schedule_variance
from .validation import (
    ValidationIssue,
    detect_circular_dependencies,
    validate_task_dates,
    validate_dependencies,
    validate_schedule,
)

__all__ = [
    'calculate_critical_path',
    'calculate_project_schedule',
    'detect_resource_conflicts',
    'propagate_date_change',
    'apply_date_updates',
    'check_schedule_compression',
    'calculate_schedule_variance',
    'ValidationIssue',
    'detect_circular_dependencies',
    'validate_task_dates',
    'validate_dependencies',
    'validate_schedule',
]
