"""
Critical-Path Scheduling Engine.

Computes early/late dates, float and criticality for project task
snapshots, detects resource double-booking, propagates date changes and
flags compression risks.
"""

from .cpm import (
    Task,
    Dependency,
    TaskSchedule,
    ProjectSchedule,
    CriticalPathResult,
    ScheduleStatus,
    ResourceConflict,
    DateUpdate,
    CompressionRisk,
    ScheduleVariance,
    partition_by_project,
    TaskNetwork,
    CircularDependencyError,
    CPMEngine,
)
from .analysis import (
    calculate_critical_path,
    calculate_project_schedule,
    detect_resource_conflicts,
    propagate_date_change,
    apply_date_updates,
    check_schedule_compression,
    calculate_schedule_variance,
    ValidationIssue,
    detect_circular_dependencies,
    validate_schedule,
)
from .data_loader import load_tasks, tasks_from_records, tasks_from_dataframe

__version__ = '0.1.0'

__all__ = [
    # Models
    'Task',
    'Dependency',
    'TaskSchedule',
    'ProjectSchedule',
    'CriticalPathResult',
    'ScheduleStatus',
    'ResourceConflict',
    'DateUpdate',
    'CompressionRisk',
    'ScheduleVariance',
    # Core
    'partition_by_project',
    'TaskNetwork',
    'CircularDependencyError',
    'CPMEngine',
    # Analysis
    'calculate_critical_path',
    'calculate_project_schedule',
    'detect_resource_conflicts',
    'propagate_date_change',
    'apply_date_updates',
    'check_schedule_compression',
    'calculate_schedule_variance',
    'ValidationIssue',
    'detect_circular_dependencies',
    'validate_schedule',
    # Loading
    'load_tasks',
    'tasks_from_records',
    'tasks_from_dataframe',
]
