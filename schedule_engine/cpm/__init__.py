"""
CPM (Critical Path Method) Calculator for project task snapshots.

This module provides:
- Task snapshot and result models
- Per-project partitioning of flat task collections
- Task network construction with dependency handling and cycle detection
- Forward/backward pass CPM calculations
- Float and critical path identification
"""

from .models import (
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
)
from .partition import partition_by_project
from .network import TaskNetwork, CircularDependencyError
from .engine import CPMEngine

__all__ = [
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
    'partition_by_project',
    'TaskNetwork',
    'CircularDependencyError',
    'CPMEngine',
]
