"""
Scheduling engine output table schemas.

Output Location: {OUTPUT_DATA_DIR}/
Dates are written as ISO calendar days (YYYY-MM-DD).
"""

from typing import Optional
from pydantic import BaseModel, Field


class TaskScheduleRow(BaseModel):
    """
    Per-task CPM annotation.

    File: task_schedule.csv
    """
    task_id: str = Field(description="Task identifier")
    project_id: str = Field(description="Owning project (or the unassigned sentinel)")
    task_name: Optional[str] = Field(default=None, description="Task display name")
    duration_days: int = Field(description="Duration used for computed finishes")
    early_start: str = Field(description="Earliest start from the forward pass")
    early_finish: str = Field(description="early_start + duration_days")
    late_start: str = Field(description="late_finish - duration_days")
    late_finish: str = Field(description="Latest finish from the backward pass")
    total_float: int = Field(description="late_start - early_start, clamped at 0")
    raw_float: int = Field(description="Unclamped float; negative means over-constrained")
    is_critical: bool = Field(description="True iff total_float == 0")
    is_infeasible: bool = Field(description="True iff raw_float < 0")


class ProjectSummaryRow(BaseModel):
    """
    Per-project CPM summary.

    File: project_summary.csv
    """
    project_id: str = Field(description="Project key")
    status: str = Field(description="ok, empty, cyclic or not_converged")
    project_start: Optional[str] = Field(default=None, description="Earliest start-task start date")
    project_finish: Optional[str] = Field(default=None, description="Latest early finish")
    longest_path_days: int = Field(description="Days from project_start to project_finish")
    task_count: int = Field(description="Annotated tasks")
    critical_count: int = Field(description="Tasks with zero float")
    unscheduled_count: int = Field(description="Tasks that received no dates")
    cycle_count: int = Field(description="Dependency cycles detected")
    infeasible_count: int = Field(description="Tasks whose raw float is negative")
    forward_iterations: int = Field(description="Forward pass sweeps")
    backward_iterations: int = Field(description="Backward pass sweeps")
    converged: bool = Field(description="Both passes reached a fixed point")


class ResourceConflictRow(BaseModel):
    """
    Resource double-booking.

    File: resource_conflicts.csv
    """
    resource_id: str = Field(description="Shared resource")
    task1_id: str = Field(description="First task of the pair")
    task2_id: str = Field(description="Second task of the pair")
    overlap_start: str = Field(description="Later of the two start dates")
    overlap_end: str = Field(description="Earlier of the two end dates")
    overlap_days: int = Field(description="Inclusive overlap length")


class DateUpdateRow(BaseModel):
    """
    Suggested date update from dependency propagation.

    File: date_updates.csv
    """
    id: str = Field(description="Task to update")
    start_date: str = Field(description="Suggested start")
    end_date: str = Field(description="Suggested end")


class CompressionRiskRow(BaseModel):
    """
    Critical task with a very short duration.

    File: compression_risks.csv
    """
    task_id: str = Field(description="Task identifier")
    task_name: Optional[str] = Field(default=None, description="Task display name")
    duration: int = Field(description="Duration in days")
    risk: str = Field(description="Risk description")


class ScheduleVarianceRow(BaseModel):
    """
    Baseline vs current variance.

    File: schedule_variance.csv
    """
    task_id: str = Field(description="Task identifier")
    task_name: Optional[str] = Field(default=None, description="Task display name")
    start_variance_days: int = Field(description="Current start - baseline start")
    end_variance_days: int = Field(description="Current end - baseline end")
    total_variance_days: int = Field(description="Equal to end_variance_days")
