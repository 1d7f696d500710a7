"""
Export of engine results to tabular form.

Every DataFrame produced here carries exactly the columns of its registered
output schema, even when empty.
"""

from pathlib import Path
from typing import Iterable

import pandas as pd

from .cpm.models import (
    CompressionRisk,
    CriticalPathResult,
    DateUpdate,
    ResourceConflict,
    ScheduleVariance,
)
from .schemas.registry import get_columns
from .schemas.schedule import (
    TaskScheduleRow,
    ProjectSummaryRow,
    ResourceConflictRow,
    DateUpdateRow,
    CompressionRiskRow,
    ScheduleVarianceRow,
)
from .schemas.validator import validated_df_to_csv


def _frame(records: list[dict], schema) -> pd.DataFrame:
    return pd.DataFrame(records, columns=get_columns(schema))


def schedule_to_dataframe(result: CriticalPathResult) -> pd.DataFrame:
    """One row per annotated task."""
    return _frame([ts.to_record() for ts in result.tasks.values()], TaskScheduleRow)


def project_summary_to_dataframe(result: CriticalPathResult) -> pd.DataFrame:
    """One row per project."""
    records = []
    for project_id, schedule in result.by_project.items():
        records.append({
            'project_id': project_id,
            'status': schedule.status.value,
            'project_start': schedule.project_start.isoformat() if schedule.project_start else None,
            'project_finish': schedule.project_finish.isoformat() if schedule.project_finish else None,
            'longest_path_days': schedule.longest_path_days,
            'task_count': len(schedule.tasks),
            'critical_count': len(schedule.critical_task_ids),
            'unscheduled_count': len(schedule.unscheduled_task_ids),
            'cycle_count': len(schedule.cycles),
            'infeasible_count': len(schedule.infeasible_task_ids),
            'forward_iterations': schedule.forward_iterations,
            'backward_iterations': schedule.backward_iterations,
            'converged': schedule.converged,
        })
    return _frame(records, ProjectSummaryRow)


def conflicts_to_dataframe(conflicts: Iterable[ResourceConflict]) -> pd.DataFrame:
    return _frame([c.to_record() for c in conflicts], ResourceConflictRow)


def updates_to_dataframe(updates: Iterable[DateUpdate]) -> pd.DataFrame:
    return _frame([u.to_record() for u in updates], DateUpdateRow)


def compression_to_dataframe(risks: Iterable[CompressionRisk]) -> pd.DataFrame:
    return _frame([r.to_record() for r in risks], CompressionRiskRow)


def variance_to_dataframe(variances: Iterable[ScheduleVariance]) -> pd.DataFrame:
    return _frame([v.to_record() for v in variances], ScheduleVarianceRow)


def write_outputs(frames: dict[str, pd.DataFrame], output_dir: Path) -> list[Path]:
    """
    Validate and write named output tables.

    Args:
        frames: Registered file name -> DataFrame
        output_dir: Target directory (created if needed)

    Returns:
        Paths written
    """
    output_dir = Path(output_dir)
    output_dir.mkdir(parents=True, exist_ok=True)

    written = []
    for filename, df in frames.items():
        path = output_dir / filename
        validated_df_to_csv(df, path, strict=True, index=False)
        written.append(path)
    return written
