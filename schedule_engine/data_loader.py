"""
Data Loader for task snapshots.

Loads task records from CSV exports or in-memory records and constructs
Task objects for the scheduling engine.
"""

import logging
from pathlib import Path
from typing import Any, Iterable, Mapping

import pandas as pd

from .cpm.models import Task

logger = logging.getLogger(__name__)

TASK_COLUMNS = [
    'id',
    'project_id',
    'name',
    'start_date',
    'end_date',
    'duration_days',
    'predecessor_ids',
    'lag_days',
    'assigned_resources',
    'status',
    'baseline_start',
    'baseline_end',
]


def tasks_from_records(records: Iterable[Mapping[str, Any]]) -> list[Task]:
    """
    Build Task objects from loosely-typed records.

    Records without an id are skipped with a warning.
    """
    tasks = []
    skipped = 0
    for record in records:
        try:
            tasks.append(Task.from_record(record))
        except ValueError as e:
            skipped += 1
            logger.warning(str(e))

    if skipped:
        logger.warning(f"Skipped {skipped} records without an id")
    return tasks


def tasks_from_dataframe(df: pd.DataFrame) -> list[Task]:
    """
    Build Task objects from a DataFrame.

    Unknown columns are ignored; missing optional columns use defaults.
    """
    if 'id' not in df.columns:
        raise ValueError(f"Task data has no 'id' column. Columns: {list(df.columns)}")

    columns = [c for c in TASK_COLUMNS if c in df.columns]
    return tasks_from_records(df[columns].to_dict(orient='records'))


def load_tasks(csv_path: Path) -> list[Task]:
    """
    Load tasks from a CSV export.

    List-valued columns (predecessor_ids, assigned_resources) may hold a
    JSON list or a ';'/','-separated string.

    Args:
        csv_path: Path to the tasks CSV

    Returns:
        List of Task objects in file order
    """
    csv_path = Path(csv_path)
    if not csv_path.exists():
        raise FileNotFoundError(f"Task file not found: {csv_path}")

    id_columns = ['id', 'project_id', 'predecessor_ids', 'assigned_resources']
    df = pd.read_csv(csv_path, dtype={col: str for col in id_columns})
    tasks = tasks_from_dataframe(df)
    logger.info(f"Loaded {len(tasks)} tasks from {csv_path}")
    return tasks


def tasks_to_dataframe(tasks: Iterable[Task]) -> pd.DataFrame:
    """Convert tasks back to a flat DataFrame (list columns ';'-joined)."""
    rows = []
    for task in tasks:
        rows.append({
            'id': task.id,
            'project_id': task.project_id,
            'name': task.name,
            'start_date': task.start_date.isoformat() if task.start_date else None,
            'end_date': task.end_date.isoformat() if task.end_date else None,
            'duration_days': task.duration_days,
            'predecessor_ids': ';'.join(task.predecessor_ids),
            'lag_days': task.lag_days,
            'assigned_resources': ';'.join(task.assigned_resources),
            'status': task.status,
            'baseline_start': task.baseline_start.isoformat() if task.baseline_start else None,
            'baseline_end': task.baseline_end.isoformat() if task.baseline_end else None,
        })
    return pd.DataFrame(rows, columns=TASK_COLUMNS)
