"""
Schema registry mapping file names to their Pydantic schemas.

This registry enables automatic schema lookup based on file name and
provides a central reference for all output data schemas.
"""

from typing import Type, Dict, Optional
from pathlib import Path
from pydantic import BaseModel

from .schedule import (
    TaskScheduleRow,
    ProjectSummaryRow,
    ResourceConflictRow,
    DateUpdateRow,
    CompressionRiskRow,
    ScheduleVarianceRow,
)


# Keys are file names (without path), values are Pydantic model classes
SCHEMA_REGISTRY: Dict[str, Type[BaseModel]] = {
    'task_schedule.csv': TaskScheduleRow,
    'project_summary.csv': ProjectSummaryRow,
    'resource_conflicts.csv': ResourceConflictRow,
    'date_updates.csv': DateUpdateRow,
    'compression_risks.csv': CompressionRiskRow,
    'schedule_variance.csv': ScheduleVarianceRow,
}


def get_schema_for_file(file_path) -> Optional[Type[BaseModel]]:
    """
    Look up the schema for an output file.

    Args:
        file_path: File name or full path

    Returns:
        Pydantic model class, or None if the file is not registered
    """
    return SCHEMA_REGISTRY.get(Path(file_path).name)


def list_registered_files() -> list[str]:
    """List all registered output file names."""
    return sorted(SCHEMA_REGISTRY.keys())


def get_columns(schema: Type[BaseModel]) -> list[str]:
    """Column names of a schema, in declaration order."""
    return [info.alias or name for name, info in schema.model_fields.items()]
