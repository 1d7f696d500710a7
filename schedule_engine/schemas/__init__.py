"""
Output data schemas for validation.

Defines Pydantic models for all output CSV files so downstream consumers
can rely on stable columns.

Usage:
    from schedule_engine.schemas import validate_output_file, get_schema_for_file

    schema = get_schema_for_file('task_schedule.csv')
    errors = validate_output_file('out/task_schedule.csv', schema)
"""

from .validator import (
    validate_output_file,
    validate_dataframe,
    validate_records,
    validated_df_to_csv,
    SchemaValidationError,
)
from .registry import SCHEMA_REGISTRY, get_schema_for_file, list_registered_files, get_columns

__all__ = [
    'validate_output_file',
    'validate_dataframe',
    'validate_records',
    'validated_df_to_csv',
    'SchemaValidationError',
    'SCHEMA_REGISTRY',
    'get_schema_for_file',
    'list_registered_files',
    'get_columns',
]
