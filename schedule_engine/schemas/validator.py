"""
Schema validation utilities for output CSV files.

Validates that output tables conform to expected schemas so downstream
consumers (dashboards, the apply-updates workflow) keep working.

Validation Rules:
  - FORBIDDEN: Removing existing columns or changing column names
  - FORBIDDEN: Changing column data types (e.g., string -> int)
  - ALLOWED: Adding new columns
  - ALLOWED: Adding new rows
"""

import logging
import warnings
from pathlib import Path
from typing import Type, List, Optional, Dict, Any, Tuple
import pandas as pd
from pydantic import BaseModel, ValidationError as PydanticValidationError

logger = logging.getLogger(__name__)


class SchemaValidationError(Exception):
    """Raised when schema validation fails."""

    def __init__(
        self,
        message: str,
        missing_columns: Optional[List[str]] = None,
        type_mismatches: Optional[Dict[str, Tuple[str, str]]] = None,
        extra_columns: Optional[List[str]] = None,
    ):
        super().__init__(message)
        self.missing_columns = missing_columns or []
        self.type_mismatches = type_mismatches or {}
        self.extra_columns = extra_columns or []


def pandas_dtype_to_python_type(dtype) -> str:
    """Convert pandas dtype to a simplified type string."""
    dtype_str = str(dtype)

    if dtype_str.startswith('int'):
        return 'int'
    elif dtype_str.startswith('float'):
        return 'float'
    elif dtype_str in ('object', 'string'):
        return 'str'
    elif dtype_str.startswith('datetime'):
        return 'datetime'
    elif dtype_str == 'bool':
        return 'bool'
    else:
        return dtype_str


def pydantic_type_to_string(field_type) -> str:
    """Convert Pydantic field type to a simplified type string."""
    type_str = str(field_type).lower()

    for name in ('int', 'float', 'str', 'bool', 'datetime'):
        if name in type_str:
            return name

    return type_str


def types_compatible(pandas_type: str, pydantic_type: str) -> bool:
    """
    Check if pandas type is compatible with pydantic type.

    Lenient because CSV type inference is imprecise:
    - pandas uses float64 for nullable integers and all-NaN columns
    - object dtype represents columns with all None values (e.g. empty tables)
    """
    if pandas_type == pydantic_type:
        return True

    # float in pandas can represent nullable int or an all-NaN string column
    if pandas_type == 'float' and pydantic_type in ('int', 'str'):
        return True

    # Any numeric to numeric is generally ok
    if pandas_type in ('int', 'float') and pydantic_type in ('int', 'float'):
        return True

    # object dtype can hold an all-None column of any type
    if pandas_type == 'str' and pydantic_type in ('int', 'float', 'bool'):
        return True

    return False


def get_column_name(field_name: str, field_info) -> str:
    """Get the CSV column name for a field, handling aliases."""
    if getattr(field_info, 'alias', None):
        return field_info.alias
    return field_name


def validate_dataframe(
    df: pd.DataFrame,
    schema: Type[BaseModel],
    strict: bool = False,
) -> List[str]:
    """
    Validate a DataFrame against a Pydantic schema.

    Args:
        df: DataFrame to validate
        schema: Pydantic model class defining expected columns
        strict: If True, fail on extra columns not in schema

    Returns:
        List of validation error messages (empty if valid)

    Note:
        This validates SCHEMA (columns and types), not individual row values.
        Use validate_records for row-level checks.
    """
    errors = []

    schema_fields = schema.model_fields
    field_to_column = {
        name: get_column_name(name, info)
        for name, info in schema_fields.items()
    }
    expected_columns = set(field_to_column.values())
    actual_columns = set(df.columns)

    missing = expected_columns - actual_columns
    if missing:
        errors.append(f"Missing required columns: {sorted(missing)}")

    extra = actual_columns - expected_columns
    if extra and strict:
        errors.append(f"Unexpected columns (strict mode): {sorted(extra)}")

    column_to_field = {v: k for k, v in field_to_column.items()}
    type_mismatches = {}

    for col in sorted(expected_columns & actual_columns):
        pandas_type = pandas_dtype_to_python_type(df[col].dtype)
        field_info = schema_fields[column_to_field[col]]
        pydantic_type = pydantic_type_to_string(field_info.annotation)

        if not types_compatible(pandas_type, pydantic_type):
            type_mismatches[col] = (pandas_type, pydantic_type)

    if type_mismatches:
        mismatch_strs = [
            f"{col}: got {got}, expected {expected}"
            for col, (got, expected) in type_mismatches.items()
        ]
        errors.append(f"Type mismatches: {'; '.join(mismatch_strs)}")

    return errors


def validate_records(
    records: List[Dict[str, Any]],
    schema: Type[BaseModel],
    max_errors: int = 10,
) -> List[str]:
    """
    Validate individual records against a Pydantic schema.

    Returns:
        Up to max_errors row-level error messages (empty if valid)
    """
    errors = []
    for idx, record in enumerate(records):
        try:
            schema.model_validate(record)
        except PydanticValidationError as e:
            errors.append(f"Record {idx}: {e.error_count()} errors: {e.errors()[0]['msg']}")
            if len(errors) >= max_errors:
                break
    return errors


def validate_output_file(
    file_path: Path,
    schema: Type[BaseModel],
    strict: bool = False,
    sample_rows: int = 100,
) -> List[str]:
    """
    Validate an output CSV file against a schema.

    Raises:
        FileNotFoundError: If file doesn't exist
    """
    file_path = Path(file_path)
    if not file_path.exists():
        raise FileNotFoundError(f"File not found: {file_path}")

    df = pd.read_csv(file_path, nrows=sample_rows)

    return validate_dataframe(df, schema, strict=strict)


def validated_df_to_csv(
    df: pd.DataFrame,
    file_path: Path,
    strict: bool = False,
    skip_validation: bool = False,
    **to_csv_kwargs,
) -> None:
    """
    Validate a DataFrame against its schema and write to CSV.

    Args:
        df: DataFrame to write
        file_path: Output path (filename determines schema via registry)
        strict: If True, fail on extra columns not in schema
        skip_validation: If True, skip validation (for intermediate files)
        **to_csv_kwargs: Additional arguments passed to df.to_csv()

    Raises:
        SchemaValidationError: If validation fails
    """
    from .registry import get_schema_for_file

    file_path = Path(file_path)
    filename = file_path.name

    if skip_validation:
        df.to_csv(file_path, **to_csv_kwargs)
        return

    schema = get_schema_for_file(filename)
    if schema is None:
        warnings.warn(
            f"No schema registered for '{filename}'. "
            f"Consider adding a schema to schedule_engine/schemas/registry.py for validation.",
            UserWarning
        )
        df.to_csv(file_path, **to_csv_kwargs)
        return

    errors = validate_dataframe(df, schema, strict=strict)

    if errors:
        error_msg = (
            f"Schema validation failed for '{filename}':\n"
            + "\n".join(f"  - {e}" for e in errors)
        )
        raise SchemaValidationError(error_msg)

    df.to_csv(file_path, **to_csv_kwargs)
    logger.info(f"Wrote {len(df)} rows to {file_path}")
