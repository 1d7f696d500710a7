"""General utility helper functions for loosely-typed task data."""
import json
import logging
import math
from datetime import date, datetime, timedelta
from typing import Any, Optional

logger = logging.getLogger(__name__)


def is_missing(value: Any) -> bool:
    """Check for None, NaN/NaT and blank strings."""
    if value is None:
        return True
    if isinstance(value, float) and math.isnan(value):
        return True
    if isinstance(value, str) and not value.strip():
        return True
    # pandas.NaT compares unequal to itself
    try:
        return bool(value != value)
    except (TypeError, ValueError):
        return False


def coerce_date(value: Any) -> Optional[date]:
    """
    Convert a date-like value to a naive calendar day.

    Accepts date, datetime (incl. pandas.Timestamp) and ISO strings.
    Time-of-day is discarded. Returns None for missing or unparsable values.
    """
    if is_missing(value):
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        text = value.strip()
        try:
            return date.fromisoformat(text[:10])
        except ValueError:
            logger.debug(f"Unparsable date value: {value!r}")
            return None
    return None


def coerce_int(value: Any, default: int = 0) -> int:
    """Convert a numeric-like value to int, falling back to default."""
    if is_missing(value) or isinstance(value, bool):
        return default
    try:
        return int(round(float(value)))
    except (TypeError, ValueError, OverflowError):
        logger.debug(f"Unparsable integer value: {value!r}")
        return default


def coerce_id(value: Any) -> Optional[str]:
    """Convert an identifier to str, None when missing."""
    if is_missing(value):
        return None
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value).strip()


def coerce_id_list(value: Any) -> list[str]:
    """
    Convert a collection of identifiers to a list of str.

    Strings are parsed as a JSON list when they look like one, otherwise
    split on ';' or ','.
    """
    if isinstance(value, (list, tuple, set, frozenset)):
        items = list(value)
    elif is_missing(value):
        return []
    elif isinstance(value, str):
        text = value.strip()
        if text.startswith('['):
            try:
                items = json.loads(text)
            except json.JSONDecodeError:
                items = text.strip('[]').split(',')
        else:
            separator = ';' if ';' in text else ','
            items = text.split(separator)
    else:
        items = [value]

    result = []
    for item in items:
        item_id = coerce_id(item)
        if item_id:
            result.append(item_id)
    return result


def add_days(day: date, days: int) -> date:
    """Shift a calendar day by a (possibly negative) number of days."""
    return day + timedelta(days=days)


def shift_days(day: date, days: int) -> Optional[date]:
    """Like add_days, but None when the result leaves the supported date range."""
    try:
        return add_days(day, days)
    except OverflowError:
        logger.debug(f"Date out of range: {day} {days:+d} days")
        return None


def days_between(start: date, end: date) -> int:
    """Signed number of days from start to end."""
    return (end - start).days
