from __future__ import annotations

import re
from datetime import datetime
from typing import Optional

# Wire format for every date/time field: yyyy-MM-dd'T'HH:mm:ss, no offset
DATETIME_FORMAT = "%Y-%m-%dT%H:%M:%S"
_DATETIME_SHAPE = re.compile(r"\d{4}-\d{2}-\d{2}T\d{2}:\d{2}:\d{2}")


# PUBLIC_INTERFACE
def parse_datetime(value: str) -> datetime:
    """
    Parse a timestamp in the fixed wire format.

    Args:
        value: Text such as '2025-08-30T17:00:00'.

    Returns:
        The naive datetime.

    Raises:
        ValueError: if value does not match the format exactly, including
            zero padding of every field.
    """
    if not _DATETIME_SHAPE.fullmatch(value):
        raise ValueError(f"{value!r} does not match {DATETIME_FORMAT!r}")
    return datetime.strptime(value, DATETIME_FORMAT)


# PUBLIC_INTERFACE
def parse_datetime_or_none(value: Optional[str]) -> Optional[datetime]:
    """
    Lenient variant of parse_datetime used for query filters: empty or
    malformed text yields None instead of an error.
    """
    if not value:
        return None
    try:
        return parse_datetime(value)
    except ValueError:
        return None


# PUBLIC_INTERFACE
def format_datetime(value: datetime) -> str:
    """Render a datetime in the fixed wire format, dropping sub-second precision."""
    return value.strftime(DATETIME_FORMAT)
