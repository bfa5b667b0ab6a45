"""
Datetime utilities for handling timezone-aware datetimes
"""

from datetime import datetime, timezone
from typing import Dict, Any, Optional

DATETIME_FIELDS = ['date', 'billing_date', 'last_salary_date', 'expires']

def to_naive_utc(value: Optional[datetime]) -> Optional[datetime]:
    """Normalize an aware datetime to naive UTC; naive values are assumed to be UTC already"""
    if value is not None and value.tzinfo is not None:
        return value.astimezone(timezone.utc).replace(tzinfo=None)
    return value

def convert_timezone_aware_datetimes(data: Dict[str, Any], datetime_fields: list = None) -> Dict[str, Any]:
    """
    Convert timezone-aware datetimes to naive UTC so they compare cleanly
    with stored values

    Args:
        data: Dictionary containing data with potential datetime fields
        datetime_fields: List of field names that contain datetimes. If None, checks common fields.

    Returns:
        Dictionary with converted datetime fields
    """
    if datetime_fields is None:
        datetime_fields = DATETIME_FIELDS

    for field in datetime_fields:
        if isinstance(data.get(field), datetime):
            data[field] = to_naive_utc(data[field])

    return data
