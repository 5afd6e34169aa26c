"""
Input normalization shared by the request schemas and the stay store
"""
from datetime import datetime, timezone
from typing import Optional


def as_utc(value: Optional[datetime]) -> Optional[datetime]:
    """
    Normalize a timestamp to timezone-aware UTC

    Args:
        value: Timestamp, possibly naive

    Returns:
        The same instant in UTC. Naive values are taken to already be UTC.
    """
    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)
