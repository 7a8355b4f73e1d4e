from datetime import datetime
from typing import Optional

from django.utils import timezone

TIMESTAMP_FORMAT = '%Y-%m-%dT%H:%M:%S'


def format_timestamp(value: Optional[datetime]) -> Optional[str]:
    """Render a datetime to second precision with no timezone suffix."""
    if value is None:
        return None
    return value.strftime(TIMESTAMP_FORMAT)


def to_local_naive(value: Optional[datetime]) -> Optional[datetime]:
    # Stored timestamps carry no offset; aware input is shifted to local time
    if value is not None and timezone.is_aware(value):
        return timezone.make_naive(value)
    return value
