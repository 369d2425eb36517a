import datetime
from typing import Optional

# Smallest step a TIMESTAMP column can represent
TIMESTAMP_RESOLUTION = datetime.timedelta(microseconds=1)


def utc_now() -> datetime.datetime:
    """
    Naive UTC now. Columns are TIMESTAMP without time zone and the
    database session is pinned to UTC.
    """
    return datetime.datetime.now(datetime.timezone.utc).replace(tzinfo=None)


def next_timestamp(previous: Optional[datetime.datetime] = None) -> datetime.datetime:
    """
    Now, but never earlier than or equal to `previous`. Keeps updated_at strictly
    increasing even when two writes land inside the same clock tick.
    """
    now = utc_now()
    if previous is None:
        return now

    return max(now, previous + TIMESTAMP_RESOLUTION)
