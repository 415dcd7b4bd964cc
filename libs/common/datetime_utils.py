"""Datetime utilities for timezone-aware UTC timestamps.

Usage:
    from libs.common.datetime_utils import utc_now

    record["updated_at"] = utc_now().isoformat()
"""

from datetime import datetime, timedelta, timezone
from typing import Union


def utc_now() -> datetime:
    """Return timezone-aware UTC datetime.

    This replaces the deprecated datetime.utcnow() which returns naive datetimes.
    Always use this for record timestamps.
    """
    return datetime.now(timezone.utc)


def parse_timestamp(value: Union[str, datetime]) -> datetime:
    """Parse an ISO-8601 timestamp from a record into an aware UTC datetime.

    Naive values are assumed to be UTC. A trailing ``Z`` is accepted.
    """
    if isinstance(value, datetime):
        parsed = value
    else:
        text = value.strip()
        if text.endswith("Z"):
            text = text[:-1] + "+00:00"
        parsed = datetime.fromisoformat(text)
    if parsed.tzinfo is None:
        return parsed.replace(tzinfo=timezone.utc)
    return parsed.astimezone(timezone.utc)


def period_start(moment: datetime, period: str) -> datetime:
    """Return the start of the calendar period containing ``moment``.

    Weeks start on Sunday.
    """
    midnight = moment.replace(hour=0, minute=0, second=0, microsecond=0)
    if period == "day":
        return midnight
    if period == "week":
        # weekday(): Monday=0 ... Sunday=6
        return midnight - timedelta(days=(midnight.weekday() + 1) % 7)
    if period == "month":
        return midnight.replace(day=1)
    if period == "year":
        return midnight.replace(month=1, day=1)
    raise ValueError(f"Unknown period: {period}")


def previous_period_start(boundary: datetime, period: str) -> datetime:
    """Return the start of the period immediately before ``boundary``.

    ``boundary`` must itself be a period start as returned by period_start().
    """
    if period == "day":
        return boundary - timedelta(days=1)
    if period == "week":
        return boundary - timedelta(days=7)
    if period == "month":
        if boundary.month == 1:
            return boundary.replace(year=boundary.year - 1, month=12)
        return boundary.replace(month=boundary.month - 1)
    if period == "year":
        return boundary.replace(year=boundary.year - 1)
    raise ValueError(f"Unknown period: {period}")
