"""
Time utilities for snapshot timestamps and trigger cadence.

Generation is a pure function of the snapshot, so the only clock read in
the pipeline happens when a snapshot is taken. Everything else here takes
explicit datetimes.
"""

from datetime import datetime, timedelta, timezone
from typing import Optional

THURSDAY = 4


def local_now() -> datetime:
    """Current local time as a timezone-aware datetime."""
    return datetime.now(timezone.utc).astimezone()


def sunday_based_weekday(ts: datetime) -> int:
    """
    Day of week with Sunday=0 ... Saturday=6.

    Args:
        ts: Timestamp, interpreted in its own timezone

    Returns:
        Weekday number
    """
    return (ts.weekday() + 1) % 7


def is_late_week(ts: datetime) -> bool:
    """True from Thursday through Saturday."""
    return sunday_based_weekday(ts) >= THURSDAY


def seconds_until_next_slot(
    interval_seconds: int,
    now: Optional[datetime] = None,
    align_to_clock: bool = True
) -> float:
    """
    Delay until the next trigger slot.

    With alignment, slots are multiples of the interval counted from local
    midnight (a 6 hour interval fires at 00:00, 06:00, 12:00 and 18:00).
    Without alignment the full interval is returned.

    Args:
        interval_seconds: Trigger period
        now: Reference time, defaults to local now
        align_to_clock: Align slots to local midnight

    Returns:
        Seconds to wait, always greater than zero
    """
    if not align_to_clock:
        return float(interval_seconds)

    if now is None:
        now = local_now()

    midnight = now.replace(hour=0, minute=0, second=0, microsecond=0)
    elapsed = (now - midnight).total_seconds()
    slots_passed = int(elapsed // interval_seconds)
    next_slot = midnight + timedelta(seconds=(slots_passed + 1) * interval_seconds)
    return max((next_slot - now).total_seconds(), 0.001)


def elapsed_seconds(start_time: datetime, end_time: Optional[datetime] = None) -> float:
    """
    Calculate elapsed time in seconds between two timestamps.

    Args:
        start_time: Start timestamp
        end_time: End timestamp, defaults to now

    Returns:
        Elapsed time in seconds
    """
    if end_time is None:
        end_time = datetime.now(timezone.utc)

    return (end_time - start_time).total_seconds()
