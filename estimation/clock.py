"""
Purpose: Wall-clock helpers shared by the estimator and the data store boundary.
What it does:
- parse_order_timestamp: ISO strings/datetimes -> aware datetimes.
  Timestamps without a UTC/offset marker are treated as UTC.
- to_local / local_midnight / add_days: "today@00:00" and "today + N@00:00"
  in the configured local timezone (system zone when none is configured)
- parse_cutoff_minutes: "HH:MM[:SS]" -> minutes since midnight
- minutes_since_midnight: local hour/minute of an order timestamp
"""

from __future__ import annotations

from datetime import date, datetime, time, timedelta, timezone, tzinfo
from typing import Optional, Union


def parse_order_timestamp(value: Union[str, datetime]) -> datetime:
    """
    Return an aware datetime. Naive values (no "Z" or offset) are taken as UTC.
    """
    if isinstance(value, datetime):
        timestamp = value
    else:
        text = value.strip()
        if text.endswith("Z") or text.endswith("z"):
            text = text[:-1] + "+00:00"
        timestamp = datetime.fromisoformat(text)

    if timestamp.tzinfo is None:
        timestamp = timestamp.replace(tzinfo=timezone.utc)
    return timestamp


def to_local(timestamp: datetime, local_tz: Optional[tzinfo] = None) -> datetime:
    timestamp = parse_order_timestamp(timestamp)
    if local_tz is None:
        return timestamp.astimezone()
    return timestamp.astimezone(local_tz)


def midnight_of(day: date, local_tz: Optional[tzinfo] = None) -> datetime:
    """
    00:00 of a local calendar day, with the UTC offset in force on that day.
    Without local_tz the system zone rules decide the offset, so days on
    which the clocks change still start at 00:00 local time.
    """
    midnight = datetime.combine(day, time())
    if local_tz is None:
        return midnight.astimezone()
    return midnight.replace(tzinfo=local_tz)


def local_midnight(now: Optional[datetime] = None, local_tz: Optional[tzinfo] = None) -> datetime:
    """
    Midnight of the local calendar day containing `now` (defaults to the current time).
    """
    now = now or datetime.now(timezone.utc)
    return midnight_of(to_local(now, local_tz).date(), local_tz)


def add_days(midnight: datetime, days: int, local_tz: Optional[tzinfo] = None) -> datetime:
    # Lands on 00:00 local time, also across clock changes.
    return midnight_of(midnight.date() + timedelta(days=days), local_tz)


def parse_cutoff_minutes(cutoff_time: str) -> int:
    """
    "14:00" / "14:00:00" -> 840. Seconds are ignored.
    Raises ValueError for anything that is not a valid wall-clock time.
    """
    parts = cutoff_time.strip().split(":")
    if len(parts) not in (2, 3):
        raise ValueError(f"invalid cutoff time {cutoff_time!r}")

    hour, minute = int(parts[0]), int(parts[1])
    second = int(parts[2]) if len(parts) == 3 else 0
    if not (0 <= hour < 24 and 0 <= minute < 60 and 0 <= second < 60):
        raise ValueError(f"invalid cutoff time {cutoff_time!r}")

    return hour * 60 + minute


def minutes_since_midnight(timestamp: datetime, local_tz: Optional[tzinfo] = None) -> int:
    local = to_local(timestamp, local_tz)
    return local.hour * 60 + local.minute
