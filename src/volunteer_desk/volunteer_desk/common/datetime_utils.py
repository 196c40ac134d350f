from __future__ import annotations

from datetime import date, datetime, time


def parse_iso_date(value: str) -> date:
    """Parse YYYY-MM-DD string into date."""
    return datetime.strptime(value, "%Y-%m-%d").date()


def parse_time_of_day(value: str | time) -> time:
    """Parse ``HH:MM`` or ``HH:MM:SS`` (the store's TIME format) into a time."""
    if isinstance(value, time):
        return value
    parts = str(value).strip().split(":")
    if len(parts) < 2:
        raise ValueError(f"Invalid time string: {value!r}")
    hours = int(parts[0])
    minutes = int(parts[1])
    seconds = int(parts[2]) if len(parts) >= 3 and parts[2] else 0
    return time(hour=hours, minute=minutes, second=seconds)


def minutes_of_day(value: str | time | datetime) -> int:
    """Minutes since midnight; seconds are ignored."""
    if isinstance(value, datetime):
        value = value.time()
    t = parse_time_of_day(value)
    return t.hour * 60 + t.minute


def format_time_of_day(value: time) -> str:
    return value.strftime("%H:%M:%S")


def now_local() -> datetime:
    """Current local time.

    Note: Wrapped so tests can patch/mocked easier.
    """
    return datetime.now()
