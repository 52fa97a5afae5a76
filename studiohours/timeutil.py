from __future__ import annotations


def to_minutes(value: str) -> int:
    """Convert a "HH:MM" wall-clock string to minutes since midnight.

    Empty or unparseable strings count as 0; callers are expected to pass
    what the time inputs produce.
    """
    if not value:
        return 0

    hours, _, minutes = value.strip().partition(":")
    try:
        return int(hours) * 60 + int(minutes or 0)
    except ValueError:
        return 0


def from_minutes(total: int) -> str:
    hours, minutes = divmod(max(0, int(total)), 60)
    return f"{hours:02d}:{minutes:02d}"


def interval_minutes(start: str, end: str) -> int:
    # Inverted or empty windows are tolerated and simply count as nothing.
    return max(0, to_minutes(end) - to_minutes(start))


def format_hours_label(hours: float) -> str:
    # 8.0 -> "8h", 7.5 -> "7h30"
    hrs, mins = divmod(round(hours * 60), 60)
    if mins == 0:
        return f"{hrs}h"
    return f"{hrs}h{mins:02d}"
