from __future__ import annotations

import logging
from dataclasses import replace
from typing import Callable, Iterable, Sequence

from studiohours.domain import WEEK, BreakInterval, ScheduleDay, WeekDay, new_id
from studiohours.timeutil import interval_minutes

logger = logging.getLogger(__name__)

Schedule = tuple[ScheduleDay, ...]

DEFAULT_BREAK_START = "12:00"
DEFAULT_BREAK_END = "13:00"

_FIELDS = ("start", "end")


def default_schedule() -> Schedule:
    weekdays = [ScheduleDay(day=d, enabled=True, start="09:00", end="18:00") for d in WEEK[:5]]
    return (
        *weekdays,
        ScheduleDay(day=WeekDay.SATURDAY, enabled=True, start="10:00", end="16:00"),
        ScheduleDay(day=WeekDay.SUNDAY, enabled=False, start="", end=""),
    )


def _check_field(field: str) -> str:
    if field not in _FIELDS:
        raise ValueError(f"Unknown field: {field!r}. Expected 'start' or 'end'.")
    return field


def _update_day(
    schedule: Sequence[ScheduleDay],
    day: WeekDay | str,
    change: Callable[[ScheduleDay], ScheduleDay],
) -> Schedule:
    target = WeekDay(day)
    return tuple(change(d) if d.day == target else d for d in schedule)


def toggle_enabled(schedule: Sequence[ScheduleDay], day: WeekDay | str) -> Schedule:
    return _update_day(schedule, day, lambda d: replace(d, enabled=not d.enabled))


def set_window(schedule: Sequence[ScheduleDay], day: WeekDay | str, field: str, value: str) -> Schedule:
    # No start < end check: whatever the time input gives us is kept.
    field = _check_field(field)
    return _update_day(schedule, day, lambda d: replace(d, **{field: value}))


def add_break(
    schedule: Sequence[ScheduleDay],
    day: WeekDay | str,
    id_factory: Callable[[], str] = new_id,
) -> tuple[Schedule, BreakInterval]:
    """Append a 12:00-13:00 break to a day and return it with the new schedule.

    Overlap with other breaks and containment in the day window are not
    checked.
    """
    brk = BreakInterval(id=id_factory(), start=DEFAULT_BREAK_START, end=DEFAULT_BREAK_END)
    updated = _update_day(schedule, day, lambda d: replace(d, breaks=(*d.breaks, brk)))
    return updated, brk


def remove_break(schedule: Sequence[ScheduleDay], day: WeekDay | str, break_id: str) -> Schedule:
    return _update_day(
        schedule,
        day,
        lambda d: replace(d, breaks=tuple(b for b in d.breaks if b.id != break_id)),
    )


def set_break_window(
    schedule: Sequence[ScheduleDay],
    day: WeekDay | str,
    break_id: str,
    field: str,
    value: str,
) -> Schedule:
    field = _check_field(field)

    def change(d: ScheduleDay) -> ScheduleDay:
        breaks = tuple(replace(b, **{field: value}) if b.id == break_id else b for b in d.breaks)
        return replace(d, breaks=breaks)

    return _update_day(schedule, day, change)


def duplicate_to_all(schedule: Sequence[ScheduleDay], id_factory: Callable[[], str] = new_id) -> Schedule:
    """Copy the hours and breaks of the first enabled day onto every day.

    Disabled days become enabled. Every copied break gets a fresh id so that
    no two days share a break. Without any enabled day nothing changes.
    """
    source = next((d for d in schedule if d.enabled), None)
    if source is None:
        logger.info("No enabled day to duplicate, schedule left unchanged")
        return tuple(schedule)

    def clone(d: ScheduleDay) -> ScheduleDay:
        return replace(
            d,
            enabled=source.enabled,
            start=source.start,
            end=source.end,
            breaks=tuple(BreakInterval(id=id_factory(), start=b.start, end=b.end) for b in source.breaks),
        )

    logger.info("Duplicating hours of %s to all days", source.day.value)
    return tuple(clone(d) for d in schedule)


def open_minutes(start: str, end: str, breaks: Iterable[BreakInterval]) -> int:
    """Minutes in a start/end window once breaks are carved out. Never negative."""
    if not start or not end:
        return 0

    window = interval_minutes(start, end)
    if window <= 0:
        return 0

    break_total = sum(interval_minutes(b.start, b.end) for b in breaks)
    return max(0, window - break_total)


def compute_weekly_open_minutes(schedule: Iterable[ScheduleDay]) -> int:
    return sum(open_minutes(d.start, d.end, d.breaks) for d in schedule if d.enabled)


def compute_open_days_count(schedule: Iterable[ScheduleDay]) -> int:
    # Enabled days count even when their hours are still blank.
    return sum(1 for d in schedule if d.enabled)
