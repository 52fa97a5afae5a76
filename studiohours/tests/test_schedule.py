from __future__ import annotations

import itertools

import pytest

from studiohours import schedule
from studiohours.domain import WEEK, BreakInterval, ScheduleDay, WeekDay


def _ids(prefix: str = "id"):
    counter = itertools.count(1)
    return lambda: f"{prefix}-{next(counter)}"


def _closed_week() -> tuple[ScheduleDay, ...]:
    return tuple(ScheduleDay(day=d, enabled=False) for d in WEEK)


def _with(week: tuple[ScheduleDay, ...], day: ScheduleDay) -> tuple[ScheduleDay, ...]:
    return tuple(day if d.day == day.day else d for d in week)


def _shape(week: tuple[ScheduleDay, ...]) -> list[tuple]:
    # Everything except break ids
    return [(d.day, d.enabled, d.start, d.end, tuple((b.start, b.end) for b in d.breaks)) for d in week]


def test_open_day_without_breaks_counts_nine_hours() -> None:
    week = _with(_closed_week(), ScheduleDay(day=WeekDay.MONDAY, enabled=True, start="09:00", end="18:00"))
    assert schedule.compute_weekly_open_minutes(week) == 540


def test_lunch_break_is_carved_out() -> None:
    monday = ScheduleDay(
        day=WeekDay.MONDAY,
        enabled=True,
        start="09:00",
        end="18:00",
        breaks=(BreakInterval(id="b1", start="12:00", end="13:00"),),
    )
    assert schedule.compute_weekly_open_minutes(_with(_closed_week(), monday)) == 480


def test_closed_week_has_no_hours_and_no_open_days() -> None:
    week = _closed_week()
    assert schedule.compute_weekly_open_minutes(week) == 0
    assert schedule.compute_open_days_count(week) == 0


def test_disabled_day_contributes_nothing_even_with_hours() -> None:
    sunday = ScheduleDay(
        day=WeekDay.SUNDAY,
        enabled=False,
        start="08:00",
        end="20:00",
        breaks=(BreakInterval(id="b1", start="12:00", end="13:00"),),
    )
    assert schedule.compute_weekly_open_minutes(_with(_closed_week(), sunday)) == 0


def test_degenerate_windows_never_go_negative() -> None:
    week = _closed_week()
    week = _with(week, ScheduleDay(day=WeekDay.MONDAY, enabled=True, start="18:00", end="09:00"))
    week = _with(
        week,
        ScheduleDay(
            day=WeekDay.TUESDAY,
            enabled=True,
            start="09:00",
            end="10:00",
            breaks=(BreakInterval(id="b1", start="08:00", end="12:00"),),
        ),
    )
    week = _with(
        week,
        ScheduleDay(
            day=WeekDay.WEDNESDAY,
            enabled=True,
            start="09:00",
            end="11:00",
            breaks=(BreakInterval(id="b2", start="10:30", end="10:00"),),
        ),
    )
    week = _with(week, ScheduleDay(day=WeekDay.THURSDAY, enabled=True, start="", end="17:00"))

    # Only Wednesday counts; its inverted break is ignored.
    assert schedule.compute_weekly_open_minutes(week) == 120


def test_open_days_count_includes_days_without_hours() -> None:
    week = _with(_closed_week(), ScheduleDay(day=WeekDay.FRIDAY, enabled=True))
    assert schedule.compute_open_days_count(week) == 1


def test_default_schedule() -> None:
    week = schedule.default_schedule()
    assert [d.day for d in week] == list(WEEK)
    assert all(d.enabled and (d.start, d.end) == ("09:00", "18:00") for d in week[:5])
    assert (week[5].enabled, week[5].start, week[5].end) == (True, "10:00", "16:00")
    assert (week[6].enabled, week[6].start, week[6].end) == (False, "", "")
    assert schedule.compute_weekly_open_minutes(week) == 5 * 540 + 360
    assert schedule.compute_open_days_count(week) == 6


def test_toggle_only_touches_addressed_day() -> None:
    week = schedule.default_schedule()
    updated = schedule.toggle_enabled(week, WeekDay.SUNDAY)

    assert updated[6].enabled is True
    assert updated[:6] == week[:6]
    # Input is left alone.
    assert week[6].enabled is False


def test_toggle_accepts_stored_day_name() -> None:
    updated = schedule.toggle_enabled(schedule.default_schedule(), "Lundi")
    assert updated[0].enabled is False


def test_set_window_keeps_any_value() -> None:
    updated = schedule.set_window(schedule.default_schedule(), WeekDay.MONDAY, "end", "08:00")
    assert updated[0].end == "08:00"
    assert schedule.open_minutes(updated[0].start, updated[0].end, updated[0].breaks) == 0


def test_set_window_rejects_unknown_field() -> None:
    with pytest.raises(ValueError, match="Unknown field"):
        schedule.set_window(schedule.default_schedule(), WeekDay.MONDAY, "middle", "12:00")


def test_unknown_day_raises() -> None:
    with pytest.raises(ValueError):
        schedule.toggle_enabled(schedule.default_schedule(), "Funday")


def test_add_break_appends_default_lunch() -> None:
    week = schedule.default_schedule()
    updated, brk = schedule.add_break(week, WeekDay.TUESDAY, _ids("brk"))
    updated, second = schedule.add_break(updated, WeekDay.TUESDAY, _ids("other"))

    assert brk == BreakInterval(id="brk-1", start="12:00", end="13:00")
    assert updated[1].breaks == (brk, second)
    assert week[1].breaks == ()


def test_remove_break_by_id_and_missing_id_is_noop() -> None:
    week, brk = schedule.add_break(schedule.default_schedule(), WeekDay.MONDAY, _ids())

    assert schedule.remove_break(week, WeekDay.MONDAY, "nope") == week
    assert schedule.remove_break(week, WeekDay.MONDAY, brk.id)[0].breaks == ()


def test_set_break_window() -> None:
    week, brk = schedule.add_break(schedule.default_schedule(), WeekDay.MONDAY, _ids())
    week = schedule.set_break_window(week, WeekDay.MONDAY, brk.id, "end", "13:30")

    assert week[0].breaks[0] == BreakInterval(id=brk.id, start="12:00", end="13:30")
    assert schedule.compute_weekly_open_minutes(week[:1]) == 540 - 90


def test_duplicate_copies_first_enabled_day_everywhere() -> None:
    monday = ScheduleDay(
        day=WeekDay.MONDAY,
        enabled=True,
        start="09:00",
        end="18:00",
        breaks=(BreakInterval(id="b1", start="12:00", end="13:00"),),
    )
    week = _with(_closed_week(), monday)

    duplicated = schedule.duplicate_to_all(week, _ids("copy"))

    assert [d.day for d in duplicated] == list(WEEK)
    for d in duplicated:
        assert (d.enabled, d.start, d.end) == (True, "09:00", "18:00")
        assert [(b.start, b.end) for b in d.breaks] == [("12:00", "13:00")]
    ids = [b.id for d in duplicated for b in d.breaks]
    assert len(set(ids)) == 7
    assert "b1" not in ids
    assert schedule.compute_open_days_count(duplicated) == 7


def test_duplicate_uses_first_enabled_day_not_monday() -> None:
    week = _with(_closed_week(), ScheduleDay(day=WeekDay.THURSDAY, enabled=True, start="14:00", end="20:00"))
    week = _with(week, ScheduleDay(day=WeekDay.SATURDAY, enabled=True, start="10:00", end="12:00"))

    duplicated = schedule.duplicate_to_all(week)
    assert {(d.start, d.end) for d in duplicated} == {("14:00", "20:00")}


def test_duplicate_is_idempotent() -> None:
    week, _ = schedule.add_break(schedule.default_schedule(), WeekDay.MONDAY)
    once = schedule.duplicate_to_all(week)
    twice = schedule.duplicate_to_all(once)
    assert _shape(once) == _shape(twice)


def test_duplicate_without_enabled_day_changes_nothing() -> None:
    week = _closed_week()
    assert schedule.duplicate_to_all(week) == week
