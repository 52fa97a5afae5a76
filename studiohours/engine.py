from __future__ import annotations

import datetime as dt
import logging
from dataclasses import replace
from typing import Callable

from studiohours import date_exceptions, schedule
from studiohours.domain import (
    WEEK,
    AvailabilityState,
    AvailabilityStats,
    BreakInterval,
    DateException,
    ExceptionDraft,
    ExceptionType,
    OpenWindow,
    WeekDay,
    new_id,
)
from studiohours.state_file import KeyValueStore, load_state, save_state

logger = logging.getLogger(__name__)


def default_state() -> AvailabilityState:
    return AvailabilityState(schedule=schedule.default_schedule(), exceptions=())


class AvailabilityEngine:
    """Holds one studio's availability while it is being edited.

    Edits only change the in-memory state; nothing reaches the store until
    save() is called.
    """

    def __init__(
        self,
        store: KeyValueStore,
        key: str,
        *,
        id_factory: Callable[[], str] = new_id,
        state: AvailabilityState | None = None,
    ) -> None:
        self.store = store
        self.key = key
        self.id_factory = id_factory
        self.state = state if state is not None else default_state()

    def load(self) -> AvailabilityState:
        stored = load_state(self.store, self.key)
        if stored is None:
            logger.info("No stored availability for %s, using defaults", self.key)
            self.state = default_state()
        else:
            logger.info("Availability loaded from %s", self.key)
            self.state = stored
        return self.state

    def save(self, state: AvailabilityState | None = None) -> None:
        if state is not None:
            self.state = state
        save_state(self.store, self.key, self.state)
        logger.info("Availability saved to %s", self.key)

    # Weekly template

    def _set_schedule(self, new_schedule: schedule.Schedule) -> AvailabilityState:
        self.state = replace(self.state, schedule=new_schedule)
        return self.state

    def toggle_day(self, day: WeekDay | str) -> AvailabilityState:
        return self._set_schedule(schedule.toggle_enabled(self.state.schedule, day))

    def set_day_window(self, day: WeekDay | str, field: str, value: str) -> AvailabilityState:
        return self._set_schedule(schedule.set_window(self.state.schedule, day, field, value))

    def add_break(self, day: WeekDay | str) -> BreakInterval:
        updated, brk = schedule.add_break(self.state.schedule, day, self.id_factory)
        self._set_schedule(updated)
        return brk

    def remove_break(self, day: WeekDay | str, break_id: str) -> AvailabilityState:
        return self._set_schedule(schedule.remove_break(self.state.schedule, day, break_id))

    def set_break_window(self, day: WeekDay | str, break_id: str, field: str, value: str) -> AvailabilityState:
        return self._set_schedule(schedule.set_break_window(self.state.schedule, day, break_id, field, value))

    def duplicate_schedule(self) -> AvailabilityState:
        return self._set_schedule(schedule.duplicate_to_all(self.state.schedule, self.id_factory))

    # Date exceptions

    def add_exception(self, candidate: ExceptionDraft) -> DateException:
        updated, created = date_exceptions.add(self.state.exceptions, candidate, self.id_factory)
        self.state = replace(self.state, exceptions=updated)
        return created

    def remove_exception(self, exception_id: str) -> AvailabilityState:
        updated = date_exceptions.remove(self.state.exceptions, exception_id)
        if len(updated) != len(self.state.exceptions):
            logger.info("Exception removed: %s", exception_id)
        self.state = replace(self.state, exceptions=updated)
        return self.state

    def exceptions_for(self, date_iso: str) -> list[DateException]:
        return date_exceptions.for_date(self.state.exceptions, date_iso)

    # Derived values

    def stats(self) -> AvailabilityStats:
        return AvailabilityStats(
            weekly_hours=schedule.compute_weekly_open_minutes(self.state.schedule) / 60.0,
            open_days_count=schedule.compute_open_days_count(self.state.schedule),
        )

    def resolve(self, date_iso: str) -> OpenWindow:
        """Opening of a calendar date: a closure wins, then the latest special hours, then the week."""
        weekday = WEEK[dt.date.fromisoformat(date_iso).weekday()]
        found = self.exceptions_for(date_iso)

        blocked = [e for e in found if e.type is ExceptionType.BLOCKED]
        if blocked:
            return OpenWindow(date=date_iso, open=False, source="blocked", label=blocked[0].label)

        special = [e for e in found if e.type is ExceptionType.SPECIAL]
        if special:
            latest = special[-1]
            return OpenWindow(
                date=date_iso,
                open=schedule.open_minutes(latest.start, latest.end, ()) > 0,
                source="special",
                start=latest.start,
                end=latest.end,
                label=latest.label,
            )

        day = next(d for d in self.state.schedule if d.day == weekday)
        if not day.enabled or schedule.open_minutes(day.start, day.end, ()) <= 0:
            return OpenWindow(date=date_iso, open=False, source="schedule")
        return OpenWindow(
            date=date_iso,
            open=True,
            source="schedule",
            start=day.start,
            end=day.end,
            breaks=day.breaks,
        )

    def open_minutes(self, date_iso: str) -> int:
        window = self.resolve(date_iso)
        if not window.open:
            return 0
        return schedule.open_minutes(window.start, window.end, window.breaks)
