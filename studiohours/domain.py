from __future__ import annotations

import uuid
from dataclasses import dataclass
from enum import Enum

from studiohours.timeutil import format_hours_label


class WeekDay(str, Enum):
    """Recurring schedule slot. Values are the names stored in documents."""

    MONDAY = "Lundi"
    TUESDAY = "Mardi"
    WEDNESDAY = "Mercredi"
    THURSDAY = "Jeudi"
    FRIDAY = "Vendredi"
    SATURDAY = "Samedi"
    SUNDAY = "Dimanche"


# Same order as datetime.date.weekday()
WEEK: tuple[WeekDay, ...] = tuple(WeekDay)


class ExceptionType(str, Enum):
    BLOCKED = "blocked"
    SPECIAL = "special"


@dataclass(frozen=True)
class BreakInterval:
    id: str
    start: str  # HH:MM
    end: str  # HH:MM


@dataclass(frozen=True)
class ScheduleDay:
    day: WeekDay
    enabled: bool
    start: str = ""
    end: str = ""
    breaks: tuple[BreakInterval, ...] = ()


@dataclass(frozen=True)
class ExceptionDraft:
    """What the user submitted before it becomes a DateException."""

    date: str  # YYYY-MM-DD
    type: ExceptionType
    label: str
    start: str = ""
    end: str = ""


@dataclass(frozen=True)
class DateException:
    id: str
    date: str  # YYYY-MM-DD
    type: ExceptionType
    label: str
    start: str = ""
    end: str = ""


@dataclass(frozen=True)
class AvailabilityState:
    schedule: tuple[ScheduleDay, ...]
    exceptions: tuple[DateException, ...] = ()


@dataclass(frozen=True)
class AvailabilityStats:
    weekly_hours: float
    open_days_count: int

    @property
    def weekly_hours_label(self) -> str:
        return format_hours_label(self.weekly_hours)


@dataclass(frozen=True)
class OpenWindow:
    """Effective opening of one calendar date once exceptions are applied."""

    date: str
    open: bool
    source: str  # "schedule" | "blocked" | "special"
    start: str = ""
    end: str = ""
    breaks: tuple[BreakInterval, ...] = ()
    label: str = ""


class ScheduleError(ValueError):
    """Base for errors the user can fix by editing their input."""


class ExceptionValidationError(ScheduleError):
    code = "invalid_exception"


class MissingDate(ExceptionValidationError):
    code = "missing_date"

    def __init__(self) -> None:
        super().__init__("Exception date is required")


class MissingLabel(ExceptionValidationError):
    code = "missing_label"

    def __init__(self) -> None:
        super().__init__("Exception label is required")


class MissingSpecialHours(ExceptionValidationError):
    code = "missing_special_hours"

    def __init__(self) -> None:
        super().__init__("Special hours need both a start and an end time")


class PersistenceParseError(RuntimeError):
    """Stored document can't be turned back into an AvailabilityState.

    Never leaves the persistence layer: loading falls back to defaults.
    """


def new_id() -> str:
    return str(uuid.uuid4())
