from __future__ import annotations

import json
import logging
import os
import tempfile
from typing import Any, Protocol

from studiohours.domain import (
    WEEK,
    AvailabilityState,
    BreakInterval,
    DateException,
    ExceptionType,
    PersistenceParseError,
    ScheduleDay,
    WeekDay,
)

logger = logging.getLogger(__name__)


class KeyValueStore(Protocol):
    def get(self, key: str) -> str | None: ...

    def set(self, key: str, value: str) -> None: ...


class MemoryKeyValueStore:
    def __init__(self, initial: dict[str, str] | None = None) -> None:
        self.data: dict[str, str] = dict(initial or {})

    def get(self, key: str) -> str | None:
        return self.data.get(key)

    def set(self, key: str, value: str) -> None:
        self.data[key] = value


class FileKeyValueStore:
    """One JSON file per key inside a directory."""

    def __init__(self, directory: str) -> None:
        self.directory = directory

    def path_for(self, key: str) -> str:
        return os.path.join(self.directory, f"{key}.json")

    def get(self, key: str) -> str | None:
        path = self.path_for(key)
        if not os.path.exists(path):
            return None
        with open(path, "r", encoding="utf-8") as f:
            return f.read()

    def set(self, key: str, value: str) -> None:
        path = self.path_for(key)
        folder = os.path.dirname(os.path.abspath(path))
        if folder and not os.path.exists(folder):
            os.makedirs(folder, exist_ok=True)

        # Atomic write
        with tempfile.NamedTemporaryFile("w", delete=False, encoding="utf-8", dir=folder, suffix=".tmp") as tf:
            tf.write(value)
            tmp_name = tf.name

        os.replace(tmp_name, path)


def state_to_document(state: AvailabilityState) -> dict[str, Any]:
    return {
        "schedule": [
            {
                "day": d.day.value,
                "enabled": d.enabled,
                "start": d.start,
                "end": d.end,
                "breaks": [{"id": b.id, "start": b.start, "end": b.end} for b in d.breaks],
            }
            for d in state.schedule
        ],
        "exceptions": [
            {
                "id": e.id,
                "date": e.date,
                "type": e.type.value,
                "label": e.label,
                "start": e.start,
                "end": e.end,
            }
            for e in state.exceptions
        ],
    }


def _parse_day(item: Any) -> ScheduleDay:
    try:
        day = WeekDay(item["day"])
        enabled = item.get("enabled", False)
        if not isinstance(enabled, bool):
            raise PersistenceParseError(f"'enabled' of {day.value} is not a boolean: {enabled!r}")
        breaks_raw = item.get("breaks", [])
        if not isinstance(breaks_raw, list):
            raise PersistenceParseError(f"'breaks' of {day.value} is not a list")
        breaks = tuple(
            BreakInterval(id=str(b["id"]), start=str(b.get("start", "")), end=str(b.get("end", "")))
            for b in breaks_raw
        )
        return ScheduleDay(
            day=day,
            enabled=enabled,
            start=str(item.get("start") or ""),
            end=str(item.get("end") or ""),
            breaks=breaks,
        )
    except (KeyError, TypeError, AttributeError, ValueError) as e:
        raise PersistenceParseError(f"Invalid schedule entry: {item!r}") from e


def _parse_exceptions(items: list[Any]) -> tuple[DateException, ...]:
    exceptions: list[DateException] = []
    for item in items:
        try:
            exceptions.append(
                DateException(
                    id=str(item["id"]),
                    date=str(item["date"]),
                    type=ExceptionType(item["type"]),
                    label=str(item.get("label", "")),
                    start=str(item.get("start") or ""),
                    end=str(item.get("end") or ""),
                )
            )
        except (KeyError, TypeError, AttributeError, ValueError):
            # One broken entry shouldn't cost the whole calendar.
            logger.warning("Skipping invalid stored exception: %r", item)
            continue
    return tuple(exceptions)


def parse_document(raw: str) -> AvailabilityState:
    """Turn a stored document back into state, upgrading older shapes.

    Oldest documents are a bare list of days; later ones add per-day breaks
    and the exceptions list. Missing pieces default to empty lists.
    """
    try:
        doc = json.loads(raw)
    except json.JSONDecodeError as e:
        raise PersistenceParseError(f"Stored document is not valid JSON: {e}") from e
    except RecursionError as e:
        raise PersistenceParseError("Stored document is nested too deeply") from e

    if isinstance(doc, list):
        logger.info("Upgrading stored document from bare schedule list")
        doc = {"schedule": doc}
    if not isinstance(doc, dict):
        raise PersistenceParseError(f"Stored document must be an object, got {type(doc).__name__}")

    schedule_raw = doc.get("schedule")
    if not isinstance(schedule_raw, list):
        raise PersistenceParseError("Stored document has no schedule list")

    by_day = {d.day: d for d in (_parse_day(item) for item in schedule_raw)}
    if len(schedule_raw) != len(WEEK) or set(by_day) != set(WEEK):
        raise PersistenceParseError(f"Stored schedule must have one entry per weekday, got {len(schedule_raw)}")

    exceptions_raw = doc.get("exceptions", [])
    if not isinstance(exceptions_raw, list):
        raise PersistenceParseError("'exceptions' is not a list")

    return AvailabilityState(
        schedule=tuple(by_day[d] for d in WEEK),
        exceptions=_parse_exceptions(exceptions_raw),
    )


def load_state(store: KeyValueStore, key: str) -> AvailabilityState | None:
    try:
        raw = store.get(key)
    except UnicodeDecodeError as e:
        logger.warning("Ignoring undecodable availability document at %s (%s)", key, e)
        return None
    if raw is None:
        return None

    try:
        return parse_document(raw)
    except PersistenceParseError as e:
        # Corrupted state shouldn't lock the studio out; start from defaults.
        logger.warning("Ignoring unreadable availability document at %s (%s)", key, e)
        return None


def save_state(store: KeyValueStore, key: str, state: AvailabilityState) -> None:
    store.set(key, json.dumps(state_to_document(state), ensure_ascii=False, indent=2))
