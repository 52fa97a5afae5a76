from __future__ import annotations

import logging
from typing import Callable, Iterable, Sequence

from studiohours.domain import (
    DateException,
    ExceptionDraft,
    ExceptionType,
    MissingDate,
    MissingLabel,
    MissingSpecialHours,
    new_id,
)

logger = logging.getLogger(__name__)

Exceptions = tuple[DateException, ...]


def validate(candidate: ExceptionDraft) -> None:
    """Raise the first problem found in a draft: date, then label, then hours."""
    if not candidate.date:
        raise MissingDate()
    if not candidate.label.strip():
        raise MissingLabel()
    if ExceptionType(candidate.type) is ExceptionType.SPECIAL and (not candidate.start or not candidate.end):
        raise MissingSpecialHours()


def add(
    exceptions: Sequence[DateException],
    candidate: ExceptionDraft,
    id_factory: Callable[[], str] = new_id,
) -> tuple[Exceptions, DateException]:
    validate(candidate)

    kind = ExceptionType(candidate.type)
    created = DateException(
        id=id_factory(),
        date=candidate.date,
        type=kind,
        label=candidate.label.strip(),
        # Blocked days carry no hours even if the form still had some.
        start=candidate.start if kind is ExceptionType.SPECIAL else "",
        end=candidate.end if kind is ExceptionType.SPECIAL else "",
    )
    logger.info("Exception added: %s %s (%s)", created.date, created.type.value, created.label)
    return (*exceptions, created), created


def remove(exceptions: Sequence[DateException], exception_id: str) -> Exceptions:
    return tuple(e for e in exceptions if e.id != exception_id)


def for_date(exceptions: Iterable[DateException], date_iso: str) -> list[DateException]:
    return [e for e in exceptions if e.date == date_iso]


def sorted_by_date(exceptions: Iterable[DateException]) -> list[DateException]:
    # sorted() is stable, so same-date exceptions keep insertion order.
    return sorted(exceptions, key=lambda e: e.date)
