import argparse
import datetime as dt
import logging

from studiohours.config import load_settings
from studiohours.date_exceptions import sorted_by_date
from studiohours.domain import ExceptionDraft, ExceptionType, ScheduleError, WeekDay
from studiohours.engine import AvailabilityEngine
from studiohours.state_file import FileKeyValueStore
from studiohours.timeutil import from_minutes

logger = logging.getLogger(__name__)


def _setup_logging(level: str = "INFO") -> None:
    logging.basicConfig(
        level=getattr(logging, level, logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s - %(message)s",
    )


def _weekday(raw: str) -> WeekDay:
    # Accepts stored names ("Lundi") as well as English ones ("monday").
    wanted = raw.strip().lower()
    for d in WeekDay:
        if wanted in (d.value.lower(), d.name.lower()):
            return d
    raise argparse.ArgumentTypeError(f"Unknown day: {raw!r}")


def _iso_date(raw: str) -> str:
    try:
        return dt.date.fromisoformat(raw).isoformat()
    except ValueError as e:
        raise argparse.ArgumentTypeError(f"Invalid date: {raw!r}. Expected YYYY-MM-DD.") from e


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Studio opening hours and exceptions")
    parser.add_argument("--dry-run", action="store_true", help="Apply the change but don't save it")
    sub = parser.add_subparsers(dest="command", required=True)

    sub.add_parser("show", help="Print weekly hours, exceptions and totals")
    sub.add_parser("duplicate", help="Copy the first open day's hours to every day")

    p = sub.add_parser("toggle", help="Open or close a weekday")
    p.add_argument("day", type=_weekday)

    p = sub.add_parser("set-hours", help="Set a weekday's opening window")
    p.add_argument("day", type=_weekday)
    p.add_argument("start")
    p.add_argument("end")

    p = sub.add_parser("add-break", help="Add a 12:00-13:00 break to a weekday")
    p.add_argument("day", type=_weekday)

    p = sub.add_parser("remove-break", help="Remove a break from a weekday")
    p.add_argument("day", type=_weekday)
    p.add_argument("break_id")

    p = sub.add_parser("set-break", help="Change a break's window")
    p.add_argument("day", type=_weekday)
    p.add_argument("break_id")
    p.add_argument("start")
    p.add_argument("end")

    p = sub.add_parser("add-exception", help="Close a date or give it special hours")
    p.add_argument("date")
    p.add_argument("type", choices=[t.value for t in ExceptionType])
    p.add_argument("label")
    p.add_argument("--start", default="")
    p.add_argument("--end", default="")

    p = sub.add_parser("remove-exception", help="Remove a date exception")
    p.add_argument("exception_id")

    p = sub.add_parser("resolve", help="Show the effective hours of a date")
    p.add_argument("date", type=_iso_date)

    return parser


def _print_state(engine: AvailabilityEngine) -> None:
    for d in engine.state.schedule:
        if not d.enabled:
            print(f"{d.day.value:<9} Ferme")
            continue
        breaks = ", ".join(f"{b.start}-{b.end} [{b.id}]" for b in d.breaks)
        print(f"{d.day.value:<9} {d.start}-{d.end}" + (f"  pauses: {breaks}" if breaks else ""))

    exceptions = sorted_by_date(engine.state.exceptions)
    if exceptions:
        print()
        for e in exceptions:
            hours = f" {e.start}-{e.end}" if e.type is ExceptionType.SPECIAL else ""
            print(f"{e.date} {e.type.value}{hours} {e.label} [{e.id}]")

    stats = engine.stats()
    print()
    print(f"{stats.weekly_hours_label} / semaine, {stats.open_days_count} jours ouverts")


def _run_command(engine: AvailabilityEngine, args: argparse.Namespace) -> bool:
    """Run one command. Returns True when the state changed."""
    if args.command == "show":
        _print_state(engine)
        return False

    if args.command == "resolve":
        window = engine.resolve(args.date)
        if not window.open:
            print(f"{window.date} ferme ({window.source}{': ' + window.label if window.label else ''})")
        else:
            opened = from_minutes(engine.open_minutes(args.date))
            print(f"{window.date} {window.start}-{window.end} ({window.source}), {opened} ouvert")
        return False

    if args.command == "toggle":
        engine.toggle_day(args.day)
    elif args.command == "set-hours":
        engine.set_day_window(args.day, "start", args.start)
        engine.set_day_window(args.day, "end", args.end)
    elif args.command == "add-break":
        print(engine.add_break(args.day).id)
    elif args.command == "remove-break":
        engine.remove_break(args.day, args.break_id)
    elif args.command == "set-break":
        engine.set_break_window(args.day, args.break_id, "start", args.start)
        engine.set_break_window(args.day, args.break_id, "end", args.end)
    elif args.command == "duplicate":
        engine.duplicate_schedule()
    elif args.command == "add-exception":
        created = engine.add_exception(
            ExceptionDraft(
                date=args.date,
                type=ExceptionType(args.type),
                label=args.label,
                start=args.start,
                end=args.end,
            )
        )
        print(created.id)
    elif args.command == "remove-exception":
        engine.remove_exception(args.exception_id)
    else:
        raise RuntimeError(f"Unhandled command: {args.command}")
    return True


def main(argv: list[str] | None = None) -> int:
    args = _build_parser().parse_args(argv)

    settings = load_settings()
    _setup_logging(settings.log_level)

    engine = AvailabilityEngine(FileKeyValueStore(settings.state_dir), settings.storage_key)
    engine.load()

    try:
        changed = _run_command(engine, args)
    except ScheduleError as e:
        # Nothing is saved when the input was rejected.
        logger.error("%s", e)
        return 2

    if changed and not args.dry_run:
        engine.save()
    elif changed:
        logger.info("Dry run, changes not saved")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
