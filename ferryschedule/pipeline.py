"""Command line lookup of the sailings in a schedule file for one date.

Usage patterns:

1. Sailings for today from a file under FERRY_SCHEDULES_DIR:
   ferryschedule --schedule tsawwassen-swartz-bay.json

2. A specific date, skipping rows whose annotations cannot be parsed:
   ferryschedule --schedule path/to/schedule.json --date 2024-07-04 --lenient
"""
import argparse
import logging
import sys
from collections.abc import Sequence
from datetime import date
from pathlib import Path
from typing import TextIO

from ferryschedule.config import settings
from ferryschedule.errors import AnnotationParseError, ScheduleLoadError
from ferryschedule.logging_config import setup_logging
from ferryschedule.processing.schedule import ScheduleProcessor


def format_sailing_line(depart: str, arrive: str | None, notes: list[str]) -> str:
    line = f"{depart:>8}"
    if arrive:
        line += f" -> {arrive:>8}"
    if notes:
        line += "  (" + "; ".join(notes) + ")"
    return line


def run_pipeline(schedule_path: Path, day: date, strict: bool = True, out: TextIO | None = None) -> int:
    """Print the sailings running on day; returns how many were printed."""
    out = out or sys.stdout
    processor = ScheduleProcessor(strict=strict)
    schedule = processor.load_schedule(schedule_path)
    sailings = processor.resolve_schedule(schedule)
    running = processor.sailings_for_date(sailings, day, schedule.date_range)

    print(f"{day:%A, %d %B %Y}", file=out)
    if not schedule.date_range.includes(day):
        logging.warning(f"{day} is outside the schedule's date range ({schedule.date_range})")
        print(f"No schedule for this date (schedule covers {schedule.date_range})", file=out)
    elif not running:
        print("No sailings", file=out)
    for sailing, notes in running:
        arrive = sailing.arrive_time.strftime("%I:%M %p") if sailing.arrive_time else None
        print(format_sailing_line(sailing.depart_time.strftime("%I:%M %p"), arrive, notes), file=out)
    if schedule.source_url:
        print(f"Source: {schedule.source_url}", file=out)
    return len(running)


def build_arg_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(description="Ferry schedule sailings lookup")
    p.add_argument("--schedule", required=True, help=f"Schedule JSON file (relative names are looked up in {settings.schedules_dir})")
    p.add_argument("--date", type=date.fromisoformat, default=None, help="YYYY-MM-DD (default: today)")
    p.add_argument("--lenient", action="store_true", help="Skip rows with unrecognized annotations instead of failing")
    p.add_argument("--log-level", default=settings.log_level)
    return p


def main_cli(argv: Sequence[str] | None = None) -> int:
    parser = build_arg_parser()
    args = parser.parse_args(argv)

    setup_logging(args.log_level)

    strict = settings.strict_annotations and not args.lenient
    try:
        run_pipeline(settings.resolve_schedule_path(args.schedule), args.date or date.today(), strict=strict)
    except (OSError, ScheduleLoadError):
        logging.exception("Failed to load schedule")
        return 1
    except AnnotationParseError:
        logging.exception("Failed to parse schedule annotations")
        return 1
    return 0


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main_cli())
