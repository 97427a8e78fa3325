import json
import logging
from datetime import date, datetime, time
from pathlib import Path

import dacite
from tqdm import tqdm

from ..annotations.dates import annotation_notes_date_restrictions
from ..annotations.parser import Annotations
from ..config import settings
from ..errors import AnnotationParseError, ScheduleLoadError
from ..models import DateRange, RestrictionKind, Sailing, Schedule, ScheduleRow, Weekday, parse_time_12h

logger = logging.getLogger(__name__)

DG_NOTE = "Dangerous goods only"
DATE_FORMAT = "%Y-%m-%d"


class ScheduleProcessor:
    """Turns a schedule's rows and their annotations into per-weekday sailings."""
    def __init__(self, strict: bool | None = None):
        self.strict = settings.strict_annotations if strict is None else strict

    # ---------------- Parsing helpers -----------------
    @staticmethod
    def _parse_time(time_str: str) -> time:
        try:
            return datetime.strptime(time_str.strip(), "%H:%M").time()
        except ValueError:
            return parse_time_12h(time_str)

    @staticmethod
    def _parse_weekdays(weekdays: list[str | int]) -> list[Weekday]:
        return [Weekday(day) if isinstance(day, int) else Weekday.parse(day) for day in weekdays]

    def _row_data(self, row: dict) -> dict:
        return dict(
            weekdays=self._parse_weekdays(row['weekdays']),
            depart_time=self._parse_time(row['depart_time']),
            arrive_time=self._parse_time(row['arrive_time']) if row.get('arrive_time') else None,
            annotations=[str(text) for text in row.get('annotations', [])],
        )

    def parse_schedule(self, loaded_data: dict) -> Schedule:
        try:
            date_range = loaded_data['date_range']
            data_to_parse = dict(
                date_range=dict(
                    from_date=datetime.strptime(date_range['from'], DATE_FORMAT).date(),
                    to_date=datetime.strptime(date_range['to'], DATE_FORMAT).date(),
                ),
                rows=[self._row_data(row) for row in loaded_data['rows']],
                source_url=loaded_data.get('source_url'),
            )
            return dacite.from_dict(data=data_to_parse, data_class=Schedule)
        except (KeyError, TypeError, ValueError, dacite.DaciteError) as e:
            raise ScheduleLoadError(f"Malformed schedule: {e}") from e

    def load_schedule(self, path: Path) -> Schedule:
        logger.info(f"Loading schedule {path}")
        try:
            with open(path, 'rt', encoding='utf-8') as f:
                loaded_data = json.load(f)
        except json.JSONDecodeError as e:
            raise ScheduleLoadError(f"Schedule {path} is not valid JSON: {e}") from e
        return self.parse_schedule(loaded_data)

    # ---------------- Resolution -----------------
    @staticmethod
    def resolve_row(row: ScheduleRow, date_range: DateRange) -> list[Sailing]:
        annotations = Annotations.from_texts(date_range, row.annotations)
        if annotations.is_dg_only:
            logger.debug(f"Skipping dangerous goods only sailing at {row.depart_time}")
            return []

        sailings = []
        for weekday in row.weekdays:
            restriction = annotations.all_dates.into_date_restriction_by_weekday(weekday)
            # a star restriction at the row's own time narrows the row itself
            own_star_dates = annotations.star_dates_by_time.get(row.depart_time)
            if own_star_dates is not None:
                restriction = restriction.intersect(own_star_dates.into_date_restriction_by_weekday(weekday))
            if restriction.is_never():
                logger.debug(f"Sailing at {row.depart_time} never runs on {weekday.short_name()}")
                continue
            notes = annotation_notes_date_restrictions(annotations.all_notes, weekday, restriction)
            if not annotations.dg_dates.is_always():
                dg = annotations.dg_dates.into_date_restriction_by_weekday_and_date_restriction(weekday, restriction)
                if not dg.is_never():
                    notes[DG_NOTE] = dg
            sailings.append(Sailing(weekday, row.depart_time, row.arrive_time, restriction, notes))

            # another time only runs on the dates it is listed for; "Not Available" alone adds nothing
            for star_time, star_dates in annotations.star_dates_by_time.items():
                if star_time == row.depart_time or not star_dates.only:
                    continue
                star_restriction = star_dates.into_date_restriction_by_weekday(weekday).intersect(restriction)
                if star_restriction.kind is not RestrictionKind.ONLY:
                    continue
                sailings.append(Sailing(weekday, star_time, None, star_restriction, dict(notes)))
        return sailings

    def resolve_schedule(self, schedule: Schedule) -> list[Sailing]:
        sailings: list[Sailing] = []
        for index, row in enumerate(tqdm(schedule.rows, desc='Resolving sailings', leave=False)):
            try:
                sailings.extend(self.resolve_row(row, schedule.date_range))
            except AnnotationParseError:
                if self.strict:
                    raise
                logger.exception(f"Skipping row {index} ({row.depart_time}) of schedule {schedule.date_range}")
        logger.info(f"Resolved {len(sailings)} sailings from {len(schedule.rows)} rows")
        return sailings

    @staticmethod
    def sailings_for_date(
            sailings: list[Sailing],
            day: date,
            date_range: DateRange,
    ) -> list[tuple[Sailing, list[str]]]:
        if not date_range.includes(day):
            return []
        running = [s for s in sailings if s.runs_on(day)]
        running.sort(key=lambda s: s.depart_time)
        return [(s, s.notes_on(day)) for s in running]
