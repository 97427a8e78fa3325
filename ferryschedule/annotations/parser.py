"""Interpretation of the annotation strings attached to a schedule row.

Only a fixed set of English shapes is understood. Anything else raises AnnotationParseError
instead of being guessed at: a missed "Except" would show a sailing that does not run.
"""
import logging
import re
from collections.abc import Iterable
from dataclasses import dataclass, field
from datetime import date, time

from ..errors import AnnotationParseError
from ..models import DateRange, parse_time_12h
from .dates import AnnotationDates, AnnotationNotes
from .normalize import normalize_annotation

logger = logging.getLogger(__name__)

STAR_RE = re.compile(r"^\*(\d+:\d+ [AP]M) (Not Available|Only) on: (.*)\*", re.IGNORECASE)
BLANKET_RE = re.compile(r"^(Except|Not Available|Only|DG Sailing only)\b(?:\s*on)?:?\s*(.+)", re.IGNORECASE)
COMPOUND_RE = re.compile(r"^((?:Except|Not Available|Only)(?:\s*on)?:?\s*[^!]*?)\s+(!\s*.*)$", re.IGNORECASE)
DG_ONLY_RE = re.compile(
    r"Dangerous goods only"
    r"|No passengers permitted - DG Sailing only"
    r"|No passengers permitted - only sails on .*"
)

# raw text (marker glyphs stripped) -> note text shown to users
KNOWN_NOTES = {
    "Saturna-bound vehicles arriving at the booth at least 15 minutes prior to sailing time "
    "are offered priority on this sailing":
        "Saturna-bound vehicles arriving at the booth at least 15 minutes prior to sailing time "
        "are offered priority on this sailing",
    "Foot passengers only": "Foot passengers only",
    "Note: This sailing departs just after midnight": "This sailing departs just after midnight",
    "This sailing departs just before midnight": "This sailing departs just before midnight",
}

IGNORED_TEXTS = {
    "No sailings available on this route for these dates",
}


def parse_date_list(
        text: str,
        date_range: DateRange,
        annotation: str,
        delimiters: str = ",",
) -> set[date]:
    """Resolve a delimited list of "Mon D" tokens; dates outside date_range are dropped."""
    dates = set()
    for token in re.split(f"[{re.escape(delimiters)}]", text):
        token = token.strip()
        if not token:
            continue
        try:
            day = date_range.parse_date_within(token)
        except ValueError as e:
            raise AnnotationParseError(f"Failed to parse date {token!r}", annotation, token) from e
        if day is None:
            logger.warning(f"Date is outside date range of schedule ({date_range}): {token!r}")
            continue
        dates.add(day)
    return dates


@dataclass(slots=True)
class Annotations:
    """Everything the annotations of one schedule row say about it.

    star_dates_by_time holds restrictions for a departure time that differs from the
    row's nominal one ("*11:00 PM Not Available on: ...*"). star_dates is never filled
    by the current set of shapes.
    """
    dg_dates: AnnotationDates = field(default_factory=AnnotationDates)
    is_dg_only: bool = False
    star_dates: AnnotationDates = field(default_factory=AnnotationDates)
    star_dates_by_time: dict[time, AnnotationDates] = field(default_factory=dict)
    all_dates: AnnotationDates = field(default_factory=AnnotationDates)
    all_notes: AnnotationNotes = field(default_factory=AnnotationNotes)

    @classmethod
    def from_texts(cls, date_range: DateRange, annotation_texts: Iterable[str]) -> "Annotations":
        annotations = cls()
        annotations.parse(date_range, annotation_texts)
        return annotations

    def parse(self, date_range: DateRange, annotation_texts: Iterable[str]) -> None:
        """Parse annotations in order; the first one that cannot be understood raises."""
        for annotation_text in annotation_texts:
            m = COMPOUND_RE.match(annotation_text.strip())
            if m:
                logger.debug(f"Splitting compound annotation {annotation_text!r}")
                self.parse(date_range, [m.group(1), m.group(2)])
            else:
                self.parse_single(date_range, annotation_text)

    def parse_single(self, date_range: DateRange, annotation_text: str) -> None:
        text = normalize_annotation(annotation_text)

        if m := STAR_RE.match(text):
            self._parse_star(date_range, annotation_text, m)
        elif m := BLANKET_RE.match(text):
            self._parse_blanket(date_range, annotation_text, m)
        else:
            self._parse_phrase(annotation_text, text)

    def _parse_star(self, date_range: DateRange, annotation_text: str, m: re.Match[str]) -> None:
        time_text, verb, dates_text = m.groups()
        try:
            depart_time = parse_time_12h(time_text)
        except ValueError as e:
            raise AnnotationParseError(f"Failed to parse time {time_text!r}", annotation_text, time_text) from e

        dates = self.star_dates_by_time.setdefault(depart_time, AnnotationDates())
        targets = {
            "not available": dates.except_,
            "only": dates.only,
        }
        if (target := targets.get(verb.lower())) is None:
            raise AnnotationParseError(f'Expected "Not Available" or "Only", got {verb!r}', annotation_text, verb)
        target |= parse_date_list(dates_text, date_range, annotation_text)

    def _parse_blanket(self, date_range: DateRange, annotation_text: str, m: re.Match[str]) -> None:
        keyword, dates_text = m.groups()
        targets = {
            "except": self.all_dates.except_,
            "not available": self.all_dates.except_,
            "only": self.all_dates.only,
            "dg sailing only": self.dg_dates.only,
        }
        if (target := targets.get(keyword.lower())) is None:
            raise AnnotationParseError(
                f'Expected "Except", "Only", or "DG Sailing only", got {keyword!r}', annotation_text, keyword
            )
        target |= parse_date_list(dates_text, date_range, annotation_text, delimiters=",&")

    def _parse_phrase(self, annotation_text: str, text: str) -> None:
        phrase = re.sub(r"^[!#*]+\s*", "", text)
        phrase = re.sub(r"[.,]$", "", phrase).strip()

        if DG_ONLY_RE.fullmatch(phrase):
            self.is_dg_only = True
        elif phrase in KNOWN_NOTES:
            self.all_notes.entry(KNOWN_NOTES[phrase])
        elif phrase in IGNORED_TEXTS:
            logger.debug(f"Ignoring annotation {annotation_text!r}")
        else:
            raise AnnotationParseError(f"Unrecognized annotation text {phrase!r}", annotation_text, phrase)
