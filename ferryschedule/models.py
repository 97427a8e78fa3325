import re
from collections.abc import Iterable
from dataclasses import dataclass, field
from datetime import date, datetime, time
from enum import Enum, IntEnum

MONTHS = {
    "jan": 1, "feb": 2, "mar": 3, "apr": 4, "may": 5, "jun": 6,
    "jul": 7, "aug": 8, "sep": 9, "oct": 10, "nov": 11, "dec": 12,
}

_MONTH_DAY_RE = re.compile(r"^(?P<month>[a-z]{3})\s+(?P<day>\d{1,2})$", re.IGNORECASE)


class Weekday(IntEnum):
    """Python weekday numbering (Mon=0, Sun=6), same as ``date.weekday()``."""
    MONDAY = 0
    TUESDAY = 1
    WEDNESDAY = 2
    THURSDAY = 3
    FRIDAY = 4
    SATURDAY = 5
    SUNDAY = 6

    @classmethod
    def of(cls, day: date) -> "Weekday":
        return cls(day.weekday())

    @classmethod
    def parse(cls, text: str) -> "Weekday":
        token = text.strip().lower()
        if len(token) >= 3:
            for weekday in cls:
                if weekday.name.lower().startswith(token):
                    return weekday
        raise ValueError(f"Unknown weekday: {text!r}")

    def short_name(self) -> str:
        return self.name[:3].title()


def parse_time_12h(text: str) -> time:
    """Parse "H:MM am/pm" (case-insensitive, hour padding optional)."""
    return datetime.strptime(text.strip(), "%I:%M %p").time()


@dataclass(frozen=True, slots=True)
class DateRange:
    """Inclusive window covered by one published schedule.

    Annotation dates carry no year; it is inferred from this window.
    """
    from_date: date
    to_date: date

    def __post_init__(self):
        if self.from_date > self.to_date:
            raise ValueError(f"Date range starts after it ends: {self.from_date} > {self.to_date}")

    def __str__(self) -> str:
        return f"{self.from_date.isoformat()} to {self.to_date.isoformat()}"

    def includes(self, day: date) -> bool:
        return self.from_date <= day <= self.to_date

    def parse_date_within(self, token: str) -> date | None:
        """Resolve a "Mon D" token to a date inside this range, or None if it falls outside."""
        m = _MONTH_DAY_RE.match(token.strip())
        if not m:
            raise ValueError(f"Expected a 'Mon D' date, got {token!r}")
        month = MONTHS.get(m.group("month").lower())
        if month is None:
            raise ValueError(f"Unknown month in date {token!r}")
        day = int(m.group("day"))
        # 2000 is a leap year, so only days that exist in no year fail here
        try:
            date(2000, month, day)
        except ValueError as e:
            raise ValueError(f"Invalid day in date {token!r}") from e

        for year in range(self.from_date.year, self.to_date.year + 1):
            try:
                candidate = date(year, month, day)
            except ValueError:
                continue
            if self.includes(candidate):
                return candidate
        return None


class RestrictionKind(Enum):
    ALL = "all"
    ONLY = "only"
    EXCEPT = "except"
    NEVER = "never"


@dataclass(frozen=True, slots=True)
class DateRestriction:
    """On which dates something applies.

    ONLY/EXCEPT always carry a non-empty set; an empty one collapses to ALL.
    NEVER is what is left of an ONLY restriction whose dates were all filtered away.
    """
    kind: RestrictionKind
    dates: frozenset[date] = frozenset()

    @classmethod
    def all(cls) -> "DateRestriction":
        return cls(RestrictionKind.ALL)

    @classmethod
    def never(cls) -> "DateRestriction":
        return cls(RestrictionKind.NEVER)

    @classmethod
    def only(cls, dates: Iterable[date]) -> "DateRestriction":
        dates = frozenset(dates)
        return cls(RestrictionKind.ONLY, dates) if dates else cls.all()

    @classmethod
    def except_(cls, dates: Iterable[date]) -> "DateRestriction":
        dates = frozenset(dates)
        return cls(RestrictionKind.EXCEPT, dates) if dates else cls.all()

    def is_all(self) -> bool:
        return self.kind is RestrictionKind.ALL

    def is_never(self) -> bool:
        return self.kind is RestrictionKind.NEVER

    def includes_date(self, day: date) -> bool:
        if self.kind is RestrictionKind.ALL:
            return True
        if self.kind is RestrictionKind.ONLY:
            return day in self.dates
        if self.kind is RestrictionKind.EXCEPT:
            return day not in self.dates
        return False

    def intersect(self, other: "DateRestriction") -> "DateRestriction":
        """Dates on which both restrictions apply; an empty ONLY becomes NEVER."""
        if self.is_never() or other.is_never():
            return DateRestriction.never()
        if self.is_all():
            return other
        if other.is_all():
            return self
        if self.kind is RestrictionKind.EXCEPT and other.kind is RestrictionKind.EXCEPT:
            return DateRestriction.except_(self.dates | other.dates)
        if self.kind is RestrictionKind.ONLY and other.kind is RestrictionKind.ONLY:
            dates = self.dates & other.dates
        elif self.kind is RestrictionKind.ONLY:
            dates = self.dates - other.dates
        else:
            dates = other.dates - self.dates
        return DateRestriction.only(dates) if dates else DateRestriction.never()

    def __str__(self) -> str:
        if self.kind in (RestrictionKind.ALL, RestrictionKind.NEVER):
            return self.kind.value
        formatted = ", ".join(f"{d:%b} {d.day}" for d in sorted(self.dates))
        return f"{self.kind.value} {formatted}"


@dataclass(frozen=True, slots=True)
class ScheduleRow:
    """One sailing row as extracted from a schedule page.

    weekdays uses Python weekday numbering; annotations keep their page order.
    """
    weekdays: list[Weekday]
    depart_time: time
    arrive_time: time | None = None
    annotations: list[str] = field(default_factory=list)


@dataclass(frozen=True, slots=True)
class Schedule:
    date_range: DateRange
    rows: list[ScheduleRow]
    source_url: str | None = None


@dataclass(slots=True)
class Sailing:
    """A row resolved for one weekday.

    notes maps display text to the dates it applies on, already narrowed to restriction.
    """
    weekday: Weekday
    depart_time: time
    arrive_time: time | None
    restriction: DateRestriction
    notes: dict[str, DateRestriction] = field(default_factory=dict)

    def runs_on(self, day: date) -> bool:
        return Weekday.of(day) == self.weekday and self.restriction.includes_date(day)

    def notes_on(self, day: date) -> list[str]:
        return sorted(text for text, restriction in self.notes.items() if restriction.includes_date(day))
