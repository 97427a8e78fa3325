"""Date sets collected from annotations and their resolution into DateRestriction values.

Annotations only ever add dates. Resolution happens once per weekday, after the whole row
has been parsed, and never mutates the collected sets.
"""
from collections.abc import Callable, Hashable, Iterable, Iterator
from dataclasses import dataclass, field
from datetime import date
from typing import TypeVar

from ..models import DateRestriction, Weekday

K = TypeVar("K", bound=Hashable)


@dataclass(slots=True)
class AnnotationDates:
    only: set[date] = field(default_factory=set)
    except_: set[date] = field(default_factory=set)

    def is_always(self) -> bool:
        return not self.only and not self.except_

    def extend(self, other: "AnnotationDates") -> None:
        self.only |= other.only
        self.except_ |= other.except_

    def filtered(self, predicate: Callable[[date], bool]) -> "AnnotationDates":
        return AnnotationDates(
            only={d for d in self.only if predicate(d)},
            except_={d for d in self.except_ if predicate(d)},
        )

    def by_weekday(self, weekday: Weekday) -> "AnnotationDates":
        return self.filtered(lambda d: d.weekday() == weekday)

    def into_date_restriction(self) -> DateRestriction:
        # A date listed as both "only" and "except" contradicts itself; it is dropped from both.
        common = self.only & self.except_
        only = self.only - common
        except_ = self.except_ - common
        if only:
            return DateRestriction.only(only)
        if except_:
            return DateRestriction.except_(except_)
        return DateRestriction.all()

    def _into_date_restriction_by(self, predicate: Callable[[date], bool]) -> DateRestriction:
        narrowed = self.filtered(predicate)
        if self.only and not narrowed.only:
            return DateRestriction.never()
        return narrowed.into_date_restriction()

    def into_date_restriction_by_weekday(self, weekday: Weekday) -> DateRestriction:
        return self._into_date_restriction_by(lambda d: d.weekday() == weekday)

    def into_date_restriction_by_weekday_and_date_restriction(
            self,
            weekday: Weekday,
            date_restriction: DateRestriction,
    ) -> DateRestriction:
        return self._into_date_restriction_by(
            lambda d: d.weekday() == weekday and date_restriction.includes_date(d)
        )

    @staticmethod
    def map_to_date_restrictions_by_weekday(
            items: Iterable[tuple[K, "AnnotationDates"]],
            weekday: Weekday,
            date_restriction: DateRestriction,
    ) -> dict[K, DateRestriction]:
        """Resolve every entry for one weekday, leaving out entries that never apply."""
        resolved = {}
        for key, dates in items:
            restriction = dates.into_date_restriction_by_weekday_and_date_restriction(weekday, date_restriction)
            if not restriction.is_never():
                resolved[key] = restriction
        return resolved


class AnnotationNotes:
    """Free-text notes of one row, each with the dates it is limited to."""

    def __init__(self):
        self._map: dict[str, AnnotationDates] = {}

    def entry(self, text: str) -> AnnotationDates:
        return self._map.setdefault(text, AnnotationDates())

    def extend(self, other: "AnnotationNotes") -> None:
        for text, dates in other.items():
            self.entry(text).extend(dates)

    def items(self) -> Iterator[tuple[str, AnnotationDates]]:
        return iter(self._map.items())

    def __getitem__(self, text: str) -> AnnotationDates:
        return self._map[text]

    def __contains__(self, text: object) -> bool:
        return text in self._map

    def __len__(self) -> int:
        return len(self._map)

    def __iter__(self) -> Iterator[str]:
        return iter(self._map)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, AnnotationNotes):
            return NotImplemented
        return self._map == other._map

    def __repr__(self) -> str:
        return f"AnnotationNotes({self._map!r})"


def annotation_notes_date_restrictions(
        notes: AnnotationNotes,
        weekday: Weekday,
        date_restriction: DateRestriction,
) -> dict[str, DateRestriction]:
    return AnnotationDates.map_to_date_restrictions_by_weekday(notes.items(), weekday, date_restriction)
