from __future__ import annotations

import logging
from datetime import date, time

import pytest

from ferryschedule.annotations.parser import Annotations, parse_date_list
from ferryschedule.errors import AnnotationParseError
from ferryschedule.models import DateRange

SUMMER = DateRange(date(2024, 6, 25), date(2024, 9, 3))


def jul(day: int) -> date:
    return date(2024, 7, day)


def parse(*texts: str) -> Annotations:
    return Annotations.from_texts(SUMMER, texts)


def test_except_dates() -> None:
    annotations = parse("Except: Jul 1, Jul 4")
    assert annotations.all_dates.except_ == {jul(1), jul(4)}
    assert annotations.all_dates.only == set()


@pytest.mark.parametrize(
    "text",
    ["Except Jul 1 & Jul 4", "Not Available on: Jul 1, Jul 4", "Except Jul 1, 4", "except jul 1 and jul 4."],
)
def test_except_variants(text: str) -> None:
    assert parse(text).all_dates.except_ == {jul(1), jul(4)}


def test_only_dates() -> None:
    assert parse("Only: Jul 4, Jul 5").all_dates.only == {jul(4), jul(5)}
    assert parse("Jul 4 & Jul 5 only").all_dates.only == {jul(4), jul(5)}
    assert parse("Only on Jul 4").all_dates.only == {jul(4)}


def test_star_time_restriction() -> None:
    annotations = parse("*11:00 PM Not Available on: Jul 1*")
    assert annotations.star_dates_by_time[time(23, 0)].except_ == {jul(1)}
    assert annotations.all_dates.is_always()

    annotations.parse(SUMMER, ["*11:00 PM Only on: Jul 8, Jul 15*"])
    assert annotations.star_dates_by_time[time(23, 0)].only == {jul(8), jul(15)}
    assert annotations.star_dates.is_always()


def test_star_time_must_parse() -> None:
    with pytest.raises(AnnotationParseError, match="13:00 PM") as exc_info:
        parse("*13:00 PM Only on: Jul 1*")
    assert exc_info.value.fragment == "13:00 PM"
    assert exc_info.value.annotation == "*13:00 PM Only on: Jul 1*"


def test_dg_sailing_dates() -> None:
    annotations = parse("DG Sailing only: Jul 2, Jul 3")
    assert annotations.dg_dates.only == {jul(2), jul(3)}
    assert annotations.is_dg_only is False
    assert annotations.all_dates.is_always()

    annotations = parse("DG Sailing only: Jul 2, no other passengers permitted")
    assert annotations.dg_dates.only == {jul(2)}


@pytest.mark.parametrize(
    "text",
    [
        "Dangerous goods only",
        "No passengers permitted - DG Sailing only",
        "No passengers permitted - only sails on Jul 2 and Jul 9",
        "*Dangerous goods only.",
    ],
)
def test_unconditional_dg(text: str) -> None:
    annotations = parse(text)
    assert annotations.is_dg_only is True
    assert annotations.dg_dates.is_always()
    assert annotations.all_dates.is_always()
    assert len(annotations.all_notes) == 0


@pytest.mark.parametrize(
    ("text", "note"),
    [
        ("Foot passengers only", "Foot passengers only"),
        ("# Foot passengers only.", "Foot passengers only"),
        ("Note: This sailing departs just after midnight", "This sailing departs just after midnight"),
        ("This sailing departs just before midnight.", "This sailing departs just before midnight"),
        (
            "! Saturna-bound vehicles arriving at the booth at least 15 minutes prior to sailing time "
            "are offered priority on this sailing.",
            "Saturna-bound vehicles arriving at the booth at least 15 minutes prior to sailing time "
            "are offered priority on this sailing",
        ),
    ],
)
def test_known_notes_always_apply(text: str, note: str) -> None:
    annotations = parse(text)
    assert list(annotations.all_notes) == [note]
    assert annotations.all_notes[note].is_always()


def test_ignored_text() -> None:
    assert parse("No sailings available on this route for these dates") == Annotations()


def test_unrecognized_text_fails() -> None:
    with pytest.raises(AnnotationParseError, match="Some unrecognized new phrase") as exc_info:
        parse("Some unrecognized new phrase")
    assert exc_info.value.fragment == "Some unrecognized new phrase"


def test_first_failure_wins() -> None:
    with pytest.raises(AnnotationParseError, match="Bogus one"):
        parse("Except Jul 1", "Bogus one", "Bogus two")


def test_unparseable_date_fails() -> None:
    with pytest.raises(AnnotationParseError, match="Foo 9") as exc_info:
        parse("Except Jul 1, Foo 9")
    assert exc_info.value.annotation == "Except Jul 1, Foo 9"
    assert isinstance(exc_info.value.__cause__, ValueError)


def test_out_of_range_dates_are_dropped(caplog: pytest.LogCaptureFixture) -> None:
    with caplog.at_level(logging.WARNING):
        annotations = parse("Except Jul 1, Oct 1")
    assert annotations.all_dates.except_ == {jul(1)}
    assert "Oct 1" in caplog.text


def test_compound_annotation_matches_separate_parsing() -> None:
    compound = parse("Except Jul 1 ! Foot passengers only")
    separate = parse("Except Jul 1", "Foot passengers only")
    assert compound == separate
    assert compound.all_dates.except_ == {jul(1)}
    assert "Foot passengers only" in compound.all_notes


def test_compound_annotation_with_date_list() -> None:
    annotations = parse("Only on: Jul 4, Jul 5 ! Note: This sailing departs just after midnight")
    assert annotations.all_dates.only == {jul(4), jul(5)}
    assert "This sailing departs just after midnight" in annotations.all_notes


def test_compound_note_is_still_validated() -> None:
    with pytest.raises(AnnotationParseError, match="Free bikes"):
        parse("Except Jul 1 ! Free bikes")


def test_input_order_does_not_change_result() -> None:
    texts = ["Except Jul 1", "Only: Jul 4", "Foot passengers only", "DG Sailing only: Jul 2"]
    assert parse(*texts) == parse(*reversed(texts))


def test_parse_date_list_delimiters() -> None:
    assert parse_date_list("Jul 1 & Jul 2, Jul 3", SUMMER, "x", delimiters=",&") == {jul(1), jul(2), jul(3)}
    assert parse_date_list("Jul 1, ", SUMMER, "x") == {jul(1)}
    with pytest.raises(AnnotationParseError):
        parse_date_list("Jul 1 & Jul 2", SUMMER, "x")
