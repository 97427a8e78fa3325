from __future__ import annotations

from datetime import date, time

import pytest

from ferryschedule.models import DateRange, DateRestriction, RestrictionKind, Weekday, parse_time_12h

SUMMER = DateRange(date(2024, 6, 25), date(2024, 9, 3))


def test_parse_date_within_infers_year() -> None:
    assert SUMMER.parse_date_within("Jul 4") == date(2024, 7, 4)
    assert SUMMER.parse_date_within("jul 4") == date(2024, 7, 4)
    assert SUMMER.parse_date_within(" Sep 3 ") == date(2024, 9, 3)


def test_parse_date_within_out_of_range_is_none() -> None:
    assert SUMMER.parse_date_within("Jan 5") is None
    assert SUMMER.parse_date_within("Jun 24") is None


def test_parse_date_within_across_new_year() -> None:
    winter = DateRange(date(2024, 12, 15), date(2025, 1, 15))
    assert winter.parse_date_within("Dec 20") == date(2024, 12, 20)
    assert winter.parse_date_within("Jan 3") == date(2025, 1, 3)


@pytest.mark.parametrize("token", ["Foo 9", "4 Jul", "July", "Jul 32", "Feb 30"])
def test_parse_date_within_rejects_non_dates(token: str) -> None:
    with pytest.raises(ValueError):
        SUMMER.parse_date_within(token)


def test_leap_day_outside_leap_years_is_out_of_range() -> None:
    winter = DateRange(date(2023, 2, 1), date(2023, 3, 1))
    assert winter.parse_date_within("Feb 29") is None


def test_date_range_must_be_ordered() -> None:
    with pytest.raises(ValueError):
        DateRange(date(2024, 9, 3), date(2024, 6, 25))


def test_parse_time_12h() -> None:
    assert parse_time_12h("11:00 PM") == time(23, 0)
    assert parse_time_12h("9:05 am") == time(9, 5)
    assert parse_time_12h("12:15 AM") == time(0, 15)
    with pytest.raises(ValueError):
        parse_time_12h("13:00 PM")


def test_weekday_parse() -> None:
    assert Weekday.parse("Mon") is Weekday.MONDAY
    assert Weekday.parse("thursday") is Weekday.THURSDAY
    assert Weekday.parse("SAT") is Weekday.SATURDAY
    assert Weekday.of(date(2024, 7, 1)) is Weekday.MONDAY
    with pytest.raises(ValueError):
        Weekday.parse("Mo")


def test_empty_only_and_except_collapse_to_all() -> None:
    assert DateRestriction.only([]).kind is RestrictionKind.ALL
    assert DateRestriction.except_(set()).kind is RestrictionKind.ALL


def test_restriction_includes_date() -> None:
    jul1, jul2 = date(2024, 7, 1), date(2024, 7, 2)
    assert DateRestriction.all().includes_date(jul1)
    assert DateRestriction.only([jul1]).includes_date(jul1)
    assert not DateRestriction.only([jul1]).includes_date(jul2)
    assert not DateRestriction.except_([jul1]).includes_date(jul1)
    assert DateRestriction.except_([jul1]).includes_date(jul2)
    assert not DateRestriction.never().includes_date(jul1)
    assert DateRestriction.never().is_never()


def test_restriction_str() -> None:
    restriction = DateRestriction.except_([date(2024, 7, 4), date(2024, 7, 1)])
    assert str(restriction) == "except Jul 1, Jul 4"
    assert str(DateRestriction.all()) == "all"


def test_restriction_intersect() -> None:
    jul1, jul8, jul15 = date(2024, 7, 1), date(2024, 7, 8), date(2024, 7, 15)
    all_ = DateRestriction.all()
    only = DateRestriction.only([jul1, jul8])
    except_ = DateRestriction.except_([jul8])

    assert all_.intersect(only) == only
    assert except_.intersect(all_) == except_
    assert only.intersect(except_) == DateRestriction.only([jul1])
    assert except_.intersect(only) == DateRestriction.only([jul1])
    assert only.intersect(DateRestriction.only([jul8, jul15])) == DateRestriction.only([jul8])
    assert except_.intersect(DateRestriction.except_([jul15])) == DateRestriction.except_([jul8, jul15])
    assert DateRestriction.only([jul8]).intersect(except_).is_never()
    assert DateRestriction.never().intersect(all_).is_never()
