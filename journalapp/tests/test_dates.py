"""Tolerant parsing of stored date text."""

from __future__ import annotations

from datetime import date, datetime

import pytest

pytestmark = pytest.mark.unit

from journalapp.core.utils.dates import (
    as_date,
    format_date,
    format_datetime,
    is_canonical_date,
    parse_stored_date,
    parse_stored_datetime,
)


@pytest.mark.parametrize(
    "text, expected",
    [
        ("2024-05-01", datetime(2024, 5, 1)),
        ("2024-05-01 07:45:10", datetime(2024, 5, 1, 7, 45, 10)),
        ("2024-05-01T07:45:10", datetime(2024, 5, 1, 7, 45, 10)),
        ("05/03/2024", datetime(2024, 5, 3)),
        ("05/03/2024 13:00:00", datetime(2024, 5, 3, 13, 0, 0)),
        ("25/12/2023", datetime(2023, 12, 25)),
        ("March 4, 2024", datetime(2024, 3, 4)),
    ],
)
def test_parse_stored_datetime_formats(text, expected):
    assert parse_stored_datetime(text) == expected


@pytest.mark.parametrize("text", ["", "   ", None, "not a date", "garbage", "5", "12", "May", "Feb 2024", "10:30"])
def test_unparseable_values_become_now(text):
    before = datetime.now().replace(microsecond=0)
    parsed = parse_stored_datetime(text)
    after = datetime.now()
    assert before <= parsed <= after


def test_date_values_pass_through():
    moment = datetime(2024, 1, 2, 3, 4, 5)
    assert parse_stored_datetime(moment) is moment
    assert parse_stored_datetime(date(2024, 1, 2)) == datetime(2024, 1, 2)
    assert parse_stored_date(moment) == date(2024, 1, 2)
    assert as_date("2024-01-02 23:59:59") == date(2024, 1, 2)


def test_is_canonical_date():
    assert is_canonical_date("2024-05-01")
    assert is_canonical_date("2024-05-01 10:00:00")
    assert not is_canonical_date("05/01/2024")
    assert not is_canonical_date("")
    assert not is_canonical_date(None)


def test_formatting():
    assert format_date(date(2024, 5, 1)) == "2024-05-01"
    assert format_datetime(datetime(2024, 5, 1, 6, 7, 8)) == "2024-05-01 06:07:08"
