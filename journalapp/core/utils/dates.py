"""Tolerant parsing for dates persisted as text.

Both databases store every date and timestamp as text. Rows written by older
builds (or edited by hand) may carry US or European formatted values, so
reads never trust the stored shape: a value is parsed with the default
parser first, then against an ordered list of explicit formats, and as a last
resort replaced by the current timestamp so a single bad row cannot break a
listing.
"""

from __future__ import annotations

import logging
import re
from datetime import date, datetime
from typing import Optional, Union

import sqlalchemy as sa
from dateutil.parser import ParserError
from dateutil.parser import parse as dtparse

logger = logging.getLogger(__name__)

DATE_FORMAT = "%Y-%m-%d"
DATETIME_FORMAT = "%Y-%m-%d %H:%M:%S"

# Tried in order after the default parser gives up.
FALLBACK_FORMATS = (
    "%Y-%m-%d",
    "%Y-%m-%d %H:%M:%S",
    "%m/%d/%Y",
    "%m/%d/%Y %H:%M:%S",
    "%d/%m/%Y",
    "%d/%m/%Y %H:%M:%S",
)

_CANONICAL_DATE_PREFIX = re.compile(r"^\d{4}-\d{2}-\d{2}")

# Differ in year, month and day; time fields stay zero either way.
_DEFAULT_A = datetime(2000, 1, 1)
_DEFAULT_B = datetime(2001, 2, 2)

DateLike = Union[date, datetime, str]


class NonCanonicalDateError(ValueError):
    """Raised when stored dates cannot be compared as ``YYYY-MM-DD`` text."""


def now() -> datetime:
    """Local wall-clock time truncated to the stored (second) resolution."""
    return datetime.now().replace(microsecond=0)


def _parse_complete_date(text: str) -> Optional[datetime]:
    """Parse with dateutil, rejecting text that lacks a year, month or day.

    dateutil fills missing fields from its default, so the text is parsed
    against two defaults that differ in every date field; a field taken from
    the default shows up as a mismatch.
    """
    try:
        first = dtparse(text, default=_DEFAULT_A)
        second = dtparse(text, default=_DEFAULT_B)
    except (ParserError, ValueError, OverflowError):
        return None
    if first.date() != second.date():
        return None
    return first


def parse_stored_datetime(value: Optional[DateLike]) -> datetime:
    """Parse a stored date/time value, substituting ``now()`` when hopeless."""
    if isinstance(value, datetime):
        return value
    if isinstance(value, date):
        return datetime.combine(value, datetime.min.time())
    text = (value or "").strip()
    if not text:
        return now()

    try:
        return datetime.fromisoformat(text)
    except ValueError:
        pass
    parsed = _parse_complete_date(text)
    if parsed is not None:
        return parsed
    for fmt in FALLBACK_FORMATS:
        try:
            return datetime.strptime(text, fmt)
        except ValueError:
            continue

    logger.warning("Could not parse stored date %r; using current time", text)
    return now()


def parse_stored_date(value: Optional[DateLike]) -> date:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    return parse_stored_datetime(value).date()


def as_date(value: DateLike) -> date:
    """Reduce a date, datetime or date string to its calendar date."""
    return parse_stored_date(value)


def is_canonical_date(value: Optional[str]) -> bool:
    return bool(value) and bool(_CANONICAL_DATE_PREFIX.match(value))


def format_date(value: date) -> str:
    return value.strftime(DATE_FORMAT)


def format_datetime(value: datetime) -> str:
    return value.strftime(DATETIME_FORMAT)


class TextDate(sa.types.TypeDecorator):
    """Calendar date persisted as ``YYYY-MM-DD`` text.

    Strings are bound untouched so raw patterns (``LIKE '2024-05-01%'``) and
    legacy values can still be written and compared.
    """

    impl = sa.Text
    cache_ok = True

    def process_bind_param(self, value, dialect):
        if value is None or isinstance(value, str):
            return value
        if isinstance(value, datetime):
            value = value.date()
        return format_date(value)

    def process_result_value(self, value, dialect):
        if value is None:
            return None
        return parse_stored_date(value)


class TextDateTime(sa.types.TypeDecorator):
    """Timestamp persisted as ``YYYY-MM-DD HH:MM:SS`` text."""

    impl = sa.Text
    cache_ok = True

    def process_bind_param(self, value, dialect):
        if value is None or isinstance(value, str):
            return value
        if not isinstance(value, datetime):
            value = datetime.combine(value, datetime.min.time())
        return format_datetime(value)

    def process_result_value(self, value, dialect):
        if value is None:
            return None
        return parse_stored_datetime(value)
