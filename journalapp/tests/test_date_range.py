"""Date-range queries over canonical and legacy stored date text."""

from __future__ import annotations

from datetime import date, datetime
from unittest.mock import patch

import pytest
import sqlalchemy as sa
from sqlalchemy.exc import OperationalError

pytestmark = pytest.mark.integration

from journalapp.core.utils.dates import NonCanonicalDateError
from journalapp.domains.journal.models import JournalEntry
from journalapp.domains.journal.services.entry_store import EntryStore
from journalapp.extensions import db


def _legacy_row(title: str, stored_date: str, user_id: int = 1) -> None:
    """Insert a row whose date text was written by an older build."""
    stamp = datetime(2024, 1, 1, 9, 0, 0)
    db.session.add(
        JournalEntry(
            user_id=user_id,
            title=title,
            content="legacy",
            entry_date=stored_date,
            created_at=stamp,
            updated_at=stamp,
        )
    )
    db.session.commit()
    db.session.expunge_all()


def _titles(entries):
    return [e.title for e in entries]


def test_range_is_inclusive_and_newest_first(store, make_entry):
    for title, day in (("jan", date(2024, 1, 15)), ("feb", date(2024, 2, 1)), ("mar", date(2024, 3, 1))):
        store.save(make_entry(title=title, entry_date=day), user_id=1)

    result = store.get_by_date_range(date(2024, 1, 15), date(2024, 2, 1), 1)
    assert _titles(result) == ["feb", "jan"]


def test_same_day_entries_sorted_by_id_desc(store, make_entry):
    first = store.save(make_entry(title="first", entry_date=date(2024, 6, 1)), user_id=1)
    second = store.save(make_entry(title="second", entry_date=date(2024, 6, 1)), user_id=1)
    result = store.get_by_date_range("2024-06-01", "2024-06-01", 1)
    assert [e.id for e in result] == [second.id, first.id]


def test_range_accepts_datetimes(store, make_entry):
    store.save(make_entry(title="x", entry_date=date(2024, 6, 1)), user_id=1)
    result = store.get_by_date_range(datetime(2024, 6, 1, 23, 59), datetime(2024, 6, 1, 0, 0), 1)
    assert _titles(result) == ["x"]


def test_both_tiers_agree_on_canonical_data(store, make_entry):
    """Should give the same rows in the same order from SQL and from memory."""
    for n, day in enumerate((date(2024, 1, 5), date(2024, 1, 9), date(2024, 1, 9), date(2024, 2, 2))):
        store.save(make_entry(title=f"e{n}", entry_date=day), user_id=1)

    start, end = date(2024, 1, 1), date(2024, 1, 31)
    primary = store.query_date_range(start, end, 1)
    fallback = store.filter_date_range(start, end, 1)
    assert [e.id for e in primary] == [e.id for e in fallback]
    assert _titles(primary) == ["e2", "e1", "e0"]


def test_primary_tier_refuses_mixed_formats(store, make_entry):
    store.save(make_entry(title="iso", entry_date=date(2024, 5, 2)), user_id=1)
    _legacy_row("us", "05/03/2024")
    with pytest.raises(NonCanonicalDateError):
        store.query_date_range(date(2024, 5, 1), date(2024, 5, 31), 1)


def test_mixed_formats_fall_back_to_parsed_dates(store, make_entry):
    """Should answer the range from parsed dates when stored text is mixed."""
    store.save(make_entry(title="iso", entry_date=date(2024, 5, 2)), user_id=1)
    _legacy_row("us", "05/03/2024")
    _legacy_row("timestamp", "2024-05-04 18:30:00")
    _legacy_row("outside", "06/20/2024")

    result = store.get_by_date_range(date(2024, 5, 1), date(2024, 5, 31), 1)
    assert _titles(result) == ["timestamp", "us", "iso"]
    assert [e.entry_date for e in result] == [date(2024, 5, 4), date(2024, 5, 3), date(2024, 5, 2)]

    outcome = store.read_outcome("get_by_date_range", date(2024, 5, 1), date(2024, 5, 31), 1)
    assert outcome.ok
    assert _titles(outcome.value) == _titles(result)
    assert [e.id for e in result] == [e.id for e in store.filter_date_range(date(2024, 5, 1), date(2024, 5, 31), 1)]


def test_fallback_matches_primary_once_dates_are_canonical(store, make_entry):
    """Should answer a mixed-format range exactly as SQL does after the legacy text is rewritten."""
    store.save(make_entry(title="iso", entry_date=date(2024, 5, 2)), user_id=1)
    _legacy_row("us", "05/03/2024")
    _legacy_row("eu", "25/05/2024")
    _legacy_row("outside", "06/20/2024")
    start, end = date(2024, 5, 1), date(2024, 5, 31)

    mixed = store.get_by_date_range(start, end, 1)

    for title, canonical in (("us", "2024-05-03"), ("eu", "2024-05-25"), ("outside", "2024-06-20")):
        db.session.execute(sa.update(JournalEntry).where(JournalEntry.title == title).values(entry_date=canonical))
    db.session.commit()
    db.session.expunge_all()

    primary = store.query_date_range(start, end, 1)
    assert [e.id for e in mixed] == [e.id for e in primary]
    assert _titles(primary) == ["eu", "us", "iso"]


def test_legacy_rows_of_other_users_do_not_block_primary_tier(store, make_entry):
    store.save(make_entry(title="mine", entry_date=date(2024, 5, 2)), user_id=1)
    _legacy_row("theirs", "05/03/2024", user_id=2)
    assert _titles(store.query_date_range(date(2024, 5, 1), date(2024, 5, 31), 1)) == ["mine"]


def test_timestamp_suffix_still_uses_primary_tier(store, make_entry):
    _legacy_row("stamped", "2024-05-04 18:30:00")
    result = store.query_date_range(date(2024, 5, 4), date(2024, 5, 4), 1)
    assert _titles(result) == ["stamped"]


def test_range_degrades_to_empty_when_both_tiers_fail(store, make_entry):
    store.save(make_entry(entry_date=date(2024, 5, 2)), user_id=1)
    boom = OperationalError("SELECT", {}, Exception("database is locked"))
    with patch.object(EntryStore, "query_date_range", side_effect=boom), patch.object(
        EntryStore, "filter_date_range", side_effect=boom
    ):
        assert store.get_by_date_range(date(2024, 5, 1), date(2024, 5, 31), 1) == []
        outcome = store.read_outcome("get_by_date_range", date(2024, 5, 1), date(2024, 5, 31), 1)
    assert outcome.value == []
    assert outcome.error is boom


def test_read_outcome_rejects_write_operations(store):
    with pytest.raises(AttributeError):
        store.read_outcome("save", None)
