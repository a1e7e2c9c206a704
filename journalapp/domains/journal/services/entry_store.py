"""Journal entry store: persistence, queries, statistics and backup.

Reads degrade to empty results on storage errors (see ``graceful_read``);
writes roll back, log and re-raise so lost data is never silent.
"""

from __future__ import annotations

import logging
import shutil
from datetime import date, timedelta
from pathlib import Path
from typing import List, Optional, Union

import sqlalchemy as sa
from sqlalchemy.exc import SQLAlchemyError

from journalapp.core.utils.dates import (
    DateLike,
    NonCanonicalDateError,
    as_date,
    format_date,
    is_canonical_date,
    now,
)
from journalapp.core.utils.results import READ_ERRORS, ReadResult, graceful_read, read_outcome
from journalapp.domains.journal.mappers import entry_values, map_entry
from journalapp.domains.journal.models import JournalEntry
from journalapp.domains.journal.schemas.journal_schemas import (
    NO_ENTRIES,
    NO_MOOD_DATA,
    JournalEntryData,
    JournalStatistics,
)
from journalapp.domains.journal.services.mood_service import categorize_mood
from journalapp.extensions import db

logger = logging.getLogger(__name__)

_RAW_ENTRY_DATE = sa.type_coerce(JournalEntry.entry_date, sa.String)
_MOOD_COLUMNS = (JournalEntry.primary_mood, JournalEntry.secondary_mood1, JournalEntry.secondary_mood2)


class EntryNotFoundError(LookupError):
    """Raised when an update names an entry the owner does not have."""


class EntryStore:
    """User-scoped storage of journal entries on the default database bind."""

    def ensure_schema(self) -> None:
        db.create_all(bind_key=None)

    # ------------------------------------------------------------------ writes

    def save(self, entry: JournalEntryData, user_id: Optional[int] = None) -> JournalEntryData:
        """Insert ``entry`` when its id is 0, otherwise update it in place.

        Updating an id the owner does not have raises ``EntryNotFoundError``.
        """
        if user_id is not None:
            entry.user_id = user_id
        if entry.entry_date is None:
            entry.entry_date = date.today()
        if not entry.mood_category:
            entry.mood_category = categorize_mood(entry.primary_mood) or ""

        try:
            if not entry.id:
                self._insert(entry)
            else:
                self._update(entry)
        except SQLAlchemyError:
            db.session.rollback()
            logger.exception("Saving entry %s for user %s failed", entry.id, entry.user_id)
            raise
        return entry

    def _insert(self, entry: JournalEntryData) -> None:
        stamp = now()
        row = JournalEntry(user_id=entry.user_id, created_at=stamp, updated_at=stamp, **entry_values(entry))
        db.session.add(row)
        db.session.commit()
        entry.id = row.id
        entry.created_at = stamp
        entry.updated_at = stamp
        logger.info("Inserted entry %s for user %s on %s", entry.id, entry.user_id, entry.entry_date)

    def _update(self, entry: JournalEntryData) -> None:
        row = db.session.execute(
            sa.select(JournalEntry).where(JournalEntry.id == entry.id, JournalEntry.user_id == entry.user_id)
        ).scalar_one_or_none()
        if row is None:
            logger.warning("No entry %s owned by user %s to update", entry.id, entry.user_id)
            raise EntryNotFoundError(f"no entry {entry.id} owned by user {entry.user_id}")
        for key, value in entry_values(entry).items():
            setattr(row, key, value)
        row.updated_at = now()
        db.session.commit()
        entry.created_at = row.created_at
        entry.updated_at = row.updated_at
        logger.info("Updated entry %s for user %s", entry.id, entry.user_id)

    def delete(self, entry_id: int, user_id: Optional[int] = None) -> bool:
        stmt = sa.delete(JournalEntry).where(JournalEntry.id == entry_id)
        if user_id is not None:
            stmt = stmt.where(JournalEntry.user_id == user_id)
        try:
            removed = db.session.execute(stmt).rowcount
            db.session.commit()
        except SQLAlchemyError:
            db.session.rollback()
            logger.exception("Deleting entry %s (user %s) failed", entry_id, user_id)
            raise
        logger.info("Deleted %s row(s) for entry %s", removed, entry_id)
        return removed > 0

    def clear_user_entries(self, user_id: int) -> int:
        try:
            removed = db.session.execute(sa.delete(JournalEntry).where(JournalEntry.user_id == user_id)).rowcount
            db.session.commit()
        except SQLAlchemyError:
            db.session.rollback()
            logger.exception("Clearing entries of user %s failed", user_id)
            raise
        logger.info("Cleared %s entries for user %s", removed, user_id)
        return removed

    # ------------------------------------------------------------------- reads

    def read_outcome(self, operation: str, *args, **kwargs) -> ReadResult:
        """Run a read operation and report whether it degraded to its default."""
        return read_outcome(self, operation, *args, **kwargs)

    @graceful_read()
    def get_by_id(self, entry_id: int, user_id: Optional[int] = None) -> Optional[JournalEntryData]:
        if entry_id <= 0:
            return None
        stmt = sa.select(JournalEntry).where(JournalEntry.id == entry_id)
        if user_id is not None:
            stmt = stmt.where(JournalEntry.user_id == user_id)
        found = self._fetch(stmt)
        if not found:
            logger.debug("No entry found with id %s", entry_id)
            return None
        return found[0]

    @graceful_read(list)
    def get_all_for_user(self, user_id: int) -> List[JournalEntryData]:
        return self._load_user_entries(user_id)

    @graceful_read(list)
    def get_all_entries(self, user_id: Optional[int] = None) -> List[JournalEntryData]:
        if user_id is not None:
            return self._load_user_entries(user_id)
        return self._fetch(sa.select(JournalEntry))

    @graceful_read(list)
    def get_by_date_range(self, start: DateLike, end: DateLike, user_id: int) -> List[JournalEntryData]:
        try:
            return self.query_date_range(start, end, user_id)
        except READ_ERRORS as exc:
            db.session.rollback()
            logger.warning("Date-range query for user %s failed (%s); filtering in memory", user_id, exc)
            return self.filter_date_range(start, end, user_id)

    def query_date_range(self, start: DateLike, end: DateLike, user_id: int) -> List[JournalEntryData]:
        """Primary tier: compare the stored ``YYYY-MM-DD`` text in SQL.

        Raises ``NonCanonicalDateError`` when any of the user's rows holds a
        date in another format, since text comparison would then be wrong.
        """
        stored = db.session.execute(sa.select(_RAW_ENTRY_DATE).where(JournalEntry.user_id == user_id)).scalars()
        odd = [value for value in stored if not is_canonical_date(value)]
        if odd:
            raise NonCanonicalDateError(f"{len(odd)} entries with non-canonical dates, e.g. {odd[0]!r}")
        day = sa.func.substr(_RAW_ENTRY_DATE, 1, 10)
        stmt = (
            sa.select(JournalEntry)
            .where(
                JournalEntry.user_id == user_id,
                day >= format_date(as_date(start)),
                day <= format_date(as_date(end)),
            )
            .order_by(day.desc(), JournalEntry.id.desc())
        )
        return self._fetch(stmt)

    def filter_date_range(self, start: DateLike, end: DateLike, user_id: int) -> List[JournalEntryData]:
        """Fallback tier: filter and sort the user's parsed entries in memory."""
        first, last = as_date(start), as_date(end)
        return [e for e in self._load_user_entries(user_id) if first <= e.entry_date <= last]

    @graceful_read()
    def get_for_date(self, day: DateLike, user_id: int) -> Optional[JournalEntryData]:
        stmt = (
            sa.select(JournalEntry)
            .where(JournalEntry.user_id == user_id, _RAW_ENTRY_DATE.startswith(format_date(as_date(day)), autoescape=True))
            .order_by(JournalEntry.id)
            .limit(1)
        )
        found = self._fetch(stmt)
        return found[0] if found else None

    @graceful_read(list)
    def get_by_mood(self, mood: str, user_id: int) -> List[JournalEntryData]:
        matches_mood = sa.or_(*(column == mood for column in _MOOD_COLUMNS))
        stmt = sa.select(JournalEntry).where(JournalEntry.user_id == user_id, matches_mood)
        return self._fetch(stmt)

    @graceful_read(list)
    def get_by_tag(self, tag: str, user_id: int) -> List[JournalEntryData]:
        stmt = sa.select(JournalEntry).where(JournalEntry.user_id == user_id, JournalEntry.tags.contains(tag, autoescape=True))
        return self._fetch(stmt)

    @graceful_read(list)
    def search(self, term: str, user_id: int) -> List[JournalEntryData]:
        needle = (term or "").strip().lower()
        if not needle:
            return self._load_user_entries(user_id)
        columns = (JournalEntry.title, JournalEntry.content, JournalEntry.tags)
        stmt = (
            sa.select(JournalEntry)
            .where(
                JournalEntry.user_id == user_id,
                sa.or_(*(sa.func.lower(column, type_=sa.String).contains(needle, autoescape=True) for column in columns)),
            )
        )
        return self._fetch(stmt)

    @graceful_read(list)
    def get_user_categories(self, user_id: int) -> List[str]:
        stmt = (
            sa.select(JournalEntry.category)
            .distinct()
            .where(JournalEntry.user_id == user_id, JournalEntry.category.is_not(None), JournalEntry.category != "")
            .order_by(JournalEntry.category)
        )
        return list(db.session.execute(stmt).scalars())

    @graceful_read(list)
    def get_user_moods(self, user_id: int) -> List[str]:
        moods = sa.union(
            *(
                sa.select(column.label("mood")).where(
                    JournalEntry.user_id == user_id, column.is_not(None), column != ""
                )
                for column in _MOOD_COLUMNS
            )
        ).subquery()
        return list(db.session.execute(sa.select(moods.c.mood).order_by(moods.c.mood)).scalars())

    @graceful_read()
    def get_most_common_mood(self, user_id: int) -> Optional[str]:
        return self._most_common_mood(user_id)

    @graceful_read(lambda: 0)
    def get_entry_count(self, user_id: int) -> int:
        stmt = sa.select(sa.func.count()).select_from(JournalEntry).where(JournalEntry.user_id == user_id)
        return int(db.session.execute(stmt).scalar_one())

    @graceful_read()
    def get_last_entry_date(self, user_id: int) -> Optional[date]:
        entries = self._load_user_entries(user_id)
        return max((e.entry_date for e in entries), default=None)

    @graceful_read(lambda: 0)
    def get_streak_count(self, user_id: int) -> int:
        return _streak(self._load_user_entries(user_id), date.today())

    @graceful_read(JournalStatistics)
    def get_statistics(self, user_id: int) -> JournalStatistics:
        entries = self._load_user_entries(user_id)
        total_words = sum(e.word_count for e in entries)
        last_date = max((e.entry_date for e in entries), default=None)
        stats = JournalStatistics(
            total_entries=len(entries),
            total_words=total_words,
            average_words=total_words // len(entries) if entries else 0,
            current_streak=_streak(entries, date.today()),
            most_common_mood=self._most_common_mood(user_id) or NO_MOOD_DATA,
            last_entry_date=format_date(last_date) if last_date else NO_ENTRIES,
        )
        logger.debug(
            "Statistics for user %s: total=%s streak=%s avg_words=%s",
            user_id,
            stats.total_entries,
            stats.current_streak,
            stats.average_words,
        )
        return stats

    # ------------------------------------------------------------------ backup

    def backup(self, destination: Union[str, Path]) -> bool:
        """Copy the live entries database file to ``destination``."""
        target = Path(destination)
        engine = db.engines[None]
        try:
            source = Path(engine.url.database or "")
            target.parent.mkdir(parents=True, exist_ok=True)
            # Release pooled connections so the file is quiescent while copied.
            db.session.close()
            engine.dispose()
            shutil.copyfile(source, target)
            with engine.connect() as conn:
                conn.execute(sa.text("SELECT 1"))
        except (OSError, SQLAlchemyError):
            logger.exception("Backing up %s to %s failed", engine.url.database, target)
            return False
        logger.info("Database backed up to %s", target)
        return True

    # ----------------------------------------------------------------- helpers

    def _fetch(self, stmt) -> List[JournalEntryData]:
        rows = db.session.execute(stmt).scalars().all()
        # Rows with a non-positive id are transient leftovers, never results.
        return _newest_first([map_entry(row) for row in rows if row.id and row.id > 0])

    def _load_user_entries(self, user_id: int) -> List[JournalEntryData]:
        stmt = sa.select(JournalEntry).where(JournalEntry.user_id == user_id)
        return self._fetch(stmt)

    def _most_common_mood(self, user_id: int) -> Optional[str]:
        occurrences = sa.func.count().label("occurrences")
        stmt = (
            sa.select(JournalEntry.primary_mood, occurrences)
            .where(
                JournalEntry.user_id == user_id,
                JournalEntry.primary_mood.is_not(None),
                JournalEntry.primary_mood != "",
            )
            .group_by(JournalEntry.primary_mood)
            .order_by(occurrences.desc(), JournalEntry.primary_mood)
            .limit(1)
        )
        row = db.session.execute(stmt).first()
        return row[0] if row else None


def _newest_first(entries: List[JournalEntryData]) -> List[JournalEntryData]:
    """Order by parsed entry date, then id, both descending."""
    entries.sort(key=lambda e: (e.entry_date, e.id), reverse=True)
    return entries


def _streak(entries: List[JournalEntryData], today: date) -> int:
    """Consecutive days with an entry, walking back from ``today``."""
    days = {e.entry_date for e in entries}
    streak = 0
    current = today
    while current in days:
        streak += 1
        current -= timedelta(days=1)
    return streak
