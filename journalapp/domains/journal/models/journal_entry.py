"""Personal journal entry."""

from __future__ import annotations

from datetime import date, datetime

from sqlalchemy.orm import Mapped, mapped_column

from journalapp.core.utils.dates import TextDate, TextDateTime
from journalapp.extensions import db


class JournalEntry(db.Model):
    __tablename__ = "JournalEntries"
    __table_args__ = (
        db.Index("ix_journal_entries_user_entry_date", "UserId", "EntryDate"),
        {"sqlite_autoincrement": True},
    )

    id: Mapped[int] = mapped_column("Id", primary_key=True)
    # Ownership is enforced by query scoping; users live in another database.
    user_id: Mapped[int] = mapped_column("UserId", nullable=False, default=1, server_default="1")
    title: Mapped[str | None] = mapped_column("Title", db.Text)
    content: Mapped[str | None] = mapped_column("Content", db.Text)
    entry_date: Mapped[date] = mapped_column("EntryDate", TextDate, nullable=False)
    created_at: Mapped[datetime] = mapped_column("CreatedAt", TextDateTime, nullable=False)
    updated_at: Mapped[datetime] = mapped_column("UpdatedAt", TextDateTime, nullable=False)
    primary_mood: Mapped[str | None] = mapped_column("PrimaryMood", db.Text)
    secondary_mood1: Mapped[str | None] = mapped_column("SecondaryMood1", db.Text)
    secondary_mood2: Mapped[str | None] = mapped_column("SecondaryMood2", db.Text)
    mood_category: Mapped[str | None] = mapped_column("MoodCategory", db.Text)
    category: Mapped[str | None] = mapped_column("Category", db.Text)
    tags: Mapped[str | None] = mapped_column("Tags", db.Text)

    def __repr__(self) -> str:
        return f"<JournalEntry {self.id} {self.entry_date}>"
