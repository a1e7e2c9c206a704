"""Journal mappers from rows to transient values."""

from __future__ import annotations

from journalapp.domains.journal.models import JournalEntry
from journalapp.domains.journal.schemas.journal_schemas import JournalEntryData


def map_entry(entry: JournalEntry) -> JournalEntryData:
    return JournalEntryData(
        id=entry.id,
        user_id=entry.user_id,
        entry_date=entry.entry_date,
        title=entry.title or "",
        content=entry.content or "",
        primary_mood=entry.primary_mood or "",
        secondary_mood1=entry.secondary_mood1 or "",
        secondary_mood2=entry.secondary_mood2 or "",
        mood_category=entry.mood_category or "",
        category=entry.category or "",
        tags=entry.tags or "",
        created_at=entry.created_at,
        updated_at=entry.updated_at,
    )


def entry_values(data: JournalEntryData) -> dict:
    """Mutable column values for ``data``; empty strings are stored as NULL."""
    return {
        "title": data.title or None,
        "content": data.content or None,
        "entry_date": data.entry_date,
        "primary_mood": data.primary_mood or None,
        "secondary_mood1": data.secondary_mood1 or None,
        "secondary_mood2": data.secondary_mood2 or None,
        "mood_category": data.mood_category or None,
        "category": data.category or None,
        "tags": data.tags or None,
    }


def serialize_entry(data: JournalEntryData) -> dict:
    return data.model_dump(mode="json")
