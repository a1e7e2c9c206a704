"""Journal value objects and request schemas."""

from __future__ import annotations

import math
from datetime import date, datetime
from typing import List, Optional, Union

from pydantic import BaseModel, Field, computed_field, field_validator

WORDS_PER_MINUTE = 200
TAG_DELIMITER = ","

NO_MOOD_DATA = "No data"
NO_ENTRIES = "No entries"


def _join_tags(value: Union[str, List[str], None]) -> Optional[str]:
    if value is None or isinstance(value, str):
        return value
    return ", ".join(tag.strip() for tag in value if tag and tag.strip())


class JournalEntryData(BaseModel):
    """Transient journal entry handed to and returned from the entry store.

    ``id == 0`` means the entry has not been persisted yet.
    """

    id: int = 0
    user_id: int = 1
    entry_date: Optional[date] = None
    title: str = ""
    content: str = ""
    primary_mood: str = ""
    secondary_mood1: str = ""
    secondary_mood2: str = ""
    mood_category: str = ""
    category: str = ""
    tags: str = ""
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @computed_field  # type: ignore[prop-decorator]
    @property
    def word_count(self) -> int:
        return len(self.content.split()) if self.content else 0

    @computed_field  # type: ignore[prop-decorator]
    @property
    def reading_time(self) -> int:
        return math.ceil(self.word_count / WORDS_PER_MINUTE)

    @computed_field  # type: ignore[prop-decorator]
    @property
    def tag_list(self) -> List[str]:
        return [tag.strip() for tag in self.tags.split(TAG_DELIMITER) if tag.strip()]


class JournalStatistics(BaseModel):
    total_entries: int = 0
    total_words: int = 0
    average_words: int = 0
    current_streak: int = 0
    most_common_mood: str = NO_MOOD_DATA
    last_entry_date: str = NO_ENTRIES


class JournalEntryCreate(BaseModel):
    title: Optional[str] = Field(default=None, max_length=255)
    content: Optional[str] = None
    entry_date: Optional[date] = None
    primary_mood: Optional[str] = Field(default=None, max_length=64)
    secondary_mood1: Optional[str] = Field(default=None, max_length=64)
    secondary_mood2: Optional[str] = Field(default=None, max_length=64)
    mood_category: Optional[str] = Field(default=None, max_length=64)
    category: Optional[str] = Field(default=None, max_length=128)
    tags: Optional[str] = None

    @field_validator("tags", mode="before")
    @classmethod
    def join_tag_list(cls, value):
        return _join_tags(value)


class JournalEntryUpdate(JournalEntryCreate):
    pass


class JournalEntryListFilter(BaseModel):
    date_from: Optional[date] = None
    date_to: Optional[date] = None
    mood: Optional[str] = None
    tag: Optional[str] = None
    q: Optional[str] = None
