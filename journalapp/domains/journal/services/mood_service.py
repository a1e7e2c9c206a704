"""Mood category lookup applied when an entry is written."""

from __future__ import annotations

from typing import Optional

POSITIVE = "positive"
NEUTRAL = "neutral"
NEGATIVE = "negative"

MOOD_CATEGORIES = {
    POSITIVE: (
        "happy",
        "excited",
        "relaxed",
        "grateful",
        "confident",
        "calm",
        "joyful",
        "hopeful",
        "proud",
        "content",
        "loved",
    ),
    NEUTRAL: (
        "thoughtful",
        "curious",
        "nostalgic",
        "bored",
        "reflective",
        "indifferent",
        "okay",
    ),
    NEGATIVE: (
        "sad",
        "angry",
        "stressed",
        "lonely",
        "anxious",
        "frustrated",
        "tired",
        "overwhelmed",
        "afraid",
        "jealous",
    ),
}

_CATEGORY_BY_MOOD = {mood: category for category, moods in MOOD_CATEGORIES.items() for mood in moods}


def categorize_mood(mood: Optional[str]) -> Optional[str]:
    """Return the broad category of a known mood, ``None`` otherwise."""
    if not mood:
        return None
    return _CATEGORY_BY_MOOD.get(mood.strip().lower())
