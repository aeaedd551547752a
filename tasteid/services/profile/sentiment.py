"""
Tiny lexicon sentiment scorer for review text.

Only the spread of sentiment across a user's reviews matters to the engine,
so a word list is enough: no model, no external calls, fully deterministic.
"""

import re
from typing import Final

POSITIVE_WORDS: Final[frozenset[str]] = frozenset(
    {
        "amazing",
        "beautiful",
        "brilliant",
        "classic",
        "incredible",
        "love",
        "loved",
        "masterpiece",
        "perfect",
        "stunning",
        "favorite",
        "favourite",
        "gorgeous",
        "great",
        "excellent",
    }
)

NEGATIVE_WORDS: Final[frozenset[str]] = frozenset(
    {
        "awful",
        "boring",
        "bland",
        "disappointing",
        "forgettable",
        "hate",
        "hated",
        "mess",
        "terrible",
        "worst",
        "weak",
        "overrated",
        "annoying",
        "dull",
    }
)

EMOTIONAL_PATTERN: Final[re.Pattern[str]] = re.compile(r"[!?]{2,}|\blove\b|\bhate\b|\bamazing\b|\bterrible\b", re.I)

_TOKEN = re.compile(r"[a-z']+")


def polarity(text: str | None) -> float:
    """Sentiment in [-1, 1]; 0 for empty or neutral text."""
    if not text:
        return 0.0
    tokens = _TOKEN.findall(text.lower())
    positive = sum(1 for t in tokens if t in POSITIVE_WORDS)
    negative = sum(1 for t in tokens if t in NEGATIVE_WORDS)
    hits = positive + negative
    if hits == 0:
        return 0.0
    return (positive - negative) / hits


def is_emotional(text: str | None, min_chars: int) -> bool:
    return bool(text) and len(text) > min_chars and EMOTIONAL_PATTERN.search(text) is not None


def variance(values: list[float]) -> float:
    """Population variance; 0 for fewer than two values."""
    if len(values) < 2:
        return 0.0
    mean = sum(values) / len(values)
    return sum((v - mean) ** 2 for v in values) / len(values)
