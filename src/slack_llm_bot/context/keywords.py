"""Keyword extraction for the current prompt.

Functions
---------
- tokenize          — lowercase and split text into word tokens
- extract_keywords  — top-N salient terms ordered by frequency
"""
from __future__ import annotations

import re
from collections import Counter

MAX_KEYWORDS: int = 10

_NON_WORD = re.compile(r"\W+")
_DIGITS_ONLY = re.compile(r"\d+")

STOP_WORDS: frozenset[str] = frozenset(
    {
        "the", "be", "to", "of", "and", "a", "in", "that", "have", "i",
        "it", "for", "not", "on", "with", "he", "as", "you", "do", "at",
        "this", "but", "his", "by", "from", "they", "we", "say", "her", "she",
        "or", "an", "will", "my", "one", "all", "would", "there", "their",
        "what", "so", "up", "out", "if", "about", "who", "get", "which", "go",
        "me", "when", "make", "can", "like", "time", "no", "just", "him", "know",
        "take", "people", "into", "year", "your", "good", "some", "could", "them",
        "see", "other", "than", "then", "now", "look", "only", "come", "its", "over",
        "think", "also", "back", "after", "use", "two", "how", "our", "work",
        "first", "well", "way", "even", "new", "want", "because", "any", "these",
        "give", "day", "most", "us", "is", "are", "was", "were", "been", "has",
        "had", "does", "did", "am", "please", "thanks", "thank", "hello", "hi",
        "hey", "okay", "yes",
    }
)


def tokenize(text: str, min_length: int = 1) -> list[str]:
    """Lowercase ``text``, treat every non-word character as a separator,
    and return tokens of at least ``min_length`` characters in order."""
    return [t for t in _NON_WORD.sub(" ", text.lower()).split() if len(t) >= min_length]


def extract_keywords(text: str, min_length: int = 4) -> list[str]:
    """Return up to ``MAX_KEYWORDS`` distinct keywords from ``text``.

    Stop words and all-digit tokens are discarded.  Keywords are ordered
    by descending frequency; equal frequencies keep first-occurrence order.

    Parameters
    ----------
    text:
        Raw prompt text.
    min_length:
        Shortest token kept.

    Returns
    -------
    list[str]
        Lowercase keywords, most frequent first.  Empty for empty input.
    """
    words = [
        token
        for token in tokenize(text, min_length)
        if token not in STOP_WORDS and not _DIGITS_ONLY.fullmatch(token)
    ]
    if not words:
        return []

    # Counter preserves first-insertion order; sorted() is stable.
    frequency = Counter(words)
    ranked = sorted(frequency, key=lambda word: frequency[word], reverse=True)
    return ranked[:MAX_KEYWORDS]
