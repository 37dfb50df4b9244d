"""Keyword-overlap relevance scoring for historical messages.

A message's score is the fraction of prompt keywords it mentions.  A
keyword counts as mentioned when it is one of the message's tokens or,
more loosely, when it appears anywhere inside the lowercased text.  The
loose check lets "recipe" match "recipes" but also lets short keywords
such as "art" match "start"; that precision tradeoff is kept as-is.

Classes
-------
- RelevanceScorer  — scores messages against a keyword list
"""
from __future__ import annotations

from collections.abc import Sequence

from slack_llm_bot.context.keywords import tokenize
from slack_llm_bot.conversation.message import Message, ScoredMessage


def score_relevance(content: str, keywords: Sequence[str], min_length: int = 4) -> float:
    """Return the share of ``keywords`` found in ``content``, in [0, 1].

    An empty keyword list scores 0.0 for every message.
    """
    if not keywords:
        return 0.0

    text = content.lower()
    tokens = set(tokenize(text, min_length))
    matches = sum(1 for keyword in keywords if keyword in tokens or keyword in text)
    return matches / len(keywords)


class RelevanceScorer:
    """Score conversation messages against prompt keywords.

    Parameters
    ----------
    min_keyword_length:
        Shortest message token considered for exact matches.  Should match
        the length used when the keywords were extracted.
    """

    def __init__(self, min_keyword_length: int = 4) -> None:
        if min_keyword_length < 1:
            raise ValueError(
                f"min_keyword_length must be >= 1, got {min_keyword_length!r}."
            )
        self.min_keyword_length = min_keyword_length

    def score(self, message: Message, keywords: Sequence[str]) -> float:
        """Return the relevance of a single message."""
        return score_relevance(message.content, keywords, self.min_keyword_length)

    def score_many(
        self,
        messages: Sequence[Message],
        keywords: Sequence[str],
    ) -> list[ScoredMessage]:
        """Score every message, preserving input order.

        Parameters
        ----------
        messages:
            Candidate messages, oldest first.
        keywords:
            Keywords extracted from the current prompt.

        Returns
        -------
        list[ScoredMessage]
            One entry per input message, same order.
        """
        return [
            ScoredMessage(message=message, score=self.score(message, keywords))
            for message in messages
        ]

    def __repr__(self) -> str:
        return f"RelevanceScorer(min_keyword_length={self.min_keyword_length})"
