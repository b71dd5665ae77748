"""wmagent/motivation/sentiment.py

Plan-text sentiment.

This is a heuristic, not a contract: MotivationSystem accepts any
SentimentClassifier. KeywordSentimentClassifier reproduces the substring
keyword check the agent shipped with.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Protocol, Tuple

DEFAULT_POSITIVE: Tuple[str, ...] = ("happy", "excited", "good")
DEFAULT_NEGATIVE: Tuple[str, ...] = ("sad", "tired", "stressed")


@dataclass(frozen=True)
class Sentiment:
    positive: bool = False
    negative: bool = False


class SentimentClassifier(Protocol):
    def classify(self, text: str) -> Sentiment: ...


class KeywordSentimentClassifier:
    """Case-insensitive substring match against positive/negative keyword lists."""

    def __init__(
        self,
        positive: Iterable[str] = DEFAULT_POSITIVE,
        negative: Iterable[str] = DEFAULT_NEGATIVE,
    ):
        self.positive = tuple(w.lower() for w in positive)
        self.negative = tuple(w.lower() for w in negative)

    def classify(self, text: str) -> Sentiment:
        lowered = str(text).lower()
        return Sentiment(
            positive=any(w in lowered for w in self.positive),
            negative=any(w in lowered for w in self.negative),
        )
