"""Keyword sentiment scoring over extracted pitch-deck text."""
from __future__ import annotations

import re
from dataclasses import dataclass
from typing import FrozenSet, Iterable

from app.models.analysis_models import SentimentLabel, SentimentScores


POSITIVE_WORDS: FrozenSet[str] = frozenset(
    {
        "innovative",
        "growth",
        "opportunity",
        "leading",
        "unique",
        "efficient",
        "scalable",
        "profitable",
        "success",
    }
)
NEGATIVE_WORDS: FrozenSet[str] = frozenset(
    {
        "challenge",
        "risk",
        "difficult",
        "uncertain",
        "competitive",
        "costly",
        "problem",
        "threat",
    }
)


@dataclass(frozen=True)
class SentimentAnalysis:
    label: SentimentLabel
    scores: SentimentScores


def count_terms(text: str, vocabulary: Iterable[str]) -> int:
    return sum(
        len(re.findall(rf"\b{re.escape(word)}\b", text, flags=re.IGNORECASE))
        for word in vocabulary
    )


def _fraction(count: int, total: int) -> float:
    return min(max(count / total, 0.0), 1.0)


def analyze_sentiment(text: str) -> SentimentAnalysis:
    word_count = len(text.split())
    if word_count == 0:
        return SentimentAnalysis(
            label=SentimentLabel.NEUTRAL, scores=SentimentScores(neutral=1.0)
        )

    positive_count = count_terms(text, POSITIVE_WORDS)
    negative_count = count_terms(text, NEGATIVE_WORDS)
    neutral_count = max(word_count - positive_count - negative_count, 0)

    scores = SentimentScores(
        positive=_fraction(positive_count, word_count),
        negative=_fraction(negative_count, word_count),
        neutral=_fraction(neutral_count, word_count),
    )
    return SentimentAnalysis(label=dominant_sentiment(scores), scores=scores)


def dominant_sentiment(scores: SentimentScores) -> SentimentLabel:
    if scores.positive > scores.negative and scores.positive > scores.neutral:
        return SentimentLabel.POSITIVE
    if scores.negative > scores.positive and scores.negative > scores.neutral:
        return SentimentLabel.NEGATIVE
    return SentimentLabel.NEUTRAL
