"""Deterministic heuristic scores derived from extracted detail lines."""
from __future__ import annotations

import math
from typing import Optional, Sequence


def clamp_score(value: Optional[float], upper: float = 1.0) -> float:
    """Clamp to ``[0, upper]``; missing or non-finite values count as zero."""

    if value is None or isinstance(value, bool):
        return 0.0
    try:
        number = float(value)
    except (TypeError, ValueError):
        return 0.0
    if not math.isfinite(number):
        return 0.0
    return min(max(number, 0.0), upper)


def detail_score(details: Sequence[str]) -> float:
    """0.5 for any detail plus 0.1 per line, saturating at 1.0 after five lines."""

    count = len(details)
    base = 0.5 if count > 0 else 0.0
    bonus = min(count * 0.1, 0.5)
    return round(clamp_score(base + bonus), 2)


def confidence_score(tech_score: float, gtm_score: float) -> float:
    return round(clamp_score((clamp_score(tech_score) + clamp_score(gtm_score)) / 2), 2)


def list_length_score(points: Sequence[object]) -> float:
    """Fallback score from due-diligence list length when no pitch deck was parsed."""

    return round(min(len(points) * 0.2, 1.0), 2)
