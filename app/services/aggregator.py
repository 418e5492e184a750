"""Stage-weighted aggregation of heuristic and model-reported scores."""
from __future__ import annotations

import json
import logging
import math
from dataclasses import dataclass
from typing import Dict, Mapping, Optional, Sequence

from app.errors import InvalidInput
from app.models.analysis_models import DueDiligencePoint, PitchDeckInfo, StartupStage, Weights
from app.services.scoring import clamp_score, confidence_score, list_length_score


logger = logging.getLogger(__name__)

WEIGHT_KEY_ALIASES = {
    "tech": "tech",
    "gtm": "gtm",
    "investmentMemo": "investment_memo",
    "investment_memo": "investment_memo",
    "memo": "investment_memo",
}


@dataclass(frozen=True)
class ScoreBreakdown:
    tech: float
    gtm: float
    confidence: float
    investment_memo: float
    global_score: float


def parse_stage(raw: Optional[str]) -> StartupStage:
    if raw is None or not raw.strip():
        return StartupStage.EARLY
    try:
        return StartupStage(raw.strip().lower())
    except ValueError as exc:
        raise InvalidInput(
            "startupStage must be one of early, growth or late", field="startupStage"
        ) from exc


def parse_custom_weights(raw: Optional[str]) -> Dict[str, float]:
    """Decode the ``customWeights`` form field into canonical weight overrides."""

    if raw is None or not raw.strip():
        return {}
    try:
        decoded = json.loads(raw)
    except json.JSONDecodeError as exc:
        raise InvalidInput("customWeights must be a JSON object", field="customWeights") from exc
    if not isinstance(decoded, dict):
        raise InvalidInput("customWeights must be a JSON object", field="customWeights")

    overrides: Dict[str, float] = {}
    for key, value in decoded.items():
        canonical = WEIGHT_KEY_ALIASES.get(key)
        if canonical is None:
            raise InvalidInput(f"Unknown weight {key!r} in customWeights", field="customWeights")
        if value is None:
            continue
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            raise InvalidInput(f"Weight {key!r} must be a number", field="customWeights")
        if not math.isfinite(value) or value < 0:
            raise InvalidInput(
                f"Weight {key!r} must be a non-negative number", field="customWeights"
            )
        overrides[canonical] = float(value)
    return overrides


def resolve_weights(
    stage: StartupStage,
    overrides: Optional[Mapping[str, float]],
    table: Mapping[StartupStage, Weights],
) -> Weights:
    """Merge partial overrides over the stage default; weights are not renormalized."""

    merged = table[stage].model_dump()
    merged.update(overrides or {})
    return Weights(**merged)


def weighted_global_score(scores: Mapping[str, Optional[float]], weights: Weights) -> float:
    """Σ(score × weight) / Σ(weight), clamped to [0, 1]."""

    weight_map = weights.model_dump()
    total_weight = sum(weight_map.values())
    if total_weight <= 0:
        return 0.0
    weighted = sum(clamp_score(scores.get(key)) * weight for key, weight in weight_map.items())
    return round(clamp_score(weighted / total_weight), 2)


def reported_dimension_score(
    points: Sequence[DueDiligencePoint], reported: Optional[float]
) -> Optional[float]:
    """Mean of scored due-diligence points, else the model's dimension score."""

    scored = [point.score for point in points if point.score is not None]
    if scored:
        return sum(scored) / len(scored)
    return reported


def _dimension_score(
    heuristic: Optional[float], reported: Optional[float], points: Sequence[DueDiligencePoint]
) -> float:
    if heuristic is not None:
        if reported is None:
            return round(clamp_score(heuristic), 2)
        return round(clamp_score((heuristic + reported) / 2), 2)
    if reported is not None:
        return round(clamp_score(reported), 2)
    return list_length_score(points)


def combine_scores(
    *,
    weights: Weights,
    pitch_deck: Optional[PitchDeckInfo],
    reported_tech: Optional[float],
    reported_gtm: Optional[float],
    tech_points: Sequence[DueDiligencePoint],
    gtm_points: Sequence[DueDiligencePoint],
    memo_scores: Sequence[float],
) -> ScoreBreakdown:
    tech = _dimension_score(
        pitch_deck.tech_score if pitch_deck else None,
        reported_dimension_score(tech_points, reported_tech),
        tech_points,
    )
    gtm = _dimension_score(
        pitch_deck.gtm_score if pitch_deck else None,
        reported_dimension_score(gtm_points, reported_gtm),
        gtm_points,
    )
    confidence = confidence_score(tech, gtm)
    if memo_scores:
        memo = round(clamp_score(sum(memo_scores) / len(memo_scores)), 2)
    else:
        memo = confidence

    global_score = weighted_global_score(
        {"tech": tech, "gtm": gtm, "investment_memo": memo}, weights
    )
    logger.info(
        "Aggregated scores",
        extra={
            "tech_score": tech,
            "gtm_score": gtm,
            "confidence_score": confidence,
            "memo_score": memo,
            "global_score": global_score,
            "weights": weights.model_dump(),
        },
    )
    return ScoreBreakdown(
        tech=tech,
        gtm=gtm,
        confidence=confidence,
        investment_memo=memo,
        global_score=global_score,
    )
