"""Parse and validate the model's JSON answer against the analysis schema.

A single pass walks the schema below. Anything missing or ill-typed is
replaced with fixed placeholder content and recorded as a
:class:`SchemaViolation`, so the renderer never sees an undefined field.
Model scores follow the 0-100 scale requested in the prompt and are
converted to the [0, 1] scale here.
"""
from __future__ import annotations

import json
import logging
import math
import re
from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional, Tuple

from app.errors import MalformedResponse
from app.models.analysis_models import (
    DueDiligencePoint,
    IndustryAverages,
    InvestmentMemo,
    MemoQualityScores,
    PitchDeckInfo,
    Swot,
)
from app.services.section_parser import is_placeholder


logger = logging.getLogger(__name__)

CODE_FENCE_RE = re.compile(r"^```(?:json)?\s*(.*?)\s*```$", re.DOTALL | re.IGNORECASE)

LIST_FIELDS: Tuple[Tuple[str, str], ...] = (
    ("criticalQuestions", "critical_questions"),
    ("actionPlan", "action_plan"),
    ("targetMarketStrategies", "target_market_strategies"),
    ("competition", "competition"),
    ("marketDemandIndicators", "market_demand_indicators"),
    ("frameworks", "frameworks"),
)
SWOT_KEYS = ("strengths", "weaknesses", "opportunities", "threats")

MEMO_PLACEHOLDERS: Dict[str, str] = {
    "summary": (
        "Investment memo not provided by AI. Please review the startup idea and generate a summary."
    ),
    "marketOpportunity": (
        "Market opportunity analysis not provided. Review the target market and industry trends."
    ),
    "businessModel": (
        "Business model description not provided. Consider how the startup will generate revenue."
    ),
    "competitiveAdvantage": (
        "Competitive advantage not specified. Analyze what sets this startup apart from competitors."
    ),
    "financialProjections": (
        "Financial projections not provided. Estimate potential revenue and growth based on the "
        "market size and business model."
    ),
    "fundingRequirements": (
        "Funding requirements not specified. Determine the capital needed to launch and grow the "
        "startup."
    ),
}
DEFAULT_DUE_DILIGENCE_TECH = (
    "Conduct a thorough review of the proposed technology stack",
    "Assess the scalability of the technical solution",
    "Evaluate the team's technical expertise",
)
DEFAULT_DUE_DILIGENCE_GTM = (
    "Analyze the go-to-market strategy",
    "Evaluate the customer acquisition plan",
    "Assess the sales and marketing approach",
)
INDUSTRY_AVERAGE_PLACEHOLDER = "Industry average not provided."
SCORE_FIELDS: Tuple[Tuple[str, str], ...] = (
    ("globalScore", "global"),
    ("confidenceScore", "confidence"),
    ("techScore", "tech"),
    ("gtmScore", "gtm"),
)
IDEA_FALLBACK_CHARS = 200


@dataclass(frozen=True)
class SchemaViolation:
    path: str
    problem: str


@dataclass
class ValidationOutcome:
    fields: Dict[str, Any]
    reported_scores: Dict[str, Optional[float]]
    violations: List[SchemaViolation] = field(default_factory=list)

    @property
    def is_complete(self) -> bool:
        return not self.violations


def parse_llm_json(raw: str) -> Dict[str, Any]:
    """Decode the completion text; anything but a JSON object is malformed."""

    content = raw.strip()
    fenced = CODE_FENCE_RE.match(content)
    if fenced:
        content = fenced.group(1)
    try:
        payload = json.loads(content)
    except json.JSONDecodeError as exc:
        raise MalformedResponse(f"Model returned non-JSON content: {exc}") from exc
    if not isinstance(payload, dict):
        raise MalformedResponse(
            f"Model returned JSON {type(payload).__name__} instead of an object"
        )
    return payload


def normalize_score(value: Any) -> Optional[float]:
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, str):
        try:
            value = float(value.strip().rstrip("%"))
        except ValueError:
            return None
    if not isinstance(value, (int, float)) or not math.isfinite(value):
        return None
    number = float(value) / 100
    return round(min(max(number, 0.0), 1.0), 2)


def _snake(key: str) -> str:
    return re.sub(r"(?<!^)(?=[A-Z])", "_", key).lower()


def _lookup(payload: Mapping[str, Any], key: str) -> Any:
    if key in payload:
        return payload[key]
    snake = _snake(key)
    if snake in payload:
        return payload[snake]
    folded = key.replace("_", "").lower()
    for candidate, value in payload.items():
        if isinstance(candidate, str) and candidate.replace("_", "").lower() == folded:
            return value
    return None


def _as_text(value: Any) -> Optional[str]:
    if isinstance(value, str):
        return value.strip() or None
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return str(value)
    if isinstance(value, dict):
        parts = [_as_text(item) for item in value.values()]
        joined = "; ".join(part for part in parts if part)
        return joined or None
    return None


class _Validator:
    def __init__(self, payload: Mapping[str, Any]) -> None:
        self.payload = payload
        self.violations: List[SchemaViolation] = []

    def flag(self, path: str, problem: str) -> None:
        self.violations.append(SchemaViolation(path=path, problem=problem))

    def text(self, source: Mapping[str, Any], key: str, path: str, default: str) -> str:
        value = _lookup(source, key)
        if value is None:
            self.flag(path, "missing")
            return default
        text = _as_text(value)
        if text is None:
            self.flag(path, "expected non-empty text")
            return default
        return text

    def string_list(self, source: Mapping[str, Any], key: str, path: str) -> List[str]:
        value = _lookup(source, key)
        if value is None:
            self.flag(path, "missing")
            return []
        if isinstance(value, str):
            self.flag(path, "expected a list")
            return [value.strip()] if value.strip() else []
        if not isinstance(value, list):
            self.flag(path, "expected a list")
            return []
        items = [_as_text(item) for item in value]
        if any(item is None for item in items):
            self.flag(path, "dropped empty or non-text items")
        return [item for item in items if item is not None]

    def mapping(self, key: str, path: str) -> Mapping[str, Any]:
        value = _lookup(self.payload, key)
        if value is None:
            self.flag(path, "missing")
            return {}
        if not isinstance(value, dict):
            self.flag(path, "expected an object")
            return {}
        return value

    def due_diligence(
        self, key: str, defaults: Tuple[str, ...]
    ) -> List[DueDiligencePoint]:
        value = _lookup(self.payload, key)
        points: List[DueDiligencePoint] = []
        if isinstance(value, list):
            for item in value:
                point = self._due_diligence_point(item)
                if point is not None:
                    points.append(point)
        if points:
            return points
        self.flag(key, "missing" if value is None else "expected a non-empty list of points")
        return [DueDiligencePoint(point=text) for text in defaults]

    @staticmethod
    def _due_diligence_point(item: Any) -> Optional[DueDiligencePoint]:
        if isinstance(item, dict):
            text = None
            for text_key in ("point", "text", "description", "item"):
                text = _as_text(item.get(text_key))
                if text:
                    break
            if not text:
                return None
            return DueDiligencePoint(point=text, score=normalize_score(item.get("score")))
        text = _as_text(item)
        return DueDiligencePoint(point=text) if text else None

    def score(self, key: str) -> Optional[float]:
        value = _lookup(self.payload, key)
        if value is None:
            self.flag(key, "missing")
            return None
        score = normalize_score(value)
        if score is None:
            self.flag(key, "expected a number")
        return score


def validate_analysis(
    payload: Mapping[str, Any],
    *,
    query: str,
    pitch_deck: Optional[PitchDeckInfo] = None,
) -> ValidationOutcome:
    """Return a fully populated field set plus every repair that was needed."""

    validator = _Validator(payload)
    fields: Dict[str, Any] = {}

    idea_default = query.strip()[:IDEA_FALLBACK_CHARS]
    fields["idea"] = validator.text(payload, "idea", "idea", idea_default)

    swot_source = validator.mapping("swot", "swot")
    fields["swot"] = Swot(
        **{key: validator.string_list(swot_source, key, f"swot.{key}") for key in SWOT_KEYS}
    )

    for key, attribute in LIST_FIELDS:
        fields[attribute] = validator.string_list(payload, key, key)

    memo_source = validator.mapping("investmentMemo", "investmentMemo")
    memo_defaults = dict(MEMO_PLACEHOLDERS)
    if pitch_deck is not None and not is_placeholder(
        "funding_requirements", pitch_deck.funding_requirements
    ):
        memo_defaults["fundingRequirements"] = pitch_deck.funding_requirements
    memo_values = {
        key: validator.text(memo_source, key, f"investmentMemo.{key}", default)
        for key, default in memo_defaults.items()
    }
    quality_source = _lookup(memo_source, "qualityScores")
    if not isinstance(quality_source, dict):
        validator.flag("investmentMemo.qualityScores", "missing")
        quality_source = {}
    quality_scores = MemoQualityScores(
        **{key: normalize_score(_lookup(quality_source, key)) for key in MEMO_PLACEHOLDERS}
    )
    fields["investment_memo"] = InvestmentMemo(**memo_values, quality_scores=quality_scores)

    fields["due_diligence_tech"] = validator.due_diligence(
        "dueDiligenceTech", DEFAULT_DUE_DILIGENCE_TECH
    )
    fields["due_diligence_gtm"] = validator.due_diligence(
        "dueDiligenceGTM", DEFAULT_DUE_DILIGENCE_GTM
    )

    averages_source = validator.mapping("industryAverages", "industryAverages")
    fields["industry_averages"] = IndustryAverages(
        **{
            key: validator.text(
                averages_source, key, f"industryAverages.{key}", INDUSTRY_AVERAGE_PLACEHOLDER
            )
            for key in MEMO_PLACEHOLDERS
        }
    )

    reported_scores = {name: validator.score(key) for key, name in SCORE_FIELDS}

    if validator.violations:
        logger.warning(
            "Model response repaired with defaults",
            extra={
                "violation_count": len(validator.violations),
                "violations": [f"{v.path}: {v.problem}" for v in validator.violations],
            },
        )
    return ValidationOutcome(
        fields=fields, reported_scores=reported_scores, violations=validator.violations
    )
