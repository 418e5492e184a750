"""Assemble :class:`PitchDeckInfo` from extracted pitch-deck text."""
from __future__ import annotations

import logging

from app.models.analysis_models import ExtractionPath, PitchDeckInfo
from app.services.scoring import confidence_score, detail_score
from app.services.section_parser import parse_sections
from app.services.sentiment import analyze_sentiment


logger = logging.getLogger(__name__)


def build_pitch_deck_info(
    text: str, *, extraction_path: ExtractionPath = ExtractionPath.EXTRACTED
) -> PitchDeckInfo:
    fields = parse_sections(text)
    sentiment = analyze_sentiment(text)

    tech_score = detail_score(fields["tech_details"])
    gtm_score = detail_score(fields["gtm_details"])

    info = PitchDeckInfo(
        **fields,
        overall_sentiment=sentiment.label,
        sentiment_scores=sentiment.scores,
        tech_score=tech_score,
        gtm_score=gtm_score,
        confidence_score=confidence_score(tech_score, gtm_score),
        extraction_path=extraction_path,
    )
    logger.info(
        "Processed pitch deck",
        extra={
            "tech_details": len(info.tech_details),
            "gtm_details": len(info.gtm_details),
            "overall_sentiment": info.overall_sentiment.value,
            "tech_score": info.tech_score,
            "gtm_score": info.gtm_score,
            "confidence_score": info.confidence_score,
        },
    )
    return info
