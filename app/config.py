"""Explicit configuration for the analysis pipeline."""
from __future__ import annotations

import os
from pathlib import Path
from typing import Dict, Optional

from pydantic import BaseModel, Field

from app.models.analysis_models import StartupStage, Weights


def default_stage_weights() -> Dict[StartupStage, Weights]:
    return {
        StartupStage.EARLY: Weights(tech=0.4, gtm=0.3, investment_memo=0.3),
        StartupStage.GROWTH: Weights(tech=0.3, gtm=0.4, investment_memo=0.3),
        StartupStage.LATE: Weights(tech=0.2, gtm=0.3, investment_memo=0.5),
    }


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes", "on"}


class AnalyzerSettings(BaseModel):
    """Settings passed into the pipeline entry point."""

    openai_api_key: Optional[str] = None
    openai_model: str = "gpt-3.5-turbo"
    llm_timeout_seconds: float = 60.0

    max_idea_chars: int = 2000
    max_target_market_chars: int = 300
    max_summary_words: int = 100
    max_summary_chars: int = 700
    max_summary_input_chars: int = 1000
    max_prompt_chars: int = 500_000
    max_deck_field_chars: int = 1000
    summarize_pitch_deck: bool = True

    min_pdf_text_chars: int = 100
    ocr_max_pages: int = 5
    ocr_dpi: int = 200
    ocr_timeout_seconds: float = 30.0

    gcp_project_id: Optional[str] = None
    gcp_location: Optional[str] = None
    document_ai_processor: Optional[str] = None
    google_credentials_path: Optional[str] = None

    feedback_log_path: Optional[Path] = Path("logs") / "feedback_and_analysis.json"
    recent_feedback_count: int = 5
    low_rating_threshold: float = 3.5

    stage_weights: Dict[StartupStage, Weights] = Field(default_factory=default_stage_weights)

    @property
    def document_ai_enabled(self) -> bool:
        return bool(self.document_ai_processor)

    @classmethod
    def from_env(cls) -> "AnalyzerSettings":
        values = {
            "openai_api_key": os.getenv("OPENAI_API_KEY") or None,
            "gcp_project_id": os.getenv("GCP_PROJECT_ID"),
            "gcp_location": os.getenv("GCP_LOCATION"),
            "document_ai_processor": os.getenv("DOCUMENT_AI_PROCESSOR"),
            "google_credentials_path": os.getenv("GOOGLE_APPLICATION_CREDENTIALS"),
            "summarize_pitch_deck": _env_bool("SUMMARIZE_PITCH_DECK", True),
        }
        optional = {
            "openai_model": "OPENAI_MODEL",
            "llm_timeout_seconds": "LLM_TIMEOUT_SECONDS",
            "max_deck_field_chars": "MAX_DECK_FIELD_CHARS",
            "min_pdf_text_chars": "MIN_PDF_TEXT_CHARS",
            "ocr_max_pages": "OCR_MAX_PAGES",
            "ocr_dpi": "OCR_DPI",
            "ocr_timeout_seconds": "OCR_TIMEOUT_SECONDS",
            "feedback_log_path": "FEEDBACK_LOG_PATH",
        }
        for field_name, env_name in optional.items():
            raw = os.getenv(env_name)
            if raw:
                values[field_name] = raw
        return cls(**values)
