"""High level orchestration for startup idea analysis."""
from __future__ import annotations

import logging
import uuid
from dataclasses import dataclass, field
from typing import Dict, Optional

from fastapi import UploadFile
from starlette.concurrency import run_in_threadpool

from app.config import AnalyzerSettings
from app.errors import ConfigurationError, InvalidInput, UnsupportedFormat
from app.models.analysis_models import (
    AnalysisResult,
    ExtractionPath,
    FeedbackRequest,
    PitchDeckInfo,
    StartupStage,
)
from app.services.aggregator import (
    combine_scores,
    parse_custom_weights,
    parse_stage,
    resolve_weights,
)
from app.services.extraction import SUPPORTED_EXTENSIONS, TextExtractor, file_extension
from app.services.feedback_repository import FeedbackRepository
from app.services.llm_client import LLMClient, OpenAIChatClient
from app.services.pitch_deck import build_pitch_deck_info
from app.services.prompt_builder import PromptBuilder
from app.services.response_validator import parse_llm_json, validate_analysis


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AnalysisRequest:
    query: str
    target_market: Optional[str] = None
    stage: StartupStage = StartupStage.EARLY
    custom_weights: Dict[str, float] = field(default_factory=dict)

    @classmethod
    def from_form(
        cls,
        *,
        query: Optional[str],
        target_market: Optional[str] = None,
        startup_stage: Optional[str] = None,
        custom_weights: Optional[str] = None,
    ) -> "AnalysisRequest":
        if not isinstance(query, str) or not query.strip():
            raise InvalidInput("Invalid query or target market", field="query")
        if target_market is not None and not isinstance(target_market, str):
            raise InvalidInput("Invalid query or target market", field="targetMarket")
        return cls(
            query=query.strip(),
            target_market=(target_market or "").strip() or None,
            stage=parse_stage(startup_stage),
            custom_weights=parse_custom_weights(custom_weights),
        )


@dataclass(frozen=True)
class PitchDeckUpload:
    content: bytes
    extension: str


class AnalysisService:
    def __init__(
        self,
        settings: AnalyzerSettings,
        *,
        extractor: TextExtractor,
        feedback_repository: FeedbackRepository,
        llm_client: Optional[LLMClient] = None,
        prompt_builder: Optional[PromptBuilder] = None,
    ) -> None:
        self.settings = settings
        self.extractor = extractor
        self.feedback_repository = feedback_repository
        self.prompt_builder = prompt_builder or PromptBuilder(settings)
        self._llm_client = llm_client

    @property
    def llm_client(self) -> LLMClient:
        if self._llm_client is None:
            self._llm_client = OpenAIChatClient(
                api_key=self.settings.openai_api_key,
                model=self.settings.openai_model,
                timeout_seconds=self.settings.llm_timeout_seconds,
            )
        return self._llm_client

    def ensure_configured(self) -> None:
        if not self.settings.openai_api_key:
            raise ConfigurationError("OPENAI_API_KEY is not set")

    async def analyze_submission(
        self,
        *,
        query: Optional[str],
        target_market: Optional[str] = None,
        startup_stage: Optional[str] = None,
        custom_weights: Optional[str] = None,
        pitch_deck: Optional[UploadFile] = None,
    ) -> AnalysisResult:
        self.ensure_configured()
        request = AnalysisRequest.from_form(
            query=query,
            target_market=target_market,
            startup_stage=startup_stage,
            custom_weights=custom_weights,
        )

        upload: Optional[PitchDeckUpload] = None
        if pitch_deck is not None and pitch_deck.filename:
            extension = file_extension(pitch_deck.filename)
            if extension not in SUPPORTED_EXTENSIONS:
                raise UnsupportedFormat(extension)
            upload = PitchDeckUpload(content=await pitch_deck.read(), extension=extension)

        logger.info(
            "Received request",
            extra={
                "query_length": len(request.query),
                "has_target_market": request.target_market is not None,
                "startup_stage": request.stage.value,
                "has_pitch_deck": upload is not None,
            },
        )
        return await run_in_threadpool(self.analyze, request, upload)

    def analyze(
        self, request: AnalysisRequest, upload: Optional[PitchDeckUpload] = None
    ) -> AnalysisResult:
        """Run the blocking pipeline: extraction, model calls, validation and scoring."""

        self.ensure_configured()
        weights = resolve_weights(
            request.stage, request.custom_weights, self.settings.stage_weights
        )

        deck_info: Optional[PitchDeckInfo] = None
        deck_summary: Optional[str] = None
        if upload is not None:
            extraction = self.extractor.extract(upload.content, upload.extension)
            deck_info = build_pitch_deck_info(extraction.text, extraction_path=extraction.path)
            if self.settings.summarize_pitch_deck and extraction.path is not ExtractionPath.FAILED:
                deck_summary = self.llm_client.complete(
                    self.prompt_builder.summary_prompt(extraction.text)
                )

        prompt = self.prompt_builder.analysis_prompt(
            query=request.query,
            target_market=request.target_market,
            stage=request.stage,
            weights=weights,
            pitch_deck=deck_info,
            pitch_deck_summary=deck_summary,
        )
        prompt = self.prompt_builder.adjust_for_feedback(
            prompt, self.feedback_repository.recent_ratings(self.settings.recent_feedback_count)
        )
        logger.info("Generated prompt length: %s", len(prompt))

        payload = parse_llm_json(self.llm_client.complete(prompt))
        outcome = validate_analysis(payload, query=request.query, pitch_deck=deck_info)
        scores = combine_scores(
            weights=weights,
            pitch_deck=deck_info,
            reported_tech=outcome.reported_scores["tech"],
            reported_gtm=outcome.reported_scores["gtm"],
            tech_points=outcome.fields["due_diligence_tech"],
            gtm_points=outcome.fields["due_diligence_gtm"],
            memo_scores=outcome.fields["investment_memo"].quality_scores.present(),
        )

        result = AnalysisResult(
            analysis_id=uuid.uuid4().hex[:12],
            **outcome.fields,
            global_score=scores.global_score,
            confidence_score=scores.confidence,
            tech_score=scores.tech,
            gtm_score=scores.gtm,
            pitch_deck_processed=deck_info is not None,
            startup_stage=request.stage,
            weights=weights,
            pitch_deck_info=deck_info,
        )
        self._record_analysis(result)
        return result

    def record_feedback(self, feedback: FeedbackRequest) -> None:
        self.feedback_repository.append(feedback.model_dump(mode="json", by_alias=True), {})

    def _record_analysis(self, result: AnalysisResult) -> None:
        stub = {"analysisId": result.analysis_id, "rating": None, "comments": ""}
        try:
            self.feedback_repository.append(stub, result.model_dump(mode="json", by_alias=True))
        except OSError:
            logger.exception("Failed to append analysis %s to the audit log", result.analysis_id)
