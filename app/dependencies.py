"""Dependency wiring for FastAPI routes."""
from __future__ import annotations

import logging
from functools import lru_cache

from app.config import AnalyzerSettings
from app.services.analysis_service import AnalysisService
from app.services.doc_builder import DocxBuilder
from app.services.extraction import TextExtractor
from app.services.feedback_repository import FeedbackRepository
from app.services.ocr import DocumentAiOcrEngine, OcrEngine, TesseractOcrEngine


logger = logging.getLogger(__name__)


@lru_cache(maxsize=1)
def get_settings() -> AnalyzerSettings:
    return AnalyzerSettings.from_env()


def build_ocr_engine(settings: AnalyzerSettings) -> OcrEngine:
    if settings.document_ai_enabled:
        logger.info("Using Document AI processor %s for OCR", settings.document_ai_processor)
        return DocumentAiOcrEngine(
            project_id=settings.gcp_project_id,
            location=settings.gcp_location,
            processor_id=settings.document_ai_processor,
            credentials_path=settings.google_credentials_path,
            timeout_seconds=settings.ocr_timeout_seconds,
        )
    return TesseractOcrEngine(
        max_pages=settings.ocr_max_pages,
        dpi=settings.ocr_dpi,
        timeout_seconds=settings.ocr_timeout_seconds,
    )


@lru_cache(maxsize=1)
def get_extractor() -> TextExtractor:
    settings = get_settings()
    return TextExtractor(
        build_ocr_engine(settings), min_pdf_text_chars=settings.min_pdf_text_chars
    )


@lru_cache(maxsize=1)
def get_feedback_repository() -> FeedbackRepository:
    return FeedbackRepository(path=get_settings().feedback_log_path)


@lru_cache(maxsize=1)
def get_doc_builder() -> DocxBuilder:
    return DocxBuilder()


@lru_cache(maxsize=1)
def get_analysis_service() -> AnalysisService:
    return AnalysisService(
        get_settings(),
        extractor=get_extractor(),
        feedback_repository=get_feedback_repository(),
    )
