"""Error kinds raised by the analysis pipeline."""
from __future__ import annotations

from typing import Any, Dict, Optional


class AnalyzerError(Exception):
    """Base error carrying an internal message and a client-safe message."""

    code = "ANALYZER_ERROR"
    default_public_message = "Internal server error"

    def __init__(
        self,
        message: str,
        *,
        public_message: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.public_message = public_message or self.default_public_message
        self.details = details or {}


class InvalidInput(AnalyzerError):
    code = "INVALID_INPUT"
    default_public_message = "Invalid query or target market"

    def __init__(self, message: str, *, field: Optional[str] = None) -> None:
        super().__init__(message, public_message=message)
        self.field = field


class UnsupportedFormat(AnalyzerError):
    code = "UNSUPPORTED_FORMAT"
    default_public_message = "Invalid file type. Please upload a PDF or PowerPoint file."

    def __init__(self, extension: str) -> None:
        super().__init__(f"Unsupported pitch deck extension: {extension!r}")
        self.extension = extension


class ExtractionFailure(AnalyzerError):
    """Text-layer extraction failed; callers recover through OCR."""

    code = "EXTRACTION_FAILURE"


class OCRFailure(AnalyzerError):
    """OCR failed; callers recover with a placeholder string."""

    code = "OCR_FAILURE"


class UpstreamError(AnalyzerError):
    code = "UPSTREAM_ERROR"


class UpstreamTimeout(UpstreamError):
    code = "UPSTREAM_TIMEOUT"
    default_public_message = "The AI model did not respond in time"

    def __init__(self, operation: str, timeout_seconds: float) -> None:
        super().__init__(f"Operation '{operation}' timed out after {timeout_seconds} seconds")
        self.operation = operation
        self.timeout_seconds = timeout_seconds


class MalformedResponse(AnalyzerError):
    code = "MALFORMED_RESPONSE"
    default_public_message = "Invalid response from AI model"


class ConfigurationError(AnalyzerError):
    code = "CONFIGURATION_ERROR"
    default_public_message = "OpenAI API key is not configured"
