"""
Pytest fixtures for pitch deck extraction and analysis tests.
"""

import json
from io import BytesIO
from typing import Any, Callable, Dict, List, Optional, Union

import pytest

from app.config import AnalyzerSettings
from app.errors import OCRFailure
from app.services.analysis_service import AnalysisService
from app.services.extraction import TextExtractor
from app.services.feedback_repository import FeedbackRepository
from app.services.llm_client import LLMClient
from app.services.ocr import OcrEngine


SAMPLE_DECK_LINES = [
    "Acme Routing",
    "We are seeking $2M in seed funding to scale our innovative platform.",
    "Total addressable market of $4.5B across logistics.",
    "Projected revenue of $10M by 2027.",
    "Current customer base of 1,200+ merchants.",
    "A team of 12 employees across two offices.",
    "Technology:",
    "- AI-based route optimization",
    "- Real-time telemetry ingestion",
    "Go-To-Market:",
    "- Direct sales to mid-market carriers",
]


class FakeLLMClient(LLMClient):
    """Returns queued responses and records every prompt."""

    def __init__(self, responses: Union[str, List[str], Callable[[str], str]]) -> None:
        self.responses = responses
        self.prompts: List[str] = []

    def complete(self, prompt: str) -> str:
        self.prompts.append(prompt)
        if callable(self.responses):
            return self.responses(prompt)
        if isinstance(self.responses, list):
            return self.responses.pop(0)
        return self.responses


class FakeOcrEngine(OcrEngine):
    """OCR engine returning canned text, or failing when ``text`` is None."""

    name = "fake"

    def __init__(self, text: Optional[str] = "Scanned slide text") -> None:
        self.text = text
        self.calls: List[str] = []

    def image_to_text(self, image_bytes: bytes) -> str:
        self.calls.append("image")
        return self._result()

    def pdf_to_text(self, pdf_bytes: bytes) -> str:
        self.calls.append("pdf")
        return self._result()

    def _result(self) -> str:
        if self.text is None:
            raise OCRFailure("fake OCR failure")
        return self.text


def _create_pdf(lines: List[str]) -> bytes:
    """Create a PDF with one text line per row using reportlab."""
    from reportlab.lib.pagesizes import letter
    from reportlab.pdfgen import canvas

    buffer = BytesIO()
    c = canvas.Canvas(buffer, pagesize=letter)
    y = 750
    for line in lines:
        c.drawString(72, y, line)
        y -= 18
    c.showPage()
    c.save()
    return buffer.getvalue()


def _create_png() -> bytes:
    from PIL import Image

    buffer = BytesIO()
    Image.new("RGB", (40, 20), color="white").save(buffer, format="PNG")
    return buffer.getvalue()


def _create_pptx(with_picture: bool = True) -> bytes:
    """Create a PPTX deck using python-pptx."""
    from pptx import Presentation
    from pptx.util import Inches

    presentation = Presentation()
    layout = presentation.slide_layouts[1]

    slide = presentation.slides.add_slide(layout)
    slide.shapes.title.text = "Technology"
    slide.placeholders[1].text = "Edge inference engine\nEncrypted data pipeline"

    slide = presentation.slides.add_slide(layout)
    slide.shapes.title.text = "Go-To-Market"
    slide.placeholders[1].text = "Partnerships with clinics\nSelf-serve onboarding\nReferral program"

    if with_picture:
        slide = presentation.slides.add_slide(presentation.slide_layouts[5])
        slide.shapes.title.text = "Traction"
        slide.shapes.add_picture(BytesIO(_create_png()), Inches(1), Inches(2))

    buffer = BytesIO()
    presentation.save(buffer)
    return buffer.getvalue()


@pytest.fixture
def settings() -> AnalyzerSettings:
    return AnalyzerSettings(
        openai_api_key="test-key",
        feedback_log_path=None,
        summarize_pitch_deck=False,
    )


@pytest.fixture
def fake_ocr() -> FakeOcrEngine:
    return FakeOcrEngine()


@pytest.fixture
def feedback_repository() -> FeedbackRepository:
    return FeedbackRepository(path=None)


@pytest.fixture
def sample_pdf_bytes() -> bytes:
    return _create_pdf(SAMPLE_DECK_LINES)


@pytest.fixture
def blank_pdf_bytes() -> bytes:
    return _create_pdf(["Deck"])


@pytest.fixture
def sample_pptx_bytes() -> bytes:
    return _create_pptx()


@pytest.fixture
def sample_png_bytes() -> bytes:
    return _create_png()


@pytest.fixture
def llm_payload() -> Dict[str, Any]:
    """A model answer that satisfies the full response schema."""
    return {
        "idea": "AI scheduling assistant for freelancers",
        "swot": {
            "strengths": ["Clear niche"],
            "weaknesses": ["Crowded space"],
            "opportunities": ["Remote work growth"],
            "threats": ["Calendar incumbents"],
        },
        "criticalQuestions": ["How will you acquire users?", "What is the pricing?"],
        "actionPlan": ["Interview freelancers", "Build MVP", "Launch beta"],
        "targetMarketStrategies": ["Freelance communities", "Partnerships with marketplaces"],
        "competition": ["Calendly", "Motion"],
        "marketDemandIndicators": ["Growth of freelance workforce", "Search trends"],
        "frameworks": ["Lean Canvas", "Jobs to be Done"],
        "globalScore": 72,
        "confidenceScore": 65,
        "techScore": 70,
        "gtmScore": 60,
        "investmentMemo": {
            "summary": "A focused scheduling product.",
            "marketOpportunity": "Large and growing freelance market.",
            "businessModel": "Monthly subscription.",
            "competitiveAdvantage": "Freelancer-specific workflows.",
            "financialProjections": "Break-even in year three.",
            "fundingRequirements": "$500k pre-seed.",
            "qualityScores": {
                "summary": 80,
                "marketOpportunity": 70,
                "businessModel": 60,
                "competitiveAdvantage": 50,
                "financialProjections": 40,
                "fundingRequirements": 60,
            },
        },
        "dueDiligenceTech": [
            {"point": "Calendar API reliability", "score": 80},
            {"point": "Model accuracy", "score": 60},
        ],
        "dueDiligenceGTM": [{"point": "Channel fit", "score": 50}],
        "industryAverages": {
            "summary": "Typical seed memo",
            "marketOpportunity": "Multi-billion markets",
            "businessModel": "SaaS subscriptions",
            "competitiveAdvantage": "Workflow lock-in",
            "financialProjections": "3x year over year",
            "fundingRequirements": "$1M-$2M seed",
        },
    }


@pytest.fixture
def llm_response(llm_payload) -> str:
    return json.dumps(llm_payload)


@pytest.fixture
def make_service(settings, fake_ocr, feedback_repository):
    """Build an :class:`AnalysisService` around a fake model client."""

    def _make(llm_client: LLMClient, **overrides) -> AnalysisService:
        service_settings = settings.model_copy(update=overrides) if overrides else settings
        return AnalysisService(
            service_settings,
            extractor=TextExtractor(fake_ocr, min_pdf_text_chars=service_settings.min_pdf_text_chars),
            feedback_repository=feedback_repository,
            llm_client=llm_client,
        )

    return _make
