"""Tests for the DOCX investment memo export."""

from io import BytesIO

from docx import Document

from app.models.analysis_models import AnalysisResult, StartupStage, Weights
from app.services.doc_builder import DocxBuilder
from app.services.response_validator import validate_analysis


def test_build_renders_scores_and_sections(llm_payload):
    outcome = validate_analysis(llm_payload, query="scheduling")
    analysis = AnalysisResult(
        analysis_id="abc123",
        **outcome.fields,
        global_score=0.66,
        startup_stage=StartupStage.GROWTH,
        weights=Weights(tech=0.3, gtm=0.4, investment_memo=0.3),
    )

    document = Document(BytesIO(DocxBuilder().build(analysis)))
    paragraphs = [p.text for p in document.paragraphs]
    cells = [cell.text for row in document.tables[0].rows for cell in row.cells]

    assert paragraphs[0] == "Investment Memo - AI scheduling assistant for freelancers"
    assert ["Global Score", "0.66"] == cells[:2]
    assert any(text.startswith("Stage: growth.") for text in paragraphs)
    assert "Technical Due Diligence" in paragraphs
    assert "Calendar API reliability (score 0.80)" in paragraphs
    assert "Interview freelancers" in paragraphs


def test_build_handles_empty_analysis():
    document = Document(BytesIO(DocxBuilder().build(AnalysisResult(analysis_id="empty"))))
    assert document.paragraphs[0].text == "Investment Memo - empty"
