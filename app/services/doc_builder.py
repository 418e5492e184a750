"""Render an analysis as a DOCX investment memo."""
from __future__ import annotations

from io import BytesIO
from typing import Any, Dict

from docx import Document

from app.models.analysis_models import AnalysisResult, DueDiligencePoint


DOCX_MEDIA_TYPE = "application/vnd.openxmlformats-officedocument.wordprocessingml.document"

SCORE_LABELS = (
    ("global_score", "Global Score"),
    ("confidence_score", "Confidence Score"),
    ("tech_score", "Technology Score"),
    ("gtm_score", "Go-to-Market Score"),
)


def _format_point(point: DueDiligencePoint) -> str:
    if point.score is None:
        return point.point
    return f"{point.point} (score {point.score:.2f})"


class DocxBuilder:
    def build(self, analysis: AnalysisResult) -> bytes:
        document = Document()
        title = analysis.idea[:80] if analysis.idea else analysis.analysis_id
        document.add_heading(f"Investment Memo - {title}", level=0)

        document.add_heading("Scores", level=1)
        table = document.add_table(rows=0, cols=2)
        for attribute, label in SCORE_LABELS:
            cells = table.add_row().cells
            cells[0].text = label
            cells[1].text = f"{getattr(analysis, attribute):.2f}"
        if analysis.weights is not None:
            document.add_paragraph(
                f"Stage: {analysis.startup_stage.value}. Weights: technology "
                f"{analysis.weights.tech:.2f}, go-to-market {analysis.weights.gtm:.2f}, "
                f"investment memo {analysis.weights.investment_memo:.2f}."
            )

        for section, payload in self._sections(analysis).items():
            document.add_heading(section.replace("_", " ").title(), level=1)
            self._render_section(document, payload)

        buffer = BytesIO()
        document.save(buffer)
        return buffer.getvalue()

    def _sections(self, analysis: AnalysisResult) -> Dict[str, Any]:
        memo = analysis.investment_memo.model_dump(exclude={"quality_scores"})
        return {
            "investment_memo": memo,
            "swot": analysis.swot.model_dump(),
            "critical_questions": analysis.critical_questions,
            "action_plan": analysis.action_plan,
            "target_market_strategies": analysis.target_market_strategies,
            "competition": analysis.competition,
            "market_demand_indicators": analysis.market_demand_indicators,
            "frameworks": analysis.frameworks,
            "technical_due_diligence": [_format_point(p) for p in analysis.due_diligence_tech],
            "go_to_market_due_diligence": [_format_point(p) for p in analysis.due_diligence_gtm],
            "industry_averages": analysis.industry_averages.model_dump(),
        }

    def _render_section(self, document: Document, payload: Any) -> None:
        if isinstance(payload, dict):
            for key, value in payload.items():
                document.add_paragraph(f"{key.replace('_', ' ').title()}:")
                self._render_section(document, value)
        elif isinstance(payload, list):
            for item in payload:
                if isinstance(item, (dict, list)):
                    self._render_section(document, item)
                else:
                    document.add_paragraph(str(item), style="List Bullet")
        else:
            document.add_paragraph(str(payload))
