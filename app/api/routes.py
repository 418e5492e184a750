"""API routes for the startup idea analyzer."""
from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, File, Form, UploadFile
from fastapi.responses import Response

from app.dependencies import get_analysis_service, get_doc_builder
from app.models.analysis_models import AnalysisResult, FeedbackRequest, OperationResponse
from app.services.analysis_service import AnalysisService
from app.services.doc_builder import DOCX_MEDIA_TYPE, DocxBuilder


router = APIRouter()


@router.post("/generate-idea", response_model=AnalysisResult)
async def generate_idea(
    query: Optional[str] = Form(None),
    target_market: Optional[str] = Form(None, alias="targetMarket"),
    startup_stage: Optional[str] = Form(None, alias="startupStage"),
    custom_weights: Optional[str] = Form(None, alias="customWeights"),
    pitch_deck: Optional[UploadFile] = File(None, alias="pitchDeck"),
    service: AnalysisService = Depends(get_analysis_service),
) -> AnalysisResult:
    return await service.analyze_submission(
        query=query,
        target_market=target_market,
        startup_stage=startup_stage,
        custom_weights=custom_weights,
        pitch_deck=pitch_deck,
    )


@router.put("/generate-idea", response_model=OperationResponse)
def submit_feedback(
    payload: FeedbackRequest,
    service: AnalysisService = Depends(get_analysis_service),
) -> OperationResponse:
    service.record_feedback(payload)
    return OperationResponse(message="Feedback received")


@router.post("/generate-idea/export")
def export_analysis(
    analysis: AnalysisResult,
    builder: DocxBuilder = Depends(get_doc_builder),
) -> Response:
    filename = f"analysis_{analysis.analysis_id or 'export'}.docx"
    return Response(
        content=builder.build(analysis),
        media_type=DOCX_MEDIA_TYPE,
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )
