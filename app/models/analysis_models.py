"""Pydantic models for pitch-deck facts and analysis results."""
from __future__ import annotations

from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Serializes with the camelCase keys the client renders."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class StartupStage(str, Enum):
    EARLY = "early"
    GROWTH = "growth"
    LATE = "late"


class ExtractionPath(str, Enum):
    EXTRACTED = "extracted"
    FELL_BACK_TO_OCR = "fell_back_to_ocr"
    FAILED = "failed"


class SentimentLabel(str, Enum):
    POSITIVE = "positive"
    NEUTRAL = "neutral"
    NEGATIVE = "negative"


class SentimentScores(CamelModel):
    positive: float = 0.0
    negative: float = 0.0
    neutral: float = 0.0


class PitchDeckInfo(CamelModel):
    """Facts extracted from one uploaded pitch deck."""

    model_config = ConfigDict(frozen=True)

    funding_requirements: str
    tech_details: List[str] = Field(default_factory=list)
    gtm_details: List[str] = Field(default_factory=list)
    market_size: str
    competitive_advantage: str
    team_info: str
    team_size: str
    business_model: str
    revenue_projections: str
    customer_base: str
    overall_sentiment: SentimentLabel = SentimentLabel.NEUTRAL
    sentiment_scores: SentimentScores = Field(default_factory=SentimentScores)
    confidence_score: float = Field(default=0.0, ge=0.0, le=1.0)
    tech_score: float = Field(default=0.0, ge=0.0, le=1.0)
    gtm_score: float = Field(default=0.0, ge=0.0, le=1.0)
    extraction_path: ExtractionPath = ExtractionPath.EXTRACTED


class Weights(CamelModel):
    tech: float = Field(ge=0.0)
    gtm: float = Field(ge=0.0)
    investment_memo: float = Field(ge=0.0)

    @property
    def total(self) -> float:
        return self.tech + self.gtm + self.investment_memo


class Swot(CamelModel):
    strengths: List[str] = Field(default_factory=list)
    weaknesses: List[str] = Field(default_factory=list)
    opportunities: List[str] = Field(default_factory=list)
    threats: List[str] = Field(default_factory=list)


class MemoQualityScores(CamelModel):
    summary: Optional[float] = Field(default=None, ge=0.0, le=1.0)
    market_opportunity: Optional[float] = Field(default=None, ge=0.0, le=1.0)
    business_model: Optional[float] = Field(default=None, ge=0.0, le=1.0)
    competitive_advantage: Optional[float] = Field(default=None, ge=0.0, le=1.0)
    financial_projections: Optional[float] = Field(default=None, ge=0.0, le=1.0)
    funding_requirements: Optional[float] = Field(default=None, ge=0.0, le=1.0)

    def present(self) -> List[float]:
        return [value for value in self.model_dump().values() if value is not None]


class InvestmentMemo(CamelModel):
    summary: str = ""
    market_opportunity: str = ""
    business_model: str = ""
    competitive_advantage: str = ""
    financial_projections: str = ""
    funding_requirements: str = ""
    quality_scores: MemoQualityScores = Field(default_factory=MemoQualityScores)


class DueDiligencePoint(CamelModel):
    point: str
    score: Optional[float] = Field(default=None, ge=0.0, le=1.0)


class IndustryAverages(CamelModel):
    summary: str = ""
    market_opportunity: str = ""
    business_model: str = ""
    competitive_advantage: str = ""
    financial_projections: str = ""
    funding_requirements: str = ""


class AnalysisResult(CamelModel):
    analysis_id: str = ""
    idea: str = ""
    swot: Swot = Field(default_factory=Swot)
    critical_questions: List[str] = Field(default_factory=list)
    action_plan: List[str] = Field(default_factory=list)
    target_market_strategies: List[str] = Field(default_factory=list)
    competition: List[str] = Field(default_factory=list)
    market_demand_indicators: List[str] = Field(default_factory=list)
    frameworks: List[str] = Field(default_factory=list)
    investment_memo: InvestmentMemo = Field(default_factory=InvestmentMemo)
    due_diligence_tech: List[DueDiligencePoint] = Field(default_factory=list)
    due_diligence_gtm: List[DueDiligencePoint] = Field(
        default_factory=list, alias="dueDiligenceGTM"
    )
    global_score: float = Field(default=0.0, ge=0.0, le=1.0)
    confidence_score: float = Field(default=0.0, ge=0.0, le=1.0)
    tech_score: float = Field(default=0.0, ge=0.0, le=1.0)
    gtm_score: float = Field(default=0.0, ge=0.0, le=1.0)
    industry_averages: IndustryAverages = Field(default_factory=IndustryAverages)
    pitch_deck_processed: bool = False
    startup_stage: StartupStage = StartupStage.EARLY
    weights: Optional[Weights] = None
    pitch_deck_info: Optional[PitchDeckInfo] = None


class FeedbackRequest(CamelModel):
    """Incoming payload for analysis feedback."""

    analysis_id: str
    rating: float = Field(ge=0, le=5)
    comments: str = ""


class OperationResponse(BaseModel):
    message: str
