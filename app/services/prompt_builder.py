"""Prompt templates for the analysis and pitch-deck summary calls."""
from __future__ import annotations

from typing import List, Optional, Sequence

from app.config import AnalyzerSettings
from app.models.analysis_models import PitchDeckInfo, StartupStage, Weights
from app.services.section_parser import is_placeholder


TRUNCATION_MARKER = "... (truncated)"

REQUIRED_SECTIONS = (
    "A brief summary of the idea",
    "A detailed SWOT analysis",
    "Critical questions that need to be addressed",
    "An action plan for moving forward",
    "Strategies for targeting the specified market",
    "An analysis of potential competitors",
    "Indicators of market demand",
    "Relevant business frameworks to consider",
    "A global score (0 to 100) based on the overall potential of the idea",
    "Separate scores for confidence, technology, and go-to-market strategy (each from 0 to 100)",
    "An investment memo including an executive summary, market opportunity analysis, business "
    "model description, competitive advantage analysis, financial projections summary, and "
    "funding requirements, each with a quality score from 0 to 100",
    "Due diligence points for both technology and go-to-market strategy, each with a score "
    "from 0 to 100",
    "Industry averages describing typical benchmarks for each investment memo section",
)

RESPONSE_SCHEMA = """{
  "idea": "Brief summary of the idea",
  "swot": {
    "strengths": ["Strength 1", "Strength 2"],
    "weaknesses": ["Weakness 1", "Weakness 2"],
    "opportunities": ["Opportunity 1", "Opportunity 2"],
    "threats": ["Threat 1", "Threat 2"]
  },
  "criticalQuestions": ["Question 1", "Question 2"],
  "actionPlan": ["Step 1", "Step 2"],
  "targetMarketStrategies": ["Strategy 1", "Strategy 2"],
  "competition": ["Competitor 1", "Competitor 2"],
  "marketDemandIndicators": ["Indicator 1", "Indicator 2"],
  "frameworks": ["Framework 1", "Framework 2"],
  "globalScore": 0,
  "confidenceScore": 0,
  "techScore": 0,
  "gtmScore": 0,
  "investmentMemo": {
    "summary": "Executive summary",
    "marketOpportunity": "Market opportunity analysis",
    "businessModel": "Business model description",
    "competitiveAdvantage": "Competitive advantage analysis",
    "financialProjections": "Financial projections summary",
    "fundingRequirements": "Funding requirements",
    "qualityScores": {
      "summary": 0,
      "marketOpportunity": 0,
      "businessModel": 0,
      "competitiveAdvantage": 0,
      "financialProjections": 0,
      "fundingRequirements": 0
    }
  },
  "dueDiligenceTech": [{"point": "Tech point 1", "score": 0}],
  "dueDiligenceGTM": [{"point": "GTM point 1", "score": 0}],
  "industryAverages": {
    "summary": "Typical executive summary quality",
    "marketOpportunity": "Typical market opportunity",
    "businessModel": "Typical business model",
    "competitiveAdvantage": "Typical competitive advantage",
    "financialProjections": "Typical financial projections",
    "fundingRequirements": "Typical funding requirements"
  }
}"""

LOW_RATING_GUIDANCE = (
    "Please ensure your analysis is more detailed and actionable. Focus on providing specific, "
    "data-driven insights and clear, practical recommendations."
)

NO_TECH_DETAILS = "No specific tech details found"
NO_GTM_DETAILS = "No specific GTM details found"


def truncate_text(text: str, limit: int) -> str:
    if len(text) <= limit:
        return text
    return text[:limit] + TRUNCATION_MARKER


def truncate_words(text: str, max_words: int) -> str:
    words = text.split()
    if len(words) <= max_words:
        return " ".join(words)
    return " ".join(words[:max_words]) + TRUNCATION_MARKER


class PromptBuilder:
    """Builds the single user message sent to the model."""

    def __init__(self, settings: AnalyzerSettings) -> None:
        self.settings = settings

    def summary_prompt(self, pitch_deck_text: str) -> str:
        content = truncate_text(pitch_deck_text, self.settings.max_summary_input_chars)
        return (
            "Summarize the key points of this pitch deck in "
            f"{self.settings.max_summary_words} words or less:\n\n{content}"
        )

    def clamp_summary(self, summary: str) -> str:
        summary = truncate_words(summary.strip(), self.settings.max_summary_words)
        return truncate_text(summary, self.settings.max_summary_chars)

    def analysis_prompt(
        self,
        *,
        query: str,
        target_market: Optional[str],
        stage: StartupStage,
        weights: Weights,
        pitch_deck: Optional[PitchDeckInfo] = None,
        pitch_deck_summary: Optional[str] = None,
    ) -> str:
        market = (target_market or "").strip()
        lines: List[str] = [
            "Analyze the following startup idea and provide a detailed evaluation in JSON format:",
            "",
            f"Idea: {truncate_text(query.strip(), self.settings.max_idea_chars)}",
            "Target Market: "
            + (truncate_text(market, self.settings.max_target_market_chars) if market else "Not specified"),
            f"Startup Stage: {stage.value}",
            (
                f"Scoring Weights: Technology ({weights.tech:.2f}), Go-to-Market ({weights.gtm:.2f}), "
                f"Investment Memo ({weights.investment_memo:.2f})"
            ),
            "",
        ]

        if pitch_deck is not None:
            lines.extend(self._pitch_deck_lines(pitch_deck))
        else:
            lines.append("No pitch deck was provided.")
        if pitch_deck_summary:
            lines.append(f"Pitch Deck Summary: {self.clamp_summary(pitch_deck_summary)}")
        context = "\n".join(lines)

        lines = [""]
        lines.append(
            "Based on this information, provide a comprehensive analysis of the startup idea. "
            "Your analysis MUST include:"
        )
        lines.append("")
        lines.extend(f"{number}. {section}" for number, section in enumerate(REQUIRED_SECTIONS, start=1))
        lines.append("")
        if pitch_deck is not None:
            lines.append(
                "It is crucial that you incorporate the information from the pitch deck into your "
                "analysis, especially in the investment memo and due diligence sections."
            )
            lines.append("")
        lines.append("Please provide your analysis in the following JSON structure:")
        lines.append(RESPONSE_SCHEMA)
        lines.append("")
        lines.append(
            "Ensure that your response is a valid JSON object matching this structure. The "
            "investmentMemo and dueDiligence sections MUST be included and filled with relevant "
            "information based on the provided startup idea and pitch deck details."
        )

        if pitch_deck is not None:
            if not is_placeholder("funding_requirements", pitch_deck.funding_requirements):
                lines.append(
                    "Pay special attention to the funding requirements: "
                    + self._deck_field(pitch_deck.funding_requirements)
                )
            if not is_placeholder("market_size", pitch_deck.market_size):
                lines.append(
                    f"Consider the market size information: {self._deck_field(pitch_deck.market_size)}"
                )

        instructions = "\n".join(lines)
        budget = max(self.settings.max_prompt_chars - len(instructions) - 1, 0)
        return f"{truncate_text(context, budget)}\n{instructions}"

    def adjust_for_feedback(self, prompt: str, recent_ratings: Sequence[float]) -> str:
        if not recent_ratings:
            return prompt
        average = sum(recent_ratings) / len(recent_ratings)
        if average < self.settings.low_rating_threshold:
            return f"{prompt}\n\n{LOW_RATING_GUIDANCE}"
        return prompt

    def _deck_field(self, value: str) -> str:
        return truncate_text(value, self.settings.max_deck_field_chars)

    def _pitch_deck_lines(self, deck: PitchDeckInfo) -> List[str]:
        sentiment = deck.sentiment_scores
        field = self._deck_field
        return [
            "Additional Information from Pitch Deck:",
            f"- Funding Requirements: {field(deck.funding_requirements)}",
            f"- Technology Details: {field(', '.join(deck.tech_details) or NO_TECH_DETAILS)}",
            f"- Go-to-Market Strategy: {field(', '.join(deck.gtm_details) or NO_GTM_DETAILS)}",
            f"- Market Size: {field(deck.market_size)}",
            f"- Competitive Advantage: {field(deck.competitive_advantage)}",
            f"- Team Information: {field(deck.team_info)}",
            f"- Team Size: {field(deck.team_size)}",
            f"- Business Model: {field(deck.business_model)}",
            f"- Revenue Projections: {field(deck.revenue_projections)}",
            f"- Customer Base: {field(deck.customer_base)}",
            f"- Overall Sentiment: {deck.overall_sentiment.value}",
            (
                f"- Sentiment Scores: Positive ({sentiment.positive:.2f}), "
                f"Negative ({sentiment.negative:.2f}), Neutral ({sentiment.neutral:.2f})"
            ),
        ]
