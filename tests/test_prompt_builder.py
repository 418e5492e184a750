"""Tests for analysis and summary prompt construction."""

from app.config import AnalyzerSettings
from app.models.analysis_models import PitchDeckInfo, StartupStage, Weights
from app.services.prompt_builder import (
    LOW_RATING_GUIDANCE,
    NO_TECH_DETAILS,
    RESPONSE_SCHEMA,
    TRUNCATION_MARKER,
    PromptBuilder,
    truncate_text,
    truncate_words,
)
from app.services.section_parser import parse_sections


WEIGHTS = Weights(tech=0.4, gtm=0.3, investment_memo=0.3)


def _deck(**overrides) -> PitchDeckInfo:
    fields = parse_sections("")
    fields.update(overrides)
    return PitchDeckInfo(**fields)


def _prompt(builder, **kwargs):
    params = dict(
        query="Marketplace for used lab equipment",
        target_market=None,
        stage=StartupStage.EARLY,
        weights=WEIGHTS,
    )
    params.update(kwargs)
    return builder.analysis_prompt(**params)


def test_truncation_helpers():
    assert truncate_text("abcdef", 3) == "abc" + TRUNCATION_MARKER
    assert truncate_text("abc", 3) == "abc"
    assert truncate_words("one two three", 2) == "one two" + TRUNCATION_MARKER


def test_prompt_without_pitch_deck(settings):
    prompt = _prompt(PromptBuilder(settings))

    assert "Idea: Marketplace for used lab equipment" in prompt
    assert "Target Market: Not specified" in prompt
    assert "Startup Stage: early" in prompt
    assert "Technology (0.40), Go-to-Market (0.30), Investment Memo (0.30)" in prompt
    assert "No pitch deck was provided." in prompt
    assert "Additional Information from Pitch Deck:" not in prompt
    assert RESPONSE_SCHEMA in prompt


def test_prompt_truncates_long_inputs(settings):
    builder = PromptBuilder(settings.model_copy(update={"max_idea_chars": 10}))
    prompt = _prompt(builder, query="x" * 50, target_market="y" * 400)

    assert "Idea: " + "x" * 10 + TRUNCATION_MARKER in prompt
    assert "Target Market: " + "y" * 300 + TRUNCATION_MARKER in prompt


def test_prompt_with_pitch_deck_details(settings):
    deck = _deck(
        funding_requirements="$2M",
        market_size="$4.5B",
        gtm_details=["Channel partners", "Direct sales"],
    )
    prompt = _prompt(PromptBuilder(settings), target_market="Universities", pitch_deck=deck)

    assert "Target Market: Universities" in prompt
    assert f"- Technology Details: {NO_TECH_DETAILS}" in prompt
    assert "- Go-to-Market Strategy: Channel partners, Direct sales" in prompt
    assert "Pay special attention to the funding requirements: $2M" in prompt
    assert "Consider the market size information: $4.5B" in prompt
    assert "It is crucial that you incorporate the information from the pitch deck" in prompt


def test_placeholder_deck_values_add_no_emphasis(settings):
    prompt = _prompt(PromptBuilder(settings), pitch_deck=_deck())

    assert "Pay special attention" not in prompt
    assert "Consider the market size information" not in prompt


def test_summary_prompt_and_clamp(settings):
    builder = PromptBuilder(settings.model_copy(update={"max_summary_words": 3}))

    prompt = builder.summary_prompt("z" * 5000)
    assert prompt.startswith("Summarize the key points of this pitch deck in 3 words or less:")
    assert prompt.endswith("z" * 1000 + TRUNCATION_MARKER)

    assert builder.clamp_summary("  a b c d e ") == "a b c" + TRUNCATION_MARKER


def test_summary_is_included_in_prompt(settings):
    prompt = _prompt(
        PromptBuilder(settings), pitch_deck=_deck(), pitch_deck_summary="Lab gear resale."
    )
    assert "Pitch Deck Summary: Lab gear resale." in prompt


def test_low_recent_ratings_append_guidance():
    builder = PromptBuilder(AnalyzerSettings())

    assert builder.adjust_for_feedback("P", [2, 3, 4]).endswith(LOW_RATING_GUIDANCE)
    assert builder.adjust_for_feedback("P", [4, 5]) == "P"
    assert builder.adjust_for_feedback("P", []) == "P"


def test_huge_deck_section_keeps_instructions_and_schema(settings):
    deck = _deck(team_info="Founder bio. " * 60000, tech_details=["x" * 5000])
    prompt = _prompt(PromptBuilder(settings), pitch_deck=deck)

    team_line = next(line for line in prompt.splitlines() if line.startswith("- Team Information:"))
    assert team_line.endswith(TRUNCATION_MARKER)
    assert len(team_line) <= len("- Team Information: ") + 1000 + len(TRUNCATION_MARKER)
    assert RESPONSE_SCHEMA in prompt
    assert len(prompt) < 20000


def test_prompt_cap_cuts_context_not_schema(settings):
    builder = PromptBuilder(settings.model_copy(update={"max_prompt_chars": 6000}))
    prompt = _prompt(builder, query="q" * 5000, target_market="m" * 300, pitch_deck=_deck())

    assert RESPONSE_SCHEMA in prompt
    assert "Please provide your analysis in the following JSON structure:" in prompt
    assert TRUNCATION_MARKER in prompt
    assert len(prompt) <= 6000 + len(TRUNCATION_MARKER)
