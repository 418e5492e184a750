"""Tests for regex extraction of pitch-deck facts."""

from app.models.analysis_models import ExtractionPath, SentimentLabel
from app.services.pitch_deck import build_pitch_deck_info
from app.services.section_parser import (
    is_heading,
    is_placeholder,
    parse_sections,
    split_detail_lines,
    split_sections,
)


DECK_TEXT = """--- Slide 1 ---
Acme Routing
We are seeking $2M in seed funding. Total addressable market of $4.5B.
--- Slide 2 ---
Technology:
- AI-based route optimization
- Real-time telemetry ingestion
Go-To-Market:
• Direct sales to carriers
Business Model: SaaS subscription per vehicle
--- Slide 3 ---
Team
Jane Doe, CEO, former logistics lead
A team of 8 members shipping weekly.
"""


def test_field_rules_extract_money_and_counts():
    parsed = parse_sections(DECK_TEXT)
    assert parsed["funding_requirements"] == "$2M"
    assert parsed["market_size"] == "$4.5B"
    assert parsed["team_size"] == "8"


def test_field_rules_join_multiple_matches():
    parsed = parse_sections("Raising $500k now. Later we need $3 million more.")
    assert parsed["funding_requirements"] == "$500k, $3 million"


def test_hyphenated_go_to_market_heading_is_recognized():
    parsed = parse_sections(DECK_TEXT)
    assert parsed["tech_details"] == [
        "AI-based route optimization",
        "Real-time telemetry ingestion",
    ]
    assert parsed["gtm_details"] == ["Direct sales to carriers"]


def test_inline_known_heading_captures_body():
    parsed = parse_sections(DECK_TEXT)
    assert parsed["business_model"] == "SaaS subscription per vehicle"


def test_first_line_of_slide_opens_section():
    parsed = parse_sections(DECK_TEXT)
    assert parsed["team_info"].startswith("Jane Doe, CEO")


def test_missing_fields_get_placeholders():
    parsed = parse_sections("Just a paragraph about nothing in particular.")
    assert parsed["tech_details"] == []
    assert parsed["gtm_details"] == []
    assert is_placeholder("funding_requirements", parsed["funding_requirements"])
    assert parsed["market_size"] == "Market size not specified"
    assert parsed["competitive_advantage"] == "Competitive advantage not specified"
    assert parsed["team_info"] == "Team information not provided"
    assert all(value != "" for value in parsed.values())


def test_is_heading_rules():
    assert is_heading("Technology")
    assert is_heading("Roadmap Items:")
    assert is_heading("Random Title", first_on_slide=True)
    assert not is_heading("Random Title")
    assert not is_heading("This line has far too many words to be a heading:")
    assert not is_heading("lowercase heading:")


def test_repeated_headings_are_merged():
    sections = split_sections("Technology:\nEdge models\nTeam:\nTwo founders\nTechnology:\nOn-device cache")
    assert sections["technology"] == "Edge models\nOn-device cache"


def test_split_detail_lines_strips_bullets():
    assert split_detail_lines("- one\n* two\n1. three\n\n● four") == ["one", "two", "three", "four"]


def test_build_pitch_deck_info_scores():
    info = build_pitch_deck_info(DECK_TEXT, extraction_path=ExtractionPath.EXTRACTED)
    assert info.tech_score == 0.7
    assert info.gtm_score == 0.6
    assert info.confidence_score == 0.65
    assert info.overall_sentiment is SentimentLabel.NEUTRAL
    assert info.extraction_path is ExtractionPath.EXTRACTED


def test_build_pitch_deck_info_without_sections():
    info = build_pitch_deck_info("")
    assert info.tech_score == 0.0
    assert info.gtm_score == 0.0
    assert info.confidence_score == 0.0
    assert info.sentiment_scores.neutral == 1.0
