"""Regex heuristics that pull structured facts out of pitch-deck text.

Rules are lenient about case and punctuation but never guess: when nothing
matches, a rule yields its placeholder instead of a misattributed value.
"""
from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Dict, FrozenSet, List, Optional, Pattern, Tuple, Union


MONEY = r"\$\s?\d(?:[\d,.]*\d)?(?:\s*(?:million|billion|thousand|mm|bn|[kmb])\b)?"

SLIDE_MARKER_RE = re.compile(r"^-{2,}\s*slide\s+\d+\s*-{2,}$", re.IGNORECASE)
HEADING_SHAPE_RE = re.compile(r"^[A-Z][A-Za-z0-9&/'\- ]{0,59}:?$")
INLINE_HEADING_RE = re.compile(r"^([A-Z][A-Za-z&/\- ]{1,40}):\s+(\S.*)$")
BULLET_RE = re.compile(r"^(?:[-*>•·▪●–—]|\d+[.)](?=\s))\s*")
MAX_HEADING_WORDS = 5


def _compile(*patterns: str) -> Tuple[Pattern[str], ...]:
    return tuple(re.compile(pattern, re.IGNORECASE) for pattern in patterns)


@dataclass(frozen=True)
class FieldRule:
    """Collects every cue-phrase match for a single fact."""

    field: str
    patterns: Tuple[Pattern[str], ...]
    placeholder: str

    def extract(self, text: str) -> Optional[str]:
        found: List[str] = []
        for pattern in self.patterns:
            for match in pattern.finditer(text):
                value = " ".join(match.group(1).split())
                if value and value not in found:
                    found.append(value)
        return ", ".join(found) if found else None

    def apply(self, text: str) -> str:
        return self.extract(text) or self.placeholder


@dataclass(frozen=True)
class SectionRule:
    """Reads the body of heading-delimited sections known under ``aliases``."""

    field: str
    aliases: FrozenSet[str]
    placeholder: Union[str, None] = None
    split_details: bool = False

    def extract(
        self, text: str, sections: Optional[Dict[str, str]] = None
    ) -> Optional[Union[str, List[str]]]:
        sections = split_sections(text) if sections is None else sections
        bodies = [body for heading, body in sections.items() if heading in self.aliases and body]
        if not bodies:
            return None
        body = "\n".join(bodies)
        if self.split_details:
            return split_detail_lines(body) or None
        return body

    def apply(
        self, text: str, sections: Optional[Dict[str, str]] = None
    ) -> Union[str, List[str]]:
        value = self.extract(text, sections)
        if value is not None:
            return value
        return [] if self.split_details else (self.placeholder or "")


TECHNOLOGY_HEADINGS = frozenset(
    {
        "technology",
        "tech",
        "tech stack",
        "technology stack",
        "our technology",
        "product",
        "product and technology",
        "product & technology",
    }
)
GTM_HEADINGS = frozenset(
    {
        "go-to-market",
        "go to market",
        "gtm",
        "go-to-market strategy",
        "go to market strategy",
        "gtm strategy",
        "marketing strategy",
        "sales strategy",
        "distribution",
    }
)
BUSINESS_MODEL_HEADINGS = frozenset(
    {"business model", "revenue model", "monetization", "how we make money"}
)
COMPETITIVE_ADVANTAGE_HEADINGS = frozenset(
    {
        "competitive advantage",
        "unique selling proposition",
        "usp",
        "moat",
        "why us",
        "differentiation",
    }
)
TEAM_HEADINGS = frozenset(
    {"team", "our team", "the team", "founding team", "management team", "leadership"}
)
GENERAL_HEADINGS = frozenset(
    {
        "problem",
        "solution",
        "market",
        "market size",
        "market opportunity",
        "traction",
        "competition",
        "competitors",
        "financials",
        "financial projections",
        "funding",
        "the ask",
        "ask",
        "use of funds",
        "vision",
        "roadmap",
        "customers",
        "summary",
        "overview",
        "contact",
    }
)
KNOWN_HEADINGS = (
    TECHNOLOGY_HEADINGS
    | GTM_HEADINGS
    | BUSINESS_MODEL_HEADINGS
    | COMPETITIVE_ADVANTAGE_HEADINGS
    | TEAM_HEADINGS
    | GENERAL_HEADINGS
)


EXTRACTION_RULES: Tuple[Union[FieldRule, SectionRule], ...] = (
    FieldRule(
        field="funding_requirements",
        patterns=_compile(
            r"\b(?:seeking|raising|looking\s+for|need(?:s|ing)?|requir(?:e|es|ing))\b[^$\n]{0,40}?("
            + MONEY
            + ")"
        ),
        placeholder="No specific funding requirements found",
    ),
    FieldRule(
        field="market_size",
        patterns=_compile(
            r"\b(?:market\s+size|tam|total\s+addressable\s+market)\b[^$\n]{0,30}?(" + MONEY + ")"
        ),
        placeholder="Market size not specified",
    ),
    FieldRule(
        field="revenue_projections",
        patterns=_compile(
            r"\b(?:projected|expected|anticipated|forecast(?:ed)?)\s+revenues?\b[^$\n]{0,30}?("
            + MONEY
            + r"(?:\s+(?:in|by)\s+\d{4})?)"
        ),
        placeholder="Revenue projections not specified",
    ),
    FieldRule(
        field="customer_base",
        patterns=_compile(
            r"\b(?:current|existing|potential)\s+customer\s+base\s*(?:of|is|:)?\s*(\d[\d,]*\+?)",
            r"\b(\d[\d,]*\+?)\s+(?:paying\s+|active\s+)?customers\b",
        ),
        placeholder="Customer base not specified",
    ),
    FieldRule(
        field="team_size",
        patterns=_compile(
            r"\bteam\s+(?:of|with)\s+(\d[\d,]*)\s+(?:members|employees|people)\b",
            r"\b(\d[\d,]*)\s+(?:full-time\s+)?employees\b",
        ),
        placeholder="Team size not specified",
    ),
    SectionRule(field="tech_details", aliases=TECHNOLOGY_HEADINGS, split_details=True),
    SectionRule(field="gtm_details", aliases=GTM_HEADINGS, split_details=True),
    SectionRule(
        field="business_model",
        aliases=BUSINESS_MODEL_HEADINGS,
        placeholder="Business model not specified",
    ),
    SectionRule(
        field="competitive_advantage",
        aliases=COMPETITIVE_ADVANTAGE_HEADINGS,
        placeholder="Competitive advantage not specified",
    ),
    SectionRule(
        field="team_info", aliases=TEAM_HEADINGS, placeholder="Team information not provided"
    ),
)


def normalize_heading(line: str) -> str:
    return " ".join(line.strip().rstrip(":").split()).lower()


def is_heading(line: str, *, first_on_slide: bool = False) -> bool:
    """A short capitalized line that ends with a colon, opens a slide or names a known section."""

    if not HEADING_SHAPE_RE.match(line) or len(line.split()) > MAX_HEADING_WORDS:
        return False
    return line.endswith(":") or first_on_slide or normalize_heading(line) in KNOWN_HEADINGS


def split_sections(text: str) -> Dict[str, str]:
    """Split ``text`` into heading-delimited sections keyed by lowercased heading."""

    collected: Dict[str, List[str]] = {}
    current: Optional[List[str]] = None
    first_on_slide = True

    for raw_line in text.splitlines():
        line = raw_line.strip()
        if not line:
            continue
        if SLIDE_MARKER_RE.match(line):
            first_on_slide = True
            continue

        inline = INLINE_HEADING_RE.match(line)
        if is_heading(line, first_on_slide=first_on_slide):
            current = collected.setdefault(normalize_heading(line), [])
        elif inline and normalize_heading(inline.group(1)) in KNOWN_HEADINGS:
            current = collected.setdefault(normalize_heading(inline.group(1)), [])
            current.append(inline.group(2).strip())
        elif current is not None:
            current.append(line)
        first_on_slide = False

    return {heading: "\n".join(lines).strip() for heading, lines in collected.items()}


def split_detail_lines(body: str) -> List[str]:
    details = []
    for line in body.splitlines():
        cleaned = BULLET_RE.sub("", line.strip()).strip()
        if cleaned:
            details.append(cleaned)
    return details


def parse_sections(text: str) -> Dict[str, Union[str, List[str]]]:
    """Apply every extraction rule in order and return values keyed by field."""

    sections = split_sections(text)
    parsed: Dict[str, Union[str, List[str]]] = {}
    for rule in EXTRACTION_RULES:
        if isinstance(rule, SectionRule):
            parsed[rule.field] = rule.apply(text, sections)
        else:
            parsed[rule.field] = rule.apply(text)
    return parsed


FIELD_PLACEHOLDERS: Dict[str, str] = {
    rule.field: rule.placeholder for rule in EXTRACTION_RULES if rule.placeholder
}


def is_placeholder(field: str, value: str) -> bool:
    return FIELD_PLACEHOLDERS.get(field) == value
