from __future__ import annotations

import re

from app.schemas.matching import FormattedExplanation, MatchBand, MatchExplanationSection

_SECTION_PATTERNS: tuple[tuple[str, re.Pattern[str]], ...] = (
    ("Skills Match", re.compile(r"[^.]*\bskills?\b[^.]*\.", re.IGNORECASE)),
    ("Experience", re.compile(r"[^.]*\bexperience\b[^.]*\.", re.IGNORECASE)),
    ("Education", re.compile(r"[^.]*\b(?:education|degree)\b[^.]*\.", re.IGNORECASE)),
)


def format_match_explanation(explanation: str | None) -> FormattedExplanation:
    """Split a free-text explanation into an overview and topical sections."""
    if not explanation or not explanation.strip():
        return FormattedExplanation(overview="No explanation provided", sections=[])

    text = explanation.strip()
    period = text.find(".")
    overview = text[: period + 1] if period > 0 else text

    sections: list[MatchExplanationSection] = []
    for title, pattern in _SECTION_PATTERNS:
        found = pattern.search(text)
        if found:
            sections.append(MatchExplanationSection(title=title, content=found.group(0).strip()))

    covered = sum(len(section.content) for section in sections)
    if not sections or covered < len(text) / 2:
        remainder = text.replace(overview, "", 1).strip()
        if remainder:
            sections.append(MatchExplanationSection(title="Additional Factors", content=remainder))

    return FormattedExplanation(overview=overview, sections=sections)


def match_band(percentage: int | None) -> MatchBand:
    if not percentage:
        return "none"
    if percentage >= 80:
        return "excellent"
    if percentage >= 60:
        return "good"
    if percentage >= 40:
        return "fair"
    return "low"
