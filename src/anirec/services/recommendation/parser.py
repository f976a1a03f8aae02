"""Turn free-form model text into an ordered title list."""

from __future__ import annotations

import re
from typing import NamedTuple

from anirec.shared.constants import FallbackTitles, ParserRules
from anirec.shared.models import RecommendationKind, RecommendationSource

_SEPARATORS = re.compile(r"[,\n]")


class ParsedTitles(NamedTuple):
    titles: list[str]
    source: RecommendationSource


def fallback_titles(kind: RecommendationKind) -> list[str]:
    """Static title list used when no model output is usable."""
    if kind is RecommendationKind.SEEDS:
        return list(FallbackTitles.SEEDS)
    return list(FallbackTitles.QUIZ)


def _is_title(candidate: str) -> bool:
    if not ParserRules.MIN_LENGTH < len(candidate) < ParserRules.MAX_LENGTH:
        return False
    lowered = candidate.lower()
    return not any(word in lowered for word in ParserRules.FILLER_WORDS)


def split_titles(text: str) -> list[str]:
    """Split on commas and newlines, keeping plausible titles in order.

    A candidate is kept when its trimmed length is strictly between the
    parser bounds and it contains none of the filler words. At most
    ``ParserRules.MAX_TITLES`` titles are returned.
    """
    candidates = (part.strip() for part in _SEPARATORS.split(text))
    return [candidate for candidate in candidates if _is_title(candidate)][: ParserRules.MAX_TITLES]


def parse_recommendation_text(text: str, kind: RecommendationKind) -> ParsedTitles:
    """Parse model text, falling back to the static list for thin answers."""
    titles = split_titles(text)
    if len(titles) < ParserRules.MIN_TITLES:
        return ParsedTitles(fallback_titles(kind), RecommendationSource.FALLBACK)
    return ParsedTitles(titles, RecommendationSource.AI)
