"""Tests for the recommendation text parser."""

from __future__ import annotations

from anirec.services.recommendation.parser import (
    fallback_titles,
    parse_recommendation_text,
    split_titles,
)
from anirec.shared.constants import FallbackTitles, ParserRules
from anirec.shared.models import RecommendationKind, RecommendationSource


class TestSplitTitles:
    def test_commas_and_newlines(self) -> None:
        text = "Naruto, Bleach\nOne Piece,\n  Death Note  "

        assert split_titles(text) == ["Naruto", "Bleach", "One Piece", "Death Note"]

    def test_length_bounds_are_exclusive(self) -> None:
        long_title = "x" * ParserRules.MAX_LENGTH
        just_short_enough = "y" * (ParserRules.MAX_LENGTH - 1)
        text = f"AB, ABC, {long_title}, {just_short_enough}"

        assert split_titles(text) == ["ABC", just_short_enough]

    def test_filler_lines_are_dropped(self) -> None:
        text = (
            "Here are some picks\n"
            "Based on your answers\n"
            "I recommend these\n"
            "Hunter x Hunter\n"
            "HERE WE GO\n"
            "Steins;Gate"
        )

        assert split_titles(text) == ["Hunter x Hunter", "Steins;Gate"]

    def test_filler_match_is_substring(self) -> None:
        # "There" contains "here"
        assert split_titles("There She Is, Monster") == ["Monster"]

    def test_capped_at_max_titles(self) -> None:
        text = ", ".join(f"Title {index}" for index in range(20))

        titles = split_titles(text)

        assert len(titles) == ParserRules.MAX_TITLES
        assert titles[0] == "Title 0"
        assert titles[-1] == "Title 11"

    def test_empty_text(self) -> None:
        assert split_titles("") == []


class TestParseRecommendationText:
    def test_enough_titles_are_ai(self) -> None:
        parsed = parse_recommendation_text("A1b, B2c, C3d, D4e, E5f", RecommendationKind.QUIZ)

        assert parsed.source is RecommendationSource.AI
        assert parsed.titles == ["A1b", "B2c", "C3d", "D4e", "E5f"]

    def test_four_titles_fall_back(self) -> None:
        parsed = parse_recommendation_text("Naruto, Bleach, Monster, Trigun", RecommendationKind.QUIZ)

        assert parsed.source is RecommendationSource.FALLBACK
        assert parsed.titles == list(FallbackTitles.QUIZ)

    def test_seed_fallback_list(self) -> None:
        parsed = parse_recommendation_text("nothing useful", RecommendationKind.SEEDS)

        assert parsed.source is RecommendationSource.FALLBACK
        assert parsed.titles == list(FallbackTitles.SEEDS)


def test_fallback_lists_fit_the_title_cap() -> None:
    for kind in RecommendationKind:
        titles = fallback_titles(kind)
        assert 0 < len(titles) <= ParserRules.MAX_TITLES
        assert len(set(titles)) == len(titles)


def test_fallback_titles_returns_a_copy() -> None:
    titles = fallback_titles(RecommendationKind.QUIZ)
    titles.append("Extra")

    assert "Extra" not in fallback_titles(RecommendationKind.QUIZ)
