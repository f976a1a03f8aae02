"""Prompt construction for the recommendation upstream."""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from typing import Any, Union

from anirec.config.models import RecommendationSettings
from anirec.shared.constants import Prompts, RecommendationConfig
from anirec.shared.models import MediaSummary, MediaTitle, QuizAnswers

# A seed is a resolved media record, a raw AniList media dict, or a plain title
Seed = Union[MediaSummary, Mapping[str, Any], str]


def build_quiz_prompt(answers: QuizAnswers) -> str:
    return Prompts.QUIZ.format(
        vibe=answers.vibe,
        pace=answers.pace,
        era=answers.era,
        violence=answers.violence,
        focus=answers.focus,
    )


def seed_display_title(seed: Seed) -> str | None:
    """English title, else romaji, else the seed itself when it is a string."""
    if isinstance(seed, str):
        return seed.strip() or None

    if isinstance(seed, MediaSummary):
        title: Any = seed.title
    elif isinstance(seed, Mapping):
        title = seed.get("title")
    else:
        return None

    if isinstance(title, MediaTitle):
        return title.english or title.romaji
    if isinstance(title, Mapping):
        return title.get("english") or title.get("romaji")
    if isinstance(title, str):
        return title.strip() or None
    return None


def seed_titles(seeds: Iterable[Seed]) -> list[str]:
    """Display titles of the seeds, skipping seeds without one."""
    return [title for title in (seed_display_title(seed) for seed in seeds) if title]


def build_seed_prompt(titles: Iterable[str]) -> str:
    return Prompts.SEEDS.format(titles=Prompts.SEED_SEPARATOR.join(titles))


def build_request_body(prompt: str, settings: RecommendationSettings) -> dict[str, Any]:
    """JSON body for the recommendation endpoint.

    The "chat" style carries the model, the system and user messages and the
    sampling parameters. The "prompt" style sends only ``{"prompt": ...}`` and
    leaves the model choice to the proxy.
    """
    if settings.payload_style == RecommendationConfig.PAYLOAD_PROMPT:
        return {"prompt": prompt}

    return {
        "model": settings.model,
        "messages": [
            {"role": "system", "content": Prompts.SYSTEM},
            {"role": "user", "content": prompt},
        ],
        "temperature": settings.temperature,
        "max_tokens": settings.max_tokens,
    }
