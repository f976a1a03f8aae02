"""Recommendation pipeline.

Joins the two clients: ask the recommendation client for titles, resolve
them against AniList, then de-duplicate, filter and sort the resolved
entries the way the results view presents them.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping, Sequence
from typing import Any, Callable

from anirec.services.anilist import AniListClient
from anirec.services.recommendation import RecommendationClient
from anirec.services.recommendation.prompts import Seed
from anirec.shared.constants import ResultThresholds
from anirec.shared.models import (
    QuizAnswers,
    RecommendationReport,
    RecommendationResult,
    ResolvedRecommendation,
    ResultFilter,
    SortKey,
)

logger = logging.getLogger(__name__)

_FILTERS: dict[ResultFilter, Callable[[ResolvedRecommendation], bool]] = {
    ResultFilter.ALL: lambda item: True,
    ResultFilter.HIGH_SCORE: lambda item: (item.media.mean_score or 0) >= ResultThresholds.HIGH_SCORE,
    ResultFilter.RECENT: lambda item: (item.media.start_year or 0) >= ResultThresholds.RECENT_YEAR,
    ResultFilter.CLASSIC: lambda item: (
        item.media.start_year is not None
        and item.media.start_year <= ResultThresholds.CLASSIC_YEAR
    ),
    ResultFilter.MOVIE: lambda item: item.media.format == "MOVIE",
    ResultFilter.TV: lambda item: item.media.format == "TV",
}

_SORT_KEYS: dict[SortKey, Callable[[ResolvedRecommendation], int]] = {
    SortKey.SCORE: lambda item: item.media.mean_score or 0,
    SortKey.YEAR: lambda item: item.media.start_year or 0,
    SortKey.POPULARITY: lambda item: item.media.popularity or 0,
    SortKey.CONFIDENCE: lambda item: item.confidence.rank,
}


def deduplicate_by_media(items: Iterable[ResolvedRecommendation]) -> list[ResolvedRecommendation]:
    """Keep the first entry for each media id."""
    seen: set[int] = set()
    unique: list[ResolvedRecommendation] = []
    for item in items:
        if item.media.id in seen:
            continue
        seen.add(item.media.id)
        unique.append(item)
    return unique


def filter_recommendations(
    items: Iterable[ResolvedRecommendation],
    result_filter: ResultFilter = ResultFilter.ALL,
) -> list[ResolvedRecommendation]:
    predicate = _FILTERS[result_filter]
    return [item for item in items if predicate(item)]


def sort_recommendations(
    items: Iterable[ResolvedRecommendation],
    sort_by: SortKey | None = SortKey.SCORE,
) -> list[ResolvedRecommendation]:
    """Sort descending by ``sort_by``; ties, ``MODEL`` and ``None`` keep model order."""
    if sort_by is None or sort_by is SortKey.MODEL:
        return list(items)
    return sorted(items, key=_SORT_KEYS[sort_by], reverse=True)


class RecommendationPipeline:
    """Recommend, resolve and arrange anime for one request."""

    def __init__(self, anilist: AniListClient, recommender: RecommendationClient) -> None:
        self.anilist = anilist
        self.recommender = recommender

    async def recommend_from_quiz(
        self,
        answers: QuizAnswers | Mapping[str, Any] | None = None,
        *,
        sort_by: SortKey | None = SortKey.SCORE,
        result_filter: ResultFilter = ResultFilter.ALL,
    ) -> RecommendationReport:
        result = await self.recommender.get_quiz_recommendations(answers)
        return await self._build_report(result, sort_by, result_filter)

    async def recommend_from_seeds(
        self,
        seeds: Sequence[Seed],
        *,
        sort_by: SortKey | None = SortKey.SCORE,
        result_filter: ResultFilter = ResultFilter.ALL,
    ) -> RecommendationReport:
        result = await self.recommender.get_seed_recommendations(seeds)
        return await self._build_report(result, sort_by, result_filter)

    async def _build_report(
        self,
        result: RecommendationResult,
        sort_by: SortKey | None,
        result_filter: ResultFilter,
    ) -> RecommendationReport:
        resolved = await self.anilist.resolve_titles(result.titles)
        found = {item.search_title for item in resolved}
        unresolved = [title for title in result.titles if title.strip() not in found]

        items = deduplicate_by_media(resolved)
        items = filter_recommendations(items, result_filter)
        items = sort_recommendations(items, sort_by)

        logger.info(
            "%d recommendations (%s), %d resolved, %d shown",
            len(result.titles),
            result.source.value,
            len(resolved),
            len(items),
        )
        return RecommendationReport(result=result, items=items, unresolved=unresolved)

    async def close(self) -> None:
        await self.anilist.close()
        await self.recommender.close()
