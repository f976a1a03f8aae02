"""Match a recommended title to one AniList search result."""

from __future__ import annotations

from collections.abc import Sequence

from anirec.shared.models import Confidence, MediaSummary


def select_best_match(
    query: str,
    results: Sequence[MediaSummary],
) -> tuple[MediaSummary, Confidence] | None:
    """Pick the search result that best matches ``query``.

    The first result whose romaji or english title contains the query
    (case-insensitive) wins: HIGH confidence if it is the top result, MEDIUM
    otherwise. When no title contains the query the top result is used with
    MEDIUM confidence. Returns None only for an empty result list.
    """
    if not results:
        return None

    needle = query.strip()
    for index, media in enumerate(results):
        if needle and media.title.contains(needle):
            return media, Confidence.HIGH if index == 0 else Confidence.MEDIUM

    return results[0], Confidence.MEDIUM
