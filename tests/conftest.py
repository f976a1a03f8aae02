"""
Pytest configuration and shared fixtures for AniRec tests.

Network access is never used: clients receive a mocked aiohttp session
whose ``post`` returns queued fake responses.
"""

from __future__ import annotations

import logging
from collections.abc import Generator
from typing import Any
from unittest.mock import AsyncMock, MagicMock

import pytest

from anirec.config.models import AniListSettings, RecommendationSettings
from anirec.shared.models import MediaSummary


def make_response(status: int = 200, payload: Any = None, *, json_error: Exception | None = None) -> MagicMock:
    """Fake aiohttp response usable as ``async with session.post(...) as response``."""
    response = MagicMock()
    response.status = status
    if json_error is not None:
        response.json = AsyncMock(side_effect=json_error)
    else:
        response.json = AsyncMock(return_value=payload)
    return response


def make_session(*outcomes: Any) -> MagicMock:
    """Fake aiohttp session.

    Each outcome is either a fake response or an exception raised when the
    request context is entered. Outcomes are consumed one per ``post`` call.
    """
    session = MagicMock()
    session.closed = False
    session.close = AsyncMock()

    contexts = []
    for outcome in outcomes:
        context = MagicMock()
        if isinstance(outcome, BaseException):
            context.__aenter__ = AsyncMock(side_effect=outcome)
        else:
            context.__aenter__ = AsyncMock(return_value=outcome)
        context.__aexit__ = AsyncMock(return_value=False)
        contexts.append(context)

    session.post = MagicMock(side_effect=contexts)
    return session


def media_payload(media_id: int, romaji: str, english: str | None = None, **fields: Any) -> dict[str, Any]:
    """Raw AniList media dict, camelCase as the API returns it."""
    payload: dict[str, Any] = {
        "id": media_id,
        "title": {"romaji": romaji, "english": english, "native": None},
        "description": None,
        "coverImage": {"large": None, "medium": None},
        "meanScore": None,
        "genres": [],
        "format": "TV",
        "episodes": None,
        "startDate": {"year": None, "month": None, "day": None},
        "status": "FINISHED",
        "popularity": None,
    }
    payload.update(fields)
    return payload


def page_payload(*media: dict[str, Any]) -> dict[str, Any]:
    return {"data": {"Page": {"media": list(media)}}}


def make_media(media_id: int, romaji: str, english: str | None = None, **fields: Any) -> MediaSummary:
    return MediaSummary.model_validate(media_payload(media_id, romaji, english, **fields))


@pytest.fixture
def anilist_settings() -> AniListSettings:
    """AniList settings without pacing or retry waits."""
    return AniListSettings(queue_delay=0.0, server_error_retry_delay=0.0)


@pytest.fixture
def recommendation_settings() -> RecommendationSettings:
    """Recommendation settings without pacing or backoff waits."""
    return RecommendationSettings(queue_delay=0.0, base_delay=0.0, max_delay=0.0, jitter=0.0)


@pytest.fixture(autouse=True)
def reset_anirec_logger() -> Generator[None, None, None]:
    """Undo handler setup done by CLI tests so caplog keeps working."""
    yield
    logger = logging.getLogger("anirec")
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()
    logger.setLevel(logging.NOTSET)
    logger.propagate = True
