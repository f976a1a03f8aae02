"""Tests for service wiring."""

from __future__ import annotations

import pytest

from anirec.config import Settings
from anirec.containers import Container, configure_container, container
from anirec.services import AniListClient, RecommendationClient, RecommendationPipeline


@pytest.fixture
def settings() -> Settings:
    return Settings(
        api={"anilist": {"queue_delay": 0.5}, "recommendation": {"endpoint": "https://proxy.example/api"}},
        cache={"metadata": {"ttl": 42, "max_size": 7}},
    )


def test_singletons_share_cache_and_queue(settings):
    wired = Container()
    wired.settings.override(settings)

    anilist = wired.anilist_client()

    assert isinstance(anilist, AniListClient)
    assert wired.anilist_client() is anilist
    assert anilist._cache is wired.metadata_cache()
    assert anilist._queue is wired.metadata_queue()
    assert wired.metadata_cache().ttl == 42
    assert wired.metadata_cache().max_size == 7
    assert wired.metadata_queue().delay == 0.5


def test_pipeline_uses_the_client_singletons(settings):
    wired = Container()
    wired.settings.override(settings)

    pipeline = wired.pipeline()

    assert isinstance(pipeline, RecommendationPipeline)
    assert pipeline.anilist is wired.anilist_client()
    assert isinstance(pipeline.recommender, RecommendationClient)
    assert pipeline.recommender.settings.endpoint == "https://proxy.example/api"


def test_configure_container_resets_singletons(settings):
    configure_container(Settings())
    before = container.anilist_client()

    configure_container(settings)
    after = container.anilist_client()

    assert after is not before
    assert after.settings.queue_delay == 0.5


def test_recommendation_cache_follows_settings():
    wired = Container()
    wired.settings.override(Settings(cache={"recommendation": {"max_size": 9}}))

    client = wired.recommendation_client()

    assert client._cache is wired.recommendation_cache()
    assert client._queue is wired.recommendation_queue()
    assert wired.recommendation_cache().max_size == 9
