"""Dependency Injection container for AniRec.

This module wires the services with dependency-injector. Every provider is
a singleton, so a process holds exactly one cache and one request queue per
upstream, shared by every caller of that upstream's client.

The CLI installs the loaded settings with ``container.settings.override``
and resets the singletons; tests override client providers the same way.
"""

from __future__ import annotations

from dependency_injector import containers, providers

from anirec.config.loader import get_config
from anirec.config.models import Settings
from anirec.services.anilist import AniListClient
from anirec.services.pipeline import RecommendationPipeline
from anirec.services.recommendation import RecommendationClient
from anirec.services.request_queue import SerialRequestQueue
from anirec.services.ttl_cache import TTLCache


class Container(containers.DeclarativeContainer):
    """Dependency Injection container for AniRec services.

    Example:
        >>> container = Container()
        >>> pipeline = container.pipeline()
        >>> report = await pipeline.recommend_from_quiz({"vibe": "action"})
    """

    settings = providers.Singleton(get_config)

    anilist_settings = providers.Callable(lambda settings: settings.api.anilist, settings)
    recommendation_settings = providers.Callable(
        lambda settings: settings.api.recommendation,
        settings,
    )

    # Metadata upstream
    metadata_cache = providers.Singleton(
        TTLCache,
        max_size=providers.Callable(lambda s: s.cache.metadata.max_size, settings),
        ttl=providers.Callable(lambda s: s.cache.metadata.ttl, settings),
        name="anilist",
    )
    metadata_queue = providers.Singleton(
        SerialRequestQueue,
        delay=providers.Callable(lambda s: s.queue_delay, anilist_settings),
        name="anilist",
    )
    anilist_client = providers.Singleton(
        AniListClient,
        settings=anilist_settings,
        cache=metadata_cache,
        queue=metadata_queue,
    )

    # Recommendation upstream
    recommendation_cache = providers.Singleton(
        TTLCache,
        max_size=providers.Callable(lambda s: s.cache.recommendation.max_size, settings),
        ttl=providers.Callable(lambda s: s.cache.recommendation.ttl, settings),
        name="recommendations",
    )
    recommendation_queue = providers.Singleton(
        SerialRequestQueue,
        delay=providers.Callable(lambda s: s.queue_delay, recommendation_settings),
        name="recommendations",
    )
    recommendation_client = providers.Singleton(
        RecommendationClient,
        settings=recommendation_settings,
        cache=recommendation_cache,
        queue=recommendation_queue,
    )

    pipeline = providers.Singleton(
        RecommendationPipeline,
        anilist=anilist_client,
        recommender=recommendation_client,
    )


container = Container()


def configure_container(settings: Settings) -> Container:
    """Install ``settings`` and drop every singleton built from older settings."""
    container.settings.reset_override()
    container.settings.override(providers.Object(settings))
    container.reset_singletons()
    return container
