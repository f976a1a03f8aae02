"""AniRec services: caching, request pacing, upstream clients and the pipeline."""

from anirec.services.anilist import AniListClient
from anirec.services.pipeline import RecommendationPipeline
from anirec.services.recommendation import RecommendationClient
from anirec.services.request_queue import QueuedRequest, SerialRequestQueue
from anirec.services.retry import RetryPolicy, retry_with_policy
from anirec.services.ttl_cache import CacheEntry, TTLCache

__all__ = [
    "AniListClient",
    "CacheEntry",
    "QueuedRequest",
    "RecommendationClient",
    "RecommendationPipeline",
    "RetryPolicy",
    "SerialRequestQueue",
    "TTLCache",
    "retry_with_policy",
]
