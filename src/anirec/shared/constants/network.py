"""
Upstream API Constants

Endpoints, pacing, retry and cache limits for the two upstreams AniRec
talks to: the AniList GraphQL API and the recommendation proxy.
"""


class AniListConfig:
    """AniList GraphQL API defaults."""

    API_URL = "https://graphql.anilist.co"
    TIMEOUT = 30.0  # seconds, whole request

    # Serial queue spacing between two calls
    QUEUE_DELAY = 0.025

    # HTTP 500 is retried exactly once after a fixed wait
    MAX_ATTEMPTS = 2
    SERVER_ERROR_RETRY_DELAY = 2.0

    # Page sizes
    TRENDING_PER_PAGE = 20
    SEARCH_PER_PAGE = 10
    RESOLVE_PER_PAGE = 3
    MAX_PER_PAGE = 50

    MIN_SEARCH_LENGTH = 2
    RESOLVE_BATCH_SIZE = 5


class RecommendationConfig:
    """Recommendation proxy defaults."""

    ENDPOINT = "http://localhost:3000/api/recommendations"
    MODEL = "meta-llama/llama-3.2-3b-instruct:free"
    TEMPERATURE = 0.3
    MAX_TOKENS = 150

    TIMEOUT = 15.0  # seconds, per attempt
    QUEUE_DELAY = 0.05

    # delay(n) = min(BASE_DELAY * BACKOFF_FACTOR ** (n - 1), MAX_DELAY) + U(0, JITTER)
    MAX_ATTEMPTS = 3
    BASE_DELAY = 0.5
    BACKOFF_FACTOR = 1.5
    MAX_DELAY = 1.5
    JITTER = 0.2

    PAYLOAD_CHAT = "chat"
    PAYLOAD_PROMPT = "prompt"
