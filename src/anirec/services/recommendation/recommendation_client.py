"""Recommendation client.

Sends quiz or seed prompts to the recommendation proxy and turns the answer
into a :class:`RecommendationResult`. Public methods never raise: transport
failures, timeouts, bad statuses and unreadable answers all end in the
static fallback list for the request kind, marked ``source=fallback``.

Only model answers are cached; a fallback is recomputed on the next call so
a recovered upstream is used as soon as it answers again.
"""

from __future__ import annotations

import asyncio
import logging
import time
from collections.abc import Iterable, Mapping
from typing import Any

import aiohttp
from typing_extensions import Self

from anirec.config.models import RecommendationSettings
from anirec.services.recommendation.extractors import extract_response_text
from anirec.services.recommendation.parser import fallback_titles, parse_recommendation_text
from anirec.services.recommendation.prompts import (
    Seed,
    build_quiz_prompt,
    build_request_body,
    build_seed_prompt,
    seed_titles,
)
from anirec.services.request_queue import SerialRequestQueue
from anirec.services.retry import RetryPolicy, retry_with_policy
from anirec.services.ttl_cache import TTLCache
from anirec.shared.constants import (
    Application,
    CacheDefaults,
    ContentTypes,
    HTTPHeaders,
    HTTPStatusCodes,
)
from anirec.shared.errors import (
    AniRecError,
    ErrorCode,
    ErrorContext,
    UpstreamError,
    create_network_error,
    create_parse_error,
)
from anirec.shared.logging import log_api_call, log_operation_error, log_operation_success
from anirec.shared.models import (
    QuizAnswers,
    RecommendationKind,
    RecommendationResult,
    RecommendationSource,
)

logger = logging.getLogger(__name__)


def recommendation_retry_policy(settings: RecommendationSettings) -> RetryPolicy:
    """Capped exponential backoff with jitter, retrying every failure."""
    return RetryPolicy(
        max_attempts=settings.max_attempts,
        base_delay=settings.base_delay,
        backoff_factor=settings.backoff_factor,
        max_delay=settings.max_delay,
        jitter=settings.jitter,
    )


class RecommendationClient:
    """Client for the recommendation proxy.

    Args:
        settings: Recommendation settings; defaults are used when omitted
        cache: Result cache keyed by request kind and prompt
        queue: Serial queue every request goes through
        session: aiohttp session to use; when omitted the client creates
            and owns one
        retry_policy: Overrides the policy derived from ``settings``
    """

    def __init__(
        self,
        settings: RecommendationSettings | None = None,
        cache: TTLCache[RecommendationResult] | None = None,
        queue: SerialRequestQueue | None = None,
        session: aiohttp.ClientSession | None = None,
        retry_policy: RetryPolicy | None = None,
    ) -> None:
        self.settings = settings or RecommendationSettings()
        if cache is None:
            cache = TTLCache(
                max_size=CacheDefaults.RECOMMENDATION_MAX_SIZE,
                ttl=CacheDefaults.RECOMMENDATION_TTL,
                name="recommendations",
            )
        if queue is None:
            queue = SerialRequestQueue(self.settings.queue_delay, name="recommendations")
        self._cache: TTLCache[RecommendationResult] = cache
        self._queue = queue
        self._retry_policy = retry_policy or recommendation_retry_policy(self.settings)
        self._session = session
        self._owns_session = session is None

    async def __aenter__(self) -> Self:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.close()

    async def get_quiz_recommendations(
        self,
        answers: QuizAnswers | Mapping[str, Any] | None = None,
    ) -> RecommendationResult:
        """Recommendations for a set of quiz answers."""
        if not isinstance(answers, QuizAnswers):
            answers = QuizAnswers.model_validate(dict(answers or {}))
        prompt = build_quiz_prompt(answers)
        return await self._recommend(RecommendationKind.QUIZ, prompt, [])

    async def get_seed_recommendations(self, seeds: Iterable[Seed]) -> RecommendationResult:
        """Recommendations similar to the given seed anime."""
        titles = seed_titles(seeds)
        if not titles:
            logger.warning("No usable seed titles, returning fallback recommendations")
            return self._fallback(RecommendationKind.SEEDS, [], "No seed titles given")
        prompt = build_seed_prompt(titles)
        return await self._recommend(RecommendationKind.SEEDS, prompt, titles)

    def clear_cache(self) -> None:
        self._cache.clear()

    async def close(self) -> None:
        """Cancel queued requests and close the session if this client owns it."""
        await self._queue.close()
        if self._owns_session and self._session is not None and not self._session.closed:
            await self._session.close()
        if self._owns_session:
            self._session = None

    async def _recommend(
        self,
        kind: RecommendationKind,
        prompt: str,
        titles: list[str],
    ) -> RecommendationResult:
        cache_key = f"{kind.value}:{prompt}"
        cached = self._cache.get(cache_key)
        if cached is not None:
            logger.debug("Cache hit for %s recommendations", kind.value)
            return cached

        operation = f"{kind.value}_recommendations"
        start = time.perf_counter()
        try:
            text = await self._queue.submit(
                lambda: retry_with_policy(
                    lambda: self._attempt(prompt),
                    self._retry_policy,
                    operation_name=operation,
                ),
            )
        except AniRecError as e:
            log_operation_error(logger, e, operation=operation, level=logging.WARNING)
            return self._fallback(kind, titles, e.message)
        except Exception as e:  # noqa: BLE001
            logger.warning(
                "Unexpected failure in %s, using fallback: %s",
                operation,
                e,
                exc_info=True,
            )
            return self._fallback(kind, titles, str(e))

        parsed = parse_recommendation_text(text, kind)
        if parsed.source is RecommendationSource.FALLBACK:
            logger.warning("Model answer yielded too few titles, using fallback list")
            return self._fallback(kind, titles, "Model answer contained too few titles")

        result = RecommendationResult(
            titles=parsed.titles,
            source=RecommendationSource.AI,
            kind=kind,
            seed_titles=titles,
        )
        self._cache.put(cache_key, result)
        log_operation_success(
            logger,
            operation,
            (time.perf_counter() - start) * 1000,
            result_info={"titles": len(result.titles)},
        )
        return result

    @staticmethod
    def _fallback(
        kind: RecommendationKind,
        titles: list[str],
        reason: str,
    ) -> RecommendationResult:
        return RecommendationResult(
            titles=fallback_titles(kind),
            source=RecommendationSource.FALLBACK,
            kind=kind,
            seed_titles=titles,
            error=reason,
        )

    async def _attempt(self, prompt: str) -> str:
        """One bounded request; returns the extracted answer text."""
        try:
            payload = await asyncio.wait_for(self._post(prompt), timeout=self.settings.timeout)
        except asyncio.TimeoutError as e:
            raise create_network_error(
                f"Recommendation request timed out after {self.settings.timeout}s",
                operation="recommendation_request",
                endpoint=self.settings.endpoint,
                original_error=e,
                timeout=True,
            ) from e
        return extract_response_text(payload)

    async def _get_session(self) -> aiohttp.ClientSession:
        if self._session is None or self._session.closed:
            headers = {
                HTTPHeaders.ACCEPT: ContentTypes.JSON,
                HTTPHeaders.USER_AGENT: Application.USER_AGENT,
            }
            if self.settings.api_key:
                headers[HTTPHeaders.AUTHORIZATION] = f"Bearer {self.settings.api_key}"
            self._session = aiohttp.ClientSession(headers=headers)
            self._owns_session = True
        return self._session

    async def _post(self, prompt: str) -> Any:
        session = await self._get_session()
        endpoint = self.settings.endpoint
        start = time.perf_counter()

        try:
            async with session.post(
                endpoint,
                json=build_request_body(prompt, self.settings),
            ) as response:
                status = response.status
                try:
                    payload = await response.json(content_type=None)
                except ValueError as e:
                    if HTTPStatusCodes.is_success(status):
                        raise create_parse_error(
                            "Recommendation response is not JSON",
                            operation="recommendation_request",
                            original_error=e,
                        ) from e
                    payload = None
        except aiohttp.ClientError as e:
            raise create_network_error(
                f"Recommendation request failed: {e}",
                operation="recommendation_request",
                endpoint=endpoint,
                original_error=e,
            ) from e

        log_api_call(
            logger,
            endpoint,
            status_code=status,
            duration_ms=(time.perf_counter() - start) * 1000,
        )

        if not HTTPStatusCodes.is_success(status):
            detail = payload.get("error") if isinstance(payload, dict) else None
            raise UpstreamError(
                ErrorCode.API_SERVER_ERROR
                if HTTPStatusCodes.is_server_error(status)
                else ErrorCode.API_REQUEST_FAILED,
                f"Recommendation endpoint returned HTTP {status}"
                + (f": {detail}" if detail else ""),
                ErrorContext(
                    operation="recommendation_request",
                    additional_data={"endpoint": endpoint, "status_code": status},
                ),
                status_code=status,
                upstream_messages=[str(detail)] if detail else None,
            )

        return payload
