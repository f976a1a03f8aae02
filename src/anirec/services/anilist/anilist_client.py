"""AniList GraphQL client.

Every operation follows the same path: cache lookup, then the serial
request queue, then a POST to the GraphQL endpoint under the metadata retry
policy (one retry after a fixed wait, only for HTTP 500). Successful
responses are cached under a key built from the operation name and its
variables.
"""

from __future__ import annotations

import asyncio
import logging
import time
from collections.abc import Sequence
from typing import Any, Callable, TypeVar

import aiohttp
import orjson
from pydantic import ValidationError
from typing_extensions import Self

from anirec.config.models import AniListSettings
from anirec.services.anilist.matching import select_best_match
from anirec.services.anilist.queries import DETAILS_QUERY, SEARCH_QUERY, TRENDING_QUERY
from anirec.services.request_queue import SerialRequestQueue
from anirec.services.retry import RetryPolicy, retry_server_error, retry_with_policy
from anirec.services.ttl_cache import TTLCache
from anirec.shared.constants import (
    AniListConfig,
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
    NotFoundError,
    UpstreamError,
    create_network_error,
    create_parse_error,
)
from anirec.shared.logging import (
    log_api_call,
    log_operation_error,
    log_operation_start,
    log_operation_success,
)
from anirec.shared.models import MediaDetails, MediaSummary, ResolvedRecommendation

logger = logging.getLogger(__name__)

T = TypeVar("T")


def metadata_retry_policy(settings: AniListSettings) -> RetryPolicy:
    """Fixed-delay policy that retries HTTP 500 only."""
    return RetryPolicy(
        max_attempts=settings.max_attempts,
        base_delay=settings.server_error_retry_delay,
        backoff_factor=1.0,
        retry_if=retry_server_error,
    )


def _graphql_messages(payload: Any) -> list[str]:
    if not isinstance(payload, dict):
        return []
    errors = payload.get("errors")
    if not isinstance(errors, list):
        return []
    return [
        str(error.get("message", error)) if isinstance(error, dict) else str(error)
        for error in errors
    ]


class AniListClient:
    """Cached, serialized client for the AniList GraphQL API.

    Args:
        settings: AniList settings; defaults are used when omitted
        cache: Response cache shared by all operations of this client
        queue: Serial queue every network call goes through
        session: aiohttp session to use; when omitted the client creates
            and owns one, and closes it in :meth:`close`
        retry_policy: Overrides the policy derived from ``settings``

    Example:
        >>> async with AniListClient() as client:
        ...     trending = await client.fetch_trending()
    """

    def __init__(
        self,
        settings: AniListSettings | None = None,
        cache: TTLCache[Any] | None = None,
        queue: SerialRequestQueue | None = None,
        session: aiohttp.ClientSession | None = None,
        retry_policy: RetryPolicy | None = None,
    ) -> None:
        self.settings = settings or AniListSettings()
        # Empty caches and queues are falsy, so compare against None
        if cache is None:
            cache = TTLCache(
                max_size=CacheDefaults.METADATA_MAX_SIZE,
                ttl=CacheDefaults.METADATA_TTL,
                name="anilist",
            )
        if queue is None:
            queue = SerialRequestQueue(self.settings.queue_delay, name="anilist")
        self._cache: TTLCache[Any] = cache
        self._queue = queue
        self._retry_policy = retry_policy or metadata_retry_policy(self.settings)
        self._session = session
        self._owns_session = session is None

    async def __aenter__(self) -> Self:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.close()

    async def fetch_trending(
        self,
        page: int = 1,
        per_page: int | None = None,
    ) -> list[MediaSummary]:
        """Currently trending anime, most trending first."""
        variables = {"page": page, "perPage": per_page or self.settings.trending_per_page}
        return await self._run(
            "fetch_trending",
            TRENDING_QUERY,
            variables,
            lambda data: self._parse_media_page(data, "fetch_trending"),
        )

    async def search_by_text(
        self,
        term: str,
        page: int = 1,
        per_page: int | None = None,
    ) -> list[MediaSummary]:
        """Search anime by title, most popular first.

        Terms shorter than two characters return an empty list without a
        network call.
        """
        term = (term or "").strip()
        if len(term) < AniListConfig.MIN_SEARCH_LENGTH:
            return []

        variables = {
            "search": term,
            "page": page,
            "perPage": per_page or self.settings.search_per_page,
        }
        return await self._run(
            "search_by_text",
            SEARCH_QUERY,
            variables,
            lambda data: self._parse_media_page(data, "search_by_text"),
        )

    async def fetch_details(self, media_id: int) -> MediaDetails:
        """Full record for one media id.

        Raises:
            NotFoundError: If AniList has no anime with this id
        """
        try:
            return await self._run(
                "fetch_details",
                DETAILS_QUERY,
                {"id": media_id},
                lambda data: self._parse_details(data, media_id),
            )
        except UpstreamError as e:
            if e.status_code != HTTPStatusCodes.NOT_FOUND:
                raise
            raise self._not_found(media_id, e) from e

    async def resolve_titles(self, titles: Sequence[str]) -> list[ResolvedRecommendation]:
        """Resolve recommended titles to media records.

        Titles are searched in batches; the searches of one batch are awaited
        together and still pass through the cache and the serial queue. A
        title that finds nothing, or whose search fails, is left out. Output
        order follows input order.
        """
        candidates = [title.strip() for title in titles if title and title.strip()]
        batch_size = self.settings.resolve_batch_size
        resolved: list[ResolvedRecommendation] = []

        for start in range(0, len(candidates), batch_size):
            batch = candidates[start : start + batch_size]
            outcomes = await asyncio.gather(*(self._resolve_title(title) for title in batch))
            resolved.extend(outcome for outcome in outcomes if outcome is not None)

        logger.debug(
            "Resolved %d of %d titles",
            len(resolved),
            len(candidates),
            extra={"operation": "resolve_titles"},
        )
        return resolved

    async def _resolve_title(self, title: str) -> ResolvedRecommendation | None:
        try:
            results = await self.search_by_text(title, per_page=self.settings.resolve_per_page)
        except AniRecError as e:
            logger.debug("Dropping %r after failed search: %s", title, e.code.value)
            return None

        match = select_best_match(title, results)
        if match is None:
            logger.debug("No AniList match for %r", title)
            return None

        media, confidence = match
        return ResolvedRecommendation(media=media, confidence=confidence, search_title=title)

    def clear_cache(self) -> None:
        self._cache.clear()

    async def close(self) -> None:
        """Cancel queued calls and close the session if this client owns it."""
        await self._queue.close()
        if self._owns_session and self._session is not None and not self._session.closed:
            await self._session.close()
        if self._owns_session:
            self._session = None

    @staticmethod
    def _cache_key(operation: str, variables: dict[str, Any]) -> str:
        return orjson.dumps(
            {"operation": operation, "variables": variables},
            option=orjson.OPT_SORT_KEYS,
        ).decode("utf-8")

    async def _run(
        self,
        operation: str,
        query: str,
        variables: dict[str, Any],
        parse: Callable[[dict[str, Any]], T],
    ) -> T:
        key = self._cache_key(operation, variables)
        cached = self._cache.get(key)
        if cached is not None:
            logger.debug("Cache hit for %s", operation, extra={"operation": operation})
            return cached

        log_operation_start(logger, operation, {"variables": variables})
        start = time.perf_counter()
        try:
            data = await self._queue.submit(
                lambda: retry_with_policy(
                    lambda: self._post_graphql(operation, query, variables),
                    self._retry_policy,
                    operation_name=operation,
                ),
            )
            result = parse(data)
        except AniRecError as e:
            log_operation_error(logger, e, operation=operation, level=logging.WARNING)
            raise

        self._cache.put(key, result)
        log_operation_success(
            logger,
            operation,
            (time.perf_counter() - start) * 1000,
            context={"variables": variables},
        )
        return result

    async def _get_session(self) -> aiohttp.ClientSession:
        if self._session is None or self._session.closed:
            self._session = aiohttp.ClientSession(
                timeout=aiohttp.ClientTimeout(total=self.settings.timeout),
                headers={
                    HTTPHeaders.ACCEPT: ContentTypes.JSON,
                    HTTPHeaders.USER_AGENT: Application.USER_AGENT,
                },
            )
            self._owns_session = True
        return self._session

    async def _post_graphql(
        self,
        operation: str,
        query: str,
        variables: dict[str, Any],
    ) -> dict[str, Any]:
        """One HTTP round trip; returns the GraphQL ``data`` object."""
        session = await self._get_session()
        endpoint = self.settings.api_url
        start = time.perf_counter()

        try:
            async with session.post(
                endpoint,
                json={"query": query, "variables": variables},
            ) as response:
                status = response.status
                try:
                    payload = await response.json(content_type=None)
                except ValueError as e:
                    if HTTPStatusCodes.is_success(status):
                        raise create_parse_error(
                            "AniList returned a body that is not JSON",
                            operation=operation,
                            original_error=e,
                        ) from e
                    payload = None
        except asyncio.TimeoutError as e:
            raise create_network_error(
                f"AniList request timed out after {self.settings.timeout}s",
                operation=operation,
                endpoint=endpoint,
                original_error=e,
                timeout=True,
            ) from e
        except aiohttp.ClientError as e:
            raise create_network_error(
                f"AniList request failed: {e}",
                operation=operation,
                endpoint=endpoint,
                original_error=e,
            ) from e

        log_api_call(
            logger,
            endpoint,
            status_code=status,
            duration_ms=(time.perf_counter() - start) * 1000,
            context={"graphql_operation": operation},
        )

        messages = _graphql_messages(payload)
        context = ErrorContext(
            operation=operation,
            additional_data={"endpoint": endpoint, "status_code": status},
        )
        if not HTTPStatusCodes.is_success(status):
            code = (
                ErrorCode.API_SERVER_ERROR
                if HTTPStatusCodes.is_server_error(status)
                else ErrorCode.API_RATE_LIMIT
                if status == HTTPStatusCodes.TOO_MANY_REQUESTS
                else ErrorCode.API_REQUEST_FAILED
            )
            detail = f": {'; '.join(messages)}" if messages else ""
            raise UpstreamError(
                code,
                f"AniList returned HTTP {status}{detail}",
                context,
                status_code=status,
                upstream_messages=messages,
            )

        if messages:
            raise UpstreamError(
                ErrorCode.GRAPHQL_ERROR,
                f"AniList GraphQL error: {'; '.join(messages)}",
                context,
                status_code=status,
                upstream_messages=messages,
            )

        data = payload.get("data") if isinstance(payload, dict) else None
        if not isinstance(data, dict):
            raise create_parse_error(
                "AniList response has no data object",
                operation=operation,
            )
        return data

    @staticmethod
    def _parse_media_page(data: dict[str, Any], operation: str) -> list[MediaSummary]:
        page = data.get("Page")
        media = page.get("media") if isinstance(page, dict) else None
        if not isinstance(media, list):
            raise create_parse_error(
                "AniList response has no Page.media list",
                operation=operation,
            )

        try:
            return [MediaSummary.model_validate(item) for item in media if item]
        except ValidationError as e:
            raise create_parse_error(
                f"Unexpected media payload: {e.error_count()} validation error(s)",
                operation=operation,
                original_error=e,
            ) from e

    @staticmethod
    def _not_found(media_id: int, original_error: Exception | None = None) -> NotFoundError:
        return NotFoundError(
            ErrorCode.MEDIA_NOT_FOUND,
            f"No anime found with id {media_id}",
            ErrorContext(operation="fetch_details", additional_data={"media_id": media_id}),
            original_error,
        )

    @classmethod
    def _parse_details(cls, data: dict[str, Any], media_id: int) -> MediaDetails:
        media = data.get("Media")
        if media is None:
            raise cls._not_found(media_id)

        try:
            return MediaDetails.model_validate(media)
        except ValidationError as e:
            raise create_parse_error(
                f"Unexpected details payload for id {media_id}",
                operation="fetch_details",
                original_error=e,
            ) from e
