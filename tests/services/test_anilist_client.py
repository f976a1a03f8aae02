"""Tests for the AniList GraphQL client."""

from __future__ import annotations

import asyncio
import logging

import aiohttp
import pytest

from anirec.config.models import AniListSettings
from anirec.services.anilist import AniListClient, metadata_retry_policy
from anirec.services.anilist.queries import DETAILS_QUERY, SEARCH_QUERY, TRENDING_QUERY
from anirec.services.request_queue import SerialRequestQueue
from anirec.services.ttl_cache import TTLCache
from anirec.shared.errors import (
    ErrorCode,
    NetworkError,
    NotFoundError,
    ParseError,
    UpstreamError,
)
from anirec.shared.models import Confidence, MediaDetails
from tests.conftest import make_response, make_session, media_payload, page_payload


@pytest.fixture
def no_retry_wait(mocker):
    return mocker.patch("anirec.services.retry.asyncio.sleep", new=mocker.AsyncMock())


def make_client(settings: AniListSettings, *outcomes) -> tuple[AniListClient, object]:
    session = make_session(*outcomes)
    return AniListClient(settings=settings, session=session), session


class TestFetchTrending:
    @pytest.mark.asyncio
    async def test_parses_media_page(self, anilist_settings: AniListSettings) -> None:
        payload = page_payload(
            media_payload(1, "Shingeki no Kyojin", "Attack on Titan", meanScore=84, startDate={"year": 2013}),
            media_payload(2, "Sousou no Frieren", "Frieren", genres=None),
        )
        client, session = make_client(anilist_settings, make_response(200, payload))

        media = await client.fetch_trending()

        assert [item.id for item in media] == [1, 2]
        assert media[0].display_title == "Attack on Titan"
        assert media[0].mean_score == 84
        assert media[0].start_year == 2013
        assert media[1].genres == []

        body = session.post.call_args.kwargs["json"]
        assert body["query"] == TRENDING_QUERY
        assert body["variables"] == {"page": 1, "perPage": anilist_settings.trending_per_page}
        assert session.post.call_args.args[0] == anilist_settings.api_url

    @pytest.mark.asyncio
    async def test_second_call_is_served_from_cache(self, anilist_settings: AniListSettings) -> None:
        client, session = make_client(
            anilist_settings,
            make_response(200, page_payload(media_payload(1, "Naruto"))),
        )

        first = await client.fetch_trending()
        second = await client.fetch_trending()

        assert first == second
        assert session.post.call_count == 1

    @pytest.mark.asyncio
    async def test_different_variables_use_different_cache_entries(
        self,
        anilist_settings: AniListSettings,
    ) -> None:
        client, session = make_client(
            anilist_settings,
            make_response(200, page_payload(media_payload(1, "Naruto"))),
            make_response(200, page_payload(media_payload(2, "Bleach"))),
        )

        page_one = await client.fetch_trending(page=1)
        page_two = await client.fetch_trending(page=2)

        assert page_one[0].id == 1
        assert page_two[0].id == 2
        assert session.post.call_count == 2


class TestSearchByText:
    @pytest.mark.asyncio
    @pytest.mark.parametrize("term", ["", " ", "a", " b "])
    async def test_short_terms_skip_the_network(
        self,
        anilist_settings: AniListSettings,
        term: str,
    ) -> None:
        client, session = make_client(anilist_settings)

        assert await client.search_by_text(term) == []
        session.post.assert_not_called()

    @pytest.mark.asyncio
    async def test_sends_trimmed_term(self, anilist_settings: AniListSettings) -> None:
        client, session = make_client(
            anilist_settings,
            make_response(200, page_payload(media_payload(20, "Naruto"))),
        )

        media = await client.search_by_text("  Naruto ")

        assert media[0].id == 20
        body = session.post.call_args.kwargs["json"]
        assert body["query"] == SEARCH_QUERY
        assert body["variables"]["search"] == "Naruto"
        assert body["variables"]["perPage"] == anilist_settings.search_per_page


class TestFailures:
    @pytest.mark.asyncio
    async def test_http_500_is_retried_once(
        self,
        anilist_settings: AniListSettings,
        no_retry_wait,
    ) -> None:
        client, session = make_client(
            anilist_settings,
            make_response(500, {"errors": [{"message": "Internal"}]}),
            make_response(200, page_payload(media_payload(1, "Naruto"))),
        )

        media = await client.fetch_trending()

        assert media[0].id == 1
        assert session.post.call_count == 2
        no_retry_wait.assert_awaited_once_with(anilist_settings.server_error_retry_delay)

    @pytest.mark.asyncio
    async def test_second_http_500_propagates(self, anilist_settings: AniListSettings) -> None:
        client, session = make_client(
            anilist_settings,
            make_response(500, None),
            make_response(500, None),
        )

        with pytest.raises(UpstreamError) as exc_info:
            await client.fetch_trending()

        assert exc_info.value.status_code == 500
        assert exc_info.value.code == ErrorCode.API_SERVER_ERROR
        assert session.post.call_count == 2

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        ("status", "code"),
        [(400, ErrorCode.API_REQUEST_FAILED), (429, ErrorCode.API_RATE_LIMIT), (503, ErrorCode.API_SERVER_ERROR)],
    )
    async def test_other_statuses_are_not_retried(
        self,
        anilist_settings: AniListSettings,
        status: int,
        code: ErrorCode,
    ) -> None:
        client, session = make_client(
            anilist_settings,
            make_response(status, {"errors": [{"message": "nope"}]}),
        )

        with pytest.raises(UpstreamError) as exc_info:
            await client.search_by_text("Naruto")

        assert exc_info.value.code == code
        assert exc_info.value.upstream_messages == ["nope"]
        assert session.post.call_count == 1

    @pytest.mark.asyncio
    async def test_graphql_errors_on_http_200(self, anilist_settings: AniListSettings) -> None:
        client, _ = make_client(
            anilist_settings,
            make_response(200, {"data": None, "errors": [{"message": "Validation failed"}]}),
        )

        with pytest.raises(UpstreamError) as exc_info:
            await client.fetch_trending()

        assert exc_info.value.code == ErrorCode.GRAPHQL_ERROR
        assert "Validation failed" in exc_info.value.message

    @pytest.mark.asyncio
    async def test_transport_error_becomes_network_error(self, anilist_settings: AniListSettings) -> None:
        client, session = make_client(
            anilist_settings,
            aiohttp.ClientConnectionError("connection refused"),
        )

        with pytest.raises(NetworkError) as exc_info:
            await client.fetch_trending()

        assert exc_info.value.code == ErrorCode.NETWORK_ERROR
        assert session.post.call_count == 1

    @pytest.mark.asyncio
    async def test_timeout_becomes_network_error(self, anilist_settings: AniListSettings) -> None:
        client, _ = make_client(anilist_settings, asyncio.TimeoutError())

        with pytest.raises(NetworkError) as exc_info:
            await client.fetch_trending()

        assert exc_info.value.code == ErrorCode.API_TIMEOUT

    @pytest.mark.asyncio
    async def test_non_json_body(self, anilist_settings: AniListSettings) -> None:
        client, _ = make_client(
            anilist_settings,
            make_response(200, json_error=ValueError("not json")),
        )

        with pytest.raises(ParseError):
            await client.fetch_trending()

    @pytest.mark.asyncio
    async def test_missing_page_is_not_cached(self, anilist_settings: AniListSettings) -> None:
        client, session = make_client(
            anilist_settings,
            make_response(200, {"data": {}}),
            make_response(200, page_payload(media_payload(1, "Naruto"))),
        )

        with pytest.raises(ParseError):
            await client.fetch_trending()
        media = await client.fetch_trending()

        assert media[0].id == 1
        assert session.post.call_count == 2


class TestFetchDetails:
    @pytest.mark.asyncio
    async def test_parses_nested_connections(self, anilist_settings: AniListSettings) -> None:
        details = media_payload(
            5114,
            "Hagane no Renkinjutsushi: FULLMETAL ALCHEMIST",
            "Fullmetal Alchemist: Brotherhood",
            bannerImage="https://img/banner.jpg",
            season="SPRING",
            studios={"nodes": [{"name": "bones"}]},
            characters={"nodes": [{"name": {"full": "Edward Elric"}, "image": {"medium": "https://img/ed.png"}}]},
            relations={"nodes": [{"id": 121, "title": {"romaji": "Hagane no Renkinjutsushi"}, "format": "TV"}]},
            externalLinks=[{"url": "https://example.org", "site": "Official Site"}],
            trailer={"id": "abc", "site": "youtube"},
        )
        client, session = make_client(
            anilist_settings,
            make_response(200, {"data": {"Media": details}}),
        )

        media = await client.fetch_details(5114)

        assert isinstance(media, MediaDetails)
        assert [studio.name for studio in media.studios] == ["bones"]
        assert media.characters[0].name == "Edward Elric"
        assert media.characters[0].image == "https://img/ed.png"
        assert media.relations[0].id == 121
        assert media.external_links[0].site == "Official Site"
        assert media.trailer is not None and media.trailer.site == "youtube"

        body = session.post.call_args.kwargs["json"]
        assert body["query"] == DETAILS_QUERY
        assert body["variables"] == {"id": 5114}

    @pytest.mark.asyncio
    async def test_null_media_is_not_found(self, anilist_settings: AniListSettings) -> None:
        client, _ = make_client(anilist_settings, make_response(200, {"data": {"Media": None}}))

        with pytest.raises(NotFoundError) as exc_info:
            await client.fetch_details(999999)

        assert exc_info.value.code == ErrorCode.MEDIA_NOT_FOUND

    @pytest.mark.asyncio
    async def test_http_404_is_not_found(self, anilist_settings: AniListSettings) -> None:
        client, _ = make_client(
            anilist_settings,
            make_response(404, {"errors": [{"message": "Not Found.", "status": 404}]}),
        )

        with pytest.raises(NotFoundError):
            await client.fetch_details(999999)


class TestResolveTitles:
    @pytest.mark.asyncio
    async def test_resolves_in_input_order_with_confidence(
        self,
        anilist_settings: AniListSettings,
    ) -> None:
        client, _ = make_client(
            anilist_settings,
            make_response(200, page_payload(media_payload(16498, "Shingeki no Kyojin", "Attack on Titan"))),
            make_response(200, page_payload(
                media_payload(1, "Cowboy Bebop: Tengoku no Tobira"),
                media_payload(2, "Cowboy Bebop", "Cowboy Bebop"),
            )),
            make_response(200, page_payload(media_payload(3, "Something Else"))),
        )

        resolved = await client.resolve_titles(["Attack on Titan", "Cowboy Bebop", "Unrelated"])

        assert [item.media.id for item in resolved] == [16498, 1, 3]
        assert [item.confidence for item in resolved] == [
            Confidence.HIGH,
            Confidence.HIGH,
            Confidence.MEDIUM,
        ]
        assert [item.search_title for item in resolved] == ["Attack on Titan", "Cowboy Bebop", "Unrelated"]

    @pytest.mark.asyncio
    async def test_failed_title_is_dropped(self, anilist_settings: AniListSettings) -> None:
        client, _ = make_client(
            anilist_settings,
            make_response(200, page_payload(media_payload(1, "Naruto"))),
            make_response(400, {"errors": [{"message": "bad"}]}),
            make_response(200, page_payload()),
            make_response(200, page_payload(media_payload(4, "Bleach"))),
        )

        resolved = await client.resolve_titles(["Naruto", "Broken", "Nothing", "Bleach"])

        assert [item.media.id for item in resolved] == [1, 4]

    @pytest.mark.asyncio
    async def test_failed_title_is_logged_once_as_warning(
        self,
        anilist_settings: AniListSettings,
        caplog: pytest.LogCaptureFixture,
    ) -> None:
        client, _ = make_client(
            anilist_settings,
            make_response(200, {"data": None, "errors": [{"message": "bad"}]}),
        )

        with caplog.at_level(logging.DEBUG, logger="anirec"):
            assert await client.resolve_titles(["Broken"]) == []

        failures = [record for record in caplog.records if record.levelno >= logging.WARNING]
        assert len(failures) == 1
        assert failures[0].levelno == logging.WARNING
        assert failures[0].exc_info is None

    @pytest.mark.asyncio
    async def test_batches_do_not_overlap(self, anilist_settings: AniListSettings, mocker) -> None:
        client = AniListClient(settings=anilist_settings.model_copy(update={"resolve_batch_size": 2}))
        active = 0
        peak = 0

        async def fake_search(title: str, page: int = 1, per_page: int | None = None):
            nonlocal active, peak
            active += 1
            peak = max(peak, active)
            await asyncio.sleep(0)
            active -= 1
            return []

        mocker.patch.object(client, "search_by_text", side_effect=fake_search)

        resolved = await client.resolve_titles(["a1", "b2", "c3", "d4", "e5"])

        assert resolved == []
        assert peak == 2
        assert client.search_by_text.call_count == 5

    @pytest.mark.asyncio
    async def test_blank_titles_are_ignored(self, anilist_settings: AniListSettings) -> None:
        client, session = make_client(anilist_settings)

        assert await client.resolve_titles(["", "   "]) == []
        session.post.assert_not_called()


class TestLifecycle:
    @pytest.mark.asyncio
    async def test_injected_session_is_not_closed(self, anilist_settings: AniListSettings) -> None:
        client, session = make_client(anilist_settings)

        await client.close()

        session.close.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_owned_session_is_closed(self, anilist_settings: AniListSettings, mocker) -> None:
        session = make_session()
        mocker.patch("anirec.services.anilist.anilist_client.aiohttp.ClientSession", return_value=session)

        async with AniListClient(settings=anilist_settings) as client:
            assert await client._get_session() is session

        session.close.assert_awaited_once()

    def test_metadata_retry_policy(self) -> None:
        policy = metadata_retry_policy(AniListSettings())

        assert policy.max_attempts == 2
        assert policy.compute_delay(1) == 2.0

    @pytest.mark.asyncio
    async def test_injected_empty_cache_and_queue_are_used(self, anilist_settings: AniListSettings) -> None:
        cache = TTLCache(max_size=5, ttl=1.0, name="shared")
        queue = SerialRequestQueue(0.0, name="shared")
        session = make_session(make_response(200, page_payload(media_payload(1, "Naruto"))))
        client = AniListClient(settings=anilist_settings, cache=cache, queue=queue, session=session)

        assert client._cache is cache
        assert client._queue is queue

        await client.fetch_trending()

        assert len(cache) == 1
