"""Tests for the AniList GraphQL client."""

import json
from datetime import datetime, timezone

import httpx
import pytest
import respx

from anime_planner.clients.anilist import (
    AniListClient,
    AniListError,
    anilist_client,
    current_season,
)
from anime_planner.models import AiringEvent, MediaItem
from tests.fixtures.anilist_responses import (
    AIRING_SCHEDULE_RESPONSE,
    EMPTY_PAGE_RESPONSE,
    GRAPHQL_ERROR_RESPONSE,
    SEASONAL_MEDIA_RESPONSE,
    TRENDING_RESPONSE,
)

ANILIST = "https://graphql.anilist.co"
ANILIST_HOST = "graphql.anilist.co"


@pytest.fixture
def client():
    """Create an AniListClient that fails fast."""
    return AniListClient(max_attempts=1)


def sent_body(route) -> dict:
    return json.loads(route.calls[0].request.content)


class TestCurrentSeason:
    @pytest.mark.parametrize(
        ("month", "season"),
        [
            (1, "WINTER"),
            (2, "WINTER"),
            (3, "SPRING"),
            (5, "SPRING"),
            (6, "SUMMER"),
            (8, "SUMMER"),
            (9, "FALL"),
            (11, "FALL"),
            (12, "WINTER"),
        ],
    )
    def test_month_to_season(self, month, season):
        assert current_season(datetime(2024, month, 15, tzinfo=timezone.utc)) == (season, 2024)

    def test_uses_utc_month(self):
        from datetime import timedelta

        tz = timezone(timedelta(hours=9))
        # 2024-03-01 02:00 in UTC+9 is still February in UTC
        assert current_season(datetime(2024, 3, 1, 2, tzinfo=tz)) == ("WINTER", 2024)


class TestAniListClient:
    @pytest.mark.asyncio
    async def test_client_initialization(self):
        """Test client is properly initialized with headers."""
        client = AniListClient(timeout=15.0)

        assert client._url == ANILIST
        assert client._client.headers["User-Agent"] == "anime-planner/0.1.0"
        assert client._client.headers["Accept"] == "application/json"
        assert client._client.timeout.read == 15.0

        await client.close()

    @pytest.mark.asyncio
    @respx.mock
    async def test_query_posts_document_and_variables(self, client):
        route = respx.post(host=ANILIST_HOST).mock(return_value=httpx.Response(200, json=EMPTY_PAGE_RESPONSE))

        data = await client.query("query { Page { media { id } } }", {"perPage": 3})

        assert data == EMPTY_PAGE_RESPONSE["data"]
        body = sent_body(route)
        assert body["query"] == "query { Page { media { id } } }"
        assert body["variables"] == {"perPage": 3}

    @pytest.mark.asyncio
    @respx.mock
    async def test_seasonal_media_parses_items(self, client):
        route = respx.post(host=ANILIST_HOST).mock(
            return_value=httpx.Response(200, json=SEASONAL_MEDIA_RESPONSE)
        )

        items = await client.seasonal_media(season="SPRING", season_year=2024, genres=["Action"])

        assert [item.id for item in items] == [166873, 162804, 170942]
        assert all(isinstance(item, MediaItem) for item in items)
        assert items[0].title_preferred == "Kaiju No. 8"
        assert items[0].next_episode_number == 9
        assert items[2].title_preferred == "Blue Lock 2nd Season"
        assert items[2].genres == []
        assert items[2].cover_url is None
        variables = sent_body(route)["variables"]
        assert variables == {"season": "SPRING", "seasonYear": 2024, "genres": ["Action"], "perPage": 40}

    @pytest.mark.asyncio
    @respx.mock
    async def test_seasonal_media_sends_null_genres_when_unfiltered(self, client):
        route = respx.post(host=ANILIST_HOST).mock(return_value=httpx.Response(200, json=EMPTY_PAGE_RESPONSE))

        items = await client.seasonal_media(season="FALL", season_year=2026, genres=[], per_page=5)

        assert items == []
        variables = sent_body(route)["variables"]
        assert variables["genres"] is None
        assert variables["perPage"] == 5

    @pytest.mark.asyncio
    @respx.mock
    async def test_airing_schedules(self, client):
        route = respx.post(host=ANILIST_HOST).mock(
            return_value=httpx.Response(200, json=AIRING_SCHEDULE_RESPONSE)
        )

        events = await client.airing_schedules(start=100, end=700)

        assert [event.media_id for event in events] == [166873, 170942, 158028]
        assert all(isinstance(event, AiringEvent) for event in events)
        assert events[0].title == "Kaiju No. 8"
        assert sent_body(route)["variables"] == {"now": 100, "next": 700, "perPage": 50}

    @pytest.mark.asyncio
    @respx.mock
    async def test_trending_media(self, client):
        route = respx.post(host=ANILIST_HOST).mock(return_value=httpx.Response(200, json=TRENDING_RESPONSE))

        items = await client.trending_media(per_page=18)

        assert len(items) == 1
        assert items[0].cover_url == "https://s4.anilist.co/large/kaiju.jpg"
        assert items[0].description.startswith("Kafka")
        assert "TRENDING_DESC" in sent_body(route)["query"]

    @pytest.mark.asyncio
    @respx.mock
    async def test_missing_page_returns_empty_list(self, client):
        respx.post(host=ANILIST_HOST).mock(return_value=httpx.Response(200, json={"data": {}}))

        assert await client.trending_media() == []

    @pytest.mark.asyncio
    @respx.mock
    async def test_http_error_raises_anilist_error(self, client):
        respx.post(host=ANILIST_HOST).mock(return_value=httpx.Response(400, text="Bad Request"))

        with pytest.raises(AniListError, match="AniList responded with 400: Bad Request") as exc_info:
            await client.trending_media()

        assert exc_info.value.status_code == 400
        assert exc_info.value.transient is False

    @pytest.mark.asyncio
    @respx.mock
    async def test_graphql_errors_raise(self, client):
        respx.post(host=ANILIST_HOST).mock(return_value=httpx.Response(200, json=GRAPHQL_ERROR_RESPONSE))

        with pytest.raises(AniListError, match="MediaSeason"):
            await client.seasonal_media(season="SPRING", season_year=2024)

    @pytest.mark.asyncio
    @respx.mock
    async def test_graphql_errors_without_message_objects(self, client):
        respx.post(host=ANILIST_HOST).mock(
            return_value=httpx.Response(200, json={"errors": ["boom", {"message": "Bad season"}, None]})
        )

        with pytest.raises(AniListError, match="boom; Bad season") as exc_info:
            await client.trending_media()

        assert exc_info.value.status_code == 200

    @pytest.mark.asyncio
    @respx.mock
    async def test_non_json_body_raises(self, client):
        respx.post(host=ANILIST_HOST).mock(return_value=httpx.Response(200, text="<html>oops</html>"))

        with pytest.raises(AniListError, match="non-JSON"):
            await client.trending_media()

    @pytest.mark.asyncio
    @respx.mock
    async def test_malformed_records_raise(self, client):
        respx.post(host=ANILIST_HOST).mock(
            return_value=httpx.Response(
                200, json={"data": {"Page": {"airingSchedules": [{"mediaId": 1, "airingAt": 0}]}}}
            )
        )

        with pytest.raises(AniListError, match="malformed AiringEvent"):
            await client.airing_schedules(start=1, end=2)

    @pytest.mark.asyncio
    @respx.mock
    async def test_transport_error_is_wrapped(self, client):
        respx.post(host=ANILIST_HOST).mock(side_effect=httpx.ConnectError("connection refused"))

        with pytest.raises(AniListError, match="connection refused") as exc_info:
            await client.trending_media()

        assert exc_info.value.transient is True

    @pytest.mark.asyncio
    @respx.mock
    async def test_transient_errors_are_retried(self):
        route = respx.post(host=ANILIST_HOST).mock(
            side_effect=[
                httpx.Response(503, text="Service Unavailable"),
                httpx.Response(200, json=TRENDING_RESPONSE),
            ]
        )

        async with AniListClient(max_attempts=2) as client:
            items = await client.trending_media()

        assert route.call_count == 2
        assert [item.id for item in items] == [166873]

    @pytest.mark.asyncio
    @respx.mock
    async def test_client_errors_are_not_retried(self):
        route = respx.post(host=ANILIST_HOST).mock(return_value=httpx.Response(404, text="Not Found"))

        async with AniListClient(max_attempts=3) as client:
            with pytest.raises(AniListError):
                await client.trending_media()

        assert route.call_count == 1


@pytest.mark.asyncio
async def test_anilist_client_context_manager_closes():
    async with anilist_client() as client:
        assert isinstance(client, AniListClient)
    assert client._client.is_closed
