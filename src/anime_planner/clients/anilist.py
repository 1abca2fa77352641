from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from typing import Any

import httpx
from pydantic import ValidationError
from tenacity import AsyncRetrying, retry_if_exception, stop_after_attempt, wait_exponential

from anime_planner.models import AiringEvent, MediaItem

logger = logging.getLogger(__name__)

ANILIST_URL = "https://graphql.anilist.co"
DEFAULT_TIMEOUT = 20.0
USER_AGENT = "anime-planner/0.1.0"

SEASONAL_MEDIA_QUERY = """
query AutomatedPlan($season: MediaSeason!, $seasonYear: Int!, $genres: [String], $perPage: Int!) {
  Page(perPage: $perPage) {
    media(
      type: ANIME,
      season: $season,
      seasonYear: $seasonYear,
      sort: [POPULARITY_DESC, SCORE_DESC],
      genre_in: $genres,
      status_not_in: [CANCELLED, HIATUS],
      format_not: MUSIC
    ) {
      id
      status
      title { romaji english }
      coverImage { medium color }
      episodes
      averageScore
      popularity
      genres
      nextAiringEpisode { airingAt episode }
    }
  }
}
"""

AIRING_SCHEDULE_QUERY = """
query Airing($now: Int!, $next: Int!, $perPage: Int!) {
  Page(perPage: $perPage) {
    airingSchedules(airingAt_greater: $now, airingAt_lesser: $next, sort: TIME) {
      id
      mediaId
      episode
      airingAt
      timeUntilAiring
      media {
        title { romaji english }
        coverImage { medium color }
        episodes
        genres
        averageScore
      }
    }
  }
}
"""

TRENDING_QUERY = """
query Trending($perPage: Int!) {
  Page(perPage: $perPage) {
    media(sort: TRENDING_DESC, type: ANIME, status_not: CANCELLED, format_not: MUSIC) {
      id
      status
      title { romaji english }
      coverImage { large color }
      description(asHtml: false)
      averageScore
      popularity
      genres
      episodes
      nextAiringEpisode { airingAt episode timeUntilAiring }
    }
  }
}
"""


class AniListError(RuntimeError):
    """Raised when AniList cannot satisfy a query."""

    def __init__(self, message: str, *, status_code: int | None = None, transient: bool = False) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.transient = transient


def current_season(now: datetime | None = None) -> tuple[str, int]:
    """AniList season and year for ``now`` (UTC)."""
    moment = now or datetime.now(timezone.utc)
    if moment.tzinfo is not None:
        moment = moment.astimezone(timezone.utc)
    month = moment.month
    if 3 <= month <= 5:
        season = "SPRING"
    elif 6 <= month <= 8:
        season = "SUMMER"
    elif 9 <= month <= 11:
        season = "FALL"
    else:
        season = "WINTER"
    return season, moment.year


class AniListClient:
    """Thin asynchronous wrapper around the AniList GraphQL API."""

    def __init__(
        self,
        base_url: str = ANILIST_URL,
        *,
        timeout: float = DEFAULT_TIMEOUT,
        max_attempts: int = 3,
    ) -> None:
        self._url = base_url.rstrip("/")
        self._max_attempts = max_attempts
        headers = {
            "User-Agent": USER_AGENT,
            "Content-Type": "application/json",
            "Accept": "application/json",
        }
        self._client = httpx.AsyncClient(headers=headers, timeout=timeout)

    async def close(self) -> None:
        await self._client.aclose()

    async def query(self, document: str, variables: Mapping[str, Any] | None = None) -> dict[str, Any]:
        """Run a GraphQL document and return its ``data`` object."""
        async for attempt in _retry_policy(self._max_attempts):
            with attempt:
                return await self._post(document, dict(variables or {}))
        raise AniListError("Unable to query AniList after retries")

    async def seasonal_media(
        self,
        *,
        season: str,
        season_year: int,
        genres: Iterable[str] | None = None,
        per_page: int = 40,
    ) -> list[MediaItem]:
        genre_filter = list(genres or []) or None
        data = await self.query(
            SEASONAL_MEDIA_QUERY,
            {
                "season": season,
                "seasonYear": season_year,
                "genres": genre_filter,
                "perPage": per_page,
            },
        )
        media = _page_field(data, "media")
        logger.info(f"[ANILIST] {season} {season_year}: {len(media)} titles (genres={genre_filter})")
        return _parse_all(MediaItem, media)

    async def airing_schedules(self, *, start: int, end: int, per_page: int = 50) -> list[AiringEvent]:
        data = await self.query(
            AIRING_SCHEDULE_QUERY,
            {"now": start, "next": end, "perPage": per_page},
        )
        schedules = _page_field(data, "airingSchedules")
        logger.info(f"[ANILIST] {len(schedules)} airing events between {start} and {end}")
        return _parse_all(AiringEvent, schedules)

    async def trending_media(self, *, per_page: int = 18) -> list[MediaItem]:
        data = await self.query(TRENDING_QUERY, {"perPage": per_page})
        return _parse_all(MediaItem, _page_field(data, "media"))

    async def _post(self, document: str, variables: dict[str, Any]) -> dict[str, Any]:
        try:
            response = await self._client.post(
                self._url,
                json={"query": document, "variables": variables},
            )
        except httpx.TransportError as exc:
            raise AniListError(f"AniList request failed: {exc}", transient=True) from exc

        if response.is_error:
            status = response.status_code
            raise AniListError(
                f"AniList responded with {status}: {response.text}",
                status_code=status,
                transient=status == 429 or status >= 500,
            )

        try:
            payload = response.json()
        except ValueError as exc:  # response was not JSON
            raise AniListError("AniList returned a non-JSON body", status_code=response.status_code) from exc

        if not isinstance(payload, dict):
            raise AniListError("AniList returned an unexpected payload", status_code=response.status_code)

        errors = payload.get("errors")
        if errors:
            if not isinstance(errors, list):
                errors = [errors]
            messages = "; ".join(
                str(error.get("message", error) if isinstance(error, Mapping) else error)
                for error in errors
                if error
            )
            raise AniListError(f"AniList query failed: {messages}", status_code=response.status_code)

        return payload.get("data") or {}

    async def __aenter__(self) -> AniListClient:
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:  # type: ignore[override]
        await self.close()


@asynccontextmanager
async def anilist_client(
    base_url: str = ANILIST_URL,
    *,
    timeout: float = DEFAULT_TIMEOUT,
):
    client = AniListClient(base_url=base_url, timeout=timeout)
    try:
        yield client
    finally:
        await client.close()


def _page_field(data: Mapping[str, Any], field: str) -> list[dict[str, Any]]:
    page = data.get("Page") or {}
    return list(page.get(field) or [])


def _parse_all(model, records: list[dict[str, Any]]) -> list:
    try:
        return [model.model_validate(record) for record in records]
    except ValidationError as exc:
        raise AniListError(f"AniList returned malformed {model.__name__} records: {exc}") from exc


def _is_transient(exc: BaseException) -> bool:
    return isinstance(exc, AniListError) and exc.transient


def _retry_policy(max_attempts: int) -> AsyncRetrying:
    return AsyncRetrying(
        stop=stop_after_attempt(max_attempts),
        wait=wait_exponential(multiplier=0.5, max=6),
        retry=retry_if_exception(_is_transient),
        reraise=True,
    )


__all__ = [
    "AniListClient",
    "AniListError",
    "anilist_client",
    "current_season",
]
