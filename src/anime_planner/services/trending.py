from __future__ import annotations

from anime_planner.clients.anilist import AniListClient
from anime_planner.models import TrendingResult
from anime_planner.services.automation import Clock, epoch_millis, utc_now


class TrendingService:
    """Passes AniList's trending feed through unchanged."""

    def __init__(self, client: AniListClient, *, per_page: int = 18, clock: Clock = utc_now) -> None:
        self._client = client
        self._per_page = per_page
        self._clock = clock

    async def trending(self, *, limit: int | None = None) -> TrendingResult:
        items = await self._client.trending_media(per_page=limit or self._per_page)
        return TrendingResult(generated_at=epoch_millis(self._clock()), items=items)


__all__ = ["TrendingService"]
