from __future__ import annotations

import logging

from anime_planner.clients.anilist import AniListClient
from anime_planner.models import ScheduleResult
from anime_planner.scheduling import InvalidArgumentError, group_by_day
from anime_planner.services.automation import Clock, epoch_millis, utc_now

logger = logging.getLogger(__name__)

DAY_SECONDS = 86400


class ScheduleService:
    """Collects the upcoming week of airings grouped by UTC day."""

    def __init__(
        self,
        client: AniListClient,
        *,
        per_page: int = 50,
        window_days: int = 7,
        clock: Clock = utc_now,
    ) -> None:
        if isinstance(window_days, bool) or not isinstance(window_days, int) or window_days < 1:
            raise InvalidArgumentError(f"window_days must be a positive integer, got {window_days!r}")
        self._client = client
        self._per_page = per_page
        self._window_days = window_days
        self._clock = clock

    async def upcoming(self) -> ScheduleResult:
        now = self._clock()
        start = int(now.timestamp())
        end = start + DAY_SECONDS * self._window_days

        events = await self._client.airing_schedules(start=start, end=end, per_page=self._per_page)
        grouped = group_by_day(events)
        logger.info(f"[SCHEDULE] {len(events)} airings over {len(grouped)} days")

        return ScheduleResult(generated_at=epoch_millis(now), grouped=grouped, total=len(events))


__all__ = ["DAY_SECONDS", "ScheduleService"]
