from __future__ import annotations

import logging
from collections.abc import Callable, Mapping
from datetime import datetime, timezone
from typing import Any

from pydantic import ValidationError

from anime_planner.clients.anilist import AniListClient, current_season
from anime_planner.config import Settings
from anime_planner.models import AutomationResult, PlanOptions
from anime_planner.scheduling import InvalidArgumentError, build_plan, episodes_per_day_totals

logger = logging.getLogger(__name__)

Clock = Callable[[], datetime]

_OPTION_KEYS: dict[str, tuple[str, ...]] = {
    "episodes_per_day": ("episodesPerDay", "episodes_per_day"),
    "focus": ("focus",),
    "include_completed": ("includeCompleted", "include_completed"),
    "preferred_genres": ("preferredGenres", "preferred_genres"),
}


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def epoch_millis(moment: datetime) -> int:
    return int(moment.timestamp() * 1000)


def resolve_plan_options(
    payload: Mapping[str, Any] | None,
    settings: Settings | None = None,
) -> PlanOptions:
    """Validate a raw request payload, filling gaps from configured defaults."""
    if payload is not None and not isinstance(payload, Mapping):
        raise InvalidArgumentError(f"plan request must be an object, got {type(payload).__name__}")

    settings = settings or Settings()
    values: dict[str, Any] = {
        "episodes_per_day": settings.episodes_per_day,
        "focus": settings.focus,
        "include_completed": settings.include_completed,
        "preferred_genres": list(settings.preferred_genres),
    }
    for field, keys in _OPTION_KEYS.items():
        for key in keys:
            if payload and payload.get(key) is not None:
                values[field] = payload[key]
                break

    try:
        return PlanOptions.model_validate(values)
    except ValidationError as exc:
        raise InvalidArgumentError(f"Invalid plan options: {exc}") from exc


class AutomationService:
    """Fetches the current season's catalog and turns it into a weekly plan."""

    def __init__(
        self,
        client: AniListClient,
        *,
        per_page: int = 40,
        clock: Clock = utc_now,
    ) -> None:
        self._client = client
        self._per_page = per_page
        self._clock = clock

    async def build(self, options: PlanOptions) -> AutomationResult:
        now = self._clock()
        season, season_year = current_season(now)
        catalog = await self._client.seasonal_media(
            season=season,
            season_year=season_year,
            genres=options.preferred_genres or None,
            per_page=self._per_page,
        )

        plan = build_plan(catalog, options)
        placed = sum(len(day_plan.entries) for day_plan in plan)
        logger.info(
            f"[PLAN] {season} {season_year}: placed {placed}/{len(catalog)} titles "
            f"across {len(plan)} days (focus={options.focus}, per_day={options.episodes_per_day})"
        )

        return AutomationResult(
            generated_at=epoch_millis(now),
            plan=plan,
            source_total=len(catalog),
            filters=options,
            episodes_per_day=episodes_per_day_totals(plan),
        )


__all__ = ["AutomationService", "epoch_millis", "resolve_plan_options", "utc_now"]
