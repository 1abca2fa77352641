"""Weekly automation planner.

Ranks a seasonal catalog by the requested focus and spreads it across the
week with a first-fit greedy pass, honouring a per-day episode quota.
"""

from __future__ import annotations

import logging
import math
from collections.abc import Sequence
from dataclasses import dataclass, field

from anime_planner.models import DayPlan, MediaItem, PlanEntry, PlanOptions
from anime_planner.scheduling.errors import InvalidArgumentError

logger = logging.getLogger(__name__)

DAY_ORDER: tuple[str, ...] = (
    "Monday",
    "Tuesday",
    "Wednesday",
    "Thursday",
    "Friday",
    "Saturday",
    "Sunday",
)
DEFAULT_TOTAL_EPISODES = 12
FINISHED_STATUS = "FINISHED"


@dataclass
class _DaySlot:
    day: str
    quota: int
    entries: list[PlanEntry] = field(default_factory=list)


def build_plan(catalog: Sequence[MediaItem], options: PlanOptions) -> list[DayPlan]:
    """Build a day-bucketed viewing plan from ``catalog``.

    Items are ranked by ``options.focus`` (stable, descending) and each one is
    placed on the first weekday that still has quota. An item lands on at most
    one day and is dropped once every day is full. Only days that received an
    entry are returned, in Monday..Sunday order.
    """
    _validate(catalog, options)

    eligible = [
        media
        for media in catalog
        if options.include_completed or media.status != FINISHED_STATUS
    ]
    if len(eligible) != len(catalog):
        logger.debug(f"[PLAN] Filtered {len(catalog) - len(eligible)} finished titles")

    ranked = sorted(eligible, key=lambda media: _rank_value(media, options.focus), reverse=True)

    slots = [_DaySlot(day=day, quota=options.episodes_per_day) for day in DAY_ORDER]

    for media in ranked:
        for slot in slots:
            if slot.quota <= 0:
                continue
            assigned = min(slot.quota, fair_share(total_episodes(media)))
            slot.entries.append(_entry_for(media, assigned))
            slot.quota -= assigned
            break
        else:
            logger.debug(f"[PLAN] No quota left for {media.title_preferred} ({media.id})")

    return [DayPlan(day=slot.day, entries=slot.entries) for slot in slots if slot.entries]


def total_episodes(media: MediaItem) -> int:
    """Known episode count, else the next airing episode number, else 12."""
    for candidate in (media.episodes, media.next_episode_number):
        if candidate is not None and candidate > 0:
            return candidate
    return DEFAULT_TOTAL_EPISODES


def fair_share(total: int) -> int:
    return math.ceil(total / len(DAY_ORDER))


def episodes_per_day_totals(plan: Sequence[DayPlan]) -> dict[str, int]:
    """Episodes scheduled per weekday, in plan order."""
    return {day_plan.day: day_plan.total_episodes for day_plan in plan}


def _rank_value(media: MediaItem, focus: str) -> float:
    if focus == "popularity":
        return media.popularity or 0
    return media.average_score or 0


def _entry_for(media: MediaItem, assigned: int) -> PlanEntry:
    return PlanEntry(
        title=media.title_preferred,
        media_id=media.id,
        episodes_assigned=assigned,
        cover=media.cover_url,
        genres=list(media.genres),
        average_score=media.average_score,
        status=media.status,
    )


def _validate(catalog: Sequence[MediaItem], options: PlanOptions) -> None:
    if isinstance(catalog, (str, bytes)) or not isinstance(catalog, Sequence):
        raise InvalidArgumentError(
            f"catalog must be a sequence of MediaItem, got {type(catalog).__name__}"
        )
    if not isinstance(options, PlanOptions):
        raise InvalidArgumentError(f"options must be PlanOptions, got {type(options).__name__}")

    quota = options.episodes_per_day
    if isinstance(quota, bool) or not isinstance(quota, int) or quota < 1:
        raise InvalidArgumentError(f"episodes_per_day must be a positive integer, got {quota!r}")
    if options.focus not in ("score", "popularity"):
        raise InvalidArgumentError(f"focus must be 'score' or 'popularity', got {options.focus!r}")

    for index, media in enumerate(catalog):
        if not isinstance(media, MediaItem):
            raise InvalidArgumentError(
                f"catalog[{index}] must be a MediaItem, got {type(media).__name__}"
            )


__all__ = [
    "DAY_ORDER",
    "DEFAULT_TOTAL_EPISODES",
    "build_plan",
    "episodes_per_day_totals",
    "fair_share",
    "total_episodes",
]
