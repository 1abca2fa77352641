from __future__ import annotations

from collections.abc import Sequence
from datetime import datetime, timezone

from anime_planner.models import AiringEvent
from anime_planner.scheduling.errors import InvalidArgumentError


def utc_day_key(epoch_seconds: int) -> str:
    """ISO calendar date (UTC) for a unix timestamp."""
    return datetime.fromtimestamp(epoch_seconds, tz=timezone.utc).date().isoformat()


def group_by_day(events: Sequence[AiringEvent]) -> dict[str, list[AiringEvent]]:
    """Bucket airing events by UTC calendar day.

    Keys follow first-seen order and each bucket keeps input order. Events are
    not re-sorted, so chronological buckets require chronological input.
    """
    if isinstance(events, (str, bytes)) or not isinstance(events, Sequence):
        raise InvalidArgumentError(
            f"events must be a sequence of AiringEvent, got {type(events).__name__}"
        )

    grouped: dict[str, list[AiringEvent]] = {}
    for index, event in enumerate(events):
        if not isinstance(event, AiringEvent):
            raise InvalidArgumentError(
                f"events[{index}] must be an AiringEvent, got {type(event).__name__}"
            )
        grouped.setdefault(utc_day_key(event.airing_at), []).append(event)
    return grouped


__all__ = ["group_by_day", "utc_day_key"]
