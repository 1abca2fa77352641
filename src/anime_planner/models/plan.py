from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, Field

from anime_planner.models.media import AiringEvent, MediaItem

Focus = Literal["score", "popularity"]


class PlanOptions(BaseModel):
    """User preferences driving the weekly automation plan."""

    episodes_per_day: int = Field(default=2, ge=1, strict=True, alias="episodesPerDay")
    focus: Focus = "score"
    include_completed: bool = Field(default=False, strict=True, alias="includeCompleted")
    preferred_genres: list[str] = Field(default_factory=list, alias="preferredGenres")

    model_config = {
        "populate_by_name": True,
        "extra": "ignore",
        "frozen": True,
    }


class PlanEntry(BaseModel):
    """A title placed on a given weekday."""

    title: str
    media_id: int = Field(alias="mediaId")
    episodes_assigned: int = Field(alias="episodes", ge=1)
    cover: str | None = None
    genres: list[str] = Field(default_factory=list)
    average_score: float | None = Field(default=None, alias="averageScore")
    status: str | None = None

    model_config = {
        "populate_by_name": True,
        "extra": "ignore",
    }


class DayPlan(BaseModel):
    day: str
    entries: list[PlanEntry] = Field(default_factory=list)

    @property
    def total_episodes(self) -> int:
        return sum(entry.episodes_assigned for entry in self.entries)


class AutomationResult(BaseModel):
    """Outcome of an automation run, mirroring the dashboard payload."""

    generated_at: int = Field(alias="generatedAt")
    plan: list[DayPlan] = Field(default_factory=list)
    source_total: int = Field(default=0, alias="sourceTotal")
    filters: PlanOptions
    episodes_per_day: dict[str, int] = Field(default_factory=dict, alias="episodesPerDay")

    model_config = {
        "populate_by_name": True,
    }


class ScheduleResult(BaseModel):
    generated_at: int = Field(alias="generatedAt")
    grouped: dict[str, list[AiringEvent]] = Field(default_factory=dict)
    total: int = 0

    model_config = {
        "populate_by_name": True,
    }


class TrendingResult(BaseModel):
    generated_at: int = Field(alias="generatedAt")
    items: list[MediaItem] = Field(default_factory=list)

    model_config = {
        "populate_by_name": True,
    }


__all__ = [
    "AutomationResult",
    "DayPlan",
    "Focus",
    "PlanEntry",
    "PlanOptions",
    "ScheduleResult",
    "TrendingResult",
]
