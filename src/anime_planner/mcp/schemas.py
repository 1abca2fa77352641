"""Pydantic schemas for MCP tool parameters and responses."""

from typing import Any, Literal

from pydantic import BaseModel, Field

# Tool Parameter Schemas


class BuildPlanParams(BaseModel):
    """Parameters for build_plan tool. Omitted fields fall back to configured defaults."""

    preferred_genres: list[str] | None = Field(None, description="Genres to filter the catalog by")
    episodes_per_day: int | None = Field(None, ge=1, description="Episode quota for each weekday")
    focus: Literal["score", "popularity"] | None = Field(None, description="Ranking key")
    include_completed: bool | None = Field(None, description="Keep finished titles")


class AiringScheduleParams(BaseModel):
    """Parameters for airing_schedule tool."""

    window_days: int = Field(7, ge=1, le=14, description="How many days ahead to look")


class TrendingParams(BaseModel):
    """Parameters for trending_anime tool."""

    limit: int = Field(18, ge=1, le=50, description="Number of titles to return")


# Tool Response Schemas


class PlanDay(BaseModel):
    """One weekday of a plan, flattened for agents."""

    day: str = Field(..., description="Weekday label")
    total_episodes: int = Field(..., description="Episodes scheduled that day")
    titles: list[str] = Field(default_factory=list, description="Titles in placement order")


class BuildPlanResponse(BaseModel):
    """Response from build_plan tool."""

    success: bool = Field(..., description="Whether operation succeeded")
    message: str = Field(..., description="Human-readable message")
    error: str | None = Field(None, description="Error type if failed")
    days: list[PlanDay] = Field(default_factory=list, description="Plan summary per weekday")
    plan: list[dict[str, Any]] = Field(default_factory=list, description="Full plan payload")
    source_total: int = Field(0, description="Catalog size before filtering")
    filters: dict[str, Any] = Field(default_factory=dict, description="Resolved plan options")


class AiringScheduleResponse(BaseModel):
    """Response from airing_schedule tool."""

    success: bool = Field(..., description="Whether operation succeeded")
    message: str = Field(..., description="Human-readable message")
    error: str | None = Field(None, description="Error type if failed")
    total: int = Field(0, description="Number of airing events")
    grouped: dict[str, list[dict[str, Any]]] = Field(
        default_factory=dict, description="Airing events keyed by UTC date"
    )


class TrendingAnime(BaseModel):
    """A trending title."""

    id: int = Field(..., description="AniList media ID")
    title: str = Field(..., description="Display title")
    average_score: float | None = Field(None, description="AniList average score")
    popularity: int | None = Field(None, description="AniList popularity")
    genres: list[str] = Field(default_factory=list, description="Genres")


class TrendingResponse(BaseModel):
    """Response from trending_anime tool."""

    success: bool = Field(..., description="Whether operation succeeded")
    message: str = Field(..., description="Human-readable message")
    error: str | None = Field(None, description="Error type if failed")
    items: list[TrendingAnime] = Field(default_factory=list, description="Trending titles")
    count: int = Field(0, description="Number of titles returned")
