from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field, field_validator

UNTITLED = "Untitled"


class MediaTitle(BaseModel):
    """Title variants as returned by AniList."""

    english: str | None = None
    romaji: str | None = None

    model_config = {
        "populate_by_name": True,
        "extra": "ignore",
        "frozen": True,
    }


class CoverImage(BaseModel):
    medium: str | None = None
    large: str | None = None
    color: str | None = None

    model_config = {
        "populate_by_name": True,
        "extra": "ignore",
        "frozen": True,
    }


class NextAiringEpisode(BaseModel):
    airing_at: int | None = Field(default=None, alias="airingAt")
    episode: int | None = None
    time_until_airing: int | None = Field(default=None, alias="timeUntilAiring")

    model_config = {
        "populate_by_name": True,
        "extra": "ignore",
        "frozen": True,
    }


def resolve_title(title: MediaTitle | None) -> str:
    """Pick the first non-empty title variant, preferring the English one."""
    if title is None:
        return UNTITLED
    for candidate in (title.english, title.romaji):
        if candidate:
            return candidate
    return UNTITLED


class MediaItem(BaseModel):
    """A single watchable title from the AniList catalog."""

    id: int
    title: MediaTitle = Field(default_factory=MediaTitle)
    status: str | None = None
    episodes: int | None = None
    average_score: float | None = Field(default=None, alias="averageScore")
    popularity: int | None = None
    genres: list[str] = Field(default_factory=list)
    cover_image: CoverImage | None = Field(default=None, alias="coverImage")
    next_airing_episode: NextAiringEpisode | None = Field(default=None, alias="nextAiringEpisode")
    description: str | None = None

    model_config = {
        "populate_by_name": True,
        "extra": "ignore",
        "frozen": True,
    }

    @field_validator("genres", mode="before")
    @classmethod
    def _none_genres(cls, value: Any) -> Any:
        return [] if value is None else value

    @property
    def title_preferred(self) -> str:
        return resolve_title(self.title)

    @property
    def cover_url(self) -> str | None:
        if self.cover_image is None:
            return None
        return self.cover_image.medium or self.cover_image.large

    @property
    def next_episode_number(self) -> int | None:
        if self.next_airing_episode is None:
            return None
        return self.next_airing_episode.episode


class MediaSummary(BaseModel):
    """Denormalized media record embedded in an airing event."""

    title: MediaTitle = Field(default_factory=MediaTitle)
    cover_image: CoverImage | None = Field(default=None, alias="coverImage")
    episodes: int | None = None
    genres: list[str] = Field(default_factory=list)
    average_score: float | None = Field(default=None, alias="averageScore")

    model_config = {
        "populate_by_name": True,
        "extra": "ignore",
        "frozen": True,
    }

    @field_validator("genres", mode="before")
    @classmethod
    def _none_genres(cls, value: Any) -> Any:
        return [] if value is None else value

    @property
    def title_preferred(self) -> str:
        return resolve_title(self.title)


class AiringEvent(BaseModel):
    """One scheduled episode broadcast."""

    media_id: int = Field(alias="mediaId")
    episode: int | None = None
    airing_at: int = Field(alias="airingAt", gt=0)
    time_until_airing: int | None = Field(default=None, alias="timeUntilAiring")
    media: MediaSummary | None = None

    model_config = {
        "populate_by_name": True,
        "extra": "ignore",
        "frozen": True,
    }

    @property
    def title(self) -> str:
        return self.media.title_preferred if self.media else UNTITLED


__all__ = [
    "AiringEvent",
    "CoverImage",
    "MediaItem",
    "MediaSummary",
    "MediaTitle",
    "NextAiringEpisode",
    "UNTITLED",
    "resolve_title",
]
