from .media import (
    UNTITLED,
    AiringEvent,
    CoverImage,
    MediaItem,
    MediaSummary,
    MediaTitle,
    NextAiringEpisode,
    resolve_title,
)
from .plan import (
    AutomationResult,
    DayPlan,
    Focus,
    PlanEntry,
    PlanOptions,
    ScheduleResult,
    TrendingResult,
)

__all__ = [
    "AiringEvent",
    "AutomationResult",
    "CoverImage",
    "DayPlan",
    "Focus",
    "MediaItem",
    "MediaSummary",
    "MediaTitle",
    "NextAiringEpisode",
    "PlanEntry",
    "PlanOptions",
    "ScheduleResult",
    "TrendingResult",
    "UNTITLED",
    "resolve_title",
]
