from .errors import InvalidArgumentError
from .grouping import group_by_day, utc_day_key
from .planner import (
    DAY_ORDER,
    DEFAULT_TOTAL_EPISODES,
    build_plan,
    episodes_per_day_totals,
    fair_share,
    total_episodes,
)

__all__ = [
    "DAY_ORDER",
    "DEFAULT_TOTAL_EPISODES",
    "InvalidArgumentError",
    "build_plan",
    "episodes_per_day_totals",
    "fair_share",
    "group_by_day",
    "total_episodes",
    "utc_day_key",
]
