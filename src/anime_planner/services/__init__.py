from .automation import AutomationService, resolve_plan_options
from .schedule import ScheduleService
from .trending import TrendingService

__all__ = [
    "AutomationService",
    "ScheduleService",
    "TrendingService",
    "resolve_plan_options",
]
