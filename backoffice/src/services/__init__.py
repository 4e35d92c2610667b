"""Domain services."""

from .call_status_service import CallStatusService
from .hierarchy_service import MarketingHierarchyService
from .profile_service import MarketingUserProfileService
from .schedule_service import WeeklyScheduleService

__all__ = [
    "CallStatusService",
    "MarketingHierarchyService",
    "MarketingUserProfileService",
    "WeeklyScheduleService",
]
