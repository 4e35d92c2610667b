"""
Repositories for the marketing hierarchy, user profiles and weekly schedules.
"""

from backoffice.src.models.entities import (
    MarketingArea,
    MarketingBranch,
    MarketingSubArea,
    MarketingUserProfile,
    WeeklySchedule,
)
from backoffice.src.repositories.base import (
    CrudRepository,
    delete_by,
    exists_by,
    find_many,
    find_one,
)
from backoffice.src.repositories.query import Comparator


class MarketingAreaRepository(CrudRepository[MarketingArea]):
    entity = MarketingArea
    table = "marketing_areas"

    find_by_name = find_one("name")
    find_by_code = find_one("code")
    exists_by_name = exists_by("name")


class MarketingSubAreaRepository(CrudRepository[MarketingSubArea]):
    entity = MarketingSubArea
    table = "marketing_sub_areas"

    find_by_area_id = find_many("area_id")
    delete_by_area_id = delete_by("area_id")


class MarketingBranchRepository(CrudRepository[MarketingBranch]):
    entity = MarketingBranch
    table = "marketing_branches"

    find_by_area_id = find_many("area_id")
    find_by_sub_area_id = find_many("sub_area_id")
    # branches attached directly to an area
    find_unassigned_by_area_id = find_many("area_id", ("sub_area_id", Comparator.IS_NULL))
    delete_by_area_id = delete_by("area_id")


class MarketingUserProfileRepository(CrudRepository[MarketingUserProfile]):
    entity = MarketingUserProfile
    table = "marketing_user_profiles"

    find_by_user_id = find_one("user_id")
    delete_by_user_id = delete_by("user_id")


class WeeklyScheduleRepository(CrudRepository[WeeklySchedule]):
    entity = WeeklySchedule
    table = "weekly_schedules"

    exists_by_user_id_and_period = exists_by("user_id", "year", "month", "week_number")
    find_by_user_id_and_year_and_month = find_many(
        "user_id", "year", "month", order_by=("week_number",)
    )
