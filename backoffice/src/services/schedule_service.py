"""
Weekly schedules of marketing users.

A user has at most one schedule per (year, month, week number).
"""

from typing import Any, List, Optional

import structlog

from backoffice.src.errors import ConflictError, NotFoundError, ScheduleAlreadyExistsError
from backoffice.src.models.entities import WeeklySchedule
from backoffice.src.models.requests import WeeklyScheduleRequest
from backoffice.src.repositories.marketing import MarketingBranchRepository, WeeklyScheduleRepository
from backoffice.src.validation import RequestValidator

logger = structlog.get_logger(__name__)

PERIOD_CONSTRAINT = "uq_weekly_schedules_user_period"


class WeeklyScheduleService:
    """Service for weekly schedule operations."""

    def __init__(
        self,
        schedule_repo: WeeklyScheduleRepository,
        branch_repo: Optional[MarketingBranchRepository] = None
    ):
        """
        Initialize schedule service.

        Args:
            schedule_repo: Weekly schedule repository
            branch_repo: Branch repository used to check ``branch_id``; the
                check is skipped when omitted
        """
        self.schedule_repo = schedule_repo
        self.branch_repo = branch_repo
        self.validator = RequestValidator(WeeklyScheduleRequest)

    async def create_schedule(self, raw: Any, created_by: Optional[int] = None) -> WeeklySchedule:
        """
        Create a weekly schedule.

        Args:
            raw: Raw request body
            created_by: Id of the creating user

        Returns:
            Created schedule

        Raises:
            ValidationError: If the request is invalid
            NotFoundError: If the referenced branch does not exist
            ScheduleAlreadyExistsError: If the user already has a schedule
                for that week
        """
        request = self.validator.validate(raw)
        period = (request.user_id, request.year, request.month, request.week_number)

        if await self.schedule_repo.exists_by_user_id_and_period(*period):
            logger.warning(
                "schedule_already_exists",
                user_id=request.user_id,
                year=request.year,
                month=request.month,
                week_number=request.week_number
            )
            raise ScheduleAlreadyExistsError(*period)

        if request.branch_id is not None and self.branch_repo is not None:
            if not await self.branch_repo.exists_by_id(request.branch_id):
                raise NotFoundError("MarketingBranch", request.branch_id)

        try:
            schedule = await self.schedule_repo.save(
                WeeklySchedule(**request.model_dump(), created_by=created_by)
            )
        except ConflictError as e:
            # concurrent insert for the same week
            if e.constraint == PERIOD_CONSTRAINT:
                raise ScheduleAlreadyExistsError(*period) from e
            raise

        logger.info("schedule_created", schedule_id=schedule.id, user_id=schedule.user_id)
        return schedule

    async def get_schedule(self, schedule_id: int) -> WeeklySchedule:
        schedule = await self.schedule_repo.find_by_id(schedule_id)
        if schedule is None:
            raise NotFoundError("WeeklySchedule", schedule_id)
        return schedule

    async def list_user_schedules(self, user_id: int, year: int, month: int) -> List[WeeklySchedule]:
        """Schedules of a user for one month, ordered by week number."""
        return await self.schedule_repo.find_by_user_id_and_year_and_month(user_id, year, month)

    async def delete_schedule(self, schedule_id: int) -> None:
        """
        Delete a schedule.

        Raises:
            NotFoundError: If the schedule does not exist
        """
        if not await self.schedule_repo.delete_by_id(schedule_id):
            raise NotFoundError("WeeklySchedule", schedule_id)
        logger.info("schedule_deleted", schedule_id=schedule_id)
