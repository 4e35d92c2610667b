"""
Unit tests for the domain services.

Tests cover:
- Call status lifecycle and key conflicts
- Marketing hierarchy parent checks and cascading delete
- Profile create-or-update
- Weekly schedule duplicates and ordering
"""

import pytest
from unittest.mock import AsyncMock

from backoffice.src.errors import (
    ConflictError,
    NotFoundError,
    ScheduleAlreadyExistsError,
    ValidationError,
)
from backoffice.src.models.entities import MarketingBranch
from backoffice.src.services import (
    CallStatusService,
    MarketingHierarchyService,
    MarketingUserProfileService,
    WeeklyScheduleService,
)


# ============================================================================
# FIXTURES
# ============================================================================


@pytest.fixture
def call_status_service(call_status_repo):
    return CallStatusService(call_status_repo)


@pytest.fixture
def hierarchy_service(area_repo, sub_area_repo, branch_repo):
    return MarketingHierarchyService(area_repo, sub_area_repo, branch_repo)


@pytest.fixture
def profile_service(profile_repo):
    return MarketingUserProfileService(profile_repo)


@pytest.fixture
def schedule_service(schedule_repo, branch_repo):
    return WeeklyScheduleService(schedule_repo, branch_repo)


def week(week_number, **overrides):
    body = {"user_id": 1, "year": 2024, "month": 5, "week_number": week_number}
    body.update(overrides)
    return body


# ============================================================================
# CALL STATUSES
# ============================================================================


class TestCallStatusService:
    """Test call status operations."""

    @pytest.mark.asyncio
    async def test_create_and_get(self, call_status_service):
        created = await call_status_service.create_status(
            {"key": "no_answer", "label": "No answer"}, created_by="admin"
        )

        found = await call_status_service.get_status("no_answer")

        assert found == created
        assert found.created_by == "admin"

    @pytest.mark.asyncio
    async def test_invalid_request_never_reaches_repository(self):
        repo = AsyncMock()
        service = CallStatusService(repo)

        with pytest.raises(ValidationError):
            await service.create_status({"key": "", "label": "x" * 101})

        repo.exists_by_key.assert_not_called()
        repo.save.assert_not_called()

    @pytest.mark.asyncio
    async def test_duplicate_key(self, call_status_service):
        await call_status_service.create_status({"key": "busy", "label": "Busy"})

        with pytest.raises(ConflictError):
            await call_status_service.create_status({"key": "busy", "label": "Other"})

        assert (await call_status_service.get_status("busy")).label == "Busy"

    @pytest.mark.asyncio
    async def test_get_missing(self, call_status_service):
        with pytest.raises(NotFoundError) as exc_info:
            await call_status_service.get_status("nope")

        assert exc_info.value.field == "key"

    @pytest.mark.asyncio
    async def test_update_changes_label_only(self, call_status_service):
        await call_status_service.create_status({"key": "busy", "label": "Busy"})

        updated = await call_status_service.update_status(
            "busy", {"key": "renamed", "label": "Line busy"}
        )

        assert updated.key == "busy"
        assert updated.label == "Line busy"

    @pytest.mark.asyncio
    async def test_update_missing(self, call_status_service):
        with pytest.raises(NotFoundError):
            await call_status_service.update_status("nope", {"key": "nope", "label": "x"})

    @pytest.mark.asyncio
    async def test_delete(self, call_status_service):
        await call_status_service.create_status({"key": "busy", "label": "Busy"})

        await call_status_service.delete_status("busy")

        assert await call_status_service.list_statuses() == []
        with pytest.raises(NotFoundError):
            await call_status_service.delete_status("busy")


# ============================================================================
# MARKETING HIERARCHY
# ============================================================================


class TestMarketingHierarchyService:
    """Test the area / sub-area / branch tree."""

    @pytest.mark.asyncio
    async def test_build_tree(self, hierarchy_service):
        area = await hierarchy_service.create_area({"name": "North", "code": "N"}, created_by=3)
        sub_area = await hierarchy_service.create_sub_area({"name": "N1", "area_id": area.id})
        direct = await hierarchy_service.create_branch({"name": "HQ", "area_id": area.id})
        nested = await hierarchy_service.create_branch(
            {"name": "Port", "area_id": area.id, "sub_area_id": sub_area.id}
        )

        assert area.created_by == 3
        assert await hierarchy_service.sub_areas_of(area.id) == [sub_area]
        assert await hierarchy_service.branches_of_area(area.id) == [direct, nested]
        assert await hierarchy_service.branches_of_area(area.id, unassigned_only=True) == [direct]
        assert await hierarchy_service.branches_of_sub_area(sub_area.id) == [nested]

    @pytest.mark.asyncio
    async def test_duplicate_area_name(self, hierarchy_service):
        await hierarchy_service.create_area({"name": "North"})

        with pytest.raises(ConflictError):
            await hierarchy_service.create_area({"name": "North"})

    @pytest.mark.asyncio
    async def test_missing_parent_area(self, hierarchy_service):
        with pytest.raises(NotFoundError):
            await hierarchy_service.create_sub_area({"name": "Orphan", "area_id": 99})
        with pytest.raises(NotFoundError):
            await hierarchy_service.sub_areas_of(99)

    @pytest.mark.asyncio
    async def test_branch_sub_area_from_other_area(self, hierarchy_service):
        north = await hierarchy_service.create_area({"name": "North"})
        south = await hierarchy_service.create_area({"name": "South"})
        south_sub = await hierarchy_service.create_sub_area({"name": "S1", "area_id": south.id})

        with pytest.raises(ValidationError) as exc_info:
            await hierarchy_service.create_branch(
                {"name": "Mixed", "area_id": north.id, "sub_area_id": south_sub.id}
            )

        assert exc_info.value.codes_for("sub_area_id") == ["wrong_area"]

    @pytest.mark.asyncio
    async def test_delete_area_cascades(self, hierarchy_service, branch_repo, sub_area_repo):
        north = await hierarchy_service.create_area({"name": "North"})
        south = await hierarchy_service.create_area({"name": "South"})
        sub_area = await hierarchy_service.create_sub_area({"name": "N1", "area_id": north.id})
        await hierarchy_service.create_branch(
            {"name": "Port", "area_id": north.id, "sub_area_id": sub_area.id}
        )
        kept = await hierarchy_service.create_branch({"name": "Bay", "area_id": south.id})

        await hierarchy_service.delete_area(north.id)

        assert await hierarchy_service.list_areas() == [south]
        assert await sub_area_repo.count() == 0
        assert await branch_repo.find_all() == [kept]
        with pytest.raises(NotFoundError):
            await hierarchy_service.delete_area(north.id)

    @pytest.mark.asyncio
    async def test_area_validation(self, hierarchy_service):
        with pytest.raises(ValidationError) as exc_info:
            await hierarchy_service.create_area({"name": " ", "code": "C" * 51})

        assert exc_info.value.fields == ["name", "code"]


# ============================================================================
# PROFILES
# ============================================================================


class TestMarketingUserProfileService:
    """Test profile operations."""

    @pytest.mark.asyncio
    async def test_create_then_update(self, profile_service):
        created = await profile_service.create_or_update_profile(
            5, {"department_manager": "Kim", "manager_name": "Lee"}
        )
        updated = await profile_service.create_or_update_profile(
            5, {"manager_name": "Park", "user_signature": "Regards"}
        )

        assert updated.id == created.id
        assert updated.user_id == 5
        assert updated.manager_name == "Park"
        assert updated.department_manager is None
        assert (await profile_service.get_profile(5)) == updated

    @pytest.mark.asyncio
    async def test_get_missing_profile(self, profile_service):
        assert await profile_service.get_profile(5) is None

    @pytest.mark.asyncio
    async def test_delete_is_idempotent(self, profile_service):
        await profile_service.create_or_update_profile(5, {})

        assert await profile_service.delete_profile(5) is True
        assert await profile_service.delete_profile(5) is False

    @pytest.mark.asyncio
    async def test_field_too_long(self, profile_service):
        with pytest.raises(ValidationError) as exc_info:
            await profile_service.create_or_update_profile(5, {"manager_name": "x" * 121})

        assert exc_info.value.codes_for("manager_name") == ["too_long"]


# ============================================================================
# WEEKLY SCHEDULES
# ============================================================================


class TestWeeklyScheduleService:
    """Test schedule operations."""

    @pytest.mark.asyncio
    async def test_create_and_get(self, schedule_service):
        schedule = await schedule_service.create_schedule(week(1), created_by=9)

        found = await schedule_service.get_schedule(schedule.id)

        assert found == schedule
        assert found.created_by == 9

    @pytest.mark.asyncio
    async def test_duplicate_week(self, schedule_service):
        await schedule_service.create_schedule(week(2))

        with pytest.raises(ScheduleAlreadyExistsError) as exc_info:
            await schedule_service.create_schedule(week(2))

        assert isinstance(exc_info.value, ConflictError)
        assert exc_info.value.week_number == 2

    @pytest.mark.asyncio
    async def test_store_conflict_reported_as_schedule_conflict(self, schedule_repo):
        schedule_repo.exists_by_user_id_and_period = AsyncMock(return_value=False)
        service = WeeklyScheduleService(schedule_repo)
        await service.create_schedule(week(1))

        with pytest.raises(ScheduleAlreadyExistsError):
            await service.create_schedule(week(1))

    @pytest.mark.asyncio
    async def test_same_week_other_user(self, schedule_service):
        await schedule_service.create_schedule(week(1))

        other = await schedule_service.create_schedule(week(1, user_id=2))

        assert other.user_id == 2

    @pytest.mark.asyncio
    async def test_unknown_branch(self, schedule_service):
        with pytest.raises(NotFoundError):
            await schedule_service.create_schedule(week(1, branch_id=77))

    @pytest.mark.asyncio
    async def test_known_branch(self, schedule_service, branch_repo):
        branch = await branch_repo.save(MarketingBranch(name="HQ", area_id=1))

        schedule = await schedule_service.create_schedule(week(1, branch_id=branch.id))

        assert schedule.branch_id == branch.id

    @pytest.mark.asyncio
    async def test_list_ordered_by_week(self, schedule_service):
        for number in (4, 2, 3):
            await schedule_service.create_schedule(week(number))
        await schedule_service.create_schedule(week(1, month=6))

        schedules = await schedule_service.list_user_schedules(1, 2024, 5)

        assert [s.week_number for s in schedules] == [2, 3, 4]

    @pytest.mark.asyncio
    async def test_delete(self, schedule_service):
        schedule = await schedule_service.create_schedule(week(1))

        await schedule_service.delete_schedule(schedule.id)

        with pytest.raises(NotFoundError):
            await schedule_service.get_schedule(schedule.id)
        with pytest.raises(NotFoundError):
            await schedule_service.delete_schedule(schedule.id)

    @pytest.mark.asyncio
    async def test_invalid_week(self, schedule_service):
        with pytest.raises(ValidationError) as exc_info:
            await schedule_service.create_schedule(week(7))

        assert exc_info.value.codes_for("week_number") == ["out_of_range"]
