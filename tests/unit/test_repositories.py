"""
Unit tests for the generic repository and the derived queries.

Tests cover:
- save / find_by_id / delete_by_id round trips
- Insert-or-update by id
- Derived query cardinalities (one, many, exists, count, delete)
- Unique violations surfacing as conflicts
- Declaration-time field checks and call-time arity checks
- Repository metrics
"""

import pytest

from backoffice.src.errors import ConflictError, MultipleResultsError
from backoffice.src.models.entities import (
    CallStatus,
    MarketingArea,
    MarketingBranch,
    MarketingSubArea,
    MarketingUserProfile,
    WeeklySchedule,
)
from backoffice.src.repositories import (
    Cardinality,
    CallStatusRepository,
    CrudRepository,
    DerivedQuery,
    MarketingBranchRepository,
    count_by,
    find_many,
    find_one,
)


# ============================================================================
# CRUD
# ============================================================================


class TestCrud:
    """Test the generic CRUD operations."""

    @pytest.mark.asyncio
    async def test_save_then_find_by_id(self, call_status_repo):
        saved = await call_status_repo.save(CallStatus(key="no_answer", label="No answer"))

        found = await call_status_repo.find_by_id(saved.id)

        assert saved.id is not None
        assert saved.created_at is not None
        assert found == saved

    @pytest.mark.asyncio
    async def test_find_by_id_absent(self, call_status_repo):
        assert await call_status_repo.find_by_id(404) is None
        assert await call_status_repo.exists_by_id(404) is False

    @pytest.mark.asyncio
    async def test_save_existing_updates(self, call_status_repo):
        saved = await call_status_repo.save(CallStatus(key="busy", label="Busy"))

        saved.label = "Line busy"
        updated = await call_status_repo.save(saved)

        assert updated.id == saved.id
        assert updated.label == "Line busy"
        assert updated.created_at == saved.created_at
        assert updated.updated_at >= saved.updated_at
        assert await call_status_repo.count() == 1

    @pytest.mark.asyncio
    async def test_save_with_unknown_id_inserts(self, call_status_repo):
        saved = await call_status_repo.save(CallStatus(id=42, key="busy", label="Busy"))

        assert saved.id == 42
        assert (await call_status_repo.find_by_id(42)).key == "busy"

    @pytest.mark.asyncio
    async def test_find_all_ordered_by_id(self, call_status_repo):
        for key in ("c", "a", "b"):
            await call_status_repo.save(CallStatus(key=key, label=key.upper()))

        statuses = await call_status_repo.find_all()

        assert [s.key for s in statuses] == ["c", "a", "b"]
        assert [s.id for s in statuses] == sorted(s.id for s in statuses)

    @pytest.mark.asyncio
    async def test_delete_by_id(self, call_status_repo):
        saved = await call_status_repo.save(CallStatus(key="busy", label="Busy"))

        assert await call_status_repo.delete_by_id(saved.id) is True
        assert await call_status_repo.delete_by_id(saved.id) is False
        assert await call_status_repo.find_by_id(saved.id) is None

    @pytest.mark.asyncio
    async def test_unique_violation_keeps_existing_row(self, call_status_repo):
        original = await call_status_repo.save(CallStatus(key="busy", label="Busy"))

        with pytest.raises(ConflictError):
            await call_status_repo.save(CallStatus(key="busy", label="Something else"))

        assert await call_status_repo.find_by_key("busy") == original
        assert await call_status_repo.count() == 1


# ============================================================================
# DERIVED QUERIES
# ============================================================================


class TestDerivedQueries:
    """Test declared query operations."""

    def test_descriptor_on_class(self):
        descriptor = CallStatusRepository.find_by_key

        assert isinstance(descriptor, DerivedQuery)
        assert descriptor.name == "find_by_key"
        assert descriptor.spec.cardinality is Cardinality.ONE

    @pytest.mark.asyncio
    async def test_find_one(self, call_status_repo):
        await call_status_repo.save(CallStatus(key="busy", label="Busy"))

        found = await call_status_repo.find_by_key("busy")

        assert found.label == "Busy"
        assert await call_status_repo.find_by_key("missing") is None

    @pytest.mark.asyncio
    async def test_exists(self, call_status_repo):
        await call_status_repo.save(CallStatus(key="busy", label="Busy"))

        assert await call_status_repo.exists_by_key("busy") is True
        assert await call_status_repo.exists_by_key("idle") is False

    @pytest.mark.asyncio
    async def test_delete_by_key_is_idempotent(self, call_status_repo):
        await call_status_repo.save(CallStatus(key="busy", label="Busy"))

        assert await call_status_repo.delete_by_key("busy") == 1
        assert await call_status_repo.delete_by_key("busy") == 0

    @pytest.mark.asyncio
    async def test_find_many_by_parent(self, area_repo, sub_area_repo):
        north = await area_repo.save(MarketingArea(name="North"))
        south = await area_repo.save(MarketingArea(name="South"))
        empty = await area_repo.save(MarketingArea(name="East"))
        await sub_area_repo.save(MarketingSubArea(name="N1", area_id=north.id))
        await sub_area_repo.save(MarketingSubArea(name="S1", area_id=south.id))
        await sub_area_repo.save(MarketingSubArea(name="N2", area_id=north.id))

        found = await sub_area_repo.find_by_area_id(north.id)

        assert [s.name for s in found] == ["N1", "N2"]
        assert all(s.area_id == north.id for s in found)
        assert await sub_area_repo.find_by_area_id(empty.id) == []

    @pytest.mark.asyncio
    async def test_find_unassigned_branches(self, branch_repo):
        await branch_repo.save(MarketingBranch(name="Direct", area_id=1))
        await branch_repo.save(MarketingBranch(name="Nested", area_id=1, sub_area_id=3))

        direct = await branch_repo.find_unassigned_by_area_id(1)
        nested = await branch_repo.find_by_sub_area_id(3)

        assert [b.name for b in direct] == ["Direct"]
        assert [b.name for b in nested] == ["Nested"]

    @pytest.mark.asyncio
    async def test_find_profile_by_user(self, profile_repo):
        await profile_repo.save(MarketingUserProfile(user_id=7, manager_name="Dana"))

        profile = await profile_repo.find_by_user_id(7)

        assert profile.manager_name == "Dana"
        assert await profile_repo.delete_by_user_id(7) == 1
        assert await profile_repo.find_by_user_id(7) is None

    @pytest.mark.asyncio
    async def test_schedules_ordered_by_week(self, schedule_repo):
        for week in (3, 1, 2):
            await schedule_repo.save(WeeklySchedule(user_id=1, year=2024, month=5, week_number=week))
        await schedule_repo.save(WeeklySchedule(user_id=1, year=2024, month=6, week_number=1))

        schedules = await schedule_repo.find_by_user_id_and_year_and_month(1, 2024, 5)

        assert [s.week_number for s in schedules] == [1, 2, 3]
        assert await schedule_repo.exists_by_user_id_and_period(1, 2024, 6, 1) is True
        assert await schedule_repo.exists_by_user_id_and_period(1, 2024, 6, 2) is False

    @pytest.mark.asyncio
    async def test_find_one_with_several_matches(self, store):
        class BranchByNameRepository(CrudRepository[MarketingBranch]):
            entity = MarketingBranch
            table = "marketing_branches"

            find_by_name = find_one("name")
            count_by_area_id = count_by("area_id")

        repo = BranchByNameRepository(store)
        await repo.save(MarketingBranch(name="Central", area_id=1))
        await repo.save(MarketingBranch(name="Central", area_id=2))

        with pytest.raises(MultipleResultsError):
            await repo.find_by_name("Central")
        assert await repo.count_by_area_id(1) == 1

    @pytest.mark.asyncio
    async def test_wrong_argument_count(self, schedule_repo):
        with pytest.raises(TypeError):
            await schedule_repo.find_by_user_id_and_year_and_month(1, 2024)

    def test_unknown_field_fails_at_declaration(self):
        with pytest.raises(TypeError, match="unknown field"):
            class BrokenRepository(CrudRepository[MarketingBranch]):
                entity = MarketingBranch
                table = "marketing_branches"

                find_by_region = find_many("region")

    def test_unknown_order_field_fails_at_declaration(self):
        with pytest.raises(TypeError):
            class BrokenRepository(MarketingBranchRepository):
                entity = MarketingBranch

                find_sorted = find_many("area_id", order_by=("rank",))


# ============================================================================
# METRICS
# ============================================================================


class TestRepositoryMetrics:
    """Test operation metrics."""

    @pytest.mark.asyncio
    async def test_operations_counted_by_outcome(self, call_status_repo, registry):
        await call_status_repo.save(CallStatus(key="busy", label="Busy"))
        with pytest.raises(ConflictError):
            await call_status_repo.save(CallStatus(key="busy", label="Busy"))
        await call_status_repo.find_by_key("busy")

        def sample(operation, outcome):
            return registry.get_sample_value(
                "repository_operations_total",
                {"repository": "CallStatusRepository", "operation": operation, "outcome": outcome}
            )

        assert sample("save", "success") == 1.0
        assert sample("save", "conflict") == 1.0
        assert sample("find_by_key", "success") == 1.0
