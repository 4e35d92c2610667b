"""Shared fixtures: an in-memory store, an isolated metrics registry and repositories on top."""

import pytest
from prometheus_client import CollectorRegistry

from backoffice.src.repositories import (
    CallStatusRepository,
    MarketingAreaRepository,
    MarketingBranchRepository,
    MarketingSubAreaRepository,
    MarketingUserProfileRepository,
    MemoryStore,
    WeeklyScheduleRepository,
)
from shared.metrics import RepositoryMetrics


@pytest.fixture
def store():
    return MemoryStore()


@pytest.fixture
def registry():
    return CollectorRegistry()


@pytest.fixture
def repository_metrics(registry):
    return RepositoryMetrics(registry)


@pytest.fixture
def call_status_repo(store, repository_metrics):
    return CallStatusRepository(store, repository_metrics)


@pytest.fixture
def area_repo(store):
    return MarketingAreaRepository(store)


@pytest.fixture
def sub_area_repo(store):
    return MarketingSubAreaRepository(store)


@pytest.fixture
def branch_repo(store):
    return MarketingBranchRepository(store)


@pytest.fixture
def profile_repo(store):
    return MarketingUserProfileRepository(store)


@pytest.fixture
def schedule_repo(store):
    return WeeklyScheduleRepository(store)
