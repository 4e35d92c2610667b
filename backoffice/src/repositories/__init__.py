"""Repositories and backing stores."""

from .base import CrudRepository, DerivedQuery, count_by, delete_by, exists_by, find_many, find_one
from .call_status import CallStatusRepository
from .marketing import (
    MarketingAreaRepository,
    MarketingBranchRepository,
    MarketingSubAreaRepository,
    MarketingUserProfileRepository,
    WeeklyScheduleRepository,
)
from .postgres_store import PostgresStore, SqlBuilder
from .query import Cardinality, Comparator, Criterion, Predicate, QuerySpec
from .store import MemoryStore, Store

__all__ = [
    "CrudRepository",
    "DerivedQuery",
    "count_by",
    "delete_by",
    "exists_by",
    "find_many",
    "find_one",
    "CallStatusRepository",
    "MarketingAreaRepository",
    "MarketingBranchRepository",
    "MarketingSubAreaRepository",
    "MarketingUserProfileRepository",
    "WeeklyScheduleRepository",
    "PostgresStore",
    "SqlBuilder",
    "Cardinality",
    "Comparator",
    "Criterion",
    "Predicate",
    "QuerySpec",
    "MemoryStore",
    "Store",
]
