"""
Backing store contract and the in-memory store.

Repositories talk to a Store, never to a driver. A store offers point
lookups and field predicates over named tables, insert, update by id and
delete by predicate, and reports unique-constraint violations as
ConflictError without changing any stored row.

MemoryStore keeps rows in process memory and reads the unique constraints
from the SQLAlchemy table metadata, so it enforces the same uniqueness
rules as the PostgreSQL schema. It is used for tests and local runs.
"""

import asyncio
from abc import ABC, abstractmethod
from typing import Any, Dict, Iterable, List, Optional, Sequence, Set, Tuple

import structlog
from sqlalchemy import MetaData, Table, UniqueConstraint

from backoffice.src.errors import ConflictError, RepositoryError
from backoffice.src.models.tables import metadata as default_metadata
from backoffice.src.repositories.query import Predicate

logger = structlog.get_logger(__name__)

Row = Dict[str, Any]


class Store(ABC):
    """Persistent collection of rows grouped by table."""

    @abstractmethod
    async def insert(self, table: str, values: Row) -> Row:
        """
        Insert a row.

        Args:
            table: Table name
            values: Column values; ``id`` may be omitted to let the store assign it

        Returns:
            Stored row, including its id

        Raises:
            ConflictError: If the row violates a unique constraint
        """

    @abstractmethod
    async def update(self, table: str, row_id: int, values: Row) -> Optional[Row]:
        """
        Update the row with the given id.

        Returns:
            Updated row or None if no row has that id

        Raises:
            ConflictError: If the change violates a unique constraint
        """

    @abstractmethod
    async def select(
        self,
        table: str,
        predicates: Sequence[Predicate] = (),
        order_by: Sequence[str] = ("id",),
        limit: Optional[int] = None
    ) -> List[Row]:
        """Return rows matching every predicate."""

    @abstractmethod
    async def count(self, table: str, predicates: Sequence[Predicate] = ()) -> int:
        """Count rows matching every predicate."""

    @abstractmethod
    async def delete(self, table: str, predicates: Sequence[Predicate]) -> int:
        """Delete rows matching every predicate and return how many were removed."""

    async def ping(self) -> bool:
        """Check the store is reachable."""
        return True

    async def close(self) -> None:
        """Release store resources."""


def unique_groups(table: Table) -> List[Tuple[Tuple[str, ...], str]]:
    """
    Unique column groups of a table with their constraint names.

    Args:
        table: SQLAlchemy table

    Returns:
        List of (column names, constraint name), primary key excluded
    """
    groups: Dict[Tuple[str, ...], str] = {}
    for constraint in table.constraints:
        if isinstance(constraint, UniqueConstraint):
            columns = tuple(c.name for c in constraint.columns)
            groups.setdefault(columns, constraint.name or f"{table.name}_{'_'.join(columns)}_key")
    for column in table.columns:
        if column.unique:
            groups.setdefault((column.name,), f"{table.name}_{column.name}_key")
    return list(groups.items())


class MemoryStore(Store):
    """Dict-backed store enforcing the unique constraints of the table metadata."""

    def __init__(self, metadata: MetaData = default_metadata):
        """
        Initialize memory store.

        Args:
            metadata: Table metadata describing columns and unique constraints
        """
        self._tables: Dict[str, Table] = dict(metadata.tables)
        self._rows: Dict[str, Dict[int, Row]] = {name: {} for name in self._tables}
        self._sequences: Dict[str, int] = {name: 0 for name in self._tables}
        self._unique = {name: unique_groups(t) for name, t in self._tables.items()}
        self._lock = asyncio.Lock()

    def _table(self, table: str) -> Table:
        try:
            return self._tables[table]
        except KeyError:
            raise RepositoryError(f"Unknown table '{table}'")

    def _check_columns(self, table: Table, columns: Iterable[str]) -> None:
        known: Set[str] = {c.name for c in table.columns}
        unknown = [c for c in columns if c not in known]
        if unknown:
            raise RepositoryError(f"Unknown column(s) {unknown} on table '{table.name}'")

    def _check_unique(self, table: str, candidate: Row) -> None:
        for columns, name in self._unique[table]:
            key = tuple(candidate.get(c) for c in columns)
            if any(v is None for v in key):
                continue
            for row_id, row in self._rows[table].items():
                if row_id == candidate["id"]:
                    continue
                if tuple(row.get(c) for c in columns) == key:
                    logger.warning(
                        "unique_violation",
                        table=table,
                        constraint=name,
                        columns=list(columns)
                    )
                    raise ConflictError(
                        f"Duplicate value for {', '.join(columns)} on {table}",
                        entity=table,
                        constraint=name
                    )

    @staticmethod
    def _matches(row: Row, predicates: Sequence[Predicate]) -> bool:
        return all(p.matches(row.get(p.field)) for p in predicates)

    async def insert(self, table: str, values: Row) -> Row:
        meta = self._table(table)
        self._check_columns(meta, values)
        async with self._lock:
            row: Row = {c.name: None for c in meta.columns}
            row.update(values)
            if row.get("id") is None:
                row["id"] = self._sequences[table] + 1
            elif row["id"] in self._rows[table]:
                raise ConflictError(
                    f"Duplicate value for id on {table}",
                    entity=table,
                    constraint=f"{table}_pkey"
                )
            self._check_unique(table, row)
            self._sequences[table] = max(self._sequences[table], row["id"])
            self._rows[table][row["id"]] = row
            return dict(row)

    async def update(self, table: str, row_id: int, values: Row) -> Optional[Row]:
        meta = self._table(table)
        self._check_columns(meta, values)
        async with self._lock:
            existing = self._rows[table].get(row_id)
            if existing is None:
                return None
            row = {**existing, **values, "id": row_id}
            self._check_unique(table, row)
            self._rows[table][row_id] = row
            return dict(row)

    async def select(
        self,
        table: str,
        predicates: Sequence[Predicate] = (),
        order_by: Sequence[str] = ("id",),
        limit: Optional[int] = None
    ) -> List[Row]:
        meta = self._table(table)
        self._check_columns(meta, [p.field for p in predicates] + list(order_by))
        async with self._lock:
            rows = [dict(r) for r in self._rows[table].values() if self._matches(r, predicates)]
        # nulls sort last, as in PostgreSQL ascending order
        rows.sort(key=lambda r: tuple((r[f] is None, r[f]) for f in order_by))
        if limit is not None:
            rows = rows[:limit]
        return rows

    async def count(self, table: str, predicates: Sequence[Predicate] = ()) -> int:
        meta = self._table(table)
        self._check_columns(meta, [p.field for p in predicates])
        async with self._lock:
            return sum(1 for r in self._rows[table].values() if self._matches(r, predicates))

    async def delete(self, table: str, predicates: Sequence[Predicate]) -> int:
        meta = self._table(table)
        self._check_columns(meta, [p.field for p in predicates])
        async with self._lock:
            doomed = [i for i, r in self._rows[table].items() if self._matches(r, predicates)]
            for row_id in doomed:
                del self._rows[table][row_id]
            return len(doomed)
