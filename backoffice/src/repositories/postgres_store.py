"""
PostgreSQL store backed by an asyncpg connection pool.

Translates bound query predicates into parameterized SQL. Table and column
names are checked against the SQLAlchemy table metadata before they are
quoted into a statement; values are always passed as parameters. The DDL
for ``create_schema`` is rendered from the same metadata.
"""

from typing import Any, List, Optional, Sequence, Tuple

import asyncpg
import structlog
from sqlalchemy import MetaData, Table
from sqlalchemy.dialects import postgresql
from sqlalchemy.schema import CreateIndex, CreateTable

from backoffice.src.config import Settings
from backoffice.src.errors import ConflictError, MissingReferenceError, RepositoryError
from backoffice.src.models.tables import metadata as default_metadata
from backoffice.src.repositories.query import Predicate
from backoffice.src.repositories.store import Row, Store

logger = structlog.get_logger(__name__)


def quote(identifier: str) -> str:
    """Quote a SQL identifier."""
    return '"' + identifier.replace('"', '""') + '"'


class SqlBuilder:
    """Renders parameterized statements for the tables of a metadata."""

    def __init__(self, metadata: MetaData = default_metadata):
        self._tables = dict(metadata.tables)

    def _table(self, table: str) -> Table:
        try:
            return self._tables[table]
        except KeyError:
            raise RepositoryError(f"Unknown table '{table}'")

    def _column(self, table: Table, column: str) -> str:
        if column not in table.c:
            raise RepositoryError(f"Unknown column '{column}' on table '{table.name}'")
        return quote(column)

    def _where(
        self,
        table: Table,
        predicates: Sequence[Predicate],
        params: List[Any]
    ) -> str:
        clauses = []
        for predicate in predicates:
            column = self._column(table, predicate.field)
            if predicate.comparator.takes_value:
                params.append(predicate.value)
                clauses.append(f"{column} {predicate.comparator.value} ${len(params)}")
            else:
                clauses.append(f"{column} {predicate.comparator.value}")
        if not clauses:
            return ""
        return " WHERE " + " AND ".join(clauses)

    def select(
        self,
        table: str,
        predicates: Sequence[Predicate] = (),
        order_by: Sequence[str] = ("id",),
        limit: Optional[int] = None
    ) -> Tuple[str, List[Any]]:
        meta = self._table(table)
        params: List[Any] = []
        sql = f"SELECT * FROM {quote(meta.name)}" + self._where(meta, predicates, params)
        if order_by:
            sql += " ORDER BY " + ", ".join(self._column(meta, c) for c in order_by)
        if limit is not None:
            params.append(limit)
            sql += f" LIMIT ${len(params)}"
        return sql, params

    def count(self, table: str, predicates: Sequence[Predicate] = ()) -> Tuple[str, List[Any]]:
        meta = self._table(table)
        params: List[Any] = []
        sql = f"SELECT COUNT(*) AS count FROM {quote(meta.name)}" + self._where(meta, predicates, params)
        return sql, params

    def insert(self, table: str, values: Row) -> Tuple[str, List[Any]]:
        meta = self._table(table)
        columns = [self._column(meta, c) for c in values]
        placeholders = [f"${i}" for i in range(1, len(values) + 1)]
        sql = (
            f"INSERT INTO {quote(meta.name)} ({', '.join(columns)}) "
            f"VALUES ({', '.join(placeholders)}) RETURNING *"
        )
        return sql, list(values.values())

    def update(self, table: str, row_id: int, values: Row) -> Tuple[str, List[Any]]:
        meta = self._table(table)
        params: List[Any] = []
        assignments = []
        for column, value in values.items():
            params.append(value)
            assignments.append(f"{self._column(meta, column)} = ${len(params)}")
        params.append(row_id)
        sql = (
            f"UPDATE {quote(meta.name)} SET {', '.join(assignments)} "
            f"WHERE {quote('id')} = ${len(params)} RETURNING *"
        )
        return sql, params

    def delete(self, table: str, predicates: Sequence[Predicate]) -> Tuple[str, List[Any]]:
        meta = self._table(table)
        params: List[Any] = []
        sql = f"DELETE FROM {quote(meta.name)}" + self._where(meta, predicates, params)
        return sql, params


class PostgresStore(Store):
    """Store issuing SQL through an asyncpg pool."""

    def __init__(self, pool: asyncpg.Pool, metadata: MetaData = default_metadata):
        """
        Initialize PostgreSQL store.

        Args:
            pool: asyncpg connection pool
            metadata: Table metadata used to check identifiers and render DDL
        """
        self.pool = pool
        self.metadata = metadata
        self.sql = SqlBuilder(metadata)

    @classmethod
    async def connect(cls, settings: Settings) -> "PostgresStore":
        """
        Create the connection pool and wrap it in a store.

        Args:
            settings: Application settings

        Returns:
            Connected store
        """
        pool = await asyncpg.create_pool(
            settings.database_dsn,
            min_size=settings.database_pool_min_size,
            max_size=settings.database_pool_max_size,
            command_timeout=settings.database_command_timeout
        )
        logger.info(
            "database_pool_initialized",
            min_size=settings.database_pool_min_size,
            max_size=settings.database_pool_max_size,
            database=settings.database_dsn.split("@")[-1]
        )
        return cls(pool)

    async def create_schema(self) -> None:
        """Create missing tables and indexes."""
        dialect = postgresql.dialect()
        async with self.pool.acquire() as conn:
            async with conn.transaction():
                for table in self.metadata.sorted_tables:
                    await conn.execute(str(CreateTable(table, if_not_exists=True).compile(dialect=dialect)))
                    for index in table.indexes:
                        await conn.execute(str(CreateIndex(index, if_not_exists=True).compile(dialect=dialect)))
        logger.info("database_schema_ready", tables=[t.name for t in self.metadata.sorted_tables])

    def _conflict(self, table: str, error: asyncpg.UniqueViolationError) -> ConflictError:
        constraint = getattr(error, "constraint_name", None)
        logger.warning("unique_violation", table=table, constraint=constraint)
        return ConflictError(
            f"Constraint violation on {table}: {error}",
            entity=table,
            constraint=constraint
        )

    def _missing_reference(self, table: str, error: asyncpg.ForeignKeyViolationError) -> MissingReferenceError:
        constraint = getattr(error, "constraint_name", None)
        logger.warning("foreign_key_violation", table=table, constraint=constraint)
        return MissingReferenceError(table, constraint)

    async def insert(self, table: str, values: Row) -> Row:
        sql, params = self.sql.insert(table, values)
        try:
            async with self.pool.acquire() as conn:
                row = await conn.fetchrow(sql, *params)
                return dict(row)
        except asyncpg.UniqueViolationError as e:
            raise self._conflict(table, e)
        except asyncpg.ForeignKeyViolationError as e:
            raise self._missing_reference(table, e)
        except Exception as e:
            logger.error("store_insert_failed", table=table, error=str(e))
            raise

    async def update(self, table: str, row_id: int, values: Row) -> Optional[Row]:
        sql, params = self.sql.update(table, row_id, values)
        try:
            async with self.pool.acquire() as conn:
                row = await conn.fetchrow(sql, *params)
                return dict(row) if row else None
        except asyncpg.UniqueViolationError as e:
            raise self._conflict(table, e)
        except asyncpg.ForeignKeyViolationError as e:
            raise self._missing_reference(table, e)
        except Exception as e:
            logger.error("store_update_failed", table=table, row_id=row_id, error=str(e))
            raise

    async def select(
        self,
        table: str,
        predicates: Sequence[Predicate] = (),
        order_by: Sequence[str] = ("id",),
        limit: Optional[int] = None
    ) -> List[Row]:
        sql, params = self.sql.select(table, predicates, order_by, limit)
        try:
            async with self.pool.acquire() as conn:
                rows = await conn.fetch(sql, *params)
                return [dict(row) for row in rows]
        except Exception as e:
            logger.error("store_select_failed", table=table, error=str(e))
            raise

    async def count(self, table: str, predicates: Sequence[Predicate] = ()) -> int:
        sql, params = self.sql.count(table, predicates)
        try:
            async with self.pool.acquire() as conn:
                row = await conn.fetchrow(sql, *params)
                return row["count"]
        except Exception as e:
            logger.error("store_count_failed", table=table, error=str(e))
            raise

    async def delete(self, table: str, predicates: Sequence[Predicate]) -> int:
        sql, params = self.sql.delete(table, predicates)
        try:
            async with self.pool.acquire() as conn:
                result = await conn.execute(sql, *params)
                return int(result.split()[-1])
        except Exception as e:
            logger.error("store_delete_failed", table=table, error=str(e))
            raise

    async def ping(self) -> bool:
        try:
            async with self.pool.acquire() as conn:
                await conn.fetchval("SELECT 1")
            return True
        except Exception as e:
            logger.error("database_health_check_failed", error=str(e))
            return False

    async def close(self) -> None:
        await self.pool.close()
        logger.info("database_pool_closed")
