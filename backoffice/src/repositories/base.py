"""
Generic CRUD repository with declaratively derived queries.

A concrete repository names its entity model and table and declares its
derived operations as class attributes::

    class MarketingBranchRepository(CrudRepository[MarketingBranch]):
        entity = MarketingBranch
        table = "marketing_branches"

        find_by_area_id = find_many("area_id")
        find_by_sub_area_id = find_many("sub_area_id")

Each declaration wraps a QuerySpec; the cardinality chosen by the helper
(find_one, find_many, exists_by, count_by, delete_by) fixes the return type.
Field names are checked against the entity when the repository class is
created, so a misspelled query fails at import time. Adding a query never
requires touching CrudRepository.

Repositories keep no state besides the store handle and are safe to share
between concurrent tasks.
"""

import time
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from typing import Any, Dict, Generic, List, Optional, Sequence, Type, TypeVar

import structlog

from backoffice.src.errors import ConflictError, MultipleResultsError
from backoffice.src.models.entities import Entity
from backoffice.src.repositories.query import Cardinality, Comparator, Predicate, QuerySpec, spec
from backoffice.src.repositories.store import Row, Store
from shared.metrics import RepositoryMetrics

logger = structlog.get_logger(__name__)

E = TypeVar("E", bound=Entity)


class DerivedQuery:
    """Descriptor turning a QuerySpec into a bound async repository method."""

    def __init__(self, query: QuerySpec):
        self.spec = query
        self.name = ""

    def __set_name__(self, owner: type, name: str) -> None:
        self.name = name

    def __get__(self, instance: Optional["CrudRepository"], owner: type) -> Any:
        if instance is None:
            return self

        async def run(*args: Any) -> Any:
            return await instance.execute(self.name, self.spec, args)

        run.__name__ = self.name
        run.__qualname__ = f"{owner.__name__}.{self.name}"
        return run


def find_one(*fields: Any) -> DerivedQuery:
    """Declare a lookup returning at most one entity."""
    return DerivedQuery(spec(Cardinality.ONE, *fields))


def find_many(*fields: Any, order_by: Sequence[str] = ()) -> DerivedQuery:
    """Declare a lookup returning a list of entities."""
    return DerivedQuery(spec(Cardinality.MANY, *fields, order_by=order_by))


def exists_by(*fields: Any) -> DerivedQuery:
    """Declare an existence check."""
    return DerivedQuery(spec(Cardinality.EXISTS, *fields))


def count_by(*fields: Any) -> DerivedQuery:
    """Declare a row count."""
    return DerivedQuery(spec(Cardinality.COUNT, *fields))


def delete_by(*fields: Any) -> DerivedQuery:
    """Declare an idempotent delete returning the number of removed rows."""
    return DerivedQuery(spec(Cardinality.DELETE, *fields))


class CrudRepository(Generic[E]):
    """Repository for one entity type over a backing store."""

    entity: Type[E]
    table: str

    def __init_subclass__(cls, **kwargs: Any) -> None:
        super().__init_subclass__(**kwargs)
        model = cls.__dict__.get("entity")
        if model is None:
            return
        for name, attr in vars(cls).items():
            if isinstance(attr, DerivedQuery):
                unknown = [f for f in attr.spec.fields if f not in model.model_fields]
                if unknown:
                    raise TypeError(
                        f"{cls.__name__}.{name} refers to unknown field(s) "
                        f"{unknown} of {model.__name__}"
                    )

    def __init__(self, store: Store, metrics: Optional[RepositoryMetrics] = None):
        """
        Initialize repository.

        Args:
            store: Backing store
            metrics: Optional Prometheus metrics container
        """
        self.store = store
        self.metrics = metrics

    @property
    def name(self) -> str:
        return type(self).__name__

    def _to_entity(self, row: Row) -> E:
        return self.entity.model_validate(row)

    @asynccontextmanager
    async def _operation(self, operation: str):
        start = time.perf_counter()
        outcome = "success"
        try:
            yield
        except ConflictError:
            outcome = "conflict"
            raise
        except Exception:
            outcome = "error"
            raise
        finally:
            if self.metrics is not None:
                self.metrics.observe(self.name, operation, outcome, time.perf_counter() - start)

    # =========================================================================
    # CRUD
    # =========================================================================

    async def save(self, entity: E) -> E:
        """
        Insert or update an entity.

        Entities without an id are inserted. Entities with an id update the
        stored row, or are inserted with that id when no row has it.

        Args:
            entity: Entity to persist

        Returns:
            Stored entity with id and timestamps populated

        Raises:
            ConflictError: If the entity violates a unique constraint
        """
        async with self._operation("save"):
            now = datetime.now(timezone.utc)
            values: Dict[str, Any] = entity.model_dump()
            row_id = values.pop("id")
            if "updated_at" in values:
                values["updated_at"] = now

            row: Optional[Row] = None
            if row_id is not None:
                changes = dict(values)
                if changes.get("created_at") is None:
                    changes.pop("created_at", None)
                row = await self.store.update(self.table, row_id, changes)

            if row is None:
                if "created_at" in values and values["created_at"] is None:
                    values["created_at"] = now
                if row_id is not None:
                    values["id"] = row_id
                row = await self.store.insert(self.table, values)
                logger.info("entity_saved", repository=self.name, entity_id=row["id"], created=True)
            else:
                logger.info("entity_saved", repository=self.name, entity_id=row_id, created=False)

            return self._to_entity(row)

    async def find_by_id(self, entity_id: int) -> Optional[E]:
        """
        Get an entity by id.

        Returns:
            Entity or None if not found
        """
        async with self._operation("find_by_id"):
            rows = await self.store.select(
                self.table, [Predicate("id", Comparator.EQ, entity_id)], limit=1
            )
            if not rows:
                logger.debug("entity_not_found", repository=self.name, entity_id=entity_id)
                return None
            return self._to_entity(rows[0])

    async def exists_by_id(self, entity_id: int) -> bool:
        async with self._operation("exists_by_id"):
            rows = await self.store.select(
                self.table, [Predicate("id", Comparator.EQ, entity_id)], limit=1
            )
            return bool(rows)

    async def find_all(self) -> List[E]:
        """Get every entity ordered by id."""
        async with self._operation("find_all"):
            rows = await self.store.select(self.table)
            return [self._to_entity(row) for row in rows]

    async def count(self) -> int:
        async with self._operation("count"):
            return await self.store.count(self.table)

    async def delete_by_id(self, entity_id: int) -> bool:
        """
        Delete an entity by id.

        Deleting an absent id is not an error.

        Returns:
            True if a row was removed, False otherwise
        """
        async with self._operation("delete_by_id"):
            deleted = await self.store.delete(
                self.table, [Predicate("id", Comparator.EQ, entity_id)]
            )
            if deleted:
                logger.info("entity_deleted", repository=self.name, entity_id=entity_id)
            else:
                logger.debug("entity_not_found", repository=self.name, entity_id=entity_id)
            return deleted > 0

    # =========================================================================
    # Derived queries
    # =========================================================================

    async def execute(self, name: str, query: QuerySpec, args: Sequence[Any]) -> Any:
        """
        Run a derived query.

        Args:
            name: Name of the declared operation (for logs and metrics)
            query: Query descriptor
            args: Call arguments bound to the value-taking criteria

        Returns:
            Result shaped by the query cardinality

        Raises:
            TypeError: If the argument count does not match the descriptor
            MultipleResultsError: If a single-result query matches several rows
        """
        predicates = query.bind(args)
        order_by = query.order_by or ("id",)

        async with self._operation(name):
            if query.cardinality is Cardinality.ONE:
                rows = await self.store.select(self.table, predicates, order_by, limit=2)
                if len(rows) > 1:
                    raise MultipleResultsError(self.name, name)
                return self._to_entity(rows[0]) if rows else None

            if query.cardinality is Cardinality.MANY:
                rows = await self.store.select(self.table, predicates, order_by)
                return [self._to_entity(row) for row in rows]

            if query.cardinality is Cardinality.EXISTS:
                rows = await self.store.select(self.table, predicates, order_by, limit=1)
                return bool(rows)

            if query.cardinality is Cardinality.COUNT:
                return await self.store.count(self.table, predicates)

            deleted = await self.store.delete(self.table, predicates)
            logger.info("entities_deleted", repository=self.name, query=name, count=deleted)
            return deleted
