"""
Structured query descriptors.

A derived repository operation is described by a QuerySpec: the criteria it
filters on (field + comparator), the cardinality of its result and an
optional ordering. Stores translate query specs into their own query language;
repositories bind call arguments to the criteria. The cardinality is part
of the declared contract and fixes the return type of the operation:

    ONE     -> Optional[entity]
    MANY    -> List[entity]
    EXISTS  -> bool
    COUNT   -> int
    DELETE  -> int (rows removed)
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, List, Sequence, Tuple


class Comparator(str, Enum):
    """Comparison applied between a column and a bound value."""
    EQ = "="
    NE = "<>"
    LT = "<"
    LTE = "<="
    GT = ">"
    GTE = ">="
    IS_NULL = "IS NULL"
    IS_NOT_NULL = "IS NOT NULL"

    @property
    def takes_value(self) -> bool:
        """Whether the comparator consumes a call argument."""
        return self not in (Comparator.IS_NULL, Comparator.IS_NOT_NULL)


class Cardinality(str, Enum):
    """Declared result shape of a derived operation."""
    ONE = "one"
    MANY = "many"
    EXISTS = "exists"
    COUNT = "count"
    DELETE = "delete"


@dataclass(frozen=True)
class Criterion:
    """Filter on a single field."""
    field: str
    comparator: Comparator = Comparator.EQ


@dataclass(frozen=True)
class Predicate:
    """A criterion bound to a concrete value."""
    field: str
    comparator: Comparator
    value: Any = None

    def matches(self, row_value: Any) -> bool:
        """Evaluate the predicate against a stored value (SQL null semantics)."""
        if self.comparator is Comparator.IS_NULL:
            return row_value is None
        if self.comparator is Comparator.IS_NOT_NULL:
            return row_value is not None
        if row_value is None or self.value is None:
            return False
        if self.comparator is Comparator.EQ:
            return row_value == self.value
        if self.comparator is Comparator.NE:
            return row_value != self.value
        if self.comparator is Comparator.LT:
            return row_value < self.value
        if self.comparator is Comparator.LTE:
            return row_value <= self.value
        if self.comparator is Comparator.GT:
            return row_value > self.value
        return row_value >= self.value


@dataclass(frozen=True)
class QuerySpec:
    """Declarative description of a derived query."""
    criteria: Tuple[Criterion, ...]
    cardinality: Cardinality
    order_by: Tuple[str, ...] = field(default_factory=tuple)

    @property
    def fields(self) -> List[str]:
        """Every field the query refers to."""
        return [c.field for c in self.criteria] + list(self.order_by)

    @property
    def arity(self) -> int:
        """Number of call arguments the query consumes."""
        return sum(1 for c in self.criteria if c.comparator.takes_value)

    def bind(self, args: Sequence[Any]) -> List[Predicate]:
        """
        Bind positional call arguments to the criteria.

        Args:
            args: Values for the value-taking criteria, in order

        Returns:
            Bound predicates

        Raises:
            TypeError: If the number of arguments does not match the criteria
        """
        if len(args) != self.arity:
            raise TypeError(
                f"query on {[c.field for c in self.criteria]} takes "
                f"{self.arity} argument(s), got {len(args)}"
            )
        values = iter(args)
        return [
            Predicate(
                c.field,
                c.comparator,
                next(values) if c.comparator.takes_value else None
            )
            for c in self.criteria
        ]


def _criteria(fields: Sequence[Any]) -> Tuple[Criterion, ...]:
    result = []
    for item in fields:
        if isinstance(item, Criterion):
            result.append(item)
        elif isinstance(item, tuple):
            result.append(Criterion(item[0], Comparator(item[1])))
        else:
            result.append(Criterion(item))
    return tuple(result)


def spec(cardinality: Cardinality, *fields: Any, order_by: Sequence[str] = ()) -> QuerySpec:
    """
    Build a QuerySpec.

    Fields may be plain names (equality), ``(name, comparator)`` tuples or
    Criterion instances.
    """
    return QuerySpec(_criteria(fields), cardinality, tuple(order_by))
