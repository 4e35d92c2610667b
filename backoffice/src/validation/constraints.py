"""
Field constraints for request models.

A constraint is a predicate with a machine-readable reason code and a
human-readable message. Constraints are attached to request fields through
``typing.Annotated`` metadata, e.g.::

    key: Annotated[str, Required(), MaxLength(100)]

Pydantic ignores metadata it does not know, so the constraints travel with
the field definition and are evaluated by the request validator.
"""

from abc import ABC, abstractmethod
from typing import Any, Optional


class _Missing:
    """Sentinel for a field absent from the raw request."""

    def __repr__(self) -> str:
        return "MISSING"


MISSING: Any = _Missing()


class Constraint(ABC):
    """Base class for field constraints."""

    @abstractmethod
    def check(self, value: Any) -> Optional[str]:
        """
        Evaluate the constraint.

        Args:
            value: Raw field value, or MISSING when the field was not sent

        Returns:
            Reason code when the constraint is violated, None otherwise
        """

    @abstractmethod
    def message(self, code: str) -> str:
        """Human-readable message for a reason code."""


class Required(Constraint):
    """Value must be present and, for strings, non-empty after trimming."""

    def check(self, value: Any) -> Optional[str]:
        if value is MISSING or value is None:
            return "missing"
        if isinstance(value, str) and not value.strip():
            return "blank"
        return None

    def message(self, code: str) -> str:
        if code == "missing":
            return "Field is required"
        return "Field must not be blank"

    def __repr__(self) -> str:
        return "Required()"


class MaxLength(Constraint):
    """String value must not exceed ``limit`` characters."""

    def __init__(self, limit: int):
        if limit < 0:
            raise ValueError("limit must be non-negative")
        self.limit = limit

    def check(self, value: Any) -> Optional[str]:
        if isinstance(value, str) and len(value) > self.limit:
            return "too_long"
        return None

    def message(self, code: str) -> str:
        return f"Field must be at most {self.limit} characters"

    def __repr__(self) -> str:
        return f"MaxLength({self.limit})"


class Between(Constraint):
    """Numeric value must lie within [low, high]."""

    def __init__(self, low: int, high: int):
        if low > high:
            raise ValueError("low must not exceed high")
        self.low = low
        self.high = high

    def check(self, value: Any) -> Optional[str]:
        if isinstance(value, str):
            try:
                value = float(value)
            except ValueError:
                return None
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            return None
        if value < self.low or value > self.high:
            return "out_of_range"
        return None

    def message(self, code: str) -> str:
        return f"Field must be between {self.low} and {self.high}"

    def __repr__(self) -> str:
        return f"Between({self.low}, {self.high})"
