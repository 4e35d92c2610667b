"""
Domain error kinds shared by validation, repositories and services.

Errors carry an ErrorKind tag instead of transport vocabulary. The HTTP
boundary (backoffice.src.main) is the only place where kinds are mapped
to status codes.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, List, Optional, Sequence


class ErrorKind(str, Enum):
    """Tag carried by every service error."""
    VALIDATION = "validation"
    NOT_FOUND = "not_found"
    CONFLICT = "conflict"
    REPOSITORY = "repository"


@dataclass(frozen=True)
class FieldViolation:
    """A single failed constraint on a request field."""
    field: str
    code: str
    message: str

    def to_dict(self) -> Dict[str, str]:
        return {"code": self.code, "message": self.message}


class ServiceError(Exception):
    """Base class for errors surfaced to callers of the service layer."""

    kind: ErrorKind = ErrorKind.REPOSITORY

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def to_dict(self) -> Dict[str, Any]:
        """Serializable payload describing the error."""
        return {"error": self.kind.value, "message": self.message}


class ValidationError(ServiceError):
    """
    Raised when a request fails one or more field constraints.

    Every violated field is reported, not only the first one.
    """

    kind = ErrorKind.VALIDATION

    def __init__(self, violations: Sequence[FieldViolation]):
        self.violations: List[FieldViolation] = list(violations)
        fields = sorted({v.field for v in self.violations})
        super().__init__(f"Invalid request fields: {', '.join(fields)}")

    @property
    def fields(self) -> List[str]:
        """Names of the offending fields in report order."""
        seen: List[str] = []
        for violation in self.violations:
            if violation.field not in seen:
                seen.append(violation.field)
        return seen

    def codes_for(self, field: str) -> List[str]:
        return [v.code for v in self.violations if v.field == field]

    def to_dict(self) -> Dict[str, Any]:
        errors: Dict[str, List[Dict[str, str]]] = {}
        for violation in self.violations:
            errors.setdefault(violation.field, []).append(violation.to_dict())
        payload = super().to_dict()
        payload["fields"] = errors
        return payload


class NotFoundError(ServiceError):
    """Raised by operations that require an entity to exist."""

    kind = ErrorKind.NOT_FOUND

    def __init__(self, entity: str, key: Any, field: str = "id"):
        self.entity = entity
        self.key = key
        self.field = field
        super().__init__(f"{entity} with {field}={key!r} not found")


class MissingReferenceError(NotFoundError):
    """A write referenced a row that does not exist (foreign key violation)."""

    def __init__(self, entity: str, constraint: Optional[str] = None):
        ServiceError.__init__(self, f"Referenced row does not exist for {entity}")
        self.entity = entity
        self.key = constraint
        self.field = "constraint"
        self.constraint = constraint


class ConflictError(ServiceError):
    """Raised on unique-constraint or business-rule duplicates."""

    kind = ErrorKind.CONFLICT

    def __init__(self, message: str, entity: Optional[str] = None, constraint: Optional[str] = None):
        super().__init__(message)
        self.entity = entity
        self.constraint = constraint


class ScheduleAlreadyExistsError(ConflictError):
    """A weekly schedule already exists for the user, year, month and week."""

    def __init__(self, user_id: int, year: int, month: int, week_number: int):
        super().__init__(
            "Schedule already exists for this user, week, and month",
            entity="WeeklySchedule",
            constraint="uq_weekly_schedules_user_period",
        )
        self.user_id = user_id
        self.year = year
        self.month = month
        self.week_number = week_number


class RepositoryError(ServiceError):
    """Raised when the backing store fails or breaks a declared contract."""

    kind = ErrorKind.REPOSITORY


class MultipleResultsError(RepositoryError):
    """A single-result query matched more than one row."""

    def __init__(self, repository: str, query: str):
        super().__init__(f"{repository}.{query} expected at most one result")
        self.repository = repository
        self.query = query
