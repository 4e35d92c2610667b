"""
Request validation pipeline.

Runs the constraints attached to a request model's fields against raw input
before the request reaches domain code. Every field is checked and every
failure is collected; nothing short-circuits. The pydantic model is always
built as well, and its type coercion failures are merged into the same
ValidationError for fields that have no constraint violation. Violations are
reported in field declaration order.
"""

from typing import Any, Generic, List, Mapping, Tuple, Type, TypeVar

import structlog
from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from backoffice.src.errors import FieldViolation, ValidationError
from backoffice.src.validation.constraints import MISSING, Constraint

logger = structlog.get_logger(__name__)

M = TypeVar("M", bound=BaseModel)

Rule = Tuple[str, Constraint]


def constraints_for(model: Type[BaseModel]) -> List[Rule]:
    """
    Collect the (field, constraint) rules declared on a request model.

    Rules are returned in field declaration order, then in the order the
    constraints appear in each field's Annotated metadata.

    Args:
        model: Pydantic model class

    Returns:
        Ordered list of (field name, constraint) pairs
    """
    rules: List[Rule] = []
    for name, field in model.model_fields.items():
        for item in field.metadata:
            if isinstance(item, Constraint):
                rules.append((name, item))
    return rules


class RequestValidator(Generic[M]):
    """Validates raw request mappings into a typed request model."""

    def __init__(self, model: Type[M]):
        """
        Initialize validator.

        Args:
            model: Request model class whose fields carry constraints
        """
        self.model = model
        self.rules = constraints_for(model)

    def violations(self, data: Mapping[str, Any]) -> List[FieldViolation]:
        """
        Evaluate every rule against raw input.

        Args:
            data: Raw request fields

        Returns:
            All violations, in rule order (empty when valid)
        """
        found: List[FieldViolation] = []
        for name, constraint in self.rules:
            code = constraint.check(data.get(name, MISSING))
            if code is not None:
                found.append(FieldViolation(name, code, constraint.message(code)))
        return found

    def validate(self, data: Any) -> M:
        """
        Validate raw input and build the request model.

        Args:
            data: Raw request fields

        Returns:
            Request model with field values exactly as given

        Raises:
            ValidationError: If any field violates its constraints or
                cannot be coerced to its declared type
        """
        if not isinstance(data, Mapping):
            raise ValidationError([
                FieldViolation("body", "invalid_type", "Request body must be an object")
            ])

        found = self.violations(data)
        constrained = {v.field for v in found}
        cause = None
        model = None

        try:
            model = self.model.model_validate(dict(data))
        except PydanticValidationError as e:
            cause = e
            for err in e.errors():
                loc = err["loc"]
                if loc and str(loc[0]) in constrained:
                    continue
                found.append(FieldViolation(
                    ".".join(str(part) for part in loc) or "body",
                    err["type"],
                    err["msg"]
                ))

        if found:
            order = {name: i for i, name in enumerate(self.model.model_fields)}
            found.sort(key=lambda v: order.get(v.field.split(".", 1)[0], len(order)))
            logger.info(
                "request_validation_failed",
                model=self.model.__name__,
                fields=[v.field for v in found]
            )
            raise ValidationError(found) from cause

        return model


def validate_request(model: Type[M], data: Any) -> M:
    """Validate ``data`` against ``model`` with a one-off validator."""
    return RequestValidator(model).validate(data)
