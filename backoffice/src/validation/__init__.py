"""Request validation: field constraints and the validation pipeline."""

from .constraints import MISSING, Between, Constraint, MaxLength, Required
from .validator import RequestValidator, constraints_for, validate_request

__all__ = [
    "MISSING",
    "Between",
    "Constraint",
    "MaxLength",
    "Required",
    "RequestValidator",
    "constraints_for",
    "validate_request",
]
