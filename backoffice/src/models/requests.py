"""
Validated request models.

Request models are transient value objects: they are never persisted.
Field constraints are declared in the Annotated metadata and enforced by
backoffice.src.validation.RequestValidator before a request reaches a
service. Models are frozen so a validated request cannot be mutated.
"""

from typing import Annotated, Optional

from pydantic import BaseModel, ConfigDict, Field

from backoffice.src.validation import Between, MaxLength, Required


class RequestModel(BaseModel):
    """Base class for validated requests."""

    model_config = ConfigDict(frozen=True, extra="ignore")


# ============================================================================
# Call service
# ============================================================================


class CallStatusRequest(RequestModel):
    """Create or update a call status."""
    key: Annotated[str, Required(), MaxLength(100), Field(description="Status key")]
    label: Annotated[str, Required(), MaxLength(100), Field(description="Display label")]

    model_config = ConfigDict(
        frozen=True,
        extra="ignore",
        json_schema_extra={
            "example": {
                "key": "no_answer",
                "label": "No answer"
            }
        }
    )


# ============================================================================
# Marketing hierarchy
# ============================================================================


class MarketingAreaRequest(RequestModel):
    """Create a marketing area."""
    name: Annotated[str, Required(), MaxLength(120)]
    code: Annotated[Optional[str], MaxLength(50)] = None
    description: Annotated[Optional[str], MaxLength(500)] = None


class MarketingSubAreaRequest(RequestModel):
    """Create a sub-area under an area."""
    name: Annotated[str, Required(), MaxLength(120)]
    code: Annotated[Optional[str], MaxLength(50)] = None
    description: Annotated[Optional[str], MaxLength(500)] = None
    area_id: Annotated[int, Required()]


class MarketingBranchRequest(RequestModel):
    """Create a branch under an area and optionally a sub-area."""
    name: Annotated[str, Required(), MaxLength(120)]
    code: Annotated[Optional[str], MaxLength(50)] = None
    description: Annotated[Optional[str], MaxLength(500)] = None
    area_id: Annotated[int, Required()]
    sub_area_id: Optional[int] = None


class MarketingUserProfileRequest(RequestModel):
    """Create or update the marketing profile of a user."""
    department_manager: Annotated[Optional[str], MaxLength(120)] = None
    manager_name: Annotated[Optional[str], MaxLength(120)] = None
    user_signature: Optional[str] = None


class WeeklyScheduleRequest(RequestModel):
    """Create a weekly schedule for a user."""
    user_id: Annotated[int, Required()]
    year: Annotated[int, Required(), Between(2000, 2100)]
    month: Annotated[int, Required(), Between(1, 12)]
    week_number: Annotated[int, Required(), Between(1, 6)]
    branch_id: Optional[int] = None
