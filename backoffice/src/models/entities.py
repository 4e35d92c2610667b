"""
Persisted entity models.

Entities are pydantic models mirroring the rows of the tables declared in
backoffice.src.models.tables. Repositories build them from store rows and
hand them back to services; they carry no validation rules of their own
beyond field types.
"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class Entity(BaseModel):
    """Base class for persisted records identified by an integer id."""

    id: Optional[int] = Field(None, description="Store-assigned identifier")

    model_config = ConfigDict(from_attributes=True, validate_assignment=True)


class MarketingArea(Entity):
    name: str
    code: Optional[str] = None
    description: Optional[str] = None
    active: bool = True
    created_by: Optional[int] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class MarketingSubArea(Entity):
    name: str
    code: Optional[str] = None
    description: Optional[str] = None
    area_id: int
    active: bool = True
    created_by: Optional[int] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class MarketingBranch(Entity):
    name: str
    code: Optional[str] = None
    description: Optional[str] = None
    area_id: int
    sub_area_id: Optional[int] = None
    active: bool = True
    created_by: Optional[int] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class MarketingUserProfile(Entity):
    user_id: int
    department_manager: Optional[str] = None
    manager_name: Optional[str] = None
    user_signature: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class WeeklySchedule(Entity):
    user_id: int
    year: int
    month: int
    week_number: int
    branch_id: Optional[int] = None
    created_by: Optional[int] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class CallStatus(Entity):
    key: str
    label: str
    created_by: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
