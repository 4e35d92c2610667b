"""
FastAPI dependency injection for the back-office services.

Services are built once in the application lifespan and kept on
``app.state``; these dependencies hand them to route handlers. Tests build
an application with ``create_app`` and an in-memory store, so no module
level state is involved.
"""

from typing import Optional

from fastapi import Header, Request

from backoffice.src.config import Settings
from backoffice.src.repositories.store import Store
from backoffice.src.services import (
    CallStatusService,
    MarketingHierarchyService,
    MarketingUserProfileService,
    WeeklyScheduleService,
)


def get_app_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_store(request: Request) -> Store:
    return request.app.state.store


def get_call_status_service(request: Request) -> CallStatusService:
    return request.app.state.call_status_service


def get_hierarchy_service(request: Request) -> MarketingHierarchyService:
    return request.app.state.hierarchy_service


def get_profile_service(request: Request) -> MarketingUserProfileService:
    return request.app.state.profile_service


def get_schedule_service(request: Request) -> WeeklyScheduleService:
    return request.app.state.schedule_service


def get_acting_user(x_user: Optional[str] = Header(None)) -> Optional[str]:
    """
    Name of the user performing the request.

    Authentication is handled upstream; the gateway forwards the user in
    the ``X-User`` header.
    """
    return x_user


def get_acting_user_id(x_user_id: Optional[int] = Header(None)) -> Optional[int]:
    """Numeric id of the user performing the request (``X-User-Id`` header)."""
    return x_user_id
