"""API routers."""

from . import call_statuses, hierarchy, profiles, schedules

__all__ = ["call_statuses", "hierarchy", "profiles", "schedules"]
