"""
Repository for the call statuses used by the call service.
"""

from backoffice.src.models.entities import CallStatus
from backoffice.src.repositories.base import CrudRepository, delete_by, exists_by, find_one


class CallStatusRepository(CrudRepository[CallStatus]):
    """Call statuses keyed by their unique ``key``."""

    entity = CallStatus
    table = "call_statuses"

    find_by_key = find_one("key")
    exists_by_key = exists_by("key")
    delete_by_key = delete_by("key")
