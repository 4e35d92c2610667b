"""
Call status management.

Call statuses are the outcome labels agents pick when logging a call. Each
status is identified by a unique key; only its label may change after
creation.
"""

from typing import Any, List, Optional

import structlog

from backoffice.src.errors import ConflictError, NotFoundError
from backoffice.src.models.entities import CallStatus
from backoffice.src.models.requests import CallStatusRequest
from backoffice.src.repositories.call_status import CallStatusRepository
from backoffice.src.validation import RequestValidator

logger = structlog.get_logger(__name__)


class CallStatusService:
    """Service for call status operations."""

    def __init__(
        self,
        status_repo: CallStatusRepository,
        validator: Optional[RequestValidator[CallStatusRequest]] = None
    ):
        """
        Initialize call status service.

        Args:
            status_repo: Call status repository
            validator: Request validator (defaults to one for CallStatusRequest)
        """
        self.status_repo = status_repo
        self.validator = validator or RequestValidator(CallStatusRequest)

    async def list_statuses(self) -> List[CallStatus]:
        return await self.status_repo.find_all()

    async def get_status(self, key: str) -> CallStatus:
        """
        Get a call status by key.

        Raises:
            NotFoundError: If no status has the key
        """
        status = await self.status_repo.find_by_key(key)
        if status is None:
            raise NotFoundError("CallStatus", key, field="key")
        return status

    async def create_status(self, raw: Any, created_by: Optional[str] = None) -> CallStatus:
        """
        Create a call status.

        Args:
            raw: Raw request body
            created_by: Name of the creating user

        Returns:
            Created call status

        Raises:
            ValidationError: If the request is invalid
            ConflictError: If a status with the same key exists
        """
        request = self.validator.validate(raw)

        if await self.status_repo.exists_by_key(request.key):
            logger.warning("call_status_key_taken", key=request.key)
            raise ConflictError(
                f"Call status with key '{request.key}' already exists",
                entity="CallStatus",
                constraint="call_statuses_key_key"
            )

        status = await self.status_repo.save(
            CallStatus(key=request.key, label=request.label, created_by=created_by)
        )
        logger.info("call_status_created", key=status.key, status_id=status.id)
        return status

    async def update_status(self, key: str, raw: Any) -> CallStatus:
        """
        Change the label of an existing call status.

        The key in the body is validated like on creation but the stored
        key never changes.

        Raises:
            ValidationError: If the request is invalid
            NotFoundError: If no status has the key
        """
        request = self.validator.validate(raw)
        status = await self.get_status(key)

        status.label = request.label
        status = await self.status_repo.save(status)
        logger.info("call_status_updated", key=key)
        return status

    async def delete_status(self, key: str) -> None:
        """
        Delete a call status.

        Raises:
            NotFoundError: If no status has the key
        """
        if not await self.status_repo.exists_by_key(key):
            raise NotFoundError("CallStatus", key, field="key")
        await self.status_repo.delete_by_key(key)
        logger.info("call_status_deleted", key=key)
