"""
Marketing user profiles: one optional profile per user.
"""

from typing import Any, Optional

import structlog

from backoffice.src.models.entities import MarketingUserProfile
from backoffice.src.models.requests import MarketingUserProfileRequest
from backoffice.src.repositories.marketing import MarketingUserProfileRepository
from backoffice.src.validation import RequestValidator

logger = structlog.get_logger(__name__)


class MarketingUserProfileService:
    """Service for marketing user profile operations."""

    def __init__(self, profile_repo: MarketingUserProfileRepository):
        self.profile_repo = profile_repo
        self.validator = RequestValidator(MarketingUserProfileRequest)

    async def get_profile(self, user_id: int) -> Optional[MarketingUserProfile]:
        return await self.profile_repo.find_by_user_id(user_id)

    async def create_or_update_profile(self, user_id: int, raw: Any) -> MarketingUserProfile:
        """
        Create the profile of a user, or replace its fields if it exists.

        Args:
            user_id: Owner of the profile
            raw: Raw request body

        Returns:
            Stored profile

        Raises:
            ValidationError: If the request is invalid
        """
        request = self.validator.validate(raw)

        profile = await self.profile_repo.find_by_user_id(user_id)
        if profile is None:
            profile = MarketingUserProfile(user_id=user_id, **request.model_dump())
        else:
            profile = profile.model_copy(update=request.model_dump())

        created = profile.id is None
        profile = await self.profile_repo.save(profile)
        logger.info("marketing_profile_saved", user_id=user_id, created=created)
        return profile

    async def delete_profile(self, user_id: int) -> bool:
        """Delete the profile of a user; returns False when there was none."""
        removed = await self.profile_repo.delete_by_user_id(user_id)
        if removed:
            logger.info("marketing_profile_deleted", user_id=user_id)
        return removed > 0
