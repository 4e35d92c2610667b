"""
Marketing user profile router.
"""

from typing import Any, Dict

from fastapi import APIRouter, Body, Depends, Response, status

from backoffice.src.dependencies import get_profile_service
from backoffice.src.errors import NotFoundError
from backoffice.src.models.entities import MarketingUserProfile
from backoffice.src.services import MarketingUserProfileService

router = APIRouter(prefix="/marketing/profiles", tags=["Marketing Profiles"])


@router.get("/{user_id}", response_model=MarketingUserProfile)
async def get_profile(
    user_id: int,
    service: MarketingUserProfileService = Depends(get_profile_service)
) -> MarketingUserProfile:
    profile = await service.get_profile(user_id)
    if profile is None:
        raise NotFoundError("MarketingUserProfile", user_id, field="user_id")
    return profile


@router.put("/{user_id}", response_model=MarketingUserProfile)
async def put_profile(
    user_id: int,
    body: Dict[str, Any] = Body(...),
    service: MarketingUserProfileService = Depends(get_profile_service)
) -> MarketingUserProfile:
    return await service.create_or_update_profile(user_id, body)


@router.delete("/{user_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_profile(
    user_id: int,
    service: MarketingUserProfileService = Depends(get_profile_service)
) -> Response:
    await service.delete_profile(user_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
