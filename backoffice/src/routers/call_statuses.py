"""
Call status router.

Request bodies are accepted as raw JSON objects and validated by the
service, so every invalid field is reported in one response.
"""

from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Body, Depends, Response, status

from backoffice.src.dependencies import get_acting_user, get_call_status_service
from backoffice.src.models.entities import CallStatus
from backoffice.src.services import CallStatusService

router = APIRouter(
    prefix="/call-statuses",
    tags=["Call Statuses"],
    responses={
        404: {"description": "Not Found"},
        422: {"description": "Validation Error"}
    }
)


@router.get("", response_model=List[CallStatus], summary="List call statuses")
async def list_statuses(
    service: CallStatusService = Depends(get_call_status_service)
) -> List[CallStatus]:
    return await service.list_statuses()


@router.get("/{key}", response_model=CallStatus, summary="Get call status")
async def get_status(
    key: str,
    service: CallStatusService = Depends(get_call_status_service)
) -> CallStatus:
    return await service.get_status(key)


@router.post(
    "",
    response_model=CallStatus,
    status_code=status.HTTP_201_CREATED,
    summary="Create call status",
    responses={409: {"description": "Key already exists"}}
)
async def create_status(
    body: Dict[str, Any] = Body(...),
    service: CallStatusService = Depends(get_call_status_service),
    acting_user: Optional[str] = Depends(get_acting_user)
) -> CallStatus:
    return await service.create_status(body, created_by=acting_user)


@router.put("/{key}", response_model=CallStatus, summary="Update call status label")
async def update_status(
    key: str,
    body: Dict[str, Any] = Body(...),
    service: CallStatusService = Depends(get_call_status_service)
) -> CallStatus:
    return await service.update_status(key, body)


@router.delete("/{key}", status_code=status.HTTP_204_NO_CONTENT, summary="Delete call status")
async def delete_status(
    key: str,
    service: CallStatusService = Depends(get_call_status_service)
) -> Response:
    await service.delete_status(key)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
