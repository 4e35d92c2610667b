"""
Weekly schedule router.
"""

from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Body, Depends, Query, Response, status

from backoffice.src.dependencies import get_acting_user_id, get_schedule_service
from backoffice.src.models.entities import WeeklySchedule
from backoffice.src.services import WeeklyScheduleService

router = APIRouter(
    prefix="/marketing/schedules",
    tags=["Weekly Schedules"],
    responses={
        404: {"description": "Not Found"},
        422: {"description": "Validation Error"}
    }
)


@router.post(
    "",
    response_model=WeeklySchedule,
    status_code=status.HTTP_201_CREATED,
    responses={409: {"description": "Schedule already exists for this user, week, and month"}}
)
async def create_schedule(
    body: Dict[str, Any] = Body(...),
    service: WeeklyScheduleService = Depends(get_schedule_service),
    acting_user_id: Optional[int] = Depends(get_acting_user_id)
) -> WeeklySchedule:
    return await service.create_schedule(body, created_by=acting_user_id)


@router.get("", response_model=List[WeeklySchedule])
async def list_user_schedules(
    user_id: int = Query(...),
    year: int = Query(...),
    month: int = Query(..., ge=1, le=12),
    service: WeeklyScheduleService = Depends(get_schedule_service)
) -> List[WeeklySchedule]:
    return await service.list_user_schedules(user_id, year, month)


@router.get("/{schedule_id}", response_model=WeeklySchedule)
async def get_schedule(
    schedule_id: int,
    service: WeeklyScheduleService = Depends(get_schedule_service)
) -> WeeklySchedule:
    return await service.get_schedule(schedule_id)


@router.delete("/{schedule_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_schedule(
    schedule_id: int,
    service: WeeklyScheduleService = Depends(get_schedule_service)
) -> Response:
    await service.delete_schedule(schedule_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
