"""
Marketing hierarchy router: areas, sub-areas and branches.
"""

from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Body, Depends, Query, Response, status

from backoffice.src.dependencies import get_acting_user_id, get_hierarchy_service
from backoffice.src.models.entities import MarketingArea, MarketingBranch, MarketingSubArea
from backoffice.src.services import MarketingHierarchyService

router = APIRouter(
    prefix="/marketing",
    tags=["Marketing Hierarchy"],
    responses={
        404: {"description": "Not Found"},
        409: {"description": "Conflict"},
        422: {"description": "Validation Error"}
    }
)


# ============================================================================
# AREAS
# ============================================================================


@router.get("/areas", response_model=List[MarketingArea])
async def list_areas(
    service: MarketingHierarchyService = Depends(get_hierarchy_service)
) -> List[MarketingArea]:
    return await service.list_areas()


@router.get("/areas/{area_id}", response_model=MarketingArea)
async def get_area(
    area_id: int,
    service: MarketingHierarchyService = Depends(get_hierarchy_service)
) -> MarketingArea:
    return await service.get_area(area_id)


@router.post("/areas", response_model=MarketingArea, status_code=status.HTTP_201_CREATED)
async def create_area(
    body: Dict[str, Any] = Body(...),
    service: MarketingHierarchyService = Depends(get_hierarchy_service),
    acting_user_id: Optional[int] = Depends(get_acting_user_id)
) -> MarketingArea:
    return await service.create_area(body, created_by=acting_user_id)


@router.delete("/areas/{area_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_area(
    area_id: int,
    service: MarketingHierarchyService = Depends(get_hierarchy_service)
) -> Response:
    await service.delete_area(area_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get("/areas/{area_id}/sub-areas", response_model=List[MarketingSubArea])
async def list_area_sub_areas(
    area_id: int,
    service: MarketingHierarchyService = Depends(get_hierarchy_service)
) -> List[MarketingSubArea]:
    return await service.sub_areas_of(area_id)


@router.get("/areas/{area_id}/branches", response_model=List[MarketingBranch])
async def list_area_branches(
    area_id: int,
    unassigned: bool = Query(False, description="Only branches outside any sub-area"),
    service: MarketingHierarchyService = Depends(get_hierarchy_service)
) -> List[MarketingBranch]:
    return await service.branches_of_area(area_id, unassigned_only=unassigned)


# ============================================================================
# SUB-AREAS
# ============================================================================


@router.get("/sub-areas", response_model=List[MarketingSubArea])
async def list_sub_areas(
    service: MarketingHierarchyService = Depends(get_hierarchy_service)
) -> List[MarketingSubArea]:
    return await service.list_sub_areas()


@router.post("/sub-areas", response_model=MarketingSubArea, status_code=status.HTTP_201_CREATED)
async def create_sub_area(
    body: Dict[str, Any] = Body(...),
    service: MarketingHierarchyService = Depends(get_hierarchy_service),
    acting_user_id: Optional[int] = Depends(get_acting_user_id)
) -> MarketingSubArea:
    return await service.create_sub_area(body, created_by=acting_user_id)


@router.get("/sub-areas/{sub_area_id}/branches", response_model=List[MarketingBranch])
async def list_sub_area_branches(
    sub_area_id: int,
    service: MarketingHierarchyService = Depends(get_hierarchy_service)
) -> List[MarketingBranch]:
    return await service.branches_of_sub_area(sub_area_id)


# ============================================================================
# BRANCHES
# ============================================================================


@router.get("/branches", response_model=List[MarketingBranch])
async def list_branches(
    service: MarketingHierarchyService = Depends(get_hierarchy_service)
) -> List[MarketingBranch]:
    return await service.list_branches()


@router.post("/branches", response_model=MarketingBranch, status_code=status.HTTP_201_CREATED)
async def create_branch(
    body: Dict[str, Any] = Body(...),
    service: MarketingHierarchyService = Depends(get_hierarchy_service),
    acting_user_id: Optional[int] = Depends(get_acting_user_id)
) -> MarketingBranch:
    return await service.create_branch(body, created_by=acting_user_id)
