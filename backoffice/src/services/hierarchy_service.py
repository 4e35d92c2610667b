"""
Marketing hierarchy: areas, sub-areas and branches.

An area groups sub-areas; a branch belongs to an area and optionally to one
of that area's sub-areas. Parents must exist before children are created.
"""

from typing import Any, List, Optional

import structlog

from backoffice.src.errors import FieldViolation, NotFoundError, ValidationError
from backoffice.src.models.entities import MarketingArea, MarketingBranch, MarketingSubArea
from backoffice.src.models.requests import (
    MarketingAreaRequest,
    MarketingBranchRequest,
    MarketingSubAreaRequest,
)
from backoffice.src.repositories.marketing import (
    MarketingAreaRepository,
    MarketingBranchRepository,
    MarketingSubAreaRepository,
)
from backoffice.src.validation import RequestValidator

logger = structlog.get_logger(__name__)


class MarketingHierarchyService:
    """Service for the area / sub-area / branch tree."""

    def __init__(
        self,
        area_repo: MarketingAreaRepository,
        sub_area_repo: MarketingSubAreaRepository,
        branch_repo: MarketingBranchRepository
    ):
        """
        Initialize hierarchy service.

        Args:
            area_repo: Area repository
            sub_area_repo: Sub-area repository
            branch_repo: Branch repository
        """
        self.area_repo = area_repo
        self.sub_area_repo = sub_area_repo
        self.branch_repo = branch_repo

        self.area_validator = RequestValidator(MarketingAreaRequest)
        self.sub_area_validator = RequestValidator(MarketingSubAreaRequest)
        self.branch_validator = RequestValidator(MarketingBranchRequest)

    # =========================================================================
    # Areas
    # =========================================================================

    async def list_areas(self) -> List[MarketingArea]:
        return await self.area_repo.find_all()

    async def get_area(self, area_id: int) -> MarketingArea:
        area = await self.area_repo.find_by_id(area_id)
        if area is None:
            raise NotFoundError("MarketingArea", area_id)
        return area

    async def create_area(self, raw: Any, created_by: Optional[int] = None) -> MarketingArea:
        """
        Create an area.

        Raises:
            ValidationError: If the request is invalid
            ConflictError: If the name or code is already used
        """
        request = self.area_validator.validate(raw)
        area = await self.area_repo.save(
            MarketingArea(**request.model_dump(), created_by=created_by)
        )
        logger.info("marketing_area_created", area_id=area.id, name=area.name)
        return area

    async def delete_area(self, area_id: int) -> None:
        """
        Delete an area together with its sub-areas and branches.

        Raises:
            NotFoundError: If the area does not exist
        """
        await self.get_area(area_id)

        branches = await self.branch_repo.delete_by_area_id(area_id)
        sub_areas = await self.sub_area_repo.delete_by_area_id(area_id)
        await self.area_repo.delete_by_id(area_id)
        logger.info(
            "marketing_area_deleted",
            area_id=area_id,
            sub_areas_removed=sub_areas,
            branches_removed=branches
        )

    # =========================================================================
    # Sub-areas
    # =========================================================================

    async def list_sub_areas(self) -> List[MarketingSubArea]:
        return await self.sub_area_repo.find_all()

    async def get_sub_area(self, sub_area_id: int) -> MarketingSubArea:
        sub_area = await self.sub_area_repo.find_by_id(sub_area_id)
        if sub_area is None:
            raise NotFoundError("MarketingSubArea", sub_area_id)
        return sub_area

    async def create_sub_area(self, raw: Any, created_by: Optional[int] = None) -> MarketingSubArea:
        """
        Create a sub-area under an existing area.

        Raises:
            ValidationError: If the request is invalid
            NotFoundError: If the parent area does not exist
            ConflictError: If the code is already used
        """
        request = self.sub_area_validator.validate(raw)
        await self.get_area(request.area_id)

        sub_area = await self.sub_area_repo.save(
            MarketingSubArea(**request.model_dump(), created_by=created_by)
        )
        logger.info("marketing_sub_area_created", sub_area_id=sub_area.id, area_id=sub_area.area_id)
        return sub_area

    async def sub_areas_of(self, area_id: int) -> List[MarketingSubArea]:
        await self.get_area(area_id)
        return await self.sub_area_repo.find_by_area_id(area_id)

    # =========================================================================
    # Branches
    # =========================================================================

    async def list_branches(self) -> List[MarketingBranch]:
        return await self.branch_repo.find_all()

    async def create_branch(self, raw: Any, created_by: Optional[int] = None) -> MarketingBranch:
        """
        Create a branch under an area and optionally one of its sub-areas.

        Raises:
            ValidationError: If the request is invalid or the sub-area
                belongs to a different area
            NotFoundError: If the area or sub-area does not exist
            ConflictError: If the code is already used
        """
        request = self.branch_validator.validate(raw)
        await self.get_area(request.area_id)

        if request.sub_area_id is not None:
            sub_area = await self.get_sub_area(request.sub_area_id)
            if sub_area.area_id != request.area_id:
                raise ValidationError([
                    FieldViolation(
                        "sub_area_id",
                        "wrong_area",
                        f"Sub-area {sub_area.id} does not belong to area {request.area_id}"
                    )
                ])

        branch = await self.branch_repo.save(
            MarketingBranch(**request.model_dump(), created_by=created_by)
        )
        logger.info("marketing_branch_created", branch_id=branch.id, area_id=branch.area_id)
        return branch

    async def branches_of_area(self, area_id: int, unassigned_only: bool = False) -> List[MarketingBranch]:
        """
        Branches of an area.

        Args:
            area_id: Area id
            unassigned_only: Only return branches not placed in a sub-area

        Raises:
            NotFoundError: If the area does not exist
        """
        await self.get_area(area_id)
        if unassigned_only:
            return await self.branch_repo.find_unassigned_by_area_id(area_id)
        return await self.branch_repo.find_by_area_id(area_id)

    async def branches_of_sub_area(self, sub_area_id: int) -> List[MarketingBranch]:
        await self.get_sub_area(sub_area_id)
        return await self.branch_repo.find_by_sub_area_id(sub_area_id)
