from typing import Dict, List

from fastapi import APIRouter, Depends

from src.core.errors import ErrorResponseModel
from src.dependencies.auth import CurrentUser, get_current_user, require_admin
from src.dependencies.services import get_rating_service
from src.models.rating import RatingHistoryEntry
from src.services.rating_service import RatingService
from src.utils.correlation_id import get_correlation_id

router = APIRouter()


@router.get("/me", response_model=List[RatingHistoryEntry])
async def list_my_ratings(
    service: RatingService = Depends(get_rating_service),
    user: CurrentUser = Depends(get_current_user),
):
    """
    Ratings submitted by the authenticated user, oldest first.
    """
    return await service.list_rater_history(user.user_id, correlation_id=get_correlation_id())


@router.get("/raters/{rater_id}", response_model=List[RatingHistoryEntry])
async def list_rater_ratings(
    rater_id: str,
    service: RatingService = Depends(get_rating_service),
):
    return await service.list_rater_history(rater_id, correlation_id=get_correlation_id())


@router.get(
    "/orphans",
    response_model=Dict[str, int],
    responses={403: {"model": ErrorResponseModel}},
)
async def list_orphaned_ratings(
    service: RatingService = Depends(get_rating_service),
    user: CurrentUser = Depends(require_admin),
):
    """
    Item IDs that still have ratings but no longer exist, with rating counts.
    """
    return await service.find_orphaned_ratings(correlation_id=get_correlation_id())
