from fastapi import APIRouter, Depends, Query, Request, Response, status
from slowapi import Limiter
from slowapi.util import get_remote_address

from src.config import config
from src.core.errors import ErrorResponseModel
from src.dependencies.auth import CurrentUser, get_current_user, require_admin
from src.dependencies.services import get_item_service, get_rating_service
from src.models.item import (
    ItemCreate,
    ItemDB,
    ItemListResponse,
    ItemUpdate,
    RatingAggregate,
)
from src.models.rating import RatingSubmission
from src.services.item_service import ItemService
from src.services.rating_service import RatingService
from src.utils.correlation_id import get_correlation_id

limiter = Limiter(key_func=get_remote_address)

router = APIRouter()


@router.get(
    "",
    response_model=ItemListResponse,
    responses={400: {"model": ErrorResponseModel}, 503: {"model": ErrorResponseModel}},
)
async def list_items(
    page: int = Query(1, ge=1, description="Page number, starting at 1"),
    limit: int = Query(config.DEFAULT_PAGE_SIZE, ge=1, le=config.MAX_PAGE_SIZE),
    service: ItemService = Depends(get_item_service),
):
    """
    List catalog items, best rated first.
    """
    return await service.list_items(page, limit, correlation_id=get_correlation_id())


@router.get(
    "/search",
    response_model=ItemListResponse,
    responses={400: {"model": ErrorResponseModel}},
)
async def search_items(
    response: Response,
    q: str = Query(..., min_length=1, description="Text to find in title, author or categories"),
    page: int = Query(1, ge=1),
    limit: int = Query(config.DEFAULT_PAGE_SIZE, ge=1, le=config.MAX_PAGE_SIZE),
    service: ItemService = Depends(get_item_service),
):
    """
    Search items by text. Returns paginated results with metadata.
    """
    response.headers["Cache-Control"] = "no-cache, no-store, must-revalidate"
    return await service.search_items(q, page, limit, correlation_id=get_correlation_id())


@router.get(
    "/{item_id}",
    response_model=ItemDB,
    responses={400: {"model": ErrorResponseModel}, 404: {"model": ErrorResponseModel}},
)
async def get_item(item_id: str, service: ItemService = Depends(get_item_service)):
    return await service.get_item(item_id, correlation_id=get_correlation_id())


@router.post(
    "",
    response_model=ItemDB,
    status_code=status.HTTP_201_CREATED,
    responses={403: {"model": ErrorResponseModel}},
)
async def create_item(
    item: ItemCreate,
    service: ItemService = Depends(get_item_service),
    user: CurrentUser = Depends(require_admin),
):
    """
    Create a catalog item. Its rating fields start at zero.
    """
    return await service.create_item(item, correlation_id=get_correlation_id())


@router.patch(
    "/{item_id}",
    response_model=ItemDB,
    responses={403: {"model": ErrorResponseModel}, 404: {"model": ErrorResponseModel}},
)
async def update_item(
    item_id: str,
    item: ItemUpdate,
    service: ItemService = Depends(get_item_service),
    user: CurrentUser = Depends(require_admin),
):
    return await service.update_item(item_id, item, correlation_id=get_correlation_id())


@router.delete(
    "/{item_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    responses={403: {"model": ErrorResponseModel}, 404: {"model": ErrorResponseModel}},
)
async def delete_item(
    item_id: str,
    service: ItemService = Depends(get_item_service),
    user: CurrentUser = Depends(require_admin),
):
    """
    Delete an item and every rating recorded for it.
    """
    await service.delete_item(item_id, correlation_id=get_correlation_id())


@router.post(
    "/{item_id}/ratings",
    response_model=RatingAggregate,
    status_code=status.HTTP_201_CREATED,
    responses={
        400: {"model": ErrorResponseModel},
        404: {"model": ErrorResponseModel},
        409: {"model": ErrorResponseModel},
        422: {"model": ErrorResponseModel},
        429: {"description": "Rate limit exceeded"},
        503: {"model": ErrorResponseModel},
    },
)
@limiter.limit(config.RATE_LIMIT_RATINGS)
async def rate_item(
    request: Request,
    item_id: str,
    submission: RatingSubmission,
    service: RatingService = Depends(get_rating_service),
    user: CurrentUser = Depends(get_current_user),
):
    """
    Rate an item 1-5. One rating per user per item. Rate limited.
    """
    return await service.submit_rating(
        item_id, user.user_id, submission.score, correlation_id=get_correlation_id()
    )


@router.post(
    "/{item_id}/ratings/reconcile",
    response_model=RatingAggregate,
    responses={403: {"model": ErrorResponseModel}, 404: {"model": ErrorResponseModel}},
)
async def reconcile_item_ratings(
    item_id: str,
    service: RatingService = Depends(get_rating_service),
    user: CurrentUser = Depends(require_admin),
):
    """
    Recompute an item's rating aggregate from all of its ratings.

    Only call this while the item is not receiving ratings: a rating already
    recorded but not yet folded into the aggregate is counted by the full scan
    and then added again when its own update lands, so it would be counted twice.
    """
    return await service.reconcile_item(item_id, correlation_id=get_correlation_id())
