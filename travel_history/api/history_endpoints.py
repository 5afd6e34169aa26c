"""
History API endpoints - location queries and stay recording
"""
from datetime import datetime
from typing import Optional

from fastapi import APIRouter, Depends, Query, Response, status

from travel_history.core.dependencies import get_history_service, require_write_key
from travel_history.core.exceptions import StayNotFoundError
from travel_history.core.validation import as_utc
from travel_history.models.internal_models import Stay
from travel_history.schemas.stay import (
    BlogPostAttach,
    BlogPostRead,
    MapAttach,
    StayCreate,
    StayRead,
    StayUpdate,
)
from travel_history.services.history_service import HistoryService

router = APIRouter(tags=["history"])


def _stay_or_no_content(stay: Optional[Stay]):
    if stay is None:
        return Response(status_code=status.HTTP_204_NO_CONTENT)
    return StayRead.model_validate(stay)


@router.get("/history", response_model=list[StayRead])
async def get_complete_history(service: HistoryService = Depends(get_history_service)):
    """
    Get every location that has been visited or planned
    """
    stays = await service.get_complete_history()
    return [StayRead.model_validate(s) for s in stays]


@router.get(
    "/history/current",
    response_model=StayRead,
    responses={204: {"description": "No stay is in progress"}},
)
async def get_current_location(service: HistoryService = Depends(get_history_service)):
    """
    Get the location the person is in right now
    """
    return _stay_or_no_content(await service.get_current_location())


@router.get(
    "/history/next",
    response_model=StayRead,
    responses={204: {"description": "Nothing planned yet"}},
)
async def get_next_location(service: HistoryService = Depends(get_history_service)):
    """
    Get the location the person is planning to be in next
    """
    return _stay_or_no_content(await service.get_next_location())


@router.get(
    "/history/at",
    response_model=StayRead,
    responses={204: {"description": "No stay covers that time"}},
)
async def get_historical_location(
    time: datetime = Query(..., description="Instant to look up"),
    service: HistoryService = Depends(get_history_service),
):
    """
    Get the location the person was in at a particular time
    """
    return _stay_or_no_content(await service.get_historical_location(as_utc(time)))


@router.get(
    "/history/previous",
    response_model=StayRead,
    responses={204: {"description": "No stay started before that time"}},
)
async def get_previous_location(
    time: datetime = Query(..., description="Instant to look back from"),
    service: HistoryService = Depends(get_history_service),
):
    """
    Get the last location the person started visiting before a time, ended or not
    """
    return _stay_or_no_content(await service.get_previous_location(as_utc(time)))


@router.get("/history/period", response_model=list[StayRead])
async def get_historical_period(
    start: datetime = Query(..., description="Window start (inclusive)"),
    end: datetime = Query(..., description="Window end (exclusive)"),
    service: HistoryService = Depends(get_history_service),
):
    """
    Get every location visited between two times, in chronological order
    """
    stays = await service.get_historical_period(as_utc(start), as_utc(end))
    return [StayRead.model_validate(s) for s in stays]


@router.get(
    "/blog/latest",
    response_model=BlogPostRead,
    responses={204: {"description": "No blog posts written yet"}},
)
async def get_latest_blog_post(service: HistoryService = Depends(get_history_service)):
    """
    Get the blog post for the most recent location that has one
    """
    blog_post = await service.get_latest_blog_post()
    if blog_post is None:
        return Response(status_code=status.HTTP_204_NO_CONTENT)
    return BlogPostRead.model_validate(blog_post)


@router.post(
    "/history",
    response_model=StayRead,
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(require_write_key)],
)
async def add_trip(
    stay_data: StayCreate,
    service: HistoryService = Depends(get_history_service),
):
    """
    Add a new stay to the history

    - **start**: When the stay started
    - **end**: When the stay ends, omitted if not known yet
    - **name**: Place name
    - **group**, **country**, **timezone_offset**: Inherited from the previous stay when omitted

    Any open stay that started earlier is closed at this stay's start.
    """
    stay = await service.add_trip(
        start=stay_data.start,
        end=stay_data.end,
        name=stay_data.name,
        group=stay_data.group,
        country=stay_data.country,
        timezone_offset=stay_data.timezone_offset,
    )
    return StayRead.model_validate(stay)


@router.patch(
    "/history/{stay_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    dependencies=[Depends(require_write_key)],
)
async def update_location(
    stay_id: int,
    stay_data: StayUpdate,
    service: HistoryService = Depends(get_history_service),
):
    """
    Update any of the details of a stay

    All fields optional - only provided fields will be updated. Blog posts and
    maps have their own endpoints.
    """
    exists = await service.update_location(
        stay_id,
        start=stay_data.start,
        end=stay_data.end,
        group=stay_data.group,
        name=stay_data.name,
        country=stay_data.country,
        timezone_offset=stay_data.timezone_offset,
    )
    if not exists:
        raise StayNotFoundError(stay_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.put(
    "/history/{stay_id}/blog",
    status_code=status.HTTP_204_NO_CONTENT,
    dependencies=[Depends(require_write_key)],
)
async def add_blog_post(
    stay_id: int,
    blog_post: BlogPostAttach,
    service: HistoryService = Depends(get_history_service),
):
    if not await service.add_blog_post(stay_id, blog_post.url, blog_post.name):
        raise StayNotFoundError(stay_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.delete(
    "/history/{stay_id}/blog",
    status_code=status.HTTP_204_NO_CONTENT,
    dependencies=[Depends(require_write_key)],
)
async def delete_blog_post(
    stay_id: int,
    service: HistoryService = Depends(get_history_service),
):
    if not await service.delete_blog_post(stay_id):
        raise StayNotFoundError(stay_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.put(
    "/history/{stay_id}/map",
    status_code=status.HTTP_204_NO_CONTENT,
    dependencies=[Depends(require_write_key)],
)
async def add_map(
    stay_id: int,
    map_data: MapAttach,
    service: HistoryService = Depends(get_history_service),
):
    if not await service.add_map(stay_id, map_data.url):
        raise StayNotFoundError(stay_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
