"""Show tracking API endpoints."""

import json
import logging
from typing import AsyncIterator

from fastapi import APIRouter, Request
from fastapi.responses import StreamingResponse

from showtrack_server.api.deps import (
    CurrentUserDep,
    ShowFeedDep,
    ShowServiceDep,
    http_error,
)
from showtrack_server.core.exceptions import ShowTrackerError, Unauthenticated
from showtrack_server.models.show import (
    SeasonDateUpdate,
    SeasonStatusUpdate,
    Show,
    ShowCreate,
    ShowFromCatalog,
    ShowUpdate,
    ShowWithProgress,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/shows", tags=["shows"])

KEEPALIVE_SECONDS = 15.0


def _snapshot_event(shows: list[Show]) -> str:
    payload = [ShowWithProgress.from_show(s).model_dump(mode="json") for s in shows]
    return f"event: shows\ndata: {json.dumps(payload)}\n\n"


@router.get("", response_model=list[ShowWithProgress])
async def list_shows(
    show_service: ShowServiceDep,
    user_id: CurrentUserDep,
) -> list[ShowWithProgress]:
    """List the current user's shows, newest first."""
    try:
        shows = await show_service.list_shows(user_id)
    except ShowTrackerError as e:
        raise http_error(e) from e
    return [ShowWithProgress.from_show(show) for show in shows]


@router.post("", response_model=ShowWithProgress, status_code=201)
async def create_show(
    request: ShowCreate,
    show_service: ShowServiceDep,
    user_id: CurrentUserDep,
) -> ShowWithProgress:
    """Add a show manually."""
    try:
        show = await show_service.create_show(user_id, request)
    except ShowTrackerError as e:
        raise http_error(e) from e
    return ShowWithProgress.from_show(show)


@router.post("/from-catalog", response_model=ShowWithProgress, status_code=201)
async def create_show_from_catalog(
    request: ShowFromCatalog,
    show_service: ShowServiceDep,
    user_id: CurrentUserDep,
) -> ShowWithProgress:
    """Add a show chosen from catalog search."""
    try:
        show = await show_service.create_from_catalog(user_id, request)
    except ShowTrackerError as e:
        raise http_error(e) from e
    return ShowWithProgress.from_show(show)


@router.get("/stream")
async def stream_shows(
    request: Request,
    show_service: ShowServiceDep,
    show_feed: ShowFeedDep,
    user_id: CurrentUserDep,
) -> StreamingResponse:
    """Stream the user's show collection as server-sent events."""
    if not user_id:
        raise http_error(Unauthenticated())

    async def events() -> AsyncIterator[str]:
        async with show_feed.subscribe(user_id) as subscription:
            yield _snapshot_event(await show_service.list_shows(user_id))
            while not await request.is_disconnected():
                shows = await subscription.next(timeout=KEEPALIVE_SECONDS)
                if shows is not None:
                    yield _snapshot_event(shows)
                elif subscription.closed:
                    break
                else:
                    yield ": keep-alive\n\n"
        logger.debug(f"Show stream ended for {user_id}")

    return StreamingResponse(events(), media_type="text/event-stream")


@router.delete("/stream")
async def close_streams(
    show_feed: ShowFeedDep,
    user_id: CurrentUserDep,
) -> dict:
    """End all of the user's live streams (sign-out)."""
    if not user_id:
        raise http_error(Unauthenticated())
    show_feed.close_user(user_id)
    return {"status": "ok"}


@router.get("/{show_id}", response_model=ShowWithProgress)
async def get_show(
    show_id: str,
    show_service: ShowServiceDep,
    user_id: CurrentUserDep,
) -> ShowWithProgress:
    """Get a specific show."""
    try:
        show = await show_service.get_show(user_id, show_id)
    except ShowTrackerError as e:
        raise http_error(e) from e
    return ShowWithProgress.from_show(show)


@router.patch("/{show_id}", response_model=ShowWithProgress)
async def update_show(
    show_id: str,
    request: ShowUpdate,
    show_service: ShowServiceDep,
    user_id: CurrentUserDep,
) -> ShowWithProgress:
    """Edit a show's title, rating, notes or favorite flag."""
    try:
        show = await show_service.update_details(user_id, show_id, request)
    except ShowTrackerError as e:
        raise http_error(e) from e
    return ShowWithProgress.from_show(show)


@router.delete("/{show_id}")
async def delete_show(
    show_id: str,
    show_service: ShowServiceDep,
    user_id: CurrentUserDep,
) -> dict:
    """Delete a show."""
    try:
        await show_service.delete_show(user_id, show_id)
    except ShowTrackerError as e:
        raise http_error(e) from e
    return {"status": "ok", "message": "Show deleted"}


@router.put("/{show_id}/seasons/{season_id}/status", response_model=ShowWithProgress)
async def update_season_status(
    show_id: str,
    season_id: int,
    request: SeasonStatusUpdate,
    show_service: ShowServiceDep,
    user_id: CurrentUserDep,
) -> ShowWithProgress:
    """Change a season's watch status."""
    try:
        show = await show_service.update_season_status(
            user_id, show_id, season_id, request.status
        )
    except ShowTrackerError as e:
        raise http_error(e) from e
    return ShowWithProgress.from_show(show)


@router.put("/{show_id}/seasons/{season_id}/date", response_model=ShowWithProgress)
async def set_season_date(
    show_id: str,
    season_id: int,
    request: SeasonDateUpdate,
    show_service: ShowServiceDep,
    user_id: CurrentUserDep,
) -> ShowWithProgress:
    """Manually set a season's started or watched month."""
    try:
        show = await show_service.set_season_date(
            user_id, show_id, season_id, request.kind, request.value
        )
    except ShowTrackerError as e:
        raise http_error(e) from e
    return ShowWithProgress.from_show(show)
