"""API dependencies."""

from typing import Annotated, Optional

from fastapi import Depends, Header, HTTPException

from showtrack_server.core.config import settings
from showtrack_server.core.exceptions import (
    InvalidDateFormat,
    PersistenceError,
    SeasonNotFound,
    ShowNotFound,
    ShowTrackerError,
    Unauthenticated,
)
from showtrack_server.services.show_feed import ShowFeed
from showtrack_server.services.show_service import ShowService
from showtrack_server.services.tmdb_client import TMDBClient

# Global service instances
_show_service: ShowService | None = None
_show_feed: ShowFeed | None = None
_tmdb_client: TMDBClient | None = None


def init_services(
    show_service: ShowService,
    show_feed: ShowFeed,
    tmdb_client: TMDBClient | None = None,
) -> None:
    """Initialize service instances."""
    global _show_service, _show_feed, _tmdb_client
    _show_service = show_service
    _show_feed = show_feed
    _tmdb_client = tmdb_client


def get_show_service() -> ShowService:
    """Get the show service instance."""
    if _show_service is None:
        raise RuntimeError("Services not initialized")
    return _show_service


def get_show_feed() -> ShowFeed:
    """Get the show feed instance."""
    if _show_feed is None:
        raise RuntimeError("Services not initialized")
    return _show_feed


def get_tmdb_client() -> TMDBClient:
    """Get the TMDB client, or fail if catalog lookup is disabled."""
    if _tmdb_client is None:
        raise HTTPException(status_code=503, detail="Catalog lookup not configured")
    return _tmdb_client


async def get_current_user(
    authorization: Annotated[str | None, Header()] = None,
) -> Optional[str]:
    """
    Resolve the acting user from a bearer token.

    Returns None when the header is missing, malformed or the token is
    unknown; store operations then reject the request.
    """
    if not authorization:
        return None

    # Expect "Bearer <token>"
    parts = authorization.split()
    if len(parts) != 2 or parts[0].lower() != "bearer":
        return None

    return settings.user_tokens.get(parts[1])


def http_error(error: ShowTrackerError) -> HTTPException:
    """Translate a domain error into an HTTP error."""
    if isinstance(error, Unauthenticated):
        return HTTPException(status_code=401, detail=str(error))
    if isinstance(error, (ShowNotFound, SeasonNotFound)):
        return HTTPException(status_code=404, detail=str(error))
    if isinstance(error, InvalidDateFormat):
        return HTTPException(status_code=422, detail=str(error))
    if isinstance(error, PersistenceError):
        return HTTPException(
            status_code=503,
            detail={
                "message": str(error),
                "current": error.current.model_dump(mode="json") if error.current else None,
            },
        )
    return HTTPException(status_code=400, detail=str(error))


# Type aliases for dependency injection
ShowServiceDep = Annotated[ShowService, Depends(get_show_service)]
ShowFeedDep = Annotated[ShowFeed, Depends(get_show_feed)]
TMDBClientDep = Annotated[TMDBClient, Depends(get_tmdb_client)]
CurrentUserDep = Annotated[Optional[str], Depends(get_current_user)]
