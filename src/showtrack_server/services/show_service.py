"""Show tracking service tying the season tracker to storage and live sync."""

import asyncio
import logging
import weakref
from typing import Callable, Optional

from sqlalchemy.exc import SQLAlchemyError

from ..core.clock import Clock, system_clock
from ..core.exceptions import PersistenceError, ShowTrackerError
from ..models.show import (
    DateKind,
    Show,
    ShowCreate,
    ShowFromCatalog,
    ShowUpdate,
    WatchStatus,
    build_seasons,
)
from .season_tracker import advance_to_status, set_manual_date
from .show_feed import ShowFeed
from .show_store import ShowStore
from .tmdb_client import TMDBClient

logger = logging.getLogger(__name__)


class ShowService:
    """
    Applies user edits to stored shows.

    Every mutation reads the latest stored show, applies exactly one change
    and writes the full record back. Mutations of the same show are
    serialized. When a write fails the stored show is re-read and handed
    back inside PersistenceError so the caller can re-sync.
    """

    def __init__(
        self,
        store: ShowStore,
        feed: Optional[ShowFeed] = None,
        catalog: Optional[TMDBClient] = None,
        clock: Clock = system_clock,
    ):
        """
        Initialize show service.

        Args:
            store: Show persistence
            feed: Live snapshot feed, notified after each successful write
            catalog: Catalog client used when adding shows from search
            clock: Time source for dates and timestamps
        """
        self.store = store
        self.feed = feed
        self.catalog = catalog
        self.clock = clock
        self._locks: weakref.WeakValueDictionary[str, asyncio.Lock] = (
            weakref.WeakValueDictionary()
        )

    def _lock_for(self, show_id: str) -> asyncio.Lock:
        lock = self._locks.get(show_id)
        if lock is None:
            lock = self._locks[show_id] = asyncio.Lock()
        return lock

    async def list_shows(self, user_id: Optional[str]) -> list[Show]:
        """Get a user's shows, most recently added first."""
        return await self.store.list_shows(user_id)

    async def get_show(self, user_id: Optional[str], show_id: str) -> Show:
        """Get one of a user's shows."""
        return await self.store.get_show(user_id, show_id)

    async def create_show(self, user_id: Optional[str], request: ShowCreate) -> Show:
        """Add a show by hand with a fixed number of seasons."""
        now = self.clock.now()
        show = Show(
            user_id=user_id or "",
            title=request.title,
            seasons=build_seasons(request.season_count),
            added_date=now,
            last_updated=now,
        )
        return await self._save(user_id, show)

    async def create_from_catalog(
        self, user_id: Optional[str], request: ShowFromCatalog
    ) -> Show:
        """
        Add a show picked from catalog search.

        The season count comes from catalog details when they can be fetched,
        else from the search result hint, else defaults to one season.
        """
        metadata = None
        if self.catalog is not None:
            metadata = await self.catalog.get_show_details(request.external_id)
        else:
            logger.debug("Catalog not configured, adding show without metadata")

        season_count = (
            (metadata.total_seasons if metadata else None)
            or request.total_seasons
            or 1
        )

        now = self.clock.now()
        show = Show(
            user_id=user_id or "",
            title=request.title,
            external_id=request.external_id,
            seasons=build_seasons(season_count),
            metadata=metadata,
            added_date=now,
            last_updated=now,
        )
        return await self._save(user_id, show)

    async def update_details(
        self, user_id: Optional[str], show_id: str, request: ShowUpdate
    ) -> Show:
        """Edit title, rating, notes or favorite flag."""
        changes = request.model_dump(exclude_unset=True)
        for field in ("title", "is_favorite"):
            if changes.get(field) is None:
                changes.pop(field, None)

        def apply(show: Show) -> Show:
            return show.model_copy(update={**changes, "last_updated": self.clock.now()})

        return await self._mutate(user_id, show_id, apply)

    async def update_season_status(
        self,
        user_id: Optional[str],
        show_id: str,
        season_id: int,
        status: WatchStatus,
    ) -> Show:
        """Change a season's watch status, cascading onto earlier seasons."""
        return await self._mutate(
            user_id,
            show_id,
            lambda show: advance_to_status(show, season_id, status, self.clock),
        )

    async def set_season_date(
        self,
        user_id: Optional[str],
        show_id: str,
        season_id: int,
        kind: DateKind,
        value: str,
    ) -> Show:
        """Manually set a season's started or watched month."""
        return await self._mutate(
            user_id,
            show_id,
            lambda show: set_manual_date(show, season_id, kind, value, self.clock),
        )

    async def delete_show(self, user_id: Optional[str], show_id: str) -> None:
        """Delete a show and all its seasons."""
        async with self._lock_for(show_id):
            await self.store.delete_show(user_id, show_id)
        await self._publish(user_id)

    async def _mutate(
        self,
        user_id: Optional[str],
        show_id: str,
        apply: Callable[[Show], Show],
    ) -> Show:
        async with self._lock_for(show_id):
            current = await self.store.get_show(user_id, show_id)
            updated = apply(current)
            return await self._save(user_id, updated)

    async def _save(self, user_id: Optional[str], show: Show) -> Show:
        try:
            stored = await self.store.put_show(user_id, show)
        except SQLAlchemyError as e:
            logger.error(f"Failed to save show {show.show_id}: {e}")
            raise PersistenceError(show.show_id, await self._resync(user_id, show.show_id)) from e

        await self._publish(user_id)
        return stored

    async def _resync(self, user_id: Optional[str], show_id: str) -> Optional[Show]:
        """Re-read a show after a failed write."""
        try:
            current = await self.store.get_show(user_id, show_id)
        except (ShowTrackerError, SQLAlchemyError) as e:
            logger.warning(f"Could not re-sync show {show_id} after failed write: {e}")
            return None
        logger.info(f"Re-synced show {show_id} from storage after failed write")
        return current

    async def _publish(self, user_id: Optional[str]) -> None:
        if self.feed is None or not user_id or not self.feed.subscriber_count(user_id):
            return
        try:
            shows = await self.store.list_shows(user_id)
        except SQLAlchemyError as e:
            logger.warning(f"Could not load snapshot for {user_id}: {e}")
            return
        self.feed.publish(user_id, shows)
