"""Database-backed show storage keyed by user identity."""

import logging
from typing import Optional

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from ..core.exceptions import ShowNotFound, Unauthenticated
from ..database.session import SessionLocal
from ..models.show import Show
from ..repositories.show_repository import ShowRepository

logger = logging.getLogger(__name__)


def _require_user(user_id: Optional[str]) -> str:
    if not user_id:
        raise Unauthenticated()
    return user_id


class ShowStore:
    """Reads and writes whole show records for one user at a time."""

    def __init__(self, session_factory: async_sessionmaker[AsyncSession] = SessionLocal):
        """
        Initialize show store.

        Args:
            session_factory: Factory producing database sessions
        """
        self._session_factory = session_factory

    async def list_shows(self, user_id: Optional[str]) -> list[Show]:
        """Get a user's shows, most recently added first."""
        user_id = _require_user(user_id)
        async with self._session_factory() as session:
            return await ShowRepository(session).list_for_user(user_id)

    async def get_show(self, user_id: Optional[str], show_id: str) -> Show:
        """
        Get one of a user's shows.

        Raises:
            Unauthenticated: If no user is given
            ShowNotFound: If the user has no such show
        """
        user_id = _require_user(user_id)
        async with self._session_factory() as session:
            repo = ShowRepository(session)
            show_orm = await repo.get_for_user(user_id, show_id)
            if show_orm is None:
                raise ShowNotFound(show_id)
            return repo.to_pydantic(show_orm)

    async def put_show(self, user_id: Optional[str], show: Show) -> Show:
        """
        Create or fully replace a show.

        The stored record is always owned by user_id regardless of the
        user_id carried on the show.

        Raises:
            Unauthenticated: If no user is given
            ShowNotFound: If the show ID belongs to another user
        """
        user_id = _require_user(user_id)
        if show.user_id != user_id:
            show = show.model_copy(update={"user_id": user_id})

        async with self._session_factory() as session:
            stored = await ShowRepository(session).upsert(show)
            if stored is None:
                raise ShowNotFound(show.show_id)
            await session.commit()

        logger.info(f"Saved show {show.show_id} ({show.title}) for user {user_id}")
        return stored

    async def delete_show(self, user_id: Optional[str], show_id: str) -> None:
        """
        Delete one of a user's shows.

        Raises:
            Unauthenticated: If no user is given
            ShowNotFound: If the user has no such show
        """
        user_id = _require_user(user_id)
        async with self._session_factory() as session:
            if not await ShowRepository(session).delete_for_user(user_id, show_id):
                raise ShowNotFound(show_id)
            await session.commit()

        logger.info(f"Deleted show {show_id} for user {user_id}")
