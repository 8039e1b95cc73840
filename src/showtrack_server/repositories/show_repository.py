"""Show repository for database operations."""

import json
from typing import Optional

from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from ..database.models.show import SeasonORM, ShowORM
from ..models.show import Season, Show, ShowMetadata, WatchStatus
from .base import BaseRepository


class ShowRepository(BaseRepository[ShowORM]):
    """Repository for show database operations."""

    def __init__(self, session: AsyncSession):
        """Initialize show repository."""
        super().__init__(ShowORM, session)

    @staticmethod
    def _dump_metadata(metadata: Optional[ShowMetadata]) -> Optional[str]:
        return json.dumps(metadata.model_dump()) if metadata else None

    async def create_from_pydantic(self, show: Show) -> ShowORM:
        """
        Create show from Pydantic model.

        Args:
            show: Pydantic Show model

        Returns:
            ORM show instance
        """
        show_orm = ShowORM(
            show_id=show.show_id,
            user_id=show.user_id,
            title=show.title,
            external_id=show.external_id,
            metadata_json=self._dump_metadata(show.metadata),
            user_rating=show.user_rating,
            user_notes=show.user_notes,
            is_favorite=show.is_favorite,
            added_date=show.added_date,
            last_updated=show.last_updated,
            seasons=[
                SeasonORM(
                    season_number=season.id,
                    status=season.status.value,
                    started_date=season.started_date,
                    watched_date=season.watched_date,
                )
                for season in show.seasons
            ],
        )
        return await self.create(show_orm)

    def to_pydantic(self, show_orm: ShowORM) -> Show:
        """
        Convert ORM model to Pydantic model.

        Args:
            show_orm: ORM show instance with seasons loaded

        Returns:
            Pydantic Show model
        """
        seasons = [
            Season(
                id=season.season_number,
                status=WatchStatus(season.status),
                started_date=season.started_date,
                watched_date=season.watched_date,
            )
            for season in sorted(show_orm.seasons, key=lambda s: s.season_number)
        ]

        metadata = None
        if show_orm.metadata_json:
            metadata = ShowMetadata(**json.loads(show_orm.metadata_json))

        return Show(
            show_id=show_orm.show_id,
            user_id=show_orm.user_id,
            title=show_orm.title,
            external_id=show_orm.external_id,
            seasons=seasons,
            metadata=metadata,
            user_rating=show_orm.user_rating,
            user_notes=show_orm.user_notes,
            is_favorite=show_orm.is_favorite,
            added_date=show_orm.added_date,
            last_updated=show_orm.last_updated,
        )

    async def get_with_seasons(self, show_id: str) -> Optional[ShowORM]:
        """Get show with seasons eagerly loaded."""
        return await self.get(show_id, selectinload(ShowORM.seasons))

    async def get_for_user(self, user_id: str, show_id: str) -> Optional[ShowORM]:
        """
        Get a user's show.

        Shows owned by someone else are reported as missing.
        """
        show_orm = await self.get_with_seasons(show_id)
        if show_orm is None or show_orm.user_id != user_id:
            return None
        return show_orm

    async def list_for_user(self, user_id: str) -> list[Show]:
        """
        List a user's shows, most recently added first.

        Args:
            user_id: Owning user ID

        Returns:
            List of shows
        """
        show_orms = await self.find(
            ShowORM.user_id == user_id,
            order_by=ShowORM.added_date.desc(),
            options=(selectinload(ShowORM.seasons),),
        )
        return [self.to_pydantic(show_orm) for show_orm in show_orms]

    async def upsert(self, show: Show) -> Optional[Show]:
        """
        Store a full show record, creating it if needed.

        Seasons are matched by number and updated in place. The added date
        of an existing show is kept.

        Args:
            show: Complete show record

        Returns:
            Stored show, or None if the ID belongs to another user's show
        """
        show_orm = await self.get_with_seasons(show.show_id)
        if show_orm is None:
            show_orm = await self.create_from_pydantic(show)
            return self.to_pydantic(show_orm)

        if show_orm.user_id != show.user_id:
            return None

        show_orm.title = show.title
        show_orm.external_id = show.external_id
        show_orm.metadata_json = self._dump_metadata(show.metadata)
        show_orm.user_rating = show.user_rating
        show_orm.user_notes = show.user_notes
        show_orm.is_favorite = show.is_favorite
        show_orm.last_updated = show.last_updated

        existing = {season.season_number: season for season in show_orm.seasons}
        wanted = {season.id for season in show.seasons}
        for season in show.seasons:
            season_orm = existing.get(season.id)
            if season_orm is None:
                season_orm = SeasonORM(season_number=season.id)
                show_orm.seasons.append(season_orm)
            season_orm.status = season.status.value
            season_orm.started_date = season.started_date
            season_orm.watched_date = season.watched_date
        for number, season_orm in existing.items():
            if number not in wanted:
                show_orm.seasons.remove(season_orm)

        await self.update(show_orm)
        return self.to_pydantic(show_orm)

    async def delete_for_user(self, user_id: str, show_id: str) -> bool:
        """
        Delete a user's show and its seasons.

        Returns:
            True if deleted, False if not found
        """
        show_orm = await self.get_for_user(user_id, show_id)
        if show_orm is None:
            return False
        await self.delete(show_orm)
        return True
