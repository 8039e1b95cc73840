"""TV show models for tracking per-season watch progress."""

import re
from datetime import datetime
from enum import Enum
from typing import Optional
from uuid import uuid4

from pydantic import BaseModel, Field

YEAR_MONTH_PATTERN = re.compile(r"(\d{4})-(0[1-9]|1[0-2])")


class WatchStatus(str, Enum):
    """Watch status of a season."""

    NOT_WATCHED = "not-watched"
    WATCHING = "watching"
    WATCHED = "watched"


class DateKind(str, Enum):
    """Which season date a manual edit targets."""

    STARTED = "started"
    WATCHED = "watched"


def format_year_month(value: datetime) -> str:
    """Format a datetime as a YYYY-MM year-month value."""
    return f"{value.year:04d}-{value.month:02d}"


def parse_year_month(value: str) -> tuple[int, int]:
    """
    Parse a YYYY-MM year-month value.

    Args:
        value: Year-month string

    Returns:
        (year, month) tuple

    Raises:
        ValueError: If the value is not a zero-padded YYYY-MM with month 01-12
    """
    match = YEAR_MONTH_PATTERN.fullmatch(value) if isinstance(value, str) else None
    if not match:
        raise ValueError(f"Invalid year-month value: {value!r}")
    return int(match.group(1)), int(match.group(2))


def is_year_month(value: str) -> bool:
    """Check whether a value is a valid YYYY-MM year-month."""
    try:
        parse_year_month(value)
    except ValueError:
        return False
    return True


class Season(BaseModel):
    """One trackable season of a show."""

    id: int = Field(ge=1)  # Sequence number, dense 1..N
    status: WatchStatus = WatchStatus.NOT_WATCHED
    started_date: Optional[str] = None  # YYYY-MM, month watching began
    watched_date: Optional[str] = None  # YYYY-MM, month season was finished


class ShowMetadata(BaseModel):
    """Descriptive metadata from the external catalog."""

    id: str  # External catalog ID
    title: str
    original_title: Optional[str] = None
    overview: Optional[str] = None
    poster_path: Optional[str] = None
    backdrop_path: Optional[str] = None
    first_air_date: Optional[str] = None
    last_air_date: Optional[str] = None
    status: Optional[str] = None  # Returning Series, Ended, Canceled, In Production
    genres: list[str] = Field(default_factory=list)
    network: Optional[str] = None
    rating: Optional[float] = None
    vote_count: Optional[int] = None
    total_seasons: Optional[int] = None
    total_episodes: Optional[int] = None
    runtime: Optional[int] = None  # Episode runtime in minutes
    language: Optional[str] = None
    country: Optional[str] = None


class ShowSearchResult(BaseModel):
    """A catalog search hit."""

    id: str
    title: str
    overview: Optional[str] = None
    poster_path: Optional[str] = None
    poster_url: Optional[str] = None  # Full image URL for poster_path
    first_air_date: Optional[str] = None
    total_seasons: Optional[int] = None
    rating: Optional[float] = None


class ShowProgress(BaseModel):
    """Season counts by status."""

    watched: int
    watching: int
    total: int


class Show(BaseModel):
    """A user-owned tracked series."""

    show_id: str = Field(default_factory=lambda: str(uuid4()))
    user_id: str
    title: str
    external_id: Optional[str] = None
    seasons: list[Season] = Field(default_factory=list)
    metadata: Optional[ShowMetadata] = None

    # User extras
    user_rating: Optional[float] = Field(default=None, ge=0, le=10)
    user_notes: Optional[str] = None
    is_favorite: bool = False

    # Timestamps
    added_date: datetime = Field(default_factory=datetime.utcnow)
    last_updated: datetime = Field(default_factory=datetime.utcnow)

    def get_season(self, season_number: int) -> Optional[Season]:
        """Get a season by sequence number."""
        for season in self.seasons:
            if season.id == season_number:
                return season
        return None

    def progress(self) -> ShowProgress:
        """Count watched and watching seasons."""
        return ShowProgress(
            watched=sum(1 for s in self.seasons if s.status == WatchStatus.WATCHED),
            watching=sum(1 for s in self.seasons if s.status == WatchStatus.WATCHING),
            total=len(self.seasons),
        )


class ShowWithProgress(Show):
    """Show as returned by the API, with progress counts attached."""

    progress_summary: ShowProgress

    @classmethod
    def from_show(cls, show: Show) -> "ShowWithProgress":
        return cls(**show.model_dump(), progress_summary=show.progress())


def build_seasons(count: int) -> list[Season]:
    """Create the initial batch of not-watched seasons numbered 1..count."""
    return [Season(id=number) for number in range(1, count + 1)]


class ShowCreate(BaseModel):
    """Request to add a show manually."""

    title: str = Field(min_length=1)
    season_count: int = Field(ge=1)


class ShowFromCatalog(BaseModel):
    """Request to add a show picked from catalog search."""

    external_id: str
    title: str = Field(min_length=1)
    total_seasons: Optional[int] = Field(default=None, ge=1)  # Hint from search result


class ShowUpdate(BaseModel):
    """Request to edit a show's user-owned fields."""

    title: Optional[str] = Field(default=None, min_length=1)
    user_rating: Optional[float] = Field(default=None, ge=0, le=10)
    user_notes: Optional[str] = None
    is_favorite: Optional[bool] = None


class SeasonStatusUpdate(BaseModel):
    """Request to change a season's watch status."""

    status: WatchStatus


class SeasonDateUpdate(BaseModel):
    """Request to manually set one of a season's dates."""

    kind: DateKind
    value: str
