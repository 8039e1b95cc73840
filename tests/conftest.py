"""Shared test fixtures."""

import json
import os
import tempfile
from contextlib import asynccontextmanager
from datetime import datetime

# Must be set before showtrack_server modules create the engine and settings
_test_dir = tempfile.mkdtemp(prefix="showtrack-tests-")
os.environ["SHOWTRACK_DATABASE_URL"] = f"sqlite+aiosqlite:///{_test_dir}/api.db"
os.environ["SHOWTRACK_USER_TOKENS"] = json.dumps(
    {"alice-token": "alice", "bob-token": "bob"}
)
os.environ.pop("SHOWTRACK_TMDB_API_KEY", None)

import pytest  # noqa: E402
from sqlalchemy.ext.asyncio import async_sessionmaker, create_async_engine  # noqa: E402
from sqlalchemy.pool import NullPool  # noqa: E402

from showtrack_server.database.base import Base  # noqa: E402
from showtrack_server.database import models  # noqa: E402,F401
from showtrack_server.models.show import Show, build_seasons  # noqa: E402
from showtrack_server.services.show_store import ShowStore  # noqa: E402


class FixedClock:
    """Clock that returns a settable time."""

    def __init__(self, year: int, month: int, day: int = 15):
        self.current = datetime(year, month, day, 12, 0, 0)

    def set(self, year: int, month: int, day: int = 15) -> None:
        self.current = datetime(year, month, day, 12, 0, 0)

    def now(self) -> datetime:
        return self.current


@pytest.fixture
def clock():
    """Clock fixed at March 2024."""
    return FixedClock(2024, 3)


@pytest.fixture
def make_show():
    """Factory for shows with all seasons not watched."""

    def _make(season_count: int = 3, user_id: str = "alice", title: str = "Test Show") -> Show:
        added = datetime(2024, 1, 1)
        return Show(
            user_id=user_id,
            title=title,
            seasons=build_seasons(season_count),
            added_date=added,
            last_updated=added,
        )

    return _make


@pytest.fixture
def open_store(tmp_path):
    """Async context manager yielding a ShowStore on a fresh SQLite file."""
    url = f"sqlite+aiosqlite:///{tmp_path / 'store.db'}"

    @asynccontextmanager
    async def _open():
        engine = create_async_engine(url, poolclass=NullPool)
        async with engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
        try:
            yield ShowStore(async_sessionmaker(engine, expire_on_commit=False))
        finally:
            await engine.dispose()

    return _open


@pytest.fixture
def clock_at():
    """Factory for clocks fixed at a given year and month."""
    return FixedClock
