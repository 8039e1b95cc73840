"""Database configuration."""

from pathlib import Path

from ..core.config import settings


def get_database_url() -> str:
    """
    Get the configured database URL.

    Falls back to a SQLite file in the data directory, creating the
    directory if needed.
    """
    if settings.database_url:
        return settings.database_url

    db_dir = Path(settings.data_dir)
    db_dir.mkdir(parents=True, exist_ok=True)
    return f"sqlite+aiosqlite:///{db_dir / 'showtrack.db'}"


def get_database_echo() -> bool:
    """Check if SQL statements should be logged."""
    return settings.database_echo
