"""Server configuration."""

from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Server configuration loaded from environment."""

    model_config = SettingsConfigDict(
        env_prefix="SHOWTRACK_",
        env_file=".env",
    )

    # Server settings
    host: str = "0.0.0.0"
    port: int = 8000
    debug: bool = False

    # Identity settings: bearer token -> user id
    user_tokens: dict[str, str] = Field(default_factory=dict)

    # TMDB settings (catalog lookup)
    tmdb_api_key: Optional[str] = None  # Catalog search disabled when unset
    tmdb_language: str = "en-US"
    catalog_timeout_seconds: float = 30.0

    # Database settings
    data_dir: str = "/data/database"
    database_url: Optional[str] = None  # Default: sqlite+aiosqlite:///{data_dir}/showtrack.db
    database_echo: bool = False  # Enable SQL query logging for debugging

    # Live sync settings
    feed_queue_size: int = 16  # Snapshots buffered per subscriber before dropping oldest


settings = Settings()
