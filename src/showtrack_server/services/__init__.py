"""Server services."""

from .show_feed import ShowFeed
from .show_service import ShowService
from .show_store import ShowStore
from .tmdb_client import TMDBClient

__all__ = ["ShowFeed", "ShowService", "ShowStore", "TMDBClient"]
