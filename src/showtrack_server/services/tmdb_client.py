"""TMDB API client for catalog search and show metadata."""

import logging
from typing import Any, Optional

import httpx

from ..models.show import ShowMetadata, ShowSearchResult

logger = logging.getLogger(__name__)

IMAGE_SIZES = ("w92", "w154", "w185", "w342", "w500", "w780", "original")


def poster_url(path: Optional[str], size: str = "w342") -> Optional[str]:
    """
    Build a full TMDB image URL.

    Args:
        path: Image path as returned by TMDB (e.g. "/abc.jpg")
        size: One of IMAGE_SIZES

    Returns:
        Image URL, or None when there is no path
    """
    if not path:
        return None
    if size not in IMAGE_SIZES:
        raise ValueError(f"Unknown image size: {size}")
    return f"{TMDBClient.IMAGE_BASE_URL}/{size}{path}"


class TMDBClient:
    """Client for the TMDB v3 API."""

    BASE_URL = "https://api.themoviedb.org/3"
    IMAGE_BASE_URL = "https://image.tmdb.org/t/p"

    def __init__(
        self,
        api_key: str,
        language: str = "en-US",
        timeout: float = 30.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """
        Initialize TMDB client.

        Args:
            api_key: TMDB API key
            language: Response language
            timeout: Request timeout in seconds
            transport: Optional httpx transport (used by tests)
        """
        self.api_key = api_key
        self.language = language
        self._client = httpx.AsyncClient(timeout=timeout, transport=transport)

    async def close(self) -> None:
        """Close the HTTP client."""
        await self._client.aclose()

    async def _request(self, endpoint: str, **params: Any) -> dict:
        """
        Make a GET request to the TMDB API.

        Raises:
            Exception: If the request fails
        """
        params.update({"api_key": self.api_key, "language": self.language})
        response = await self._client.get(f"{self.BASE_URL}/{endpoint}", params=params)

        if response.status_code != 200:
            logger.error(f"TMDB request failed: {endpoint} -> {response.status_code}")
            raise Exception(f"TMDB API error: {response.status_code}")

        return response.json()

    async def search_shows(self, query: str) -> list[ShowSearchResult]:
        """
        Search for TV shows by name.

        Args:
            query: Search text

        Returns:
            Matching shows, empty on error or blank query
        """
        if not query.strip():
            return []

        logger.info(f"Searching TMDB for: {query}")

        try:
            data = await self._request("search/tv", query=query, page=1)
        except Exception as e:
            logger.error(f"Error searching TMDB shows for '{query}': {e}")
            return []

        results = [
            ShowSearchResult(
                id=str(item["id"]),
                title=item.get("name") or "",
                overview=item.get("overview"),
                poster_path=item.get("poster_path"),
                poster_url=poster_url(item.get("poster_path")),
                first_air_date=item.get("first_air_date") or None,
                total_seasons=item.get("number_of_seasons"),
                rating=item.get("vote_average"),
            )
            for item in data.get("results") or []
            if item.get("id") is not None
        ]
        logger.info(f"Found {len(results)} shows for '{query}'")
        return results

    async def get_show_details(self, external_id: str) -> Optional[ShowMetadata]:
        """
        Get full metadata for a show.

        Args:
            external_id: TMDB show ID

        Returns:
            Show metadata, or None if not found or on error
        """
        logger.info(f"Fetching TMDB details for show {external_id}")

        try:
            show = await self._request(f"tv/{external_id}")
        except Exception as e:
            logger.error(f"Error fetching TMDB show details for {external_id}: {e}")
            return None

        return self._parse_details(show)

    def _parse_details(self, show: dict) -> ShowMetadata:
        """Convert a TMDB tv details payload to ShowMetadata."""
        networks = show.get("networks") or []
        run_times = show.get("episode_run_time") or []
        countries = show.get("origin_country") or []

        return ShowMetadata(
            id=str(show["id"]),
            title=show.get("name") or "",
            original_title=show.get("original_name"),
            overview=show.get("overview"),
            poster_path=show.get("poster_path"),
            backdrop_path=show.get("backdrop_path"),
            first_air_date=show.get("first_air_date") or None,
            last_air_date=show.get("last_air_date") or None,
            status=show.get("status"),
            genres=[g["name"] for g in show.get("genres") or [] if g.get("name")],
            network=networks[0].get("name") if networks else None,
            rating=show.get("vote_average"),
            vote_count=show.get("vote_count"),
            total_seasons=show.get("number_of_seasons"),
            total_episodes=show.get("number_of_episodes"),
            runtime=run_times[0] if run_times else None,
            language=show.get("original_language"),
            country=countries[0] if countries else None,
        )
