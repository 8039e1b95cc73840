"""Catalog search API endpoints."""

from fastapi import APIRouter, HTTPException

from showtrack_server.api.deps import TMDBClientDep
from showtrack_server.models.show import ShowMetadata, ShowSearchResult

router = APIRouter(prefix="/api/catalog", tags=["catalog"])


@router.get("/search", response_model=list[ShowSearchResult])
async def search_catalog(
    q: str,
    tmdb_client: TMDBClientDep,
) -> list[ShowSearchResult]:
    """Search the catalog for shows by name."""
    return await tmdb_client.search_shows(q)


@router.get("/shows/{external_id}", response_model=ShowMetadata)
async def get_catalog_show(
    external_id: str,
    tmdb_client: TMDBClientDep,
) -> ShowMetadata:
    """Get catalog metadata for a show."""
    metadata = await tmdb_client.get_show_details(external_id)
    if not metadata:
        raise HTTPException(status_code=404, detail="Show not found in catalog")
    return metadata
