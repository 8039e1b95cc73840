"""FastAPI application entry point."""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from showtrack_server import __version__
from showtrack_server.api import catalog_router, shows_router
from showtrack_server.api.deps import init_services
from showtrack_server.core.config import settings
from showtrack_server.database import init_db
from showtrack_server.services.show_feed import ShowFeed
from showtrack_server.services.show_service import ShowService
from showtrack_server.services.show_store import ShowStore
from showtrack_server.services.tmdb_client import TMDBClient

# Configure logging
logging.basicConfig(
    level=logging.DEBUG if settings.debug else logging.INFO,
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

# Service instances
show_store = ShowStore()
show_feed = ShowFeed(queue_size=settings.feed_queue_size)

# Initialize TMDB client if API key is configured
tmdb_client = None
if settings.tmdb_api_key:
    logger.info("TMDB API key configured, initializing catalog client")
    tmdb_client = TMDBClient(
        settings.tmdb_api_key,
        language=settings.tmdb_language,
        timeout=settings.catalog_timeout_seconds,
    )
else:
    logger.warning("TMDB API key not configured, catalog search will be disabled")

show_service = ShowService(store=show_store, feed=show_feed, catalog=tmdb_client)

if not settings.user_tokens:
    logger.warning("No user tokens configured, all show requests will be rejected")


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler."""
    # Startup
    logger.info(f"Starting Show Tracker Server v{__version__}")

    # Initialize database
    logger.info("Initializing database...")
    await init_db()
    logger.info("Database initialized")

    init_services(show_service, show_feed, tmdb_client)

    logger.info(f"Server ready on {settings.host}:{settings.port}")

    yield

    # Shutdown
    logger.info("Shutting down...")
    for user_id in show_feed.user_ids():
        show_feed.close_user(user_id)
    if tmdb_client:
        await tmdb_client.close()


app = FastAPI(
    title="Show Tracker Server",
    description="Personal TV show watch tracker",
    version=__version__,
    lifespan=lifespan,
)

# CORS middleware for the web client
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include routers
app.include_router(shows_router)
app.include_router(catalog_router)


@app.get("/")
async def root() -> dict:
    """Root endpoint with server info."""
    return {
        "name": "Show Tracker Server",
        "version": __version__,
        "status": "running",
    }


@app.get("/health")
async def health() -> dict:
    """Health check endpoint."""
    return {
        "status": "healthy",
        "version": __version__,
        "catalog": tmdb_client is not None,
        "subscribers": show_feed.subscriber_count(),
    }


def run() -> None:
    """Run the server with uvicorn."""
    import uvicorn

    uvicorn.run(
        "showtrack_server.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug,
    )


if __name__ == "__main__":
    run()
