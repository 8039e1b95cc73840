"""API routers."""

from .catalog import router as catalog_router
from .shows import router as shows_router

__all__ = ["catalog_router", "shows_router"]
