"""Pydantic models for API requests/responses and domain objects."""

from .show import (
    DateKind,
    Season,
    SeasonDateUpdate,
    SeasonStatusUpdate,
    Show,
    ShowCreate,
    ShowFromCatalog,
    ShowMetadata,
    ShowProgress,
    ShowSearchResult,
    ShowUpdate,
    ShowWithProgress,
    WatchStatus,
)

__all__ = [
    "DateKind",
    "Season",
    "SeasonDateUpdate",
    "SeasonStatusUpdate",
    "Show",
    "ShowCreate",
    "ShowFromCatalog",
    "ShowMetadata",
    "ShowProgress",
    "ShowSearchResult",
    "ShowUpdate",
    "ShowWithProgress",
    "WatchStatus",
]
