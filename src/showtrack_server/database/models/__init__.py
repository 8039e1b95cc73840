"""Database ORM models."""

from .show import SeasonORM, ShowORM

__all__ = [
    "ShowORM",
    "SeasonORM",
]
