"""Show ORM models."""

from datetime import datetime
from typing import Optional

from sqlalchemy import Boolean, Float, ForeignKey, Integer, String, Text, UniqueConstraint, func
from sqlalchemy.orm import Mapped, mapped_column, relationship

from ..base import Base


class ShowORM(Base):
    """ORM model for shows table."""

    __tablename__ = "shows"

    # Primary key
    show_id: Mapped[str] = mapped_column(String(36), primary_key=True)

    # Ownership
    user_id: Mapped[str] = mapped_column(String(128), nullable=False, index=True)

    # Basic info
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    external_id: Mapped[Optional[str]] = mapped_column(String(64))

    # Catalog metadata (stored as JSON object string)
    metadata_json: Mapped[Optional[str]] = mapped_column(Text)

    # User extras
    user_rating: Mapped[Optional[float]] = mapped_column(Float)
    user_notes: Mapped[Optional[str]] = mapped_column(Text)
    is_favorite: Mapped[bool] = mapped_column(Boolean, default=False)

    # Timestamps
    added_date: Mapped[datetime] = mapped_column(default=func.now(), index=True)
    last_updated: Mapped[datetime] = mapped_column(default=func.now())

    # Relationship to seasons
    seasons: Mapped[list["SeasonORM"]] = relationship(
        "SeasonORM",
        back_populates="show",
        cascade="all, delete-orphan",
        order_by="SeasonORM.season_number",
    )


class SeasonORM(Base):
    """ORM model for seasons table."""

    __tablename__ = "seasons"
    __table_args__ = (UniqueConstraint("show_id", "season_number"),)

    # Primary key
    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    # Foreign key
    show_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("shows.show_id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    # Tracking
    season_number: Mapped[int] = mapped_column(Integer, nullable=False)
    status: Mapped[str] = mapped_column(String(20), nullable=False, default="not-watched")
    started_date: Mapped[Optional[str]] = mapped_column(String(7))  # YYYY-MM
    watched_date: Mapped[Optional[str]] = mapped_column(String(7))  # YYYY-MM

    # Relationship to show
    show: Mapped["ShowORM"] = relationship("ShowORM", back_populates="seasons")
