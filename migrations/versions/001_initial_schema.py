"""Initial database schema.

Revision ID: 001
Revises:
Create Date: 2026-10-19

Creates the shows and seasons tables.
"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "shows",
        sa.Column("show_id", sa.String(36), primary_key=True),
        sa.Column("user_id", sa.String(128), nullable=False, index=True),
        sa.Column("title", sa.String(255), nullable=False),
        sa.Column("external_id", sa.String(64), nullable=True),
        sa.Column("metadata_json", sa.Text, nullable=True),
        sa.Column("user_rating", sa.Float, nullable=True),
        sa.Column("user_notes", sa.Text, nullable=True),
        sa.Column("is_favorite", sa.Boolean, default=False),
        sa.Column("added_date", sa.DateTime, server_default=sa.func.now(), index=True),
        sa.Column("last_updated", sa.DateTime, server_default=sa.func.now()),
    )

    op.create_table(
        "seasons",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column(
            "show_id",
            sa.String(36),
            sa.ForeignKey("shows.show_id", ondelete="CASCADE"),
            nullable=False,
            index=True,
        ),
        sa.Column("season_number", sa.Integer, nullable=False),
        sa.Column("status", sa.String(20), nullable=False, server_default="not-watched"),
        sa.Column("started_date", sa.String(7), nullable=True),
        sa.Column("watched_date", sa.String(7), nullable=True),
        sa.UniqueConstraint("show_id", "season_number"),
    )


def downgrade() -> None:
    op.drop_table("seasons")
    op.drop_table("shows")
