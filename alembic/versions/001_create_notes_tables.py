"""Create notes and note_tags tables

Revision ID: 001
Revises: None
Create Date: 2026-10-19 00:00:00.000000+00:00

What:  Creates `notes` and its child `note_tags` table.
How:   Portable column types (sa.Uuid, timezone-aware DateTime) so the same
       migration runs on PostgreSQL and SQLite.

Rollback: downgrade() drops both tables (destructive, all data lost).
"""

from typing import Sequence, Union
from alembic import op
import sqlalchemy as sa

# revision identifiers
revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "notes",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("title", sa.Text(), nullable=False),
        sa.Column(
            "content",
            sa.Text(),
            nullable=False,
            server_default=sa.text("''"),
        ),
        # UTC, truncated to milliseconds by the application
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )

    # Serves ORDER BY created_at DESC, id DESC and the cursor seek predicate
    op.create_index(
        "idx_notes_created_at_id",
        "notes",
        [sa.text("created_at DESC"), sa.text("id DESC")],
    )

    op.create_table(
        "note_tags",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("note_id", sa.Uuid(), nullable=False),
        sa.Column("position", sa.Integer(), nullable=False),
        sa.Column("tag", sa.Text(), nullable=False),
        sa.ForeignKeyConstraint(["note_id"], ["notes.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
    )

    # tagsAny / tagsAll lookup (tag, note_id)
    op.create_index("idx_note_tags_tag_note_id", "note_tags", ["tag", "note_id"])
    op.create_index("idx_note_tags_note_id", "note_tags", ["note_id"])


def downgrade() -> None:
    """Drop both tables. WARNING: destructive."""
    op.drop_index("idx_note_tags_note_id", table_name="note_tags")
    op.drop_index("idx_note_tags_tag_note_id", table_name="note_tags")
    op.drop_table("note_tags")
    op.drop_index("idx_notes_created_at_id", table_name="notes")
    op.drop_table("notes")
