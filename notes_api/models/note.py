"""
Notes API - Note SQLAlchemy Models
==================================

What:  ORM models for the `notes` and `note_tags` tables.
Who:   Used by the notes repository and the query composer, and by Alembic.

Table Design:
    notes
        - id: UUID primary key, generated in Python at creation
        - title / content: note text (content may be empty)
        - created_at / updated_at: UTC, millisecond precision
        - index (created_at DESC, id DESC): serves the canonical list order
          and the cursor seek predicate

    note_tags
        - one row per tag occurrence; `position` keeps insertion order,
          duplicates are separate rows
        - surrogate integer key, so replacing a note's tags never collides
          with the rows being removed in the same flush
        - index (tag, note_id): serves the tagsAny / tagsAll EXISTS lookups
"""

import uuid
from datetime import datetime
from typing import List

from sqlalchemy import DateTime, ForeignKey, Index, Integer, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from notes_api.database import Base
from notes_api.timeutils import utcnow_ms


class Note(Base):
    """
    A note with a title, free-text content and an ordered tag list.

    Lifecycle:
        1. Created with created_at == updated_at
        2. Partially updated; updated_at refreshed on every update
        3. Hard-deleted (tag rows cascade)

    Query Patterns:
        - List page: WHERE <filters> AND <cursor seek>
          ORDER BY created_at DESC, id DESC LIMIT :limit + 1
        - Single note: WHERE id = :uuid (primary key)
    """

    __tablename__ = "notes"

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        primary_key=True,
        default=uuid.uuid4,
    )

    title: Mapped[str] = mapped_column(Text, nullable=False)

    content: Mapped[str] = mapped_column(Text, nullable=False, default="")

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utcnow_ms,
    )

    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utcnow_ms,
    )

    # selectin: async sessions cannot lazy-load, so tags arrive with the notes
    tag_rows: Mapped[List["NoteTag"]] = relationship(
        back_populates="note",
        order_by="NoteTag.position",
        cascade="all, delete-orphan",
        lazy="selectin",
    )

    @property
    def tags(self) -> List[str]:
        """Tag values in insertion order, duplicates included."""
        return [row.tag for row in self.tag_rows]

    @tags.setter
    def tags(self, values: List[str]) -> None:
        self.tag_rows = [
            NoteTag(position=position, tag=tag) for position, tag in enumerate(values)
        ]

    def __repr__(self) -> str:
        return f"<Note(id={self.id}, created_at='{self.created_at}')>"


class NoteTag(Base):
    """One tag occurrence on a note."""

    __tablename__ = "note_tags"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    note_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("notes.id", ondelete="CASCADE"),
        nullable=False,
    )

    position: Mapped[int] = mapped_column(Integer, nullable=False)

    tag: Mapped[str] = mapped_column(Text, nullable=False)

    note: Mapped[Note] = relationship(back_populates="tag_rows")

    __table_args__ = (
        Index("idx_note_tags_tag_note_id", "tag", "note_id"),
        Index("idx_note_tags_note_id", "note_id"),
    )

    def __repr__(self) -> str:
        return f"<NoteTag(note_id={self.note_id}, position={self.position}, tag='{self.tag}')>"


# Serves the canonical list order and the cursor seek predicate
Index("idx_notes_created_at_id", Note.created_at.desc(), Note.id.desc())
