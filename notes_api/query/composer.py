"""
Notes API - List Query Composer
===============================

What:  Builds the single SELECT behind every list page.
How:   filters AND cursor seek, ordered canonically, limited to limit + 1.

Canonical ordering:
    created_at DESC, id DESC. A strict total order: ids are unique, so no
    two notes compare equal and a cursor names exactly one position.

Cursor seek (strictly after the cursor position):
    created_at < :c_at OR (created_at = :c_at AND id < :c_id)

Page size:
    One row beyond the limit is requested. If it comes back, more data
    exists and the page's last item becomes the next cursor; if not, the
    page is final and no cursor is returned. Clients therefore never need
    an extra round trip to discover the end.

Query plan (PostgreSQL):
    Index scan on idx_notes_created_at_id starting at the cursor position,
    with EXISTS lookups on idx_note_tags_tag_note_id for tag filters.
"""

from typing import List, Optional, Sequence, Tuple

from sqlalchemy import Select, and_, or_, select
from sqlalchemy.sql.elements import ColumnElement

from notes_api.models.note import Note
from notes_api.query.cursor import Cursor, encode_cursor
from notes_api.query.tag_filter import build_tag_filter

CANONICAL_ORDER = (Note.created_at.desc(), Note.id.desc())


def cursor_predicate(cursor: Cursor) -> ColumnElement[bool]:
    """Rows strictly after `cursor` in the canonical order."""
    return or_(
        Note.created_at < cursor.created_at,
        and_(Note.created_at == cursor.created_at, Note.id < cursor.id),
    )


def compose_list_query(
    limit: int,
    cursor: Optional[Cursor] = None,
    tags_any: Sequence[str] = (),
    tags_all: Sequence[str] = (),
) -> Select[Tuple[Note]]:
    """
    Compose the page query.

    Args:
        limit:    Page size, already validated to 1..100
        cursor:   Decoded cursor, or None for the first page
        tags_any: Match-any tag filter
        tags_all: Match-all tag filter

    Returns:
        SELECT notes ... ORDER BY created_at DESC, id DESC LIMIT limit + 1
    """
    query = select(Note)

    tag_filter = build_tag_filter(tags_any, tags_all)
    if tag_filter is not None:
        query = query.where(tag_filter)

    if cursor is not None:
        query = query.where(cursor_predicate(cursor))

    return query.order_by(*CANONICAL_ORDER).limit(limit + 1)


def split_page(rows: Sequence[Note], limit: int) -> Tuple[List[Note], Optional[str]]:
    """
    Trim the look-ahead row and derive the next cursor.

    Returns:
        (items, next_cursor); next_cursor is None when `rows` held no
        look-ahead row, i.e. the data is exhausted.
    """
    items = list(rows[:limit])
    if len(rows) <= limit or not items:
        return items, None
    last = items[-1]
    return items, encode_cursor(last.created_at, last.id)
