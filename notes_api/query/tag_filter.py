"""
Notes API - Tag Filter Predicates
=================================

What:  Turns tagsAny / tagsAll requests into SQL predicates over `notes`.
How:   Each predicate is a correlated EXISTS lookup into `note_tags`:

    tagsAny=[a, b]  →  EXISTS (SELECT 1 FROM note_tags
                               WHERE note_id = notes.id AND tag IN (a, b))

    tagsAll=[a, b]  →  EXISTS (... AND tag = a) AND EXISTS (... AND tag = b)

Matching is exact and case-sensitive. Empty or absent filters impose no
constraint; when both are given they combine with AND.
"""

from typing import List, Optional, Sequence, Union

from sqlalchemy import and_, exists, select
from sqlalchemy.sql.elements import ColumnElement

from notes_api.models.note import Note, NoteTag

TagInput = Union[str, Sequence[str], None]


def parse_tags(value: TagInput) -> List[str]:
    """
    Normalize tag filter input.

    A single string is split on commas; segments are trimmed and empty ones
    dropped, keeping order. A sequence is taken as given.

        >>> parse_tags(" a, b,,c ")
        ['a', 'b', 'c']
    """
    if value is None:
        return []
    if isinstance(value, str):
        return [segment.strip() for segment in value.split(",") if segment.strip()]
    return list(value)


def _distinct(tags: Sequence[str]) -> List[str]:
    return list(dict.fromkeys(tags))


def _has_tag_clause(*criteria: ColumnElement[bool]) -> ColumnElement[bool]:
    return exists(
        select(NoteTag.id).where(NoteTag.note_id == Note.id, *criteria)
    )


def tags_any_predicate(tags: Sequence[str]) -> Optional[ColumnElement[bool]]:
    """True when the note carries at least one of `tags`."""
    wanted = _distinct(tags)
    if not wanted:
        return None
    return _has_tag_clause(NoteTag.tag.in_(wanted))


def tags_all_predicate(tags: Sequence[str]) -> Optional[ColumnElement[bool]]:
    """True when the note carries every one of `tags`."""
    wanted = _distinct(tags)
    if not wanted:
        return None
    return and_(*(_has_tag_clause(NoteTag.tag == tag) for tag in wanted))


def build_tag_filter(
    tags_any: Sequence[str] = (),
    tags_all: Sequence[str] = (),
) -> Optional[ColumnElement[bool]]:
    """AND of the any/all predicates; None when neither constrains."""
    clauses = [
        clause
        for clause in (tags_any_predicate(tags_any), tags_all_predicate(tags_all))
        if clause is not None
    ]
    if not clauses:
        return None
    if len(clauses) == 1:
        return clauses[0]
    return and_(*clauses)
