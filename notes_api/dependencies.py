"""Request-scoped dependency providers for the notes routes."""

from typing import List, Optional

from fastapi import Depends, Query
from pydantic import ValidationError as PydanticValidationError
from sqlalchemy.ext.asyncio import AsyncSession

from notes_api.database import get_db_session
from notes_api.exceptions import ValidationError
from notes_api.repositories.note_repository import NotesRepository, SqlAlchemyNotesRepository
from notes_api.schemas.note import DEFAULT_PAGE_LIMIT, MAX_PAGE_LIMIT, ListQuery
from notes_api.services.note_service import NotesService


def get_note_repository(db: AsyncSession = Depends(get_db_session)) -> NotesRepository:
    """Get a request-scoped repository bound to the request's session."""
    return SqlAlchemyNotesRepository(db)


def get_note_service(repo: NotesRepository = Depends(get_note_repository)) -> NotesService:
    """Get a request-scoped note service instance."""
    return NotesService(repo)


def _single_or_list(values: Optional[List[str]]):
    # One occurrence of the parameter is a comma-separated string;
    # repeated occurrences form a list.
    if not values:
        return None
    if len(values) == 1:
        return values[0]
    return values


def get_list_query(
    limit: int = Query(
        default=DEFAULT_PAGE_LIMIT,
        ge=1,
        le=MAX_PAGE_LIMIT,
        description="Items per page (1-100). Out-of-range values are rejected.",
    ),
    cursor: Optional[str] = Query(
        default=None,
        description="Opaque cursor from a previous page's nextCursor. Omit for the first page.",
    ),
    tags_any: Optional[List[str]] = Query(
        default=None,
        alias="tagsAny",
        description="Match notes with at least one of these tags (comma-separated or repeated).",
    ),
    tags_all: Optional[List[str]] = Query(
        default=None,
        alias="tagsAll",
        description="Match notes with all of these tags (comma-separated or repeated).",
    ),
) -> ListQuery:
    """Validate list parameters into a ListQuery or raise ValidationError."""
    try:
        return ListQuery(
            limit=limit,
            cursor=cursor,
            tags_any=_single_or_list(tags_any),
            tags_all=_single_or_list(tags_all),
        )
    except PydanticValidationError as e:
        details = [
            {"loc": list(err["loc"]), "msg": err["msg"], "type": err["type"]}
            for err in e.errors()
        ]
        raise ValidationError("Invalid list query", context={"errors": details}) from e
