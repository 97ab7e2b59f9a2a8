"""
Notes API - Notes Repository
============================

What:  Persistence for notes: paginated listing, create, find, update, delete.
How:   Async SQLAlchemy against the session of the current request. Listing
       runs the statement built by the query composer.
Who:   Constructed per request by `dependencies.get_note_repository`; used
       by NotesService and the seed tool.

Not-found contract:
    find_by_id / update return None and delete returns False for unknown
    ids. Raising is reserved for store failures:
        IntegrityError           → ConflictError
        any other SQLAlchemyError → DatabaseError (details logged, not returned)
"""

import logging
import uuid
from datetime import datetime
from typing import Callable, List, NamedTuple, Optional, Protocol

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from notes_api.exceptions import ConflictError, DatabaseError
from notes_api.models.note import Note
from notes_api.query.composer import compose_list_query, split_page
from notes_api.query.cursor import decode_cursor
from notes_api.schemas.note import ListQuery, NoteCreate, UpdateNoteCommand
from notes_api.timeutils import ensure_utc, utcnow_ms

logger = logging.getLogger(__name__)

Clock = Callable[[], datetime]


class NotePage(NamedTuple):
    items: List[Note]
    next_cursor: Optional[str]


class NotesRepository(Protocol):
    """Storage contract consumed by NotesService."""

    async def list(self, query: ListQuery) -> NotePage: ...

    async def create(self, command: NoteCreate) -> Note: ...

    async def find_by_id(self, note_id: uuid.UUID) -> Optional[Note]: ...

    async def update(self, command: UpdateNoteCommand) -> Optional[Note]: ...

    async def delete(self, note_id: uuid.UUID) -> bool: ...


class SqlAlchemyNotesRepository:
    """
    NotesRepository backed by an AsyncSession.

    The session's transaction is owned by the caller (the request dependency
    commits or rolls back); this class only flushes so that constraint
    violations surface inside the call that caused them.

    Args:
        session: Request-scoped async session
        clock:   Returns "now" for created_at/updated_at. Must return UTC at
                 millisecond precision; cursors carry no finer precision.
    """

    def __init__(self, session: AsyncSession, clock: Clock = utcnow_ms):
        self.session = session
        self.clock = clock

    async def list(self, query: ListQuery) -> NotePage:
        """
        Fetch one page in canonical order.

        An undecodable cursor is treated as absent (first page).
        """
        cursor = decode_cursor(query.cursor)
        if query.cursor and cursor is None:
            logger.info("Ignoring undecodable cursor; starting from first page")

        statement = compose_list_query(
            limit=query.limit,
            cursor=cursor,
            tags_any=query.tags_any,
            tags_all=query.tags_all,
        )
        try:
            result = await self.session.execute(statement)
            rows = list(result.scalars().all())
        except SQLAlchemyError as e:
            raise self._database_error("list", e) from e

        items, next_cursor = split_page(rows, query.limit)
        return NotePage(items=items, next_cursor=next_cursor)

    async def create(self, command: NoteCreate) -> Note:
        now = self.clock()
        note = Note(
            id=uuid.uuid4(),
            title=command.title,
            content=command.content,
            created_at=now,
            updated_at=now,
        )
        note.tags = list(command.tags)
        self.session.add(note)
        await self._flush("create")
        logger.info("Note created: %s", note.id)
        return note

    async def find_by_id(self, note_id: uuid.UUID) -> Optional[Note]:
        try:
            return await self.session.get(Note, note_id)
        except SQLAlchemyError as e:
            raise self._database_error("find_by_id", e) from e

    async def update(self, command: UpdateNoteCommand) -> Optional[Note]:
        """
        Partial merge: only fields present in `command.data` are replaced.

        updated_at is always refreshed and never falls below created_at.
        """
        note = await self.find_by_id(command.id)
        if note is None:
            return None

        changes = command.data.changes()
        if "title" in changes:
            note.title = changes["title"]
        if "content" in changes:
            note.content = changes["content"]
        if "tags" in changes:
            note.tags = list(changes["tags"])
        note.updated_at = max(self.clock(), ensure_utc(note.created_at))

        await self._flush("update")
        logger.info("Note updated: %s (fields=%s)", note.id, sorted(changes))
        return note

    async def delete(self, note_id: uuid.UUID) -> bool:
        note = await self.find_by_id(note_id)
        if note is None:
            return False
        try:
            await self.session.delete(note)
        except SQLAlchemyError as e:
            raise self._database_error("delete", e) from e
        await self._flush("delete")
        logger.info("Note deleted: %s", note_id)
        return True

    # ── Internals ─────────────────────────────────────────────────────────

    async def _flush(self, operation: str) -> None:
        try:
            await self.session.flush()
        except IntegrityError as e:
            logger.warning("Integrity violation during %s: %s", operation, type(e).__name__)
            raise ConflictError(context={"operation": operation}) from e
        except SQLAlchemyError as e:
            raise self._database_error(operation, e) from e

    @staticmethod
    def _database_error(operation: str, error: Exception) -> DatabaseError:
        logger.error("Database error during %s: %s", operation, str(error), exc_info=True)
        return DatabaseError(
            message="Could not complete the request. Please try again.",
            context={"operation": operation, "error_type": type(error).__name__},
        )
