"""
Notes API - Note Service
========================

What:  Thin orchestration over the notes repository.
How:   list/create pass through unchanged. get_by_id/update/remove turn the
       repository's None/False "not found" sentinel into NotFoundError, so
       callers never see a bare sentinel for those three operations.
Who:   Called by the route handlers; built per request in dependencies.py.
"""

import logging
from uuid import UUID

from notes_api.exceptions import NotFoundError
from notes_api.models.note import Note
from notes_api.repositories.note_repository import NotePage, NotesRepository
from notes_api.schemas.note import ListQuery, NoteCreate, UpdateNoteCommand

logger = logging.getLogger(__name__)


class NotesService:
    """Business logic layer for note operations."""

    def __init__(self, repository: NotesRepository):
        self.repository = repository

    async def list(self, query: ListQuery) -> NotePage:
        return await self.repository.list(query)

    async def create(self, command: NoteCreate) -> Note:
        return await self.repository.create(command)

    async def get_by_id(self, note_id: UUID) -> Note:
        """
        Raises:
            NotFoundError: No note with this id (→ 404)
        """
        note = await self.repository.find_by_id(note_id)
        if note is None:
            raise NotFoundError(resource="note", resource_id=str(note_id))
        return note

    async def update(self, command: UpdateNoteCommand) -> Note:
        note = await self.repository.update(command)
        if note is None:
            raise NotFoundError(resource="note", resource_id=str(command.id))
        return note

    async def remove(self, note_id: UUID) -> None:
        deleted = await self.repository.delete(note_id)
        if not deleted:
            logger.info("Delete requested for missing note %s", note_id)
            raise NotFoundError(resource="note", resource_id=str(note_id))
