"""
Notes API - Notes Route Handlers
================================

What:  CRUD + list endpoints for notes, mounted on two surfaces.
How:   `build_notes_router()` produces the same five endpoints with or
       without scope guards:

    /v1/notes  (canonical)  POST needs notes:write, PATCH needs notes:write,
                            DELETE needs notes:delete
    /notes     (legacy)     no authentication; every response carries
                            Deprecation / Sunset / Link headers

Routes only handle HTTP concerns: validated inputs in, NotesService call,
DTO out. Errors propagate to the handlers registered in main.py.
"""

import logging
from typing import Any, List
from uuid import UUID

from fastapi import APIRouter, Body, Depends, Request, Response, status

from notes_api.auth import SCOPE_NOTES_DELETE, SCOPE_NOTES_WRITE, require_scopes
from notes_api.dependencies import get_list_query, get_note_service
from notes_api.schemas.note import (
    ErrorResponse,
    ListQuery,
    NoteCreate,
    NoteListResponse,
    NoteResponse,
    NoteUpdate,
    UpdateNoteCommand,
)
from notes_api.services.note_service import NotesService

logger = logging.getLogger(__name__)

CANONICAL_NOTES_PREFIX = "/v1/notes"
LEGACY_NOTES_PREFIX = "/notes"

_client_errors = {
    400: {"description": "Invalid input", "model": ErrorResponse},
}
_not_found = {
    404: {"description": "Note not found", "model": ErrorResponse},
}
_auth_errors = {
    401: {"description": "Missing or invalid bearer token", "model": ErrorResponse},
    403: {"description": "Token lacks the required scope", "model": ErrorResponse},
}


async def add_deprecation_headers(request: Request, response: Response) -> None:
    """Mark a legacy response as deprecated and point at its successor."""
    response.headers["Deprecation"] = "true"
    response.headers["Sunset"] = request.app.state.settings.legacy_sunset
    response.headers["Link"] = f'<{CANONICAL_NOTES_PREFIX}>; rel="successor-version"'


def build_notes_router(prefix: str, protect_writes: bool = True) -> APIRouter:
    """
    Build the notes router for one surface.

    Args:
        prefix:         Mount point, e.g. "/v1/notes" or "/notes"
        protect_writes: Guard POST/PATCH/DELETE with bearer scopes. When
                        False the surface is treated as legacy and marked
                        deprecated.
    """
    dependencies: List[Any] = []
    if not protect_writes:
        dependencies.append(Depends(add_deprecation_headers))

    router = APIRouter(
        prefix=prefix,
        tags=["Notes"] if protect_writes else ["Notes (legacy)"],
        deprecated=not protect_writes,
        dependencies=dependencies,
    )

    write_guard = [Depends(require_scopes(SCOPE_NOTES_WRITE))] if protect_writes else []
    delete_guard = [Depends(require_scopes(SCOPE_NOTES_DELETE))] if protect_writes else []
    guarded_errors = _auth_errors if protect_writes else {}

    @router.get(
        "",
        response_model=NoteListResponse,
        responses={**_client_errors},
        summary="List notes (cursor)",
        description=(
            "Returns one page of notes ordered by createdAt desc, then id desc. "
            "Filter with tagsAny (match any) and tagsAll (match all); both may be "
            "combined. Pass nextCursor back as cursor to fetch the following page. "
            "An unreadable cursor restarts from the first page."
        ),
    )
    async def list_notes(
        query: ListQuery = Depends(get_list_query),
        service: NotesService = Depends(get_note_service),
    ) -> NoteListResponse:
        page = await service.list(query)
        return NoteListResponse(
            items=[NoteResponse.model_validate(note) for note in page.items],
            next_cursor=page.next_cursor,
        )

    @router.post(
        "",
        status_code=status.HTTP_201_CREATED,
        response_model=NoteResponse,
        dependencies=write_guard,
        responses={**_client_errors, **guarded_errors},
        summary="Create note",
    )
    async def create_note(
        body: NoteCreate,
        service: NotesService = Depends(get_note_service),
    ) -> NoteResponse:
        note = await service.create(body)
        return NoteResponse.model_validate(note)

    @router.get(
        "/{note_id}",
        response_model=NoteResponse,
        responses={**_client_errors, **_not_found},
        summary="Get note",
    )
    async def get_note(
        note_id: UUID,
        service: NotesService = Depends(get_note_service),
    ) -> NoteResponse:
        note = await service.get_by_id(note_id)
        return NoteResponse.model_validate(note)

    @router.patch(
        "/{note_id}",
        response_model=NoteResponse,
        dependencies=write_guard,
        responses={**_client_errors, **_not_found, **guarded_errors},
        summary="Update note",
        description="Replaces only the fields present in the body. An empty body is rejected.",
    )
    async def update_note(
        note_id: UUID,
        body: NoteUpdate = Body(...),
        service: NotesService = Depends(get_note_service),
    ) -> NoteResponse:
        note = await service.update(UpdateNoteCommand(id=note_id, data=body))
        return NoteResponse.model_validate(note)

    @router.delete(
        "/{note_id}",
        status_code=status.HTTP_204_NO_CONTENT,
        response_class=Response,
        dependencies=delete_guard,
        responses={**_not_found, **guarded_errors},
        summary="Delete note",
    )
    async def delete_note(
        note_id: UUID,
        service: NotesService = Depends(get_note_service),
    ) -> None:
        await service.remove(note_id)

    return router


def build_routers() -> List[APIRouter]:
    """Canonical surface first, then the legacy one."""
    return [
        build_notes_router(CANONICAL_NOTES_PREFIX, protect_writes=True),
        build_notes_router(LEGACY_NOTES_PREFIX, protect_writes=False),
    ]
