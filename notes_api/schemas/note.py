"""
Notes API - Pydantic Request/Response Schemas
=============================================

What:  Pydantic models defining the wire contract and the request-scoped
       value objects (list query, update command).
How:   FastAPI validates request bodies against these models and serializes
       responses through them. Wire names are camelCase (`createdAt`,
       `nextCursor`); Python code uses snake_case field names.

Timestamps are rendered as ISO-8601 UTC with milliseconds and a `Z`
suffix, matching the precision carried by pagination cursors.
"""

import uuid
from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_serializer, field_validator, model_validator
from pydantic.alias_generators import to_camel

from notes_api.query.tag_filter import parse_tags
from notes_api.timeutils import isoformat_ms

DEFAULT_PAGE_LIMIT = 20
MAX_PAGE_LIMIT = 100


# ══════════════════════════════════════════════════════════════════════════
# Response Models
# ══════════════════════════════════════════════════════════════════════════


class NoteResponse(BaseModel):
    """Wire representation of a note. Built from the ORM entity."""

    model_config = ConfigDict(
        from_attributes=True,
        alias_generator=to_camel,
        populate_by_name=True,
    )

    id: uuid.UUID = Field(description="Unique note identifier (UUID)")
    title: str = Field(description="Note title (non-empty)")
    content: str = Field(description="Note body; may be empty")
    tags: List[str] = Field(default_factory=list, description="Tags in insertion order")
    created_at: datetime = Field(description="Creation time (UTC ISO 8601)")
    updated_at: datetime = Field(description="Last modification time (UTC ISO 8601)")

    @field_serializer("created_at", "updated_at")
    def serialize_timestamp(self, value: datetime) -> str:
        return isoformat_ms(value)


class NoteListResponse(BaseModel):
    """
    One page of notes in canonical order (createdAt desc, id desc).

    `next_cursor` is null once the data is exhausted; otherwise pass it back
    as `cursor` to fetch the following page.
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    items: List[NoteResponse] = Field(description="Notes on this page")
    next_cursor: Optional[str] = Field(
        default=None,
        description="Opaque cursor for the next page. Null if no more pages.",
    )


class ErrorResponse(BaseModel):
    """
    Standardized error response format for all API errors.

    Fields:
        error: Machine-readable error code (e.g., "validation_error", "not_found")
        message: Human-readable description
        details: Optional extra context (e.g., which field failed validation)
        request_id: Correlation ID for tracing this error in server logs
    """
    error: str = Field(description="Machine-readable error code")
    message: str = Field(description="Human-readable error description")
    details: Optional[object] = Field(default=None, description="Additional error context")
    request_id: Optional[str] = Field(default=None, description="Request correlation ID")


class HealthResponse(BaseModel):
    """Health check response showing service and dependency status."""
    status: str = Field(description="Overall service status: healthy, unhealthy")
    version: str = Field(description="Application version")
    database: str = Field(description="Database connectivity: connected, disconnected")
    uptime_seconds: float = Field(description="Seconds since service started")


# ══════════════════════════════════════════════════════════════════════════
# Request Bodies & Commands
# ══════════════════════════════════════════════════════════════════════════


class NoteCreate(BaseModel):
    """Create-note body and command. Tags are stored exactly as given."""
    title: str = Field(min_length=1, description="Note title (required, non-empty)")
    content: str = Field(default="", description="Note body")
    tags: List[str] = Field(default_factory=list, description="Ordered tag list")


class NoteUpdate(BaseModel):
    """
    Partial update body.

    Only fields present in the request are applied. At least one field is
    required, and present fields may not be null.
    """
    title: Optional[str] = Field(default=None, min_length=1)
    content: Optional[str] = Field(default=None)
    tags: Optional[List[str]] = Field(default=None)

    @model_validator(mode="after")
    def check_changes(self) -> "NoteUpdate":
        if not self.model_fields_set:
            raise ValueError("Empty update: provide at least one of title, content, tags")
        for name in self.model_fields_set:
            if getattr(self, name) is None:
                raise ValueError(f"'{name}' may not be null")
        return self

    def changes(self) -> dict:
        """Only the fields the client actually sent."""
        return self.model_dump(exclude_unset=True)


class UpdateNoteCommand(BaseModel):
    id: uuid.UUID
    data: NoteUpdate


# ══════════════════════════════════════════════════════════════════════════
# Query Value Objects
# ══════════════════════════════════════════════════════════════════════════


class ListQuery(BaseModel):
    """
    Validated list-notes request.

    Parameters:
        limit:    Items per page, 1-100 (default 20). Out of range is rejected.
        cursor:   Opaque token from a previous page's `nextCursor`. An
                  undecodable token is ignored (first page), not rejected.
        tags_any: Match notes carrying at least one of these tags.
        tags_all: Match notes carrying every one of these tags.

    Tag inputs accept a comma-separated string or a list of strings.
    """
    limit: int = Field(default=DEFAULT_PAGE_LIMIT, ge=1, le=MAX_PAGE_LIMIT)
    cursor: Optional[str] = None
    tags_any: List[str] = Field(default_factory=list)
    tags_all: List[str] = Field(default_factory=list)

    @field_validator("tags_any", "tags_all", mode="before")
    @classmethod
    def split_tags(cls, v: object) -> object:
        if v is None:
            return []
        if isinstance(v, (str, list, tuple)):
            return parse_tags(v)
        return v
