"""
Notes API - Pagination Cursor Codec
===================================

What:  Encodes and decodes the opaque pagination token.
How:   The token is URL-safe base64 (padding stripped) over a compact JSON
       payload: {"createdAt": "<ISO-8601 UTC, ms, Z>", "id": "<uuid>"}.

The cursor names a position in the canonical order (created_at desc,
id desc). Both fields are needed: notes sharing a created_at are told apart
by id, so two cursors with the same timestamp and different ids encode to
different tokens.

Decoding is permissive. Any malformed token (bad base64, bad UTF-8, bad
JSON, missing field, unparseable or out-of-range timestamp, non-UUID id)
decodes to None and the caller starts from the first page.
"""

import base64
import json
import uuid
from datetime import datetime
from typing import NamedTuple, Optional

from pydantic import BaseModel

from notes_api.timeutils import ensure_utc, isoformat_ms, truncate_to_millis


class Cursor(NamedTuple):
    """Position in the canonical note ordering."""
    created_at: datetime
    id: uuid.UUID


class _CursorPayload(BaseModel):
    createdAt: datetime
    id: uuid.UUID


def encode_cursor(created_at: datetime, note_id: uuid.UUID) -> str:
    """
    Build the token for `(created_at, note_id)`.

    Deterministic; sub-millisecond precision is dropped.
    """
    payload = json.dumps(
        {"createdAt": isoformat_ms(created_at), "id": str(note_id)},
        separators=(",", ":"),
    )
    token = base64.urlsafe_b64encode(payload.encode("utf-8")).decode("ascii")
    return token.rstrip("=")


def decode_cursor(token: Optional[str]) -> Optional[Cursor]:
    """Parse a token produced by `encode_cursor`; None for anything else."""
    if not token:
        return None
    try:
        padded = token + "=" * (-len(token) % 4)
        raw = base64.b64decode(padded, altchars=b"-_", validate=True)
        # binascii.Error, UnicodeDecodeError and pydantic's ValidationError
        # are all ValueError subclasses
        payload = _CursorPayload.model_validate_json(raw.decode("utf-8"))
        # Offsets at the edges of the datetime range overflow on UTC conversion
        created_at = truncate_to_millis(ensure_utc(payload.createdAt))
    except (ValueError, OverflowError):
        return None
    return Cursor(created_at=created_at, id=payload.id)
