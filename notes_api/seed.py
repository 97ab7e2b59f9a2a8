"""
Notes API - Sample Data Seeder
==============================

What:  Inserts generated notes for local development and pagination checks.
How:   Writes through SqlAlchemyNotesRepository, committing once per batch.
       Note i gets created_at = 2025-01-01T00:00:00Z + i seconds and a
       deterministic run of tags from TAG_POOL.

Usage:
    python -m notes_api.seed --count 10000 --batch 1000
    python -m notes_api.seed --count 5 --no-reset
"""

import argparse
import asyncio
import logging
from datetime import datetime, timedelta, timezone
from typing import List, Optional, Sequence

from sqlalchemy import delete

from notes_api.config import Settings
from notes_api.database import build_engine, build_session_factory, create_schema, dispose_engine
from notes_api.models.note import Note, NoteTag
from notes_api.repositories.note_repository import SqlAlchemyNotesRepository
from notes_api.schemas.note import NoteCreate

logger = logging.getLogger("notes_api.seed")

DEFAULT_COUNT = 3
DEFAULT_BATCH_SIZE = 1000
SEED_EPOCH = datetime(2025, 1, 1, tzinfo=timezone.utc)

TAG_POOL = [
    "welcome",
    "intro",
    "fastapi",
    "backend",
    "tips",
    "sqlalchemy",
    "db",
    "index",
    "api",
    "python",
    "asyncio",
    "postgres",
]


def build_tags(index: int) -> List[str]:
    """Two to four consecutive pool tags, starting at a position derived from `index`."""
    length = 2 + index % 3
    start = index % len(TAG_POOL)
    return [TAG_POOL[(start + offset) % len(TAG_POOL)] for offset in range(length)]


def build_note(index: int) -> NoteCreate:
    return NoteCreate(
        title=f"Seed note #{index + 1}",
        content=f"Generated note {index + 1} for pagination checks.",
        tags=build_tags(index),
    )


def seed_timestamp(index: int) -> datetime:
    return SEED_EPOCH + timedelta(seconds=index)


async def seed(settings: Settings, count: int, batch_size: int, reset: bool) -> int:
    """
    Insert `count` notes. Returns the number inserted.

    Creates the schema first when `settings.auto_create_schema` is set.
    """
    engine = build_engine(settings)
    session_factory = build_session_factory(engine)
    inserted = 0
    try:
        if settings.auto_create_schema:
            await create_schema(engine)

        if reset:
            async with session_factory() as session:
                # SQLite does not enforce ON DELETE CASCADE without a pragma
                await session.execute(delete(NoteTag))
                await session.execute(delete(Note))
                await session.commit()
            logger.info("Existing notes removed")

        while inserted < count:
            size = min(batch_size, count - inserted)
            async with session_factory() as session:
                for index in range(inserted, inserted + size):
                    timestamp = seed_timestamp(index)
                    repo = SqlAlchemyNotesRepository(session, clock=lambda ts=timestamp: ts)
                    await repo.create(build_note(index))
                await session.commit()
            inserted += size
            logger.info("Inserted %d/%d notes", inserted, count)
    finally:
        await dispose_engine(engine)

    return inserted


def _positive_int(value: str) -> int:
    number = int(value)
    if number <= 0:
        raise argparse.ArgumentTypeError(f"Invalid number value '{value}'")
    return number


def parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="python -m notes_api.seed",
        description="Insert generated sample notes.",
    )
    parser.add_argument("--count", type=_positive_int, default=DEFAULT_COUNT)
    parser.add_argument("--batch", type=_positive_int, default=None,
                        help=f"Notes per commit (default: min({DEFAULT_BATCH_SIZE}, count))")
    parser.add_argument("--reset", action=argparse.BooleanOptionalAction, default=True,
                        help="Delete existing notes first (default: on)")
    return parser.parse_args(argv)


def main(argv: Optional[Sequence[str]] = None) -> None:
    args = parse_args(argv)
    settings = Settings()
    logging.basicConfig(
        level=getattr(logging, settings.log_level, logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )
    batch_size = args.batch or min(DEFAULT_BATCH_SIZE, args.count)
    inserted = asyncio.run(seed(settings, args.count, batch_size, args.reset))
    logger.info("Seed completed: %d notes", inserted)


if __name__ == "__main__":
    main()
