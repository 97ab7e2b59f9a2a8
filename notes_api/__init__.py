"""
Notes API - Application Package
===============================

What: CRUD HTTP API for notes (title, content, tags) with cursor pagination,
      tag filtering and scoped bearer-token authorization.
Who:  Imported by uvicorn (`notes_api.main:create_app`), Alembic, pytest and
      the seed tool.

Layering:

    ┌─────────────────────────────────────┐
    │     Routes + Auth (HTTP surface)    │  ← legacy /notes and /v1/notes
    ├─────────────────────────────────────┤
    │        Services (orchestration)     │  ← not-found → NotFoundError
    ├─────────────────────────────────────┤
    │   Repositories + Query composition  │  ← cursor, tag filters, ordering
    ├─────────────────────────────────────┤
    │  Models & Schemas / Database layer  │  ← SQLAlchemy ORM + Pydantic
    └─────────────────────────────────────┘
"""

__version__ = "1.0.0"
