# Services package init
"""
Notes API - Services Layer
==========================

What:  Business logic sitting between routes (HTTP) and repositories (persistence).

Service Inventory:
    - NotesService: note CRUD orchestration; converts repository
      "not found" sentinels into NotFoundError

Services hold no state beyond the repository they are constructed with;
a new instance is built per request.
"""
