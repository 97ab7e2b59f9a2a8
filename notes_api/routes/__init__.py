# Routes package init
"""
Notes API - API Routes Package
==============================

Route Inventory:
    - notes.py:   /v1/notes     list, create, get, update, delete (scoped writes)
                  /notes        same operations, unauthenticated, deprecated
    - health.py:  GET /health, GET /v1/health

Routes are thin: extract validated input, call NotesService, shape the
response. Business rules live in services, query rules in notes_api.query.
"""
