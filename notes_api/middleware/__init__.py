# Middleware package init
"""
Notes API - Middleware Package
==============================

Middleware Chain:
    Request → [Request ID] → [Logging] → [GZip] → [CORS] → Route Handler

    1. Request ID first: every later log line and error body can carry it
    2. Logging: records status and duration once the response exists
    3. GZip / CORS: FastAPI-provided
"""
