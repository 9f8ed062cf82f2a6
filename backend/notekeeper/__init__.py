"""
NoteKeeper Backend: Application Package
=======================================

What:  Multi-tenant note-taking API. Users register, obtain a bearer token,
       and manage personal notes that nobody else can see.
Who:   Imported by uvicorn (`notekeeper.main:app`), Alembic and pytest.

Architecture Note:
    ┌─────────────────────────────────────┐
    │           Routes (API Layer)        │  ← HTTP concerns, status mapping
    ├─────────────────────────────────────┤
    │   Identity (bearer token → owner)   │  ← resolved once per request
    ├─────────────────────────────────────┤
    │         Services (Business Logic)   │  ← ownership-scoped persistence
    ├─────────────────────────────────────┤
    │       Models & Schemas (Data)       │  ← SQLAlchemy ORM + Pydantic
    ├─────────────────────────────────────┤
    │        Database (Persistence)       │  ← Async SQLAlchemy sessions
    └─────────────────────────────────────┘

    Ownership is enforced at the service boundary: every note query is
    filtered by the caller's identity, which is passed in explicitly.
"""

__version__ = "1.0.0"
