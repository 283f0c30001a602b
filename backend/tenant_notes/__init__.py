"""
Tenant Notes Backend — Application Package Initializer
======================================================

What: Marks the `tenant_notes` directory as a Python package.
Why:  Enables module imports like `from tenant_notes.config import settings`.
Who:  Used implicitly by Python's import system and explicitly by Alembic, pytest, and uvicorn.

Architecture Note:
    The backend follows a layered architecture:

    ┌─────────────────────────────────────┐
    │           Routes (API Layer)        │  ← HTTP concerns only
    ├─────────────────────────────────────┤
    │     Auth (token + role gates)       │  ← Identity from bearer token
    ├─────────────────────────────────────┤
    │         Services (Business Logic)   │  ← Login, plan limits, upgrades
    ├─────────────────────────────────────┤
    │   Repositories (Tenant-scoped SQL)  │  ← Every note query filters by tenant
    ├─────────────────────────────────────┤
    │       Models & Schemas (Data)       │  ← SQLAlchemy ORM + Pydantic
    ├─────────────────────────────────────┤
    │        Database (Persistence)       │  ← Async SQLAlchemy sessions
    └─────────────────────────────────────┘

    Tenant isolation lives in the repository layer: routes and services never
    build a note query themselves, so no code path can read a note by id alone.
"""

__version__ = "1.0.0"
