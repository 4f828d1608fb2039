"""
Blog Backend — Application Package
====================================

What: Blog platform API (users, role-gated blog CRUD, file uploads).
Who:  Imported by uvicorn (`blog_backend.main:app`), Alembic and pytest.

Layering:

    ┌─────────────────────────────────────┐
    │  Routes + Guards (API Layer)        │  ← HTTP concerns, auth dependencies
    ├─────────────────────────────────────┤
    │  Services (Business Logic)          │  ← validation, permission rules
    ├─────────────────────────────────────┤
    │  Models & Schemas (Data)            │  ← SQLAlchemy ORM + Pydantic
    ├─────────────────────────────────────┤
    │  Database / Filesystem              │  ← async sessions, upload root
    └─────────────────────────────────────┘
"""

__version__ = "1.0.0"
