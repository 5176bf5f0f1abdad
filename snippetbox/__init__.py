"""
Snippetbox — Application Package Initializer
=============================================

What: Marks the `snippetbox` directory as a Python package.
Why:  Enables module imports like `from snippetbox.config import settings`.
Who:  Used implicitly by Python's import system and explicitly by Alembic, pytest, and uvicorn.

Architecture Note:
    The application follows a layered architecture:

    ┌─────────────────────────────────────┐
    │      Routes (HTML pages, forms)     │  ← HTTP concerns only
    ├─────────────────────────────────────┤
    │     Services (Snippets, Users)      │  ← Parameterized queries, hashing
    ├─────────────────────────────────────┤
    │   Models, Forms & Templates (Data)  │  ← SQLAlchemy ORM + Pydantic + Jinja2
    ├─────────────────────────────────────┤
    │        Database (Persistence)       │  ← Async SQLAlchemy sessions
    └─────────────────────────────────────┘

    Routes render templates and redirect; services own the SQL; the database
    layer owns the engine and the per-request session lifecycle.
"""

__version__ = "1.0.0"
