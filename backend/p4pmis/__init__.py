"""
P4P MIS Backend — Application Package Initializer
===================================================

What: Marks the `p4pmis` directory as a Python package.
Who:  Used by uvicorn (`uvicorn p4pmis.main:app`), pytest and the `p4pmis` console script.

Architecture Note:
    ┌─────────────────────────────────────┐
    │           Routes (API Layer)        │  ← HTTP concerns only
    ├─────────────────────────────────────┤
    │     Services (Query + Shaping)      │  ← one query pattern per operation
    ├─────────────────────────────────────┤
    │  Models (collection names, coercion │  ← declarative record schemas
    │  schemas) & Schemas (API contracts) │
    ├─────────────────────────────────────┤
    │        Database (MongoDB handle)    │  ← owned by the app lifespan
    └─────────────────────────────────────┘

    The database handle is created once in the lifespan, stored on
    `app.state`, and injected into routes through `get_database`.
"""

__version__ = "1.0.0"
