"""
Blog API Backend - Application Package
======================================

What: REST CRUD service for users, blog posts and categories.
How:  Layered the same way in every resource:

    ┌─────────────────────────────────────┐
    │           Routes (API Layer)        │  ← HTTP concerns only
    ├─────────────────────────────────────┤
    │     Services (Traversal & Rules)    │  ← referential checks, associations
    ├─────────────────────────────────────┤
    │   Repository (Data-access port)     │  ← create / get / query_all / query_related
    ├─────────────────────────────────────┤
    │  Models, Relations & Schemas (Data) │  ← SQLAlchemy ORM + Pydantic
    ├─────────────────────────────────────┤
    │        Database (Persistence)       │  ← Async SQLAlchemy sessions
    └─────────────────────────────────────┘

    Control flow for every request:
    Router → Handler → Service → Repository → Entity/Collection → JSON response
"""

__version__ = "1.0.0"
