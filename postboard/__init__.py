"""
Postboard Backend - Application Package
========================================

A server-rendered social posting site: register, log in, browse and search
posts, comment and like.

Layers:
    ┌─────────────────────────────────────┐
    │   Routes (HTTP) + Views (Jinja2)    │  ← forms, redirects, JSON
    ├─────────────────────────────────────┤
    │         Services (Business Logic)   │  ← validation, orchestration
    ├─────────────────────────────────────┤
    │      Repositories (Data Access)     │  ← parametrized queries
    ├─────────────────────────────────────┤
    │   Models + Database (Persistence)   │  ← async SQLAlchemy
    └─────────────────────────────────────┘
"""

__version__ = "1.0.0"
