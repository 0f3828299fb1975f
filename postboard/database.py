"""
Postboard Backend - Database Session Management
================================================

What:  Async SQLAlchemy engine, session factory, and FastAPI dependency.
How:   Creates an async engine with connection pooling, provides a session
       dependency that commits on success and rolls back on error.
Who:   Used by route handlers via FastAPI's dependency injection system.
When:  Engine is created at module import; sessions are created per-request.

Connection Pooling:
    pool_size / max_overflow / pool_pre_ping come from settings and only apply
    to server databases. SQLite (tests, local experiments) uses SQLAlchemy's
    default pool for the dialect.
"""

from typing import Any, AsyncGenerator, Dict

from sqlalchemy.ext.asyncio import (
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase

from postboard.config import settings


def _engine_options() -> Dict[str, Any]:
    options: Dict[str, Any] = {"echo": settings.log_level == "DEBUG"}
    if not settings.is_sqlite:
        options.update(
            pool_size=settings.db_pool_size,
            max_overflow=settings.db_max_overflow,
            pool_pre_ping=settings.db_pool_pre_ping,
            pool_recycle=3600,  # Recycle after 1 hour
        )
    return options


# ── Engine Configuration ──────────────────────────────────────────────────
engine = create_async_engine(settings.database_url, **_engine_options())

# ── Session Factory ───────────────────────────────────────────────────────
# expire_on_commit=False: rows stay readable after commit (templates render
# them after the dependency has committed)
async_session_factory = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
)


# ── Base Model ────────────────────────────────────────────────────────────
class Base(DeclarativeBase):
    """
    Base class for all SQLAlchemy ORM models.

    All models inherit from this class so they share a single metadata
    object (used by Alembic and by the test suite's create_all).
    """
    pass


# ── Session Dependency ────────────────────────────────────────────────────
async def get_db_session() -> AsyncGenerator[AsyncSession, None]:
    """
    FastAPI dependency that provides a database session per request.

    How it works:
        1. Creates a new session from the factory
        2. Yields it to the route handler (the handler performs queries)
        3. On success: commits the transaction
        4. On error: rolls back the transaction
        5. Always: closes the session (returns connection to pool)

    Example usage in a route:
        @router.get("/discover")
        async def discover(db: AsyncSession = Depends(get_db_session)):
            posts = await post_service.list_discover(db)
    """
    async with async_session_factory() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise
        finally:
            await session.close()


# ── Lifecycle Helpers ─────────────────────────────────────────────────────
async def dispose_engine() -> None:
    """Closes all pooled connections. Called from the application lifespan."""
    await engine.dispose()
