"""
Postboard Backend - Test Configuration (conftest.py)
=====================================================

What:  Shared pytest fixtures for the entire test suite.
How:   Every test gets a fresh in-memory SQLite database (aiosqlite,
       StaticPool so all sessions share one connection) with the full
       schema created from Base.metadata. HTTP tests drive a fresh app from
       create_app() through httpx's ASGITransport, with get_db_session
       overridden to use that database.

Fixture Hierarchy (all function-scoped):
    db_engine ─▶ session_factory ─┬─▶ db_session      (service tests)
                                  ├─▶ seed            (insert fixture rows)
                                  └─▶ app ─▶ test_client (HTTP tests)
    tmp_path  ─▶ file_session_factory ─▶ file_client (concurrent requests)
"""

import os
import tempfile
from datetime import datetime, timezone
from typing import AsyncGenerator

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

# ══════════════════════════════════════════════════════════════════════════
# Environment Setup
# ══════════════════════════════════════════════════════════════════════════

# Set BEFORE any postboard import: settings and the module-level engine read these
os.environ["DATABASE_URL"] = "sqlite+aiosqlite://"
os.environ["LOG_LEVEL"] = "WARNING"
os.environ["DISPLAY_TIMEZONE"] = "America/Denver"
os.environ["IMAGES_DIR"] = tempfile.mkdtemp(prefix="postboard_test_images_")

from postboard.database import Base, get_db_session  # noqa: E402
from postboard.models import Comment, Post, PostTag, Section, Tag, User  # noqa: E402

TEST_DB_URL = "sqlite+aiosqlite://"


# ══════════════════════════════════════════════════════════════════════════
# Database Fixtures
# ══════════════════════════════════════════════════════════════════════════

@pytest_asyncio.fixture
async def db_engine():
    engine = create_async_engine(
        TEST_DB_URL,
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(db_engine):
    return async_sessionmaker(db_engine, class_=AsyncSession, expire_on_commit=False)


@pytest_asyncio.fixture
async def db_session(session_factory) -> AsyncGenerator[AsyncSession, None]:
    """A session for calling services directly; committed at teardown."""
    async with session_factory() as session:
        yield session
        await session.commit()


@pytest.fixture
def seed(session_factory):
    """
    Insert rows in their own committed transaction.

    Usage:
        await seed(User(username="bob", password="x"), Post(postid=1, ...))
    """
    async def _seed(*rows):
        async with session_factory() as session:
            session.add_all(rows)
            await session.commit()
    return _seed


@pytest.fixture
def count_rows(session_factory):
    """Number of rows in a model's table, read in a fresh session."""
    async def _count(model) -> int:
        async with session_factory() as session:
            return await session.scalar(select(func.count()).select_from(model))
    return _count


# ══════════════════════════════════════════════════════════════════════════
# Application Fixtures
# ══════════════════════════════════════════════════════════════════════════

def _build_app(session_factory):
    """create_app() with get_db_session bound to `session_factory`."""
    from postboard.main import create_app

    application = create_app()

    async def _override_db_session():
        async with session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    application.dependency_overrides[get_db_session] = _override_db_session
    return application


@pytest.fixture
def app(session_factory):
    return _build_app(session_factory)


@pytest_asyncio.fixture
async def test_client(app) -> AsyncGenerator[AsyncClient, None]:
    """
    HTTPX AsyncClient talking to the app in-process.

    Cookies set by the app (the session cookie) persist across requests on
    the same client, like a browser.
    """
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client


@pytest_asyncio.fixture
async def file_session_factory(tmp_path):
    """
    Sessions on a file-backed SQLite database with a real connection pool.

    Each session gets its own connection, so concurrent requests run in
    separate transactions and contend for SQLite's write lock the way
    concurrent requests contend for row locks on a server database.
    """
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'postboard.db'}")
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
    await engine.dispose()


@pytest_asyncio.fixture
async def file_client(file_session_factory) -> AsyncGenerator[AsyncClient, None]:
    transport = ASGITransport(app=_build_app(file_session_factory))
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client


# ══════════════════════════════════════════════════════════════════════════
# Data Fixtures
# ══════════════════════════════════════════════════════════════════════════

@pytest.fixture
def sample_times():
    """UTC instants with known America/Denver renderings."""
    return {
        "winter": datetime(2024, 1, 5, 22, 7, tzinfo=timezone.utc),     # Jan 5, 2024, 03:07 PM
        "summer": datetime(2024, 7, 4, 18, 30, tzinfo=timezone.utc),    # Jul 4, 2024, 12:30 PM
        "midnight": datetime(2024, 3, 1, 7, 5, tzinfo=timezone.utc),    # Mar 1, 2024, 12:05 AM
    }


@pytest_asyncio.fixture
async def sample_post(seed, sample_times):
    """
    bob's post 1 with two tags, two sections and two comments.

    Comments and sections are inserted out of display order on purpose.
    """
    await seed(
        User(username="bob", password="not-a-real-hash", bio="hiker"),
        User(username="carol", password="not-a-real-hash"),
        Post(
            postid=1,
            username="bob",
            title="Mountain Trails",
            titleimagepath="/images/posts/trail.png",
            descriptions="A weekend in the Rockies",
            likes=0,
            createtime=sample_times["winter"],
        ),
        Tag(tagid=1, tagname="outdoors"),
        Tag(tagid=2, tagname="hiking"),
        PostTag(postid=1, tagid=1),
        PostTag(postid=1, tagid=2),
        Section(
            sectionid=1, postid=1, sectiontitle="Day two", sectiontext="Summit",
            createtime=sample_times["summer"],
        ),
        Section(
            sectionid=2, postid=1, sectiontitle="Day one", sectiontext="Trailhead",
            createtime=sample_times["winter"],
        ),
        Comment(
            commentid=1, postid=1, username="carol", commenttext="second comment",
            createtime=sample_times["summer"],
        ),
        Comment(
            commentid=2, postid=1, username="bob", commenttext="first comment",
            createtime=sample_times["midnight"],
        ),
    )
    return 1

