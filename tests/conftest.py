# tests/conftest.py
from __future__ import annotations

from collections.abc import AsyncIterator, Callable, Iterator
from datetime import timedelta
from pathlib import Path
from typing import Any

import pytest
import pytest_asyncio
from fastapi import FastAPI
from fastapi.testclient import TestClient
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from post_scoring.core.settings import ScoringLimits, settings
from post_scoring.db.session import create_tables, drop_tables
from post_scoring.main import app as scoring_app
from post_scoring.models import Post, Profile
from post_scoring.models.post import POST_STATUS_PUBLISHED
from tests.factories import AUTHOR_ID, FIXED_NOW


@pytest.fixture()
def limits() -> ScoringLimits:
    return ScoringLimits(read_timeout_seconds=0.5)


@pytest_asyncio.fixture()
async def db_engine(tmp_path: Path) -> AsyncIterator[AsyncEngine]:
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'scoring.db'}")
    await create_tables(engine)
    try:
        yield engine
    finally:
        await drop_tables(engine)
        await engine.dispose()


@pytest.fixture()
def session_factory(db_engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(db_engine, autoflush=False, expire_on_commit=False)


@pytest.fixture()
def add_post(session_factory: async_sessionmaker[AsyncSession]) -> Callable[..., Any]:
    """Persist a post row and return its id."""

    async def _add(**fields: Any) -> int:
        values: dict[str, Any] = {
            "author_id": AUTHOR_ID,
            "content": "<p>Body</p>",
            "word_count": 120,
            "status": POST_STATUS_PUBLISHED,
            "published_at": FIXED_NOW - timedelta(days=1),
        }
        values.update(fields)
        async with session_factory() as db:
            post = Post(**values)
            db.add(post)
            await db.commit()
            return post.id

    return _add


@pytest.fixture()
def add_rows(session_factory: async_sessionmaker[AsyncSession]) -> Callable[..., Any]:
    """Persist arbitrary ORM rows in one transaction."""

    async def _add(*rows: Any) -> None:
        async with session_factory() as db:
            db.add_all(rows)
            await db.commit()

    return _add


@pytest.fixture()
def author_profile() -> Profile:
    return Profile(
        user_id=AUTHOR_ID,
        profile_score=80,
        trust_level=3,
        is_verified=True,
        spam_score=0,
        created_at=FIXED_NOW - timedelta(days=400),
        last_active_at=FIXED_NOW - timedelta(days=1),
    )


@pytest.fixture()
def app() -> Iterator[FastAPI]:
    try:
        yield scoring_app
    finally:
        scoring_app.dependency_overrides.clear()


@pytest.fixture()
def client(app: FastAPI) -> Iterator[TestClient]:
    with TestClient(app, base_url="http://test") as test_client:
        yield test_client


@pytest.fixture()
def cron_secret(monkeypatch: pytest.MonkeyPatch) -> str:
    """Configure a known trigger secret for the duration of a test."""
    secret = "test-cron-secret"
    monkeypatch.setattr(settings, "cron_secret", secret)
    return secret
