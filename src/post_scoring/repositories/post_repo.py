"""Data access helpers for selecting posts and writing back their scores."""
from __future__ import annotations

from datetime import datetime

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from post_scoring.models.post import POST_STATUS_PUBLISHED, Post

__all__ = ["PostRepository"]


class PostRepository:
    """Thin wrapper around database access for post entities."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize the repository with an async SQLAlchemy session."""
        self.session = session

    async def list_recent_published(self, since: datetime, limit: int) -> list[Post]:
        """Return posts published at or after ``since``, newest first."""
        if limit <= 0:
            return []
        result = await self.session.execute(
            select(Post)
            .where(Post.status == POST_STATUS_PUBLISHED, Post.published_at >= since)
            .order_by(Post.published_at.desc(), Post.id.desc())
            .limit(limit)
        )
        return list(result.scalars())

    async def list_unscored_published(
        self, since: datetime, before: datetime, limit: int
    ) -> list[Post]:
        """Return published posts in ``[since, before)`` still at the default quality score."""
        if limit <= 0:
            return []
        result = await self.session.execute(
            select(Post)
            .where(
                Post.status == POST_STATUS_PUBLISHED,
                Post.published_at < before,
                Post.published_at >= since,
                Post.quality_score == 0,
            )
            .order_by(Post.published_at.desc(), Post.id.desc())
            .limit(limit)
        )
        return list(result.scalars())

    async def set_scores(self, post_id: int, quality_score: float, spam_score: float) -> int:
        """Overwrite both scores of a post and return the number of rows touched.

        Args:
            post_id: Identifier of the post to update.
            quality_score: New quality score, already clamped and rounded.
            spam_score: New spam score, already clamped and rounded.
        """
        result = await self.session.execute(
            update(Post)
            .where(Post.id == post_id)
            .values(quality_score=quality_score, spam_score=spam_score)
        )
        await self.session.flush()
        return result.rowcount or 0
