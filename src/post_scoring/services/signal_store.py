"""SQLAlchemy-backed implementation of the ``SignalSource`` interface."""

from __future__ import annotations

from collections.abc import Awaitable, Callable, Sequence
from typing import TypeVar

from sqlalchemy import func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from post_scoring.models import (
    Bookmark,
    Comment,
    Gift,
    Like,
    ModerationLog,
    Post,
    PostTag,
    PostView,
    Profile,
    Report,
)
from post_scoring.models.engagement import COMMENT_STATUS_APPROVED
from post_scoring.models.moderation import CONTENT_TYPE_POST, TARGET_TYPE_POST
from post_scoring.models.post import POST_STATUS_PUBLISHED
from post_scoring.services.errors import SignalFetchError
from post_scoring.services.signals import (
    CommentRecord,
    GiftRecord,
    ProfileRecord,
    ViewRecord,
)

T = TypeVar("T")


def _profile_record(profile: Profile) -> ProfileRecord:
    return ProfileRecord(
        user_id=profile.user_id,
        profile_score=profile.profile_score or 0.0,
        trust_level=profile.trust_level or 0,
        is_verified=bool(profile.is_verified),
        spam_score=profile.spam_score or 0.0,
        created_at=profile.created_at,
        last_active_at=profile.last_active_at,
    )


class SqlSignalSource:
    """Read signals straight from the platform database.

    Every read opens its own short-lived session so that the reads issued for
    one post can run concurrently.
    """

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        """Initialize the source with a session factory.

        Args:
            session_factory: Factory producing async sessions bound to the platform database
        """
        self._session_factory = session_factory

    async def _read(self, signal: str, query: Callable[[AsyncSession], Awaitable[T]]) -> T:
        try:
            async with self._session_factory() as db:
                return await query(db)
        except SQLAlchemyError as exc:
            raise SignalFetchError(signal, str(exc)) from exc

    async def count_tags(self, post_id: int) -> int:
        async def query(db: AsyncSession) -> int:
            stmt = select(func.count()).select_from(PostTag).where(PostTag.post_id == post_id)
            return int((await db.execute(stmt)).scalar() or 0)

        return await self._read("tags", query)

    async def list_views(self, post_id: int, limit: int) -> list[ViewRecord]:
        async def query(db: AsyncSession) -> list[ViewRecord]:
            stmt = (
                select(PostView)
                .where(PostView.post_id == post_id)
                .order_by(PostView.id)
                .limit(limit)
            )
            return [
                ViewRecord(
                    viewer_id=view.viewer_id,
                    read_duration=view.read_duration or 0.0,
                    read_percentage=view.read_percentage or 0.0,
                    is_premium_viewer=bool(view.is_premium_viewer),
                    ip_address=view.ip_address,
                )
                for view in (await db.execute(stmt)).scalars()
            ]

        return await self._read("views", query)

    async def list_approved_comments(self, post_id: int, limit: int) -> list[CommentRecord]:
        async def query(db: AsyncSession) -> list[CommentRecord]:
            stmt = (
                select(Comment)
                .where(Comment.post_id == post_id, Comment.status == COMMENT_STATUS_APPROVED)
                .order_by(Comment.id)
                .limit(limit)
            )
            return [
                CommentRecord(
                    author_id=comment.author_id,
                    parent_id=comment.parent_id,
                    content=comment.content or "",
                )
                for comment in (await db.execute(stmt)).scalars()
            ]

        return await self._read("comments", query)

    async def list_gifts(self, post_id: int) -> list[GiftRecord]:
        async def query(db: AsyncSession) -> list[GiftRecord]:
            stmt = select(Gift.sender_id).where(Gift.post_id == post_id)
            return [GiftRecord(sender_id=sender) for sender in (await db.execute(stmt)).scalars()]

        return await self._read("gifts", query)

    async def count_reports(self, post_id: int) -> int:
        async def query(db: AsyncSession) -> int:
            stmt = (
                select(func.count())
                .select_from(Report)
                .where(Report.content_id == post_id, Report.content_type == CONTENT_TYPE_POST)
            )
            return int((await db.execute(stmt)).scalar() or 0)

        return await self._read("reports", query)

    async def list_moderation_actions(self, post_id: int, limit: int) -> list[str]:
        async def query(db: AsyncSession) -> list[str]:
            stmt = (
                select(ModerationLog.action)
                .where(
                    ModerationLog.target_type == TARGET_TYPE_POST,
                    ModerationLog.target_id == str(post_id),
                )
                .limit(limit)
            )
            return list((await db.execute(stmt)).scalars())

        return await self._read("moderation", query)

    async def list_liker_ids(self, post_id: int, limit: int) -> list[str]:
        async def query(db: AsyncSession) -> list[str]:
            stmt = select(Like.user_id).where(Like.post_id == post_id).limit(limit)
            return [user_id for user_id in (await db.execute(stmt)).scalars() if user_id]

        return await self._read("likes", query)

    async def list_saver_ids(self, post_id: int, limit: int) -> list[str]:
        async def query(db: AsyncSession) -> list[str]:
            stmt = select(Bookmark.user_id).where(Bookmark.post_id == post_id).limit(limit)
            return [user_id for user_id in (await db.execute(stmt)).scalars() if user_id]

        return await self._read("bookmarks", query)

    async def get_profile(self, user_id: str) -> ProfileRecord | None:
        async def query(db: AsyncSession) -> ProfileRecord | None:
            profile = await db.get(Profile, user_id)
            return _profile_record(profile) if profile else None

        return await self._read("author_profile", query)

    async def list_author_quality_scores(
        self, author_id: str, exclude_post_id: int, limit: int
    ) -> list[float]:
        async def query(db: AsyncSession) -> list[float]:
            stmt = (
                select(Post.quality_score)
                .where(
                    Post.author_id == author_id,
                    Post.status == POST_STATUS_PUBLISHED,
                    Post.id != exclude_post_id,
                    Post.quality_score > 0,
                )
                .order_by(Post.published_at.desc())
                .limit(limit)
            )
            return [float(score) for score in (await db.execute(stmt)).scalars()]

        return await self._read("author_history", query)

    async def get_profiles(self, user_ids: Sequence[str]) -> list[ProfileRecord]:
        if not user_ids:
            return []

        async def query(db: AsyncSession) -> list[ProfileRecord]:
            stmt = select(Profile).where(Profile.user_id.in_(list(user_ids)))
            return [_profile_record(profile) for profile in (await db.execute(stmt)).scalars()]

        return await self._read("viewer_profiles", query)
