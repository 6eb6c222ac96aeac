"""Read-only signal records and the capability interface that produces them.

Every external read the scoring job performs goes through a ``SignalSource``.
The SQL-backed implementation lives in ``signal_store``; tests substitute an
in-memory source with the same methods.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field
from datetime import datetime
from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from post_scoring.models import Post


@dataclass(frozen=True)
class PostRecord:
    """Scoring-relevant snapshot of a post row."""

    id: int
    author_id: str
    content: str = ""
    word_count: int = 0
    status: str = "published"
    is_nsfw: bool = False
    is_for_kids: bool = False
    has_featured_image: bool = False
    source_links: tuple[str, ...] = ()
    like_count: int = 0
    comment_count: int = 0
    save_count: int = 0
    share_count: int = 0
    view_count: int = 0
    unique_view_count: int = 0
    premium_view_count: int = 0
    total_coins_earned: int = 0
    allow_comments: bool = True
    published_at: datetime | None = None
    quality_score: float = 0.0
    spam_score: float = 0.0

    @classmethod
    def from_model(cls, post: Post) -> PostRecord:
        """Build a record from an ORM row, defaulting missing counters to 0."""
        return cls(
            id=post.id,
            author_id=post.author_id,
            content=post.content or "",
            word_count=post.word_count or 0,
            status=post.status,
            is_nsfw=bool(post.is_nsfw),
            is_for_kids=bool(post.is_for_kids),
            has_featured_image=bool(post.featured_image),
            source_links=tuple(post.source_links or ()),
            like_count=post.like_count or 0,
            comment_count=post.comment_count or 0,
            save_count=post.save_count or 0,
            share_count=post.share_count or 0,
            view_count=post.view_count or 0,
            unique_view_count=post.unique_view_count or 0,
            premium_view_count=post.premium_view_count or 0,
            total_coins_earned=post.total_coins_earned or 0,
            allow_comments=True if post.allow_comments is None else bool(post.allow_comments),
            published_at=post.published_at,
            quality_score=post.quality_score or 0.0,
            spam_score=post.spam_score or 0.0,
        )


@dataclass(frozen=True)
class ViewRecord:
    """One read of a post."""

    viewer_id: str | None = None
    read_duration: float = 0.0
    read_percentage: float = 0.0
    is_premium_viewer: bool = False
    ip_address: str | None = None


@dataclass(frozen=True)
class CommentRecord:
    """One approved comment."""

    author_id: str
    parent_id: int | None = None
    content: str = ""


@dataclass(frozen=True)
class GiftRecord:
    """One gift sent on a post."""

    sender_id: str | None = None


@dataclass(frozen=True)
class ProfileRecord:
    """Reputation data for an author or a sampled viewer."""

    user_id: str
    profile_score: float = 0.0
    trust_level: int = 0
    is_verified: bool = False
    spam_score: float = 0.0
    created_at: datetime | None = None
    last_active_at: datetime | None = None


@dataclass
class SignalSnapshot:
    """Every raw signal collected for one post, each already capped.

    A field that could not be read keeps its empty default.
    """

    tag_count: int = 0
    views: list[ViewRecord] = field(default_factory=list)
    comments: list[CommentRecord] = field(default_factory=list)
    gifts: list[GiftRecord] = field(default_factory=list)
    report_count: int = 0
    moderation_actions: list[str] = field(default_factory=list)
    liker_ids: list[str] = field(default_factory=list)
    saver_ids: list[str] = field(default_factory=list)
    author: ProfileRecord | None = None
    author_quality_scores: list[float] = field(default_factory=list)
    viewer_profiles: list[ProfileRecord] = field(default_factory=list)
    failed_signals: list[str] = field(default_factory=list)


class SignalSource(Protocol):
    """Bounded, post-scoped reads of every signal the scorers consume.

    Implementations raise ``SignalFetchError`` on failure; callers are expected
    to contain it.
    """

    async def count_tags(self, post_id: int) -> int: ...

    async def list_views(self, post_id: int, limit: int) -> list[ViewRecord]: ...

    async def list_approved_comments(self, post_id: int, limit: int) -> list[CommentRecord]: ...

    async def list_gifts(self, post_id: int) -> list[GiftRecord]: ...

    async def count_reports(self, post_id: int) -> int: ...

    async def list_moderation_actions(self, post_id: int, limit: int) -> list[str]: ...

    async def list_liker_ids(self, post_id: int, limit: int) -> list[str]: ...

    async def list_saver_ids(self, post_id: int, limit: int) -> list[str]: ...

    async def get_profile(self, user_id: str) -> ProfileRecord | None: ...

    async def list_author_quality_scores(
        self, author_id: str, exclude_post_id: int, limit: int
    ) -> list[float]: ...

    async def get_profiles(self, user_ids: Sequence[str]) -> list[ProfileRecord]: ...
