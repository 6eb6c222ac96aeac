# src/post_scoring/models/post.py
"""SQLAlchemy models for posts and their tags."""

from datetime import datetime

from sqlalchemy import JSON, BigInteger, Boolean, DateTime, Float, ForeignKey, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from post_scoring.db.session import Base

POST_STATUS_DRAFT = "draft"
POST_STATUS_PUBLISHED = "published"


class Post(Base):
    """Published content whose quality and spam scores are maintained by the job.

    Only ``quality_score`` and ``spam_score`` are written here; every other column
    is owned by the content platform and read as an input signal.
    """

    __tablename__ = "posts"

    id: Mapped[int] = mapped_column(BigInteger().with_variant(Integer, "sqlite"), primary_key=True)
    author_id: Mapped[str] = mapped_column(String(64), nullable=False, index=True)
    content: Mapped[str | None] = mapped_column(Text, nullable=True)
    word_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    status: Mapped[str] = mapped_column(String(16), nullable=False, default=POST_STATUS_DRAFT)

    is_nsfw: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    is_for_kids: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    featured_image: Mapped[str | None] = mapped_column(Text, nullable=True)
    source_links: Mapped[list[str] | None] = mapped_column(JSON, nullable=True)
    allow_comments: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)

    # Denormalized counters maintained by the platform.
    like_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    comment_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    save_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    share_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    view_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    unique_view_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    premium_view_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    total_coins_earned: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    published_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True, index=True
    )

    # Fully overwritten on every scoring pass; 0 means "not scored yet".
    quality_score: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)
    spam_score: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)


class PostTag(Base):
    """Association between a post and one of its tags."""

    __tablename__ = "post_tags"

    post_id: Mapped[int] = mapped_column(
        BigInteger().with_variant(Integer, "sqlite"),
        ForeignKey("posts.id", ondelete="CASCADE"),
        primary_key=True,
    )
    tag_id: Mapped[int] = mapped_column(Integer, primary_key=True)
