# src/post_scoring/models/engagement.py
"""Models recording how readers interacted with a post."""

from datetime import datetime

from sqlalchemy import BigInteger, Boolean, DateTime, Float, ForeignKey, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from post_scoring.db.session import Base
from post_scoring.db.time import utcnow

_PK = BigInteger().with_variant(Integer, "sqlite")

COMMENT_STATUS_APPROVED = "approved"
COMMENT_STATUS_PENDING = "pending"


class PostView(Base):
    """A single read of a post, anonymous when ``viewer_id`` is null."""

    __tablename__ = "post_views"

    id: Mapped[int] = mapped_column(_PK, primary_key=True, autoincrement=True)
    post_id: Mapped[int] = mapped_column(
        _PK, ForeignKey("posts.id", ondelete="CASCADE"), nullable=False, index=True
    )
    viewer_id: Mapped[str | None] = mapped_column(String(64), nullable=True)
    # Seconds spent on the page and maximum scroll depth (0-100).
    read_duration: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)
    read_percentage: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)
    is_premium_viewer: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    ip_address: Mapped[str | None] = mapped_column(String(64), nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow)


class Comment(Base):
    """Reader comment; only approved comments feed the scores."""

    __tablename__ = "comments"

    id: Mapped[int] = mapped_column(_PK, primary_key=True, autoincrement=True)
    post_id: Mapped[int] = mapped_column(
        _PK, ForeignKey("posts.id", ondelete="CASCADE"), nullable=False, index=True
    )
    author_id: Mapped[str] = mapped_column(String(64), nullable=False)
    parent_id: Mapped[int | None] = mapped_column(_PK, ForeignKey("comments.id"), nullable=True)
    content: Mapped[str | None] = mapped_column(Text, nullable=True)
    status: Mapped[str] = mapped_column(
        String(16), nullable=False, default=COMMENT_STATUS_APPROVED
    )


class Like(Base):
    """A user's like on a post."""

    __tablename__ = "likes"

    post_id: Mapped[int] = mapped_column(
        _PK, ForeignKey("posts.id", ondelete="CASCADE"), primary_key=True
    )
    user_id: Mapped[str] = mapped_column(String(64), primary_key=True)


class Bookmark(Base):
    """A user's saved post."""

    __tablename__ = "bookmarks"

    post_id: Mapped[int] = mapped_column(
        _PK, ForeignKey("posts.id", ondelete="CASCADE"), primary_key=True
    )
    user_id: Mapped[str] = mapped_column(String(64), primary_key=True)


class Gift(Base):
    """A coin gift sent to the author of a post."""

    __tablename__ = "gifts"

    id: Mapped[int] = mapped_column(_PK, primary_key=True, autoincrement=True)
    post_id: Mapped[int] = mapped_column(
        _PK, ForeignKey("posts.id", ondelete="CASCADE"), nullable=False, index=True
    )
    sender_id: Mapped[str | None] = mapped_column(String(64), nullable=True)
    coins: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
