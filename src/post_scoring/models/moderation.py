# src/post_scoring/models/moderation.py
"""Models tracking reports and moderation actions."""

from sqlalchemy import BigInteger, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from post_scoring.db.session import Base

CONTENT_TYPE_POST = "post"
TARGET_TYPE_POST = "post"


class Report(Base):
    """A user report against a piece of content."""

    __tablename__ = "reports"

    id: Mapped[int] = mapped_column(
        BigInteger().with_variant(Integer, "sqlite"), primary_key=True, autoincrement=True
    )
    content_type: Mapped[str] = mapped_column(String(16), nullable=False)
    content_id: Mapped[int] = mapped_column(Integer, nullable=False, index=True)
    reporter_id: Mapped[str | None] = mapped_column(String(64), nullable=True)


class ModerationLog(Base):
    """Audit entry written whenever a moderator acts on a target."""

    __tablename__ = "moderation_logs"

    id: Mapped[int] = mapped_column(
        BigInteger().with_variant(Integer, "sqlite"), primary_key=True, autoincrement=True
    )
    # Target ids are stored as text so one table can reference any content type.
    target_type: Mapped[str] = mapped_column(String(16), nullable=False)
    target_id: Mapped[str] = mapped_column(String(64), nullable=False, index=True)
    action: Mapped[str] = mapped_column(String(32), nullable=False)
