# src/post_scoring/models/profile.py
"""SQLAlchemy model for user profiles."""

from datetime import datetime

from sqlalchemy import Boolean, DateTime, Float, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from post_scoring.db.session import Base
from post_scoring.db.time import utcnow


class Profile(Base):
    """Reputation data for a user, read for post authors and sampled viewers."""

    __tablename__ = "profiles"

    user_id: Mapped[str] = mapped_column(String(64), primary_key=True)
    profile_score: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)
    trust_level: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    is_verified: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    spam_score: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)
    created_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), default=utcnow)
    last_active_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
