"""Application settings and configuration.

This module defines all configuration options for the post scoring job.
Settings are loaded from environment variables with sensible defaults.
"""

from __future__ import annotations

from dataclasses import dataclass

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


@dataclass(frozen=True)
class ScoringLimits:
    """Immutable snapshot of the batch and sampling knobs used by one run."""

    scoring_batch_size: int = 50
    write_batch_size: int = 100
    recent_window_days: int = 7
    backfill_window_days: int = 30
    recent_post_limit: int = 300
    total_post_limit: int = 500
    view_sample_limit: int = 500
    comment_sample_limit: int = 500
    like_sample_limit: int = 500
    bookmark_sample_limit: int = 500
    moderation_log_limit: int = 5
    author_history_limit: int = 20
    viewer_sample_limit: int = 200
    read_timeout_seconds: float = 10.0
    active_visitor_window_days: int = 30
    new_account_age_days: int = 7


class Settings(BaseSettings):
    """Application settings loaded from environment variables.

    Settings can be overridden via environment variables or .env files.
    """

    # Application metadata
    app_name: str = Field(default="Post Scoring", alias="APP_NAME")
    app_version: str = Field(default="0.1.0", alias="APP_VERSION")
    debug: bool = Field(default=False, alias="DEBUG")

    # Shared secret expected on the scheduled trigger
    cron_secret: str | None = Field(default=None, alias="CRON_SECRET")

    # Database configuration
    database_url: str = Field(
        default="sqlite+aiosqlite:///./post_scoring.db",
        alias="DATABASE_URL",
    )
    sql_debug: bool = Field(default=False, alias="SQL_DEBUG")

    # Batch sizes
    scoring_batch_size: int = Field(default=50, ge=1, alias="SCORING_BATCH_SIZE")
    write_batch_size: int = Field(default=100, ge=1, alias="WRITE_BATCH_SIZE")

    # Eligible-set selection
    recent_window_days: int = Field(default=7, ge=1, alias="RECENT_WINDOW_DAYS")
    backfill_window_days: int = Field(default=30, ge=1, alias="BACKFILL_WINDOW_DAYS")
    recent_post_limit: int = Field(default=300, ge=0, alias="RECENT_POST_LIMIT")
    total_post_limit: int = Field(default=500, ge=0, alias="TOTAL_POST_LIMIT")

    # Per-post signal sampling caps
    view_sample_limit: int = Field(default=500, ge=0, alias="VIEW_SAMPLE_LIMIT")
    comment_sample_limit: int = Field(default=500, ge=0, alias="COMMENT_SAMPLE_LIMIT")
    like_sample_limit: int = Field(default=500, ge=0, alias="LIKE_SAMPLE_LIMIT")
    bookmark_sample_limit: int = Field(default=500, ge=0, alias="BOOKMARK_SAMPLE_LIMIT")
    moderation_log_limit: int = Field(default=5, ge=0, alias="MODERATION_LOG_LIMIT")
    author_history_limit: int = Field(default=20, ge=0, alias="AUTHOR_HISTORY_LIMIT")
    viewer_sample_limit: int = Field(default=200, ge=0, alias="VIEWER_SAMPLE_LIMIT")
    signal_read_timeout_seconds: float = Field(
        default=10.0,
        gt=0,
        alias="SIGNAL_READ_TIMEOUT_SECONDS",
    )

    # Visitor classification windows
    active_visitor_window_days: int = Field(default=30, ge=1, alias="ACTIVE_VISITOR_WINDOW_DAYS")
    new_account_age_days: int = Field(default=7, ge=0, alias="NEW_ACCOUNT_AGE_DAYS")

    model_config = SettingsConfigDict(
        env_file=".env",
        validate_assignment=True,
        extra="ignore",
    )

    @property
    def scoring_limits(self) -> ScoringLimits:
        """Return the batch and sampling knobs as an immutable snapshot.

        Returns:
            ScoringLimits built from the current settings values
        """
        return ScoringLimits(
            scoring_batch_size=self.scoring_batch_size,
            write_batch_size=self.write_batch_size,
            recent_window_days=self.recent_window_days,
            backfill_window_days=self.backfill_window_days,
            recent_post_limit=self.recent_post_limit,
            total_post_limit=self.total_post_limit,
            view_sample_limit=self.view_sample_limit,
            comment_sample_limit=self.comment_sample_limit,
            like_sample_limit=self.like_sample_limit,
            bookmark_sample_limit=self.bookmark_sample_limit,
            moderation_log_limit=self.moderation_log_limit,
            author_history_limit=self.author_history_limit,
            viewer_sample_limit=self.viewer_sample_limit,
            read_timeout_seconds=self.signal_read_timeout_seconds,
            active_visitor_window_days=self.active_visitor_window_days,
            new_account_age_days=self.new_account_age_days,
        )


settings = Settings()
