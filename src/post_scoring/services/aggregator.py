"""Concurrent, error-contained collection of the raw signals for one post.

Collection runs in two stages. Phase 1 issues every independent read at once
and joins them. Phase 2 depends on the view records from Phase 1: it samples
the distinct non-author viewers and fetches their profiles in one batch.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable
from typing import TypeVar

from post_scoring.core.settings import ScoringLimits
from post_scoring.services.errors import SignalFetchError
from post_scoring.services.signals import (
    PostRecord,
    ProfileRecord,
    SignalSnapshot,
    SignalSource,
    ViewRecord,
)

# Configure logger for this module
logger = logging.getLogger(__name__)

T = TypeVar("T")


def sample_viewer_ids(views: list[ViewRecord], author_id: str, limit: int) -> list[str]:
    """Return up to ``limit`` distinct non-author viewer ids in read order."""
    seen: dict[str, None] = {}
    for view in views:
        viewer_id = view.viewer_id
        if viewer_id and viewer_id != author_id and viewer_id not in seen:
            seen[viewer_id] = None
            if len(seen) >= limit:
                break
    return list(seen)


class SignalAggregator:
    """Collects a ``SignalSnapshot`` for a post from a ``SignalSource``.

    No read failure ever leaves this class: a failed, timed-out or otherwise
    broken read is logged and replaced by its empty value.
    """

    def __init__(self, source: SignalSource, limits: ScoringLimits | None = None) -> None:
        """Initialize the aggregator.

        Args:
            source: Read-only provider of every signal
            limits: Sampling caps and read timeout; defaults are used when omitted
        """
        self.source = source
        self.limits = limits or ScoringLimits()

    async def _guarded(
        self,
        signal: str,
        post_id: int,
        read: Awaitable[T],
        default: T,
        failed: list[str],
    ) -> T:
        try:
            return await asyncio.wait_for(read, timeout=self.limits.read_timeout_seconds)
        except SignalFetchError as exc:
            logger.debug("Signal read failed for post %s: %s", post_id, exc)
        except TimeoutError:
            logger.debug("Signal read %s timed out for post %s", signal, post_id)
        except Exception as exc:  # noqa: BLE001 - one read never aborts the post
            logger.warning(
                "Unexpected error reading %s for post %s: %s", signal, post_id, exc, exc_info=True
            )
        failed.append(signal)
        return default

    async def collect(self, post: PostRecord) -> SignalSnapshot:
        """Collect every capped signal for ``post``.

        Args:
            post: The post being scored

        Returns:
            Snapshot of the raw signals, with empty values for failed reads
        """
        limits = self.limits
        source = self.source
        post_id = post.id
        failed: list[str] = []

        # Phase 1: independent reads, issued together and joined.
        (
            tag_count,
            views,
            comments,
            gifts,
            report_count,
            moderation_actions,
            liker_ids,
            saver_ids,
            author,
            author_quality_scores,
        ) = await asyncio.gather(
            self._guarded("tags", post_id, source.count_tags(post_id), 0, failed),
            self._guarded(
                "views", post_id, source.list_views(post_id, limits.view_sample_limit), [], failed
            ),
            self._guarded(
                "comments",
                post_id,
                source.list_approved_comments(post_id, limits.comment_sample_limit),
                [],
                failed,
            ),
            self._guarded("gifts", post_id, source.list_gifts(post_id), [], failed),
            self._guarded("reports", post_id, source.count_reports(post_id), 0, failed),
            self._guarded(
                "moderation",
                post_id,
                source.list_moderation_actions(post_id, limits.moderation_log_limit),
                [],
                failed,
            ),
            self._guarded(
                "likes",
                post_id,
                source.list_liker_ids(post_id, limits.like_sample_limit),
                [],
                failed,
            ),
            self._guarded(
                "bookmarks",
                post_id,
                source.list_saver_ids(post_id, limits.bookmark_sample_limit),
                [],
                failed,
            ),
            self._guarded(
                "author_profile", post_id, source.get_profile(post.author_id), None, failed
            ),
            self._guarded(
                "author_history",
                post_id,
                source.list_author_quality_scores(
                    post.author_id, post_id, limits.author_history_limit
                ),
                [],
                failed,
            ),
        )

        # Phase 2: viewer profiles, which need the Phase 1 view records.
        viewer_ids = sample_viewer_ids(views, post.author_id, limits.viewer_sample_limit)
        viewer_profiles: list[ProfileRecord] = []
        if viewer_ids:
            viewer_profiles = await self._guarded(
                "viewer_profiles", post_id, source.get_profiles(viewer_ids), [], failed
            )

        return SignalSnapshot(
            tag_count=tag_count,
            views=views,
            comments=comments,
            gifts=gifts,
            report_count=report_count,
            moderation_actions=moderation_actions,
            liker_ids=liker_ids,
            saver_ids=saver_ids,
            author=author,
            author_quality_scores=author_quality_scores,
            viewer_profiles=viewer_profiles,
            failed_signals=failed,
        )
