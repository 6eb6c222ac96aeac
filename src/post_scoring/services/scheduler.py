"""Batch job that selects eligible posts, scores them and writes the scores back.

The job is stateless and idempotent: every run re-selects its posts from the
current database state and overwrites both score fields, so re-running after a
crash never leaves a post half-updated.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable, Sequence
from dataclasses import dataclass
from datetime import datetime, timedelta

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from post_scoring.core.settings import ScoringLimits
from post_scoring.db.time import utcnow
from post_scoring.models.post import POST_STATUS_PUBLISHED, Post
from post_scoring.repositories.post_repo import PostRepository
from post_scoring.services.aggregator import SignalAggregator
from post_scoring.services.content_analysis import analyze_content
from post_scoring.services.errors import PostEvaluationError, WriteBackError
from post_scoring.services.metrics import derive_metrics
from post_scoring.services.quality import quality_breakdown
from post_scoring.services.signal_store import SqlSignalSource
from post_scoring.services.signals import PostRecord, SignalSource
from post_scoring.services.spam import spam_breakdown

# Configure logger for this module
logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ScoreResult:
    """Scores computed for one post, persisted as a replacing upsert."""

    post_id: int
    quality_score: float
    spam_score: float


@dataclass(frozen=True)
class RunSummary:
    """Counters describing one scoring run."""

    selected: int = 0
    scored: int = 0
    skipped: int = 0
    updated: int = 0


def _batches(items: Sequence, size: int) -> list[Sequence]:
    return [items[start:start + size] for start in range(0, len(items), size)]


class PostScoringJob:
    """Scores every eligible post once per invocation.

    Posts are evaluated concurrently within fixed-size batches, one batch at a
    time. Results are then written back in a second batched pass.
    """

    def __init__(
        self,
        session_factory: async_sessionmaker[AsyncSession],
        source: SignalSource | None = None,
        limits: ScoringLimits | None = None,
        clock: Callable[[], datetime] = utcnow,
    ) -> None:
        """Initialize the job.

        Args:
            session_factory: Factory producing sessions for selection and write-back
            source: Signal provider; defaults to the SQL source on the same factory
            limits: Batch sizes, selection caps and sampling caps
            clock: Returns the reference time of the run
        """
        self.session_factory = session_factory
        self.limits = limits or ScoringLimits()
        self.aggregator = SignalAggregator(source or SqlSignalSource(session_factory), self.limits)
        self.clock = clock

    async def _select(self, label: str, query: Awaitable[list[Post]]) -> list[Post]:
        try:
            return await asyncio.wait_for(query, timeout=self.limits.read_timeout_seconds)
        except TimeoutError:
            logger.warning("Selection of %s posts timed out", label)
            return []

    async def select_eligible(self, now: datetime) -> list[PostRecord]:
        """Return the de-duplicated set of posts to score in this run.

        Recent posts are always rescored. Older posts that were never scored
        fill whatever headroom remains under the total cap.
        """
        limits = self.limits
        recent_since = now - timedelta(days=limits.recent_window_days)
        backfill_since = now - timedelta(days=limits.backfill_window_days)

        async with self.session_factory() as db:
            repo = PostRepository(db)
            recent = await self._select(
                "recent",
                repo.list_recent_published(
                    recent_since, min(limits.recent_post_limit, limits.total_post_limit)
                ),
            )
            backfill = await self._select(
                "backfill",
                repo.list_unscored_published(
                    backfill_since, recent_since, limits.total_post_limit - len(recent)
                ),
            )

        selected: dict[int, PostRecord] = {}
        for post in [*recent, *backfill]:
            selected.setdefault(post.id, PostRecord.from_model(post))
        return list(selected.values())

    async def evaluate(self, post: PostRecord, now: datetime) -> ScoreResult:
        """Aggregate, derive and score a single post.

        Raises:
            PostEvaluationError: If derivation or scoring fails for this post
        """
        structure = analyze_content(post.content)
        try:
            signals = await self.aggregator.collect(post)
            inputs = derive_metrics(
                post,
                structure,
                signals,
                now,
                active_window_days=self.limits.active_visitor_window_days,
                new_account_age_days=self.limits.new_account_age_days,
            )
            quality = quality_breakdown(inputs)
            spam = spam_breakdown(inputs)
        except Exception as exc:  # noqa: BLE001 - isolate one post from its batch
            raise PostEvaluationError(post.id, str(exc)) from exc

        logger.debug(
            "Post %s quality=%s spam=%s failed_signals=%s",
            post.id,
            quality,
            spam,
            signals.failed_signals,
        )
        return ScoreResult(post_id=post.id, quality_score=quality.total, spam_score=spam.total)

    async def _evaluate_or_skip(self, post: PostRecord, now: datetime) -> ScoreResult | None:
        if post.status != POST_STATUS_PUBLISHED:
            logger.debug("Skipping post %s with status %s", post.id, post.status)
            return None
        try:
            return await self.evaluate(post, now)
        except PostEvaluationError as exc:
            logger.warning("Skipping post: %s", exc, exc_info=True)
            return None

    async def score_posts(self, posts: Sequence[PostRecord], now: datetime) -> list[ScoreResult]:
        """Evaluate ``posts`` batch by batch, dropping posts that failed."""
        results: list[ScoreResult] = []
        for batch in _batches(posts, self.limits.scoring_batch_size):
            batch_results = await asyncio.gather(
                *(self._evaluate_or_skip(post, now) for post in batch)
            )
            results.extend(result for result in batch_results if result is not None)
        return results

    async def _store(self, result: ScoreResult) -> int:
        async with self.session_factory() as db:
            touched = await PostRepository(db).set_scores(
                result.post_id, result.quality_score, result.spam_score
            )
            await db.commit()
        return touched

    async def _persist(self, result: ScoreResult) -> None:
        try:
            touched = await asyncio.wait_for(
                self._store(result), timeout=self.limits.read_timeout_seconds
            )
        except SQLAlchemyError as exc:
            raise WriteBackError(result.post_id, str(exc)) from exc
        except TimeoutError as exc:
            raise WriteBackError(result.post_id, "write timed out") from exc
        if not touched:
            raise WriteBackError(result.post_id, "post no longer exists")

    async def _write_one(self, result: ScoreResult) -> bool:
        try:
            await self._persist(result)
        except WriteBackError as exc:
            logger.warning("Score write-back failed: %s", exc)
            return False
        return True

    async def write_back(self, results: Sequence[ScoreResult]) -> int:
        """Persist ``results`` in fixed-size batches and return how many succeeded."""
        updated = 0
        for batch in _batches(results, self.limits.write_batch_size):
            outcomes = await asyncio.gather(*(self._write_one(result) for result in batch))
            updated += sum(outcomes)
        return updated

    async def run(self) -> RunSummary:
        """Run one full scoring pass."""
        now = self.clock()
        posts = await self.select_eligible(now)
        if not posts:
            logger.info("No posts eligible for scoring")
            return RunSummary()

        results = await self.score_posts(posts, now)
        updated = await self.write_back(results)
        summary = RunSummary(
            selected=len(posts),
            scored=len(results),
            skipped=len(posts) - len(results),
            updated=updated,
        )
        logger.info(
            "Post scoring run finished: selected=%d scored=%d skipped=%d updated=%d",
            summary.selected,
            summary.scored,
            summary.skipped,
            summary.updated,
        )
        return summary
