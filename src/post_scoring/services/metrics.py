"""Derivation of scalar and ratio scoring inputs from raw signals.

Everything here is a pure function of its arguments: the same snapshot and
reference time always produce the same ``ScoreInputs``.
"""

from __future__ import annotations

from collections import Counter
from dataclasses import dataclass
from datetime import datetime, timedelta

from post_scoring.db.time import as_utc
from post_scoring.services.content_analysis import ContentStructure
from post_scoring.services.signals import (
    CommentRecord,
    PostRecord,
    ProfileRecord,
    SignalSnapshot,
    ViewRecord,
)
from post_scoring.services.tiers import ratio

# Read quality thresholds
QUALIFIED_READ_MIN_SECONDS = 30
QUALIFIED_READ_MIN_PERCENTAGE = 40
BOUNCE_MAX_SECONDS = 5
BOUNCE_MAX_PERCENTAGE = 5
QUICK_ENGAGEMENT_MAX_SECONDS = 10

# Comment quality thresholds (whitespace-separated tokens)
QUALITY_COMMENT_MIN_TOKENS = 20
SHORT_COMMENT_MAX_TOKENS = 5

# Views from one IP needed before all of that IP's views count as clustered
SAME_IP_CLUSTER_MIN_VIEWS = 3

SECONDS_PER_DAY = 86_400


@dataclass(frozen=True)
class ScoreInputs:
    """Ephemeral bundle of every value the quality and spam scorers read."""

    post: PostRecord
    # Content structure
    image_count: int = 0
    heading_count: int = 0
    tag_count: int = 0
    has_blockquote: bool = False
    has_list: bool = False
    has_table: bool = False
    # Read quality
    avg_read_duration: float = 0.0
    avg_read_percentage: float = 0.0
    qualified_read_count: int = 0
    bounce_rate: float = 0.0
    # Engagement
    unique_commenters_count: int = 0
    reply_count: int = 0
    quality_comment_count: int = 0
    short_comment_ratio: float = 0.0
    # Visitor quality
    avg_visitor_profile_score: float = 0.0
    avg_visitor_account_age_days: float = 0.0
    active_visitor_ratio: float = 0.0
    premium_viewer_ratio: float = 0.0
    new_account_viewer_ratio: float = 0.0
    # Engagement without reading
    quick_liker_ratio: float = 0.0
    quick_saver_ratio: float = 0.0
    same_ip_cluster_ratio: float = 0.0
    # Author
    author_profile_score: float = 0.0
    author_trust_level: int = 0
    author_is_verified: bool = False
    author_spam_score: float = 0.0
    author_avg_quality_score: float = 0.0
    author_published_count: int = 0
    # Economy and moderation
    gift_count: int = 0
    gift_diversity: int = 0
    report_count: int = 0
    was_in_moderation: bool = False
    ai_flagged: bool = False

    @property
    def content_diversity(self) -> int:
        return int(self.has_blockquote) + int(self.has_list) + int(self.has_table)

    @property
    def like_ratio(self) -> float:
        return ratio(self.post.like_count, self.post.unique_view_count)

    @property
    def save_ratio(self) -> float:
        return ratio(self.post.save_count, self.post.unique_view_count)

    @property
    def qualified_read_ratio(self) -> float:
        return ratio(self.qualified_read_count, self.post.unique_view_count)


def _mean(values: list[float]) -> float:
    return sum(values) / len(values) if values else 0.0


def _token_count(text: str) -> int:
    # An empty comment still counts as a single token.
    return len(text.split()) or 1


def _read_quality(views: list[ViewRecord]) -> tuple[float, float, int, float]:
    avg_duration = _mean([v.read_duration for v in views if v.read_duration > 0])
    avg_percentage = _mean([v.read_percentage for v in views if v.read_percentage > 0])
    qualified = sum(
        1
        for v in views
        if v.read_duration >= QUALIFIED_READ_MIN_SECONDS
        and v.read_percentage >= QUALIFIED_READ_MIN_PERCENTAGE
    )
    bounced = sum(
        1
        for v in views
        if v.read_duration < BOUNCE_MAX_SECONDS and v.read_percentage < BOUNCE_MAX_PERCENTAGE
    )
    return avg_duration, avg_percentage, qualified, ratio(bounced, len(views))


def _comment_quality(comments: list[CommentRecord], author_id: str) -> tuple[int, int, int, float]:
    outside = [c for c in comments if c.author_id != author_id]
    unique_commenters = len({c.author_id for c in outside})
    replies = sum(1 for c in comments if c.parent_id is not None)
    token_counts = [_token_count(c.content) for c in outside]
    quality = sum(1 for n in token_counts if n >= QUALITY_COMMENT_MIN_TOKENS)
    short = sum(1 for n in token_counts if n < SHORT_COMMENT_MAX_TOKENS)
    return unique_commenters, replies, quality, ratio(short, len(outside))


def quick_engagement_ratio(user_ids: list[str], views: list[ViewRecord]) -> float:
    """Fraction of ``user_ids`` that engaged without a meaningful read.

    A user counts as quick when no view record of theirs exists, or their last
    recorded read lasted under ``QUICK_ENGAGEMENT_MAX_SECONDS``.
    """
    durations: dict[str, float] = {}
    for view in views:
        if view.viewer_id:
            durations[view.viewer_id] = view.read_duration
    quick = sum(
        1
        for user_id in user_ids
        if durations.get(user_id, 0.0) < QUICK_ENGAGEMENT_MAX_SECONDS
    )
    return ratio(quick, len(user_ids))


def same_ip_cluster_ratio(views: list[ViewRecord]) -> float:
    """Fraction of views coming from an IP seen at least three times.

    Every view from such an IP counts as clustered, whether it came from one
    heavy reader or several accounts sharing a connection.
    """
    per_ip = Counter(v.ip_address for v in views if v.ip_address)
    clustered = sum(n for n in per_ip.values() if n >= SAME_IP_CLUSTER_MIN_VIEWS)
    return ratio(clustered, len(views))


def _visitor_quality(
    profiles: list[ProfileRecord],
    now: datetime,
    active_window_days: int,
    new_account_age_days: int,
) -> tuple[float, float, float, float]:
    if not profiles:
        return 0.0, 0.0, 0.0, 0.0

    active_since = now - timedelta(days=active_window_days)
    # Profiles without a creation date have no known age and are never new.
    ages = [
        (now - as_utc(p.created_at)).total_seconds() / SECONDS_PER_DAY
        for p in profiles
        if p.created_at
    ]
    active = sum(
        1 for p in profiles if p.last_active_at and as_utc(p.last_active_at) >= active_since
    )
    new_accounts = sum(1 for age in ages if age < new_account_age_days)
    return (
        _mean([p.profile_score for p in profiles]),
        _mean(ages),
        active / len(profiles),
        new_accounts / len(profiles),
    )


def derive_metrics(
    post: PostRecord,
    structure: ContentStructure,
    signals: SignalSnapshot,
    now: datetime,
    *,
    active_window_days: int = 30,
    new_account_age_days: int = 7,
) -> ScoreInputs:
    """Turn one post's raw signals into the scorer input bundle.

    Args:
        post: The post being scored
        structure: Structural features of the post body
        signals: Capped raw signals collected for the post
        now: Reference time for account age and activity windows
        active_window_days: A viewer active within this many days counts as active
        new_account_age_days: A viewer account younger than this counts as new

    Returns:
        ScoreInputs with every ratio guarded against empty denominators
    """
    now = as_utc(now)
    views = signals.views
    avg_duration, avg_percentage, qualified, bounce = _read_quality(views)
    commenters, replies, quality_comments, short_ratio = _comment_quality(
        signals.comments, post.author_id
    )
    avg_profile, avg_age, active_ratio, new_ratio = _visitor_quality(
        signals.viewer_profiles, now, active_window_days, new_account_age_days
    )
    author = signals.author or ProfileRecord(user_id=post.author_id)
    history = signals.author_quality_scores

    return ScoreInputs(
        post=post,
        image_count=structure.image_count,
        heading_count=structure.heading_count,
        tag_count=signals.tag_count,
        has_blockquote=structure.has_blockquote,
        has_list=structure.has_list,
        has_table=structure.has_table,
        avg_read_duration=avg_duration,
        avg_read_percentage=avg_percentage,
        qualified_read_count=qualified,
        bounce_rate=bounce,
        unique_commenters_count=commenters,
        reply_count=replies,
        quality_comment_count=quality_comments,
        short_comment_ratio=short_ratio,
        avg_visitor_profile_score=avg_profile,
        avg_visitor_account_age_days=avg_age,
        active_visitor_ratio=active_ratio,
        premium_viewer_ratio=ratio(sum(1 for v in views if v.is_premium_viewer), len(views)),
        new_account_viewer_ratio=new_ratio,
        quick_liker_ratio=quick_engagement_ratio(signals.liker_ids, views),
        quick_saver_ratio=quick_engagement_ratio(signals.saver_ids, views),
        same_ip_cluster_ratio=same_ip_cluster_ratio(views),
        author_profile_score=author.profile_score,
        author_trust_level=author.trust_level,
        author_is_verified=author.is_verified,
        author_spam_score=author.spam_score,
        author_avg_quality_score=_mean(history),
        author_published_count=len(history),
        gift_count=len(signals.gifts),
        gift_diversity=len({g.sender_id for g in signals.gifts if g.sender_id}),
        report_count=signals.report_count,
        was_in_moderation=bool(signals.moderation_actions),
        # Couples "never scored yet" with "author already flagged".
        ai_flagged=author.spam_score > 0 and post.quality_score == 0,
    )
