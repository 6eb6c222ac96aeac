"""Spam score: five risk dimensions, independent of the quality score."""

from __future__ import annotations

from dataclasses import dataclass

from post_scoring.services.metrics import ScoreInputs
from post_scoring.services.tiers import ABOVE, BELOW, TierTable, clamp_score

QUICK_ENGAGEMENT_MAX = 30
VISITOR_ANOMALIES_MAX = 25
ENGAGEMENT_ANOMALIES_MAX = 20
MODERATION_HISTORY_MAX = 15
CONTENT_FLAGS_MAX = 10

# Audience anomalies are only measured once a post has this many unique views.
MIN_UNIQUE_VIEWS_FOR_ANOMALIES = 10

QUICK_LIKER_TIERS = TierTable.of((0.60, 20), (0.40, 12), (0.20, 6), compare=ABOVE)
QUICK_SAVER_TIERS = TierTable.of((0.50, 10), (0.30, 5), compare=ABOVE)
NEW_ACCOUNT_TIERS = TierTable.of((0.40, 15), (0.20, 8), compare=ABOVE)
LOW_VISITOR_PROFILE_TIERS = TierTable.of((10, 10), (20, 5), compare=BELOW)
SAME_IP_TIERS = TierTable.of((0.30, 15), (0.20, 8), compare=ABOVE)
LIKE_RATIO_TIERS = TierTable.of((0.50, 10), (0.30, 5), compare=ABOVE)
BOUNCE_TIERS = TierTable.of((0.60, 8), (0.40, 4), compare=ABOVE)
REPORT_TIERS = TierTable.of((5, 10), (3, 6), (1, 3))
AUTHOR_SPAM_TIERS = TierTable.of((70, 5), (50, 3))


def quick_engagement(inputs: ScoreInputs) -> float:
    post = inputs.post
    score = 0.0

    if post.like_count >= 5:
        score += QUICK_LIKER_TIERS.points(inputs.quick_liker_ratio)
    if post.save_count >= 3:
        score += QUICK_SAVER_TIERS.points(inputs.quick_saver_ratio)

    return min(score, QUICK_ENGAGEMENT_MAX)


def visitor_anomalies(inputs: ScoreInputs) -> float:
    if inputs.post.unique_view_count < MIN_UNIQUE_VIEWS_FOR_ANOMALIES:
        return 0.0

    # An empty viewer sample averages to 0 and reads as low-profile traffic.
    score = NEW_ACCOUNT_TIERS.points(inputs.new_account_viewer_ratio)
    score += LOW_VISITOR_PROFILE_TIERS.points(inputs.avg_visitor_profile_score)
    score += SAME_IP_TIERS.points(inputs.same_ip_cluster_ratio)
    return min(score, VISITOR_ANOMALIES_MAX)


def engagement_anomalies(inputs: ScoreInputs) -> float:
    post = inputs.post
    views = post.unique_view_count
    if views < MIN_UNIQUE_VIEWS_FOR_ANOMALIES:
        return 0.0

    score = LIKE_RATIO_TIERS.points(inputs.like_ratio)

    if post.like_count > 20 and post.comment_count == 0:
        score += 5
    if views > 50 and inputs.qualified_read_count == 0:
        score += 10
    # Clickbait: most readers leave immediately.
    if views >= 20:
        score += BOUNCE_TIERS.points(inputs.bounce_rate)

    return min(score, ENGAGEMENT_ANOMALIES_MAX)


def moderation_history(inputs: ScoreInputs) -> float:
    score = REPORT_TIERS.points(inputs.report_count)

    if inputs.was_in_moderation:
        score += 3
    if inputs.ai_flagged:
        score += 2

    score += AUTHOR_SPAM_TIERS.points(inputs.author_spam_score)
    return min(score, MODERATION_HISTORY_MAX)


def content_flags(inputs: ScoreInputs) -> float:
    post = inputs.post
    score = 0.0

    if post.is_nsfw:
        score += 5
    if post.word_count < 20 and post.unique_view_count > 50:
        score += 5

    return min(score, CONTENT_FLAGS_MAX)


@dataclass(frozen=True)
class SpamBreakdown:
    """Per-dimension spam sub-scores for one post."""

    quick_engagement: float
    visitor_anomalies: float
    engagement_anomalies: float
    moderation_history: float
    content_flags: float

    @property
    def total(self) -> float:
        """Clamped composite in [0, 100], rounded to 2 decimals."""
        return clamp_score(
            self.quick_engagement
            + self.visitor_anomalies
            + self.engagement_anomalies
            + self.moderation_history
            + self.content_flags
        )


def spam_breakdown(inputs: ScoreInputs) -> SpamBreakdown:
    """Evaluate every spam dimension for ``inputs``."""
    return SpamBreakdown(
        quick_engagement=quick_engagement(inputs),
        visitor_anomalies=visitor_anomalies(inputs),
        engagement_anomalies=engagement_anomalies(inputs),
        moderation_history=moderation_history(inputs),
        content_flags=content_flags(inputs),
    )


def calculate_spam_score(inputs: ScoreInputs) -> float:
    """Return the spam score of a post in [0, 100]."""
    return spam_breakdown(inputs).total
