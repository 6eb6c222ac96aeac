"""Quality score: six reward dimensions and two penalty dimensions.

Each dimension adds up its own tier lookups and is capped at its maximum.
The composite is the clamped sum, rounded to 2 decimals.
"""

from __future__ import annotations

from dataclasses import dataclass

from post_scoring.services.metrics import ScoreInputs
from post_scoring.services.tiers import ABOVE, TierTable, clamp_score

CONTENT_STRUCTURE_MAX = 15
READ_QUALITY_MAX = 20
ENGAGEMENT_QUALITY_MAX = 20
VISITOR_QUALITY_MAX = 20
AUTHOR_AUTHORITY_MAX = 10
ECONOMIC_SIGNALS_MAX = 8

# Read and visitor quality need a minimal audience before they mean anything.
MIN_UNIQUE_VIEWS_FOR_READ_SIGNALS = 3
# Below this many unique views the author's reputation stands in for engagement.
COLD_START_MAX_UNIQUE_VIEWS = 5
AUTHOR_CONSISTENCY_MIN_POSTS = 5

# Content structure
HEADING_TIERS = TierTable.of((2, 2), (1, 1))
TAG_TIERS = TierTable.of((3, 2), (1, 1))
WORD_COUNT_TIERS = TierTable.of((300, 3), (100, 2), (30, 1))
DIVERSITY_TIERS = TierTable.of((2, 2), (1, 1))

# Read quality
READ_DURATION_TIERS = TierTable.of((120, 6), (60, 4), (30, 2))
READ_PERCENTAGE_TIERS = TierTable.of((70, 5), (50, 3), (30, 1))
QUALIFIED_READ_TIERS = TierTable.of((0.40, 5), (0.20, 3), (0.10, 1))
BOUNCE_PENALTY_TIERS = TierTable.of((0.50, -3), (0.30, -1), compare=ABOVE)

# Engagement quality
LIKE_RATIO_TIERS = TierTable.of((0.15, 4), (0.08, 3), (0.03, 2), positive_points=1)
UNIQUE_COMMENTER_TIERS = TierTable.of((10, 5), (5, 3), (2, 2), (1, 1))
SAVE_RATIO_TIERS = TierTable.of((0.05, 3), (0.02, 2), (0.005, 1))
REPLY_TIERS = TierTable.of((10, 3), (3, 2), (1, 1))
SHARE_TIERS = TierTable.of((10, 2), (3, 1))
QUALITY_COMMENT_TIERS = TierTable.of((5, 3), (2, 2), (1, 1))

# Visitor quality
VISITOR_PROFILE_TIERS = TierTable.of((60, 8), (40, 6), (20, 4), positive_points=1)
VISITOR_AGE_TIERS = TierTable.of((365, 3), (180, 2), (30, 1))
ACTIVE_VISITOR_TIERS = TierTable.of((0.50, 3), (0.25, 2))
PREMIUM_VIEWER_TIERS = TierTable.of((0.20, 2), (0.10, 1))

# Author authority
AUTHOR_PROFILE_TIERS = TierTable.of((80, 4), (60, 3), (40, 2), (20, 1))
TRUST_LEVEL_TIERS = TierTable.of((5, 3), (4, 2), (3, 1))
AUTHOR_CONSISTENCY_TIERS = TierTable.of((60, 3), (40, 2), (20, 1))
COLD_START_TIERS = TierTable.of((70, 5), (50, 3), (30, 2))
AUTHOR_SPAM_PENALTY_TIERS = TierTable.of((50, -5), (30, -3))

# Economic signals
GIFT_COUNT_TIERS = TierTable.of((5, 3), (2, 2), (1, 1))
GIFT_DIVERSITY_TIERS = TierTable.of((3, 3), (2, 2))
COINS_TIERS = TierTable.of((100, 2), (20, 1))

# Penalties
REPORT_PENALTY_TIERS = TierTable.of((5, -8), (3, -5), (1, -2))
QUICK_LIKER_PENALTY_TIERS = TierTable.of((0.60, -8), (0.40, -5), compare=ABOVE)


def content_structure(inputs: ScoreInputs) -> float:
    """Reward a well-built post: media, headings, tags, length, sources, rich blocks."""
    post = inputs.post
    score = 0.0

    if post.has_featured_image:
        score += 2

    # A handful of images reads as organic; a wall of them earns less.
    if 1 <= inputs.image_count <= 3:
        score += 2
    elif inputs.image_count >= 4:
        score += 1

    score += HEADING_TIERS.points(inputs.heading_count)
    score += TAG_TIERS.points(inputs.tag_count)
    score += WORD_COUNT_TIERS.points(post.word_count)

    if post.source_links:
        score += 1

    score += DIVERSITY_TIERS.points(inputs.content_diversity)
    return min(score, CONTENT_STRUCTURE_MAX)


def read_quality(inputs: ScoreInputs) -> float:
    """Reward time spent and depth reached by readers."""
    views = inputs.post.unique_view_count
    if views < MIN_UNIQUE_VIEWS_FOR_READ_SIGNALS:
        return 0.0

    score = READ_DURATION_TIERS.points(inputs.avg_read_duration)
    score += READ_PERCENTAGE_TIERS.points(inputs.avg_read_percentage)
    score += QUALIFIED_READ_TIERS.points(inputs.qualified_read_ratio)

    if 0 < inputs.avg_read_duration < 15 and views >= 50:
        score -= 4

    if views >= 20:
        score += BOUNCE_PENALTY_TIERS.points(inputs.bounce_rate)

    return min(score, READ_QUALITY_MAX)


def engagement_quality(inputs: ScoreInputs) -> float:
    """Reward likes, saves, organic discussion and shares relative to the audience."""
    post = inputs.post
    score = 0.0

    if post.unique_view_count > 0:
        score += LIKE_RATIO_TIERS.points(inputs.like_ratio)
        score += SAVE_RATIO_TIERS.points(inputs.save_ratio)

    score += UNIQUE_COMMENTER_TIERS.points(inputs.unique_commenters_count)
    score += REPLY_TIERS.points(inputs.reply_count)
    score += SHARE_TIERS.points(post.share_count)
    score += QUALITY_COMMENT_TIERS.points(inputs.quality_comment_count)

    # Threads full of "nice post" style comments.
    if post.comment_count > 5 and inputs.short_comment_ratio > 0.80:
        score -= 2

    return min(score, ENGAGEMENT_QUALITY_MAX)


def visitor_quality(inputs: ScoreInputs) -> float:
    """Reward readers with established, active, reputable accounts."""
    views = inputs.post.unique_view_count
    if views < MIN_UNIQUE_VIEWS_FOR_READ_SIGNALS:
        return 0.0

    score = VISITOR_PROFILE_TIERS.points(inputs.avg_visitor_profile_score)
    score += VISITOR_AGE_TIERS.points(inputs.avg_visitor_account_age_days)
    score += ACTIVE_VISITOR_TIERS.points(inputs.active_visitor_ratio)
    score += PREMIUM_VIEWER_TIERS.points(inputs.premium_viewer_ratio)

    if inputs.new_account_viewer_ratio > 0.30 and views >= 20:
        score -= 4

    return min(score, VISITOR_QUALITY_MAX)


def author_authority(inputs: ScoreInputs) -> float:
    """Reward reputable, consistent authors and carry new posts through cold start."""
    score = AUTHOR_PROFILE_TIERS.points(inputs.author_profile_score)
    score += TRUST_LEVEL_TIERS.points(inputs.author_trust_level)

    if inputs.author_is_verified:
        score += 2

    if inputs.author_published_count >= AUTHOR_CONSISTENCY_MIN_POSTS:
        score += AUTHOR_CONSISTENCY_TIERS.points(inputs.author_avg_quality_score)

    if inputs.post.unique_view_count < COLD_START_MAX_UNIQUE_VIEWS:
        score += COLD_START_TIERS.points(inputs.author_profile_score)

    score += AUTHOR_SPAM_PENALTY_TIERS.points(inputs.author_spam_score)
    return min(score, AUTHOR_AUTHORITY_MAX)


def economic_signals(inputs: ScoreInputs) -> float:
    """Reward gifts, distinct gifters and coins earned."""
    score = GIFT_COUNT_TIERS.points(inputs.gift_count)
    score += GIFT_DIVERSITY_TIERS.points(inputs.gift_diversity)
    score += COINS_TIERS.points(inputs.post.total_coins_earned)
    return min(score, ECONOMIC_SIGNALS_MAX)


def content_penalties(inputs: ScoreInputs) -> float:
    """Penalize flagged, reported or previously moderated content."""
    post = inputs.post
    penalty = REPORT_PENALTY_TIERS.points(inputs.report_count)

    if post.is_nsfw:
        penalty -= 5
    if inputs.was_in_moderation:
        penalty -= 3
    if inputs.ai_flagged:
        penalty -= 2
    if not post.allow_comments:
        penalty -= 1

    return penalty


def manipulation_penalty(inputs: ScoreInputs) -> float:
    """Penalize engagement that arrives without reading, and clustered traffic."""
    post = inputs.post
    penalty = 0.0

    if post.like_count >= 10:
        penalty += QUICK_LIKER_PENALTY_TIERS.points(inputs.quick_liker_ratio)

    if post.save_count >= 5 and inputs.quick_saver_ratio > 0.50:
        penalty -= 5

    if post.unique_view_count >= 20 and inputs.same_ip_cluster_ratio > 0.30:
        penalty -= 7

    if post.unique_view_count > 50 and inputs.qualified_read_count == 0:
        penalty -= 5

    return penalty


@dataclass(frozen=True)
class QualityBreakdown:
    """Per-dimension quality sub-scores for one post."""

    content_structure: float
    read_quality: float
    engagement_quality: float
    visitor_quality: float
    author_authority: float
    economic_signals: float
    content_penalties: float
    manipulation_penalty: float

    @property
    def total(self) -> float:
        """Clamped composite in [0, 100], rounded to 2 decimals."""
        return clamp_score(
            self.content_structure
            + self.read_quality
            + self.engagement_quality
            + self.visitor_quality
            + self.author_authority
            + self.economic_signals
            + self.content_penalties
            + self.manipulation_penalty
        )


def quality_breakdown(inputs: ScoreInputs) -> QualityBreakdown:
    """Evaluate every quality dimension for ``inputs``."""
    return QualityBreakdown(
        content_structure=content_structure(inputs),
        read_quality=read_quality(inputs),
        engagement_quality=engagement_quality(inputs),
        visitor_quality=visitor_quality(inputs),
        author_authority=author_authority(inputs),
        economic_signals=economic_signals(inputs),
        content_penalties=content_penalties(inputs),
        manipulation_penalty=manipulation_penalty(inputs),
    )


def calculate_quality_score(inputs: ScoreInputs) -> float:
    """Return the quality score of a post in [0, 100]."""
    return quality_breakdown(inputs).total
