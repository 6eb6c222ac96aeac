# src/post_scoring/services/__init__.py
"""Scoring services for published posts."""

from .aggregator import SignalAggregator
from .content_analysis import ContentStructure, analyze_content
from .metrics import ScoreInputs, derive_metrics
from .quality import calculate_quality_score, quality_breakdown
from .scheduler import PostScoringJob, RunSummary, ScoreResult
from .spam import calculate_spam_score, spam_breakdown

__all__ = [
    "ContentStructure",
    "PostScoringJob",
    "RunSummary",
    "ScoreInputs",
    "ScoreResult",
    "SignalAggregator",
    "analyze_content",
    "calculate_quality_score",
    "calculate_spam_score",
    "derive_metrics",
    "quality_breakdown",
    "spam_breakdown",
]
