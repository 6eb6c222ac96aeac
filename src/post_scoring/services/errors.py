"""Exceptions raised by the scoring pipeline.

Each failure is contained at the smallest scope that can absorb it: a single
signal read, a single post evaluation, a single write-back, or the trigger
itself.
"""

from __future__ import annotations


class ScoringError(RuntimeError):
    """Base exception raised for scoring pipeline failures."""


class SignalFetchError(ScoringError):
    """Raised when one bounded signal read for one post fails or times out.

    The aggregator always recovers from this error by substituting the empty
    value for the signal.
    """

    def __init__(self, signal: str, reason: str) -> None:
        super().__init__(f"{signal} read failed: {reason}")
        self.signal = signal


class PostEvaluationError(ScoringError):
    """Raised when deriving metrics or computing scores for one post fails."""

    def __init__(self, post_id: int, reason: str) -> None:
        super().__init__(f"evaluation of post {post_id} failed: {reason}")
        self.post_id = post_id


class WriteBackError(ScoringError):
    """Raised when persisting the scores of one post fails."""

    def __init__(self, post_id: int, reason: str) -> None:
        super().__init__(f"write-back for post {post_id} failed: {reason}")
        self.post_id = post_id


class AuthorizationError(ScoringError):
    """Raised when the scoring trigger is invoked without the shared secret."""
