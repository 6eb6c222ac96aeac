"""Ordered "highest threshold wins" lookups used by the scorers."""

from __future__ import annotations

import operator
from collections.abc import Callable
from dataclasses import dataclass

Comparison = Callable[[float, float], bool]

AT_LEAST: Comparison = operator.ge
ABOVE: Comparison = operator.gt
BELOW: Comparison = operator.lt


@dataclass(frozen=True)
class Tier:
    """One threshold and the points awarded when a value reaches it."""

    threshold: float
    points: float


@dataclass(frozen=True)
class TierTable:
    """Descending list of tiers evaluated with a single comparison.

    Only the first matching tier contributes; tiers never stack within a table.
    Tables used with ``BELOW`` are listed in ascending threshold order instead,
    so the strictest bound is still checked first.
    """

    tiers: tuple[Tier, ...]
    compare: Comparison = AT_LEAST
    # Awarded to a positive value that matched no tier.
    positive_points: float = 0.0

    @classmethod
    def of(
        cls,
        *pairs: tuple[float, float],
        compare: Comparison = AT_LEAST,
        positive_points: float = 0.0,
    ) -> TierTable:
        """Build a table from ``(threshold, points)`` pairs."""
        tiers = tuple(Tier(threshold, points) for threshold, points in pairs)
        return cls(tiers, compare, positive_points)

    def points(self, value: float) -> float:
        """Return the points of the first tier matched by ``value``."""
        for tier in self.tiers:
            if self.compare(value, tier.threshold):
                return tier.points
        return self.positive_points if value > 0 else 0.0


def ratio(numerator: float, denominator: float) -> float:
    """Return ``numerator / denominator`` with 0 for an empty denominator."""
    if denominator <= 0:
        return 0.0
    return numerator / denominator


def clamp_score(value: float, lower: float = 0.0, upper: float = 100.0) -> float:
    """Clamp a composite score to its bounds and round to 2 decimals."""
    return round(max(lower, min(upper, value)), 2)
