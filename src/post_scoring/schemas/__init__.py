"""Pydantic schemas for the post scoring API."""

from .scoring import ScoringRunResponse

__all__ = ["ScoringRunResponse"]
