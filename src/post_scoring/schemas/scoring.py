"""Scoring-related Pydantic schemas."""

from pydantic import BaseModel, Field


class ScoringRunResponse(BaseModel):
    """Schema for the result of a scheduled scoring run."""

    updated: int = Field(..., ge=0, description="Number of posts whose scores were written")
