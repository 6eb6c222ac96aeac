"""Scheduled job endpoints for the scoring API."""

from __future__ import annotations

from fastapi import APIRouter

from post_scoring.api.v1.dependencies import CronAuthDep, ScoringJobDep
from post_scoring.schemas.scoring import ScoringRunResponse

router = APIRouter(prefix="/cron", tags=["cron"])


@router.get("/post-scores", response_model=ScoringRunResponse)
async def run_post_scores(_: CronAuthDep, job: ScoringJobDep) -> ScoringRunResponse:
    """Recompute quality and spam scores for every eligible post.

    Args:
        job: Scoring job bound to the application database

    Returns:
        Number of posts whose scores were written
    """
    summary = await job.run()
    return ScoringRunResponse(updated=summary.updated)
