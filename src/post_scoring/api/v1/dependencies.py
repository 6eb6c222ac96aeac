"""Shared API dependencies for the scheduled trigger."""

import secrets
from typing import Annotated

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from post_scoring.core.settings import settings
from post_scoring.db.session import SessionLocal
from post_scoring.services.errors import AuthorizationError
from post_scoring.services.scheduler import PostScoringJob

# HTTP Bearer scheme carrying the shared cron secret; missing headers are handled below.
bearer_scheme = HTTPBearer(auto_error=False)


def check_cron_secret(supplied: str | None, expected: str | None) -> None:
    """Validate a supplied trigger secret against the configured one.

    Args:
        supplied: Secret presented by the caller, if any
        expected: Secret configured for the deployment, if any

    Raises:
        AuthorizationError: If no secret is configured or the secrets differ
    """
    if not expected:
        raise AuthorizationError("Cron secret is not configured")
    if supplied is None or not secrets.compare_digest(supplied.encode(), expected.encode()):
        raise AuthorizationError("Invalid cron secret")


def require_cron_secret(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(bearer_scheme)],
) -> None:
    """Reject the request before any work starts unless it carries the cron secret.

    Raises:
        HTTPException: 401 if the secret is missing or wrong
    """
    supplied = credentials.credentials if credentials else None
    try:
        check_cron_secret(supplied, settings.cron_secret)
    except AuthorizationError as err:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Unauthorized",
            headers={"WWW-Authenticate": "Bearer"},
        ) from err


def get_scoring_job() -> PostScoringJob:
    """Build the scoring job bound to the application database."""
    return PostScoringJob(SessionLocal, limits=settings.scoring_limits)


CronAuthDep = Annotated[None, Depends(require_cron_secret)]
ScoringJobDep = Annotated[PostScoringJob, Depends(get_scoring_job)]
