# src/post_scoring/main.py
"""Main entry point for the post scoring API."""

from __future__ import annotations

import logging

from fastapi import FastAPI

from post_scoring.api.v1 import cron_router
from post_scoring.core.settings import settings

logging.basicConfig(
    level=logging.DEBUG if settings.debug else logging.INFO,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)

# Initialize FastAPI app
app = FastAPI(
    title="Post Scoring API",
    description="Periodic quality and spam scoring for published posts",
    version=settings.app_version,
)

# Include API routers
app.include_router(cron_router, prefix="/api/v1")


@app.get("/health")
async def health_check() -> dict[str, str]:
    """Health check endpoint to verify the service is running."""
    return {"status": "ok"}


if __name__ == "__main__":
    import uvicorn
    uvicorn.run("post_scoring.main:app", host="0.0.0.0", port=8000, reload=settings.debug)
