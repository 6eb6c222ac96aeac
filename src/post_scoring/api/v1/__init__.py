# src/post_scoring/api/v1/__init__.py
"""Version 1 API endpoints."""

from .endpoints import cron_router

__all__ = ["cron_router"]
