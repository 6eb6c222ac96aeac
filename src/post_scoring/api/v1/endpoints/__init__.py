# src/post_scoring/api/v1/endpoints/__init__.py
"""API endpoint modules for version 1."""

from .cron import router as cron_router

__all__ = ["cron_router"]
