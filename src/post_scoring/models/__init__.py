# src/post_scoring/models/__init__.py
"""SQLAlchemy models for the post scoring job."""

from .engagement import Bookmark, Comment, Gift, Like, PostView
from .moderation import ModerationLog, Report
from .post import Post, PostTag
from .profile import Profile

__all__ = [
    "Bookmark", "Comment", "Gift", "Like", "PostView",
    "ModerationLog", "Report",
    "Post", "PostTag",
    "Profile",
]
