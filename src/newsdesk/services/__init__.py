"""Service layer entry points for Newsdesk."""

from __future__ import annotations

from .bookmarks import BookmarkService  # noqa: F401
from .feed import FeedGateway  # noqa: F401

__all__ = ["BookmarkService", "FeedGateway"]
