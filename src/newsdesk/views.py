"""Client-side views over the Newsdesk API.

:class:`FeedView` drives incremental loading of headlines and
:class:`BookmarkView` lists and deletes saved articles.  Both talk to the API
through a :class:`~newsdesk.client.NewsdeskClient` (or anything with the same
methods) and never retry on their own.
"""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass, replace
from enum import Enum
from typing import List, Literal, Tuple

from pydantic import ValidationError

from newsdesk.client import NewsdeskClient
from newsdesk.errors import ClientError
from newsdesk.models import FeedPage, SavedArticle, TransientArticle
from newsdesk.services.feed import DEFAULT_PAGE_SIZE

__all__ = [
    "BookmarkView",
    "FeedState",
    "FeedStatus",
    "FeedView",
    "Notification",
    "append_articles",
]

logger = logging.getLogger(__name__)

FEED_ERROR_MESSAGE = "Failed to fetch news. Please try again later."
SAVED_ERROR_MESSAGE = "Failed to fetch saved articles. Please try again later."


class FeedStatus(str, Enum):
    IDLE = "idle"
    LOADING = "loading"
    LOADED = "loaded"
    ERRORED = "errored"


@dataclass(frozen=True)
class FeedState:
    status: FeedStatus = FeedStatus.IDLE
    articles: Tuple[TransientArticle, ...] = ()
    page: int = 0
    total_results: int = 0
    error: str | None = None

    @property
    def can_load_more(self) -> bool:
        return self.status is FeedStatus.LOADED and len(self.articles) < self.total_results


def append_articles(state: FeedState, page: FeedPage) -> FeedState:
    """Return the state after ``page`` arrived: articles appended, page advanced."""

    return replace(
        state,
        status=FeedStatus.LOADED,
        articles=state.articles + tuple(page.articles),
        page=state.page + 1,
        total_results=page.total_results,
        error=None,
    )


class FeedView:
    """Incrementally loaded list of upstream headlines.

    ``load`` fetches the first page; ``load_more`` fetches the next one and is
    ignored while a request is in flight, after an error, or once every
    reported result has been loaded.
    """

    def __init__(self, client: NewsdeskClient, *, page_size: int = DEFAULT_PAGE_SIZE) -> None:
        self._client = client
        self._page_size = page_size
        self._state = FeedState()
        self._lock = threading.Lock()

    @property
    def state(self) -> FeedState:
        return self._state

    @property
    def articles(self) -> List[TransientArticle]:
        return list(self._state.articles)

    def load(self) -> FeedState:
        if self._state.status is not FeedStatus.IDLE:
            return self._state
        return self._load_next()

    def load_more(self) -> FeedState:
        if not self._state.can_load_more:
            return self._state
        return self._load_next()

    def _load_next(self) -> FeedState:
        with self._lock:
            if self._state.status is FeedStatus.LOADING:
                return self._state
            previous = self._state
            self._state = replace(previous, status=FeedStatus.LOADING)

        page_number = previous.page + 1
        try:
            envelope = self._client.all_news(page=page_number, page_size=self._page_size)
        except ClientError as exc:
            logger.error("Failed to fetch page %d: %s", page_number, exc)
            self._state = replace(previous, status=FeedStatus.ERRORED, error=FEED_ERROR_MESSAGE)
            return self._state

        if not envelope.success:
            self._state = replace(
                previous, status=FeedStatus.ERRORED, error=envelope.message or "An error occurred"
            )
            return self._state

        try:
            page = FeedPage.model_validate(envelope.data)
        except ValidationError as exc:
            logger.error("Malformed feed page %d: %s", page_number, exc)
            self._state = replace(previous, status=FeedStatus.ERRORED, error=FEED_ERROR_MESSAGE)
            return self._state

        self._state = append_articles(previous, page)
        return self._state


@dataclass(frozen=True)
class Notification:
    message: str
    severity: Literal["success", "error"]


class BookmarkView:
    """List of saved articles with delete support."""

    def __init__(self, client: NewsdeskClient) -> None:
        self._client = client
        self.articles: List[SavedArticle] = []
        self.loaded = False
        self.error: str | None = None
        self.notification: Notification | None = None

    def load(self) -> List[SavedArticle]:
        """Fetch the saved list; later calls return the list already held."""

        if self.loaded:
            return self.articles

        try:
            envelope = self._client.saved_articles()
        except ClientError as exc:
            logger.error("Failed to fetch saved articles: %s", exc)
            self.error = SAVED_ERROR_MESSAGE
            return self.articles

        if not envelope.success:
            self.error = envelope.message or "Failed to fetch saved articles"
            return self.articles

        try:
            self.articles = [SavedArticle.model_validate(item) for item in envelope.data or []]
        except ValidationError as exc:
            logger.error("Malformed saved articles response: %s", exc)
            self.error = SAVED_ERROR_MESSAGE
            return self.articles

        self.loaded = True
        self.error = None
        return self.articles

    def delete(self, article_id: str) -> bool:
        """Delete ``article_id``; the local list only changes once the API confirms."""

        try:
            envelope = self._client.delete_saved_article(article_id)
        except ClientError as exc:
            logger.error("Failed to delete article %s: %s", article_id, exc)
            envelope = None

        if envelope is None or not envelope.success:
            self.notification = Notification("Failed to delete article", "error")
            return False

        self.articles = [article for article in self.articles if article.id != article_id]
        self.notification = Notification("Article deleted successfully", "success")
        return True

    def dismiss_notification(self) -> None:
        self.notification = None
