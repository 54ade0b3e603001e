"""Bookmark service: save, list and delete saved articles."""

from __future__ import annotations

import logging
import threading
from datetime import UTC, datetime, timedelta
from typing import Any, Callable, Iterable, List, Mapping

from pydantic import ValidationError

from newsdesk.errors import ArticleNotFoundError, ArticleValidationError, DuplicateArticleError
from newsdesk.models import ArticleCandidate, SavedArticle
from newsdesk.store import DEFAULT_LIST_LIMIT, AlreadyExists, ArticleStore, new_article_id

__all__ = ["BookmarkService", "SAMPLE_ARTICLES"]

logger = logging.getLogger(__name__)

SAMPLE_ARTICLES: List[dict[str, Any]] = [
    {
        "title": "SpaceX Successfully Launches New Satellite",
        "description": "SpaceX's Falcon 9 rocket successfully launched a new communications satellite into orbit on Thursday.",
        "url": "https://example.com/spacex-launch",
        "urlToImage": "https://images.unsplash.com/photo-1516849841032-87cbac4d88f7",
        "source": {"name": "Space News", "id": "space-news"},
        "author": "John Smith",
        "category": "technology",
    },
    {
        "title": "New AI Breakthrough in Medical Research",
        "description": "Scientists announce major breakthrough in using AI for early disease detection.",
        "url": "https://example.com/ai-medical",
        "urlToImage": "https://images.unsplash.com/photo-1532187863486-abf9dbad1b69",
        "source": {"name": "Tech Daily", "id": "tech-daily"},
        "author": "Sarah Johnson",
        "category": "science",
    },
    {
        "title": "Global Climate Summit Reaches Historic Agreement",
        "description": "World leaders agree on ambitious new climate targets at international summit.",
        "url": "https://example.com/climate-summit",
        "urlToImage": "https://images.unsplash.com/photo-1569163139599-0f4517e36f51",
        "source": {"name": "World News", "id": "world-news"},
        "author": "Michael Brown",
        "category": "environment",
    },
]


def _utcnow() -> datetime:
    return datetime.now(UTC)


def _error_field(loc: tuple) -> str:
    return ".".join(str(part) for part in loc)


class BookmarkService:
    """Business rules around the :class:`ArticleStore`.

    ``clock`` is only injectable for tests.  Saved timestamps handed out by one
    service are strictly increasing, so two saves in the same clock tick still
    list in the order they were made.
    """

    def __init__(
        self,
        store: ArticleStore,
        *,
        clock: Callable[[], datetime] = _utcnow,
        list_limit: int = DEFAULT_LIST_LIMIT,
    ) -> None:
        self._store = store
        self._clock = clock
        self._list_limit = list_limit
        self._lock = threading.Lock()
        self._last_saved_at: datetime | None = None

    @property
    def store(self) -> ArticleStore:
        return self._store

    def _next_saved_at(self) -> datetime:
        with self._lock:
            saved_at = self._clock()
            if self._last_saved_at is not None and saved_at <= self._last_saved_at:
                saved_at = self._last_saved_at + timedelta(microseconds=1)
            self._last_saved_at = saved_at
            return saved_at

    @staticmethod
    def validate(payload: Mapping[str, Any] | ArticleCandidate) -> ArticleCandidate:
        """Parse ``payload`` and ensure the required fields are present.

        Raises :class:`ArticleValidationError` listing every missing or
        malformed field.
        """

        if isinstance(payload, ArticleCandidate):
            candidate = payload
        else:
            try:
                candidate = ArticleCandidate.model_validate(payload)
            except ValidationError as exc:
                fields = sorted({_error_field(error["loc"]) for error in exc.errors()})
                raise ArticleValidationError(
                    fields, message=f"Invalid article fields: {', '.join(fields)}"
                ) from exc

        missing = candidate.missing_fields()
        if missing:
            raise ArticleValidationError(missing)
        return candidate

    def save(self, payload: Mapping[str, Any] | ArticleCandidate) -> SavedArticle:
        """Persist a new bookmark and return it.

        Raises :class:`DuplicateArticleError` when the url is already saved,
        whether that is seen by the lookup or by the store's unique constraint.
        """

        candidate = self.validate(payload)
        url = candidate.url.strip()

        if self._store.find_by_url(url) is not None:
            logger.info("Article already saved: %s", url)
            raise DuplicateArticleError()

        article = SavedArticle(
            **candidate.model_dump(exclude={"url"}),
            url=url,
            id=new_article_id(),
            saved_at=self._next_saved_at(),
        )

        result = self._store.insert_if_absent(article)
        if isinstance(result, AlreadyExists):
            logger.info("Article saved concurrently: %s", url)
            raise DuplicateArticleError()

        logger.info("Article saved: %s (%s)", article.id, url)
        return result.article

    def list(self) -> List[SavedArticle]:
        """Return saved articles newest first; anything past the limit is not returned."""

        articles = self._store.list_all(limit=self._list_limit)
        logger.debug("Found %d saved articles", len(articles))
        return articles

    def delete(self, article_id: str) -> SavedArticle:
        removed = self._store.delete_by_id(article_id)
        if removed is None:
            raise ArticleNotFoundError()
        logger.info("Article deleted: %s", article_id)
        return removed

    def seed(self, payloads: Iterable[Mapping[str, Any]] | None = None) -> List[SavedArticle]:
        """Save sample articles, skipping any url that is already saved."""

        saved: List[SavedArticle] = []
        for payload in payloads if payloads is not None else SAMPLE_ARTICLES:
            data = dict(payload)
            data.setdefault("publishedAt", self._clock().isoformat())
            try:
                saved.append(self.save(data))
            except DuplicateArticleError:
                continue
        return saved

    def clear(self) -> int:
        removed = self._store.clear()
        logger.info("Deleted %d saved articles", removed)
        return removed
