"""API routes exposing the news feed and the bookmark service."""

from __future__ import annotations

import logging
from typing import Annotated, Any, Dict

from fastapi import APIRouter, Body, Depends, Query, Request
from fastapi.concurrency import run_in_threadpool
from fastapi.responses import JSONResponse

from newsdesk.errors import ArticleValidationError
from newsdesk.models import REQUIRED_FIELDS, FeedPage
from newsdesk.services.bookmarks import BookmarkService
from newsdesk.services.feed import DEFAULT_PAGE_SIZE, FeedGateway

logger = logging.getLogger(__name__)

router = APIRouter()

#: Routes only mounted in the development environment.
dev_router = APIRouter()

DEFAULT_COUNTRY = "us"
ALL_NEWS_CATEGORY = "technology"
DEFAULT_CATEGORY = "general"
MAX_PAGE_SIZE = 100


def envelope(
    data: Any = None,
    *,
    success: bool = True,
    message: str | None = None,
    error: Any = None,
    status_code: int = 200,
) -> JSONResponse:
    """Wrap ``data`` in the uniform ``{success, data, message, error}`` envelope."""

    content: Dict[str, Any] = {"success": success}
    for key, value in (("data", data), ("message", message), ("error", error)):
        if value is not None:
            content[key] = value
    return JSONResponse(status_code=status_code, content=content)


def get_bookmarks(request: Request) -> BookmarkService:
    return request.app.state.bookmarks


def get_feed(request: Request) -> FeedGateway:
    return request.app.state.feed


BookmarksDep = Annotated[BookmarkService, Depends(get_bookmarks)]
FeedDep = Annotated[FeedGateway, Depends(get_feed)]
PageQuery = Annotated[int, Query(ge=1)]
PageSizeQuery = Annotated[int, Query(alias="pageSize", ge=1, le=MAX_PAGE_SIZE)]


def _feed_data(result: FeedPage, page: int) -> Dict[str, Any]:
    return {
        "articles": [article.to_wire() for article in result.articles],
        "totalResults": result.total_results,
        "currentPage": page,
    }


async def _fetch_feed(
    feed: FeedGateway, *, category: str | None, country: str | None, page: int, page_size: int
) -> JSONResponse:
    result = await run_in_threadpool(
        feed.fetch_page,
        category=category,
        country=country,
        page=page,
        page_size=page_size,
    )
    return envelope(_feed_data(result, page))


@router.get("/all-news")
async def all_news(
    feed: FeedDep,
    page: PageQuery = 1,
    page_size: PageSizeQuery = DEFAULT_PAGE_SIZE,
    q: str | None = None,
) -> JSONResponse:
    """Return a page of technology headlines."""

    # Search is not supported upstream for this feed; the query is only recorded.
    logger.info("Fetching all news: page=%s pageSize=%s q=%s", page, page_size, q)
    return await _fetch_feed(
        feed, category=ALL_NEWS_CATEGORY, country=DEFAULT_COUNTRY, page=page, page_size=page_size
    )


@router.get("/top-headlines")
async def top_headlines(
    feed: FeedDep,
    category: str = DEFAULT_CATEGORY,
    page: PageQuery = 1,
    page_size: PageSizeQuery = DEFAULT_PAGE_SIZE,
) -> JSONResponse:
    """Return a page of headlines for ``category``."""

    return await _fetch_feed(
        feed,
        category=category.strip().lower() or DEFAULT_CATEGORY,
        country=DEFAULT_COUNTRY,
        page=page,
        page_size=page_size,
    )


@router.get("/country/{iso}")
async def country_news(
    iso: str,
    feed: FeedDep,
    page: PageQuery = 1,
    page_size: PageSizeQuery = DEFAULT_PAGE_SIZE,
) -> JSONResponse:
    """Return a page of headlines for the country code ``iso``."""

    return await _fetch_feed(feed, category=None, country=iso.strip().lower(), page=page, page_size=page_size)


@router.post("/save-article")
async def save_article(
    bookmarks: BookmarksDep,
    payload: Dict[str, Any] | None = Body(default=None),
) -> JSONResponse:
    """Bookmark an article; duplicates are rejected by url."""

    if payload is None:
        raise ArticleValidationError(list(REQUIRED_FIELDS))

    logger.info("Attempting to save article: %s", payload.get("url"))
    saved = await run_in_threadpool(bookmarks.save, payload)
    return envelope(saved.to_wire(), message="Article saved successfully", status_code=201)


@router.get("/saved-articles")
async def saved_articles(bookmarks: BookmarksDep) -> JSONResponse:
    """Return saved articles, newest first."""

    articles = await run_in_threadpool(bookmarks.list)
    return envelope([article.to_wire() for article in articles])


@router.delete("/saved-articles/{article_id}")
async def delete_saved_article(article_id: str, bookmarks: BookmarksDep) -> JSONResponse:
    """Delete the saved article identified by ``article_id``."""

    removed = await run_in_threadpool(bookmarks.delete, article_id)
    return envelope(removed.to_wire(), message="Article deleted successfully")


@router.get("/health")
async def health(bookmarks: BookmarksDep) -> JSONResponse:
    """Report whether the API and its article store are reachable."""

    await run_in_threadpool(bookmarks.store.ping)
    return envelope({"status": "ok", "database": "ok"}, message="News aggregator API is running")


@dev_router.post("/add-test-articles")
async def add_test_articles(bookmarks: BookmarksDep) -> JSONResponse:
    """Save the built-in sample articles."""

    saved = await run_in_threadpool(bookmarks.seed)
    return envelope([article.to_wire() for article in saved], message="Test articles added successfully")


@dev_router.delete("/delete-all-articles")
async def delete_all_articles(bookmarks: BookmarksDep) -> JSONResponse:
    """Remove every saved article."""

    removed = await run_in_threadpool(bookmarks.clear)
    return envelope({"deletedCount": removed}, message=f"Deleted {removed} articles")
