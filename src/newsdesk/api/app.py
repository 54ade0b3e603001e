"""FastAPI application factory."""

from __future__ import annotations

import logging
import time
from contextlib import asynccontextmanager
from typing import AsyncIterator

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import HTMLResponse, JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from newsdesk.api.pages import FEED_HTML, SAVED_HTML
from newsdesk.api.routes import dev_router, envelope, router
from newsdesk.config import Settings
from newsdesk.errors import NewsdeskError
from newsdesk.services.bookmarks import BookmarkService
from newsdesk.services.feed import FeedGateway
from newsdesk.store import ArticleStore, create_store

logger = logging.getLogger(__name__)


def _install_handlers(app: FastAPI, settings: Settings) -> None:
    @app.exception_handler(NewsdeskError)
    async def handle_newsdesk_error(request: Request, exc: NewsdeskError) -> JSONResponse:
        if exc.status_code >= 500:
            logger.error("%s %s failed: %s", request.method, request.url.path, exc.message, exc_info=exc)
        else:
            logger.warning("%s %s rejected: %s", request.method, request.url.path, exc.message)
        return envelope(success=False, message=exc.message, error=exc.error, status_code=exc.status_code)

    @app.exception_handler(RequestValidationError)
    async def handle_request_validation(request: Request, exc: RequestValidationError) -> JSONResponse:
        errors = [
            {"loc": [str(part) for part in error["loc"]], "msg": error["msg"], "type": error["type"]}
            for error in exc.errors()
        ]
        logger.warning("%s %s invalid request: %s", request.method, request.url.path, errors)
        return envelope(success=False, message="Invalid request", error=errors, status_code=400)

    @app.exception_handler(StarletteHTTPException)
    async def handle_http_error(request: Request, exc: StarletteHTTPException) -> JSONResponse:
        return envelope(success=False, message=str(exc.detail), status_code=exc.status_code)

    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        started = time.perf_counter()
        try:
            response = await call_next(request)
        except Exception as exc:
            logger.exception("%s %s raised an unhandled error", request.method, request.url.path)
            response = envelope(
                success=False,
                message="Internal server error",
                error=str(exc) if settings.is_development else None,
                status_code=500,
            )
        elapsed_ms = (time.perf_counter() - started) * 1000
        logger.info("%s %s %s %.1fms", request.method, request.url.path, response.status_code, elapsed_ms)
        return response


def create_app(
    settings: Settings | None = None,
    *,
    store: ArticleStore | None = None,
    feed: FeedGateway | None = None,
) -> FastAPI:
    """Build the application.

    ``store`` and ``feed`` default to the database and news provider named by
    ``settings``; tests pass their own.
    """

    settings = settings if settings is not None else Settings.from_env()
    store = store if store is not None else create_store(settings.database_url)
    feed = (
        feed
        if feed is not None
        else FeedGateway(
            settings.news_api_key,
            base_url=settings.news_api_base_url,
            timeout=settings.news_api_timeout,
        )
    )

    if not settings.news_api_key:
        logger.warning("NEWS_API_KEY is not set; news endpoints will report errors")

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        yield
        feed.close()
        store.engine.dispose()

    # /docs, /redoc and /openapi.json are served in development only.
    docs = {} if settings.is_development else {"docs_url": None, "redoc_url": None, "openapi_url": None}
    app = FastAPI(
        title="Newsdesk",
        description="News aggregation and bookmarks API",
        lifespan=lifespan,
        **docs,
    )
    app.state.settings = settings
    app.state.bookmarks = BookmarkService(store)
    app.state.feed = feed

    _install_handlers(app, settings)
    app.include_router(router, prefix="/api")
    if settings.is_development:
        app.include_router(dev_router, prefix="/api")

    @app.get("/", response_class=HTMLResponse)
    async def index() -> str:
        return FEED_HTML

    @app.get("/saved", response_class=HTMLResponse)
    async def saved() -> str:
        return SAVED_HTML

    return app
