"""HTTP client for the Newsdesk API."""

from __future__ import annotations

import logging
from typing import Any, Mapping, Tuple

import requests
from pydantic import ValidationError

from newsdesk.errors import ClientError
from newsdesk.models import Envelope, TransientArticle
from newsdesk.services.feed import DEFAULT_PAGE_SIZE

__all__ = ["DEFAULT_API_URL", "NewsdeskClient"]

logger = logging.getLogger(__name__)

DEFAULT_API_URL = "http://localhost:3001"


class NewsdeskClient:
    """Call the Newsdesk API and return its response envelopes.

    Handled API failures come back as envelopes with ``success`` false; only
    transport failures and bodies that are not envelopes raise
    :class:`ClientError`.
    """

    def __init__(
        self,
        base_url: str = DEFAULT_API_URL,
        *,
        timeout: Tuple[float, float] = (5.0, 30.0),
        session: requests.Session | None = None,
    ) -> None:
        self._base_url = base_url.rstrip("/")
        self._timeout = timeout
        self._session = session if session is not None else requests.Session()

    def _request(self, method: str, path: str, **kwargs: Any) -> Envelope:
        url = f"{self._base_url}{path}"
        try:
            response = self._session.request(method, url, timeout=self._timeout, **kwargs)
        except requests.RequestException as exc:
            logger.error("%s %s failed: %s", method, url, exc)
            raise ClientError(f"Request to {url} failed: {exc}") from exc

        try:
            payload = response.json()
        except ValueError as exc:
            raise ClientError(f"{method} {url} returned a non-JSON body (HTTP {response.status_code})") from exc

        try:
            return Envelope.model_validate(payload)
        except ValidationError as exc:
            raise ClientError(f"{method} {url} returned an unexpected body: {exc}") from exc

    def all_news(self, page: int = 1, page_size: int = DEFAULT_PAGE_SIZE, q: str | None = None) -> Envelope:
        params: dict[str, Any] = {"page": page, "pageSize": page_size}
        if q:
            params["q"] = q
        return self._request("GET", "/api/all-news", params=params)

    def top_headlines(
        self, category: str = "general", page: int = 1, page_size: int = DEFAULT_PAGE_SIZE
    ) -> Envelope:
        params = {"category": category, "page": page, "pageSize": page_size}
        return self._request("GET", "/api/top-headlines", params=params)

    def country_news(self, iso: str, page: int = 1, page_size: int = DEFAULT_PAGE_SIZE) -> Envelope:
        params = {"page": page, "pageSize": page_size}
        return self._request("GET", f"/api/country/{iso}", params=params)

    def save_article(self, article: Mapping[str, Any] | TransientArticle) -> Envelope:
        body = article.to_wire() if isinstance(article, TransientArticle) else dict(article)
        return self._request("POST", "/api/save-article", json=body)

    def saved_articles(self) -> Envelope:
        return self._request("GET", "/api/saved-articles")

    def delete_saved_article(self, article_id: str) -> Envelope:
        return self._request("DELETE", f"/api/saved-articles/{article_id}")
