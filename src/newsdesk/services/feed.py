"""Gateway to the upstream news provider (NewsAPI top headlines)."""

from __future__ import annotations

import logging
from typing import Any, List, Tuple

import requests
from pydantic import ValidationError
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

from newsdesk.errors import UpstreamError
from newsdesk.models import FeedPage, TransientArticle

__all__ = ["DEFAULT_BASE_URL", "DEFAULT_PAGE_SIZE", "FeedGateway", "build_session"]

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "https://newsapi.org/v2"
DEFAULT_PAGE_SIZE = 12
DEFAULT_TIMEOUT = (10.0, 30.0)

DEFAULT_HEADERS = {
    "User-Agent": "newsdesk/0.1 (+https://newsapi.org)",
    "Accept": "application/json",
}


def build_session() -> requests.Session:
    """Return a session that retries idempotent GETs on gateway failures."""

    retry = Retry(
        total=3,
        connect=3,
        read=2,
        backoff_factor=0.5,
        status_forcelist=[502, 503, 504],
        allowed_methods={"GET"},
        raise_on_status=False,
    )
    session = requests.Session()
    session.headers.update(DEFAULT_HEADERS)
    session.mount("https://", HTTPAdapter(max_retries=retry))
    session.mount("http://", HTTPAdapter(max_retries=retry))
    return session


class FeedGateway:
    """Fetch pages of headlines and normalise them to :class:`TransientArticle`.

    Every failure, including transport errors, is reported as
    :class:`UpstreamError`.
    """

    def __init__(
        self,
        api_key: str | None,
        *,
        base_url: str = DEFAULT_BASE_URL,
        timeout: Tuple[float, float] = DEFAULT_TIMEOUT,
        session: requests.Session | None = None,
    ) -> None:
        self._api_key = api_key
        self._base_url = base_url.rstrip("/")
        self._timeout = timeout
        self._session = session if session is not None else build_session()

    def close(self) -> None:
        close = getattr(self._session, "close", None)
        if close is not None:
            close()

    def fetch_page(
        self,
        category: str | None = None,
        country: str | None = None,
        page: int = 1,
        page_size: int = DEFAULT_PAGE_SIZE,
    ) -> FeedPage:
        """Fetch one page of top headlines filtered by ``category`` and ``country``."""

        if not self._api_key:
            raise UpstreamError("News API key is not configured")

        params: dict[str, Any] = {"page": page, "pageSize": page_size}
        if country:
            params["country"] = country
        if category:
            params["category"] = category

        url = f"{self._base_url}/top-headlines"
        logger.info("Fetching headlines from %s with %s", url, params)

        try:
            response = self._session.get(
                url,
                params=params,
                headers={"X-Api-Key": self._api_key},
                timeout=self._timeout,
            )
        except requests.RequestException as exc:
            logger.error("News API request failed: %s", exc)
            raise UpstreamError(error=str(exc)) from exc

        payload = self._decode(response)

        if response.status_code >= 400 or payload.get("status") == "error":
            message = payload.get("message") or f"News API responded with HTTP {response.status_code}"
            logger.error("News API error (%s): %s", response.status_code, message)
            raise UpstreamError(
                message,
                error={"status": response.status_code, "code": payload.get("code")},
            )

        articles = self._normalise_articles(payload.get("articles"))
        total = self._total_results(payload.get("totalResults"), len(articles))
        logger.info("Fetched %d articles (%d total)", len(articles), total)
        return FeedPage(articles=articles, total_results=total)

    @staticmethod
    def _decode(response: requests.Response) -> dict[str, Any]:
        try:
            payload = response.json()
        except ValueError as exc:
            logger.error("News API returned a non-JSON body (HTTP %s)", response.status_code)
            raise UpstreamError(
                "News API returned an invalid response",
                error={"status": response.status_code},
            ) from exc

        if not isinstance(payload, dict):
            raise UpstreamError(
                "News API returned an invalid response",
                error={"status": response.status_code},
            )
        return payload

    @staticmethod
    def _normalise_articles(raw_articles: Any) -> List[TransientArticle]:
        if not isinstance(raw_articles, list):
            return []

        articles: List[TransientArticle] = []
        for item in raw_articles:
            if not isinstance(item, dict):
                logger.warning("Skipping malformed upstream article: %r", item)
                continue
            try:
                articles.append(TransientArticle.model_validate(item))
            except ValidationError as exc:
                logger.warning("Skipping malformed upstream article %s: %s", item.get("url"), exc)
        return articles

    @staticmethod
    def _total_results(value: Any, fallback: int) -> int:
        try:
            return int(value)
        except (TypeError, ValueError):
            return fallback
