"""Shared fixtures for the Newsdesk test-suite."""

from __future__ import annotations

from types import SimpleNamespace
from typing import Any, Callable, List

import pytest

from newsdesk.store import ArticleStore, create_store

_INVALID_JSON = object()


class DummyResponse:
    """Minimal stand-in for :class:`requests.Response`."""

    def __init__(self, payload: Any = None, status_code: int = 200, *, invalid_json: bool = False) -> None:
        self._payload = _INVALID_JSON if invalid_json else payload
        self.status_code = status_code

    def json(self) -> Any:
        if self._payload is _INVALID_JSON:
            raise ValueError("No JSON object could be decoded")
        return self._payload


class RecordingSession:
    """Fake ``requests`` session that records calls and replays one responder."""

    def __init__(self, responder: Callable[..., DummyResponse]) -> None:
        self.calls: List[SimpleNamespace] = []
        self._responder = responder
        self.closed = False

    def get(self, url: str, **kwargs: Any) -> DummyResponse:
        self.calls.append(SimpleNamespace(method="GET", url=url, **kwargs))
        return self._responder(url, **kwargs)

    def request(self, method: str, url: str, **kwargs: Any) -> DummyResponse:
        self.calls.append(SimpleNamespace(method=method, url=url, **kwargs))
        return self._responder(url, **kwargs)

    def close(self) -> None:
        self.closed = True


def headlines_payload(*articles: dict, total: int | None = None) -> dict:
    return {
        "status": "ok",
        "totalResults": len(articles) if total is None else total,
        "articles": list(articles),
    }


@pytest.fixture
def store() -> ArticleStore:
    return create_store("sqlite://")
