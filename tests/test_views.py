"""Tests for the feed and bookmark views in :mod:`newsdesk.views`."""

from __future__ import annotations

from types import SimpleNamespace

from newsdesk.errors import ClientError
from newsdesk.models import Envelope, FeedPage, TransientArticle
from newsdesk.views import (
    FEED_ERROR_MESSAGE,
    BookmarkView,
    FeedState,
    FeedStatus,
    FeedView,
    Notification,
    append_articles,
)


def feed_envelope(*urls: str, total: int, page: int = 1) -> Envelope:
    return Envelope(
        success=True,
        data={
            "articles": [{"title": url, "url": url} for url in urls],
            "totalResults": total,
            "currentPage": page,
        },
    )


def saved_item(article_id: str, url: str) -> dict:
    return {
        "id": article_id,
        "title": url,
        "url": url,
        "publishedAt": "2024-01-01T00:00:00Z",
        "source": {"name": "S"},
        "savedAt": "2024-02-01T00:00:00Z",
    }


class FakeFeedClient:
    def __init__(self, *responses) -> None:
        self.responses = list(responses)
        self.requests: list[tuple[int, int]] = []

    def all_news(self, page: int = 1, page_size: int = 12) -> Envelope:
        self.requests.append((page, page_size))
        response = self.responses.pop(0)
        if isinstance(response, Exception):
            raise response
        return response


def test_append_articles_is_pure() -> None:
    state = FeedState(status=FeedStatus.LOADING, articles=(TransientArticle(url="a"),), page=1, total_results=3)
    page = FeedPage(articles=[TransientArticle(url="b")], total_results=3)

    new_state = append_articles(state, page)

    assert [article.url for article in new_state.articles] == ["a", "b"]
    assert new_state.page == 2
    assert new_state.status is FeedStatus.LOADED
    assert [article.url for article in state.articles] == ["a"]
    assert state.page == 1


def test_feed_view_loads_pages_incrementally_until_total() -> None:
    client = FakeFeedClient(
        feed_envelope("a", "b", total=3),
        feed_envelope("c", total=3, page=2),
    )
    view = FeedView(client, page_size=2)

    first = view.load()
    assert first.status is FeedStatus.LOADED
    assert first.can_load_more

    second = view.load_more()
    assert [article.url for article in second.articles] == ["a", "b", "c"]
    assert not second.can_load_more

    assert view.load_more() is second
    assert client.requests == [(1, 2), (2, 2)]


def test_feed_view_load_only_fetches_first_page_once() -> None:
    client = FakeFeedClient(feed_envelope("a", total=5))
    view = FeedView(client)

    view.load()
    view.load()

    assert client.requests == [(1, 12)]


def test_feed_view_error_envelope_is_terminal() -> None:
    client = FakeFeedClient(
        feed_envelope("a", total=5),
        Envelope(success=False, message="Upstream down"),
    )
    view = FeedView(client)
    view.load()

    state = view.load_more()

    assert state.status is FeedStatus.ERRORED
    assert state.error == "Upstream down"
    assert [article.url for article in state.articles] == ["a"]
    assert view.load_more() is state
    assert len(client.requests) == 2


def test_feed_view_transport_failure_is_errored() -> None:
    view = FeedView(FakeFeedClient(ClientError("connection refused")))

    state = view.load()

    assert state.status is FeedStatus.ERRORED
    assert state.error == FEED_ERROR_MESSAGE


def test_feed_view_ignores_load_more_while_request_in_flight() -> None:
    observed: list[FeedState] = []

    class ReentrantClient(FakeFeedClient):
        def all_news(self, page: int = 1, page_size: int = 12) -> Envelope:
            if page == 2:
                observed.append(view.load_more())
                observed.append(view.state)
            return super().all_news(page=page, page_size=page_size)

    client = ReentrantClient(feed_envelope("a", total=3), feed_envelope("b", total=3, page=2))
    view = FeedView(client)
    view.load()

    view.load_more()

    assert observed[1].status is FeedStatus.LOADING
    assert client.requests == [(1, 12), (2, 12)]
    assert [article.url for article in view.articles] == ["a", "b"]


def test_feed_view_articles_is_a_copy_of_loaded_articles() -> None:
    view = FeedView(FakeFeedClient(feed_envelope("a", "b", total=2)))
    assert view.articles == []

    view.load()
    articles = view.articles
    articles.clear()

    assert [article.url for article in view.articles] == ["a", "b"]


def test_bookmark_view_loads_saved_articles() -> None:
    client = SimpleNamespace(
        saved_articles=lambda: Envelope(success=True, data=[saved_item("2", "http://b"), saved_item("1", "http://a")])
    )
    view = BookmarkView(client)

    articles = view.load()

    assert [article.id for article in articles] == ["2", "1"]
    assert view.loaded


def test_bookmark_view_load_failure_sets_error() -> None:
    client = SimpleNamespace(saved_articles=lambda: Envelope(success=False, message="Article store is unavailable"))
    view = BookmarkView(client)

    assert view.load() == []
    assert view.error == "Article store is unavailable"
    assert not view.loaded


def test_bookmark_view_delete_removes_after_confirmation() -> None:
    deleted: list[str] = []

    def delete_saved_article(article_id: str) -> Envelope:
        deleted.append(article_id)
        return Envelope(success=True, data=saved_item(article_id, "http://a"))

    client = SimpleNamespace(
        saved_articles=lambda: Envelope(success=True, data=[saved_item("2", "http://b"), saved_item("1", "http://a")]),
        delete_saved_article=delete_saved_article,
    )
    view = BookmarkView(client)
    view.load()

    assert view.delete("1") is True
    assert [article.id for article in view.articles] == ["2"]
    assert view.notification == Notification("Article deleted successfully", "success")
    assert deleted == ["1"]


def test_bookmark_view_failed_delete_keeps_list() -> None:
    def refuse(article_id: str) -> Envelope:
        raise ClientError("connection refused")

    client = SimpleNamespace(
        saved_articles=lambda: Envelope(success=True, data=[saved_item("1", "http://a")]),
        delete_saved_article=refuse,
    )
    view = BookmarkView(client)
    view.load()

    assert view.delete("1") is False
    assert [article.id for article in view.articles] == ["1"]
    assert view.notification == Notification("Failed to delete article", "error")

    view.dismiss_notification()
    assert view.notification is None


def test_bookmark_view_not_found_delete_keeps_list() -> None:
    client = SimpleNamespace(
        saved_articles=lambda: Envelope(success=True, data=[saved_item("1", "http://a")]),
        delete_saved_article=lambda article_id: Envelope(success=False, message="Article not found"),
    )
    view = BookmarkView(client)
    view.load()

    assert view.delete("missing") is False
    assert len(view.articles) == 1
    assert view.notification.severity == "error"
