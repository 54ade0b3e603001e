"""Tests for :mod:`newsdesk.store`."""

from __future__ import annotations

from datetime import UTC, datetime, timedelta

import pytest
from sqlalchemy import create_engine

from newsdesk.errors import ConflictError, ServiceUnavailableError
from newsdesk.models import ArticleSource, SavedArticle
from newsdesk.store import AlreadyExists, ArticleStore, Inserted, new_article_id

BASE_TIME = datetime(2024, 5, 1, 12, 0, tzinfo=UTC)


def make_article(url: str, *, saved_at: datetime = BASE_TIME, title: str = "Title") -> SavedArticle:
    return SavedArticle(
        id=new_article_id(),
        title=title,
        url=url,
        published_at=datetime(2024, 1, 1, tzinfo=UTC),
        source=ArticleSource(name="Source", id="source"),
        saved_at=saved_at,
        author="Author",
    )


def test_insert_then_find_by_url(store: ArticleStore) -> None:
    article = make_article("https://example.com/a")

    stored = store.insert(article)

    found = store.find_by_url("https://example.com/a")
    assert found is not None
    assert found.id == stored.id
    assert found.source.name == "Source"
    assert found.saved_at == article.saved_at
    assert store.find_by_url("https://example.com/missing") is None


def test_insert_rejects_duplicate_url(store: ArticleStore) -> None:
    store.insert(make_article("https://example.com/a"))

    with pytest.raises(ConflictError):
        store.insert(make_article("https://example.com/a", title="Other"))

    articles = store.list_all()
    assert len(articles) == 1
    assert articles[0].title == "Title"


def test_insert_if_absent_returns_tagged_result(store: ArticleStore) -> None:
    first = make_article("https://example.com/a")

    assert store.insert_if_absent(first) == Inserted(article=first)
    assert store.insert_if_absent(make_article("https://example.com/a")) == AlreadyExists(
        url="https://example.com/a"
    )
    assert len(store.list_all()) == 1


def test_list_all_is_newest_saved_first(store: ArticleStore) -> None:
    store.insert(make_article("https://example.com/old", saved_at=BASE_TIME))
    store.insert(make_article("https://example.com/newest", saved_at=BASE_TIME + timedelta(hours=2)))
    store.insert(make_article("https://example.com/middle", saved_at=BASE_TIME + timedelta(hours=1)))

    urls = [article.url for article in store.list_all()]

    assert urls == [
        "https://example.com/newest",
        "https://example.com/middle",
        "https://example.com/old",
    ]


def test_list_all_caps_results_at_one_hundred(store: ArticleStore) -> None:
    for index in range(105):
        store.insert(make_article(f"https://example.com/{index}", saved_at=BASE_TIME + timedelta(seconds=index)))

    articles = store.list_all()

    assert len(articles) == 100
    assert articles[0].url == "https://example.com/104"
    assert store.list_all(limit=5)[-1].url == "https://example.com/100"


def test_delete_by_id_removes_article(store: ArticleStore) -> None:
    stored = store.insert(make_article("https://example.com/a"))

    removed = store.delete_by_id(stored.id)

    assert removed is not None
    assert removed.url == "https://example.com/a"
    assert store.list_all() == []
    assert store.delete_by_id(stored.id) is None


def test_delete_allows_saving_the_url_again(store: ArticleStore) -> None:
    stored = store.insert(make_article("https://example.com/a"))
    store.delete_by_id(stored.id)

    assert isinstance(store.insert_if_absent(make_article("https://example.com/a")), Inserted)


def test_clear_returns_number_of_rows(store: ArticleStore) -> None:
    store.insert(make_article("https://example.com/a"))
    store.insert(make_article("https://example.com/b"))

    assert store.clear() == 2
    assert store.list_all() == []


def test_unreachable_database_is_service_unavailable() -> None:
    store = ArticleStore(create_engine("sqlite:////nonexistent-newsdesk-dir/nested/newsdesk.db"))

    with pytest.raises(ServiceUnavailableError):
        store.list_all()

    with pytest.raises(ServiceUnavailableError):
        store.ping()
