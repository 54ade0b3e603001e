"""Persistent store for bookmarked articles.

Articles live in a single ``saved_articles`` table.  The ``UNIQUE`` constraint
on ``url`` is what guarantees at most one bookmark per article: concurrent
saves of the same url may both pass a lookup, but only one insert commits.
"""

from __future__ import annotations

import logging
from contextlib import contextmanager
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import Iterator, List, Union
from uuid import uuid4

from sqlalchemy import DateTime, Index, String, Text, UniqueConstraint, create_engine, delete, select, text
from sqlalchemy.engine import Engine, make_url
from sqlalchemy.exc import DBAPIError, IntegrityError
from sqlalchemy.orm import DeclarativeBase, Mapped, Session, mapped_column, sessionmaker
from sqlalchemy.pool import StaticPool

from newsdesk.errors import ConflictError, ServiceUnavailableError
from newsdesk.models import MAX_CATEGORY_LENGTH, MAX_SOURCE_LENGTH, MAX_URL_LENGTH, ArticleSource, SavedArticle

__all__ = [
    "AlreadyExists",
    "ArticleRecord",
    "ArticleStore",
    "DEFAULT_LIST_LIMIT",
    "InsertResult",
    "Inserted",
    "create_store",
    "new_article_id",
]

logger = logging.getLogger(__name__)

#: Maximum number of bookmarks returned by :meth:`ArticleStore.list_all`.
DEFAULT_LIST_LIMIT = 100


def new_article_id() -> str:
    return uuid4().hex


class Base(DeclarativeBase):
    pass


class ArticleRecord(Base):
    """Row in the ``saved_articles`` table."""

    __tablename__ = "saved_articles"
    __table_args__ = (
        UniqueConstraint("url", name="uq_saved_articles_url"),
        Index("ix_saved_articles_saved_at", "saved_at"),
    )

    id: Mapped[str] = mapped_column(String(32), primary_key=True, default=new_article_id)
    title: Mapped[str] = mapped_column(Text, nullable=False)
    url: Mapped[str] = mapped_column(String(MAX_URL_LENGTH), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    url_to_image: Mapped[str | None] = mapped_column(String(MAX_URL_LENGTH), nullable=True)
    published_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    source_name: Mapped[str] = mapped_column(String(MAX_SOURCE_LENGTH), nullable=False)
    source_id: Mapped[str | None] = mapped_column(String(MAX_SOURCE_LENGTH), nullable=True)
    author: Mapped[str | None] = mapped_column(Text, nullable=True)
    content: Mapped[str | None] = mapped_column(Text, nullable=True)
    category: Mapped[str | None] = mapped_column(String(MAX_CATEGORY_LENGTH), nullable=True)
    saved_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)

    @classmethod
    def from_model(cls, article: SavedArticle) -> "ArticleRecord":
        return cls(
            id=article.id,
            title=article.title,
            url=article.url,
            description=article.description,
            url_to_image=article.url_to_image,
            published_at=article.published_at,
            source_name=article.source.name,
            source_id=article.source.id,
            author=article.author,
            content=article.content,
            category=article.category,
            saved_at=article.saved_at,
        )

    def to_model(self) -> SavedArticle:
        return SavedArticle(
            id=self.id,
            title=self.title,
            url=self.url,
            description=self.description,
            url_to_image=self.url_to_image,
            published_at=self.published_at,
            source=ArticleSource(name=self.source_name, id=self.source_id),
            author=self.author,
            content=self.content,
            category=self.category,
            saved_at=self.saved_at,
        )


@dataclass(frozen=True)
class Inserted:
    """The article was stored."""

    article: SavedArticle


@dataclass(frozen=True)
class AlreadyExists:
    """An article with the same url is already stored; nothing was written."""

    url: str


InsertResult = Union[Inserted, AlreadyExists]


class ArticleStore:
    """SQLAlchemy backed collection of saved articles keyed by url."""

    def __init__(self, engine: Engine) -> None:
        self._engine = engine
        self._session_factory = sessionmaker(engine, expire_on_commit=False)

    @property
    def engine(self) -> Engine:
        return self._engine

    @contextmanager
    def _session(self) -> Iterator[Session]:
        try:
            with self._session_factory() as session:
                yield session
        except IntegrityError:
            raise
        except DBAPIError as exc:
            logger.error("Article store error: %s", exc.orig)
            raise ServiceUnavailableError(error=str(exc.orig)) from exc

    def create_schema(self) -> None:
        """Create the ``saved_articles`` table if it does not exist yet."""

        try:
            Base.metadata.create_all(self._engine)
        except DBAPIError as exc:
            raise ServiceUnavailableError(error=str(exc.orig)) from exc

    def ping(self) -> None:
        """Raise :class:`ServiceUnavailableError` unless the database answers."""

        with self._session() as session:
            session.execute(text("SELECT 1"))

    def find_by_url(self, url: str) -> SavedArticle | None:
        with self._session() as session:
            record = session.scalars(select(ArticleRecord).where(ArticleRecord.url == url)).first()
            return record.to_model() if record is not None else None

    def insert_if_absent(self, article: SavedArticle) -> InsertResult:
        """Store ``article`` unless its url is already present.

        The decision is made by the database's unique constraint within a
        single transaction, so the result is correct under concurrent saves.
        """

        with self._session() as session:
            session.add(ArticleRecord.from_model(article))
            try:
                session.commit()
            except IntegrityError:
                session.rollback()
                logger.info("Article url already stored: %s", article.url)
                return AlreadyExists(url=article.url)
        return Inserted(article=article)

    def insert(self, article: SavedArticle) -> SavedArticle:
        """Store ``article`` or raise :class:`ConflictError` if its url exists."""

        result = self.insert_if_absent(article)
        if isinstance(result, AlreadyExists):
            raise ConflictError(result.url)
        return result.article

    def list_all(self, limit: int = DEFAULT_LIST_LIMIT) -> List[SavedArticle]:
        """Return saved articles, newest ``saved_at`` first, at most ``limit`` rows."""

        statement = select(ArticleRecord).order_by(ArticleRecord.saved_at.desc()).limit(limit)
        with self._session() as session:
            return [record.to_model() for record in session.scalars(statement)]

    def delete_by_id(self, article_id: str) -> SavedArticle | None:
        """Remove the article with ``article_id`` and return it, or ``None``."""

        with self._session() as session:
            record = session.get(ArticleRecord, article_id)
            if record is None:
                return None
            removed = record.to_model()
            session.delete(record)
            session.commit()
            return removed

    def clear(self) -> int:
        """Delete every saved article and return how many were removed."""

        with self._session() as session:
            result = session.execute(delete(ArticleRecord))
            session.commit()
            return result.rowcount or 0


def create_store(database_url: str, *, echo: bool = False) -> ArticleStore:
    """Create an :class:`ArticleStore` for ``database_url`` and ensure its schema."""

    url = make_url(database_url)
    engine_kwargs: dict = {"echo": echo}

    if url.get_backend_name() == "sqlite":
        engine_kwargs["connect_args"] = {"check_same_thread": False}
        if url.database in (None, "", ":memory:"):
            # One shared connection, otherwise every request gets an empty database.
            engine_kwargs["poolclass"] = StaticPool
        else:
            Path(url.database).parent.mkdir(parents=True, exist_ok=True)

    engine = create_engine(url, **engine_kwargs)
    store = ArticleStore(engine)
    store.create_schema()
    logger.info("Article store ready at %s", url.render_as_string(hide_password=True))
    return store
