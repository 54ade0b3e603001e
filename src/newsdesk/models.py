"""Domain models used across the application."""

from __future__ import annotations

from datetime import UTC, datetime
from typing import Any, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

__all__ = [
    "ArticleCandidate",
    "ArticleSource",
    "CandidateSource",
    "Envelope",
    "FeedPage",
    "MAX_CATEGORY_LENGTH",
    "MAX_SOURCE_LENGTH",
    "MAX_URL_LENGTH",
    "REQUIRED_FIELDS",
    "SavedArticle",
    "TransientArticle",
]

#: Wire names of the fields a save request must carry.
REQUIRED_FIELDS = ("title", "url", "publishedAt", "source.name")

# Column sizes of the saved_articles table.
MAX_URL_LENGTH = 2048
MAX_SOURCE_LENGTH = 256
MAX_CATEGORY_LENGTH = 128


def _as_utc(value: datetime | None) -> datetime | None:
    # Naive timestamps are taken to be UTC already.
    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value.astimezone(UTC)


class WireModel(BaseModel):
    """Base model speaking the camelCase names used on the wire."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="ignore")

    def to_wire(self) -> dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True)


class ArticleSource(WireModel):
    name: Optional[str] = None
    id: Optional[str] = None


class CandidateSource(ArticleSource):
    name: Optional[str] = Field(default=None, max_length=MAX_SOURCE_LENGTH)
    id: Optional[str] = Field(default=None, max_length=MAX_SOURCE_LENGTH)


class TransientArticle(WireModel):
    """Article as delivered by the news provider; never persisted as-is."""

    model_config = ConfigDict(frozen=True)

    title: Optional[str] = None
    description: Optional[str] = None
    url: Optional[str] = None
    url_to_image: Optional[str] = None
    published_at: Optional[str] = None
    source: Optional[ArticleSource] = None
    author: Optional[str] = None
    content: Optional[str] = None
    category: Optional[str] = None

    def to_wire(self) -> dict[str, Any]:
        # Only the keys the provider actually sent.
        return self.model_dump(mode="json", by_alias=True, exclude_unset=True)


class ArticleCandidate(WireModel):
    """A request to bookmark an article.

    Every field is optional at parse time so that the bookmark service can
    report all missing required fields at once.
    """

    title: Optional[str] = None
    description: Optional[str] = None
    url: Optional[str] = Field(default=None, max_length=MAX_URL_LENGTH)
    url_to_image: Optional[str] = Field(default=None, max_length=MAX_URL_LENGTH)
    published_at: Optional[datetime] = None
    source: Optional[CandidateSource] = None
    author: Optional[str] = None
    content: Optional[str] = None
    category: Optional[str] = Field(default=None, max_length=MAX_CATEGORY_LENGTH)

    @field_validator("published_at")
    @classmethod
    def _assume_utc(cls, value: datetime | None) -> datetime | None:
        return _as_utc(value)

    def missing_fields(self) -> List[str]:
        """Return the wire names of required fields that are absent or blank."""

        missing: List[str] = []
        if not (self.title or "").strip():
            missing.append("title")
        if not (self.url or "").strip():
            missing.append("url")
        if self.published_at is None:
            missing.append("publishedAt")
        if self.source is None or not (self.source.name or "").strip():
            missing.append("source.name")
        return missing


class SavedArticle(WireModel):
    """Article persisted in the article store."""

    model_config = ConfigDict(frozen=True)

    id: str
    title: str
    url: str
    published_at: datetime
    source: ArticleSource
    saved_at: datetime
    description: Optional[str] = None
    url_to_image: Optional[str] = None
    author: Optional[str] = None
    content: Optional[str] = None
    category: Optional[str] = None

    @field_validator("published_at", "saved_at")
    @classmethod
    def _assume_utc(cls, value: datetime) -> datetime:
        return _as_utc(value)


class FeedPage(WireModel):
    """One page of upstream headlines."""

    articles: List[TransientArticle] = Field(default_factory=list)
    total_results: int = 0


class Envelope(BaseModel):
    """Uniform response wrapper returned by every API endpoint."""

    success: bool
    data: Any = None
    message: Optional[str] = None
    error: Any = None
