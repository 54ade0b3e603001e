"""Error taxonomy shared by the store, the services and the API boundary."""

from __future__ import annotations

from typing import Any

__all__ = [
    "ArticleNotFoundError",
    "ArticleValidationError",
    "ClientError",
    "ConflictError",
    "DuplicateArticleError",
    "NewsdeskError",
    "ServiceUnavailableError",
    "UpstreamError",
]


class NewsdeskError(Exception):
    """Base class for handled failures.

    ``status_code`` is the HTTP status the API boundary responds with and
    ``error`` an optional machine-oriented detail placed in the envelope.
    """

    status_code = 500
    default_message = "Internal server error"

    def __init__(self, message: str | None = None, *, error: Any = None) -> None:
        self.message = message or self.default_message
        self.error = error
        super().__init__(self.message)


class ArticleValidationError(NewsdeskError):
    """A save request is missing required fields or carries invalid ones."""

    status_code = 400
    default_message = "Article is missing required fields"

    def __init__(self, fields: list[str], message: str | None = None) -> None:
        self.fields = list(fields)
        super().__init__(
            message or f"Missing required fields: {', '.join(self.fields)}",
            error={"fields": self.fields},
        )


class DuplicateArticleError(NewsdeskError):
    status_code = 400
    default_message = "Article already saved"


class ArticleNotFoundError(NewsdeskError):
    status_code = 404
    default_message = "Article not found"


class UpstreamError(NewsdeskError):
    """The news provider failed or reported an error."""

    status_code = 500
    default_message = "Error fetching news. Please try again later."


class ServiceUnavailableError(NewsdeskError):
    """The article store cannot be reached."""

    status_code = 503
    default_message = "Article store is unavailable"


class ConflictError(NewsdeskError):
    """The store rejected an insert because the url is already present."""

    status_code = 409
    default_message = "Article url already stored"

    def __init__(self, url: str) -> None:
        self.url = url
        super().__init__(f"Article url already stored: {url}")


class ClientError(Exception):
    """Raised by :class:`newsdesk.client.NewsdeskClient` on transport failures."""
