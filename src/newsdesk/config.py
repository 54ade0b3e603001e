"""Runtime configuration for the Newsdesk API."""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Literal, Mapping, Tuple

from pydantic import BaseModel, Field, ValidationError, field_validator

__all__ = [
    "DEFAULT_DATABASE_PATH",
    "DEFAULT_DATABASE_URL",
    "Settings",
    "configure_logging",
]

# Relative to the working directory the server is started from.
DEFAULT_DATABASE_PATH = Path("data") / "newsdesk.db"
DEFAULT_DATABASE_URL = f"sqlite:///{DEFAULT_DATABASE_PATH.as_posix()}"

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"

# Environment variable -> settings field.
_ENV_FIELDS = {
    "NEWS_API_KEY": "news_api_key",
    "NEWS_API_BASE_URL": "news_api_base_url",
    "DATABASE_URL": "database_url",
    "PORT": "port",
    "ENVIRONMENT": "environment",
    "NEWS_API_TIMEOUT": "news_api_timeout",
    "LOG_LEVEL": "log_level",
}


class Settings(BaseModel):
    """Settings resolved from the process environment."""

    news_api_key: str | None = Field(default=None, description="API key for the upstream news provider")
    news_api_base_url: str = Field(default="https://newsapi.org/v2")
    database_url: str = Field(default=DEFAULT_DATABASE_URL, description="SQLAlchemy connection string")
    port: int = Field(default=3001, ge=1, le=65535)
    environment: Literal["development", "production"] = "production"
    news_api_timeout: Tuple[float, float] = Field(
        default=(10.0, 30.0),
        description="Connect and read timeouts, in seconds, for upstream requests",
    )
    log_level: str = "INFO"

    @field_validator("news_api_timeout", mode="before")
    @classmethod
    def _parse_timeout(cls, value: object) -> object:
        if isinstance(value, str):
            parts = [part.strip() for part in value.split(",") if part.strip()]
            if len(parts) == 1:
                return (parts[0], parts[0])
            return tuple(parts)
        return value

    @field_validator("news_api_key", mode="before")
    @classmethod
    def _blank_key_is_missing(cls, value: object) -> object:
        if isinstance(value, str) and not value.strip():
            return None
        return value

    @field_validator("environment", mode="before")
    @classmethod
    def _normalise_environment(cls, value: object) -> object:
        if isinstance(value, str):
            return value.strip().lower()
        return value

    @field_validator("log_level")
    @classmethod
    def _check_log_level(cls, value: str) -> str:
        level = value.strip().upper()
        if not isinstance(logging.getLevelName(level), int):
            raise ValueError(f"Unknown log level: {value}")
        return level

    @property
    def is_development(self) -> bool:
        return self.environment == "development"

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> "Settings":
        """Build settings from ``environ`` (defaults to ``os.environ``)."""

        source = os.environ if environ is None else environ
        data = {field: source[name] for name, field in _ENV_FIELDS.items() if source.get(name)}

        try:
            return cls.model_validate(data)
        except ValidationError as exc:
            names = {field: name for name, field in _ENV_FIELDS.items()}
            invalid = sorted({names.get(str(error["loc"][0]), str(error["loc"][0])) for error in exc.errors()})
            raise ValueError(f"Invalid configuration for {', '.join(invalid)}\n{exc}") from exc


def configure_logging(level: str = "INFO") -> None:
    """Configure root logging for the API and helper scripts."""

    logging.basicConfig(level=level, format=LOG_FORMAT)
