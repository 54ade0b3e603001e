"""Tests for :mod:`newsdesk.config`."""

from __future__ import annotations

import pytest

from newsdesk import _load_local_env, read_env_file
from newsdesk.config import DEFAULT_DATABASE_URL, Settings


def test_defaults_when_environment_is_empty() -> None:
    settings = Settings.from_env({})

    assert settings.news_api_key is None
    assert settings.database_url == DEFAULT_DATABASE_URL
    assert settings.database_url == "sqlite:///data/newsdesk.db"
    assert settings.port == 3001
    assert settings.environment == "production"
    assert settings.news_api_timeout == (10.0, 30.0)
    assert not settings.is_development


def test_values_are_read_from_environment() -> None:
    settings = Settings.from_env(
        {
            "NEWS_API_KEY": "abc",
            "DATABASE_URL": "sqlite://",
            "PORT": "8080",
            "ENVIRONMENT": "Development",
            "NEWS_API_TIMEOUT": "3, 15",
            "LOG_LEVEL": "debug",
        }
    )

    assert settings.news_api_key == "abc"
    assert settings.database_url == "sqlite://"
    assert settings.port == 8080
    assert settings.is_development
    assert settings.news_api_timeout == (3.0, 15.0)
    assert settings.log_level == "DEBUG"


def test_single_timeout_applies_to_connect_and_read() -> None:
    assert Settings.from_env({"NEWS_API_TIMEOUT": "5"}).news_api_timeout == (5.0, 5.0)


def test_blank_api_key_is_treated_as_missing() -> None:
    assert Settings(news_api_key="  ").news_api_key is None


def test_invalid_values_name_the_variable() -> None:
    with pytest.raises(ValueError, match="PORT"):
        Settings.from_env({"PORT": "not-a-port"})

    with pytest.raises(ValueError, match="ENVIRONMENT"):
        Settings.from_env({"ENVIRONMENT": "staging"})


def test_env_file_values_are_unquoted(tmp_path) -> None:
    env_file = tmp_path / ".env"
    env_file.write_text(
        "# local settings\n"
        'NEWS_API_KEY="abc123"\n'
        "export DATABASE_URL='sqlite://'\n"
        "LOG_LEVEL=debug\n"
        'TITLE="it\'s"\n'
        "not a variable\n"
    )

    assert read_env_file(env_file) == {
        "NEWS_API_KEY": "abc123",
        "DATABASE_URL": "sqlite://",
        "LOG_LEVEL": "debug",
        "TITLE": "it's",
    }


def test_env_file_does_not_override_existing_variables(tmp_path) -> None:
    env_file = tmp_path / ".env"
    env_file.write_text("PORT=9000\nENVIRONMENT=development\n")
    environ = {"PORT": "8080"}

    _load_local_env(env_file, environ)

    assert environ == {"PORT": "8080", "ENVIRONMENT": "development"}


def test_missing_env_file_is_ignored(tmp_path) -> None:
    environ: dict = {}

    _load_local_env(tmp_path / ".env", environ)

    assert environ == {}
