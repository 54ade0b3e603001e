"""Newsdesk: headline feed and article bookmarks over a small HTTP API.

Importing the package loads ``.env`` from the working directory so that
``NEWS_API_KEY`` and friends can be kept out of the shell environment.
Variables already set in the environment always win.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Dict, MutableMapping


def _unquote(value: str) -> str:
    if len(value) >= 2 and value[0] == value[-1] and value[0] in "\"'":
        return value[1:-1]
    return value


def read_env_file(env_path: Path) -> Dict[str, str]:
    """Parse ``KEY=value`` lines; comments, blank lines and ``export`` prefixes are allowed."""

    values: Dict[str, str] = {}
    for raw_line in env_path.read_text().splitlines():
        line = raw_line.strip()
        if not line or line.startswith("#") or "=" not in line:
            continue
        if line.startswith("export "):
            line = line[len("export ") :]

        key, value = line.split("=", 1)
        key = key.strip()
        if key:
            values[key] = _unquote(value.strip())
    return values


def _load_local_env(
    env_path: Path | None = None, environ: MutableMapping[str, str] | None = None
) -> None:
    env_path = env_path if env_path is not None else Path.cwd() / ".env"
    environ = environ if environ is not None else os.environ
    if not env_path.is_file():
        return

    for key, value in read_env_file(env_path).items():
        environ.setdefault(key, value)


_load_local_env()

from .config import Settings, configure_logging  # noqa: E402,F401

__all__ = ["Settings", "configure_logging", "read_env_file"]
