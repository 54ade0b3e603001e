"""ASGI entrypoint for running the Newsdesk API with Uvicorn."""

from __future__ import annotations

import sys
from pathlib import Path

# Ensure the src directory is on the Python path so the newsdesk package can be imported
SRC_PATH = Path(__file__).resolve().parent / "src"
if str(SRC_PATH) not in sys.path:
    sys.path.insert(0, str(SRC_PATH))

from newsdesk.api.app import create_app  # noqa: E402  (import after path setup)
from newsdesk.config import Settings, configure_logging  # noqa: E402

settings = Settings.from_env()
configure_logging(settings.log_level)

app = create_app(settings)

__all__ = ("app",)


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host="0.0.0.0", port=settings.port)
