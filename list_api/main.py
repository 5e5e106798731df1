"""Main entry point for list-api: runs the FastAPI server under uvicorn."""

from __future__ import annotations

import uvicorn

from list_api.core.settings import get_app_settings, get_logging_settings


def main() -> None:
    """Run the FastAPI application server with settings from configuration."""
    settings = get_app_settings()
    log_settings = get_logging_settings()

    uvicorn.run(
        "list_api.app.main:create_app",
        factory=True,
        host=settings.host,
        port=settings.port,
        reload=settings.debug,
        access_log=settings.debug,
        log_level=log_settings.level.lower(),
    )


if __name__ == "__main__":
    main()
