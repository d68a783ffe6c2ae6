#!/usr/bin/env python3
"""Script to run the time clock API using Uvicorn."""

import logging
import os

import uvicorn

PROJECT_ROOT = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))

logger = logging.getLogger(__name__)


def main():
    # Get host and port from environment variables or use defaults
    app_host = os.getenv("APP_HOST", "127.0.0.1")
    app_port = int(os.getenv("APP_PORT", "8000"))
    app_reload = os.getenv("APP_RELOAD", "True").lower() in ("true", "1", "t")
    app_log_level = os.getenv("APP_LOG_LEVEL", "info")

    logger.info("Starting Uvicorn server on %s:%s (reload=%s)", app_host, app_port, app_reload)

    uvicorn.run(
        "main:app",
        host=app_host,
        port=app_port,
        reload=app_reload,
        log_level=app_log_level,
        app_dir=PROJECT_ROOT,
        reload_dirs=[PROJECT_ROOT],
    )


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)
    main()
