"""Main entry point for Tool Scout."""

import os
import uvicorn

from tool_scout.core.config import settings
from tool_scout.core.logging import logger


def main():
    """Run the Tool Scout API server."""
    logger.info("Starting Tool Scout API server")

    # DEV_MODE=1 or UVICORN_RELOAD=1
    dev_mode = os.environ.get("DEV_MODE", "0") == "1" or os.environ.get("UVICORN_RELOAD", "0") == "1"

    if dev_mode:
        # uvicorn requires a single worker for reload
        logger.info("Running in DEV MODE with auto-reload enabled")
        uvicorn.run(
            "tool_scout.api.main:app",
            host="0.0.0.0",
            port=8000,
            reload=True,
            reload_dirs=["src"],
            reload_excludes=[
                "*.db",
                "*.log",
                "__pycache__",
                "storage/*",
                "logs/*",
                "public/*",
            ],
            log_level=settings.LOG_LEVEL.lower(),
        )
    else:
        workers = int(os.environ.get("UVICORN_WORKERS", "2"))
        logger.info(f"Running in PRODUCTION MODE with {workers} workers")
        uvicorn.run(
            "tool_scout.api.main:app",
            host="0.0.0.0",
            port=8000,
            reload=False,
            workers=workers,
            log_level=settings.LOG_LEVEL.lower(),
        )


if __name__ == "__main__":
    main()
