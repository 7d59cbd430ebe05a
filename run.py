"""
Start the PR History API under uvicorn.

Usage:
    python run.py

Every option comes from Settings (environment or .env):
    HOST, PORT - bind address (default 127.0.0.1:8000)
    RELOAD=true - restart on code changes, development only
    DEBUG=true - debug log level
    GITHUB_TOKEN, GITHUB_REPO_OWNER, GITHUB_REPO_NAME - target repository
"""

import logging

import uvicorn

from prhistory.config import Settings, get_settings

logger = logging.getLogger(__name__)


def uvicorn_options(settings: Settings) -> dict:
    """Keyword arguments for uvicorn.run derived from settings."""
    return {
        "host": settings.host,
        "port": settings.port,
        "reload": settings.reload,
        "log_level": "debug" if settings.debug else "info",
        "access_log": True,
    }


def main() -> None:
    settings = get_settings()
    options = uvicorn_options(settings)

    logging.basicConfig(level=options["log_level"].upper())
    if not settings.github_repo_owner or not settings.github_repo_name:
        logger.warning("GITHUB_REPO_OWNER / GITHUB_REPO_NAME not set; PR endpoints will fail")
    logger.info(
        f"Starting {settings.app_name} for "
        f"{settings.github_repo_owner}/{settings.github_repo_name} "
        f"on http://{options['host']}:{options['port']} (docs at /docs)"
    )

    uvicorn.run("prhistory.main:app", **options)


if __name__ == "__main__":
    main()
