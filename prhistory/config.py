from pydantic_settings import BaseSettings
from pydantic import ConfigDict
from functools import lru_cache
from typing import Optional


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # App
    app_name: str = "PR History"
    debug: bool = False

    # Server
    host: str = "127.0.0.1"
    port: int = 8000
    reload: bool = False  # Auto-reload on code changes (development only)

    # GitHub
    github_token: str = ""  # Empty = unauthenticated requests
    github_repo_owner: str = ""
    github_repo_name: str = ""
    github_api_url: str = "https://api.github.com"
    github_timeout: int = 15  # Seconds, per request
    # PyGithub request throttles; None = no sleep between requests
    github_seconds_between_requests: Optional[float] = None
    github_seconds_between_writes: Optional[float] = None

    # Fetch Configuration
    fetch_concurrency: int = 10  # Max in-flight PR fetches
    search_page_size: int = 100  # Search API maximum

    model_config = ConfigDict(
        env_file=".env", env_file_encoding="utf-8", extra="ignore"
    )


@lru_cache
def get_settings() -> Settings:
    return Settings()
