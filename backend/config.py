"""Configuration management using Pydantic settings."""

import logging
import os
from pathlib import Path
from typing import Optional

from pydantic_settings import BaseSettings

# Find .env file - check current dir, then parent (for when running from backend/)
_env_file = Path(".env")
if not _env_file.exists():
    _env_file = Path("../.env")


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # GitHub
    GITHUB_TOKEN: Optional[str] = None
    GITHUB_API_URL: str = "https://api.github.com"
    GITHUB_API_VERSION: str = "2022-11-28"
    GITHUB_HTTP_TIMEOUT_SECONDS: float = 30.0

    # Workflow run context, used to scope replace-island markers
    GITHUB_RUN_ID: Optional[str] = None

    # App
    ENVIRONMENT: str = "development"
    LOG_LEVEL: str = "INFO"

    class Config:
        env_file = str(_env_file)
        env_file_encoding = "utf-8"
        extra = "ignore"  # Ignore extra env vars from shared .env files


settings = Settings()

EXPECTED_ENV_VARS: tuple[str, ...] = (
    "GITHUB_TOKEN",
    "GITHUB_API_URL",
    "GITHUB_RUN_ID",
    "ENVIRONMENT",
)


def log_missing_env_vars(logger: logging.Logger) -> None:
    """Log debug warnings for expected environment variables that are unset."""
    for var_name in EXPECTED_ENV_VARS:
        value = os.environ.get(var_name)
        if value is None or value == "":
            logger.debug(
                "Warning: expected environment variable %s is not set.",
                var_name,
            )
