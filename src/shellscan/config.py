"""Configuration using pydantic-settings."""

from __future__ import annotations

import logging
from functools import lru_cache
from typing import Annotated

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings with environment variable support."""

    model_config = SettingsConfigDict(
        env_prefix="SHELLSCAN_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    server_port: Annotated[int, Field(description="Server port")] = 8090
    server_host: Annotated[str, Field(description="Server host")] = "0.0.0.0"

    log_level: Annotated[str, Field(description="Logging level")] = "INFO"

    json_indent: Annotated[
        int | None, Field(description="Indentation of JSON tool output")
    ] = 2

    max_command_length: Annotated[
        int, Field(gt=0, description="Longest command line the tools accept")
    ] = 65536


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


def setup_logging(settings: Settings | None = None) -> logging.Logger:
    """Configure and return the application logger."""
    if settings is None:
        settings = get_settings()

    logging.basicConfig(
        level=getattr(logging, settings.log_level.upper()),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    logger = logging.getLogger("shellscan")
    logger.setLevel(getattr(logging, settings.log_level.upper()))

    return logger
