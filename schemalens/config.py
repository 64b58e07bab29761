"""Configuration management for schemalens."""

import os
from pathlib import Path
from pydantic_settings import BaseSettings
from pydantic import Field
from typing import Optional


def _find_env_file() -> Optional[str]:
    """Find .env file in multiple locations.

    Search order:
    1. Current working directory
    2. ~/.schemalens/.env
    """
    if os.path.exists(".env"):
        return ".env"

    user_env = Path.home() / ".schemalens" / ".env"
    if user_env.exists():
        return str(user_env)

    return None


class Settings(BaseSettings):
    """Application settings loaded from SCHEMALENS_* environment variables."""

    default_dialect: str = Field(
        default="sqlite",
        description="Dialect used when none is given on the command line"
    )
    max_workers: int = Field(
        default=4,
        ge=1,
        description="Upper bound on concurrent per-table enhancement queries"
    )
    include_views: bool = Field(
        default=False,
        description="Discover views alongside tables"
    )
    postgres_schema: str = Field(
        default="public",
        description="PostgreSQL namespace to introspect"
    )
    log_level: str = Field(
        default="WARNING",
        description="Root log level for the CLI"
    )

    class Config:
        env_prefix = "SCHEMALENS_"
        env_file = _find_env_file()
        env_file_encoding = "utf-8"
        extra = "ignore"


# Global settings instance
settings = Settings()
