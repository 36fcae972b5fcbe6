from __future__ import annotations

from typing import List, Literal, Optional

from pydantic import BaseModel, ValidationError
from pydantic_settings import BaseSettings, SettingsConfigDict

from edaoogle.exceptions import ConfigError


class AppConfig(BaseModel):
    """Application-specific configuration values."""

    name: str = "EDAoogle"
    env: str = "development"
    debug: bool = False
    log_level: str = "INFO"
    # Transport settings for FastMCP: "stdio" (default), "http", or "sse"
    transport: Literal["stdio", "http", "sse"] = "stdio"
    host: str = "127.0.0.1"
    port: int = 8000


class DatabaseConfig(BaseModel):
    """Index database configuration values."""

    url: str = "sqlite:///index.db"
    echo: bool = False


class CorpusConfig(BaseModel):
    """Where the HTML corpus lives and how its files map to URLs."""

    www_path: Optional[str] = None
    subdir: str = "wiki"
    url_prefix: str = "/wiki/"
    extensions: List[str] = [".html"]
    encoding: str = "utf-8"


class Settings(BaseSettings):
    """Top-level settings loaded from environment variables and .env only."""

    model_config = SettingsConfigDict(
        env_prefix="EDAOOGLE_",
        env_nested_delimiter="__",
        env_file=".env",
        extra="ignore",
    )

    app: AppConfig = AppConfig()
    database: DatabaseConfig = DatabaseConfig()
    corpus: CorpusConfig = CorpusConfig()


def load_settings() -> Settings:
    """Load settings from environment variables and .env only."""
    try:
        return Settings()  # type: ignore[call-arg]
    except ValidationError as exc:
        raise ConfigError(f"Invalid configuration: {exc}") from exc
