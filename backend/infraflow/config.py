"""Application configuration via environment variables."""

from pydantic_settings import BaseSettings
from functools import lru_cache


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Knowledge backend: "static" (in-memory tables) or "db" (relational store)
    KNOWLEDGE_SOURCE: str = "static"

    # Database (only used when KNOWLEDGE_SOURCE=db)
    DATABASE_URL: str = "sqlite+aiosqlite:///./data/knowledge.db"
    DATABASE_ECHO: bool = False

    # Prompt rendering
    MIN_CONFIDENCE: float = 0.5

    # Server
    HOST: str = "0.0.0.0"
    PORT: int = 8000
    DEBUG: bool = False
    LOG_LEVEL: str = "info"
    CORS_ORIGINS: list[str] = ["*"]

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8"}


@lru_cache
def get_settings() -> Settings:
    return Settings()
