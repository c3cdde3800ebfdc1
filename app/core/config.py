from functools import lru_cache
from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    DB_URL: str
    DB_ECHO: bool = False
    # Confirming a friend request touches four rows; run it serializable.
    DB_ISOLATION_LEVEL: str | None = "SERIALIZABLE"

    LOG_LEVEL: str = "INFO"
    SEARCH_LIMIT: int = 20

    model_config = SettingsConfigDict(
        env_file=Path(__file__).resolve().parents[1].parent / ".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )


@lru_cache
def get_settings() -> Settings:
    return Settings()
