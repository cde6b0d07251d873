import os
import sys
from functools import lru_cache

from loguru import logger

FALLBACK_DATABASE_URL = "sqlite:///./social.db"


def normalize_database_url(url: str) -> str:
    # SQLAlchemy wants postgresql:// and no jdbc: prefix
    if url.startswith("jdbc:"):
        url = url[len("jdbc:"):]
    if url.startswith("postgres://"):
        url = "postgresql://" + url[len("postgres://"):]
    return url


class Settings:
    def __init__(self):
        url = os.getenv("DATABASE_URL") or os.getenv("DB_URL")
        self.DATABASE_URL: str = normalize_database_url(url) if url else FALLBACK_DATABASE_URL
        self.USING_FALLBACK_DB: bool = not url
        self.HOST: str = os.getenv("HOST", "0.0.0.0")
        self.PORT: int = int(os.getenv("PORT", "8080"))
        self.ONLINE_WINDOW_MS: int = int(os.getenv("ONLINE_WINDOW_MS", "5000"))
        self.STATIC_DIR: str = os.getenv("STATIC_DIR", ".")
        self.LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO").upper()


@lru_cache()
def get_settings() -> Settings:
    return Settings()


def configure_logging(settings: Settings) -> None:
    logger.remove()
    logger.add(sys.stderr, level=settings.LOG_LEVEL)
