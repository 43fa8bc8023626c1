from pathlib import Path
from typing import Tuple

from pydantic_settings import BaseSettings, SettingsConfigDict


def choose_env_file() -> str:
    return ".env.local" if Path(".env.local").exists() else ".env"


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=choose_env_file(),
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",  # tolerate unrelated env vars
    )

    # Content
    POSTS_DIR: str = "content/posts"
    POST_EXTENSIONS: Tuple[str, ...] = (".md", ".markdown")

    # API
    BLOG_API_URL: str = "http://localhost:8000"
    BLOG_API_KEY: str = ""

    # Logging
    LOG_LEVEL: str = "INFO"

    # Checks
    WORDS_PER_MINUTE: int = 200
    DUPLICATE_THRESHOLD: float = 0.85
    REQUIRE_TIMEZONE: bool = True

    @property
    def posts_path(self) -> Path:
        return Path(self.POSTS_DIR)

    @property
    def images_url(self) -> str:
        return f"{self.BLOG_API_URL.rstrip('/')}/images"


# Global settings instance (evaluated at import, but reads env on construction)
settings = Settings()
