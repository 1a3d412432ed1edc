from pathlib import Path

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

    # Database (DATABASE_URL wins over the assembled Postgres URL)
    DATABASE_URL: str = ""
    POSTGRES_HOST: str = "localhost"
    POSTGRES_PORT: int = 5432
    POSTGRES_USERNAME: str = "postgres"
    POSTGRES_PASSWORD: str = ""
    POSTGRES_DATABASE: str = "game_news"

    # Public base URL used to build image links
    API_BASE_URL: str = "http://localhost:8000"

    # Logging
    LOG_LEVEL: str = "INFO"

    # Admin API Key
    GAMENEWS_API_KEY: str = ""

    # Posts
    DEFAULT_AUTHOR: str = "Editor"
    MAX_IMAGE_BYTES: int = 5 * 1024 * 1024
    MAX_CONTENT_CHARS: int = 100_000

    # Listing sizes
    FEATURED_LIMIT: int = 5
    SEMI_FEATURED_LIMIT: int = 8
    RECENT_LIMIT: int = 20
    CATEGORY_LIMIT: int = 30
    ADMIN_LIST_LIMIT: int = 50

    @property
    def postgres_url(self) -> str:
        return f"postgresql://{self.POSTGRES_USERNAME}:{self.POSTGRES_PASSWORD}@{self.POSTGRES_HOST}:{self.POSTGRES_PORT}/{self.POSTGRES_DATABASE}"

    @property
    def database_url(self) -> str:
        return self.DATABASE_URL or self.postgres_url


# Global settings instance (evaluated at import, but reads env on construction)
settings = Settings()
