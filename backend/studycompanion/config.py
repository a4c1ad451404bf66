"""Application configuration using Pydantic Settings."""

from functools import lru_cache
from typing import Literal

from pydantic import computed_field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    # Application
    app_name: str = "StudyCompanion"
    environment: Literal["development", "staging", "production"] = "development"
    debug: bool = False
    timezone: str = "UTC"  # Defines "today" for plans, sessions and streaks

    # The single user this deployment serves
    default_username: str = "mitch"
    default_user_display_name: str = "Mitchell"
    default_pace: int = 40
    seed_sample_units: bool = True

    # Record store: "memory" keeps everything in-process, "sql" uses Postgres
    record_store: Literal["memory", "sql"] = "memory"

    # Database (only used when record_store == "sql")
    # If database_url_override is set (e.g., for Neon with SSL), it takes precedence
    database_url_override: str | None = None
    postgres_host: str = "localhost"
    postgres_port: int = 5432
    postgres_user: str = "studycompanion"
    postgres_password: str = ""
    postgres_db: str = "studycompanion"

    @computed_field
    @property
    def database_url(self) -> str:
        """Get async database URL. Uses override if provided, otherwise constructs from parts."""
        if self.database_url_override:
            url = self.database_url_override
            # Replace scheme for async driver
            if url.startswith("postgresql://"):
                url = url.replace("postgresql://", "postgresql+asyncpg://", 1)
            elif url.startswith("postgres://"):
                url = url.replace("postgres://", "postgresql+asyncpg://", 1)
            # Strip query params - asyncpg doesn't accept them via URL
            if "?" in url:
                url = url.split("?")[0]
            return url
        return f"postgresql+asyncpg://{self.postgres_user}:{self.postgres_password}@{self.postgres_host}:{self.postgres_port}/{self.postgres_db}"

    @computed_field
    @property
    def database_url_sync(self) -> str:
        """Get sync database URL (for Alembic). Uses override if provided, otherwise constructs from parts."""
        if self.database_url_override:
            url = self.database_url_override
            if url.startswith("postgres://"):
                url = url.replace("postgres://", "postgresql://", 1)
            elif url.startswith("postgresql+asyncpg://"):
                url = url.replace("postgresql+asyncpg://", "postgresql://", 1)
            return url
        return f"postgresql://{self.postgres_user}:{self.postgres_password}@{self.postgres_host}:{self.postgres_port}/{self.postgres_db}"

    # CORS
    cors_origins: list[str] = ["http://localhost:5173", "http://localhost:3000"]

    # Uploaded documents
    blob_storage: Literal["local", "s3"] = "local"
    upload_dir: str = "uploads"
    max_upload_size_bytes: int = 10 * 1024 * 1024  # 10MiB

    # AWS S3 (only used when blob_storage == "s3")
    aws_access_key_id: str | None = None
    aws_secret_access_key: str | None = None
    aws_s3_bucket: str | None = None
    aws_s3_region: str = "us-east-2"
    aws_s3_endpoint_url: str | None = None  # Set for MinIO/LocalStack (e.g. http://localhost:9000)

    # Anthropic API
    anthropic_api_key: str = ""

    # LLM Configuration
    llm_model: str = "claude-sonnet-4-20250514"
    llm_chat_max_tokens: int = 1000
    llm_summary_max_tokens: int = 800
    llm_structured_max_tokens: int = 1500
    llm_timeout_seconds: float = 60.0
    llm_max_retries: int = 0

    # Chat
    chat_history_window: int = 10
    chat_log_limit: int = 50

    # Summaries and content search
    summary_max_words: int = 500
    relevant_content_excerpt_chars: int = 200

    # Study tracking
    streak_window_days: int = 30
    weekday_break_threshold_minutes: int = 120
    weekend_break_threshold_minutes: int = 90


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


def sanitize_error(
    error: Exception,
    *,
    generic_message: str = "An internal error occurred.",
    settings: Settings | None = None,
) -> str:
    """
    Return a user-safe error message.

    In development, returns the full exception string for debugging.
    In staging/production, returns a generic message to avoid leaking internals.
    """
    settings = settings or get_settings()
    if settings.environment == "development":
        return str(error)
    return generic_message
