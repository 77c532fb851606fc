"""Application configuration loaded from environment variables."""

from functools import lru_cache
from urllib.parse import quote_plus

from pydantic import computed_field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",
    )

    # Environment
    ENV: str = "dev"
    DEBUG: bool = False

    # Database connection components
    POSTGRES_HOST: str = "localhost"
    POSTGRES_PORT: int = 5432
    POSTGRES_USER: str = "devuser"
    POSTGRES_PASSWORD: str = "devpass"
    POSTGRES_DB: str = "tasktracker_dev"

    # Allow DATABASE_URL to be set directly, or construct from components
    DATABASE_URL: str | None = None

    @computed_field  # type: ignore[misc]
    @property
    def database_url(self) -> str:
        """Get database URL, either from DATABASE_URL env var or construct from components."""
        if self.DATABASE_URL:
            return self.DATABASE_URL

        encoded_user = quote_plus(str(self.POSTGRES_USER), safe="")
        encoded_password = quote_plus(str(self.POSTGRES_PASSWORD), safe="")
        encoded_host = quote_plus(str(self.POSTGRES_HOST), safe="")
        encoded_db = quote_plus(str(self.POSTGRES_DB), safe="")
        return (
            f"postgresql+psycopg2://{encoded_user}:{encoded_password}"
            f"@{encoded_host}:{self.POSTGRES_PORT}/{encoded_db}"
        )

    # Sessions
    SESSION_COOKIE_NAME: str = "auth_session"
    SESSION_EXPIRE_DAYS: int = 30
    # Rotate once less than this fraction of the TTL remains
    SESSION_RENEWAL_FRACTION: float = 0.5

    # Cookies
    COOKIE_SECURE: bool = True  # Only honoured when ENV == "prod"
    COOKIE_SAMESITE: str = "lax"
    COOKIE_DOMAIN: str | None = None

    # Signup
    ALLOW_ADMIN_SIGNUP: bool = True

    # Page routing
    MAX_REDIRECT_HOPS: int = 2

    # CORS
    CORS_ORIGINS: str = "http://localhost:3000,http://localhost:5173"

    # Logging
    LOG_LEVEL: str = "INFO"

    @property
    def cookie_secure(self) -> bool:
        """Whether session cookies carry the Secure attribute."""
        return self.COOKIE_SECURE and self.ENV == "prod"


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
