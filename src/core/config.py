"""Application configuration using Pydantic Settings."""

from functools import lru_cache

from pydantic import Field, computed_field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Application
    app_name: str = Field(default="Profile Gallery API")
    app_env: str = Field(default="development")
    debug: bool = Field(default=False)

    # Server
    host: str = Field(default="0.0.0.0")
    port: int = Field(default=8000)

    # Metadata store
    database_url: str = Field(
        default="postgresql+asyncpg://localhost:5432/profiles",
        description="PostgreSQL connection URL with asyncpg driver",
    )

    # GitHub
    github_api_url: str = Field(default="https://api.github.com")
    github_token: str = Field(
        default="",
        description="Optional token; anonymous requests are limited to 60/hour",
    )
    github_timeout_seconds: float = Field(default=10.0, gt=0)

    # Object store
    avatar_bucket: str = Field(default="profile-avatars")
    aws_region: str = Field(default="")
    s3_endpoint_url: str = Field(
        default="",
        description="Custom endpoint for MinIO or other S3-compatible storage",
    )
    avatar_key_prefix: str = Field(default="avatars/")
    avatar_key_extension: str = Field(default=".jpg")
    avatar_content_type: str = Field(default="image/jpeg")
    signed_url_expiry_seconds: int = Field(default=3600, gt=0)
    storage_timeout_seconds: float = Field(default=10.0, gt=0)

    # Gallery
    gallery_sign_concurrency: int = Field(
        default=16,
        gt=0,
        description="Upper bound on in-flight signed URL requests per listing",
    )

    # Rate Limiting
    rate_limit_enabled: bool = Field(
        default=True,
        description="Enable/disable rate limiting (disable for tests)",
    )

    # CORS
    cors_origins: str = Field(
        default="*",
        description="Comma-separated list of allowed origins",
    )

    @computed_field  # type: ignore[prop-decorator]
    @property
    def async_database_url(self) -> str:
        """Ensure the database URL uses the asyncpg driver scheme.

        Render and other providers supply a standard ``postgresql://`` URL.
        SQLAlchemy's async engine requires ``postgresql+asyncpg://``.
        """
        url = self.database_url
        if url.startswith("postgresql://"):
            url = url.replace("postgresql://", "postgresql+asyncpg://", 1)
        return url

    @computed_field  # type: ignore[prop-decorator]
    @property
    def is_production(self) -> bool:
        """Check if running in production environment."""
        return self.app_env == "production"

    @computed_field  # type: ignore[prop-decorator]
    @property
    def cors_origins_list(self) -> list[str]:
        """Parse CORS origins into a list."""
        return [origin.strip() for origin in self.cors_origins.split(",") if origin.strip()]


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


settings = get_settings()
