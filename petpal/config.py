"""Application configuration using Pydantic Settings."""

import os
from typing import List
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


SUPPORTED_DATABASE_DRIVERS = ("postgresql+asyncpg://", "sqlite+aiosqlite://")


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Database Configuration
    database_url: str = Field(
        ...,
        description="Database URL with an async driver (asyncpg or aiosqlite)"
    )

    # Authentication Configuration
    secret_key: str = Field(
        ...,
        min_length=32,
        description="Secret key for JWT token generation"
    )
    jwt_lifetime_seconds: int = Field(
        default=3600,
        ge=300,
        le=86400,
        description="JWT token lifetime in seconds (5 min to 24 hours)"
    )
    bcrypt_rounds: int = Field(
        default=12,
        ge=4,
        le=31,
        description="bcrypt work factor used for password hashes"
    )

    # Application Configuration
    app_name: str = Field(
        default="PetPal Adoption API",
        description="Application name"
    )
    debug: bool = Field(
        default=False,
        description="Enable debug mode"
    )
    allowed_origins: str = Field(
        default="http://localhost:3000",
        description="Comma-separated list of allowed CORS origins"
    )
    seed_categories_on_startup: bool = Field(
        default=False,
        description="Insert the default animal categories at startup when none exist"
    )

    # Server Configuration
    host: str = Field(
        default="0.0.0.0",
        description="Server host"
    )
    port: int = Field(
        default=8000,
        ge=1,
        le=65535,
        description="Server port"
    )

    # Image Upload Configuration
    max_image_size_mb: int = Field(
        default=5,
        ge=1,
        le=50,
        description="Maximum image size in megabytes"
    )
    allowed_image_types: str = Field(
        default="image/jpeg,image/png,image/gif,image/webp",
        description="Comma-separated list of allowed image MIME types"
    )

    # Email Configuration
    smtp_host: str = Field(
        default="",
        description="SMTP server for outgoing mail; empty disables sending"
    )
    smtp_port: int = Field(
        default=465,
        ge=1,
        le=65535,
        description="SMTP port (implicit TLS)"
    )
    smtp_user: str = Field(
        default="",
        description="SMTP login; empty skips authentication"
    )
    smtp_password: str = Field(
        default="",
        description="SMTP password"
    )
    email_from: str = Field(
        default="PetPal <no-reply@petpal.example>",
        description="From header of outgoing mail"
    )

    model_config = SettingsConfigDict(
        env_file=".env" if not os.getenv("TESTING") else None,
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"
    )

    @field_validator("database_url")
    @classmethod
    def validate_database_url(cls, v: str) -> str:
        """Validate that database URL uses a supported async driver."""
        if not v.startswith(SUPPORTED_DATABASE_DRIVERS):
            raise ValueError(
                "DATABASE_URL must use an async driver "
                "(postgresql+asyncpg:// or sqlite+aiosqlite://)"
            )
        return v

    @field_validator("secret_key")
    @classmethod
    def validate_secret_key(cls, v: str) -> str:
        """Validate that secret key is sufficiently long."""
        if len(v) < 32:
            raise ValueError(
                "SECRET_KEY must be at least 32 characters long for security"
            )
        return v

    def get_allowed_origins_list(self) -> List[str]:
        """Parse allowed origins from comma-separated string."""
        return [origin.strip() for origin in self.allowed_origins.split(",")]

    def get_allowed_image_types_list(self) -> List[str]:
        """Parse allowed image types from comma-separated string."""
        return [mime_type.strip() for mime_type in self.allowed_image_types.split(",")]

    @property
    def max_image_size_bytes(self) -> int:
        """Get maximum image size in bytes."""
        return self.max_image_size_mb * 1024 * 1024

    @property
    def is_sqlite(self) -> bool:
        """Whether the configured database is SQLite."""
        return self.database_url.startswith("sqlite")
