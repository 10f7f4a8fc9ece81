"""
Application Configuration Module

Type-safe configuration for the Book Library API, built on Pydantic Settings.

Every value can come from an environment variable (case-insensitive) or from
a local .env file, and is validated once at startup. An invalid value stops
the process before it accepts a single request.

PATTERN: Explicit Settings Object
=================================
get_settings() returns a cached Settings instance for the process, but the
rest of the application never reaches for it implicitly. create_app() takes
a Settings object and hands it to the pieces that need it:

- the database engine / session factory
- the token service (signing secret, issuer, audience, lifetime)
- the password hasher (bcrypt cost)
- the Google OAuth client (client id / secret / callback URL)

Tests build their own Settings and pass it to create_app().

Usage:
    from library_api.config import get_settings

    settings = get_settings()
    print(settings.app_name)
"""

from functools import lru_cache
from typing import List

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    SECURITY NOTE:
    ==============
    secret_key has no usable default. The placeholder value is rejected by
    validate_secret_key, so a deployment without SECRET_KEY fails at startup
    instead of signing tokens with a well-known key.
    """

    # -------------------------------------------------------------------------
    # Application Settings
    # -------------------------------------------------------------------------
    app_name: str = Field(
        default="Book Library API",
        description="Application name displayed in docs and logs"
    )
    debug: bool = Field(
        default=False,
        description="Enable debug mode (request logging, detailed errors)"
    )
    api_version: str = Field(
        default="v1",
        description="API version for URL routing"
    )
    host: str = Field(
        default="0.0.0.0",
        description="Host to bind the server to"
    )
    port: int = Field(
        default=3000,
        description="Port to bind the server to"
    )
    environment: str = Field(
        default="development",
        description="Environment: development, staging, production"
    )

    # -------------------------------------------------------------------------
    # Database Settings
    # -------------------------------------------------------------------------
    database_url: str = Field(
        default="sqlite:///./library.db",
        description="SQLAlchemy database URL (SQLite or PostgreSQL)"
    )
    db_pool_size: int = Field(
        default=5,
        description="Number of permanent database connections (server databases only)"
    )
    db_max_overflow: int = Field(
        default=10,
        description="Maximum additional connections during high load"
    )
    create_tables_on_startup: bool = Field(
        default=False,
        description="Create missing tables on startup instead of running Alembic"
    )

    # -------------------------------------------------------------------------
    # Security Settings
    # -------------------------------------------------------------------------
    secret_key: str = Field(
        default="REPLACE_WITH_YOUR_GENERATED_SECRET_KEY",
        description="Secret key used to sign JWT access tokens"
    )
    jwt_issuer: str = Field(
        default="book-library-api",
        description="Value of the 'iss' claim in issued tokens"
    )
    jwt_audience: str = Field(
        default="book-library-users",
        description="Value of the 'aud' claim in issued tokens"
    )
    access_token_expire_minutes: int = Field(
        default=7 * 24 * 60,
        ge=1,
        description="Access token lifetime in minutes (default 7 days)"
    )
    bcrypt_rounds: int = Field(
        default=12,
        ge=4,
        le=31,
        description="bcrypt cost factor used when hashing passwords"
    )
    allowed_origins: str = Field(
        default="http://localhost:3000,http://localhost:8080",
        description="Comma-separated list of allowed CORS origins"
    )

    # -------------------------------------------------------------------------
    # Google OAuth Settings
    # -------------------------------------------------------------------------
    # Both id and secret must be set for the /auth/google endpoints to work.
    # Without them the endpoints answer 501 with a structured message.
    google_client_id: str | None = Field(
        default=None,
        description="Google OAuth client id"
    )
    google_client_secret: str | None = Field(
        default=None,
        description="Google OAuth client secret"
    )
    google_redirect_uri: str = Field(
        default="http://localhost:3000/api/v1/auth/google/callback",
        description="Callback URL registered with Google"
    )

    # -------------------------------------------------------------------------
    # Rate Limiting Settings
    # -------------------------------------------------------------------------
    rate_limit_enabled: bool = Field(
        default=True,
        description="Enable request rate limiting"
    )
    rate_limit_default: str = Field(
        default="100/minute",
        description="Default limit applied to every route"
    )
    rate_limit_auth: str = Field(
        default="10/minute",
        description="Limit for registration and login attempts"
    )

    # -------------------------------------------------------------------------
    # Logging Settings
    # -------------------------------------------------------------------------
    log_level: str = Field(
        default="INFO",
        description="Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)"
    )

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # -------------------------------------------------------------------------
    # Computed Properties
    # -------------------------------------------------------------------------
    @property
    def allowed_origins_list(self) -> List[str]:
        """Parse comma-separated CORS origins into a list."""
        return [origin.strip() for origin in self.allowed_origins.split(",")]

    @property
    def is_production(self) -> bool:
        """Check if running in production environment."""
        return self.environment == "production"

    @property
    def google_configured(self) -> bool:
        """True when both Google OAuth credentials are present."""
        return bool(self.google_client_id and self.google_client_secret)

    # -------------------------------------------------------------------------
    # Validators
    # -------------------------------------------------------------------------
    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate that log_level is a valid Python logging level."""
        valid_levels = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        if v.upper() not in valid_levels:
            raise ValueError(f"log_level must be one of {valid_levels}")
        return v.upper()

    @field_validator("secret_key")
    @classmethod
    def validate_secret_key(cls, v: str) -> str:
        """
        Validate that secret_key is not a placeholder value.

        Raises:
            ValueError: If secret key is a placeholder or too short
        """
        placeholder_indicators = [
            "REPLACE_WITH",
            "change-me",
            "your-secret",
            "generate-with",
        ]

        for indicator in placeholder_indicators:
            if indicator.lower() in v.lower():
                raise ValueError(
                    "SECRET_KEY contains a placeholder value. "
                    "Generate a secure key with: openssl rand -hex 32"
                )

        if len(v) < 32:
            raise ValueError(
                "SECRET_KEY must be at least 32 characters long. "
                "Generate a secure key with: openssl rand -hex 32"
            )

        return v

    @field_validator("environment")
    @classmethod
    def validate_environment(cls, v: str) -> str:
        """Validate environment is a known value."""
        valid_envs = {"development", "staging", "production"}
        if v.lower() not in valid_envs:
            raise ValueError(f"environment must be one of {valid_envs}")
        return v.lower()


@lru_cache
def get_settings() -> Settings:
    """
    Get cached application settings.

    The first call reads the environment and .env file and validates every
    value; later calls return the same instance.

    Returns:
        Cached Settings instance
    """
    return Settings()
