"""Application configuration using Pydantic Settings.

Environment Variable Strategy:
- DATABASE_URL and SECRET_KEY are required; constructing Settings without them
  raises a ValidationError, which the entry point treats as fatal
- Everything else has a sensible default and rarely needs an override

The Settings instance is built once by the entry point and handed to
``create_app``. Nothing in the package reads configuration from module state.
"""

from functools import cached_property

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

PLACEHOLDER_SECRETS = frozenset({"changeme", "change-me", "secret", "dev_secret_key_change_in_prod"})


def parse_comma_list(value: str | list[str] | None, default: list[str]) -> list[str]:
    """Parse comma-separated string into list."""
    if value is None:
        return default
    if isinstance(value, list):
        return value
    return [item.strip() for item in value.split(",") if item.strip()]


class Settings(BaseSettings):
    """Application settings loaded from environment variables.

    Required:
        database_url, secret_key

    Optional (with defaults):
        All other fields
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # ================================================================
    # REQUIRED - must be provided by environment
    # ================================================================

    database_url: str = Field(min_length=1)
    secret_key: str = Field(min_length=1, validation_alias=AliasChoices("SECRET_KEY", "JWT_SECRET"))

    # ================================================================
    # OPTIONAL - have sensible defaults, rarely need override
    # ================================================================

    # Security
    jwt_algorithm: str = "HS256"
    access_token_expire_minutes: int = Field(default=60 * 24 * 7, gt=0)
    bcrypt_rounds: int = Field(default=10, ge=4, le=31)

    # App settings
    environment: str = Field(default="development", validation_alias=AliasChoices("ENVIRONMENT", "ENV"))
    debug: bool = False
    host: str = "0.0.0.0"
    port: int = 8080

    # CORS origins - stored as string, parsed via property
    # Env format: CORS_ORIGINS="http://localhost:3000,http://localhost:5173"
    cors_origins_str: str | None = Field(default=None, validation_alias="CORS_ORIGINS")

    # Rate limiting for /login and /signup (opt-in)
    redis_url: str | None = None
    trust_proxy: bool = False
    rate_limit_enabled: bool = False
    login_rate_limit: int = Field(default=5, gt=0)
    login_rate_window_seconds: int = 60
    login_block_seconds: int = 300
    signup_rate_limit: int = Field(default=3, gt=0)
    signup_rate_window_seconds: int = 3600
    signup_block_seconds: int = 3600

    @cached_property
    def cors_origins(self) -> list[str]:
        """Parse CORS origins from env string or allow every origin."""
        return parse_comma_list(self.cors_origins_str, ["*"])

    @property
    def is_production(self) -> bool:
        return self.environment.lower() in ("production", "prod")

    @property
    def uses_placeholder_secret(self) -> bool:
        return self.secret_key.strip().lower() in PLACEHOLDER_SECRETS
