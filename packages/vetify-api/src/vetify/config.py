"""Application configuration via environment variables."""

from functools import lru_cache
from typing import ClassVar

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings loaded from environment variables and .env file."""

    database_url: str = "sqlite+aiosqlite:///./vetify.db"
    redis_url: str = "redis://localhost:6379/0"
    api_secret_key: str = "change-me"
    api_host: str = "0.0.0.0"
    api_port: int = 8000
    cors_origins: str = "*"
    environment: str = "development"
    database_echo: bool = False

    # API key issuance
    api_key_default_rate_limit: int = 1000
    api_key_min_rate_limit: int = 100
    api_key_max_rate_limit: int = 100000
    api_access_plans: str = "CORPORATIVO"

    # Rate limiting
    rate_limit_enabled: bool = True
    rate_limit_fail_open: bool = False
    rate_limit_window_seconds: int = 3600
    rate_limit_key_prefix: str = "vetify:api:v1:"
    redis_socket_timeout_seconds: float = 0.5

    # Admin sessions
    admin_session_ttl_seconds: int = 3600

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8"}

    INSECURE_SECRETS: ClassVar[set[str]] = {"change-me", "change-me-in-production", "secret", ""}

    @property
    def api_access_plan_set(self) -> set[str]:
        """Plans whose tenants may create API keys."""
        return {p.strip().upper() for p in self.api_access_plans.split(",") if p.strip()}

    def validate_production(self) -> None:
        """Raise if running in production with an insecure default secret key."""
        if self.environment == "production" and self.api_secret_key in self.INSECURE_SECRETS:
            raise RuntimeError(
                "API_SECRET_KEY must be changed from default in production. "
                'Generate one: python -c "import secrets; print(secrets.token_hex(32))"'
            )


@lru_cache
def get_settings() -> Settings:
    """Return cached settings singleton."""
    return Settings()
