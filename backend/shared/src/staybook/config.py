"""Environment-driven configuration.

All settings are read from environment variables once per process and
cached. Tests call ``get_settings.cache_clear()`` after patching the
environment.

Usage:
    from staybook.config import get_settings

    settings = get_settings()
    engine = create_engine(settings.database_url)
"""

import os
from functools import lru_cache

from pydantic import BaseModel, ConfigDict, Field


class Settings(BaseModel):
    """Process configuration consumed by the services and the API."""

    model_config = ConfigDict(frozen=True)

    environment: str = Field(default="dev", description="Deployment environment name")
    database_url: str = Field(
        default="sqlite:///./staybook.db",
        description="SQLAlchemy database URL",
    )
    stripe_secret_key: str | None = Field(
        default=None,
        description="Stripe secret key. Falls back to SSM when unset.",
    )
    stripe_webhook_secret: str | None = Field(
        default=None,
        description="Stripe webhook signing secret. Falls back to SSM when unset.",
    )
    frontend_url: str = Field(
        default="http://localhost:3000",
        description="Base URL for checkout success/cancel redirects",
    )
    payment_timeout_seconds: float = Field(
        default=10.0,
        gt=0,
        description="HTTP timeout for a single payment gateway request",
    )
    stripe_max_network_retries: int = Field(
        default=2,
        ge=0,
        description="Retries of transient gateway failures before giving up",
    )
    booking_max_attempts: int = Field(
        default=3,
        ge=1,
        description="Attempts of the booking transaction on serialization failure",
    )
    log_level: str = Field(default="INFO")

    @classmethod
    def from_env(cls) -> "Settings":
        """Build settings from the process environment."""
        env = os.environ
        values: dict[str, object] = {
            "environment": env.get("ENVIRONMENT", "dev"),
            "database_url": env.get("DATABASE_URL", "sqlite:///./staybook.db"),
            "stripe_secret_key": env.get("STRIPE_SECRET_KEY") or None,
            "stripe_webhook_secret": env.get("STRIPE_WEBHOOK_SECRET") or None,
            "frontend_url": env.get("FRONTEND_URL", "http://localhost:3000").rstrip("/"),
            "log_level": env.get("LOG_LEVEL", "INFO").upper(),
        }
        if "PAYMENT_TIMEOUT_SECONDS" in env:
            values["payment_timeout_seconds"] = float(env["PAYMENT_TIMEOUT_SECONDS"])
        if "STRIPE_MAX_NETWORK_RETRIES" in env:
            values["stripe_max_network_retries"] = int(env["STRIPE_MAX_NETWORK_RETRIES"])
        if "BOOKING_MAX_ATTEMPTS" in env:
            values["booking_max_attempts"] = int(env["BOOKING_MAX_ATTEMPTS"])
        return cls(**values)


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Get the cached process settings."""
    return Settings.from_env()
